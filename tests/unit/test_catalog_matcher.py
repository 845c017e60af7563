"""Unit tests for catalog matching and tag normalization."""

from __future__ import annotations

from typing import Any

import pytest

from seo_engine.services.analysis.catalog_matcher import find_related_product, normalize_tags
from seo_engine.services.analysis.types import CatalogItem


def test_first_matching_item_wins_even_if_later_item_matches_better() -> None:
    handle_match = CatalogItem(
        id="gid://shopify/Product/1",
        handle="natural-bamboo-brush",
        title="Bamboo Toothbrush",
    )
    exact_title = CatalogItem(
        id="gid://shopify/Product/2",
        handle="deodorant-stick",
        title="Natural Deodorant",
    )

    match = find_related_product(["natural deodorant", "natural deodorant nl"], [handle_match, exact_title])

    assert match is handle_match


def test_term_contained_in_cluster_text_matches() -> None:
    item = CatalogItem(id="p1", handle="stick-001", title="Stick", tags=("Deodorant",))

    assert find_related_product(["vegan deodorant"], [item]) is item


def test_title_matches_case_insensitively() -> None:
    item = CatalogItem(id="p1", handle="x-100", title="Shampoo Bar")

    assert find_related_product(["best SHAMPOO BAR for curls"], [item]) is item


def test_no_match_returns_none() -> None:
    catalog = [
        CatalogItem(id="p1", handle="shampoo-bar", title="Shampoo Bar", tags=("hair",)),
        CatalogItem(id="p2", handle="toothpaste-tabs", title="Toothpaste Tabs"),
    ]

    assert find_related_product(["natural deodorant"], catalog) is None


def test_empty_cluster_or_catalog_returns_none() -> None:
    item = CatalogItem(id="p1", handle="shampoo-bar", title="Shampoo Bar")

    assert find_related_product([], [item]) is None
    assert find_related_product(["shampoo bar"], []) is None


def test_empty_terms_are_ignored() -> None:
    item = CatalogItem(id="p1", handle="", title="", tags=("",))

    assert find_related_product(["anything at all"], [item]) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (["vegan", "zero waste"], ("vegan", "zero waste")),
        (("a", "b"), ("a", "b")),
        ('["eco", "plastic free"]', ("eco", "plastic free")),
        ("not json", ()),
        ('{"eco": true}', ()),
        ({"eco": True}, ()),
        ([1, 2], ()),
        (None, ()),
        (42, ()),
    ],
)
def test_normalize_tags_tolerates_malformed_data(raw: Any, expected: tuple[str, ...]) -> None:
    assert normalize_tags(raw) == expected
