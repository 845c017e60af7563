"""Unit tests for greedy seed-based keyword clustering."""

from __future__ import annotations

import pytest

from seo_engine.services.analysis.clustering import (
    cluster_keywords,
    jaccard,
    select_primary,
    tokenize,
)
from seo_engine.services.analysis.types import AggregatedQuery


def test_tokenize_lowercases_and_deduplicates() -> None:
    assert tokenize("Red  red Shoes\tSALE") == {"red", "shoes", "sale"}


def test_jaccard_is_symmetric_and_bounded() -> None:
    pairs = [
        ({"natural", "deodorant"}, {"natural", "deodorant", "nl"}),
        ({"a"}, {"b"}),
        ({"x", "y"}, {"x", "y"}),
        (set(), {"z"}),
    ]
    for a, b in pairs:
        assert jaccard(a, b) == jaccard(b, a)
        assert 0.0 <= jaccard(a, b) <= 1.0

    assert jaccard({"x", "y"}, {"x", "y"}) == 1.0
    assert jaccard({"a"}, {"b"}) == 0.0


def test_jaccard_of_two_empty_sets_is_zero() -> None:
    assert jaccard(set(), set()) == 0.0


def test_similar_queries_join_the_seed_cluster() -> None:
    clusters = cluster_keywords(["natural deodorant", "natural deodorant nl"])

    assert len(clusters) == 1
    assert clusters[0].seed == "natural deodorant"
    assert clusters[0].keywords == ["natural deodorant", "natural deodorant nl"]


def test_members_are_compared_against_seed_only() -> None:
    # "shoes sale cheap" is similar to "red shoes sale" (2/4) but not to the seed (1/4)
    clusters = cluster_keywords(["red shoes", "red shoes sale", "shoes sale cheap"])

    assert [cluster.keywords for cluster in clusters] == [
        ["red shoes", "red shoes sale"],
        ["shoes sale cheap"],
    ]


def test_clusters_partition_the_input() -> None:
    queries = [
        "bamboo toothbrush",
        "natural deodorant",
        "bamboo toothbrush kids",
        "deodorant natural",
        "shampoo bar",
        "solid shampoo bar",
    ]

    clusters = cluster_keywords(queries)
    flattened = [keyword for cluster in clusters for keyword in cluster.keywords]

    assert sorted(flattened) == sorted(queries)
    assert len(flattened) == len(set(flattened))
    assert all(len(cluster) >= 1 for cluster in clusters)


def test_cluster_keywords_empty_input() -> None:
    assert cluster_keywords([]) == []


@pytest.mark.parametrize(
    ("members", "expected"),
    [
        (
            [
                AggregatedQuery("b", total_impressions=10, total_clicks=0, avg_position=5.0),
                AggregatedQuery("a", total_impressions=30, total_clicks=0, avg_position=5.0),
            ],
            "a",
        ),
        (
            [
                AggregatedQuery("zeta", total_impressions=30, total_clicks=0, avg_position=5.0),
                AggregatedQuery("alpha", total_impressions=30, total_clicks=0, avg_position=9.0),
            ],
            "alpha",
        ),
    ],
)
def test_select_primary_prefers_impressions_then_lexical_order(
    members: list[AggregatedQuery],
    expected: str,
) -> None:
    assert select_primary(members).query == expected
