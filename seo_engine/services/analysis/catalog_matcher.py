"""Associate a keyword cluster with at most one catalog item."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from seo_engine.services.analysis.types import CatalogItem

logger = logging.getLogger(__name__)


def normalize_tags(raw: Any) -> tuple[str, ...]:
    """Coerce stored tag data into a tuple of strings.

    Accepts a list/tuple/set of strings or a JSON-encoded list of strings.
    Anything else is treated as an empty tag set.
    """
    value = raw
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return ()
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    if not all(isinstance(tag, str) for tag in value):
        return ()
    return tuple(value)


def _product_terms(item: CatalogItem) -> list[str]:
    terms = [item.title.lower(), item.handle.lower()]
    terms.extend(tag.lower() for tag in item.tags)
    # An empty term is a substring of every cluster; skip it rather than match everything
    return [term for term in terms if term]


def find_related_product(
    cluster_keywords: Sequence[str],
    catalog: Iterable[CatalogItem],
) -> CatalogItem | None:
    """Return the first catalog item sharing a term with the cluster.

    A term matches when it occurs inside the space-joined cluster text, or
    when it contains the first word of that text. Items are scanned in the
    order given and the first hit wins.
    """
    keyword_text = " ".join(cluster_keywords).lower()
    words = keyword_text.split()
    first_token = words[0] if words else ""

    for item in catalog:
        for term in _product_terms(item):
            if term in keyword_text or (first_token and first_token in term):
                logger.debug(
                    "Matched cluster to catalog item",
                    extra={"keyword_text": keyword_text, "product_id": item.id, "term": term},
                )
                return item

    return None
