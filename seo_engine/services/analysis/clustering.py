"""Greedy lexical keyword clustering.

Each cluster is seeded by the first unassigned query (in input order) and
absorbs every later unassigned query whose word set has a Jaccard similarity
of at least ``SIMILARITY_THRESHOLD`` with the *seed's* word set. Members that
join later are never used as comparison anchors, so the result depends on
input order. Callers pass queries sorted by impressions so the seed is the
strongest query of its neighbourhood.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from seo_engine.services.analysis.types import AggregatedQuery, KeywordCluster

SIMILARITY_THRESHOLD = 0.5


def tokenize(text: str) -> set[str]:
    """Lowercase, split on whitespace and deduplicate."""
    return set(text.lower().split())


def jaccard(a: set[str], b: set[str]) -> float:
    """Compute Jaccard similarity for two token sets."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def cluster_keywords(
    queries: Sequence[str],
    *,
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[KeywordCluster]:
    """Partition queries into clusters of lexically similar queries."""
    word_sets = {query: tokenize(query) for query in queries}
    assigned: set[str] = set()
    clusters: list[KeywordCluster] = []

    for query in queries:
        if query in assigned:
            continue

        cluster = KeywordCluster(keywords=[query])
        assigned.add(query)
        seed_words = word_sets[query]

        for other in queries:
            if other in assigned:
                continue
            if jaccard(seed_words, word_sets[other]) >= threshold:
                cluster.keywords.append(other)
                assigned.add(other)

        clusters.append(cluster)

    return clusters


def select_primary(members: Iterable[AggregatedQuery]) -> AggregatedQuery:
    """Return the member with the most impressions; ties go to the lexically first query."""
    return min(members, key=lambda row: (-row.total_impressions, row.query))
