"""Collapse raw daily query rows into one summary row per query."""

from __future__ import annotations

from collections.abc import Iterable

from seo_engine.services.analysis.types import AggregatedQuery, RawQueryRecord


def aggregate_queries(
    records: Iterable[RawQueryRecord],
    *,
    min_impressions: int,
    max_position: float,
) -> list[AggregatedQuery]:
    """Aggregate rows by query text and keep those inside both thresholds.

    Countries are merged. ``avg_position`` is the plain mean of the daily
    positions. Output is ordered by impressions descending, then query text.
    """
    impressions: dict[str, int] = {}
    clicks: dict[str, int] = {}
    positions: dict[str, list[float]] = {}

    for record in records:
        impressions[record.query] = impressions.get(record.query, 0) + record.impressions
        clicks[record.query] = clicks.get(record.query, 0) + record.clicks
        positions.setdefault(record.query, []).append(record.position)

    aggregated: list[AggregatedQuery] = []
    for query, total_impressions in impressions.items():
        query_positions = positions[query]
        avg_position = sum(query_positions) / len(query_positions)
        if total_impressions < min_impressions or avg_position > max_position:
            continue
        aggregated.append(
            AggregatedQuery(
                query=query,
                total_impressions=total_impressions,
                total_clicks=clicks[query],
                avg_position=avg_position,
            )
        )

    aggregated.sort(key=lambda row: (-row.total_impressions, row.query))
    return aggregated
