"""Unit tests for query aggregation and threshold filtering."""

from __future__ import annotations

from datetime import date

import pytest

from seo_engine.services.analysis.aggregator import aggregate_queries
from seo_engine.services.analysis.types import RawQueryRecord


def _record(
    query: str,
    *,
    impressions: int,
    position: float,
    clicks: int = 0,
    country: str = "NL",
    day: int = 1,
) -> RawQueryRecord:
    return RawQueryRecord(
        query=query,
        country=country,
        date=date(2024, 1, day),
        clicks=clicks,
        impressions=impressions,
        ctr=0.0,
        position=position,
    )


def test_aggregate_merges_dates_and_countries_for_same_query() -> None:
    rows = aggregate_queries(
        [
            _record("vegan soap", impressions=100, clicks=4, position=6.0, day=1),
            _record("vegan soap", impressions=50, clicks=1, position=10.0, day=2),
            _record("vegan soap", impressions=25, clicks=0, position=11.0, country="BE", day=2),
        ],
        min_impressions=1,
        max_position=100,
    )

    assert len(rows) == 1
    assert rows[0].query == "vegan soap"
    assert rows[0].total_impressions == 175
    assert rows[0].total_clicks == 5
    assert rows[0].avg_position == pytest.approx(9.0)


def test_aggregate_thresholds_are_inclusive() -> None:
    rows = aggregate_queries(
        [
            _record("exactly enough", impressions=100, position=20.0),
            _record("too few", impressions=99, position=5.0),
            _record("too deep", impressions=500, position=20.5),
        ],
        min_impressions=100,
        max_position=20,
    )

    assert [row.query for row in rows] == ["exactly enough"]


def test_aggregate_excludes_zero_impression_queries() -> None:
    rows = aggregate_queries(
        [
            _record("never shown", impressions=0, position=4.0),
            _record("shown", impressions=1, position=4.0),
        ],
        min_impressions=1,
        max_position=20,
    )

    assert [row.query for row in rows] == ["shown"]


def test_aggregate_orders_by_impressions_then_query() -> None:
    rows = aggregate_queries(
        [
            _record("b query", impressions=200, position=5.0),
            _record("a query", impressions=200, position=5.0),
            _record("c query", impressions=900, position=5.0),
        ],
        min_impressions=1,
        max_position=20,
    )

    assert [row.query for row in rows] == ["c query", "a query", "b query"]


def test_aggregate_empty_input_returns_empty_list() -> None:
    assert aggregate_queries([], min_impressions=1, max_position=20) == []
