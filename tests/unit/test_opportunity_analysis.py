"""Unit tests for the opportunity analysis pipeline."""

from __future__ import annotations

import math
from datetime import date

import pytest

from seo_engine.services.analysis.types import AggregatedQuery, CatalogItem, RawQueryRecord
from seo_engine.services.opportunity_analysis import analyze_opportunities, build_candidate


def _record(query: str, *, impressions: int, clicks: int, position: float, day: int) -> RawQueryRecord:
    return RawQueryRecord(
        query=query,
        country="NL",
        date=date(2024, 1, day),
        clicks=clicks,
        impressions=impressions,
        ctr=clicks / impressions if impressions else 0.0,
        position=position,
    )


def test_related_queries_produce_a_single_opportunity() -> None:
    records = [
        _record("natural deodorant", impressions=500, clicks=10, position=8.0, day=1),
        _record("natural deodorant nl", impressions=300, clicks=5, position=9.0, day=2),
    ]

    report = analyze_opportunities(records, [], min_impressions=100, max_position=20)

    assert report.queries_considered == 2
    assert report.clusters_found == 1
    assert len(report.opportunities) == 1

    opportunity = report.opportunities[0]
    assert opportunity.keyword == "natural deodorant"
    assert opportunity.impressions_30d == 800
    assert opportunity.clicks_30d == 15
    assert opportunity.current_position == pytest.approx(8.5)
    assert opportunity.related_product_id is None
    assert opportunity.cluster_keywords == ["natural deodorant", "natural deodorant nl"]
    assert opportunity.opportunity_score == pytest.approx(10 * math.log10(801) + 30 + 10)


def test_thresholds_filter_queries_before_clustering() -> None:
    records = [
        _record("natural deodorant", impressions=500, clicks=10, position=8.0, day=1),
        _record("unseen query", impressions=0, clicks=0, position=3.0, day=1),
        _record("deep query", impressions=900, clicks=1, position=45.0, day=1),
    ]

    report = analyze_opportunities(records, [], min_impressions=1, max_position=20)

    assert report.queries_considered == 1
    assert [item.keyword for item in report.opportunities] == ["natural deodorant"]


def test_opportunities_are_sorted_by_score() -> None:
    catalog = [CatalogItem(id="p-soap", handle="vegan-soap", title="Vegan Soap")]
    records = [
        # More impressions but no catalog match and poor position
        _record("bamboo toothbrush", impressions=2000, clicks=3, position=19.0, day=1),
        _record("vegan soap bar", impressions=400, clicks=20, position=7.0, day=1),
    ]

    report = analyze_opportunities(records, catalog, min_impressions=1, max_position=20)

    assert [item.keyword for item in report.opportunities] == ["vegan soap bar", "bamboo toothbrush"]
    assert report.opportunities[0].related_product_id == "p-soap"
    scores = [item.opportunity_score for item in report.opportunities]
    assert scores == sorted(scores, reverse=True)


def test_empty_window_yields_no_opportunities() -> None:
    report = analyze_opportunities([], [], min_impressions=1, max_position=20)

    assert report.clusters_found == 0
    assert report.opportunities == []


def test_build_candidate_sums_members_and_averages_positions() -> None:
    members = [
        AggregatedQuery("shampoo bar", total_impressions=300, total_clicks=9, avg_position=4.0),
        AggregatedQuery("solid shampoo bar", total_impressions=700, total_clicks=1, avg_position=12.0),
    ]
    catalog = [CatalogItem(id="p1", handle="shampoo-bar", title="Shampoo Bar")]

    candidate = build_candidate(members, catalog)

    assert candidate.keyword == "solid shampoo bar"
    assert candidate.impressions_30d == 1000
    assert candidate.clicks_30d == 10
    assert candidate.current_position == pytest.approx(8.0)
    assert candidate.related_product_id == "p1"
    assert candidate.opportunity_score == pytest.approx(10 * math.log10(1001) + 30 + 15 + 10)
