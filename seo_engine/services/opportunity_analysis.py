"""Content opportunity analysis.

Pipeline per run:
1. Aggregate raw query rows in the window and apply thresholds
2. Cluster aggregated queries by seed word overlap
3. Per cluster: match a catalog item and score the cluster
4. Sort by score and upsert into the opportunity store
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.repositories.opportunity_repository import OpportunityRepository
from seo_engine.repositories.product_repository import ProductRepository
from seo_engine.repositories.search_query_repository import SearchQueryRepository
from seo_engine.services.analysis.aggregator import aggregate_queries
from seo_engine.services.analysis.catalog_matcher import find_related_product
from seo_engine.services.analysis.clustering import cluster_keywords, select_primary
from seo_engine.services.analysis.scoring import calculate_opportunity_score
from seo_engine.services.analysis.types import (
    AggregatedQuery,
    CatalogItem,
    OpportunityCandidate,
    RawQueryRecord,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AnalysisOptions:
    """Per-run thresholds. Never read from global settings inside the pipeline."""

    min_impressions: int
    max_position: float
    window_days: int = 30
    country: str | None = None


@dataclass(slots=True)
class AnalysisReport:
    """Output of the pure pipeline."""

    queries_considered: int
    clusters_found: int
    opportunities: list[OpportunityCandidate] = field(default_factory=list)


@dataclass(slots=True)
class AnalysisResult:
    """Outcome of a persisted analysis run."""

    clusters_found: int
    opportunities_written: int
    opportunities: list[OpportunityCandidate] = field(default_factory=list)


def build_candidate(
    members: Sequence[AggregatedQuery],
    catalog: Sequence[CatalogItem],
) -> OpportunityCandidate:
    """Match and score one cluster."""
    primary = select_primary(members)
    member_queries = [member.query for member in members]

    total_impressions = sum(member.total_impressions for member in members)
    total_clicks = sum(member.total_clicks for member in members)
    avg_position = sum(member.avg_position for member in members) / len(members)

    related_product = find_related_product(member_queries, catalog)
    score = calculate_opportunity_score(
        total_impressions,
        avg_position,
        related_product is not None,
    )

    return OpportunityCandidate(
        keyword=primary.query,
        impressions_30d=total_impressions,
        clicks_30d=total_clicks,
        current_position=avg_position,
        related_product_id=related_product.id if related_product else None,
        opportunity_score=score,
        cluster_keywords=member_queries,
    )


def analyze_opportunities(
    records: Iterable[RawQueryRecord],
    catalog: Sequence[CatalogItem],
    *,
    min_impressions: int,
    max_position: float,
) -> AnalysisReport:
    """Run aggregation, clustering, matching and scoring over one window."""
    aggregated = aggregate_queries(
        records,
        min_impressions=min_impressions,
        max_position=max_position,
    )
    if not aggregated:
        return AnalysisReport(queries_considered=0, clusters_found=0)

    by_query = {row.query: row for row in aggregated}
    clusters = cluster_keywords([row.query for row in aggregated])

    candidates = [
        build_candidate([by_query[keyword] for keyword in cluster.keywords], catalog)
        for cluster in clusters
    ]
    # Stable sort keeps cluster order for equal scores
    candidates.sort(key=lambda candidate: candidate.opportunity_score, reverse=True)

    return AnalysisReport(
        queries_considered=len(aggregated),
        clusters_found=len(clusters),
        opportunities=candidates,
    )


class OpportunityAnalysisService:
    """Loads a window from the store, analyzes it and persists the results."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.search_queries = SearchQueryRepository(session)
        self.products = ProductRepository(session)
        self.opportunities = OpportunityRepository(session)

    async def run(self, options: AnalysisOptions) -> AnalysisResult:
        """Analyze the current window and upsert one opportunity per cluster."""
        logger.info(
            "Starting opportunity analysis",
            extra={
                "min_impressions": options.min_impressions,
                "max_position": options.max_position,
                "window_days": options.window_days,
                "country": options.country,
            },
        )

        records = await self.search_queries.list_window(
            options.window_days,
            country=options.country,
        )
        catalog = await self.products.list_catalog()

        report = analyze_opportunities(
            records,
            catalog,
            min_impressions=options.min_impressions,
            max_position=options.max_position,
        )
        if not report.opportunities:
            logger.info(
                "No opportunities found matching criteria",
                extra={"raw_rows": len(records), "catalog_items": len(catalog)},
            )
            return AnalysisResult(clusters_found=report.clusters_found, opportunities_written=0)

        written = await self.opportunities.upsert_many(report.opportunities)
        await self.session.commit()

        logger.info(
            "Opportunity analysis completed",
            extra={
                "raw_rows": len(records),
                "queries_considered": report.queries_considered,
                "clusters_found": report.clusters_found,
                "opportunities_written": written,
            },
        )
        return AnalysisResult(
            clusters_found=report.clusters_found,
            opportunities_written=written,
            opportunities=report.opportunities,
        )
