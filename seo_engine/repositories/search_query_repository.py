"""Repository for raw Search Console rows."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.models.search_query import SearchQuery
from seo_engine.repositories._dialect import upsert_insert
from seo_engine.services.analysis.types import AggregatedQuery, RawQueryRecord

logger = logging.getLogger(__name__)

# Keeps multi-row INSERTs under SQLite's bound-parameter limit
STORE_BATCH_SIZE = 500


class SearchQueryRepository:
    """Stores fetched rows and reads back analysis windows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def store_records(self, records: Sequence[RawQueryRecord]) -> int:
        """Upsert rows by (query, country, date); re-fetched days overwrite metrics."""
        if not records:
            return 0

        for start in range(0, len(records), STORE_BATCH_SIZE):
            batch = records[start:start + STORE_BATCH_SIZE]
            stmt = upsert_insert(self.session, SearchQuery).values(
                [
                    {
                        "query": record.query,
                        "country": record.country,
                        "date": record.date,
                        "clicks": record.clicks,
                        "impressions": record.impressions,
                        "ctr": record.ctr,
                        "position": record.position,
                    }
                    for record in batch
                ]
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["query", "country", "date"],
                set_={
                    "clicks": stmt.excluded.clicks,
                    "impressions": stmt.excluded.impressions,
                    "ctr": stmt.excluded.ctr,
                    "position": stmt.excluded.position,
                },
            )
            await self.session.execute(stmt)

        logger.info("Stored search query rows", extra={"rows": len(records)})
        return len(records)

    async def list_window(
        self,
        days: int,
        *,
        country: str | None = None,
        today: date | None = None,
    ) -> list[RawQueryRecord]:
        """Return rows dated within the trailing ``days`` window."""
        start_date = (today or date.today()) - timedelta(days=days)
        query = select(SearchQuery).where(SearchQuery.date >= start_date)
        if country and country.lower() != "all":
            query = query.where(SearchQuery.country == country)
        query = query.order_by(SearchQuery.date, SearchQuery.id)

        result = await self.session.execute(query)
        return [
            RawQueryRecord(
                query=row.query,
                country=row.country,
                date=row.date,
                clicks=row.clicks,
                impressions=row.impressions,
                ctr=row.ctr,
                position=row.position,
            )
            for row in result.scalars().all()
        ]

    async def top_queries(self, *, country: str | None = None, limit: int = 10) -> list[AggregatedQuery]:
        """Summarize the highest-impression queries across all stored dates."""
        total_impressions = func.sum(SearchQuery.impressions)
        query = select(
            SearchQuery.query,
            total_impressions.label("total_impressions"),
            func.sum(SearchQuery.clicks).label("total_clicks"),
            func.avg(SearchQuery.position).label("avg_position"),
        )
        if country and country.lower() != "all":
            query = query.where(SearchQuery.country == country)
        query = (
            query.group_by(SearchQuery.query)
            .order_by(total_impressions.desc(), SearchQuery.query)
            .limit(limit)
        )

        result = await self.session.execute(query)
        return [
            AggregatedQuery(
                query=row.query,
                total_impressions=int(row.total_impressions or 0),
                total_clicks=int(row.total_clicks or 0),
                avg_position=float(row.avg_position or 0.0),
            )
            for row in result.all()
        ]
