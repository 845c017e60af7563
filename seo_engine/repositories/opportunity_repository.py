"""Repository for Opportunity read/write operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.core.exceptions import OpportunityNotFoundError, ValidationError
from seo_engine.models.opportunity import (
    DEFAULT_OPPORTUNITY_STATUS,
    OPPORTUNITY_STATUSES,
    Opportunity,
)
from seo_engine.repositories._dialect import upsert_insert
from seo_engine.services.analysis.types import OpportunityCandidate

logger = logging.getLogger(__name__)

OpportunityOrder = Literal["inserted", "score"]

# Overwritten on every analysis run. Status is owned by the editorial workflow.
ANALYSIS_FIELDS = (
    "impressions_30d",
    "clicks_30d",
    "current_position",
    "related_product_id",
    "opportunity_score",
)


class OpportunityRepository:
    """Persists scored opportunities keyed by keyword."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def upsert(self, candidate: OpportunityCandidate) -> None:
        """Insert a new opportunity or refresh the metrics of an existing one."""
        stmt = upsert_insert(self.session, Opportunity).values(
            **candidate.to_store_values(),
            status=DEFAULT_OPPORTUNITY_STATUS,
        )
        update_values = {name: stmt.excluded[name] for name in ANALYSIS_FIELDS}
        update_values["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=["keyword"], set_=update_values)
        await self.session.execute(stmt)

    async def upsert_many(self, candidates: Iterable[OpportunityCandidate]) -> int:
        """Upsert each candidate in its own savepoint.

        A failing row is logged and skipped; the remaining rows are still
        written. Returns the number of rows written. Committing is left to the
        caller.
        """
        written = 0
        failed = 0
        for candidate in candidates:
            try:
                async with self.session.begin_nested():
                    await self.upsert(candidate)
            except SQLAlchemyError as exc:
                failed += 1
                logger.warning(
                    "Skipping opportunity that failed to persist",
                    extra={"keyword": candidate.keyword, "error": str(exc)},
                )
                continue
            written += 1

        logger.info(
            "Opportunities upserted",
            extra={"written": written, "failed": failed},
        )
        return written

    async def list_opportunities(
        self,
        *,
        status: str | None = None,
        limit: int = 50,
        order_by: OpportunityOrder = "inserted",
    ) -> list[Opportunity]:
        """List opportunities, optionally filtered by status."""
        query = select(Opportunity)
        if status:
            query = query.where(Opportunity.status == status)

        if order_by == "score":
            query = query.order_by(Opportunity.opportunity_score.desc(), Opportunity.id.asc())
        else:
            query = query.order_by(Opportunity.id.asc())

        result = await self.session.execute(
            query.limit(limit).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get(self, opportunity_id: int) -> Opportunity | None:
        """Fetch an opportunity by primary key."""
        # Rows are written by core upserts, so refresh any identity already loaded
        return await self.session.get(Opportunity, opportunity_id, populate_existing=True)

    async def get_by_keyword(self, keyword: str) -> Opportunity | None:
        """Fetch an opportunity by its natural key."""
        result = await self.session.execute(
            select(Opportunity)
            .where(Opportunity.keyword == keyword)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def set_status(self, opportunity_id: int, status: str) -> Opportunity:
        """Move an opportunity through the editorial workflow."""
        if status not in OPPORTUNITY_STATUSES:
            raise ValidationError(
                f"Invalid opportunity status: {status}",
                {"allowed": list(OPPORTUNITY_STATUSES)},
            )

        opportunity = await self.get(opportunity_id)
        if opportunity is None:
            raise OpportunityNotFoundError(opportunity_id)

        previous = opportunity.status
        opportunity.status = status
        await self.session.flush()
        logger.info(
            "Opportunity status changed",
            extra={"opportunity_id": opportunity_id, "from": previous, "to": status},
        )
        return opportunity
