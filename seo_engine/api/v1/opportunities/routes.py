"""Opportunity API endpoints."""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query, status

from seo_engine.api.v1.opportunities.constants import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    OPPORTUNITY_NOT_FOUND_DETAIL,
)
from seo_engine.core.exceptions import OpportunityNotFoundError
from seo_engine.dependencies import DbSession
from seo_engine.models.opportunity import Opportunity
from seo_engine.repositories.opportunity_repository import OpportunityRepository
from seo_engine.schemas.opportunity import (
    AnalyzeRequest,
    AnalyzeResponse,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunityStatusUpdate,
    OpportunityStatusValue,
)
from seo_engine.services.opportunity_analysis import AnalysisOptions, OpportunityAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=OpportunityListResponse,
    summary="List opportunities",
    description="Return opportunities, optionally filtered by workflow status.",
)
async def list_opportunities(
    session: DbSession,
    status_filter: OpportunityStatusValue | None = Query(None, alias="status"),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
    sort: Literal["inserted", "score"] = Query("inserted"),
) -> OpportunityListResponse:
    """List opportunities."""
    repository = OpportunityRepository(session)
    opportunities = await repository.list_opportunities(
        status=status_filter,
        limit=limit,
        order_by=sort,
    )
    return OpportunityListResponse(
        opportunities=[OpportunityResponse.model_validate(item) for item in opportunities],
    )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    summary="Analyze opportunities",
    description=(
        "Aggregate stored Search Console rows for the window, cluster them, match the catalog "
        "and upsert one scored opportunity per cluster. Existing workflow statuses are kept."
    ),
)
async def analyze_opportunities(
    request: AnalyzeRequest,
    session: DbSession,
) -> AnalyzeResponse:
    """Run an analysis pass over the stored window."""
    result = await OpportunityAnalysisService(session).run(
        AnalysisOptions(
            min_impressions=request.min_impressions,
            max_position=request.max_position,
            window_days=request.window_days,
            country=request.country,
        )
    )
    return AnalyzeResponse(
        clusters_found=result.clusters_found,
        opportunities_written=result.opportunities_written,
    )


@router.get(
    "/{opportunity_id}",
    response_model=OpportunityResponse,
    summary="Get opportunity",
)
async def get_opportunity(
    opportunity_id: int,
    session: DbSession,
) -> Opportunity:
    """Get a single opportunity."""
    opportunity = await OpportunityRepository(session).get(opportunity_id)
    if opportunity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=OPPORTUNITY_NOT_FOUND_DETAIL,
        )
    return opportunity


@router.patch(
    "/{opportunity_id}",
    response_model=OpportunityResponse,
    summary="Update opportunity status",
)
async def update_opportunity_status(
    opportunity_id: int,
    payload: OpportunityStatusUpdate,
    session: DbSession,
) -> Opportunity:
    """Move an opportunity to a new workflow status."""
    try:
        opportunity = await OpportunityRepository(session).set_status(
            opportunity_id,
            payload.status,
        )
    except OpportunityNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=OPPORTUNITY_NOT_FOUND_DETAIL,
        ) from e

    await session.refresh(opportunity)
    return opportunity
