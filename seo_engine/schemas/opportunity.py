"""Opportunity schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

OpportunityStatusValue = Literal["identified", "in_progress", "completed", "skipped"]


class OpportunityResponse(BaseModel):
    """Schema for opportunity response."""

    id: int
    keyword: str
    impressions_30d: int
    clicks_30d: int
    current_position: float
    related_product_id: str | None
    opportunity_score: float
    status: str

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OpportunityListResponse(BaseModel):
    """Schema for opportunity list response."""

    opportunities: list[OpportunityResponse]


class OpportunityStatusUpdate(BaseModel):
    """Schema for moving an opportunity through the workflow."""

    status: OpportunityStatusValue


class AnalyzeRequest(BaseModel):
    """Thresholds for an on-demand analysis run."""

    min_impressions: int = Field(default=1, ge=0)
    max_position: float = Field(default=50, ge=1, le=100)
    window_days: int = Field(default=30, ge=1, le=480)
    country: str | None = None


class AnalyzeResponse(BaseModel):
    """Counts reported by an analysis run."""

    success: bool = True
    clusters_found: int
    opportunities_written: int
