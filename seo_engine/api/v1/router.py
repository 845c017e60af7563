"""API v1 router aggregator."""

from fastapi import APIRouter

from seo_engine.api.v1 import opportunities

api_router = APIRouter()

api_router.include_router(opportunities.router, prefix="/opportunities", tags=["Opportunities"])
