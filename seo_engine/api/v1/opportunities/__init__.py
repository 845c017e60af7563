"""Opportunity API endpoints."""

from seo_engine.api.v1.opportunities.routes import router

__all__ = ["router"]
