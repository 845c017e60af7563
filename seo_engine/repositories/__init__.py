"""Repositories wrapping an AsyncSession for each table."""

from seo_engine.repositories.opportunity_repository import OpportunityRepository
from seo_engine.repositories.product_repository import ProductRepository
from seo_engine.repositories.search_query_repository import SearchQueryRepository

__all__ = ["OpportunityRepository", "ProductRepository", "SearchQueryRepository"]
