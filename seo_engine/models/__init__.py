"""SQLAlchemy database models."""

from seo_engine.models.base import Base
from seo_engine.models.opportunity import Opportunity
from seo_engine.models.product import Product
from seo_engine.models.search_query import SearchQuery

__all__ = [
    "Base",
    "Opportunity",
    "Product",
    "SearchQuery",
]
