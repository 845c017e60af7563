"""Pull external data into the local store ahead of analysis."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.integrations.search_console import SearchConsoleClient
from seo_engine.integrations.shopify import CatalogProduct, ShopifyCatalogClient
from seo_engine.repositories.product_repository import ProductRepository
from seo_engine.repositories.search_query_repository import SearchQueryRepository
from seo_engine.services.analysis.types import AggregatedQuery

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchResult:
    """Outcome of a Search Console fetch."""

    rows_stored: int
    top_queries: list[AggregatedQuery] = field(default_factory=list)


async def fetch_search_data(
    session: AsyncSession,
    client: SearchConsoleClient,
    *,
    days: int,
    country: str,
    today: date | None = None,
    top_limit: int = 10,
) -> FetchResult:
    """Fetch the trailing window from Search Console and store it.

    Source errors propagate before anything is written.
    """
    records = await client.fetch_query_performance(days=days, country=country, today=today)
    if not records:
        logger.warning("No Search Console data for the requested window", extra={"country": country})
        return FetchResult(rows_stored=0)

    repository = SearchQueryRepository(session)
    stored = await repository.store_records(records)
    await session.commit()

    top = await repository.top_queries(country=country, limit=top_limit)
    return FetchResult(rows_stored=stored, top_queries=top)


async def sync_catalog(
    session: AsyncSession,
    client: ShopifyCatalogClient,
) -> list[CatalogProduct]:
    """Upsert the store's current products into the local catalog snapshot."""
    products = await client.fetch_products()
    if not products:
        logger.warning("No products found in the store")
        return []

    await ProductRepository(session).sync(products)
    await session.commit()
    return products
