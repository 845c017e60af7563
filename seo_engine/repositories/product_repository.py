"""Repository for the synced product catalog."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seo_engine.integrations.shopify import CatalogProduct
from seo_engine.models.product import Product
from seo_engine.repositories._dialect import upsert_insert
from seo_engine.services.analysis.catalog_matcher import normalize_tags
from seo_engine.services.analysis.types import CatalogItem

logger = logging.getLogger(__name__)


class ProductRepository:
    """Stores catalog snapshots and serves them to the matcher."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def sync(self, products: Sequence[CatalogProduct]) -> int:
        """Upsert a full catalog snapshot by product id."""
        if not products:
            return 0

        synced_at = datetime.now(timezone.utc)
        for product in products:
            stmt = upsert_insert(self.session, Product).values(
                id=product.id,
                handle=product.handle,
                title=product.title,
                description=product.description,
                tags=list(product.tags),
                synced_at=synced_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["id"],
                set_={
                    "handle": stmt.excluded.handle,
                    "title": stmt.excluded.title,
                    "description": stmt.excluded.description,
                    "tags": stmt.excluded.tags,
                    "synced_at": stmt.excluded.synced_at,
                },
            )
            await self.session.execute(stmt)

        logger.info("Synced catalog products", extra={"products": len(products)})
        return len(products)

    async def list_catalog(self) -> list[CatalogItem]:
        """Return the catalog ordered by handle, with tolerant tag decoding."""
        result = await self.session.execute(select(Product).order_by(Product.handle))
        items: list[CatalogItem] = []
        for product in result.scalars().all():
            tags = normalize_tags(product.tags)
            if product.tags and not tags:
                logger.warning(
                    "Ignoring malformed product tags",
                    extra={"product_id": product.id},
                )
            items.append(
                CatalogItem(
                    id=product.id,
                    handle=product.handle or "",
                    title=product.title or "",
                    tags=tags,
                )
            )
        return items
