"""Domain types for opportunity analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True, slots=True)
class RawQueryRecord:
    """One day of Search Console performance for a query in a country."""

    query: str
    country: str
    date: date
    clicks: int
    impressions: int
    ctr: float
    position: float


@dataclass(frozen=True, slots=True)
class AggregatedQuery:
    """Per-query totals across the analysis window, countries merged."""

    query: str
    total_impressions: int
    total_clicks: int
    avg_position: float


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """Sellable item available for matching."""

    id: str
    handle: str
    title: str
    tags: tuple[str, ...] = ()


@dataclass(slots=True)
class KeywordCluster:
    """Lexically similar queries; the first member is the seed."""

    keywords: list[str] = field(default_factory=list)

    @property
    def seed(self) -> str:
        return self.keywords[0]

    def __len__(self) -> int:
        return len(self.keywords)


@dataclass(slots=True)
class OpportunityCandidate:
    """Scored cluster ready to be written to the opportunity store."""

    keyword: str
    impressions_30d: int
    clicks_30d: int
    current_position: float
    related_product_id: str | None
    opportunity_score: float
    cluster_keywords: list[str] = field(default_factory=list)

    def to_store_values(self) -> dict[str, Any]:
        """Columns written on every analysis run."""
        return {
            "keyword": self.keyword,
            "impressions_30d": self.impressions_30d,
            "clicks_30d": self.clicks_30d,
            "current_position": self.current_position,
            "related_product_id": self.related_product_id,
            "opportunity_score": self.opportunity_score,
        }
