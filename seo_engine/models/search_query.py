"""Raw Search Console performance rows."""

from datetime import date as date_type

from sqlalchemy import Date, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from seo_engine.models.base import Base


class SearchQuery(Base):
    """One day of performance for a query in a country."""

    __tablename__ = "gsc_queries"
    __table_args__ = (
        UniqueConstraint("query", "country", "date", name="uq_gsc_queries_query_country_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    query: Mapped[str] = mapped_column(String(500), nullable=False)
    country: Mapped[str] = mapped_column(String(10), default="NL", nullable=False, index=True)
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)

    clicks: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    impressions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ctr: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    position: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<SearchQuery {self.query} {self.country} {self.date}>"
