"""Content opportunity model."""

from typing import Literal

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from seo_engine.models.base import Base, TimestampMixin

OpportunityStatus = Literal["identified", "in_progress", "completed", "skipped"]
OPPORTUNITY_STATUSES: tuple[str, ...] = ("identified", "in_progress", "completed", "skipped")
DEFAULT_OPPORTUNITY_STATUS: OpportunityStatus = "identified"


class Opportunity(Base, TimestampMixin):
    """Scored keyword cluster tracked through the content workflow."""

    __tablename__ = "opportunities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    keyword: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)

    impressions_30d: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    clicks_30d: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_position: Mapped[float] = mapped_column(Float, nullable=False)
    # Weak reference to products.id, no foreign key
    related_product_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    opportunity_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_OPPORTUNITY_STATUS,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Opportunity {self.keyword} ({self.status})>"
