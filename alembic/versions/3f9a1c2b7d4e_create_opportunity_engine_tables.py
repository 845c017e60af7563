"""create opportunity engine tables

Revision ID: 3f9a1c2b7d4e
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d4e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "gsc_queries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("query", sa.String(length=500), nullable=False),
        sa.Column("country", sa.String(length=10), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("clicks", sa.Integer(), nullable=False),
        sa.Column("impressions", sa.Integer(), nullable=False),
        sa.Column("ctr", sa.Float(), nullable=False),
        sa.Column("position", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("query", "country", "date", name="uq_gsc_queries_query_country_date"),
    )
    op.create_index("ix_gsc_queries_country", "gsc_queries", ["country"], unique=False)
    op.create_index("ix_gsc_queries_date", "gsc_queries", ["date"], unique=False)

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("handle", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("handle"),
    )

    op.create_table(
        "opportunities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("keyword", sa.String(length=500), nullable=False),
        sa.Column("impressions_30d", sa.Integer(), nullable=False),
        sa.Column("clicks_30d", sa.Integer(), nullable=False),
        sa.Column("current_position", sa.Float(), nullable=False),
        sa.Column("related_product_id", sa.String(length=255), nullable=True),
        sa.Column("opportunity_score", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("keyword"),
    )
    op.create_index("ix_opportunities_status", "opportunities", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_opportunities_status", table_name="opportunities")
    op.drop_table("opportunities")
    op.drop_table("products")
    op.drop_index("ix_gsc_queries_date", table_name="gsc_queries")
    op.drop_index("ix_gsc_queries_country", table_name="gsc_queries")
    op.drop_table("gsc_queries")
