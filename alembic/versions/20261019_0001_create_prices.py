"""create prices table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from db.config import get_price_table_settings

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # DATE vs TIMESTAMP is a deployment-time choice shared with the ORM model.
    if get_price_table_settings().stores_timestamps:
        create_date_type: sa.types.TypeEngine = sa.DateTime(timezone=False)
    else:
        create_date_type = sa.Date()

    op.create_table(
        "prices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("create_date", create_date_type, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_prices_category", "prices", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_prices_category", table_name="prices")
    op.drop_table("prices")
