"""create_catalog_tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:00:00.000000

사용자(users), 영양 성분(nutritional_fact), 상품(product) 테이블 생성.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), server_default="ROLE_USER", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "nutritional_fact",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("calories_per_100g", sa.Integer(), nullable=False),
        sa.Column("kilojoules_per_100g", sa.Integer(), nullable=False),
        sa.Column("fat", sa.Numeric(10, 2), nullable=True),
        sa.Column("carbohydrates", sa.Numeric(10, 2), nullable=True),
        sa.Column("sugars", sa.Numeric(10, 2), nullable=True),
        sa.Column("polyols", sa.Numeric(10, 2), nullable=True),
        sa.Column("fibers", sa.Numeric(10, 2), nullable=True),
        sa.Column("protein", sa.Numeric(10, 2), nullable=True),
        sa.Column("sodium", sa.Numeric(10, 2), nullable=True),
        sa.Column("vitamin_c", sa.Numeric(10, 2), nullable=True),
        sa.Column("calcium", sa.Numeric(10, 2), nullable=True),
    )

    op.create_table(
        "product",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("manufacturer", sa.String(255), nullable=False),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        sa.Column("photo_url", sa.String(512), nullable=True),
        sa.Column("gtin", sa.String(14), nullable=True),
        sa.Column(
            "nutritional_fact_id",
            sa.BigInteger(),
            sa.ForeignKey("nutritional_fact.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("gtin", name="uq_product_gtin"),
        sa.UniqueConstraint("nutritional_fact_id", name="uq_product_nutritional_fact_id"),
    )
    op.create_index("ix_product_name", "product", ["name"])
    op.create_index("ix_product_manufacturer", "product", ["manufacturer"])


def downgrade() -> None:
    op.drop_index("ix_product_manufacturer", table_name="product")
    op.drop_index("ix_product_name", table_name="product")
    op.drop_table("product")
    op.drop_table("nutritional_fact")
    op.drop_table("users")
