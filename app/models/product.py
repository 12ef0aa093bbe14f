"""상품 및 영양 성분 SQLAlchemy ORM 모델 정의.

Product and NutritionalFact SQLAlchemy ORM model definitions.
Each product owns exactly one nutritional fact row (one-to-one).

Tables:
    - product: 상품 카탈로그 항목 (Catalog products with barcode and photo)
    - nutritional_fact: 100g당 영양 성분 (Per-100g macro/micronutrient values)
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# MySQL에서는 BIGINT, SQLite에서는 INTEGER (SQLite autoincrement는 INTEGER PK만 지원)
# BIGINT on MySQL, INTEGER on SQLite where only INTEGER PKs auto-increment
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class NutritionalFact(Base):
    """영양 성분 모델 — 100g 기준 영양 정보.

    Nutritional fact model — Nutrient values per 100 grams of product.
    Energy values are required, every other nutrient is optional.

    Attributes:
        id: 고유 식별자 (Auto-increment primary key)
        calories_per_100g: 열량 kcal (Energy in kcal, required)
        kilojoules_per_100g: 열량 kJ (Energy in kJ, required)
        fat .. calcium: 영양소 함량 g/mg (Nutrient amounts, nullable)
    """

    __tablename__ = "nutritional_fact"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    calories_per_100g: Mapped[int] = mapped_column(Integer, nullable=False)
    kilojoules_per_100g: Mapped[int] = mapped_column(Integer, nullable=False)
    # 영양소 (g) — Macronutrients in grams
    fat: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    carbohydrates: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    sugars: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    polyols: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    fibers: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    protein: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    sodium: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    # 미량 영양소 (mg) — Micronutrients in milligrams
    vitamin_c: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    calcium: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)


class Product(Base):
    """상품 모델 — 카탈로그에 등록된 식품.

    Product model — A food item registered in the catalog.
    Deleting a product also deletes its nutritional fact (delete-orphan).

    Attributes:
        id: 고유 식별자 (Auto-increment primary key)
        name: 상품명 (Product name)
        manufacturer: 제조사 (Manufacturer name)
        weight: 중량 g (Net weight in grams)
        photo_url: 상품 이미지 URL (Public URL of the stored photo, nullable)
        gtin: 바코드 (GTIN barcode, unique when present)
        nutritional_fact_id: 영양 성분 FK (One-to-one nutritional fact)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    manufacturer: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    weight: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    photo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    gtin: Mapped[str | None] = mapped_column(String(14), unique=True, nullable=True)
    nutritional_fact_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("nutritional_fact.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships (항상 함께 조회, always loaded together)
    nutritional_fact = relationship(
        "NutritionalFact",
        lazy="selectin",
        cascade="all, delete-orphan",
        single_parent=True,
    )
