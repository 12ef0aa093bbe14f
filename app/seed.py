"""초기 데이터 시드 스크립트 — 관리자 계정 및 샘플 상품 생성.

Seed script — Creates the admin account and a few sample products.
Run this script once to bootstrap the database.

Usage:
    python -m app.seed

Creates:
    - 1개 관리자 계정: ADMIN_USERNAME / ADMIN_PASSWORD (ROLE_ADMIN)
    - 샘플 상품 (Sample products) — 상품 테이블이 비어있을 때만
"""

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from app.config import settings
from app.database import async_session, engine, Base
from app.models import NutritionalFact, Product, User
from app.models.user import ROLE_ADMIN
from app.utils.password import hash_password

# 샘플 상품 — (name, manufacturer, weight g, gtin, kcal, kJ, fat, carbs, sugars, protein)
SAMPLE_PRODUCTS: list[tuple[str, str, str, str, int, int, str, str, str, str]] = [
    ("Oat Milk Barista", "Oatly", "1000", "7394376616037", 59, 247, "3.0", "6.6", "3.4", "1.1"),
    ("Rye Crispbread", "Finn Crisp", "200", "6411401015099", 333, 1400, "2.6", "57.0", "1.5", "10.0"),
    ("Dark Chocolate 70%", "Fazer", "100", "6416453012345", 560, 2330, "42.0", "33.0", "28.0", "8.1"),
    ("Natural Yoghurt", "Valio", "500", "6408430000128", 64, 268, "3.5", "4.4", "4.4", "3.7"),
    ("Blueberry Soup", "Marli", "1000", "6413600012343", 62, 262, "0.1", "14.8", "12.9", "0.2"),
]


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts the admin user and
    sample products.

    Idempotent: 이미 존재하는 데이터는 건너뜁니다 (Skips what already exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(User).where(User.username == settings.ADMIN_USERNAME))
        if result.scalar_one_or_none() is None:
            db.add(
                User(
                    username=settings.ADMIN_USERNAME,
                    password_hash=hash_password(settings.ADMIN_PASSWORD),
                    role=ROLE_ADMIN,
                    is_active=True,
                )
            )
            print(f"Seeded admin user: {settings.ADMIN_USERNAME}")
        else:
            print("Admin user already exists. Skipping.")

        product_count: int = (await db.execute(select(func.count()).select_from(Product))).scalar() or 0
        if product_count == 0:
            for name, manufacturer, weight, gtin, kcal, kj, fat, carbs, sugars, protein in SAMPLE_PRODUCTS:
                db.add(
                    Product(
                        name=name,
                        manufacturer=manufacturer,
                        weight=Decimal(weight),
                        gtin=gtin,
                        nutritional_fact=NutritionalFact(
                            calories_per_100g=kcal,
                            kilojoules_per_100g=kj,
                            fat=Decimal(fat),
                            carbohydrates=Decimal(carbs),
                            sugars=Decimal(sugars),
                            protein=Decimal(protein),
                        ),
                    )
                )
            print(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")
        else:
            print("Products already present. Skipping sample products.")

        await db.commit()


if __name__ == "__main__":
    asyncio.run(seed())
