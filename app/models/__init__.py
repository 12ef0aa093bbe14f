"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 계정 (User accounts)
    product: 상품 및 영양 성분 (Products and their nutritional facts)
"""

from app.models.user import User
from app.models.product import NutritionalFact, Product

__all__ = [
    "User",
    "NutritionalFact", "Product",
]
