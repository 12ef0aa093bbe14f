"""v1 API 라우터 패키지 — 모든 /api/v1 엔드포인트 통합.

v1 API Router package — Aggregates every /api/v1 endpoint into a single
router for inclusion in the FastAPI application.

Included routers:
    - auth: 회원가입/로그인/프로필 (Registration, login, current user)
    - products: 상품 CRUD, 페이지 조회, 검색 (Product CRUD, paging, search)
"""

from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.products import router as products_router

api_router: APIRouter = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(products_router, prefix="/products", tags=["Products"])
