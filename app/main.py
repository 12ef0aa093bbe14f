"""FastAPI 애플리케이션 엔트리포인트 — 로깅, 미들웨어, 예외 핸들러, 라우터 등록.

FastAPI application entry point — Logging, middleware, exception handlers
and router registration.

Run with:
    uvicorn app.main:app --reload
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.error_handlers import register_exception_handlers
from app.services.storage_service import storage_service

# 로깅 설정 — Root logging configured once from LOG_LEVEL
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("catalog.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 시작/종료 훅 — Startup/shutdown hook."""
    if storage_service.is_local:
        storage_service.uploads_dir.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Starting %s (storage: %s)",
        settings.APP_NAME,
        "local" if storage_service.is_local else "s3",
    )
    yield
    logger.info("Shutting down %s", settings.APP_NAME)


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 요청 로깅 미들웨어 — Request logging (stdlib logging + Axiom)
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.v1 import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")

# 로컬 저장 모드의 상품 이미지 제공 — Serve product images in local storage mode
if storage_service.is_local:
    app.mount(
        settings.UPLOADS_URL_PREFIX,
        StaticFiles(directory=storage_service.uploads_dir, check_dir=False),
        name="uploads",
    )
