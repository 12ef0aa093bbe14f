"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB, session, and httpx client fixtures.
Each test gets a fresh schema on a single shared aiosqlite connection, and
product images are written to a per-test temporary directory.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.user import ROLE_ADMIN, ROLE_USER
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PRODUCTS_URL = "/api/v1/products"
AUTH_URL = "/api/v1/auth"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session


@pytest.fixture(autouse=True)
def uploads_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """이미지 저장 경로를 임시 디렉터리로, 저장 모드를 로컬로 고정합니다."""
    directory = tmp_path / "images"
    monkeypatch.setattr(settings, "LOCAL_UPLOADS_DIR", str(directory))
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
    monkeypatch.setattr(settings, "AWS_S3_BUCKET", "")
    return directory


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def admin_user(db: AsyncSession):
    """관리자 사용자를 생성합니다."""
    from app.models.user import User
    user = User(
        username="admin",
        password_hash=hash_password("admin123!"),
        role=ROLE_ADMIN,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def regular_user(db: AsyncSession):
    """일반 사용자를 생성합니다."""
    from app.models.user import User
    user = User(
        username="viewer",
        password_hash=hash_password("viewer123!"),
        role=ROLE_USER,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def make_token(user) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "role": user.role,
    })


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def user_token(regular_user) -> str:
    return make_token(regular_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def product_payload(**overrides: Any) -> dict[str, Any]:
    """상품 생성 요청 본문을 만듭니다 (camelCase)."""
    payload: dict[str, Any] = {
        "name": "Oat Milk",
        "manufacturer": "Oatly",
        "weight": 1000,
        "gtin": "7394376616037",
        "nutritionalFact": {
            "calories": 59,
            "kilojoules": 247,
            "fat": 3.0,
            "carbohydrates": 6.6,
            "sugars": 3.4,
            "protein": 1.1,
        },
    }
    payload.update(overrides)
    return payload
