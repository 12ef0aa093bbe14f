"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
MySQL (aiomysql) in production, SQLite (aiosqlite) for local runs and tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def _get_async_url(url: str) -> str:
    """동기 드라이버 URL을 비동기 드라이버 URL로 변환합니다.

    Convert a plain database URL to its async driver variant.
    """
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+aiomysql://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


database_url: str = _get_async_url(settings.DATABASE_URL)
is_sqlite: bool = database_url.startswith("sqlite")

engine_kwargs: dict[str, Any] = {"echo": settings.DEBUG}

# SQLite는 커넥션 풀 크기 옵션을 지원하지 않음 (SQLite has no pool sizing)
if not is_sqlite:
    # pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
    # pool_recycle: MySQL wait_timeout 이전에 연결 재생성 (Recycle before MySQL drops idle connections)
    engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10, pool_recycle=3600)

# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    All models inherit from this class to register with the metadata.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.
    The session is automatically closed after the request completes,
    ensuring no connection leaks.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
