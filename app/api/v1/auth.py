"""인증 라우터 — 회원가입, 로그인, 프로필 조회.

Auth Router — Registration, login, and current-user endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserMeResponse
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=AuthResponse)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """회원가입 — ROLE_USER 계정 생성 후 토큰 발급.

    Register a ROLE_USER account and return a bearer token.
    """
    result: AuthResponse = await auth_service.register(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """로그인 — 토큰 발급.

    Authenticate with username/password and return a bearer token.
    """
    return await auth_service.login(db, data)


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 프로필 조회."""
    return auth_service.get_me(current_user)
