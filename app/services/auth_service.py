"""인증 서비스 — 회원가입, 로그인, 현재 사용자 조회 비즈니스 로직.

Auth Service — Business logic for registration, login, and the current user.
Issues a single bearer access token per successful register/login.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import ROLE_USER, User
from app.repositories.user_repository import user_repository
from app.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserMeResponse
from app.utils.exceptions import DuplicateError, UnauthorizedError
from app.utils.jwt import create_access_token
from app.utils.password import hash_password, verify_password

logger = logging.getLogger("catalog.auth")


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _issue_token(self, user: User) -> AuthResponse:
        """사용자에 대한 액세스 토큰을 발급합니다.

        Build the JWT payload for a user and wrap the token in a response.
        """
        token: str = create_access_token(
            {"sub": str(user.id), "username": user.username, "role": user.role}
        )
        return AuthResponse(token=token, username=user.username, role=user.role)

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> AuthResponse:
        """회원가입을 처리합니다. 새 계정은 항상 ROLE_USER입니다.

        Process self-registration. New accounts always get ROLE_USER;
        admins are created by the seed script.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            AuthResponse: 토큰 응답 (Token response)

        Raises:
            DuplicateError: 같은 사용자명이 이미 존재할 때
                            (When the username already exists)
        """
        existing: User | None = await user_repository.get_by_username(db, data.username)
        if existing is not None:
            raise DuplicateError("Username already exists")

        try:
            user: User = await user_repository.create(
                db,
                {
                    "username": data.username,
                    "password_hash": hash_password(data.password),
                    "role": ROLE_USER,
                },
            )
        except IntegrityError as exc:
            # 동시 가입 — Unique violation from a concurrent registration
            await db.rollback()
            raise DuplicateError("Username already exists") from exc

        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return self._issue_token(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> AuthResponse:
        """로그인을 처리합니다.

        Process login and issue a token.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("Failed login for username %s", data.username)
            raise UnauthorizedError("Invalid username or password")

        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        return self._issue_token(user)

    def get_me(self, user: User) -> UserMeResponse:
        """현재 로그인한 사용자 프로필을 반환합니다.

        Return the profile of the currently authenticated user.
        """
        return UserMeResponse(
            id=user.id,
            username=user.username,
            role=user.role,
            is_active=user.is_active,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
