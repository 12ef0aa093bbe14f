"""사용자 레포지토리 — 사용자 조회 및 생성 쿼리.

User Repository — Lookup and creation queries for user accounts.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> User | None:
        """사용자명으로 사용자를 조회합니다.

        Retrieve a user by username.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 조회할 사용자명 (Username to look up)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(User.username == username)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
