"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Access control is a flat two-role model: ROLE_USER may read the catalog,
ROLE_ADMIN may also create, update and delete products.

Tables:
    - users: 사용자 계정 (User accounts with a single role)
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# 역할 이름 — Role names carried in the JWT and checked by deps.require_admin
ROLE_USER: str = "ROLE_USER"
ROLE_ADMIN: str = "ROLE_ADMIN"


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Username is globally unique.

    Attributes:
        id: 고유 식별자 (Auto-increment primary key)
        username: 로그인 아이디 (Login username, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 이름 (ROLE_USER or ROLE_ADMIN)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
