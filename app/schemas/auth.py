"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance, and current user info.
"""

from pydantic import Field

from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        username: 사용자 로그인 아이디 (User login identifier)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    """회원가입 요청 스키마.

    Self-registration request schema. New accounts always get ROLE_USER.

    Attributes:
        username: 사용자 아이디 (Desired login username, 3-50 chars)
        password: 비밀번호 (Plain text, bcrypt-hashed on the server, 6-100 chars)
    """

    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.@-]+$")
    password: str = Field(min_length=6, max_length=100)


class AuthResponse(CamelModel):
    """JWT 토큰 발급 응답 스키마.

    Token issuance response returned by register and login.
    The UI stores the token and gates edit controls on the role.

    Attributes:
        token: JWT 액세스 토큰 (Bearer access token)
        token_type: 토큰 유형 (Always "Bearer")
        username: 로그인 아이디 (Login username)
        role: 역할 이름 (ROLE_USER or ROLE_ADMIN)
    """

    token: str
    token_type: str = "Bearer"
    username: str
    role: str


class UserMeResponse(CamelModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Current user info response schema for the /me endpoint.
    """

    id: int
    username: str
    role: str
    is_active: bool
