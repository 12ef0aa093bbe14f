"""인증 API 테스트 — 회원가입, 로그인, /me 엔드포인트.

Auth API tests — Registration, login, and the /me endpoint, plus bearer
token handling on protected routes.
"""

from datetime import timedelta

from httpx import AsyncClient

from app.utils.jwt import create_access_token, decode_token
from tests.conftest import AUTH_URL, PRODUCTS_URL, auth_header


# ===== Register =====

class TestRegister:
    """회원가입 테스트."""

    async def test_register_success(self, client: AsyncClient):
        """회원가입 성공 시 ROLE_USER 토큰 발급."""
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "newbie",
            "password": "secret1",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["token"]
        assert data["tokenType"] == "Bearer"
        assert data["username"] == "newbie"
        assert data["role"] == "ROLE_USER"
        assert decode_token(data["token"])["role"] == "ROLE_USER"

    async def test_register_then_login(self, client: AsyncClient):
        """가입한 계정으로 로그인 가능."""
        await client.post(f"{AUTH_URL}/register", json={
            "username": "newbie",
            "password": "secret1",
        })
        res = await client.post(f"{AUTH_URL}/login", json={
            "username": "newbie",
            "password": "secret1",
        })
        assert res.status_code == 200
        assert res.json()["username"] == "newbie"

    async def test_register_duplicate_username(self, client: AsyncClient, regular_user):
        """중복 사용자명은 409."""
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "viewer",
            "password": "another1",
        })
        assert res.status_code == 409
        assert res.json()["message"] == "Username already exists"

    async def test_register_concurrent_duplicate(
        self, client: AsyncClient, regular_user, monkeypatch
    ):
        """사전 조회를 통과한 중복 가입도 409 (유니크 제약)."""
        from app.repositories.user_repository import user_repository

        async def _not_found(db, username):
            return None

        monkeypatch.setattr(user_repository, "get_by_username", _not_found)
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "viewer",
            "password": "another1",
        })
        assert res.status_code == 409
        assert res.json()["message"] == "Username already exists"

    async def test_register_short_password(self, client: AsyncClient):
        """짧은 비밀번호는 400과 필드 상세."""
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "newbie",
            "password": "123",
        })
        assert res.status_code == 400
        data = res.json()
        assert data["status"] == 400
        assert any(d.startswith("password:") for d in data["details"])

    async def test_register_invalid_username(self, client: AsyncClient):
        """허용되지 않는 문자가 포함된 사용자명은 400."""
        res = await client.post(f"{AUTH_URL}/register", json={
            "username": "bad name!",
            "password": "secret1",
        })
        assert res.status_code == 400

    async def test_register_missing_fields(self, client: AsyncClient):
        """필수 필드 누락 시 공통 문구."""
        res = await client.post(f"{AUTH_URL}/register", json={})
        assert res.status_code == 400
        details = res.json()["details"]
        assert "username: Field can't be empty" in details
        assert "password: Field can't be empty" in details


# ===== Login =====

class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, admin_user):
        """관리자 로그인 성공."""
        res = await client.post(f"{AUTH_URL}/login", json={
            "username": "admin",
            "password": "admin123!",
        })
        assert res.status_code == 200
        data = res.json()
        assert data["role"] == "ROLE_ADMIN"
        payload = decode_token(data["token"])
        assert payload["sub"] == str(admin_user.id)
        assert payload["type"] == "access"

    async def test_login_wrong_password(self, client: AsyncClient, admin_user):
        """잘못된 비밀번호로 로그인 실패."""
        res = await client.post(f"{AUTH_URL}/login", json={
            "username": "admin",
            "password": "wrong_password",
        })
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid username or password"

    async def test_login_nonexistent_user(self, client: AsyncClient):
        """존재하지 않는 사용자로 로그인 실패."""
        res = await client.post(f"{AUTH_URL}/login", json={
            "username": "ghost",
            "password": "whatever",
        })
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, db, admin_user):
        """비활성 계정 로그인 실패."""
        admin_user.is_active = False
        await db.flush()

        res = await client.post(f"{AUTH_URL}/login", json={
            "username": "admin",
            "password": "admin123!",
        })
        assert res.status_code == 401


# ===== Me / token handling =====

class TestMe:
    """/me 및 토큰 검증 테스트."""

    async def test_me(self, client: AsyncClient, regular_user, user_token):
        """토큰으로 현재 사용자 조회."""
        res = await client.get(f"{AUTH_URL}/me", headers=auth_header(user_token))
        assert res.status_code == 200
        data = res.json()
        assert data["id"] == regular_user.id
        assert data["username"] == "viewer"
        assert data["role"] == "ROLE_USER"
        assert data["isActive"] is True

    async def test_me_without_token(self, client: AsyncClient):
        """토큰 없이 호출하면 거부."""
        res = await client.get(f"{AUTH_URL}/me")
        assert res.status_code in (401, 403)

    async def test_invalid_token(self, client: AsyncClient):
        """변조된 토큰은 401."""
        res = await client.get(f"{AUTH_URL}/me", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid or expired token"

    async def test_expired_token(self, client: AsyncClient, regular_user):
        """만료된 토큰은 401."""
        token = create_access_token(
            {"sub": str(regular_user.id), "role": regular_user.role},
            expires_delta=timedelta(minutes=-1),
        )
        res = await client.get(f"{AUTH_URL}/me", headers=auth_header(token))
        assert res.status_code == 401

    async def test_token_for_deleted_user(self, client: AsyncClient, db, regular_user, user_token):
        """삭제된 사용자의 토큰은 401."""
        await db.delete(regular_user)
        await db.flush()

        res = await client.get(f"{PRODUCTS_URL}", headers=auth_header(user_token))
        assert res.status_code == 401
