"""
Tests de autenticación: hashing, JWT, login y dependencias Bearer.
"""
from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from roastify.api.v1.dependencies.auth_deps import require_admin
from roastify.api.v1.dependencies.use_case_deps import get_auth_use_cases
from roastify.application.dto.auth_dto import TokenResponseDTO, UserResponseDTO
from roastify.application.use_cases.admin_use_cases import AdminUseCases
from roastify.application.use_cases.auth_use_cases import AuthUseCases
from roastify.core.security import security_service
from roastify.infrastructure.database.session import get_db
from roastify.shared.exceptions.auth import (
    ForbiddenException,
    InvalidCredentialsException,
    TokenExpiredException,
)


def test_password_hash_roundtrip() -> None:
    hashed = security_service.hash_password("cafe-con-leche")
    assert hashed != "cafe-con-leche"
    assert security_service.verify_password("cafe-con-leche", hashed) is True
    assert security_service.verify_password("otra", hashed) is False
    assert security_service.verify_password("x", "not-a-bcrypt-hash") is False


def test_access_token_roundtrip_and_expiry() -> None:
    token = security_service.create_access_token({"sub": "12"})
    assert security_service.decode_access_token(token)["sub"] == "12"

    expired = security_service.create_access_token({"sub": "12"}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredException):
        security_service.decode_access_token(expired)

    with pytest.raises(InvalidCredentialsException):
        security_service.decode_access_token("not.a.token")


async def test_login_returns_token_for_valid_credentials(db_session) -> None:
    user, _ = await AdminUseCases(db_session).seed_admin_user("Ana", "Ana@Example.com", "s3cret-pass")

    result = await AuthUseCases(db_session).login("ana@example.com", "s3cret-pass")

    assert result.token_type == "bearer"
    assert result.user.email == "ana@example.com"
    assert security_service.decode_access_token(result.access_token)["sub"] == str(user.id)


async def test_login_rejects_wrong_password_and_unknown_email(db_session) -> None:
    await AdminUseCases(db_session).seed_admin_user("Ana", "ana@example.com", "s3cret-pass")
    use_cases = AuthUseCases(db_session)

    with pytest.raises(InvalidCredentialsException):
        await use_cases.login("ana@example.com", "wrong")
    with pytest.raises(InvalidCredentialsException):
        await use_cases.login("nobody@example.com", "s3cret-pass")


async def test_user_from_token(db_session) -> None:
    user, _ = await AdminUseCases(db_session).seed_admin_user("Ana", "ana@example.com", "s3cret-pass")
    use_cases = AuthUseCases(db_session)

    token = security_service.create_access_token({"sub": str(user.id)})
    assert (await use_cases.get_user_from_token(token)).id == user.id

    with pytest.raises(InvalidCredentialsException):
        await use_cases.get_user_from_token(security_service.create_access_token({"sub": "9999"}))
    with pytest.raises(InvalidCredentialsException):
        await use_cases.get_user_from_token(security_service.create_access_token({"role": "admin"}))


async def test_require_admin_rejects_regular_users() -> None:
    admin = SimpleNamespace(is_admin=True)
    assert await require_admin(admin) is admin

    with pytest.raises(ForbiddenException) as exc_info:
        await require_admin(SimpleNamespace(is_admin=False))
    assert exc_info.value.status_code == 403


async def _fake_db():
    yield AsyncMock()


async def test_login_endpoint_contract() -> None:
    from main import create_application

    use_cases = AsyncMock()
    use_cases.login = AsyncMock(
        return_value=TokenResponseDTO(
            access_token="jwt",
            user=UserResponseDTO(id=1, name="Ana", email="ana@example.com", role="admin", email_verified=True),
        )
    )
    app = create_application()
    app.dependency_overrides[get_db] = _fake_db
    app.dependency_overrides[get_auth_use_cases] = lambda: use_cases

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        ok = await client.post("/api/v1/auth/login", json={"email": "ana@example.com", "password": "x"})
        use_cases.login = AsyncMock(side_effect=InvalidCredentialsException())
        denied = await client.post("/api/v1/auth/login", json={"email": "ana@example.com", "password": "y"})

    assert ok.status_code == 200
    assert ok.json()["access_token"] == "jwt"
    assert ok.json()["token_type"] == "bearer"
    assert ok.json()["user"]["role"] == "admin"
    assert denied.status_code == 401
    assert denied.json()["error"] == "INVALID_CREDENTIALS"
