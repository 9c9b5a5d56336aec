"""Tests for the /auths endpoints: register, login, refresh, logout, password."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_db
from hms.core.config import Settings
from hms.main import create_app
from hms.models.user import User

AUTH = "/api/v1/auths"


def _registration(email: str = "alice@example.com", **overrides) -> dict:
    body = {
        "email": email,
        "fullName": "Alice Example",
        "password": "correct-horse",
        "mobileNumber": "9876543210",
        "role": "patient",
        "isActive": True,
        "isDeleted": False,
    }
    body.update(overrides)
    return body


async def _register_and_login(client: AsyncClient, email: str = "alice@example.com") -> dict:
    await client.post(f"{AUTH}/register", json=_registration(email))
    resp = await client.post(
        f"{AUTH}/login", json={"email": email, "password": "correct-horse"}
    )
    assert resp.status_code == 200
    return resp.json()["data"]


# ── Register ────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_register_returns_user_without_secrets(async_client: AsyncClient):
    resp = await async_client.post(f"{AUTH}/register", json=_registration())
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["statusCode"] == 201
    user = body["data"]
    assert user["email"] == "alice@example.com"
    assert user["fullName"] == "Alice Example"
    assert user["role"] == "patient"
    assert "password" not in user
    assert "hashedPassword" not in user
    assert "refreshToken" not in user


@pytest.mark.asyncio
async def test_register_maps_legacy_numeric_role(async_client: AsyncClient):
    resp = await async_client.post(
        f"{AUTH}/register", json=_registration("legacy@example.com", role=1)
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["role"] == "manager"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["admin", "0", 0])
async def test_public_registration_may_claim_admin(async_client: AsyncClient, role):
    """Registration is open to every role; nothing stops a caller choosing admin."""
    resp = await async_client.post(
        f"{AUTH}/register", json=_registration("boss@example.com", role=role)
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["role"] == "admin"

@pytest.mark.asyncio
async def test_register_rejects_unknown_role(async_client: AsyncClient):
    resp = await async_client.post(
        f"{AUTH}/register", json=_registration(role="surgeon-general")
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["email", "fullName", "password", "mobileNumber", "role"])
async def test_register_blank_field_is_validation_error(async_client: AsyncClient, field: str):
    resp = await async_client.post(f"{AUTH}/register", json=_registration(**{field: "  "}))
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "required" in body["message"]


@pytest.mark.asyncio
async def test_register_duplicate_email_conflicts(
    async_client: AsyncClient, db_session: AsyncSession
):
    first = await async_client.post(f"{AUTH}/register", json=_registration())
    second = await async_client.post(
        f"{AUTH}/register", json=_registration(fullName="Someone Else")
    )
    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["message"] == "User with email already exists"

    count = await db_session.scalar(
        select(func.count(User.id)).where(User.email == "alice@example.com")
    )
    assert count == 1


# ── Login ───────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_register_then_login_issues_tokens(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["user"]["email"] == "alice@example.com"
    assert "hashedPassword" not in data["user"]


@pytest.mark.asyncio
async def test_login_sets_httponly_cookies(async_client: AsyncClient):
    await async_client.post(f"{AUTH}/register", json=_registration())
    resp = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "correct-horse"}
    )
    assert resp.status_code == 200
    assert "accessToken" in resp.cookies
    assert "refreshToken" in resp.cookies

    set_cookies = resp.headers.get_list("set-cookie")
    assert len(set_cookies) == 2
    for header in set_cookies:
        assert "HttpOnly" in header
        assert "SameSite=lax" in header
        # Development environment: cookies are not Secure
        assert "Secure" not in header


@pytest.mark.asyncio
async def test_login_wrong_password_is_unauthorized(async_client: AsyncClient):
    await async_client.post(f"{AUTH}/register", json=_registration())
    resp = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "wrong"}
    )
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["data"] is None
    assert resp.headers.get_list("set-cookie") == []


@pytest.mark.asyncio
async def test_login_unknown_email_not_found(async_client: AsyncClient):
    resp = await async_client.post(
        f"{AUTH}/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_login_missing_email_is_validation_error(async_client: AsyncClient):
    resp = await async_client.post(f"{AUTH}/login", json={"password": "whatever"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email is required"


@pytest.mark.asyncio
@pytest.mark.parametrize("flags", [{"isActive": False}, {"isDeleted": True}])
async def test_login_excludes_inactive_and_deleted_users(async_client: AsyncClient, flags):
    await async_client.post(f"{AUTH}/register", json=_registration(**flags))
    resp = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "correct-horse"}
    )
    assert resp.status_code == 404


# ── Refresh rotation ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_refresh_tokens_are_single_use(async_client: AsyncClient):
    v1 = (await _register_and_login(async_client))["refreshToken"]

    first = await async_client.post(f"{AUTH}/refresh-token", json={"refreshToken": v1})
    assert first.status_code == 200
    v2 = first.json()["data"]["refreshToken"]
    assert v2 and v2 != v1

    reused = await async_client.post(f"{AUTH}/refresh-token", json={"refreshToken": v1})
    assert reused.status_code == 401
    assert reused.json()["message"] == "Refresh token is expired or used"

    again = await async_client.post(f"{AUTH}/refresh-token", json={"refreshToken": v2})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_refresh_reads_cookie_when_body_missing(async_client: AsyncClient):
    await _register_and_login(async_client)
    # The client cookie jar holds refreshToken from the login response
    resp = await async_client.post(f"{AUTH}/refresh-token")
    assert resp.status_code == 200
    assert resp.json()["data"]["accessToken"]
    assert "refreshToken" in resp.cookies


@pytest.mark.asyncio
async def test_refresh_without_token_is_unauthorized(async_client: AsyncClient):
    resp = await async_client.post(f"{AUTH}/refresh-token", json={})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Unauthorized request"


@pytest.mark.asyncio
async def test_refresh_rejects_garbage_and_access_tokens(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    async_client.cookies.clear()

    garbage = await async_client.post(
        f"{AUTH}/refresh-token", json={"refreshToken": "not-a-jwt"}
    )
    assert garbage.status_code == 401
    assert garbage.json()["message"] == "Invalid refresh token"

    # Access tokens are signed with a different secret
    wrong_kind = await async_client.post(
        f"{AUTH}/refresh-token", json={"refreshToken": data["accessToken"]}
    )
    assert wrong_kind.status_code == 401


@pytest.mark.asyncio
async def test_new_login_invalidates_previous_refresh_token(async_client: AsyncClient):
    old = (await _register_and_login(async_client))["refreshToken"]
    resp = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "correct-horse"}
    )
    assert resp.status_code == 200

    stale = await async_client.post(f"{AUTH}/refresh-token", json={"refreshToken": old})
    assert stale.status_code == 401


# ── Logout ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_logout_then_refresh_fails(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    headers = {"Authorization": f"Bearer {data['accessToken']}"}

    resp = await async_client.post(f"{AUTH}/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "User logged out"

    refreshed = await async_client.post(
        f"{AUTH}/refresh-token", json={"refreshToken": data["refreshToken"]}
    )
    assert refreshed.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookies_with_same_policy(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    resp = await async_client.post(
        f"{AUTH}/logout", headers={"Authorization": f"Bearer {data['accessToken']}"}
    )
    set_cookies = resp.headers.get_list("set-cookie")
    assert {h.split("=", 1)[0] for h in set_cookies} == {"accessToken", "refreshToken"}
    for header in set_cookies:
        assert "Max-Age=0" in header
        assert "HttpOnly" in header
        assert "SameSite=lax" in header


@pytest.mark.asyncio
async def test_logout_is_idempotent(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    headers = {"Authorization": f"Bearer {data['accessToken']}"}
    first = await async_client.post(f"{AUTH}/logout", headers=headers)
    second = await async_client.post(f"{AUTH}/logout", headers=headers)
    assert first.status_code == 200
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_logout_requires_authentication(async_client: AsyncClient):
    resp = await async_client.post(f"{AUTH}/logout")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_access_cookie_authenticates(async_client: AsyncClient):
    await _register_and_login(async_client)
    # No Authorization header: accessToken cookie from login is used
    resp = await async_client.get(f"{AUTH}/me")
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "alice@example.com"


# ── Change password ─────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_change_password_wrong_old_keeps_hash(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    headers = {"Authorization": f"Bearer {data['accessToken']}"}

    resp = await async_client.post(
        f"{AUTH}/change-password",
        json={"oldPassword": "nope", "newPassword": "brand-new"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid old password"

    relogin = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "correct-horse"}
    )
    assert relogin.status_code == 200


@pytest.mark.asyncio
async def test_change_password_then_login_with_new(async_client: AsyncClient):
    data = await _register_and_login(async_client)
    headers = {"Authorization": f"Bearer {data['accessToken']}"}

    resp = await async_client.post(
        f"{AUTH}/change-password",
        json={"oldPassword": "correct-horse", "newPassword": "brand-new"},
        headers=headers,
    )
    assert resp.status_code == 200

    # Existing refresh token survives the password change
    refreshed = await async_client.post(
        f"{AUTH}/refresh-token", json={"refreshToken": data["refreshToken"]}
    )
    assert refreshed.status_code == 200

    new_login = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "brand-new"}
    )
    assert new_login.status_code == 200

    old_login = await async_client.post(
        f"{AUTH}/login", json={"email": "alice@example.com", "password": "correct-horse"}
    )
    assert old_login.status_code == 401


@pytest.mark.asyncio
async def test_change_password_requires_authentication(async_client: AsyncClient):
    async_client.cookies.clear()
    resp = await async_client.post(
        f"{AUTH}/change-password",
        json={"oldPassword": "a", "newPassword": "b"},
    )
    assert resp.status_code == 401


# ── Rate limiting ───────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_login_rate_limit_comes_from_app_settings(session_factory):
    limited = create_app(
        Settings(
            RATE_LIMIT_ENABLED=True,
            LOGIN_RATE_LIMIT="2/minute",
            ACCESS_TOKEN_SECRET="limited-access",
            REFRESH_TOKEN_SECRET="limited-refresh",
        )
    )

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    limited.dependency_overrides[get_db] = _override_get_db
    body = {"email": "ghost@example.com", "password": "whatever"}
    async with AsyncClient(transport=ASGITransport(app=limited), base_url="http://test") as client:
        statuses = [(await client.post(f"{AUTH}/login", json=body)).status_code for _ in range(3)]
        throttled = await client.post(f"{AUTH}/login", json=body)

    assert statuses == [404, 404, 429]
    assert throttled.json()["success"] is False
    assert throttled.json()["statusCode"] == 429


@pytest.mark.asyncio
async def test_rate_limit_disabled_per_app(async_client: AsyncClient):
    body = {"email": "ghost@example.com", "password": "whatever"}
    for _ in range(12):
        resp = await async_client.post(f"{AUTH}/login", json=body)
        assert resp.status_code == 404
