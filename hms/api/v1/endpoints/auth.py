"""
Auth endpoints — register, login, refresh-token rotation, logout and
password change.
"""

# No ``from __future__ import annotations`` here: slowapi wraps the
# endpoints and FastAPI must be able to resolve their annotations.

from typing import Callable

from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from hms.api.v1.deps import (get_cookie_policy, get_current_user,
                             get_session_manager)
from hms.core.cookies import REFRESH_COOKIE, CookiePolicy
from hms.models.user import User
from hms.schemas.common import ApiResponse, envelope
from hms.schemas.token import (ChangePasswordRequest, LoginRequest,
                               LoginResult, RefreshRequest, RegisterRequest,
                               Token)
from hms.schemas.user import UserRead
from hms.services.sessions import SessionManager

# Rate limiter — keyed by client IP.  Limits and the on/off switch come from
# the Settings of the app serving the request (request.app.state.settings).
limiter = Limiter(key_func=get_remote_address)


def _client_key(setting: str) -> Callable[[Request], str]:
    """Key on client IP plus the limit this app is configured with."""

    def key(request: Request) -> str:
        limit = getattr(request.app.state.settings, setting)
        return f"{get_remote_address(request)}|{limit}"

    return key


def _configured_limit(key: str) -> str:
    return key.rsplit("|", 1)[1]


def _limits_disabled(request: Request) -> bool:
    return not request.app.state.settings.RATE_LIMIT_ENABLED


router = APIRouter(prefix="/auths", tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    body: RegisterRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> ApiResponse:
    """Create a new account.  The password hash is never returned."""
    user = await sessions.register(
        email=body.email,
        full_name=body.full_name,
        password=body.password,
        mobile_number=body.mobile_number,
        role=body.role,
        is_active=body.is_active,
        is_deleted=body.is_deleted,
    )
    return envelope(
        UserRead.model_validate(user),
        "User registered successfully",
        status.HTTP_201_CREATED,
    )


@router.post("/login", response_model=ApiResponse[LoginResult])
@limiter.limit(
    _configured_limit,
    key_func=_client_key("LOGIN_RATE_LIMIT"),
    exempt_when=_limits_disabled,
)
async def login_user(
    request: Request,
    response: Response,
    body: LoginRequest,
    sessions: SessionManager = Depends(get_session_manager),
    cookies: CookiePolicy = Depends(get_cookie_policy),
) -> ApiResponse:
    """Authenticate with email/password. Sets HttpOnly auth cookies."""
    outcome = await sessions.login(body.email, body.password)
    cookies.set_auth_cookies(
        response, outcome.tokens.access_token, outcome.tokens.refresh_token
    )
    return envelope(
        LoginResult(
            user=UserRead.model_validate(outcome.user),
            access_token=outcome.tokens.access_token,
            refresh_token=outcome.tokens.refresh_token,
        ),
        "User logged in successfully",
    )


@router.post("/refresh-token", response_model=ApiResponse[Token])
@limiter.limit(
    _configured_limit,
    key_func=_client_key("REFRESH_RATE_LIMIT"),
    exempt_when=_limits_disabled,
)
async def refresh_access_token(
    request: Request,
    response: Response,
    body: RefreshRequest | None = None,
    refresh_token_cookie: str | None = Cookie(default=None, alias=REFRESH_COOKIE),
    sessions: SessionManager = Depends(get_session_manager),
    cookies: CookiePolicy = Depends(get_cookie_policy),
) -> ApiResponse:
    """Rotate the refresh token. Each refresh token works exactly once."""
    # Priority: Body > Cookie
    presented = (body.refresh_token if body else None) or refresh_token_cookie
    tokens = await sessions.refresh(presented)
    cookies.set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return envelope(
        Token(access_token=tokens.access_token, refresh_token=tokens.refresh_token),
        "Access token refreshed",
    )


@router.post("/logout", response_model=ApiResponse)
async def logout_user(
    response: Response,
    current_user: User = Depends(get_current_user),
    sessions: SessionManager = Depends(get_session_manager),
    cookies: CookiePolicy = Depends(get_cookie_policy),
) -> ApiResponse:
    """Clear the stored refresh token and both auth cookies."""
    await sessions.logout(current_user.id)
    cookies.clear_auth_cookies(response)
    return envelope({}, "User logged out")


@router.post("/change-password", response_model=ApiResponse)
async def change_current_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    sessions: SessionManager = Depends(get_session_manager),
) -> ApiResponse:
    await sessions.change_password(
        current_user.id, body.old_password, body.new_password
    )
    return envelope({}, "Password changed successfully")


@router.get("/me", response_model=ApiResponse[UserRead])
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> ApiResponse:
    """Return profile of the currently authenticated user."""
    return envelope(UserRead.model_validate(current_user), "User fetched successfully")
