"""
FastAPI dependencies — database session, auth guards and role gates.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hms.core.cookies import ACCESS_COOKIE, CookiePolicy
from hms.core.exceptions import ForbiddenError, UnauthorizedError
from hms.core.roles import Role
from hms.core.security import TokenCodec, TokenKind
from hms.models.user import User
from hms.services.sessions import SessionManager

# auto_error=False so the cookie can be used when the header is missing
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auths/login", auto_error=False)


# ── Application state ───────────────────────────────────────────────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_cookie_policy(request: Request) -> CookiePolicy:
    return request.app.state.cookie_policy


def get_session_manager(
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> SessionManager:
    return SessionManager(db, codec)


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_COOKIE),
    codec: TokenCodec = Depends(get_token_codec),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode the access token from Header OR Cookie and load the user."""
    # Priority: Header > Cookie
    final_token = token or access_token
    if not final_token:
        raise UnauthorizedError(
            "Unauthorized request", headers={"WWW-Authenticate": "Bearer"}
        )

    claim = codec.verify(final_token, TokenKind.ACCESS)

    user = await db.get(User, claim.user_id)
    if user is None or not user.is_usable:
        raise UnauthorizedError(
            "Invalid access token", headers={"WWW-Authenticate": "Bearer"}
        )
    return user


def require_roles(*roles: Role) -> Callable[..., Awaitable[User]]:
    """Build a dependency that only lets the listed roles (and admins) through."""
    allowed = frozenset(roles) | {Role.ADMIN}

    async def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError()
        return current_user

    return _guard
