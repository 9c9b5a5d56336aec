"""
JWT token creation / verification and password hashing (bcrypt).

Access and refresh tokens are signed with two different secrets so a
refresh token can never be replayed as an access token (and vice versa).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from hms.core.config import Settings
from hms.core.exceptions import InvalidTokenError
from hms.core.roles import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


# ── JWT tokens ──────────────────────────────────────────────────────
class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class IdentityClaim:
    """Identity carried inside a token.

    Refresh tokens only carry ``user_id``; ``role`` and ``email`` are
    ``None`` after verifying one.
    """

    user_id: int
    role: Role | None = None
    email: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Mint and verify signed, time-boxed access / refresh tokens."""

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._algorithm = settings.ALGORITHM
        self._secrets = {
            TokenKind.ACCESS: settings.ACCESS_TOKEN_SECRET,
            TokenKind.REFRESH: settings.REFRESH_TOKEN_SECRET,
        }
        self._lifetimes = {
            TokenKind.ACCESS: timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            TokenKind.REFRESH: timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        }
        self._clock = clock

    def lifetime(self, kind: TokenKind) -> timedelta:
        return self._lifetimes[kind]

    def _encode(self, kind: TokenKind, claims: dict[str, Any]) -> str:
        issued_at = self._clock()
        payload = {
            **claims,
            "type": kind.value,
            "iat": issued_at,
            "exp": issued_at + self._lifetimes[kind],
            # jti keeps two tokens minted in the same second distinct
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self._algorithm)

    def issue_access_token(self, claim: IdentityClaim) -> str:
        claims: dict[str, Any] = {"sub": str(claim.user_id)}
        if claim.role is not None:
            claims["role"] = claim.role.value
        if claim.email is not None:
            claims["email"] = claim.email
        return self._encode(TokenKind.ACCESS, claims)

    def issue_refresh_token(self, claim: IdentityClaim) -> str:
        return self._encode(TokenKind.REFRESH, {"sub": str(claim.user_id)})

    def verify(self, token: str, kind: TokenKind) -> IdentityClaim:
        """Return the identity inside *token*, or raise ``InvalidTokenError``.

        Signature, expiry and token type are all checked.  The error
        message says whether the token expired or is otherwise invalid.
        """
        label = kind.value.capitalize()
        try:
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as exc:
            raise InvalidTokenError(f"{label} token has expired") from exc
        except JWTError as exc:
            raise InvalidTokenError(f"Invalid {kind.value} token") from exc

        if payload.get("type") != kind.value:
            raise InvalidTokenError(f"Invalid {kind.value} token")

        try:
            user_id = int(payload["sub"])
            role = Role(payload["role"]) if payload.get("role") else None
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError(f"Invalid {kind.value} token") from exc

        return IdentityClaim(user_id=user_id, role=role, email=payload.get("email"))
