"""
Session manager — registration, login, refresh-token rotation, logout
and password change.

At most one refresh token is live per user: every login / refresh
overwrites ``users.refresh_token`` and logout clears it.  Rotation uses a
conditional UPDATE so a refresh token can be exchanged exactly once, even
when two requests present it concurrently.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from jose import JWTError
from passlib.exc import PasswordValueError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hms.core.exceptions import (BadRequestError, ConflictError, InternalError,
                                 InvalidTokenError, NotFoundError,
                                 UnauthorizedError, ValidationError)
from hms.core.roles import Role
from hms.core.security import (IdentityClaim, TokenCodec, TokenKind,
                               hash_password, verify_password)
from hms.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginOutcome:
    user: User
    tokens: TokenPair


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(**fields: object) -> None:
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise ValidationError(f"All fields are required (missing: {', '.join(missing)})")


def _hash_or_reject(password: str) -> str:
    try:
        return hash_password(password)
    except PasswordValueError as exc:
        # NUL bytes or more than 4096 characters
        raise ValidationError(f"Invalid password: {exc}") from exc


def _matches(password: str, hashed: str) -> bool:
    """A password bcrypt refuses to hash can never match a stored hash."""
    try:
        return verify_password(password, hashed)
    except PasswordValueError:
        return False


class SessionManager:
    def __init__(self, db: AsyncSession, codec: TokenCodec) -> None:
        self.db = db
        self.codec = codec

    # ── Helpers ─────────────────────────────────────────────────────
    async def _find_by_email(self, email: str, *, usable_only: bool = False) -> User | None:
        query = select(User).where(User.email == email)
        if usable_only:
            query = query.where(User.is_usable)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _mint_pair(self, user: User) -> TokenPair:
        claim = IdentityClaim(user_id=user.id, role=user.role, email=user.email)
        try:
            return TokenPair(
                access_token=self.codec.issue_access_token(claim),
                refresh_token=self.codec.issue_refresh_token(claim),
            )
        except JWTError as exc:
            raise InternalError(
                "Something went wrong while generating refresh and access token"
            ) from exc

    # ── Operations ──────────────────────────────────────────────────
    async def register(
        self,
        *,
        email: str | None,
        full_name: str | None,
        password: str | None,
        mobile_number: str | None,
        role: object,
        is_active: bool = True,
        is_deleted: bool = False,
    ) -> User:
        """Create a user with a hashed password.

        Fails with ``ValidationError`` on blank fields or an unknown role and
        with ``ConflictError`` when the email is already registered.
        Any role is accepted, admin included: self-registration is not
        restricted to low-privilege roles.
        """
        _require(
            email=email,
            fullName=full_name,
            password=password,
            mobileNumber=mobile_number,
            role=role,
        )
        try:
            parsed_role = Role.parse(role)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        email = email.strip()  # type: ignore[union-attr]
        if await self._find_by_email(email) is not None:
            raise ConflictError("User with email already exists")

        user = User(
            email=email,
            full_name=full_name.strip(),  # type: ignore[union-attr]
            mobile_number=mobile_number.strip(),  # type: ignore[union-attr]
            hashed_password=_hash_or_reject(password),  # type: ignore[arg-type]
            role=parsed_role,
            is_active=is_active,
            is_deleted=is_deleted,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            # Lost the race against a concurrent registration
            await self.db.rollback()
            raise ConflictError("User with email already exists") from exc
        await self.db.refresh(user)
        logger.info("Registered user %d (%s, role=%s)", user.id, user.email, user.role.value)
        return user

    async def login(self, email: str | None, password: str | None) -> LoginOutcome:
        if _is_blank(email):
            raise ValidationError("Email is required")
        if _is_blank(password):
            raise ValidationError("Password is required")

        user = await self._find_by_email(email.strip(), usable_only=True)  # type: ignore[union-attr]
        if user is None:
            raise NotFoundError("User not found")
        if not _matches(password, user.hashed_password):  # type: ignore[arg-type]
            logger.warning("Failed login for %s", user.email)
            raise UnauthorizedError("Invalid credentials")

        tokens = self._mint_pair(user)
        # Overwrites any refresh token from an earlier login
        user.refresh_token = tokens.refresh_token
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("User %d logged in", user.id)
        return LoginOutcome(user=user, tokens=tokens)

    async def refresh(self, presented: str | None) -> TokenPair:
        """Exchange a refresh token for a new pair; the presented token dies."""
        if _is_blank(presented):
            raise UnauthorizedError("Unauthorized request")

        claim = self.codec.verify(presented, TokenKind.REFRESH)  # type: ignore[arg-type]
        user = await self.db.get(User, claim.user_id, populate_existing=True)
        if user is None or not user.is_usable:
            raise InvalidTokenError("Invalid refresh token")

        stale = UnauthorizedError("Refresh token is expired or used")
        if not hmac.compare_digest(
            (user.refresh_token or "").encode(), presented.encode()  # type: ignore[union-attr]
        ):
            logger.warning("Stale refresh token presented for user %d", user.id)
            raise stale

        user_id = user.id
        tokens = self._mint_pair(user)
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == presented)
            .values(refresh_token=tokens.refresh_token)
        )
        if result.rowcount != 1:
            # Another request rotated this token between our read and write.
            # Rollback expires `user`; only the saved id is read afterwards.
            await self.db.rollback()
            logger.warning("Concurrent refresh lost the race for user %d", user_id)
            raise stale
        await self.db.commit()
        logger.info("Rotated refresh token for user %d", user_id)
        return tokens

    async def logout(self, user_id: int) -> None:
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None)
        )
        await self.db.commit()
        logger.info("User %d logged out", user_id)

    async def change_password(
        self,
        user_id: int,
        old_password: str | None,
        new_password: str | None,
    ) -> None:
        """Replace the password hash.  Existing sessions stay valid."""
        _require(oldPassword=old_password, newPassword=new_password)
        user = await self._get_user(user_id)
        if not _matches(old_password, user.hashed_password):  # type: ignore[arg-type]
            raise BadRequestError("Invalid old password")

        user.hashed_password = _hash_or_reject(new_password)  # type: ignore[arg-type]
        await self.db.commit()
        logger.info("Password changed for user %d", user_id)
