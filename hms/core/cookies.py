"""
Auth cookie policy — one set of attributes for setting *and* clearing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from fastapi import Response

from hms.core.config import Settings

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


@dataclass(frozen=True)
class CookiePolicy:
    secure: bool
    samesite: Literal["lax", "strict", "none"]
    access_max_age: int
    refresh_max_age: int
    httponly: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "CookiePolicy":
        production = settings.is_production
        return cls(
            secure=production or settings.COOKIE_SECURE,
            samesite="strict" if production else "lax",
            access_max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            refresh_max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        )

    def set_auth_cookies(
        self, response: Response, access_token: str, refresh_token: str
    ) -> None:
        response.set_cookie(
            key=ACCESS_COOKIE,
            value=access_token,
            max_age=self.access_max_age,
            httponly=self.httponly,
            secure=self.secure,
            samesite=self.samesite,
        )
        response.set_cookie(
            key=REFRESH_COOKIE,
            value=refresh_token,
            max_age=self.refresh_max_age,
            httponly=self.httponly,
            secure=self.secure,
            samesite=self.samesite,
        )

    def clear_auth_cookies(self, response: Response) -> None:
        for key in (ACCESS_COOKIE, REFRESH_COOKIE):
            response.delete_cookie(
                key=key,
                httponly=self.httponly,
                secure=self.secure,
                samesite=self.samesite,
            )
