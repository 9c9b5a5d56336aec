"""
Role enumeration shared by the auth layer and every resource router.

Older clients send roles either as numbers (``0`` / ``1``) or as
capitalised names (``"Hospital"``, ``"Patient"``).  Those values are
translated here, at the request boundary, and nowhere else.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    HOSPITAL = "hospital"
    DOCTOR = "doctor"
    PATIENT = "patient"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Map a canonical or legacy role value onto a ``Role``.

        Raises ``ValueError`` for anything outside the enumeration.
        """
        if isinstance(value, Role):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid role: {value!r}")
        if isinstance(value, int):
            key: object = value
        elif isinstance(value, str):
            text = value.strip()
            key = int(text) if text.isdigit() else text
        else:
            raise ValueError(f"Invalid role: {value!r}")

        if key in _LEGACY_ROLES:
            return _LEGACY_ROLES[key]
        if isinstance(key, str):
            try:
                return cls(key.lower())
            except ValueError:
                pass
        raise ValueError(
            f"Invalid role: {value!r}. Must be one of: {', '.join(r.value for r in cls)}"
        )


_LEGACY_ROLES: dict[object, Role] = {
    0: Role.ADMIN,
    1: Role.MANAGER,
    "Hospital": Role.HOSPITAL,
    "Patient": Role.PATIENT,
}
