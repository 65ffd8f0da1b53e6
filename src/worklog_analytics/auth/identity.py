from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as issued by the login flow."""

    user_id: int
    role: Role


def current_identity() -> Optional[Identity]:
    """Read the caller from the Flask session (``user_id`` / ``role`` keys)."""

    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role") or Role.USER.value)
    except ValueError:
        role = Role.USER
    return Identity(user_id=int(session["user_id"]), role=role)


def require_identity() -> Identity:
    identity = current_identity()
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity
