from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .exceptions import UnauthorizedError


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated identity acting on a request."""

    id: int
    email: str


def current_user_from_session(session: Mapping[str, Any]) -> Optional[CurrentUser]:
    """Build the acting identity from a Flask session, if one is logged in."""

    user_id = session.get("user_id")
    if user_id is None:
        return None
    try:
        return CurrentUser(id=int(user_id), email=str(session.get("email") or ""))
    except (TypeError, ValueError):
        return None


def require_user(user: Optional[CurrentUser], action: str) -> CurrentUser:
    if user is None:
        raise UnauthorizedError(f"You must be logged in to {action}")
    return user
