"""Small helpers shared by the Flask controllers."""

from __future__ import annotations

from typing import Any, Dict, Optional, TypeVar

from flask import jsonify, request, session

from ..core.exceptions import NotFoundError, ValidationError
from ..core.identity import CurrentUser, current_user_from_session
from ..core.invalidation import drain_stale_views

T = TypeVar("T")


def current_user() -> Optional[CurrentUser]:
    return current_user_from_session(session)


def payload() -> Dict[str, Any]:
    """JSON body, or form fields for classic form posts."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def found(value: Optional[T], what: str) -> T:
    if value is None:
        raise NotFoundError(f"{what} not found")
    return value


def written(status: int = 200, **data: Any):
    """Response for a write: echoes the views the write made stale."""
    data["stale_views"] = drain_stale_views()
    return jsonify(data), status


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
