"""
Input validation for the analytics core.

These checks run at the recorder boundary so the session schema holds no
matter which storage backend or transport sits around it.
"""

import math
from typing import Any, Dict, Optional

from .errors import ValidationError
from .models import ActionType

MAX_SESSION_ID_LENGTH = 256
MAX_TEXT_LENGTH = 2048

_SCALAR_TYPES = (str, int, float, bool, type(None))


def _require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required", [f"{name}: must be a non-empty string"])
    if len(value) > MAX_TEXT_LENGTH:
        raise ValidationError(f"{name} is too long", [f"{name}: at most {MAX_TEXT_LENGTH} characters"])
    return value.strip()


def validate_session_id(session_id: Any) -> str:
    """Return the canonical session id or raise ValidationError."""
    if not isinstance(session_id, str) or not session_id.strip():
        raise ValidationError("sessionId is required", ["sessionId: must be a non-empty string"])
    session_id = session_id.strip()
    if len(session_id) > MAX_SESSION_ID_LENGTH:
        raise ValidationError(
            "sessionId is too long",
            [f"sessionId: at most {MAX_SESSION_ID_LENGTH} characters"],
        )
    return session_id


def validate_page(page: Any) -> str:
    return _require_text(page, "page")


def validate_element(element: Any) -> str:
    return _require_text(element, "element")


def validate_time_spent(time_spent: Any) -> float:
    """Seconds spent on a page; missing means 0."""
    if time_spent is None:
        return 0
    # bool is an int subclass
    if isinstance(time_spent, bool) or not isinstance(time_spent, (int, float)):
        raise ValidationError("timeSpent must be a number", ["timeSpent: must be a number"])
    if not math.isfinite(time_spent) or time_spent < 0:
        raise ValidationError(
            "timeSpent must be a non-negative number",
            ["timeSpent: must be finite and >= 0"],
        )
    return time_spent


def validate_action_type(action_type: Any) -> ActionType:
    if not isinstance(action_type, str) or not ActionType.is_valid(action_type):
        allowed = ", ".join(sorted(ActionType.get_allowed_types()))
        raise ValidationError("Invalid action type", [f"type: must be one of {allowed}"])
    return ActionType(action_type)


def validate_action_data(data: Any) -> Dict[str, Any]:
    """Action data is an open map of scalar values."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("data must be an object", ["data: must be an object"])
    errors = []
    for key, value in data.items():
        if not isinstance(key, str):
            errors.append(f"data: key {key!r} must be a string")
        elif not isinstance(value, _SCALAR_TYPES):
            errors.append(f"data.{key}: must be a string, number, boolean or null")
        elif isinstance(value, float) and not math.isfinite(value):
            errors.append(f"data.{key}: must be finite")
    if errors:
        raise ValidationError("Invalid action data", errors)
    return dict(data)


def validate_optional_text(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", [f"{name}: must be a string"])
    if len(value) > MAX_TEXT_LENGTH:
        raise ValidationError(f"{name} is too long", [f"{name}: at most {MAX_TEXT_LENGTH} characters"])
    return value or None


def validate_window_days(days: Any) -> int:
    """Dashboard windows are a positive whole number of days."""
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ValidationError("days must be a positive integer", ["days: must be a positive integer"])
    return days
