"""
Request validation helpers

Shared rules and pydantic error formatting used by the route services.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

SESSION_ID_PATTERN = re.compile(r"^[0-9a-fA-F-]{36}$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
SIX_DIGIT_CODE = re.compile(r"^\d{6}$")

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_datetime(value: str) -> Optional[datetime]:
    """ISO-8601 date or datetime (a trailing Z is accepted); None if unparseable"""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def is_valid_session_id(session_id: Optional[str]) -> bool:
    """Onboarding session ids are 36-char hex/dash strings"""
    return bool(session_id) and bool(SESSION_ID_PATTERN.match(session_id))


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _message(error: Dict[str, Any]) -> str:
    """Human message for one pydantic error; custom validator text is kept verbatim"""
    msg = error.get("msg", "Invalid value")
    if error.get("type") == "value_error":
        return msg.removeprefix("Value error, ")
    path = _field_path(error.get("loc", ()))
    return f"{path}: {msg}" if path else msg


def error_messages(exc: ValidationError) -> List[str]:
    return [_message(error) for error in exc.errors()]


def first_error_message(exc: ValidationError) -> str:
    messages = error_messages(exc)
    return messages[0] if messages else "Invalid input"


def error_details(exc: ValidationError) -> List[Dict[str, Any]]:
    """JSON-safe error list: [{path, message}]"""
    return [
        {"path": _field_path(error.get("loc", ())), "message": _message(error)}
        for error in exc.errors()
    ]


def constraint_errors(exc: ValidationError) -> List[Dict[str, Any]]:
    """
    Errors grouped per property as {property, constraints: {code: message}}

    The shape the campaign API uses for its 400 bodies.
    """
    grouped: Dict[str, Dict[str, str]] = {}
    for error in exc.errors():
        prop = _field_path(error.get("loc", ())) or "body"
        grouped.setdefault(prop, {})[error.get("type", "invalid")] = _message(error)
    return [{"property": prop, "constraints": constraints} for prop, constraints in grouped.items()]


def parse_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """model_validate that treats a missing body as an empty object"""
    return model_cls.model_validate(data if data is not None else {})


__all__ = [
    "SESSION_ID_PATTERN",
    "PHONE_PATTERN",
    "UUID_PATTERN",
    "SIX_DIGIT_CODE",
    "parse_datetime",
    "is_valid_session_id",
    "error_messages",
    "first_error_message",
    "error_details",
    "constraint_errors",
    "parse_model",
]
