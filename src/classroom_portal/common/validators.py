from __future__ import annotations

import re
from datetime import datetime

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid e-mail address")
    return value


def require_date_key(value: str, field_name: str = "Date") -> str:
    """Validate a YYYY-MM-DD key used for per-day documents."""
    value = require_non_empty(value, field_name)
    if not _DATE_KEY_RE.match(value):
        raise ValidationError(f"{field_name} must use the YYYY-MM-DD format")
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"{field_name} must use the YYYY-MM-DD format") from None
    return value
