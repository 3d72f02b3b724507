"""Escalation period parsing and normalization."""

from __future__ import annotations

import re

from contracts.errors import ValidationError

MIN_ESC_PERIOD_SECONDS = 60
MAX_ESC_PERIOD_SECONDS = 604800
INHERIT_PERIOD = "0"

_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
_DURATION_RE = re.compile(r"^(\d+)([smhdw]?)$")
_USER_MACRO_RE = re.compile(r"^\{\$[A-Z0-9_.]+(?::.*)?\}$")


def is_user_macro(value: str) -> bool:
    return bool(_USER_MACRO_RE.match(value))


def parse_seconds(value: str) -> int:
    """Return the number of seconds for ``"90"``, ``"5m"``, ``"1h"`` ...

    Raises ``ValueError`` for anything outside the duration grammar,
    including user macros.
    """
    match = _DURATION_RE.match(value.strip())
    if match is None:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit]


def normalize_esc_period(
    value: object,
    *,
    field: str = "esc_period",
    path: str = "",
    allow_inherit: bool = False,
) -> str:
    """Validate an escalation period and return it as a seconds string.

    User macros are returned verbatim. With ``allow_inherit`` an empty value
    or ``"0"`` yields ``INHERIT_PERIOD``.
    """
    if value is None and allow_inherit:
        return INHERIT_PERIOD
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise ValidationError(field, "must be a duration string", path=path)
    text = str(value).strip()
    if allow_inherit and text in ("", INHERIT_PERIOD):
        return INHERIT_PERIOD
    if is_user_macro(text):
        return text
    try:
        seconds = parse_seconds(text)
    except ValueError:
        raise ValidationError(field, "invalid duration", path=path) from None
    if seconds < MIN_ESC_PERIOD_SECONDS:
        raise ValidationError(field, "below minimum", path=path)
    if seconds > MAX_ESC_PERIOD_SECONDS:
        raise ValidationError(field, "above maximum", path=path)
    return str(seconds)


def normalize_remote_period(value: object, *, inherit_as: str = INHERIT_PERIOD) -> str:
    """Normalize a server-stored period without validating bounds."""
    text = str(value if value is not None else "").strip()
    if text in ("", INHERIT_PERIOD):
        return inherit_as
    if is_user_macro(text):
        return text
    try:
        return str(parse_seconds(text))
    except ValueError:
        return text
