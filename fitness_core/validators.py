from __future__ import annotations
import re
from typing import Optional

from . import config
from .errors import (
    ValidationError,
    EmptyInput,
    MalformedTime,
    OutOfRangeTime,
    ZeroTime,
    MalformedCount,
    NegativeOrZeroCount,
    MalformedDecimal,
    NonPositiveDecimal,
    UnknownFormat,
)
from .types import ValidationOutcome

# ASCII digits only; lengths capped so int() never meets the digit limit
_TIME_RX = re.compile(r"^\d{1,6}:\d{2}$", re.ASCII)
_COUNT_RX = re.compile(r"^\d{1,9}$", re.ASCII)
_DECIMAL_RX = re.compile(r"^(?:\d{1,9}\.?\d{0,9}|\d{0,9}\.\d{1,9})$", re.ASCII)


def _check_time(value: str) -> None:
    if not _TIME_RX.match(value):
        raise MalformedTime("Invalid time format. Use minutes:seconds (e.g. 8:30)")
    minutes, seconds = (int(p) for p in value.split(":"))
    if seconds >= 60:
        raise OutOfRangeTime("Invalid time values. Seconds must be between 0 and 59")
    if minutes == 0 and seconds == 0:
        raise ZeroTime("Time must be greater than zero")


def _check_count(value: str, allow_zero: bool) -> None:
    if not _COUNT_RX.match(value):
        raise MalformedCount("Enter a positive whole number (e.g. 20)")
    n = int(value)
    if n < 0 or (n == 0 and not allow_zero):
        raise NegativeOrZeroCount("The number must be greater than zero")


def _check_decimal(value: str) -> None:
    if not _DECIMAL_RX.match(value):
        raise MalformedDecimal("Enter a positive number (e.g. 12.5)")
    if float(value) <= 0:
        raise NonPositiveDecimal("The number must be greater than zero")


def validate(raw: Optional[str], fmt: str, *, allow_zero_count: Optional[bool] = None) -> None:
    """Raise a ``ValidationError`` subclass if ``raw`` does not fit ``fmt``.

    Surrounding whitespace is ignored. ``allow_zero_count`` overrides
    ``config.COUNT_ALLOW_ZERO`` for this call.
    """
    if raw is None or not str(raw).strip():
        raise EmptyInput("Please enter a result")
    value = str(raw).strip()
    if fmt == "time":
        _check_time(value)
    elif fmt == "count":
        allow_zero = config.COUNT_ALLOW_ZERO if allow_zero_count is None else allow_zero_count
        _check_count(value, allow_zero)
    elif fmt in ("seconds", "decimal"):
        _check_decimal(value)
    else:
        raise UnknownFormat(f"Unknown input format: {fmt!r}")


def validate_input(raw: Optional[str], fmt: str, *, allow_zero_count: Optional[bool] = None) -> ValidationOutcome:
    """Non-raising form of :func:`validate` for the presentation layer."""
    try:
        validate(raw, fmt, allow_zero_count=allow_zero_count)
    except ValidationError as exc:
        return ValidationOutcome(valid=False, code=exc.code, message=exc.message)
    return ValidationOutcome(valid=True)


__all__ = ["validate", "validate_input"]
