from __future__ import annotations
from typing import Union

from .errors import InvalidTimeFormat, UnknownFormat

Number = Union[int, float]


def time_to_seconds(text: str) -> int:
    parts = str(text).strip().split(":")
    if len(parts) != 2:
        raise InvalidTimeFormat(f"Invalid time format: {text!r}")
    try:
        minutes, seconds = int(parts[0]), int(parts[1])
    except ValueError:
        raise InvalidTimeFormat(f"Invalid time format: {text!r}") from None
    return minutes * 60 + seconds


def canonicalize(raw: str, fmt: str) -> Number:
    """Convert a validated raw result into a comparable number.

    time -> total seconds, count -> int, seconds/decimal -> float.
    """
    value = str(raw).strip()
    if fmt == "time":
        return time_to_seconds(value)
    if fmt == "count":
        return int(value)
    if fmt in ("seconds", "decimal"):
        return float(value)
    raise UnknownFormat(f"Unknown input format: {fmt!r}")


def parse_benchmark(cell: str, fmt: str) -> float | None:
    """Parse a benchmark cell with the student's rule; ``None`` marks a gap.

    Blank, unparseable and non-positive cells are all gaps.
    """
    text = str(cell or "").strip()
    if not text:
        return None
    try:
        val = float(time_to_seconds(text)) if fmt == "time" else float(text)
    except (InvalidTimeFormat, ValueError):
        return None
    if val != val or val <= 0:  # NaN or non-positive
        return None
    return val


__all__ = ["time_to_seconds", "canonicalize", "parse_benchmark"]
