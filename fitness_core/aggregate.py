from __future__ import annotations
import math
from typing import Iterable, List, Mapping, Optional

from . import config
from .errors import NoGradableTests, NoWeightedTests, WeightSumMismatch
from .types import WeightEntry

_FLOAT_EPS = 1e-9


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def weight_from_record(rec: Mapping[str, object]) -> WeightEntry:
    """Weight rows name the test as ``test_type`` or ``value`` and the weight
    as ``weight_percent`` or ``weight``; anything unparseable weighs 0."""
    test_type = str(rec.get("test_type") or rec.get("value") or rec.get("testType") or "").strip()
    raw = str(rec.get("weight_percent") or rec.get("weight") or "0").strip()
    try:
        weight = float(raw)
    except ValueError:
        weight = 0.0
    if weight != weight:
        weight = 0.0
    gender = _norm(str(rec.get("gender") or "")) or None
    return WeightEntry(test_type=test_type, weight_percent=weight, gender=gender, label=str(rec.get("label") or "").strip())


def weights_for_gender(entries: Iterable[WeightEntry], gender: str) -> List[WeightEntry]:
    g = _norm(gender)
    return [
        w for w in entries
        if w.test_type and w.weight_percent > 0 and (w.gender is None or _norm(w.gender) == g)
    ]


def check_weights(entries: Iterable[WeightEntry]) -> float:
    """Return the weight total, raising ``ConfigError`` unless it is 100."""
    entries = list(entries)
    if not entries:
        raise NoWeightedTests("No tests with a weight above 0 are defined")
    total = sum(w.weight_percent for w in entries)
    if abs(total - config.WEIGHT_TOTAL) > config.WEIGHT_TOLERANCE:
        raise WeightSumMismatch(total)
    return total


def weighted_composite(scores: Mapping[str, Optional[int]], entries: Iterable[WeightEntry]) -> tuple[int, float]:
    """Floor of the weight-averaged score over the tests that were graded.

    ``scores[test_type]`` is ``None`` (or absent) for an excluded test; its
    weight leaves the denominator instead of counting as zero. Returns
    ``(grade, used_weight)``.
    """
    weighted_sum = 0.0
    used = 0.0
    for w in entries:
        score = scores.get(w.test_type)
        if score is None:
            continue
        weighted_sum += float(score) * w.weight_percent
        used += w.weight_percent
    if used <= 0:
        raise NoGradableTests("Cannot compute a final grade: no valid weights or missing score tables")
    # float noise: 85.99999999 must still floor to 86
    return int(math.floor(weighted_sum / used + _FLOAT_EPS)), used


__all__ = ["weight_from_record", "weights_for_gender", "check_weights", "weighted_composite"]
