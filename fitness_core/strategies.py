"""The two grading strategies.

``Interpolation`` maps a value linearly between a best (``top``) and a worst
(``bottom``) benchmark onto [INTERP_FLOOR, SCORE_CEIL]. ``ThresholdScan``
walks an ordered score table and awards the first row the value meets.
Both expose ``name`` and ``grade(value) -> int``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from . import config
from .canonical import Number, canonicalize, parse_benchmark
from .errors import DegenerateBenchmark
from .types import EndpointBenchmark, is_lower_better

log = logging.getLogger(__name__)


def round_half_up(x: float) -> int:
    """Round to nearest integer, halves going up (77.5 -> 78)."""
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class Interpolation:
    top: float
    bottom: float
    lower_is_better: bool
    name: str = "interpolation"

    @classmethod
    def from_endpoints(cls, ep: EndpointBenchmark, fmt: str) -> "Interpolation":
        return cls(
            top=float(canonicalize(ep.top_score, fmt)),
            bottom=float(canonicalize(ep.bottom_score, fmt)),
            lower_is_better=is_lower_better(fmt),
        )

    def grade(self, value: Number) -> int:
        s = float(value)
        ceil, floor = float(config.SCORE_CEIL), float(config.INTERP_FLOOR)
        span = ceil - floor
        top, bottom = self.top, self.bottom
        if top == bottom:
            if s == top:
                return int(ceil)
            raise DegenerateBenchmark(f"Benchmark endpoints coincide at {top:g}; cannot interpolate {s:g}")

        if self.lower_is_better:
            if s <= top:
                score = ceil
            elif s >= bottom:
                score = floor
            else:
                score = floor + span * (bottom - s) / (bottom - top)
        else:
            if s >= top:
                score = ceil
            elif s <= bottom:
                score = floor
            else:
                score = floor + span * (s - bottom) / (top - bottom)
        return round_half_up(score)


@dataclass(frozen=True)
class ThresholdScan:
    rows: Tuple[Tuple[int, str], ...]
    input_format: str
    floor_score: int
    name: str = "threshold"

    @classmethod
    def from_column(cls, rows: Sequence[Tuple[int, str]], fmt: str, floor_score: int) -> "ThresholdScan":
        return cls(rows=tuple(rows), input_format=fmt, floor_score=int(floor_score))

    def grade(self, value: Number) -> int:
        s = float(value)
        lower = is_lower_better(self.input_format)
        for final_score, cell in self.rows:
            threshold = parse_benchmark(cell, self.input_format)
            if threshold is None:
                continue
            if (lower and s <= threshold) or (not lower and s >= threshold):
                return int(final_score)
        log.debug("no threshold met for %s, floor %d", value, self.floor_score)
        return self.floor_score


GradingStrategy = Union[Interpolation, ThresholdScan]

__all__ = ["Interpolation", "ThresholdScan", "GradingStrategy", "round_half_up"]
