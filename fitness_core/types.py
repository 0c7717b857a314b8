from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Literal

InputFormat = Literal["time", "count", "seconds", "decimal"]
INPUT_FORMATS: tuple[str, ...] = ("time", "count", "seconds", "decimal")
LOWER_IS_BETTER: frozenset[str] = frozenset({"time", "seconds"})
StrategyName = Literal["interpolation", "threshold"]


def is_lower_better(fmt: str) -> bool:
    return fmt in LOWER_IS_BETTER


@dataclass(frozen=True)
class TestDefinition:
    test_type: str; title: str; description: str; input_format: str
    __test__ = False  # keep pytest from collecting this class


@dataclass(frozen=True)
class OptionEntry:
    field: str; value: str; label: str


@dataclass(frozen=True)
class BenchmarkRow:
    final_score: int
    cells: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EndpointBenchmark:
    test_type: str; gender: str; grade: str
    top_score: str
    bottom_score: str


@dataclass(frozen=True)
class WeightEntry:
    test_type: str
    weight_percent: float
    gender: Optional[str] = None
    label: str = ""


@dataclass
class GradingResult:
    test_type: str
    final_score: int
    tier_message: str
    strategy: StrategyName


@dataclass
class CompositeResult:
    final_grade: int
    gender: str
    grade: str
    used_weight: float
    per_test: Dict[str, int] = field(default_factory=dict)
    excluded: List[str] = field(default_factory=list)


@dataclass
class ValidationOutcome:
    valid: bool
    code: Optional[str] = None
    message: Optional[str] = None
