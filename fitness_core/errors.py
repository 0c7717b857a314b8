"""Exceptions raised by the grading engine.

Four families are distinguished because callers recover from them
differently:

* ``ValidationError``: the raw input is malformed; re-prompt the user.
* ``BenchmarkLookupError``: no benchmark data for a test or demographic;
  fatal for a single test, excluded from a composite.
* ``ConfigError``: weights or tables are inconsistent; blocks a composite
  before any test is graded.
* ``DataUnavailable``: the data source could not be read.
"""
from __future__ import annotations

from typing import Dict, Optional


class GradingError(Exception):
    """Base exception for the grading engine."""

    code: str = "GradingError"

    def __init__(self, message: str, test_type: Optional[str] = None) -> None:
        self.message = message
        self.test_type = test_type
        super().__init__(message)


# ---- validation ----
class ValidationError(GradingError):
    code = "ValidationError"


class EmptyInput(ValidationError):
    code = "EmptyInput"


class MalformedTime(ValidationError):
    code = "MalformedTime"


class OutOfRangeTime(ValidationError):
    code = "OutOfRangeTime"


class ZeroTime(ValidationError):
    code = "ZeroTime"


class MalformedCount(ValidationError):
    code = "MalformedCount"


class NegativeOrZeroCount(ValidationError):
    code = "NegativeOrZeroCount"


class MalformedDecimal(ValidationError):
    code = "MalformedDecimal"


class NonPositiveDecimal(ValidationError):
    code = "NonPositiveDecimal"


class UnknownFormat(ValidationError):
    code = "UnknownFormat"


class InvalidTimeFormat(ValidationError):
    code = "InvalidTimeFormat"


class UnknownTestType(ValidationError):
    code = "UnknownTestType"


class InputErrors(ValidationError):
    """Several fields of one composite submission failed validation."""

    code = "InputErrors"

    def __init__(self, errors: Dict[str, ValidationError]) -> None:
        self.errors = dict(errors)
        names = ", ".join(sorted(self.errors))
        super().__init__(f"Please fix the invalid results: {names}")


# ---- lookup ----
class BenchmarkLookupError(GradingError):
    code = "LookupError"


class NoBenchmarkData(BenchmarkLookupError):
    code = "NoBenchmarkData"


class MissingBenchmarkColumn(BenchmarkLookupError):
    code = "MissingBenchmarkColumn"

    def __init__(self, message: str, test_type: Optional[str] = None, column: Optional[str] = None) -> None:
        self.column = column
        super().__init__(message, test_type=test_type)


class DegenerateBenchmark(BenchmarkLookupError):
    code = "DegenerateBenchmark"


# ---- configuration ----
class ConfigError(GradingError):
    code = "ConfigError"


class WeightSumMismatch(ConfigError):
    code = "WeightSumMismatch"

    def __init__(self, actual: float) -> None:
        self.actual = actual
        super().__init__(f"Test weights must sum to 100% (got {actual:g}%)")


class NoWeightedTests(ConfigError):
    code = "NoWeightedTests"


class UnorderedBenchmark(ConfigError):
    code = "UnorderedBenchmark"


class NoGradableTests(GradingError):
    code = "NoGradableTests"


# ---- data source ----
class DataUnavailable(GradingError):
    code = "DataUnavailable"

    def __init__(self, message: str, source: Optional[str] = None, cause: Optional[BaseException] = None) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


__all__ = [
    "GradingError",
    "ValidationError",
    "EmptyInput",
    "MalformedTime",
    "OutOfRangeTime",
    "ZeroTime",
    "MalformedCount",
    "NegativeOrZeroCount",
    "MalformedDecimal",
    "NonPositiveDecimal",
    "UnknownFormat",
    "InvalidTimeFormat",
    "UnknownTestType",
    "InputErrors",
    "BenchmarkLookupError",
    "NoBenchmarkData",
    "MissingBenchmarkColumn",
    "DegenerateBenchmark",
    "ConfigError",
    "WeightSumMismatch",
    "NoWeightedTests",
    "UnorderedBenchmark",
    "NoGradableTests",
    "DataUnavailable",
]
