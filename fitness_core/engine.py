# fitness_core/engine.py
from __future__ import annotations
from typing import Dict, List, Mapping, Optional
import logging

from . import config
from .aggregate import check_weights, weight_from_record, weighted_composite, weights_for_gender
from .benchmarks import find_endpoints
from .cache import BenchmarkCache
from .canonical import canonicalize
from .config import get_strategy
from .datasource import CsvSource, DataSource, Record
from .errors import (
    BenchmarkLookupError,
    ConfigError,
    InputErrors,
    InvalidTimeFormat,
    UnknownTestType,
    ValidationError,
)
from .strategies import GradingStrategy, Interpolation, ThresholdScan
from .tiers import input_hint, tier_message
from .types import (
    CompositeResult,
    GradingResult,
    OptionEntry,
    TestDefinition,
    ValidationOutcome,
    WeightEntry,
)
from .validators import validate, validate_input

log = logging.getLogger(__name__)

# weighted tests with no definition are read as counts
DEFAULT_FORMAT = "count"


class GradingSession:
    """Grading API for one session.

    Test definitions, endpoint records, weights and benchmark tables are read
    from ``source`` on first use and kept for the life of the session. Nothing
    is shared between sessions.
    """

    def __init__(self, source: Optional[DataSource] = None, cfg: Optional[dict] = None) -> None:
        cfg = dict(cfg or {})
        self.source: DataSource = source if source is not None else CsvSource(cfg.get("DATA_DIR", config.DATA_DIR))
        self.strategy = get_strategy(cfg)
        self.composite_grade = str(cfg.get("COMPOSITE_GRADE", config.COMPOSITE_GRADE))
        self.allow_zero_count: Optional[bool] = cfg.get("COUNT_ALLOW_ZERO")
        self.cache = BenchmarkCache(self.source, strict=cfg.get("STRICT_TABLE_ORDER"))
        self._definitions: Optional[Dict[str, TestDefinition]] = None
        self._options: Optional[List[OptionEntry]] = None
        self._endpoints: Optional[List[Record]] = None
        self._weights: Optional[List[WeightEntry]] = None

    # ---- reference data ----
    def test_definitions(self) -> List[TestDefinition]:
        if self._definitions is None:
            defs = self.source.test_definitions()
            self._definitions = {d.test_type: d for d in defs}
            log.info("loaded %d test definition(s)", len(self._definitions))
        return list(self._definitions.values())

    def definition(self, test_type: str) -> TestDefinition:
        self.test_definitions()
        assert self._definitions is not None
        defn = self._definitions.get(test_type)
        if defn is None:
            raise UnknownTestType(f"Invalid test type: {test_type!r}", test_type=test_type)
        return defn

    def options(self, field: Optional[str] = None) -> List[OptionEntry]:
        if self._options is None:
            self._options = self.source.options()
        if field is None:
            return list(self._options)
        return [o for o in self._options if o.field == field]

    def weights(self) -> List[WeightEntry]:
        if self._weights is None:
            self._weights = [weight_from_record(r) for r in self.source.weight_records()]
        return list(self._weights)

    def endpoint_records(self) -> List[Record]:
        if self._endpoints is None:
            self._endpoints = self.source.endpoint_records()
        return list(self._endpoints)

    def preload(self, test_types: Optional[List[str]] = None) -> List[str]:
        if test_types is None:
            test_types = [d.test_type for d in self.test_definitions()]
        return self.cache.preload(test_types)

    @staticmethod
    def input_hint(fmt: str) -> str:
        return input_hint(fmt)

    # ---- grading ----
    def validate_input(self, raw: Optional[str], fmt: str) -> ValidationOutcome:
        return validate_input(raw, fmt, allow_zero_count=self.allow_zero_count)

    def resolve_strategy(
        self,
        test_type: str,
        gender: str,
        grade: str,
        strategy: Optional[str] = None,
    ) -> GradingStrategy:
        """Pick the strategy for one test and demographic.

        ``threshold`` needs the test's score table, ``interpolation`` needs an
        endpoint record. ``auto`` prefers the score table when the source has
        one for this test.
        """
        mode = (strategy or self.strategy).lower().strip()
        if mode not in config.STRATEGIES:
            raise ConfigError(f"Unknown grading strategy: {mode!r}")
        fmt = self.definition(test_type).input_format
        if mode == "auto":
            mode = "threshold" if self.cache.available(test_type) else "interpolation"

        if mode == "threshold":
            table = self.cache.get(test_type)
            return ThresholdScan.from_column(table.column(gender, grade), fmt, table.floor_score())

        ep = find_endpoints(self.endpoint_records(), test_type, gender, grade)
        try:
            return Interpolation.from_endpoints(ep, fmt)
        except (InvalidTimeFormat, ValueError) as exc:
            raise ConfigError(
                f"Malformed benchmark endpoints for {test_type!r} ({ep.top_score!r}, {ep.bottom_score!r})",
                test_type=test_type,
            ) from exc

    def grade_single_test(
        self,
        raw: str,
        test_type: str,
        grade: str,
        gender: str,
        *,
        strategy: Optional[str] = None,
    ) -> GradingResult:
        defn = self.definition(test_type)
        validate(raw, defn.input_format, allow_zero_count=self.allow_zero_count)
        value = canonicalize(raw, defn.input_format)
        strat = self.resolve_strategy(test_type, gender, grade, strategy)
        score = strat.grade(value)
        log.debug("graded %s=%r (%s, %s/%s) -> %d", test_type, raw, strat.name, gender, grade, score)
        return GradingResult(
            test_type=test_type,
            final_score=score,
            tier_message=tier_message(score),
            strategy=strat.name,  # type: ignore[arg-type]
        )

    def _format_for(self, test_type: str) -> str:
        try:
            return self.definition(test_type).input_format
        except UnknownTestType:
            return DEFAULT_FORMAT

    def grade_composite(
        self,
        inputs_by_test_type: Mapping[str, Optional[str]],
        gender: str,
        grade: Optional[str] = None,
    ) -> CompositeResult:
        """Weighted final grade over every test weighted for ``gender``.

        Weights are checked before anything else. Every weighted test's input
        is then validated and all failures are raised together as
        ``InputErrors``. Tests without benchmark data are left out and their
        weight leaves the denominator.
        """
        grade = str(grade if grade is not None else self.composite_grade)
        weighted = weights_for_gender(self.weights(), gender)
        check_weights(weighted)

        formats = {w.test_type: self._format_for(w.test_type) for w in weighted}
        errors: Dict[str, ValidationError] = {}
        for w in weighted:
            try:
                validate(inputs_by_test_type.get(w.test_type), formats[w.test_type], allow_zero_count=self.allow_zero_count)
            except ValidationError as exc:
                errors[w.test_type] = exc
        if errors:
            raise InputErrors(errors)

        self.cache.preload(w.test_type for w in weighted)

        scores: Dict[str, Optional[int]] = {}
        excluded: List[str] = []
        for w in weighted:
            fmt = formats[w.test_type]
            try:
                table = self.cache.get(w.test_type)
                scan = ThresholdScan.from_column(table.column(gender, grade), fmt, table.floor_score())
            except BenchmarkLookupError as exc:
                log.info("excluding %s from composite: %s", w.test_type, exc)
                scores[w.test_type] = None
                excluded.append(w.test_type)
                continue
            value = canonicalize(str(inputs_by_test_type[w.test_type]), fmt)
            scores[w.test_type] = scan.grade(value)

        final, used = weighted_composite(scores, weighted)
        log.info("composite for %s/%s: %d over %.3g%% weight (%d excluded)", gender, grade, final, used, len(excluded))
        return CompositeResult(
            final_grade=final,
            gender=gender,
            grade=grade,
            used_weight=used,
            per_test={k: v for k, v in scores.items() if v is not None},
            excluded=excluded,
        )


__all__ = ["GradingSession", "DEFAULT_FORMAT"]
