"""Benchmark tables and demographic lookups.

Two benchmark shapes are supported:

* endpoint records (``test_type, gender, grade, top_score, bottom_score``),
  one per demographic, consumed by interpolation;
* per-test score tables whose rows run from the best ``final_score`` to the
  worst, with one column per ``<gender>_<prefix><grade>``, consumed by the
  threshold scan.

Gender and grade are normalized once here (trimmed, lower-cased) so callers
never build column names themselves.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from . import config
from .errors import MissingBenchmarkColumn, NoBenchmarkData, UnorderedBenchmark
from .types import BenchmarkRow, EndpointBenchmark

log = logging.getLogger(__name__)

FINAL_SCORE_COL = "final_score"


def _norm(value: object) -> str:
    return str(value if value is not None else "").strip().lower()


def column_key(gender: str, grade: str | int) -> str:
    """Normalized column id for a (gender, grade) pair, e.g. ``male_grade9``."""
    prefix = _norm(config.GRADE_PREFIX)
    g = _norm(grade)
    if prefix and g.startswith(prefix):
        g = g[len(prefix):]
    return f"{_norm(gender)}_{prefix}{g}"


@dataclass(frozen=True)
class BenchmarkTable:
    test_type: str
    rows: Tuple[BenchmarkRow, ...]
    columns: frozenset[str]

    @classmethod
    def from_records(
        cls,
        test_type: str,
        records: Iterable[Mapping[str, object]],
        *,
        strict: Optional[bool] = None,
    ) -> "BenchmarkTable":
        """Build a table from string records, keeping their order.

        Rows with a non-integer ``final_score`` are dropped. When ``strict``
        (default ``config.STRICT_TABLE_ORDER``) is on, scores that rise from
        one row to the next raise ``UnorderedBenchmark``.
        """
        strict = config.STRICT_TABLE_ORDER if strict is None else strict
        rows: List[BenchmarkRow] = []
        columns: set[str] = set()
        for idx, rec in enumerate(records):
            cells = {_norm(k): str(v if v is not None else "").strip() for k, v in rec.items() if k is not None}
            raw_score = cells.pop(FINAL_SCORE_COL, "")
            try:
                value = float(raw_score)
                if not value.is_integer():
                    raise ValueError(raw_score)
                score = int(value)
            except (ValueError, OverflowError):
                log.debug("%s: row %d has no usable final_score (%r), skipped", test_type, idx, raw_score)
                continue
            columns.update(cells)
            rows.append(BenchmarkRow(final_score=score, cells=cells))

        if strict:
            for prev, cur in zip(rows, rows[1:]):
                if cur.final_score > prev.final_score:
                    raise UnorderedBenchmark(
                        f"Benchmark table {test_type!r} is not ordered best to worst "
                        f"({prev.final_score} followed by {cur.final_score})",
                        test_type=test_type,
                    )
        return cls(test_type=test_type, rows=tuple(rows), columns=frozenset(columns))

    def has_column(self, gender: str, grade: str | int) -> bool:
        return column_key(gender, grade) in self.columns

    def column(self, gender: str, grade: str | int) -> List[Tuple[int, str]]:
        """``(final_score, cell)`` pairs for one demographic, in table order."""
        key = column_key(gender, grade)
        if key not in self.columns:
            raise MissingBenchmarkColumn(
                f"No benchmark column {key!r} for test {self.test_type!r}",
                test_type=self.test_type,
                column=key,
            )
        return [(row.final_score, row.cells.get(key, "")) for row in self.rows]

    def floor_score(self) -> int:
        if not self.rows:
            return int(config.SCAN_MIN_SCORE)
        return self.rows[-1].final_score


def endpoint_from_record(rec: Mapping[str, object]) -> EndpointBenchmark:
    return EndpointBenchmark(
        test_type=str(rec.get("test_type") or "").strip(),
        gender=_norm(rec.get("gender")),
        grade=_norm(rec.get("grade")),
        top_score=str(rec.get("top_score") or "").strip(),
        bottom_score=str(rec.get("bottom_score") or "").strip(),
    )


def find_endpoints(
    records: Iterable[Mapping[str, object]],
    test_type: str,
    gender: str,
    grade: str | int,
) -> EndpointBenchmark:
    """Return the endpoint record for one demographic or raise ``NoBenchmarkData``."""
    g, gr = _norm(gender), _norm(grade)
    for rec in records:
        ep = endpoint_from_record(rec)
        if ep.test_type == test_type and ep.gender == g and ep.grade == gr:
            return ep
    raise NoBenchmarkData(
        f"No benchmark data for test {test_type!r}, gender {gender!r}, grade {grade!r}",
        test_type=test_type,
    )


def has_endpoints(records: Iterable[Mapping[str, object]], test_type: str) -> bool:
    return any(str(rec.get("test_type") or "").strip() == test_type for rec in records)


__all__ = [
    "BenchmarkTable",
    "column_key",
    "endpoint_from_record",
    "find_endpoints",
    "has_endpoints",
]
