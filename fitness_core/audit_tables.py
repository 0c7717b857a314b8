from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from . import config
from .aggregate import weight_from_record, weights_for_gender
from .benchmarks import BenchmarkTable
from .datasource import CsvSource, DataSource
from .errors import DataUnavailable
from .types import INPUT_FORMATS

log = logging.getLogger(__name__)


def _blank_test(fmt: str) -> dict[str, object]:
    return {"input_format": fmt, "has_table": False, "rows": 0, "columns": [], "endpoints": 0}


def _genders(source: DataSource, weight_genders: Iterable[str | None]) -> list[str]:
    found = [o.value.strip().lower() for o in source.options() if o.field == "gender"]
    found += [g for g in weight_genders if g]
    return list(dict.fromkeys(found))


def audit_source(source: DataSource) -> dict[str, object]:
    """Check a data source for problems that would break or skew grading."""
    warnings: list[str] = []
    tests: dict[str, dict[str, object]] = {}
    definitions = source.test_definitions()
    endpoints = source.endpoint_records()

    for d in definitions:
        data = tests.setdefault(d.test_type, _blank_test(d.input_format))
        if d.input_format not in INPUT_FORMATS:
            warnings.append(f"{d.test_type} has unknown input_format {d.input_format!r}")
        data["endpoints"] = sum(1 for r in endpoints if r.get("test_type") == d.test_type)
        try:
            records = source.benchmark_records(d.test_type)
        except DataUnavailable as exc:
            warnings.append(f"{d.test_type} score table unreadable: {exc}")
            continue
        if records is None:
            continue
        table = BenchmarkTable.from_records(d.test_type, records, strict=False)
        data["has_table"] = True
        data["rows"] = len(table.rows)
        data["columns"] = sorted(table.columns)
        if not table.rows:
            warnings.append(f"{d.test_type} score table has no rows")
        for prev, cur in zip(table.rows, table.rows[1:]):
            if cur.final_score > prev.final_score:
                warnings.append(
                    f"{d.test_type} score table not ordered best to worst ({prev.final_score} then {cur.final_score})"
                )
                break

    entries = [weight_from_record(r) for r in source.weight_records()]
    totals: dict[str, float] = {}
    for gender in _genders(source, (w.gender for w in entries)) or ["all"]:
        weighted = weights_for_gender(entries, gender)
        total = sum(w.weight_percent for w in weighted)
        totals[gender] = total
        if not weighted:
            warnings.append(f"{gender} has no tests with weight > 0")
        elif abs(total - config.WEIGHT_TOTAL) > config.WEIGHT_TOLERANCE:
            warnings.append(f"{gender} weights sum to {total:g}% (expected {config.WEIGHT_TOTAL:g}%)")

    for w in entries:
        if w.weight_percent <= 0:
            continue
        if w.test_type not in tests:
            warnings.append(f"weighted test {w.test_type} has no definition")
        elif not tests[w.test_type]["has_table"]:
            warnings.append(f"weighted test {w.test_type} has no score table")

    return {"tests": tests, "weight_totals": totals, "warnings": warnings}


def print_report(summary: dict[str, object]) -> None:
    tests: dict[str, dict[str, object]] = summary["tests"]  # type: ignore[assignment]
    print("=== Benchmark Tables ===")
    for name in sorted(tests):
        data = tests[name]
        cols = data["columns"]
        print(
            f"{name} [{data['input_format']}]  table={'yes' if data['has_table'] else 'no'}"
            f"  rows={data['rows']}  columns={len(cols)}  endpoints={data['endpoints']}"  # type: ignore[arg-type]
        )

    print("\nWeight totals:", summary["weight_totals"])
    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit fitness grading tables")
    parser.add_argument("--data-dir", default=config.DATA_DIR, help="directory of CSV tables (default: bundled)")
    parser.add_argument("--out", type=Path, default=None, help="also write the summary as JSON")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    try:
        summary = audit_source(CsvSource(args.data_dir))
    except DataUnavailable as exc:
        log.error("%s", exc)
        return 1
    print_report(summary)
    if args.out:
        write_summary(summary, args.out)
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
