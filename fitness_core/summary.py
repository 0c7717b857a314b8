"""Per-test benchmark summaries ("Score 100: best - worst") in JSON/CSV."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping
import csv
import io

from .canonical import parse_benchmark
from .types import TestDefinition, is_lower_better

_FIELDS: tuple[str, ...] = (
    "test_type",
    "title",
    "gender",
    "best",
    "worst",
    "label",
)

NOT_AVAILABLE = "Not available"


def _top_range(values: List[str], fmt: str) -> tuple[str, str]:
    parsed = [(parse_benchmark(v, fmt), v) for v in values]
    usable = [(num, raw) for num, raw in parsed if num is not None]
    if not usable:
        return "", ""
    usable.sort(key=lambda p: p[0], reverse=not is_lower_better(fmt))
    return usable[0][1], usable[-1][1]


def benchmark_summary(
    definitions: Iterable[TestDefinition],
    endpoint_records: Iterable[Mapping[str, str]],
) -> List[Dict[str, Any]]:
    """One entry per (test, gender) with the range of top scores across grades.

    Tests without endpoint records get a single "Not available" entry.
    """
    records = list(endpoint_records)
    out: List[Dict[str, Any]] = []
    for d in definitions:
        rows = [r for r in records if str(r.get("test_type") or "").strip() == d.test_type]
        genders = list(dict.fromkeys(str(r.get("gender") or "").strip().lower() for r in rows))
        if not rows:
            out.append({"test_type": d.test_type, "title": d.title, "gender": "", "best": "", "worst": "", "label": NOT_AVAILABLE})
            continue
        for gender in genders:
            tops = [str(r.get("top_score") or "").strip() for r in rows if str(r.get("gender") or "").strip().lower() == gender]
            best, worst = _top_range(tops, d.input_format)
            label = f"Score 100: {best} - {worst}" if best else NOT_AVAILABLE
            out.append({"test_type": d.test_type, "title": d.title, "gender": gender, "best": best, "worst": worst, "label": label})
    return out


def to_json(entries: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    return {"benchmarks": [{k: str(e.get(k, "") or "") for k in _FIELDS} for e in entries]}


def to_csv(entries: Iterable[Dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for e in entries:
        writer.writerow({k: e.get(k, "") for k in _FIELDS})
    return buf.getvalue()


__all__ = ["benchmark_summary", "to_json", "to_csv", "NOT_AVAILABLE"]
