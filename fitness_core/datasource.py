"""Data sources: where options, test definitions, benchmarks and weights come from.

The engine only sees records (dicts of string fields). ``CsvSource`` reads
them from a directory laid out as::

    options.csv          field,value,label[,description,input_format]
    fields.csv           value,label,description,input_format   (optional)
    scores.csv           test_type,gender,grade,top_score,bottom_score
    scores/<test>.csv    final_score,<gender>_grade<grade>,...
    test_weights.csv     test_type,gender,weight_percent,label

``InMemorySource`` holds the same records directly and is what tests use.
"""
from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from .errors import DataUnavailable
from .types import OptionEntry, TestDefinition

log = logging.getLogger(__name__)

Record = Dict[str, str]

_SAFE_NAME_RX = re.compile(r"^[\w.-]+$")
BUNDLED_DATA_DIR = Path(__file__).with_name("data")


class DataSource(Protocol):
    def options(self) -> List[OptionEntry]: ...
    def test_definitions(self) -> List[TestDefinition]: ...
    def endpoint_records(self) -> List[Record]: ...
    def benchmark_records(self, test_type: str) -> Optional[List[Record]]: ...
    def weight_records(self) -> List[Record]: ...


def _clean(rec: Mapping[object, object]) -> Record:
    out: Record = {}
    for k, v in rec.items():
        if k is None:
            continue
        out[str(k).strip()] = "" if v is None else str(v).strip()
    return out


def option_from_record(rec: Mapping[str, str]) -> OptionEntry:
    return OptionEntry(
        field=str(rec.get("field") or "").strip(),
        value=str(rec.get("value") or "").strip(),
        label=str(rec.get("label") or "").strip(),
    )


def definition_from_record(rec: Mapping[str, str]) -> TestDefinition:
    return TestDefinition(
        test_type=str(rec.get("value") or rec.get("test_type") or "").strip(),
        title=str(rec.get("label") or rec.get("title") or "").strip(),
        description=str(rec.get("description") or "").strip(),
        input_format=str(rec.get("input_format") or "").strip().lower(),
    )


def definitions_from_records(fields: Sequence[Mapping[str, str]] | None, options: Sequence[Mapping[str, str]]) -> List[TestDefinition]:
    """Definitions come from ``fields`` when given, else from ``test_type`` option rows."""
    if fields:
        rows = list(fields)
    else:
        rows = [r for r in options if str(r.get("field") or "").strip() == "test_type"]
    defs = [definition_from_record(r) for r in rows]
    return [d for d in defs if d.test_type]


class InMemorySource:
    def __init__(
        self,
        *,
        options: Sequence[Mapping[str, str]] = (),
        fields: Sequence[Mapping[str, str]] | None = None,
        endpoints: Sequence[Mapping[str, str]] = (),
        tables: Mapping[str, Sequence[Mapping[str, str]]] | None = None,
        weights: Sequence[Mapping[str, str]] = (),
    ) -> None:
        self._options = [_clean(r) for r in options]
        self._fields = [_clean(r) for r in fields] if fields is not None else None
        self._endpoints = [_clean(r) for r in endpoints]
        self._tables = {k: [_clean(r) for r in v] for k, v in (tables or {}).items()}
        self._weights = [_clean(r) for r in weights]
        self.table_loads: Dict[str, int] = {}

    def options(self) -> List[OptionEntry]:
        return [option_from_record(r) for r in self._options]

    def test_definitions(self) -> List[TestDefinition]:
        return definitions_from_records(self._fields, self._options)

    def endpoint_records(self) -> List[Record]:
        return list(self._endpoints)

    def benchmark_records(self, test_type: str) -> Optional[List[Record]]:
        self.table_loads[test_type] = self.table_loads.get(test_type, 0) + 1
        rows = self._tables.get(test_type)
        return None if rows is None else list(rows)

    def weight_records(self) -> List[Record]:
        return list(self._weights)


def read_csv_records(path: Path) -> List[Record]:
    """Parse a CSV file into trimmed records; blank lines are skipped."""
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            if reader.fieldnames:
                reader.fieldnames = [h.strip() for h in reader.fieldnames]
            rows = [_clean(r) for r in reader]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise DataUnavailable(f"Failed to load {path}", source=str(path), cause=exc) from exc
    return [r for r in rows if any(v for v in r.values())]


class CsvSource:
    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root is not None else BUNDLED_DATA_DIR

    def _optional(self, name: str) -> Optional[List[Record]]:
        if not self.root.is_dir():
            raise DataUnavailable(f"Data directory not found: {self.root}", source=str(self.root))
        path = self.root / name
        if not path.exists():
            return None
        return read_csv_records(path)

    def options(self) -> List[OptionEntry]:
        return [option_from_record(r) for r in (self._optional("options.csv") or [])]

    def test_definitions(self) -> List[TestDefinition]:
        return definitions_from_records(self._optional("fields.csv"), self._optional("options.csv") or [])

    def endpoint_records(self) -> List[Record]:
        return self._optional("scores.csv") or []

    def benchmark_records(self, test_type: str) -> Optional[List[Record]]:
        if not _SAFE_NAME_RX.match(test_type or "") or test_type.startswith("."):
            log.warning("refusing benchmark lookup for unsafe test type %r", test_type)
            return None
        rows = self._optional(f"scores/{test_type}.csv")
        if rows is None:
            log.warning("missing score file for %s", test_type)
        return rows

    def weight_records(self) -> List[Record]:
        return self._optional("test_weights.csv") or []


__all__ = [
    "DataSource",
    "InMemorySource",
    "CsvSource",
    "read_csv_records",
    "option_from_record",
    "definition_from_record",
    "definitions_from_records",
    "BUNDLED_DATA_DIR",
]
