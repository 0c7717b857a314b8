from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Tuple

from . import config
from .benchmarks import BenchmarkTable
from .datasource import DataSource
from .errors import ConfigError, DataUnavailable, NoBenchmarkData

log = logging.getLogger(__name__)

_MISSING = object()


class BenchmarkCache:
    """Write-once cache of benchmark tables for one grading session.

    A table is fetched at most once. A source answering "no such table" is
    remembered as missing, and a table that fails its ordering check is
    remembered with its ``ConfigError``. A ``DataUnavailable`` failure is not
    stored, so the next lookup fetches again.
    """

    def __init__(self, source: DataSource, *, strict: Optional[bool] = None) -> None:
        self._source = source
        self._strict = strict
        self._tables: Dict[str, object] = {}

    def __contains__(self, test_type: str) -> bool:
        return test_type in self._tables

    def _fetch(self, test_type: str) -> object:
        records = self._source.benchmark_records(test_type)
        if records is None:
            return _MISSING
        try:
            return BenchmarkTable.from_records(test_type, records, strict=self._strict)
        except ConfigError as exc:
            return exc

    def get(self, test_type: str) -> BenchmarkTable:
        """Return the table or raise ``NoBenchmarkData`` or its stored ``ConfigError``."""
        if test_type not in self._tables:
            self._tables[test_type] = self._fetch(test_type)
            log.debug("loaded benchmark table %s", test_type)
        entry = self._tables[test_type]
        if entry is _MISSING:
            raise NoBenchmarkData(f"No benchmark table for test {test_type!r}", test_type=test_type)
        if isinstance(entry, ConfigError):
            raise entry
        return entry  # type: ignore[return-value]

    def available(self, test_type: str) -> bool:
        try:
            self.get(test_type)
        except NoBenchmarkData:
            return False
        return True

    def preload(self, test_types: Iterable[str], max_workers: Optional[int] = None) -> List[str]:
        """Fetch several tables in parallel; returns the types that failed.

        Results are stored from the calling thread once all fetches finish.
        """
        pending = [t for t in dict.fromkeys(test_types) if t not in self._tables]
        if not pending:
            return []
        workers = max(1, int(max_workers or config.PRELOAD_WORKERS))
        failed: List[str] = []
        fetched: List[Tuple[str, object]] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self._fetch, t): t for t in pending}
            for future, test_type in futures.items():
                try:
                    fetched.append((test_type, future.result()))
                except DataUnavailable as exc:
                    log.warning("could not load benchmark table %s: %s", test_type, exc)
                    failed.append(test_type)
        for test_type, entry in fetched:
            self._tables.setdefault(test_type, entry)
        log.info("preloaded %d benchmark table(s), %d failed", len(fetched), len(failed))
        return failed


__all__ = ["BenchmarkCache"]
