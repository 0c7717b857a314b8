from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


SCORE_CEIL: int = 100
INTERP_FLOOR: int = 55
SCAN_MIN_SCORE: int = 40

WEIGHT_TOTAL: float = 100.0
WEIGHT_TOLERANCE: float = 0.001

GRADE_PREFIX: str = "grade"
COMPOSITE_GRADE: str = "12"

# zero repetitions is rejected unless this is on
COUNT_ALLOW_ZERO: bool = False
STRICT_TABLE_ORDER: bool = True

# "auto" | "interpolation" | "threshold"
STRATEGY: str = "auto"
STRATEGIES: tuple[str, ...] = ("auto", "interpolation", "threshold")

PRELOAD_WORKERS: int = 4

# None means the CSV tables bundled with the package
DATA_DIR: str | None = None

TIER_BANDS: tuple[tuple[int, str], ...] = (
    (100, "Excellent work! Outstanding performance!"),
    (80, "Very good performance!"),
    (60, "Fair performance, keep training!"),
)
TIER_FALLBACK: str = "Keep training, you will improve!"

INPUT_HINTS: dict[str, str] = {
    "time": "e.g. 8:30",
    "count": "e.g. 20",
    "seconds": "e.g. 12.5",
    "decimal": "e.g. 2.5",
}
INPUT_HINT_DEFAULT: str = "Enter a result"

# // env overrides for deployments; defaults match the bundled tables.
COUNT_ALLOW_ZERO = _env_bool("COUNT_ALLOW_ZERO", COUNT_ALLOW_ZERO)
STRICT_TABLE_ORDER = _env_bool("STRICT_TABLE_ORDER", STRICT_TABLE_ORDER)
GRADE_PREFIX = _env_str("GRADE_PREFIX", GRADE_PREFIX)
COMPOSITE_GRADE = _env_str("COMPOSITE_GRADE", COMPOSITE_GRADE)
STRATEGY = _env_str("STRATEGY", STRATEGY).lower()
WEIGHT_TOLERANCE = _env_float("WEIGHT_TOLERANCE", WEIGHT_TOLERANCE)
PRELOAD_WORKERS = _env_int("PRELOAD_WORKERS", PRELOAD_WORKERS)
DATA_DIR = os.getenv("DATA_DIR") or DATA_DIR


def _env_true(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes", "on")


def load_config(path: str | os.PathLike[str] = "config.json") -> dict:
    """Merge an optional JSON config file with environment overrides.

    The module constants above hold the defaults; the returned dict only
    carries keys that were set explicitly, so callers fall back with
    ``cfg.get(KEY, config.KEY)``.
    """
    cfg: dict = {}
    p = pathlib.Path(path)
    if p.exists():
        try:
            cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            cfg = {}
    e = os.environ
    if e.get("DATA_DIR"): cfg["DATA_DIR"] = e.get("DATA_DIR")
    if e.get("STRATEGY"): cfg["STRATEGY"] = e.get("STRATEGY", "").strip().lower()
    if e.get("COMPOSITE_GRADE"): cfg["COMPOSITE_GRADE"] = e.get("COMPOSITE_GRADE", "").strip()
    if e.get("COUNT_ALLOW_ZERO"): cfg["COUNT_ALLOW_ZERO"] = _env_true("COUNT_ALLOW_ZERO")
    if e.get("STRICT_TABLE_ORDER"): cfg["STRICT_TABLE_ORDER"] = _env_true("STRICT_TABLE_ORDER")
    return cfg


def get_strategy(cfg: dict) -> str:
    s = str(cfg.get("STRATEGY") or STRATEGY).lower().strip()
    return s if s in STRATEGIES else "auto"
