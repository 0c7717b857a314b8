from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import logging, os, typing as t

# ---- Engine imports ----
from fitness_core.engine import GradingSession
from fitness_core.config import load_config
from fitness_core.errors import (
    BenchmarkLookupError,
    ConfigError,
    DataUnavailable,
    GradingError,
    InputErrors,
    NoGradableTests,
    ValidationError,
)
from fitness_core.summary import benchmark_summary, to_csv as summary_to_csv, to_json as summary_to_json

log = logging.getLogger(__name__)

# one grading session per process; its table cache is shared by all requests
SESSION = GradingSession(cfg=load_config())

app = FastAPI(title="Fitness Grader API")


@app.get("/")
def root():
    return {"status": "ok", "service": "fitness-grader-api"}


ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class ValidateReq(BaseModel):
    result: str | None = None
    input_format: str | None = None
    test_type: str | None = None

class GradeReq(BaseModel):
    test_type: str
    grade: str
    gender: str
    result: str
    strategy: str | None = None   # "auto" | "interpolation" | "threshold"

class CompositeReq(BaseModel):
    gender: str
    grade: str | None = None
    results: dict[str, str | None] = {}

# ---- Helpers ----
_STATUS: tuple[tuple[type, int], ...] = (
    (ValidationError, 422),
    (NoGradableTests, 422),
    (BenchmarkLookupError, 404),
    (ConfigError, 409),
    (DataUnavailable, 503),
)


def _error_detail(exc: GradingError) -> dict[str, t.Any]:
    detail: dict[str, t.Any] = {"code": exc.code, "message": exc.message}
    if exc.test_type:
        detail["test_type"] = exc.test_type
    if isinstance(exc, InputErrors):
        detail["fields"] = {k: {"code": e.code, "message": e.message} for k, e in exc.errors.items()}
    return detail


def _http_error(exc: GradingError) -> HTTPException:
    status = next((code for cls, code in _STATUS if isinstance(exc, cls)), 400)
    if status >= 500:
        log.error("grading request failed: %s", exc)
    return HTTPException(status, _error_detail(exc))


def _serialize_definition(d) -> dict[str, t.Any]:
    return {
        "test_type": d.test_type,
        "title": d.title,
        "description": d.description,
        "input_format": d.input_format,
        "hint": SESSION.input_hint(d.input_format),
    }

# ---- Health ----
@app.get("/health")
def health():
    return {
        "data_dir": str(getattr(SESSION.source, "root", "")),
        "strategy": SESSION.strategy,
        "composite_grade": SESSION.composite_grade,
    }

# ---- Reference data ----
@app.get("/tests")
def list_tests():
    try:
        return {"tests": [_serialize_definition(d) for d in SESSION.test_definitions()]}
    except GradingError as exc:
        raise _http_error(exc)


@app.get("/options/{field}")
def list_options(field: str):
    try:
        opts = SESSION.options(field)
    except GradingError as exc:
        raise _http_error(exc)
    return {"field": field, "options": [{"value": o.value, "label": o.label} for o in opts]}


@app.get("/benchmarks/summary")
def get_summary():
    try:
        entries = benchmark_summary(SESSION.test_definitions(), SESSION.endpoint_records())
    except GradingError as exc:
        raise _http_error(exc)
    return summary_to_json(entries)


@app.get("/benchmarks/summary.csv")
def get_summary_csv():
    try:
        entries = benchmark_summary(SESSION.test_definitions(), SESSION.endpoint_records())
    except GradingError as exc:
        raise _http_error(exc)
    return Response(
        content=summary_to_csv(entries),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"benchmarks.csv\""},
    )

# ---- Grading ----
@app.post("/validate")
def validate(req: ValidateReq):
    fmt = req.input_format
    try:
        if not fmt and req.test_type:
            fmt = SESSION.definition(req.test_type).input_format
    except GradingError as exc:
        raise _http_error(exc)
    outcome = SESSION.validate_input(req.result, fmt or "")
    return {"valid": outcome.valid, "code": outcome.code, "message": outcome.message}


@app.post("/grade")
def grade(req: GradeReq):
    try:
        res = SESSION.grade_single_test(req.result, req.test_type, req.grade, req.gender, strategy=req.strategy)
    except GradingError as exc:
        raise _http_error(exc)
    return {
        "test_type": res.test_type,
        "final_score": res.final_score,
        "message": res.tier_message,
        "strategy": res.strategy,
    }


@app.post("/grade/composite")
def grade_composite(req: CompositeReq):
    try:
        res = SESSION.grade_composite(req.results, req.gender, req.grade)
    except GradingError as exc:
        raise _http_error(exc)
    return {
        "final_grade": res.final_grade,
        "gender": res.gender,
        "grade": res.grade,
        "used_weight": res.used_weight,
        "per_test": res.per_test,
        "excluded": res.excluded,
    }
