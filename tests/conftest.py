from __future__ import annotations

import pytest

from fitness_core.datasource import InMemorySource
from fitness_core.engine import GradingSession

FIELDS = [
    {"value": "run", "label": "2000m run", "description": "minutes:seconds", "input_format": "time"},
    {"value": "pushups", "label": "Push-ups", "description": "repetitions", "input_format": "count"},
    {"value": "sprint", "label": "100m sprint", "description": "seconds", "input_format": "seconds"},
    {"value": "jump", "label": "Long jump", "description": "meters", "input_format": "decimal"},
]

OPTIONS = [
    {"field": "gender", "value": "male", "label": "Boys"},
    {"field": "gender", "value": "female", "label": "Girls"},
    {"field": "grade", "value": "9", "label": "Grade 9"},
    {"field": "grade", "value": "12", "label": "Grade 12"},
]

ENDPOINTS = [
    {"test_type": "run", "gender": "male", "grade": "9", "top_score": "8:00", "bottom_score": "10:00"},
    {"test_type": "pushups", "gender": "male", "grade": "9", "top_score": "30", "bottom_score": "10"},
    {"test_type": "sprint", "gender": "Female ", "grade": " 12", "top_score": "14.0", "bottom_score": "18.0"},
    {"test_type": "jump", "gender": "male", "grade": "12", "top_score": "2.5", "bottom_score": "1.7"},
]

RUN_TABLE = [
    {"final_score": "100", "male_grade12": "9:00", "female_grade12": "10:15"},
    {"final_score": "90", "male_grade12": "9:30", "female_grade12": "10:45"},
    {"final_score": "80", "male_grade12": "10:00", "female_grade12": ""},
    {"final_score": "40", "male_grade12": "12:00", "female_grade12": "13:15"},
]

PUSHUPS_TABLE = [
    {"final_score": "100", "male_grade9": "25", "male_grade12": "40"},
    {"final_score": "95", "male_grade9": "20", "male_grade12": ""},
    {"final_score": "90", "male_grade9": "", "male_grade12": "30"},
    {"final_score": "40", "male_grade9": "10", "male_grade12": "10"},
]

WEIGHTS = [
    {"test_type": "run", "gender": "", "weight_percent": "40", "label": "Run"},
    {"test_type": "pushups", "gender": "", "weight_percent": "60", "label": "Push-ups"},
    {"test_type": "sprint", "gender": "", "weight_percent": "0", "label": "Sprint"},
]


def source_kwargs(**overrides) -> dict:
    """Small deterministic data set; keyword arguments replace whole tables."""

    kwargs = {
        "options": OPTIONS,
        "fields": FIELDS,
        "endpoints": ENDPOINTS,
        "tables": {"run": RUN_TABLE, "pushups": PUSHUPS_TABLE},
        "weights": WEIGHTS,
    }
    kwargs.update(overrides)
    return kwargs


def build_source(**overrides) -> InMemorySource:
    return InMemorySource(**source_kwargs(**overrides))


@pytest.fixture
def source() -> InMemorySource:
    return build_source()


@pytest.fixture
def session(source) -> GradingSession:
    return GradingSession(source)
