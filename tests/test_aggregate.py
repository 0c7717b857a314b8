from __future__ import annotations

import copy

import pytest

from fitness_core.aggregate import check_weights, weight_from_record, weighted_composite, weights_for_gender
from fitness_core.errors import NoGradableTests, NoWeightedTests, WeightSumMismatch
from fitness_core.types import WeightEntry

MALE = [WeightEntry("run", 40.0, "male"), WeightEntry("pushups", 60.0, "male")]


def test_weighted_composite_floors():
    grade, used = weighted_composite({"run": 80, "pushups": 90}, MALE)
    assert (grade, used) == (86, 100.0)
    grade, _ = weighted_composite({"run": 81, "pushups": 90}, MALE)
    assert grade == 86  # 86.4


def test_missing_test_leaves_the_denominator():
    grade, used = weighted_composite({"run": 80, "pushups": None}, MALE)
    assert (grade, used) == (80, 40.0)
    grade, used = weighted_composite({"run": 80}, MALE)
    assert (grade, used) == (80, 40.0)


def test_no_gradable_tests():
    with pytest.raises(NoGradableTests):
        weighted_composite({"run": None, "pushups": None}, MALE)


def test_inputs_are_not_mutated():
    scores = {"run": 80, "pushups": None}
    entries = list(MALE)
    before = (copy.deepcopy(scores), copy.deepcopy(entries))
    weighted_composite(scores, entries)
    assert (scores, entries) == before


def test_check_weights_tolerance():
    assert check_weights(MALE) == 100.0
    assert check_weights([WeightEntry("a", 33.3333), WeightEntry("b", 66.6667)]) == pytest.approx(100.0)
    with pytest.raises(WeightSumMismatch) as info:
        check_weights([WeightEntry("a", 40.0), WeightEntry("b", 50.0)])
    assert info.value.actual == 90.0
    with pytest.raises(NoWeightedTests):
        check_weights([])


def test_weights_for_gender_filters_zero_and_other_gender():
    entries = [
        WeightEntry("run", 40.0),
        WeightEntry("pushups", 60.0, "male"),
        WeightEntry("situps", 60.0, "female"),
        WeightEntry("sprint", 0.0),
    ]
    assert [w.test_type for w in weights_for_gender(entries, " Male")] == ["run", "pushups"]
    assert [w.test_type for w in weights_for_gender(entries, "female")] == ["run", "situps"]


def test_weight_from_record_aliases():
    w = weight_from_record({"value": "run", "weight": "40", "gender": " Male ", "label": "Run"})
    assert w == WeightEntry("run", 40.0, "male", "Run")
    assert weight_from_record({"test_type": "x", "weight_percent": "oops"}).weight_percent == 0.0
    assert weight_from_record({"test_type": "x", "weight_percent": ""}).gender is None
