from __future__ import annotations

import pytest

from fitness_core import config, errors
from fitness_core.validators import validate, validate_input


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input_rejected_for_every_format(raw):
    for fmt in ("time", "count", "seconds", "decimal"):
        with pytest.raises(errors.EmptyInput):
            validate(raw, fmt)


@pytest.mark.parametrize(
    "raw, exc",
    [
        ("8:3", errors.MalformedTime),
        ("8.30", errors.MalformedTime),
        (":30", errors.MalformedTime),
        ("8:60", errors.OutOfRangeTime),
        ("0:00", errors.ZeroTime),
    ],
)
def test_time_rules(raw, exc):
    with pytest.raises(exc):
        validate(raw, "time")


def test_time_accepts_trimmed_value_and_zero_minutes():
    validate(" 8:30 ", "time")
    validate("0:59", "time")
    validate("12:00", "time")


def test_count_rules():
    validate("20", "count")
    with pytest.raises(errors.MalformedCount):
        validate("-3", "count")
    with pytest.raises(errors.MalformedCount):
        validate("2.5", "count")
    with pytest.raises(errors.NegativeOrZeroCount):
        validate("0", "count")


def test_zero_count_bound_is_configurable(monkeypatch):
    validate("0", "count", allow_zero_count=True)
    monkeypatch.setattr(config, "COUNT_ALLOW_ZERO", True)
    validate("0", "count")
    with pytest.raises(errors.NegativeOrZeroCount):
        validate("0", "count", allow_zero_count=False)


@pytest.mark.parametrize("raw", ["12.5", "12", "12.", ".5", "0.1"])
def test_decimal_accepts_both_leading_forms(raw):
    validate(raw, "decimal")
    validate(raw, "seconds")


@pytest.mark.parametrize("raw, exc", [(".", errors.MalformedDecimal), ("1e3", errors.MalformedDecimal),
                                      ("-2", errors.MalformedDecimal), ("0", errors.NonPositiveDecimal),
                                      ("0.0", errors.NonPositiveDecimal)])
def test_decimal_rejections(raw, exc):
    with pytest.raises(exc):
        validate(raw, "decimal")


def test_unknown_format():
    with pytest.raises(errors.UnknownFormat):
        validate("5", "laps")


def test_validate_input_reports_outcome_without_raising():
    ok = validate_input("8:30", "time")
    assert ok.valid and ok.code is None

    bad = validate_input("8:75", "time")
    assert not bad.valid
    assert bad.code == "OutOfRangeTime"
    assert "59" in bad.message


@pytest.mark.parametrize("raw, fmt", [("٢٠", "count"), ("２０", "count"), ("٨:٣٠", "time"), ("١٢.٥", "decimal")])
def test_non_ascii_digits_rejected(raw, fmt):
    assert not validate_input(raw, fmt).valid


@pytest.mark.parametrize("raw, fmt, code", [("9" * 5000, "count", "MalformedCount"),
                                            ("9" * 5000 + ":00", "time", "MalformedTime"),
                                            ("9" * 5000, "decimal", "MalformedDecimal")])
def test_oversized_input_is_malformed_not_a_crash(raw, fmt, code):
    outcome = validate_input(raw, fmt)
    assert not outcome.valid
    assert outcome.code == code
