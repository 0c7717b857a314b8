from __future__ import annotations

import pytest

from fitness_core.datasource import BUNDLED_DATA_DIR, CsvSource, read_csv_records
from fitness_core.engine import GradingSession
from fitness_core.errors import DataUnavailable


def _write(path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_bundled_tables_grade_end_to_end():
    session = GradingSession(CsvSource())
    assert session.source.root == BUNDLED_DATA_DIR
    assert {d.test_type for d in session.test_definitions()} == {"run", "pushups", "sprint", "long_jump"}

    res = session.grade_composite({"run": "9:45", "pushups": "32", "sprint": "13.3"}, "male", "12")
    assert res.per_test == {"run": 80, "pushups": 80, "sprint": 90}
    assert res.final_grade == 83

    jump = session.grade_single_test("2.1", "long_jump", "12", "male")
    assert (jump.strategy, jump.final_score) == ("interpolation", 78)


def test_definitions_fall_back_to_options(tmp_path):
    _write(
        tmp_path / "options.csv",
        "field,value,label,description,input_format\n"
        "gender,male,Boys,,\n"
        "test_type,run,Run,m:ss,Time\n"
        "\n",
    )
    source = CsvSource(tmp_path)
    defs = source.test_definitions()
    assert [(d.test_type, d.input_format) for d in defs] == [("run", "time")]
    assert source.endpoint_records() == []
    assert source.weight_records() == []
    assert source.benchmark_records("run") is None


def test_records_are_trimmed_and_short_rows_padded(tmp_path):
    _write(tmp_path / "scores" / "run.csv", "final_score, male_grade9 ,female_grade9\n100, 9:00\n90,9:30,10:30\n")
    rows = CsvSource(tmp_path).benchmark_records("run")
    assert rows == [
        {"final_score": "100", "male_grade9": "9:00", "female_grade9": ""},
        {"final_score": "90", "male_grade9": "9:30", "female_grade9": "10:30"},
    ]


def test_weight_aliases(tmp_path):
    _write(tmp_path / "test_weights.csv", "value,label,weight\nrun,Run,100\n")
    session = GradingSession(CsvSource(tmp_path))
    assert [(w.test_type, w.weight_percent) for w in session.weights()] == [("run", 100.0)]


def test_unsafe_test_type_is_not_read(tmp_path):
    _write(tmp_path / "secret.csv", "final_score\n100\n")
    assert CsvSource(tmp_path).benchmark_records("../secret") is None


def test_missing_directory_is_data_unavailable(tmp_path):
    with pytest.raises(DataUnavailable):
        CsvSource(tmp_path / "nope").options()


def test_unreadable_file_is_data_unavailable(tmp_path):
    path = tmp_path / "options.csv"
    path.write_bytes(b"field,value\n\xff\xfe\xfa,1\n")
    with pytest.raises(DataUnavailable) as info:
        read_csv_records(path)
    assert info.value.source == str(path)
