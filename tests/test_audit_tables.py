from __future__ import annotations

import fitness_core.audit_tables as audit_tables

from tests.conftest import build_source


def test_clean_source_has_no_warnings():
    summary = audit_tables.audit_source(build_source(weights=[
        {"test_type": "run", "weight_percent": "40"},
        {"test_type": "pushups", "weight_percent": "60"},
    ]))
    assert summary["warnings"] == []
    assert summary["weight_totals"] == {"male": 100.0, "female": 100.0}
    assert summary["tests"]["pushups"]["rows"] == 4
    assert summary["tests"]["run"]["endpoints"] == 1


def test_audit_flags_weights_order_and_missing_tables():
    source = build_source(
        tables={"run": [{"final_score": "40", "male_grade12": "12:00"}, {"final_score": "100", "male_grade12": "9:00"}]},
        weights=[
            {"test_type": "run", "weight_percent": "40"},
            {"test_type": "pushups", "weight_percent": "50"},
            {"test_type": "situps", "gender": "female", "weight_percent": "10"},
        ],
    )
    summary = audit_tables.audit_source(source)
    joined = "\n".join(summary["warnings"])
    assert "run score table not ordered best to worst" in joined
    assert "male weights sum to 90%" in joined
    assert "weighted test pushups has no score table" in joined
    assert "weighted test situps has no definition" in joined
    assert summary["weight_totals"]["female"] == 100.0


def test_main_returns_warning_exit(tmp_path, capsys):
    (tmp_path / "fields.csv").write_text("value,label,description,input_format\nrun,Run,,time\n", encoding="utf-8")
    (tmp_path / "test_weights.csv").write_text("test_type,weight_percent\nrun,90\n", encoding="utf-8")

    out = tmp_path / "audit.json"
    exit_code = audit_tables.main(["--data-dir", str(tmp_path), "--out", str(out)])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "run [time]" in captured.out
    assert "weighted test run has no score table" in out.read_text(encoding="utf-8")
    assert "all weights sum to 90%" in captured.out


def test_main_clean_bundled_tables(capsys):
    assert audit_tables.main(["--data-dir", str(audit_tables.CsvSource().root)]) == 0
    assert "No warnings." in capsys.readouterr().out
