import json

import pytest

from app.logic.wizard_logic import (
    DIAGNOSIS_FOOTER,
    DIAGNOSIS_HEADER,
    WIZARD_STEPS,
    DiagnosisRuleTable,
    WizardSession,
    load_rule_table,
    run_wizard,
)

COOLING = "• Check air filters\n• Verify outdoor unit operation\n• Check refrigerant pressure\n"
HEATING = "• Check outdoor unit for ice buildup\n• Verify refrigerant levels\n• Inspect compressor operation\n"
SUDDEN = "\n• Priority: Check for electrical issues\n• Look for recent system changes\n"


def test_wizard_has_three_steps():
    assert len(WIZARD_STEPS) == 3
    assert [o.value for o in WIZARD_STEPS[0].options] == ["heating", "cooling", "noise", "leak", "error"]


def test_cooling_gradual_diagnosis_has_no_sudden_paragraph():
    session = run_wizard(["cooling", "gradual", "power"])
    assert session.diagnosis == DIAGNOSIS_HEADER + COOLING + DIAGNOSIS_FOOTER
    assert "Priority" not in session.diagnosis


def test_heating_sudden_diagnosis_order():
    session = run_wizard(["heating", "sudden", "thermostat"])
    assert session.diagnosis == DIAGNOSIS_HEADER + HEATING + SUDDEN + DIAGNOSIS_FOOTER


def test_error_answer_has_only_header_and_footer():
    session = run_wizard(["error", "gradual", "power"])
    assert session.diagnosis == DIAGNOSIS_HEADER + DIAGNOSIS_FOOTER


@pytest.mark.parametrize("basics", ["power", "thermostat", "filters", "breaker"])
def test_third_answer_never_changes_diagnosis(basics):
    baseline = run_wizard(["noise", "sudden", "power"]).diagnosis
    assert run_wizard(["noise", "sudden", basics]).diagnosis == baseline


def test_next_requires_answer():
    session = WizardSession()
    assert session.next() is False
    assert session.current_step == 0
    session.select("leak")
    assert session.next() is True
    assert session.current_step == 1


def test_back_keeps_answers_and_stops_at_first_step():
    session = WizardSession()
    session.select("leak")
    session.next()
    session.back()
    assert session.current_step == 0
    assert session.current_answer == "leak"
    session.back()
    assert session.current_step == 0


def test_select_rejects_unknown_option():
    session = WizardSession()
    with pytest.raises(ValueError):
        session.select("sudden")


def test_reset_clears_everything():
    session = run_wizard(["leak", "startup", "breaker"])
    assert session.diagnosis
    session.reset()
    assert session.current_step == 0
    assert session.answers == []
    assert session.diagnosis == ""


def test_run_wizard_stops_on_partial_answers():
    session = run_wizard(["heating"])
    assert session.current_step == 1
    assert session.diagnosis == ""


def test_load_rule_table_from_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            {
                "header": "Diagnosis:\n",
                "rules": [{"step": 0, "answer": "error", "fragment": "• Look up the code\n"}],
            }
        ),
        encoding="utf-8",
    )
    table = load_rule_table(path)
    assert table.diagnose(["error", "gradual", "power"]) == "Diagnosis:\n• Look up the code\n" + DIAGNOSIS_FOOTER


def test_load_rule_table_falls_back_on_bad_file(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_rule_table(path) == DiagnosisRuleTable()
    assert load_rule_table(None) == DiagnosisRuleTable()
