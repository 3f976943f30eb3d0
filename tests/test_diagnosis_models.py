"""Tests for the diagnosis schema, treatment planner and care guide helpers."""

from datetime import date

import pytest
from pydantic import ValidationError

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import (
    FALLBACK_ISSUE_NAME,
    DiagnosisResult,
    Recommendation,
    Severity,
    fallback_diagnosis,
)
from plant_health.modules.plant_diagnosis.domain.services.care_guide import (
    DEFAULT_CARE_TIPS,
    MAX_DISPLAYED_CARE_TIPS,
    care_tips_for_display,
    primary_severity,
    prioritized_recommendations,
)
from plant_health.modules.plant_diagnosis.domain.services.treatment_planner import TreatmentPlanner


# ========================== Diagnosis schema ===============================


def test_parses_camel_case_payload(diagnosis_payload):
    diagnosis = DiagnosisResult.model_validate(diagnosis_payload)

    assert diagnosis.plant_name == "Monstera deliciosa"
    assert diagnosis.issues[0].severity is Severity.MEDIUM
    assert len(diagnosis.care_tips) == 6
    assert diagnosis.care_tips[0].icon == "💧"


def test_severity_is_case_insensitive(diagnosis_payload):
    diagnosis_payload["issues"][0]["severity"] = " HIGH "

    diagnosis = DiagnosisResult.model_validate(diagnosis_payload)

    assert diagnosis.issues[0].severity is Severity.HIGH


def test_unknown_severity_is_rejected(diagnosis_payload):
    diagnosis_payload["issues"][0]["severity"] = "critical"

    with pytest.raises(ValidationError):
        DiagnosisResult.model_validate(diagnosis_payload)


@pytest.mark.parametrize("confidence", [None, 0])
def test_missing_confidence_defaults(diagnosis_payload, confidence):
    diagnosis_payload["confidence"] = confidence

    assert DiagnosisResult.model_validate(diagnosis_payload).confidence == pytest.approx(0.90)


def test_null_lists_become_empty():
    diagnosis = DiagnosisResult.model_validate(
        {"plantName": "Pothos", "issues": None, "recommendations": None, "careTips": None}
    )

    assert diagnosis.issues == []
    assert diagnosis.recommendations == []
    assert diagnosis.care_tips == []


def test_plant_name_is_required():
    with pytest.raises(ValidationError):
        DiagnosisResult.model_validate({"confidence": 0.5})


def test_storage_form_uses_wire_names(diagnosis):
    stored = diagnosis.to_storage()

    assert stored["plantName"] == "Monstera deliciosa"
    assert "careTips" in stored
    assert "modelOutput" not in stored
    assert DiagnosisResult.model_validate(stored) == diagnosis


def test_fallback_diagnosis_is_general_care():
    first = fallback_diagnosis()
    second = fallback_diagnosis()

    assert first.plant_name == "Plant"
    assert first.confidence == pytest.approx(0.70)
    assert [issue.name for issue in first.issues] == [FALLBACK_ISSUE_NAME]
    assert first.issues[0].severity is Severity.LOW
    assert len(first.recommendations) == 4
    assert first is not second


# ========================== Treatment planner ==============================


def test_one_step_per_recommendation_one_day_apart(diagnosis):
    drafts = TreatmentPlanner().derive(diagnosis.recommendations, date(2026, 3, 30))

    assert [draft.step for draft in drafts] == [1, 2, 3, 4]
    assert [draft.scheduled_date for draft in drafts] == [
        date(2026, 3, 30),
        date(2026, 3, 31),
        date(2026, 4, 1),
        date(2026, 4, 2),
    ]


def test_steps_keep_recommendation_order_not_priority(diagnosis):
    drafts = TreatmentPlanner().derive(diagnosis.recommendations, date(2026, 3, 1))

    assert [draft.description for draft in drafts] == [r.action for r in diagnosis.recommendations]


def test_no_recommendations_no_steps():
    assert TreatmentPlanner().derive([], date(2026, 3, 1)) == []


def test_duplicate_priorities_are_allowed():
    recommendations = [Recommendation(action=f"Action {i}", priority=1) for i in range(3)]

    drafts = TreatmentPlanner().derive(recommendations, date(2026, 3, 1))

    assert [draft.step for draft in drafts] == [1, 2, 3]


# ========================== Care guide =====================================


def test_care_tips_are_capped(diagnosis):
    tips = care_tips_for_display(diagnosis)

    assert len(tips) == MAX_DISPLAYED_CARE_TIPS
    assert tips[0].title == "Watering"


def test_default_care_tips_when_diagnosis_has_none(diagnosis):
    diagnosis.care_tips = []

    assert care_tips_for_display(diagnosis) == list(DEFAULT_CARE_TIPS)
    assert care_tips_for_display(None) == list(DEFAULT_CARE_TIPS)


def test_recommendations_sorted_by_priority_stable(diagnosis):
    ordered = prioritized_recommendations(diagnosis)

    assert [r.action for r in ordered] == [
        "Reduce watering to once every 10 days",
        "Apply copper fungicide",
        "Remove affected leaves",
        "Move away from drafty windows",
    ]
    # Stored order is untouched
    assert diagnosis.recommendations[0].action == "Remove affected leaves"


def test_primary_severity(diagnosis):
    assert primary_severity(diagnosis) is Severity.MEDIUM
    assert primary_severity(None) is None
    diagnosis.issues = []
    assert primary_severity(diagnosis) is None
