# tests/test_rules.py
"""
Alert/task rule tests

Usage: python -m pytest tests/test_rules.py -v
"""

import pytest

from kraamweek import rules
from kraamweek.config import THRESHOLDS


def baby(record_type, **fields):
    return {"id": "1", "timestamp": "2024-01-01T10:00:00", "type": record_type, **fields}


def mother(record_type, **fields):
    return {"id": "2", "timestamp": "2024-01-01T10:00:00", "type": record_type, **fields}


# =============================================================================
# Baby temperature
# =============================================================================
@pytest.mark.parametrize("value", [36.0, 36.8, 37.5])
def test_baby_temperature_in_range_no_alert(value):
    assert rules.check_baby_record(baby("temperature", value=value), []) is None


@pytest.mark.parametrize(
    "value, expected_type, wording",
    [
        (37.6, "warning", "te hoog"),
        (38.0, "warning", "te hoog"),
        (38.1, "critical", "te hoog"),
        (35.9, "warning", "te laag"),
        (35.0, "warning", "te laag"),
        (34.9, "critical", "te laag"),
    ],
)
def test_baby_temperature_out_of_range(value, expected_type, wording):
    alert = rules.check_baby_record(baby("temperature", value=value), [])
    assert alert["type"] == expected_type
    assert alert["category"] == "baby"
    assert f"{value:g}°C" in alert["message"]
    assert wording in alert["message"]
    assert alert["relatedRecordId"] == "1"
    assert alert["acknowledged"] is False


def test_baby_temperature_numeric_string_is_checked():
    alert = rules.check_baby_record(baby("temperature", value="38.2"), [])
    assert alert["type"] == "critical"
    assert "38.2" in alert["message"]


def test_baby_temperature_without_number_is_ignored():
    assert rules.check_baby_record(baby("temperature", value="warm"), []) is None
    assert rules.check_baby_record(baby("temperature"), []) is None


# =============================================================================
# Jaundice
# =============================================================================
def test_jaundice_levels():
    assert rules.check_baby_record(baby("jaundice", jaundiceLevel=3), []) is None

    warning = rules.check_baby_record(baby("jaundice", jaundiceLevel=4), [])
    assert warning["type"] == "warning"
    assert "niveau 4" in warning["message"]

    critical = rules.check_baby_record(baby("jaundice", jaundiceLevel=5), [])
    assert critical["type"] == "critical"
    assert "niveau 5" in critical["message"]


# =============================================================================
# Feeding gap
# =============================================================================
def feeding(rid, ts):
    return {"id": rid, "timestamp": ts, "type": "feeding", "feedingType": "bottle", "amount": 60}


def test_first_feeding_has_no_gap_alert():
    assert rules.check_baby_record(feeding("2", "2024-01-01T13:00:00"), []) is None


def test_feeding_gap_over_four_hours():
    previous = [feeding("1", "2024-01-01T08:00:00")]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T13:00:00"), previous)
    assert alert["type"] == "warning"
    assert alert["category"] == "baby"
    assert "(5 uur)" in alert["message"]
    assert alert["relatedRecordId"] == "2"


def test_feeding_gap_exactly_four_hours_is_fine():
    previous = [feeding("1", "2024-01-01T08:00:00")]
    assert rules.check_baby_record(feeding("2", "2024-01-01T12:00:00"), previous) is None


def test_feeding_gap_rounds_to_one_decimal():
    previous = [feeding("1", "2024-01-01T08:00:00")]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T12:26:00"), previous)
    assert "(4.4 uur)" in alert["message"]


def test_feeding_gap_uses_most_recent_earlier_feeding():
    previous = [
        feeding("1", "2024-01-01T02:00:00"),
        feeding("3", "2024-01-01T11:00:00"),
        feeding("4", "2024-01-01T20:00:00"),  # later than the new record
        {"id": "5", "timestamp": "2024-01-01T12:00:00", "type": "sleep", "duration": 60},
    ]
    assert rules.check_baby_record(feeding("2", "2024-01-01T13:00:00"), previous) is None


def test_feeding_at_same_timestamp_does_not_count():
    previous = [
        feeding("1", "2024-01-01T06:00:00"),
        feeding("3", "2024-01-01T13:00:00"),
    ]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T13:00:00"), previous)
    assert "(7 uur)" in alert["message"]


def test_feeding_gap_mixed_timestamp_formats():
    previous = [feeding("1", "2024-01-01T08:00:00.000Z")]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T13:30:00Z"), previous)
    assert "(5.5 uur)" in alert["message"]


def test_feeding_gap_local_time_after_utc_time(dutch_local_time):
    # 08:00Z is 09:00 local, so 12:30 local is 3.5 hours later
    previous = [feeding("1", "2024-01-01T08:00:00.000Z")]
    assert rules.check_baby_record(feeding("2", "2024-01-01T12:30:00"), previous) is None

    alert = rules.check_baby_record(feeding("2", "2024-01-01T13:30:00"), previous)
    assert "(4.5 uur)" in alert["message"]


def test_feeding_gap_utc_time_after_local_time(dutch_local_time):
    # 08:00 local is 07:00Z
    previous = [feeding("1", "2024-01-01T08:00:00")]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T12:00:00Z"), previous)
    assert "(5 uur)" in alert["message"]


def test_feeding_gap_threshold_comes_from_config(monkeypatch):
    monkeypatch.setitem(THRESHOLDS, "feeding_gap_hours", 2.0)
    previous = [feeding("1", "2024-01-01T08:00:00")]
    alert = rules.check_baby_record(feeding("2", "2024-01-01T11:00:00"), previous)
    assert alert is not None
    assert "Meer dan 2 uur" in alert["message"]


def test_other_baby_records_never_alert():
    for record_type in ("sleep", "diaper", "pumping", "weight", "note"):
        assert rules.check_baby_record(baby(record_type, value=40), []) is None


# =============================================================================
# Mother
# =============================================================================
def test_mother_temperature():
    assert rules.check_mother_record(mother("temperature", value=38.0)) is None

    warning = rules.check_mother_record(mother("temperature", value=38.3))
    assert warning["type"] == "warning"
    assert warning["category"] == "mother"
    assert "koorts" in warning["message"]
    assert "38.3" in warning["message"]

    assert rules.check_mother_record(mother("temperature", value=38.6))["type"] == "critical"


@pytest.mark.parametrize(
    "systolic, diastolic, expected",
    [
        (120, 80, None),
        (140, 90, None),
        (90, 60, None),
        (145, 85, "warning"),
        (130, 95, "warning"),
        (85, 70, "warning"),
        (110, 55, "warning"),
        (165, 85, "critical"),
        (150, 105, "critical"),
        (75, 65, "critical"),
    ],
)
def test_blood_pressure(systolic, diastolic, expected):
    alert = rules.check_mother_record(
        mother("blood_pressure", bloodPressure={"systolic": systolic, "diastolic": diastolic})
    )
    if expected is None:
        assert alert is None
    else:
        assert alert["type"] == expected
        assert f"{systolic}/{diastolic}" in alert["message"]


def test_pain_levels():
    assert rules.check_mother_record(mother("pain", painLevel=7)) is None
    alert = rules.check_mother_record(mother("pain", painLevel=8))
    assert alert["type"] == "warning"
    assert "niveau 8/10" in alert["message"]


def test_mood_never_alerts():
    assert rules.check_mother_record(mother("mood", mood="very_low")) is None


# =============================================================================
# Tasks from notes
# =============================================================================
def test_question_note_becomes_task():
    text = "Hoe vaak moet ik de navelstomp schoonmaken en met welk middel precies?"
    task = rules.task_from_note(baby("note", noteCategory="question", notes=text))

    assert task["title"] == "Vraag beantwoorden: " + text[:50] + "..."
    assert task["description"] == text
    assert task["category"] == "other"
    assert task["priority"] == "medium"
    assert task["status"] == "pending"
    assert task["assignedTo"] == "kraamhulp"
    assert task["createdBy"] == "parents"


def test_short_todo_note_has_no_ellipsis():
    task = rules.task_from_note(baby("note", noteCategory="todo", notes="Boodschappen doen"))
    assert task["title"] == "Verzoek uitvoeren: Boodschappen doen"
    assert task["category"] == "household"
    assert task["priority"] == "low"


def test_note_of_exactly_fifty_chars_has_no_ellipsis():
    text = "x" * 50
    task = rules.task_from_note(baby("note", noteCategory="question", notes=text))
    assert task["title"] == "Vraag beantwoorden: " + text


def test_general_and_uncategorized_notes_make_no_task():
    assert rules.task_from_note(baby("note", noteCategory="general", notes="Goed gedronken")) is None
    assert rules.task_from_note(baby("note", notes="Goed gedronken")) is None
    assert rules.task_from_note(baby("feeding", noteCategory="todo", notes="x")) is None


# =============================================================================
# Birth weight
# =============================================================================
def test_birth_weight_record_from_profile():
    profile = {"geboortedatum": "2024-01-01", "geboortijd": "14:30", "geboortgewicht": 3200}
    record = rules.birth_weight_record(profile, [])
    assert record == {
        "timestamp": "2024-01-01T14:30:00",
        "type": "weight",
        "weight": 3200,
        "notes": "Geboortegewicht",
    }


def test_birth_weight_record_defaults_to_midnight():
    profile = {"geboortedatum": "2024-01-01", "geboortgewicht": 3200}
    assert rules.birth_weight_record(profile, [])["timestamp"] == "2024-01-01T00:00:00"


def test_birth_weight_record_not_repeated():
    profile = {"geboortedatum": "2024-01-01", "geboortijd": "14:30", "geboortgewicht": 3200}
    existing = [{"id": "9", "timestamp": "2024-01-01T14:30:00", "type": "weight", "weight": 3200}]
    assert rules.birth_weight_record(profile, existing) is None


def test_birth_weight_record_needs_date_and_weight():
    assert rules.birth_weight_record({"geboortedatum": "2024-01-01"}, []) is None
    assert rules.birth_weight_record({"geboortgewicht": 3200}, []) is None
