# rules.py
"""
Alert and follow-up task rules.

Every rule is a pure function of a new record (plus, for feeding, the
records that existed before it) and returns the data for at most one
derived Alert or Task, without id. Persisting what comes back is the
repository's job.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .config import BIRTH_WEIGHT_NOTE, TASKS, THRESHOLDS
from .models import (
    PROFILE_BIRTH_DATE,
    PROFILE_BIRTH_TIME,
    PROFILE_BIRTH_WEIGHT,
    ROLE_KRAAMHULP,
    ROLE_PARENTS,
    as_number,
    day_of,
    fmt_num,
    iso_to_dt,
    now_iso,
)


def _alert(alert_type: str, category: str, message: str, record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "timestamp": now_iso(),
        "type": alert_type,
        "category": category,
        "message": message,
        "relatedRecordId": record.get("id"),
        "acknowledged": False,
    }


def _round1(x: float) -> float:
    # Half-up, as people read it off a clock
    return math.floor(x * 10 + 0.5) / 10


# =============================================================================
# Baby rules
# =============================================================================
def baby_temperature_alert(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    temp = as_number(record.get("value"))
    if temp is None:
        return None

    t = THRESHOLDS
    if t["baby_temp_low"] <= temp <= t["baby_temp_high"]:
        return None

    critical = temp < t["baby_temp_critical_low"] or temp > t["baby_temp_critical_high"]
    wording = "te laag" if temp < t["baby_temp_low"] else "te hoog"
    return _alert(
        "critical" if critical else "warning",
        "baby",
        f"Baby temperatuur is {fmt_num(temp)}°C - {wording}",
        record,
    )


def jaundice_alert(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    level = as_number(record.get("jaundiceLevel"))
    if level is None or level < THRESHOLDS["jaundice_warning"]:
        return None

    critical = level >= THRESHOLDS["jaundice_critical"]
    return _alert(
        "critical" if critical else "warning",
        "baby",
        f"Geelzien niveau {fmt_num(level)} - overleg met kraamhulp/arts",
        record,
    )


def last_feeding_before(record: Dict[str, Any], records: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Most recent feeding strictly earlier than `record`.

    Feedings sharing the new record's exact timestamp do not count, and
    neither does the record itself. Records with unparseable timestamps are
    skipped.
    """
    try:
        at = iso_to_dt(record["timestamp"])
    except (KeyError, TypeError, ValueError):
        return None

    best = None
    best_dt = None
    for r in records:
        if r.get("type") != "feeding" or r.get("id") == record.get("id"):
            continue
        try:
            dt = iso_to_dt(r["timestamp"])
        except (KeyError, TypeError, ValueError):
            continue
        if dt < at and (best_dt is None or dt > best_dt):
            best, best_dt = r, dt
    return best


def feeding_gap_alert(record: Dict[str, Any], previous_records: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    last = last_feeding_before(record, previous_records)
    if last is None:
        return None

    elapsed = iso_to_dt(record["timestamp"]) - iso_to_dt(last["timestamp"])
    hours = elapsed.total_seconds() / 3600
    limit = THRESHOLDS["feeding_gap_hours"]
    if hours <= limit:
        return None

    return _alert(
        "warning",
        "baby",
        f"Meer dan {fmt_num(limit)} uur tussen voedingen ({fmt_num(_round1(hours))} uur)",
        record,
    )


def check_baby_record(record: Dict[str, Any], previous_records: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Alert data for a new baby record, or None. `previous_records` excludes `record`."""
    record_type = record.get("type")
    if record_type == "temperature":
        return baby_temperature_alert(record)
    if record_type == "jaundice":
        return jaundice_alert(record)
    if record_type == "feeding":
        return feeding_gap_alert(record, previous_records)
    return None


# =============================================================================
# Mother rules
# =============================================================================
def mother_temperature_alert(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    temp = as_number(record.get("value"))
    if temp is None or temp <= THRESHOLDS["mother_fever"]:
        return None

    critical = temp > THRESHOLDS["mother_fever_critical"]
    return _alert(
        "critical" if critical else "warning",
        "mother",
        f"Moeder heeft koorts: {fmt_num(temp)}°C",
        record,
    )


def blood_pressure_alert(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    bp = record.get("bloodPressure") or {}
    systolic = as_number(bp.get("systolic"))
    diastolic = as_number(bp.get("diastolic"))
    if systolic is None or diastolic is None:
        return None

    t = THRESHOLDS
    out_of_range = (
        systolic > t["bp_sys_high"]
        or diastolic > t["bp_dia_high"]
        or systolic < t["bp_sys_low"]
        or diastolic < t["bp_dia_low"]
    )
    if not out_of_range:
        return None

    critical = (
        systolic > t["bp_sys_critical_high"]
        or diastolic > t["bp_dia_critical_high"]
        or systolic < t["bp_sys_critical_low"]
    )
    return _alert(
        "critical" if critical else "warning",
        "mother",
        f"Bloeddruk buiten normale waarden: {fmt_num(systolic)}/{fmt_num(diastolic)}",
        record,
    )


def pain_alert(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    level = as_number(record.get("painLevel"))
    if level is None or level < THRESHOLDS["pain_warning"]:
        return None
    return _alert("warning", "mother", f"Hoge pijnklacht: niveau {fmt_num(level)}/10", record)


def check_mother_record(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Alert data for a new mother record, or None."""
    record_type = record.get("type")
    if record_type == "temperature":
        return mother_temperature_alert(record)
    if record_type == "blood_pressure":
        return blood_pressure_alert(record)
    if record_type == "pain":
        return pain_alert(record)
    return None


# =============================================================================
# Follow-up tasks from notes
# =============================================================================
def _short_title(prefix: str, text: str) -> str:
    limit = TASKS["title_max_chars"]
    suffix = TASKS["ellipsis"] if len(text) > limit else ""
    return f"{prefix}{text[:limit]}{suffix}"


def task_from_note(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Task data for a parent's question or request, else None.

    question -> "Vraag beantwoorden: ..." (other, medium)
    todo     -> "Verzoek uitvoeren: ..."  (household, low)

    Both are assigned to the kraamhulp and start pending.
    """
    if record.get("type") != "note":
        return None

    category = record.get("noteCategory")
    if category not in ("question", "todo"):
        return None

    text = record.get("notes") or ""
    is_question = category == "question"
    prefix = TASKS["question_prefix"] if is_question else TASKS["todo_prefix"]

    return {
        "title": _short_title(prefix, text),
        "description": text,
        "category": "other" if is_question else "household",
        "priority": "medium" if is_question else "low",
        "status": "pending",
        "assignedTo": ROLE_KRAAMHULP,
        "createdBy": ROLE_PARENTS,
    }


# =============================================================================
# Birth weight
# =============================================================================
def birth_timestamp(profile: Dict[str, Any]) -> Optional[str]:
    birth_date = profile.get(PROFILE_BIRTH_DATE)
    if not birth_date:
        return None
    birth_time = (profile.get(PROFILE_BIRTH_TIME) or "00:00").strip()
    if len(birth_time) == 5:
        birth_time += ":00"
    return f"{birth_date}T{birth_time}"


def birth_weight_record(profile: Dict[str, Any], baby_records: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Weight record data for the profile's birth weight, unless one exists.

    An existing weight record on the birth date with the same weight counts
    as the birth weight, so saving the same profile twice adds one record.
    """
    weight = as_number(profile.get(PROFILE_BIRTH_WEIGHT))
    ts = birth_timestamp(profile)
    if not weight or weight <= 0 or ts is None:
        return None

    birth_day = day_of(ts)
    for r in baby_records:
        if (
            r.get("type") == "weight"
            and day_of(r.get("timestamp")) == birth_day
            and as_number(r.get("weight")) == weight
        ):
            return None

    return {
        "timestamp": ts,
        "type": "weight",
        "weight": profile.get(PROFILE_BIRTH_WEIGHT),
        "notes": BIRTH_WEIGHT_NOTE,
    }
