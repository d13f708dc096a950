# filters.py
# Filtering, ordering and display labels for records, alerts and tasks.

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .analytics import DayLike, records_in_range
from .models import entry_order_key, iso_to_dt

# =============================================================================
# Filters
# =============================================================================
def filter_records_by_date_range(records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    """Records whose timestamp falls on a day in [start, end] (whole end day included)."""
    return records_in_range(records, start, end)


def filter_by_type(records: List[Dict[str, Any]], record_type: str) -> List[Dict[str, Any]]:
    return [r for r in records if r.get("type") == record_type]


def filter_alerts_by_status(alerts: List[Dict[str, Any]], acknowledged: bool) -> List[Dict[str, Any]]:
    return [a for a in alerts if bool(a.get("acknowledged")) == acknowledged]


def filter_tasks_by_status(tasks: List[Dict[str, Any]], status: str) -> List[Dict[str, Any]]:
    return [t for t in tasks if t.get("status") == status]


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _ts_key(item: Dict[str, Any], field: str = "timestamp") -> datetime:
    ts = item.get(field)
    if not ts:
        return _OLDEST
    try:
        return iso_to_dt(ts)
    except (TypeError, ValueError):
        return _OLDEST


def sort_records_by_timestamp(records: List[Dict[str, Any]], ascending: bool = False) -> List[Dict[str, Any]]:
    """Newest first unless `ascending`; unparseable timestamps sort as oldest."""
    return sorted(records, key=_ts_key, reverse=not ascending)


def sort_by_entry_order(items: List[Dict[str, Any]], newest_first: bool = True) -> List[Dict[str, Any]]:
    return sorted(items, key=entry_order_key, reverse=newest_first)


def get_recent_records(
    records: List[Dict[str, Any]],
    days: int,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    # naive `now` is local time, like naive timestamps
    cutoff = (now or datetime.now()).astimezone() - timedelta(days=days)
    return [r for r in records if r.get("timestamp") and _ts_key(r) >= cutoff]


# =============================================================================
# Labels
# =============================================================================
BABY_TITLES = {
    "sleep": "Slaap",
    "feeding": "Voeding",
    "temperature": "Temperatuur",
    "diaper": "Luier",
    "jaundice": "Geelzucht",
    "note": "Notitie",
    "pumping": "Kolven",
    "weight": "Gewicht",
}

MOTHER_TITLES = {
    "temperature": "Temperatuur",
    "blood_pressure": "Bloeddruk",
    "mood": "Stemming",
    "pain": "Pijn",
    "feeding_session": "Voedingssessie",
    "note": "Notitie",
}

FEEDING_LABELS = {
    "breast_left": "Linker borst",
    "breast_right": "Rechter borst",
    "breast_both": "Beide borsten",
}

DIAPER_LABELS = {"wet": "Nat", "dirty": "Vies", "both": "Nat en vies"}

BREAST_SIDE_LABELS = {"left": "Linker", "right": "Rechter", "both": "Beide"}

MOOD_LABELS = {
    "excellent": "Uitstekend",
    "good": "Goed",
    "okay": "Oké",
    "low": "Laag",
    "very_low": "Zeer laag",
}


def _with_notes(text: str, r: Dict[str, Any]) -> str:
    notes = r.get("notes")
    return f"{text} - {notes}" if notes else text


def baby_record_title(r: Dict[str, Any]) -> str:
    return BABY_TITLES.get(str(r.get("type")), "Onbekend")


def baby_record_details(r: Dict[str, Any]) -> str:
    rt = r.get("type")

    if rt == "sleep":
        return _with_notes(f"{r.get('duration') or 0} minuten", r)

    if rt == "feeding":
        ft = r.get("feedingType")
        if ft == "bottle":
            return _with_notes(f"{r.get('amount') or 0} ml (fles)", r)
        if ft in FEEDING_LABELS:
            return _with_notes(FEEDING_LABELS[ft], r)
        return r.get("notes") or "Voeding"

    if rt == "temperature":
        return _with_notes(f"{r.get('value') or 0}°C", r)

    if rt == "diaper":
        kind = DIAPER_LABELS.get(r.get("diaperType"), "Nat en vies")
        return _with_notes(f"{kind} ({r.get('diaperAmount') or 'onbekend'})", r)

    if rt == "jaundice":
        return _with_notes(f"Niveau {r.get('jaundiceLevel') or 0}", r)

    if rt == "pumping":
        side = BREAST_SIDE_LABELS.get(r.get("breastSide"), "Beide")
        return _with_notes(f"{side} borst, {r.get('amount') or 0} ml", r)

    if rt == "weight":
        return _with_notes(f"{r.get('weight') or 0} gram", r)

    if rt == "note":
        return r.get("notes") or "Notitie"

    return r.get("notes") or "Geen details"


def mother_record_title(r: Dict[str, Any]) -> str:
    return MOTHER_TITLES.get(str(r.get("type")), "Onbekend")


def mother_record_details(r: Dict[str, Any]) -> str:
    rt = r.get("type")

    if rt == "temperature":
        return _with_notes(f"{r.get('value') or 0}°C", r)

    if rt == "blood_pressure":
        bp = r.get("bloodPressure") or {}
        return _with_notes(f"{bp.get('systolic') or 0}/{bp.get('diastolic') or 0} mmHg", r)

    if rt == "mood":
        return _with_notes(MOOD_LABELS.get(r.get("mood"), "Oké"), r)

    if rt == "pain":
        return _with_notes(f"Niveau {r.get('painLevel') or 0}/10", r)

    if rt == "feeding_session":
        return _with_notes(f"{r.get('duration') or 0} minuten", r)

    if rt == "note":
        return r.get("notes") or "Notitie"

    return r.get("notes") or "Geen details"


# =============================================================================
# Timeline
# =============================================================================
def build_timeline(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    One newest-first list of everything that happened.

    Entries: {id, timestamp, kind, title, subtitle?, details} with kind one of
    baby / mother / alerts / tasks. Tasks are placed at their createdAt.
    """
    events: List[Dict[str, Any]] = []

    for r in data.get("babyRecords", []):
        events.append(
            {
                "id": r.get("id"),
                "timestamp": r.get("timestamp"),
                "kind": "baby",
                "title": baby_record_title(r),
                "details": baby_record_details(r),
            }
        )

    for r in data.get("motherRecords", []):
        events.append(
            {
                "id": r.get("id"),
                "timestamp": r.get("timestamp"),
                "kind": "mother",
                "title": mother_record_title(r),
                "details": mother_record_details(r),
            }
        )

    for a in data.get("alerts", []):
        events.append(
            {
                "id": a.get("id"),
                "timestamp": a.get("timestamp"),
                "kind": "alerts",
                "title": "Alert",
                "subtitle": a.get("type"),
                "details": a.get("message", ""),
            }
        )

    for t in data.get("tasks", []):
        events.append(
            {
                "id": t.get("id"),
                "timestamp": t.get("createdAt"),
                "kind": "tasks",
                "title": t.get("title", ""),
                "subtitle": t.get("status"),
                "details": t.get("description") or "",
            }
        )

    return sort_records_by_timestamp(events)
