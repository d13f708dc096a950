# models.py
# Record shapes are plain JSON dicts; this module holds the vocabulary they share.

from __future__ import annotations

import math
import time as _time
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

# =============================================================================
# Enumerations
# =============================================================================
BABY_RECORD_TYPES = [
    "sleep",
    "feeding",
    "temperature",
    "diaper",
    "jaundice",
    "note",
    "pumping",
    "weight",
]

MOTHER_RECORD_TYPES = [
    "temperature",
    "blood_pressure",
    "pain",
    "mood",
    "feeding_session",
    "note",
]

FEEDING_TYPES = ["bottle", "breast_left", "breast_right", "breast_both"]
DIAPER_TYPES = ["wet", "dirty", "both"]
DIAPER_AMOUNTS = ["little", "medium", "much"]
BREAST_SIDES = ["left", "right", "both"]
NOTE_CATEGORIES = ["general", "question", "todo"]
MOODS = ["excellent", "good", "okay", "low", "very_low"]

FAMILY_OBSERVATION_CATEGORIES = ["bonding", "environment", "support", "health", "general"]

TASK_STATUSES = ["pending", "in_progress", "completed"]
TASK_PRIORITIES = ["low", "medium", "high"]
TASK_CATEGORIES = ["household", "baby_care", "mother_care", "administrative", "other"]
TASK_ASSIGNEES = ["parents", "kraamhulp", "family", "other"]

ALERT_TYPES = ["info", "warning", "critical"]
ALERT_CATEGORIES = ["baby", "mother", "general"]

ROLE_PARENTS = "parents"
ROLE_KRAAMHULP = "kraamhulp"

ROLE_ALIASES = {
    "parents": ROLE_PARENTS,
    "ouders": ROLE_PARENTS,
    "kraamhulp": ROLE_KRAAMHULP,
}

SEXES = ["jongen", "meisje", "onbekend"]

COLLECTIONS = ["babyRecords", "motherRecords", "familyObservations", "tasks", "alerts"]

# Profile keys as they appear in exported documents
PROFILE_BIRTH_DATE = "geboortedatum"
PROFILE_BIRTH_TIME = "geboortijd"
PROFILE_BIRTH_WEIGHT = "geboortgewicht"


def empty_app_data() -> Dict[str, Any]:
    """The structurally empty AppData document (no profile key)."""
    return {name: [] for name in COLLECTIONS}


def normalize_role(role: str) -> str:
    """Map a role tag (English or Dutch) onto parents/kraamhulp."""
    key = (role or "").strip().lower()
    if key not in ROLE_ALIASES:
        raise ValueError(f"Unknown role: {role!r}")
    return ROLE_ALIASES[key]


def canonical_role(value: Any) -> Any:
    """Dutch role tags become their English form; anything else is returned as is."""
    if isinstance(value, str) and value.strip().lower() in ROLE_ALIASES:
        return ROLE_ALIASES[value.strip().lower()]
    return value


# =============================================================================
# Identity
# =============================================================================
class IdGenerator:
    """
    Strictly increasing id strings.

    Ids are the wall clock in microseconds; a call landing on the same tick
    (or after the clock stepped back) gets the previous id + 1. All ids have
    the same digit count, so sorting them as strings or as ints both give
    entry order.
    """

    def __init__(self, clock=_time.time_ns) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        candidate = self._clock() // 1000
        self._last = max(candidate, self._last + 1)
        return str(self._last)


def entry_order_key(item: Dict[str, Any]) -> tuple[int, str]:
    """Sort key recovering insertion order from an id (non-numeric ids sort first)."""
    rid = str(item.get("id") or "")
    return (int(rid), rid) if rid.isdigit() else (-1, rid)


# =============================================================================
# Datetime helpers
# =============================================================================
def now_iso() -> str:
    return dt_to_iso(datetime.now())


def dt_to_iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat()


def iso_to_dt(s: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts offsets and a trailing Z. Naive values ("2024-01-01T14:30:00", as
    written by now_iso) are read as local time, so naive and aware timestamps
    compare by the moment they describe.
    """
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        try:
            dt = dt.astimezone()
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {s}") from e
    return dt


def day_of(value: Union[str, date, datetime, None]) -> str:
    """YYYY-MM-DD date portion of a timestamp string or date."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value).strip()[:10]


def as_number(value: Any) -> Optional[float]:
    """Finite numeric value of an int/float or numeric string, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        v = float(value)
    elif isinstance(value, str):
        try:
            v = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return v if math.isfinite(v) else None


def fmt_num(v: float) -> str:
    """Format a measurement for messages (no trailing .0)."""
    return f"{float(v):g}"
