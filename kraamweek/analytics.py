# analytics.py
"""
Daily time series for charts.

All functions take record lists plus an inclusive [start, end] day range
(`date` objects or "YYYY-MM-DD" strings) and return a list of
{"date": "YYYY-MM-DD", <metric>: value} dicts sorted by date.

A record belongs to the day written in its timestamp string, so a record at
"2024-01-01T23:30:00" counts for 2024-01-01 whatever its offset.

Only the feeding count is gap-filled (one entry per calendar day, zero when
nothing was logged). The other series only contain days that have data.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Union

import pandas as pd

from .models import day_of

DayLike = Union[str, date]


def _day_range(start: DayLike, end: DayLike) -> tuple[str, str]:
    s, e = day_of(start), day_of(end)
    # Raises ValueError on anything that isn't a calendar day
    date.fromisoformat(s)
    date.fromisoformat(e)
    return s, e


def records_in_range(records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    s, e = _day_range(start, end)
    return [r for r in records if s <= day_of(r.get("timestamp")) <= e]


def _daily_values(
    records: List[Dict[str, Any]],
    record_type: str,
    field: str,
    start: DayLike,
    end: DayLike,
) -> pd.DataFrame:
    """
    Frame of (date, value) for one record type inside the range.

    Values are coerced to numbers; strings that aren't numbers, missing
    values and values <= 0 are dropped.
    """
    s, e = _day_range(start, end)
    rows = [
        {"date": day_of(r.get("timestamp")), "value": r.get(field)}
        for r in records
        if r.get("type") == record_type
    ]
    df = pd.DataFrame(rows, columns=["date", "value"])
    df = df[(df["date"] >= s) & (df["date"] <= e)]
    df = df.assign(value=pd.to_numeric(df["value"], errors="coerce"))
    return df[df["value"] > 0]


def _points(series: pd.Series, key: str) -> List[Dict[str, Any]]:
    series = series.sort_index()
    return [{"date": d, key: v} for d, v in zip(series.index, series.tolist())]


def daily_feeding_count(baby_records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    """Feedings per day, one entry for every day in range (0 when none)."""
    s, e = _day_range(start, end)
    days = [day_of(r.get("timestamp")) for r in baby_records if r.get("type") == "feeding"]
    df = pd.DataFrame({"date": days}, columns=["date"])
    counts = df[(df["date"] >= s) & (df["date"] <= e)].groupby("date").size()

    all_days = pd.date_range(s, e, freq="D").strftime("%Y-%m-%d")
    counts = counts.reindex(all_days, fill_value=0).astype(int)
    return _points(counts, "count")


def daily_weights(baby_records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    df = _daily_values(baby_records, "weight", "weight", start, end)
    return _points(df.groupby("date")["value"].mean(), "weight")


def daily_temperatures(records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    """Mean temperature per day; works for baby and mother records alike."""
    df = _daily_values(records, "temperature", "value", start, end)
    return _points(df.groupby("date")["value"].mean(), "temperature")


def daily_pain_levels(mother_records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    df = _daily_values(mother_records, "pain", "painLevel", start, end)
    return _points(df.groupby("date")["value"].mean(), "painLevel")


def daily_sleep_duration(baby_records: List[Dict[str, Any]], start: DayLike, end: DayLike) -> List[Dict[str, Any]]:
    """Total minutes slept per day."""
    df = _daily_values(baby_records, "sleep", "duration", start, end)
    return _points(df.groupby("date")["value"].sum(), "duration")
