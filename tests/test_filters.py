# tests/test_filters.py
"""
Filtering, ordering, labels and the timeline

Usage: python -m pytest tests/test_filters.py -v
"""

from datetime import datetime

from kraamweek import filters


RECORDS = [
    {"id": "1000000000000001", "timestamp": "2024-01-01T08:00:00", "type": "feeding", "feedingType": "bottle", "amount": 60},
    {"id": "1000000000000002", "timestamp": "2024-01-02T09:00:00", "type": "sleep", "duration": 120},
    {"id": "1000000000000003", "timestamp": "2024-01-03T07:30:00", "type": "feeding", "feedingType": "breast_left"},
]


def test_filter_by_date_range_inclusive():
    result = filters.filter_records_by_date_range(RECORDS, "2024-01-02", "2024-01-03")
    assert [r["id"] for r in result] == ["1000000000000002", "1000000000000003"]


def test_filter_by_type():
    assert [r["type"] for r in filters.filter_by_type(RECORDS, "feeding")] == ["feeding", "feeding"]
    assert filters.filter_by_type(RECORDS, "jaundice") == []


def test_filter_alerts_and_tasks_by_status():
    alerts = [{"id": "1", "acknowledged": True}, {"id": "2", "acknowledged": False}, {"id": "3"}]
    assert [a["id"] for a in filters.filter_alerts_by_status(alerts, False)] == ["2", "3"]
    assert [a["id"] for a in filters.filter_alerts_by_status(alerts, True)] == ["1"]

    tasks = [{"id": "1", "status": "pending"}, {"id": "2", "status": "completed"}]
    assert filters.filter_tasks_by_status(tasks, "completed") == [tasks[1]]


def test_sort_records_by_timestamp():
    shuffled = [RECORDS[1], RECORDS[0], RECORDS[2], {"id": "x", "timestamp": "kapot", "type": "sleep"}]

    newest = filters.sort_records_by_timestamp(shuffled)
    assert [r["id"] for r in newest] == ["1000000000000003", "1000000000000002", "1000000000000001", "x"]

    oldest = filters.sort_records_by_timestamp(shuffled, ascending=True)
    assert oldest[0]["id"] == "x"
    assert oldest[-1]["id"] == "1000000000000003"


def test_sort_by_entry_order():
    items = [{"id": "1000000000000010"}, {"id": "1000000000000002"}, {"id": "legacy"}]
    assert [i["id"] for i in filters.sort_by_entry_order(items)] == ["1000000000000010", "1000000000000002", "legacy"]
    assert [i["id"] for i in filters.sort_by_entry_order(items, newest_first=False)][0] == "legacy"


def test_recent_records():
    now = datetime(2024, 1, 3, 12, 0, 0)
    result = filters.get_recent_records(RECORDS, days=1, now=now)
    assert [r["id"] for r in result] == ["1000000000000003"]


def test_baby_record_labels():
    assert filters.baby_record_title(RECORDS[0]) == "Voeding"
    assert filters.baby_record_details(RECORDS[0]) == "60 ml (fles)"
    assert filters.baby_record_details(RECORDS[2]) == "Linker borst"
    assert filters.baby_record_details({"type": "sleep", "duration": 45, "notes": "onrustig"}) == "45 minuten - onrustig"
    assert filters.baby_record_details({"type": "diaper", "diaperType": "wet", "diaperAmount": "much"}) == "Nat (much)"
    assert filters.baby_record_title({"type": "iets"}) == "Onbekend"


def test_mother_record_labels():
    bp = {"type": "blood_pressure", "bloodPressure": {"systolic": 120, "diastolic": 80}}
    assert filters.mother_record_title(bp) == "Bloeddruk"
    assert filters.mother_record_details(bp) == "120/80 mmHg"
    assert filters.mother_record_details({"type": "mood", "mood": "very_low"}) == "Zeer laag"
    assert filters.mother_record_details({"type": "pain", "painLevel": 6}) == "Niveau 6/10"


def test_build_timeline():
    data = {
        "babyRecords": [RECORDS[0]],
        "motherRecords": [{"id": "m1", "timestamp": "2024-01-02T10:00:00", "type": "temperature", "value": 38.6}],
        "familyObservations": [],
        "tasks": [{"id": "t1", "title": "Boodschappen", "status": "pending", "createdAt": "2024-01-01T12:00:00"}],
        "alerts": [
            {
                "id": "a1",
                "timestamp": "2024-01-02T10:00:01",
                "type": "critical",
                "category": "mother",
                "message": "Moeder heeft koorts: 38.6°C",
            }
        ],
    }
    timeline = filters.build_timeline(data)

    assert [e["id"] for e in timeline] == ["a1", "m1", "t1", RECORDS[0]["id"]]
    assert timeline[0]["kind"] == "alerts"
    assert timeline[0]["subtitle"] == "critical"
    assert timeline[1]["details"] == "38.6°C"
    assert timeline[2]["kind"] == "tasks"
    assert timeline[2]["subtitle"] == "pending"
    assert "subtitle" not in timeline[3]
