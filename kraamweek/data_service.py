# data_service.py
"""
DataService: the record repository.

Everything lives in one AppData document (five collections plus an optional
baby profile). Each mutation loads the whole document, changes it and writes
the whole document back. Two writers on the same store race and the last
save wins; there is no locking.

Storage failures never reach the caller: reads fall back to the empty
document, failed writes are logged and the in-memory result is still
returned. Only a document that is not an object of five collection lists is
set aside on read; single entities that fail validation are logged and kept,
so one odd entry never costs the rest of the data on the next write.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from . import analytics, filters, rules
from .config import DATA_DIR, STORAGE_KEY, USER_KEY, configure_logging
from .models import IdGenerator, canonical_role, empty_app_data, normalize_role, now_iso
from .schemas import UserSchema, entity_errors, validate_app_data, validate_baby_record, validate_mother_record
from .storage import JsonFileStore, Store

logger = logging.getLogger(__name__)


class DataService:
    def __init__(self, store: Optional[Store] = None, ids: Optional[IdGenerator] = None) -> None:
        # store=None means no storage medium: reads are empty, writes are no-ops
        self.store = store
        self.ids = ids or IdGenerator()

    # =========================================================================
    # Document load/save
    # =========================================================================
    def _read(self, key: str) -> Optional[str]:
        if self.store is None:
            return None
        try:
            return self.store.get(key)
        except OSError as e:
            logger.error(f"Failed to read {key}: {e}")
            return None

    def _write(self, key: str, value: Any) -> bool:
        if self.store is None:
            return False
        try:
            self.store.set(key, json.dumps(value, indent=2, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {key}: {e}")
            return False
        return True

    def load_data(self) -> Dict[str, Any]:
        """The stored AppData document, or the empty document if there is none or it is unusable."""
        raw = self._read(STORAGE_KEY)
        if raw is None:
            return empty_app_data()

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to load data: {e}")
            return empty_app_data()

        errors = validate_app_data(data)
        if errors:
            logger.error(f"Stored data does not look like an AppData document: {errors}")
            return empty_app_data()

        problems = entity_errors(data)
        if problems:
            logger.warning(f"Stored data has entities that do not validate, keeping them: {problems}")
        return data

    def save_data(self, data: Dict[str, Any]) -> bool:
        """Persist the whole document. Returns False (and logs) when nothing was written."""
        ok = self._write(STORAGE_KEY, data)
        if ok:
            logger.debug(f"Saved AppData ({len(data.get('babyRecords', []))} baby records)")
        return ok

    def _with_id(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {**item, "id": self.ids.next_id()}

    @staticmethod
    def _with_roles(item: Dict[str, Any]) -> Dict[str, Any]:
        # "ouders" is stored as "parents"
        roles = {k: canonical_role(item[k]) for k in ("assignedTo", "createdBy") if k in item}
        return {**item, **roles}

    # =========================================================================
    # Current user
    # =========================================================================
    def load_user(self) -> Optional[Dict[str, Any]]:
        raw = self._read(USER_KEY)
        if raw is None:
            return None
        try:
            user = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to load user: {e}")
            return None
        errors = UserSchema().validate(user)
        if errors:
            logger.error(f"Stored user is invalid: {errors}")
            return None
        return {**user, "role": normalize_role(user["role"])}

    def save_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        """Remember who is using the app. Raises ValueError for an unknown role."""
        stored = {**user, "role": normalize_role(user.get("role", ""))}
        self._write(USER_KEY, stored)
        return stored

    def clear_user(self) -> None:
        if self.store is None:
            return
        try:
            self.store.remove(USER_KEY)
        except OSError as e:
            logger.error(f"Failed to clear user: {e}")

    # =========================================================================
    # Records
    # =========================================================================
    def add_baby_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a baby observation and run the follow-up rules on it.

        The alert rules see the records as they were before this one was
        added. A derived alert or task is stored through add_alert/add_task.
        """
        errors = validate_baby_record(record)
        if errors:
            logger.warning(f"Baby record stored with validation errors: {errors}")

        data = self.load_data()
        previous = list(data["babyRecords"])
        new_record = self._with_id(record)

        data["babyRecords"].append(new_record)
        self.save_data(data)

        self._after_baby_record(new_record, previous)
        return new_record

    def _after_baby_record(self, record: Dict[str, Any], previous: List[Dict[str, Any]]) -> None:
        alert = rules.check_baby_record(record, previous)
        if alert is not None:
            self.add_alert(alert)

        task = rules.task_from_note(record)
        if task is not None:
            self.add_task(task)

    def add_mother_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        errors = validate_mother_record(record)
        if errors:
            logger.warning(f"Mother record stored with validation errors: {errors}")

        data = self.load_data()
        new_record = self._with_id(record)

        data["motherRecords"].append(new_record)
        self.save_data(data)

        alert = rules.check_mother_record(new_record)
        if alert is not None:
            self.add_alert(alert)
        return new_record

    def add_family_observation(self, observation: Dict[str, Any]) -> Dict[str, Any]:
        data = self.load_data()
        new_observation = self._with_id(observation)

        data["familyObservations"].append(new_observation)
        self.save_data(data)
        return new_observation

    # =========================================================================
    # Tasks
    # =========================================================================
    def add_task(self, task: Dict[str, Any]) -> Dict[str, Any]:
        data = self.load_data()
        new_task = {**self._with_id(self._with_roles(task)), "createdAt": now_iso()}

        data["tasks"].append(new_task)
        self.save_data(data)
        logger.info(f"Task {new_task['id']} added: {new_task.get('title', '')}")
        return new_task

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Merge `updates` into a task; None if there is no such task.

        Moving a task to completed stamps completedAt once; a task that
        already has completedAt keeps it. The id cannot be changed.
        """
        data = self.load_data()
        for i, t in enumerate(data["tasks"]):
            if t.get("id") != task_id:
                continue

            updated = {**t, **self._with_roles({k: v for k, v in updates.items() if k != "id"})}
            if updated.get("status") == "completed" and not updated.get("completedAt"):
                updated["completedAt"] = now_iso()

            data["tasks"][i] = updated
            self.save_data(data)
            return updated

        return None

    # =========================================================================
    # Alerts
    # =========================================================================
    def add_alert(self, alert: Dict[str, Any]) -> Dict[str, Any]:
        data = self.load_data()
        new_alert = self._with_id(alert)

        data["alerts"].append(new_alert)
        self.save_data(data)
        logger.info(f"{new_alert.get('type', 'info').upper()} alert ({new_alert.get('category')}): {new_alert.get('message')}")
        return new_alert

    def acknowledge_alert(
        self,
        alert_id: str,
        acknowledged_by: str,
        resolution_comment: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Mark an alert as seen. None if there is no such alert.

        Acknowledging twice overwrites the first acknowledgement. A blank
        comment is dropped rather than stored.
        """
        data = self.load_data()
        for i, a in enumerate(data["alerts"]):
            if a.get("id") != alert_id:
                continue

            updated = {
                **a,
                "acknowledged": True,
                "acknowledgedBy": acknowledged_by,
                "acknowledgedAt": now_iso(),
            }
            comment = (resolution_comment or "").strip()
            if comment:
                updated["resolutionComment"] = comment
            else:
                updated.pop("resolutionComment", None)

            data["alerts"][i] = updated
            self.save_data(data)
            return updated

        return None

    # =========================================================================
    # Baby profile
    # =========================================================================
    def get_baby_profile(self) -> Optional[Dict[str, Any]]:
        return self.load_data().get("babyProfile") or None

    def save_baby_profile(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or replace the baby profile.

        createdAt (and the id) survive updates, updatedAt is refreshed. A birth
        weight on the profile is also logged as a weight record at the birth
        moment, once per birth date + weight.
        """
        data = self.load_data()
        existing = data.get("babyProfile") or {}
        now = now_iso()

        new_profile = {
            **profile,
            "id": existing.get("id") or self.ids.next_id(),
            "createdAt": existing.get("createdAt") or now,
            "updatedAt": now,
        }
        data["babyProfile"] = new_profile

        birth_weight = rules.birth_weight_record(new_profile, data["babyRecords"])
        if birth_weight is not None:
            data["babyRecords"].append(self._with_id(birth_weight))
            logger.info(f"Birth weight {birth_weight['weight']} g logged at {birth_weight['timestamp']}")

        self.save_data(data)
        return new_profile

    def delete_baby_profile(self) -> None:
        """Forget the profile. Birth weight records logged from it stay."""
        data = self.load_data()
        data.pop("babyProfile", None)
        self.save_data(data)

    # =========================================================================
    # Bulk operations
    # =========================================================================
    def clear_all_data(self) -> None:
        if self.store is None:
            return
        try:
            self.store.remove(STORAGE_KEY)
        except OSError as e:
            logger.error(f"Failed to clear data: {e}")
            return
        logger.info("All data cleared")

    def export_data(self) -> str:
        return json.dumps(self.load_data(), indent=2, ensure_ascii=False)

    def import_data(self, text: str) -> bool:
        """
        Replace the whole document with `text`.

        Returns False, leaving stored data as it was, when the text is not
        JSON, is not an AppData document, or cannot be written.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to import data: {e}")
            return False

        errors = validate_app_data(data)
        if errors:
            logger.warning(f"Import rejected, not an AppData document: {errors}")
            return False

        problems = entity_errors(data)
        if problems:
            logger.warning(f"Imported entities that do not validate: {problems}")

        if not self.save_data(data):
            return False
        logger.info(
            f"Imported {len(data['babyRecords'])} baby records, {len(data['motherRecords'])} mother records, "
            f"{len(data['tasks'])} tasks, {len(data['alerts'])} alerts"
        )
        return True

    # =========================================================================
    # Queries
    # =========================================================================
    def get_unacknowledged_alerts(self) -> List[Dict[str, Any]]:
        alerts = filters.filter_alerts_by_status(self.load_data()["alerts"], acknowledged=False)
        return filters.sort_by_entry_order(alerts)

    def get_open_tasks(self) -> List[Dict[str, Any]]:
        tasks = [t for t in self.load_data()["tasks"] if t.get("status") != "completed"]
        return filters.sort_by_entry_order(tasks)

    def get_timeline(self) -> List[Dict[str, Any]]:
        return filters.build_timeline(self.load_data())

    # =========================================================================
    # Analytics
    # =========================================================================
    def get_analytics_data(self, start_date: analytics.DayLike, end_date: analytics.DayLike) -> Dict[str, Any]:
        data = self.load_data()
        return {
            "babyRecords": analytics.records_in_range(data["babyRecords"], start_date, end_date),
            "motherRecords": analytics.records_in_range(data["motherRecords"], start_date, end_date),
        }

    def get_daily_feeding_count(self, start_date: analytics.DayLike, end_date: analytics.DayLike) -> List[Dict[str, Any]]:
        return analytics.daily_feeding_count(self.load_data()["babyRecords"], start_date, end_date)

    def get_daily_weights(self, start_date: analytics.DayLike, end_date: analytics.DayLike) -> List[Dict[str, Any]]:
        return analytics.daily_weights(self.load_data()["babyRecords"], start_date, end_date)

    def get_daily_temperatures(
        self,
        start_date: analytics.DayLike,
        end_date: analytics.DayLike,
        who: str = "baby",
    ) -> List[Dict[str, Any]]:
        if who not in ("baby", "mother"):
            raise ValueError(f"who must be 'baby' or 'mother', got {who!r}")
        data = self.load_data()
        records = data["babyRecords"] if who == "baby" else data["motherRecords"]
        return analytics.daily_temperatures(records, start_date, end_date)

    def get_daily_pain_levels(self, start_date: analytics.DayLike, end_date: analytics.DayLike) -> List[Dict[str, Any]]:
        return analytics.daily_pain_levels(self.load_data()["motherRecords"], start_date, end_date)

    def get_daily_sleep_duration(self, start_date: analytics.DayLike, end_date: analytics.DayLike) -> List[Dict[str, Any]]:
        return analytics.daily_sleep_duration(self.load_data()["babyRecords"], start_date, end_date)


def create_data_service(data_dir: Optional[Union[str, Path]] = None) -> DataService:
    """Build the one DataService for this session, backed by JSON files under `data_dir`."""
    configure_logging()
    store = JsonFileStore(data_dir or DATA_DIR)
    logger.info(f"Using data directory {store.data_dir.resolve()}")
    return DataService(store)
