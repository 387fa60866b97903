# clinic_portal/client/local/health_timeline_service.py
"""Per-patient health timeline kept in local storage."""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from clinic_portal.client.storage import ChangeNotifier, LocalStorage
from clinic_portal.common.utils.global_functions import utc_now_iso

HEALTH_TIMELINE_KEY = "clinic-health-timeline"
TIMELINE_UPDATED = "healthTimelineUpdated"


def _days_ago(days: int) -> str:
    return (date.today() - timedelta(days=days)).isoformat()


class HealthTimelineService:
    """Entries stored as one JSON object mapping patientId to a list of entries."""

    storage_key = HEALTH_TIMELINE_KEY
    event = TIMELINE_UPDATED

    def __init__(self, storage: LocalStorage, notifier: Optional[ChangeNotifier] = None):
        self.storage = storage
        self.notifier = notifier or ChangeNotifier()

    def get_all(self) -> Dict[str, List[Dict[str, Any]]]:
        data = self.storage.get_json(self.storage_key, {})
        return data if isinstance(data, dict) else {}

    def _save_all(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        self.storage.set_json(self.storage_key, data)
        self.notifier.dispatch(self.event)

    def get_for_patient(self, patient_id: str) -> List[Dict[str, Any]]:
        return list(self.get_all().get(patient_id) or [])

    def add(self, patient_id: str, entry: Dict[str, Any]) -> Dict[str, Any]:
        return self.add_many(patient_id, [entry])[0]

    def add_many(self, patient_id: str, entries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        data = self.get_all()
        now = utc_now_iso()
        new_entries = [{**entry, "patientId": patient_id, "createdAt": now} for entry in entries]
        if not new_entries:
            return []
        data.setdefault(patient_id, []).extend(new_entries)
        self._save_all(data)
        return new_entries

    def delete_entry(self, patient_id: str, entry_id: str) -> bool:
        data = self.get_all()
        entries = data.get(patient_id) or []
        remaining = [e for e in entries if e.get("id") != entry_id]
        if len(remaining) == len(entries):
            return False
        data[patient_id] = remaining
        self._save_all(data)
        return True

    def delete_by_report(self, patient_id: str, report_id: str) -> int:
        """Remove every entry derived from ``report_id``; returns how many went."""
        data = self.get_all()
        entries = data.get(patient_id) or []
        remaining = [e for e in entries if e.get("reportId") != report_id]
        deleted = len(entries) - len(remaining)
        if deleted:
            data[patient_id] = remaining
            self._save_all(data)
        return deleted

    def clear(self) -> None:
        self.storage.remove_item(self.storage_key)
        self.notifier.dispatch(self.event)

    def initialize_demo_data(self, patient_id: str) -> None:
        if self.get_for_patient(patient_id):
            return
        self.add_many(patient_id, [
            {
                "id": "demo-timeline-1",
                "date": _days_ago(30),
                "type": "lab_result",
                "title": "Blood Pressure",
                "value": "120/80 mmHg",
                "normalRange": "90-120/60-80",
                "status": "normal",
                "category": "Vital Signs",
            },
            {
                "id": "demo-timeline-2",
                "date": _days_ago(60),
                "type": "lab_result",
                "title": "Blood Sugar (Fasting)",
                "value": "95 mg/dL",
                "normalRange": "70-100 mg/dL",
                "status": "normal",
                "category": "Blood Sugar",
            },
            {
                "id": "demo-timeline-3",
                "date": _days_ago(90),
                "type": "diagnosis",
                "title": "Annual Physical Exam",
                "description": "Routine checkup - All parameters normal",
                "category": "General",
            },
        ])
