# clinic_portal/client/local/record_service.py
"""Array-of-records persistence under one local storage key."""

import logging
from typing import Any, Dict, List, Optional

from clinic_portal.client.storage import ChangeNotifier, LocalStorage
from clinic_portal.common.utils.global_functions import utc_now_iso

logger = logging.getLogger(__name__)


class LocalRecordService:
    """
    Records kept as one JSON array under ``storage_key``.

    Every write re-reads the array first and dispatches ``event`` on the
    notifier after persisting. Missing or corrupt data reads as empty.
    """

    storage_key: str = ""
    event: str = ""

    def __init__(self, storage: LocalStorage, notifier: Optional[ChangeNotifier] = None):
        self.storage = storage
        self.notifier = notifier or ChangeNotifier()

    def get_all(self) -> List[Dict[str, Any]]:
        data = self.storage.get_json(self.storage_key, [])
        return data if isinstance(data, list) else []

    def _save_all(self, records: List[Dict[str, Any]]) -> None:
        self.storage.set_json(self.storage_key, records)
        self.notifier.dispatch(self.event)

    def get_for_patient(self, patient_id: str) -> List[Dict[str, Any]]:
        return [r for r in self.get_all() if r.get("patientId") == patient_id]

    def get_for_doctor(self, doctor_id: str) -> List[Dict[str, Any]]:
        return [r for r in self.get_all() if r.get("doctorId") == doctor_id]

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.get_all():
            if record.get("id") == record_id:
                return record
        return None

    def add(self, record: Dict[str, Any]) -> Dict[str, Any]:
        records = self.get_all()
        new_record = {**record, "createdAt": utc_now_iso()}
        records.append(new_record)
        self._save_all(records)
        return new_record

    def update(self, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Shallow merge of ``changes``; ``None`` when no record has ``record_id``."""
        records = self.get_all()
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                records[index] = {**record, **changes, "updatedAt": utc_now_iso()}
                self._save_all(records)
                return records[index]
        return None

    def delete(self, record_id: str) -> bool:
        records = self.get_all()
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        self._save_all(remaining)
        return True

    def clear(self) -> None:
        self.storage.remove_item(self.storage_key)
        self.notifier.dispatch(self.event)

    def demo_records(self) -> List[Dict[str, Any]]:
        return []

    def initialize_demo_data(self) -> None:
        """Seed the fixed sample records, only when nothing is stored yet."""
        if self.get_all():
            return
        records = self.demo_records()
        if records:
            self._save_all(records)
            logger.info("Seeded %d demo records under %s", len(records), self.storage_key)
