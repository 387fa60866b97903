import json
import os

import pytest

from clinic_portal.client.local import HealthTimelineService, PrescriptionService, ReportStorageService
from clinic_portal.client.local.prescription_service import PRESCRIPTIONS_KEY
from clinic_portal.client.storage import ChangeNotifier, JsonFileStorage, MemoryStorage


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    return JsonFileStorage(tmp_path / "storage.json")


def test_storage_strings_and_json(storage):
    assert storage.get_item("missing") is None
    storage.set_item("a", "1")
    storage.set_json("b", {"x": [1, 2]})
    assert storage.get_item("a") == "1"
    assert storage.get_json("b") == {"x": [1, 2]}
    storage.remove_item("a")
    assert storage.get_item("a") is None


def test_corrupt_value_reads_as_default(storage):
    storage.set_item(PRESCRIPTIONS_KEY, "{not json")
    assert storage.get_json(PRESCRIPTIONS_KEY, []) == []
    assert PrescriptionService(storage).get_all() == []


def test_listeners_see_writes(storage):
    seen = []
    storage.add_listener(seen.append)
    storage.set_item("a", "1")
    storage.remove_item("a")
    storage.remove_listener(seen.append)
    storage.set_item("b", "2")
    assert seen == ["a", "a"]


def test_file_storage_is_shared_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    first = JsonFileStorage(path)
    second = JsonFileStorage(path)

    PrescriptionService(first).add({"id": "rx1", "patientId": "p1"})
    assert [r["id"] for r in PrescriptionService(second).get_all()] == ["rx1"]
    assert json.loads(path.read_text(encoding="utf-8"))[PRESCRIPTIONS_KEY]


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("garbage", encoding="utf-8")
    storage = JsonFileStorage(path)
    assert storage.get_item("anything") is None
    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"


@pytest.mark.parametrize("failing", ["fdopen", "replace"])
def test_failed_write_keeps_old_file_and_no_temp_file(tmp_path, monkeypatch, failing):
    path = tmp_path / "storage.json"
    storage = JsonFileStorage(path)
    storage.set_item("k", "v")

    closed = []
    real_close = os.close

    def close(fd):
        closed.append(fd)
        real_close(fd)

    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "close", close)
    monkeypatch.setattr(os, failing, fail)
    with pytest.raises(OSError):
        storage.set_item("k", "changed")
    monkeypatch.undo()

    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]
    assert storage.get_item("k") == "v"
    if failing == "fdopen":
        assert len(closed) == 1


def test_record_service_crud_dispatches_events(storage):
    notifier = ChangeNotifier()
    events = []
    unsubscribe = notifier.subscribe("prescriptionUpdated", events.append)
    service = PrescriptionService(storage, notifier)

    added = service.add({"id": "rx1", "patientId": "p1", "doctorId": "d1", "status": "active"})
    assert added["createdAt"]
    service.add({"id": "rx2", "patientId": "p2", "doctorId": "d1"})

    assert [r["id"] for r in service.get_for_patient("p1")] == ["rx1"]
    assert [r["id"] for r in service.get_for_doctor("d1")] == ["rx1", "rx2"]

    updated = service.update("rx1", {"status": "completed"})
    assert updated["status"] == "completed"
    assert updated["patientId"] == "p1"
    assert updated["updatedAt"]
    assert service.update("missing", {"status": "completed"}) is None

    assert service.delete("rx1") is True
    assert service.delete("rx1") is False
    assert service.get_by_id("rx1") is None

    assert len(events) == 4
    unsubscribe()
    service.clear()
    assert service.get_all() == []
    assert len(events) == 4


def test_written_records_read_back_unchanged(storage):
    service = ReportStorageService(storage)
    record = {
        "id": "r1",
        "patientId": "p1",
        "fileName": "cbc.pdf",
        "aiAnalysis": {"summary": "ok", "parameters": [{"name": "Hb", "value": "14"}]},
        "custom": {"nested": [1, "two", None]},
    }
    stored = service.add(record)
    assert service.get_by_id("r1") == stored
    assert {k: stored[k] for k in record} == record


def test_demo_seed_only_when_empty(storage):
    prescriptions = PrescriptionService(storage)
    prescriptions.initialize_demo_data()
    assert [r["id"] for r in prescriptions.get_all()] == ["demo-presc-1"]
    prescriptions.initialize_demo_data()
    assert len(prescriptions.get_all()) == 1

    reports = ReportStorageService(storage)
    reports.add({"id": "mine", "patientId": "p1"})
    reports.initialize_demo_data()
    assert [r["id"] for r in reports.get_all()] == ["mine"]


def test_timeline_entries_by_patient_and_report(storage):
    timeline = HealthTimelineService(storage)
    timeline.add_many("p1", [
        {"id": "t1", "title": "Hb", "reportId": "r1"},
        {"id": "t2", "title": "WBC", "reportId": "r1"},
        {"id": "t3", "title": "BP"},
    ])
    timeline.add("p2", {"id": "t4", "title": "BP"})

    assert [e["id"] for e in timeline.get_for_patient("p1")] == ["t1", "t2", "t3"]
    assert timeline.get_for_patient("p1")[0]["patientId"] == "p1"
    assert timeline.add_many("p1", []) == []

    assert timeline.delete_by_report("p1", "r1") == 2
    assert timeline.delete_by_report("p1", "r1") == 0
    assert timeline.delete_entry("p1", "t3") is True
    assert timeline.delete_entry("p1", "t3") is False
    assert timeline.get_for_patient("p1") == []
    assert [e["id"] for e in timeline.get_for_patient("p2")] == ["t4"]


def test_timeline_demo_seed(storage):
    timeline = HealthTimelineService(storage)
    timeline.initialize_demo_data("p1")
    timeline.initialize_demo_data("p1")
    entries = timeline.get_for_patient("p1")
    assert [e["id"] for e in entries] == ["demo-timeline-1", "demo-timeline-2", "demo-timeline-3"]
