import pytest
from pydantic import ValidationError

from clinic_portal.client.demo_mode import (
    DEMO_DATA_KEY, DEMO_MODE_KEY, DemoModeController, DemoState,
)
from clinic_portal.client.storage import MemoryStorage


@pytest.fixture
def demo():
    return DemoModeController(MemoryStorage())


def test_enable_and_disable(demo):
    assert demo.state is DemoState.REMOTE
    demo.enable()
    assert demo.is_demo()
    assert demo.storage.get_item(DEMO_MODE_KEY) == "true"
    assert demo.state is DemoState.DEMO
    demo.disable()
    assert not demo.is_demo()


def test_predefined_accounts_accept_demo_passwords(demo):
    result = demo.demo_login("Doctor@Demo.com ", "password123")
    assert result.success
    assert result.user.id == "demo-doctor-1"
    assert demo.is_demo()
    assert demo.get_user().email == "doctor@demo.com"


@pytest.mark.parametrize("email, password, error", [
    ("patient@demo.com", "wrong", "Invalid credentials"),
    ("nobody@demo.com", "demo123", "Account not found"),
])
def test_demo_login_failures(demo, email, password, error):
    result = demo.demo_login(email, password)
    assert not result.success
    assert result.error == error
    assert not demo.is_demo()


def test_demo_signup_account_logs_in_again(demo):
    result = demo.demo_signup({
        "email": "New.User@example.com", "password": "s3cret!", "fullName": "New User", "role": "patient",
    })
    assert result.success
    user_id = result.user.id
    assert user_id.startswith("demo-user-")
    assert demo.get_appointments(user_id) == []

    demo.disable(clear_data=False)
    assert demo.get_user() is None

    assert demo.demo_login("new.user@example.com", "wrong").error == "Invalid credentials"
    again = demo.demo_login("new.user@example.com", "s3cret!")
    assert again.success
    assert again.user.id == user_id
    assert "passwordHash" not in again.user.to_record()


def test_disable_clears_datasets_by_default(demo):
    demo.demo_login("patient@demo.com", "demo123")
    assert demo.storage.get_item(DEMO_DATA_KEY)
    demo.disable()
    assert demo.storage.get_item(DEMO_DATA_KEY) is None


def test_sample_data_created_once(demo):
    demo.init_demo_data("demo-patient-1", "patient")
    first = demo.get_appointments("demo-patient-1")
    assert [a["id"] for a in first] == ["demo-apt-1", "demo-apt-2"]
    demo.init_demo_data("demo-patient-1", "patient")
    assert demo.get_appointments("demo-patient-1") == first


def test_status_change_is_seen_by_both_parties(demo):
    doctor = demo.demo_login("doctor@demo.com", "demo123").user
    doctor_view = demo.get_appointments(doctor.id)
    assert [a["id"] for a in doctor_view] == ["demo-dr-apt-1"]
    assert [p["id"] for p in demo.get_patients(doctor.id)] == ["demo-patient-1", "demo-patient-2"]

    demo.update_appointment_status("demo-dr-apt-1", "completed", notes="Rest for two days")

    patient_view = demo.get_appointments("demo-patient-1")
    shared = next(a for a in patient_view if a["id"] == "demo-dr-apt-1")
    assert shared["status"] == "completed"
    assert shared["notes"] == "Rest for two days"
    assert demo.get_appointments(doctor.id)[0] == shared


def test_book_and_cancel(demo):
    patient = demo.demo_login("priya@example.com", "demo123").user
    booked = demo.book_appointment(patient, {
        "doctorId": "demo-dr-1", "appointmentDate": "2030-01-02", "appointmentTime": "10:00",
        "status": "confirmed",
    })
    assert booked["status"] == "pending"
    assert booked["patientId"] == "demo-patient-2"

    cancelled = demo.cancel_appointment(booked["id"])
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancelledBy"] == "patient"
    assert demo.cancel_appointment("missing") is None
    assert demo.get_doctors() == []


def test_incomplete_booking_is_rejected_before_storing(demo):
    patient = demo.demo_login("priya@example.com", "demo123").user
    before = demo.storage.get_item(DEMO_DATA_KEY)
    appointments = demo.get_appointments(patient.id)

    with pytest.raises(ValidationError):
        demo.book_appointment(patient, {"doctorId": "demo-dr-1"})

    assert demo.storage.get_item(DEMO_DATA_KEY) == before
    assert demo.get_appointments(patient.id) == appointments


def test_reads_never_create_sample_data(demo):
    assert demo.get_appointments("real-user-1") == []
    assert demo.get_patients("real-user-1") == []
    assert demo.storage.get_item(DEMO_DATA_KEY) is None


def test_roster_carries_no_stored_counts(demo):
    doctor = demo.demo_login("doctor@demo.com", "demo123").user
    for patient in demo.get_patients(doctor.id):
        assert not {"lastVisit", "totalAppointments", "totalPrescriptions", "totalReports"} & set(patient)
