# clinic_portal/client/demo_mode.py
"""
Demo mode: an offline session served entirely from local storage.

A ``DemoModeController`` is created per client session and handed to the
objects that need it. Its state lives in local storage:

    clinic-demo-mode   "true" while demo mode is on
    clinic-demo-user   the signed-in demo identity
    clinic-demo-data   per-user datasets keyed by user id
"""

import enum
import logging
import time
import uuid
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext
from pydantic import BaseModel

from clinic_portal.client.storage import LocalStorage
from clinic_portal.common.utils.global_functions import utc_now_iso
from clinic_portal.models.models import AppointmentStatus, UserRole
from clinic_portal.models.records import Appointment, DemoUser

logger = logging.getLogger(__name__)

DEMO_MODE_KEY = "clinic-demo-mode"
DEMO_USER_KEY = "clinic-demo-user"
DEMO_DATA_KEY = "clinic-demo-data"

DEMO_PASSWORDS = ("demo123", "password123")

DEMO_ACCOUNTS: Dict[str, Dict[str, str]] = {
    "patient@demo.com": {
        "id": "demo-patient-1", "email": "patient@demo.com", "role": "patient",
        "fullName": "Demo Patient", "phone": "+91 98765 43210",
    },
    "doctor@demo.com": {
        "id": "demo-doctor-1", "email": "doctor@demo.com", "role": "doctor",
        "fullName": "Dr. Demo Doctor", "phone": "+91 98765 54321",
    },
    "arjun.singh@email.com": {
        "id": "demo-patient-1", "email": "arjun.singh@email.com", "role": "patient",
        "fullName": "Arjun Singh", "phone": "+91 98765 11111",
    },
    "rahul@example.com": {
        "id": "demo-patient-1", "email": "rahul@example.com", "role": "patient",
        "fullName": "Rahul Verma", "phone": "+91 98765 11111",
    },
    "priya@example.com": {
        "id": "demo-patient-2", "email": "priya@example.com", "role": "patient",
        "fullName": "Priya Singh", "phone": "+91 98765 22222",
    },
}

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class DemoState(str, enum.Enum):
    REMOTE = "remote"
    DEMO = "demo"


class DemoAuthResult(BaseModel):
    success: bool
    user: Optional[DemoUser] = None
    error: Optional[str] = None


def _day(offset: int = 0) -> str:
    return (date.today() + timedelta(days=offset)).isoformat()


# ============================================================================
# SAMPLE DATASETS
# ============================================================================

def sample_patient_appointments(user_id: str) -> List[Dict[str, Any]]:
    booked_at = utc_now_iso()
    return [
        {
            "id": "demo-apt-1",
            "patientId": user_id,
            "patientName": "Demo Patient",
            "patientEmail": "patient@demo.com",
            "patientPhone": "+91 98765 43210",
            "doctorId": "demo-dr-1",
            "doctorName": "Dr. Priya Sharma",
            "doctorSpecialization": "Cardiologist",
            "hospitalName": "Apollo Hospital, Mumbai",
            "appointmentDate": _day(1),
            "appointmentTime": "10:00",
            "appointmentType": "in-person",
            "reasonForVisit": "Regular checkup",
            "status": "confirmed",
            "consultationFee": 800,
            "bookedAt": booked_at,
            "notes": "",
        },
        {
            "id": "demo-apt-2",
            "patientId": user_id,
            "patientName": "Demo Patient",
            "patientEmail": "patient@demo.com",
            "patientPhone": "+91 98765 43210",
            "doctorId": "demo-dr-2",
            "doctorName": "Dr. Rajesh Kumar",
            "doctorSpecialization": "General Physician",
            "hospitalName": "Fortis Hospital, Delhi",
            "appointmentDate": _day(7),
            "appointmentTime": "14:00",
            "appointmentType": "telemedicine",
            "reasonForVisit": "Follow-up consultation",
            "status": "pending",
            "consultationFee": 500,
            "bookedAt": booked_at,
            "notes": "",
        },
    ]


def sample_doctor_appointments(user_id: str) -> List[Dict[str, Any]]:
    return [{
        "id": "demo-dr-apt-1",
        "patientId": "demo-patient-1",
        "patientName": "Arjun Singh",
        "patientEmail": "arjun.singh@email.com",
        "patientPhone": "+91 98765 11111",
        "doctorId": user_id,
        "doctorName": "Dr. Demo Doctor",
        "doctorSpecialization": "General Physician",
        "hospitalName": "City Hospital",
        "appointmentDate": _day(0),
        "appointmentTime": "11:00",
        "appointmentType": "in-person",
        "reasonForVisit": "Fever and cough",
        "status": "confirmed",
        "consultationFee": 500,
        "bookedAt": utc_now_iso(),
        "notes": "",
    }]


def sample_patients() -> List[Dict[str, Any]]:
    return [
        {
            "id": "demo-patient-1",
            "fullName": "Arjun Singh",
            "email": "arjun.singh@email.com",
            "phone": "+91 98765 11111",
            "dateOfBirth": "1990-05-15",
            "gender": "male",
            "bloodGroup": "O+",
            "role": "patient",
            "createdAt": _day(-180),
        },
        {
            "id": "demo-patient-2",
            "fullName": "Priya Singh",
            "email": "priya@example.com",
            "phone": "+91 98765 22222",
            "dateOfBirth": "1985-08-22",
            "gender": "female",
            "bloodGroup": "A+",
            "role": "patient",
            "createdAt": _day(-90),
        },
    ]


class DemoModeController:
    """Demo flag, demo identity and demo datasets for one client session."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> DemoState:
        return DemoState.DEMO if self.is_demo() else DemoState.REMOTE

    def is_demo(self) -> bool:
        return self.storage.get_item(DEMO_MODE_KEY) == "true"

    def enable(self) -> None:
        if not self.is_demo():
            self.storage.set_item(DEMO_MODE_KEY, "true")
            logger.info("Demo mode enabled")

    def disable(self, clear_data: bool = True) -> None:
        """Leave demo mode, dropping the demo identity and, by default, all demo datasets."""
        self.storage.remove_item(DEMO_MODE_KEY)
        self.storage.remove_item(DEMO_USER_KEY)
        if clear_data:
            self.storage.remove_item(DEMO_DATA_KEY)
        logger.info("Demo mode disabled")

    def get_user(self) -> Optional[DemoUser]:
        data = self.storage.get_json(DEMO_USER_KEY)
        if not isinstance(data, dict):
            return None
        return DemoUser.model_validate(data)

    def set_user(self, user: Optional[DemoUser]) -> None:
        if user is None:
            self.clear_user()
        else:
            self.storage.set_json(DEMO_USER_KEY, user.to_record())

    def clear_user(self) -> None:
        self.storage.remove_item(DEMO_USER_KEY)

    # ----------------------------------------------------------------- data

    def _load(self) -> Dict[str, Dict[str, Any]]:
        data = self.storage.get_json(DEMO_DATA_KEY, {})
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Dict[str, Any]]) -> None:
        self.storage.set_json(DEMO_DATA_KEY, data)

    def init_demo_data(self, user_id: str, role: str) -> None:
        """Create the sample dataset for ``user_id``; no-op when it already has one."""
        data = self._load()
        if user_id in data:
            return
        is_patient = role == UserRole.PATIENT.value
        data[user_id] = {
            "appointments": (
                sample_patient_appointments(user_id) if is_patient
                else sample_doctor_appointments(user_id)
            ),
            "patients": [] if is_patient else sample_patients(),
        }
        self._save(data)

    def _enter(self, user: DemoUser) -> None:
        self.enable()
        self.set_user(user)
        self.init_demo_data(user.id, user.role.value)

    # ------------------------------------------------------------------ auth

    def demo_login(self, email: str, password: str) -> DemoAuthResult:
        email = email.strip().lower()
        account = DEMO_ACCOUNTS.get(email)
        if account and password in DEMO_PASSWORDS:
            user = DemoUser.model_validate(account)
            self._enter(user)
            return DemoAuthResult(success=True, user=user)

        for dataset in self._load().values():
            stored = dataset.get("user") or {}
            if stored.get("email") != email:
                continue
            if pwd_context.verify(password, stored.get("passwordHash", "")):
                user = DemoUser.model_validate(
                    {k: v for k, v in stored.items() if k != "passwordHash"}
                )
                self._enter(user)
                return DemoAuthResult(success=True, user=user)
            return DemoAuthResult(success=False, error="Invalid credentials")

        if account:
            return DemoAuthResult(success=False, error="Invalid credentials")
        return DemoAuthResult(success=False, error="Account not found")

    def demo_signup(self, signup_data: Dict[str, Any]) -> DemoAuthResult:
        """Create a local demo account; it can log in again with the same password."""
        user = DemoUser(
            id=f"demo-user-{uuid.uuid4().hex}",
            email=str(signup_data.get("email", "")).strip().lower(),
            role=signup_data.get("role") or UserRole.PATIENT,
            full_name=signup_data.get("fullName") or signup_data.get("full_name") or "",
            phone=signup_data.get("phone"),
        )
        data = self._load()
        data[user.id] = {
            "user": {
                **user.to_record(),
                "passwordHash": pwd_context.hash(signup_data.get("password", "")),
            },
            "appointments": [],
            "patients": [],
        }
        self._save(data)
        self._enter(user)
        return DemoAuthResult(success=True, user=user)

    # ---------------------------------------------------------- appointments

    def get_appointments(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Appointments where ``user_id`` is the patient or the doctor, across all datasets.

        Read-only: sample data is only created when a demo identity is
        entered, so a real account falling back offline sees what it already
        has stored locally and nothing more.
        """
        seen = set()
        found = []
        for dataset in self._load().values():
            for appointment in dataset.get("appointments") or []:
                if appointment.get("id") in seen:
                    continue
                if user_id in (appointment.get("patientId"), appointment.get("doctorId")):
                    seen.add(appointment.get("id"))
                    found.append(appointment)
        return found

    def book_appointment(self, user: DemoUser, appointment_data: Dict[str, Any]) -> Dict[str, Any]:
        """Store a pending booking for ``user``; raises ``ValidationError`` before writing anything."""
        appointment = {
            **appointment_data,
            "id": f"demo-apt-{int(time.time() * 1000)}",
            "patientId": user.id,
            "patientName": user.full_name,
            "patientEmail": user.email,
            "patientPhone": user.phone,
            "bookedAt": utc_now_iso(),
            "status": AppointmentStatus.PENDING.value,
        }
        Appointment.model_validate(appointment)

        data = self._load()
        dataset = data.setdefault(user.id, {"appointments": [], "patients": []})
        dataset.setdefault("appointments", []).append(appointment)
        self._save(data)
        return appointment

    def update_appointment(self, appointment_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge ``changes`` into the one stored copy of the appointment."""
        data = self._load()
        for dataset in data.values():
            appointments = dataset.get("appointments") or []
            for index, appointment in enumerate(appointments):
                if appointment.get("id") == appointment_id:
                    appointments[index] = {**appointment, **changes, "updatedAt": utc_now_iso()}
                    self._save(data)
                    return appointments[index]
        return None

    def update_appointment_status(
        self, appointment_id: str, status: str, notes: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        changes: Dict[str, Any] = {"status": status}
        if notes is not None:
            changes["notes"] = notes
        return self.update_appointment(appointment_id, changes)

    def cancel_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        return self.update_appointment(appointment_id, {
            "status": AppointmentStatus.CANCELLED.value,
            "cancelledAt": utc_now_iso(),
            "cancelledBy": UserRole.PATIENT.value,
        })

    # --------------------------------------------------------------- rosters

    def get_patients(self, user_id: str) -> List[Dict[str, Any]]:
        """Roster profiles only; activity counts are derived by the caller."""
        return list(self._load().get(user_id, {}).get("patients") or [])

    def get_doctors(self) -> List[Dict[str, Any]]:
        # Only registered doctors are listed; demo mode has none
        return []
