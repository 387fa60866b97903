# clinic_portal/modules/seed/seed_service.py
"""Sample data and test account seeding."""

import logging
from typing import Any, Dict

from clinic_portal.auth import auth_service
from clinic_portal.common.config import settings
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.global_functions import activity_item, utc_now_iso
from clinic_portal.models.models import (
    DOCTOR_KEY, IDENTITY_EMAIL_KEY, IDENTITY_KEY, SEED_MARKER_KEY,
    USER_EMAIL_KEY, USER_KEY, UserRole,
)
from clinic_portal.modules.appointments.appointments_service import (
    appointment_collection, appointment_owners,
)
from clinic_portal.modules.prescriptions.prescriptions_service import (
    prescription_collection, prescription_owners,
)
from clinic_portal.modules.reports.reports_service import report_collection, report_owners

from .sample_data import doctor_samples, patient_samples, sample_doctor_records
from .schemas import DoctorSeedResult, SeedResult, SeedPatientResult

logger = logging.getLogger(__name__)

TEST_PATIENT_PROFILE = {
    "fullName": "Arjun Sharma",
    "phone": "+91 98765 43210",
    "dateOfBirth": "1985-06-15",
    "gender": "male",
    "bloodGroup": "O+",
}


async def init_doctors(store: KVStore) -> DoctorSeedResult:
    """Write the sample doctor directory when ``SEED_SAMPLE_DOCTORS`` is on."""
    if not settings.SEED_SAMPLE_DOCTORS:
        return DoctorSeedResult(count=0)

    items: Dict[str, Any] = {}
    records = sample_doctor_records()
    for record in records:
        doctor_id = record["doctor"]["id"]
        items[USER_KEY.format(user_id=doctor_id)] = record["user"]
        items[DOCTOR_KEY.format(doctor_id=doctor_id)] = record["doctor"]
    await store.mset(items)
    logger.info("Seeded %d sample doctors", len(records))
    return DoctorSeedResult(count=len(records))


async def init_sample_data(store: KVStore, profile: Dict[str, Any]) -> SeedResult:
    """
    Seed sample appointments, prescriptions and reports for the caller.

    Runs once per user: a marker key records the seed, and sample ids are
    derived from the user id so a repeated run rewrites the same keys.
    """
    user_id = profile["id"]
    marker_key = SEED_MARKER_KEY.format(kind="sample", owner_id=user_id)
    marker = await store.get(marker_key)
    if marker:
        return SeedResult(initialized=False, **marker["counts"])

    if profile.get("role") == UserRole.DOCTOR.value:
        samples = doctor_samples(user_id)
    else:
        samples = patient_samples(user_id)

    items: Dict[str, Any] = {}
    appointments = appointment_collection(store)
    for appointment in samples["appointments"]:
        items.update(appointments.entries(appointment, appointment_owners(appointment)))
    prescriptions = prescription_collection(store)
    for prescription in samples["prescriptions"]:
        items.update(prescriptions.entries(prescription, prescription_owners(prescription)))
    reports = report_collection(store)
    for report in samples["reports"]:
        items.update(reports.entries(report, report_owners(report)))
    for entry in samples["activity"]:
        key, value = activity_item(user_id, entry["id"], entry)
        items[key] = value

    counts = {
        "appointments": len(samples["appointments"]),
        "prescriptions": len(samples["prescriptions"]),
        "reports": len(samples["reports"]),
    }
    items[marker_key] = {"seededAt": utc_now_iso(), "counts": counts}
    await store.mset(items)
    logger.info("Seeded sample data for %s %s", profile.get("role"), user_id)
    return SeedResult(initialized=True, **counts)


async def create_test_patient(store: KVStore) -> SeedPatientResult:
    """Create, or refresh the profile of, the configured test patient account."""
    email = auth_service.normalize_email(settings.TEST_PATIENT_EMAIL)
    identity = await auth_service.find_identity_by_email(store, email)
    if identity is None:
        identity = auth_service.build_identity(
            email,
            settings.TEST_PATIENT_PASSWORD,
            {"full_name": TEST_PATIENT_PROFILE["fullName"], "role": UserRole.PATIENT.value},
        )
    user_id = identity["id"]

    existing = await store.get(USER_KEY.format(user_id=user_id)) or {}
    profile = {
        "id": user_id,
        "email": email,
        "role": UserRole.PATIENT.value,
        **TEST_PATIENT_PROFILE,
        "createdAt": existing.get("createdAt") or utc_now_iso(),
    }
    await store.mset({
        IDENTITY_KEY.format(user_id=user_id): identity,
        IDENTITY_EMAIL_KEY.format(email=email): user_id,
        USER_KEY.format(user_id=user_id): profile,
        USER_EMAIL_KEY.format(email=email): user_id,
    })
    return SeedPatientResult(user_id=user_id, email=email)
