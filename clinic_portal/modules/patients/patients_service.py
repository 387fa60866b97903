# clinic_portal/modules/patients/patients_service.py
"""Patient roster and patient detail for doctors."""

from typing import Any, Dict, List

from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.appointment_filters import sort_appointments
from clinic_portal.models.models import USER_KEY, UserRole
from clinic_portal.modules.appointments.appointments_service import get_appointments_for
from clinic_portal.modules.prescriptions.prescriptions_service import (
    get_patient_profile, get_prescriptions_for,
)
from clinic_portal.modules.reports.reports_service import get_reports_for

from .schemas import PatientDetailData, PatientInfo, PatientListData, PatientStats, PatientSummary

PATIENT_FIELDS = ("id", "fullName", "email", "phone", "dateOfBirth", "gender", "bloodGroup", "createdAt")


def patient_info(profile: Dict[str, Any]) -> Dict[str, Any]:
    return {field: profile[field] for field in PATIENT_FIELDS if profile.get(field) is not None}


async def list_patients(store: KVStore, doctor: Dict[str, Any]) -> PatientListData:
    """Every patient who has an appointment with ``doctor``, most recent visit first."""
    appointments = await get_appointments_for(store, UserRole.DOCTOR.value, doctor["id"])
    patient_ids = list(dict.fromkeys(apt["patientId"] for apt in appointments if apt.get("patientId")))
    profiles = await store.mget(USER_KEY.format(user_id=pid) for pid in patient_ids)
    prescriptions = await get_prescriptions_for(store, UserRole.DOCTOR.value, doctor["id"])

    patients: List[PatientSummary] = []
    for patient_id, profile in zip(patient_ids, profiles):
        if not profile or profile.get("role") != UserRole.PATIENT.value:
            continue
        visits = [apt for apt in appointments if apt.get("patientId") == patient_id]
        last = sort_appointments(visits, reverse=True)[0] if visits else None
        reports = await get_reports_for(store, UserRole.PATIENT.value, patient_id)
        patients.append(PatientSummary(
            **patient_info(profile),
            last_visit=last.get("appointmentDate") if last else None,
            total_appointments=len(visits),
            total_prescriptions=len([p for p in prescriptions if p.get("patientId") == patient_id]),
            total_reports=len(reports),
        ))

    # No visit sorts last
    patients.sort(key=lambda p: p.last_visit or "", reverse=True)
    return PatientListData(patients=patients, total_count=len(patients))


async def get_patient_detail(store: KVStore, doctor: Dict[str, Any], patient_id: str) -> PatientDetailData:
    """Patient profile plus this doctor's appointments and prescriptions and all reports."""
    patient = await get_patient_profile(store, patient_id)

    appointments = [
        apt for apt in await get_appointments_for(store, UserRole.PATIENT.value, patient_id)
        if apt.get("doctorId") == doctor["id"]
    ]
    prescriptions = [
        p for p in await get_prescriptions_for(store, UserRole.PATIENT.value, patient_id)
        if p.get("doctorId") == doctor["id"]
    ]
    reports = await get_reports_for(store, UserRole.PATIENT.value, patient_id)

    return PatientDetailData(
        patient=PatientInfo(**patient_info(patient)),
        appointments=sort_appointments(appointments, reverse=True),
        prescriptions=prescriptions,
        reports=reports,
        stats=PatientStats(
            total_appointments=len(appointments),
            total_prescriptions=len(prescriptions),
            total_reports=len(reports),
        ),
    )
