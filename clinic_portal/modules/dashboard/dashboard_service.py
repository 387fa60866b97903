# clinic_portal/modules/dashboard/dashboard_service.py
"""Dashboard service for patient and doctor summaries."""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.models.models import ACTIVITY_PREFIX, UserRole
from clinic_portal.modules.appointments.appointments_service import get_appointments_for
from clinic_portal.modules.prescriptions.prescriptions_service import get_prescriptions_for
from clinic_portal.modules.reports.reports_service import get_reports_for

from .dashboard_stats import build_doctor_dashboard, build_patient_dashboard, recent_entries
from .schemas import DoctorDashboardData, PatientDashboardData


async def get_patient_dashboard(
    store: KVStore,
    patient: Dict[str, Any],
    today: Optional[date] = None,
) -> PatientDashboardData:
    role = UserRole.PATIENT.value
    appointments = await get_appointments_for(store, role, patient["id"])
    prescriptions = await get_prescriptions_for(store, role, patient["id"])
    reports = await get_reports_for(store, role, patient["id"])
    return build_patient_dashboard(appointments, prescriptions, reports, today)


async def get_recent_activity(store: KVStore, doctor_id: str, since: datetime) -> List[Dict[str, Any]]:
    """Activity feed entries newer than ``since``, newest first."""
    entries = await store.get_by_prefix(ACTIVITY_PREFIX.format(doctor_id=doctor_id))
    return recent_entries(entries, since)


async def get_doctor_dashboard(
    store: KVStore,
    doctor: Dict[str, Any],
    today: Optional[date] = None,
) -> DoctorDashboardData:
    role = UserRole.DOCTOR.value
    appointments = await get_appointments_for(store, role, doctor["id"])
    prescriptions = await get_prescriptions_for(store, role, doctor["id"])
    reports = await get_reports_for(store, role, doctor["id"])
    activity = await get_recent_activity(
        store, doctor["id"], datetime.now(timezone.utc) - timedelta(days=7)
    )
    return build_doctor_dashboard(appointments, prescriptions, reports, activity, today)
