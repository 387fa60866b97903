# clinic_portal/modules/dashboard/schemas.py
"""Dashboard module schemas."""

from typing import List, Optional

from clinic_portal.models.records import Appointment, CamelModel, MedicalReport, Prescription


# ============================================================================
# PATIENT DASHBOARD
# ============================================================================

class RecentActivityCounts(CamelModel):
    appointments_last_3_months: int
    reports_last_3_months: int


class PatientDashboardData(CamelModel):
    upcoming_appointments: List[Appointment]
    recent_prescriptions: List[Prescription]
    recent_reports: List[MedicalReport]
    total_appointments: int
    completed_appointments: int
    upcoming_appointments_count: int
    active_prescriptions: int
    total_prescriptions: int
    total_reports: int
    health_score: int
    recent_activity: RecentActivityCounts


# ============================================================================
# DOCTOR DASHBOARD
# ============================================================================

class ActivityEntry(CamelModel):
    """Doctor activity feed entry (appointment booked, report uploaded)."""
    type: Optional[str] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    report_type: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    upload_date: Optional[str] = None
    created_at: Optional[str] = None


class DoctorDashboardData(CamelModel):
    today_appointments: List[Appointment]
    recent_activity: List[ActivityEntry]
    upcoming_appointments: List[Appointment]
    total_appointments: int
    completed_today: int
    pending_today: int
    total_patients: int
    total_appointments_all_time: int
    total_prescriptions: int
    total_reports: int
    this_week_appointments: int
    this_week_completed: int
