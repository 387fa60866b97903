# clinic_portal/modules/patients/schemas.py
"""Doctor-facing patient roster schemas."""

from typing import List, Optional

from clinic_portal.models.records import Appointment, CamelModel, MedicalReport, Prescription


class PatientInfo(CamelModel):
    id: str
    full_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    created_at: Optional[str] = None


class PatientSummary(PatientInfo):
    """Roster row with per-doctor activity counts."""
    last_visit: Optional[str] = None
    total_appointments: int = 0
    total_prescriptions: int = 0
    total_reports: int = 0


class PatientListData(CamelModel):
    patients: List[PatientSummary]
    total_count: int


class PatientStats(CamelModel):
    total_appointments: int
    total_prescriptions: int
    total_reports: int


class PatientDetailData(CamelModel):
    patient: PatientInfo
    appointments: List[Appointment]
    prescriptions: List[Prescription]
    reports: List[MedicalReport]
    stats: PatientStats
