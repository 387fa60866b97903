# clinic_portal/models/records.py
"""
Record shapes shared by the API and the offline client.

Records are stored as camelCase JSON documents. Unknown keys are kept so a
record read from storage and written back loses nothing.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import (
    AppointmentStatus, AppointmentType, ParameterStatus, PrescriptionStatus,
    ReportStatus, RiskSeverity, TimelineEntryType, UserRole,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class CamelRequest(CamelModel):
    """Request bodies drop keys they do not declare."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# USERS
# ============================================================================

class UserProfile(CamelModel):
    id: str
    email: str
    full_name: str = ""
    phone: Optional[str] = None
    role: UserRole
    created_at: Optional[str] = None
    # patient
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    # doctor
    medical_license_number: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[str] = None
    rating: Optional[float] = None
    consultation_fee: Optional[float] = None
    hospital: Optional[str] = None
    qualifications: Optional[str] = None
    available_slots: Optional[List[str]] = None
    available_days: Optional[List[str]] = None
    is_active: Optional[bool] = None


class DoctorProfile(CamelModel):
    id: str
    email: Optional[str] = None
    name: str = ""
    specialization: str = "General Physician"
    experience: str = "New Doctor"
    rating: float = 4.5
    consultation_fee: float = 500
    hospital: str = "Available for Consultation"
    phone: str = ""
    qualifications: str = "MBBS"
    available_slots: List[str] = Field(default_factory=list)
    available_days: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    is_active: bool = True


class DemoUser(CamelModel):
    id: str
    email: str
    role: UserRole
    full_name: str
    phone: Optional[str] = None


# ============================================================================
# APPOINTMENTS
# ============================================================================

class Appointment(CamelModel):
    id: str
    patient_id: str
    doctor_id: str
    patient_name: Optional[str] = None
    patient_email: Optional[str] = None
    patient_phone: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_specialization: Optional[str] = None
    hospital_name: Optional[str] = None
    appointment_date: str
    appointment_time: str
    appointment_type: AppointmentType = AppointmentType.IN_PERSON
    reason_for_visit: str = ""
    status: AppointmentStatus = AppointmentStatus.PENDING
    consultation_fee: Optional[float] = None
    notes: str = ""
    booked_at: Optional[str] = None
    updated_at: Optional[str] = None
    cancelled_at: Optional[str] = None
    cancelled_by: Optional[str] = None


# ============================================================================
# PRESCRIPTIONS
# ============================================================================

class MealTiming(CamelModel):
    before: bool = False
    after: bool = False


class MealFrequency(CamelModel):
    breakfast: MealTiming = Field(default_factory=MealTiming)
    lunch: MealTiming = Field(default_factory=MealTiming)
    dinner: MealTiming = Field(default_factory=MealTiming)


class Medicine(CamelModel):
    name: str
    dosage: str = ""
    frequency: Union[MealFrequency, str] = "As directed"
    duration: str = ""
    refills: int = 0


class Prescription(CamelModel):
    id: str
    patient_id: str
    patient_name: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    doctor_specialization: Optional[str] = None
    diagnosis: str = ""
    medicines: List[Medicine] = Field(default_factory=list)
    lab_tests: Union[List[str], str, None] = None
    instructions: str = ""
    follow_up_date: Optional[str] = None
    status: PrescriptionStatus = PrescriptionStatus.ACTIVE
    prescribed_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ============================================================================
# REPORTS & ANALYSIS
# ============================================================================

class HealthParameter(CamelModel):
    name: str
    value: str
    unit: str = ""
    normal_range: str = ""
    status: ParameterStatus = ParameterStatus.NORMAL
    category: str = ""

    @field_validator("value", "normal_range", mode="before")
    def numbers_as_text(cls, value):
        # Models often answer 14.2 instead of "14.2"
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class RiskFactor(CamelModel):
    severity: RiskSeverity
    title: str
    description: str = ""
    recommendation: str = ""


class AnalysisResult(CamelModel):
    summary: str
    report_type: str = ""
    parameters: List[HealthParameter] = Field(default_factory=list)
    risk_factors: List[RiskFactor] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    analyzed_at: Optional[str] = None


class MedicalReport(CamelModel):
    id: str
    patient_id: str
    patient_name: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[str] = None
    report_type: str = "other"
    report_date: Optional[str] = None
    date_uploaded: Optional[str] = None
    upload_date: Optional[str] = None
    status: ReportStatus = ReportStatus.UPLOADED
    lab_name: Optional[str] = None
    cost: Optional[str] = None
    ai_analysis: Optional[Dict[str, Any]] = None
    doctor_notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ============================================================================
# HEALTH TIMELINE
# ============================================================================

class HealthTimelineEntry(CamelModel):
    id: str
    patient_id: str
    date: str
    type: TimelineEntryType
    title: str
    value: Optional[str] = None
    normal_range: Optional[str] = None
    status: Optional[ParameterStatus] = None
    category: Optional[str] = None
    description: Optional[str] = None
    report_id: Optional[str] = None
    created_at: Optional[str] = None
