# clinic_portal/modules/appointments/schemas.py
"""Appointments request and response schemas."""

from typing import List, Optional

from pydantic import Field

from clinic_portal.models.models import AppointmentStatus, AppointmentType
from clinic_portal.models.records import Appointment, CamelModel, CamelRequest


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class AppointmentCreateRequest(CamelRequest):
    """Booking request from a patient."""
    doctor_id: str = Field(..., min_length=1)
    appointment_date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    appointment_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    appointment_type: AppointmentType = AppointmentType.IN_PERSON
    reason_for_visit: str = ""


class AppointmentUpdateRequest(CamelRequest):
    """Doctor-side update; only status and notes may change."""
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class AppointmentListData(CamelModel):
    appointments: List[Appointment]
    total_count: int
    upcoming_count: int
    today_count: int
    pending_count: int
    confirmed_count: int
    completed_count: int
    cancelled_count: int
