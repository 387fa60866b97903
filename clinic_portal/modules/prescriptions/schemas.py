# clinic_portal/modules/prescriptions/schemas.py
"""Prescription request and response schemas."""

from typing import List, Optional, Union

from pydantic import Field

from clinic_portal.models.models import PrescriptionStatus
from clinic_portal.models.records import CamelModel, CamelRequest, Medicine, Prescription


class PrescriptionFields(CamelRequest):
    diagnosis: str = ""
    medicines: List[Medicine] = Field(default_factory=list)
    lab_tests: Union[List[str], str, None] = None
    instructions: str = ""
    follow_up_date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}")


class PrescriptionCreateRequest(PrescriptionFields):
    """Body of ``POST /prescriptions``; the patient is named in the body."""
    patient_id: str = Field(..., min_length=1)


class PrescriptionUpdateRequest(CamelRequest):
    diagnosis: Optional[str] = None
    medicines: Optional[List[Medicine]] = None
    lab_tests: Union[List[str], str, None] = None
    instructions: Optional[str] = None
    follow_up_date: Optional[str] = None
    status: Optional[PrescriptionStatus] = None


class PrescriptionListData(CamelModel):
    prescriptions: List[Prescription]
    total_count: int
    active_count: int
    completed_count: int
    cancelled_count: int
