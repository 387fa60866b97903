# clinic_portal/modules/reports/schemas.py
"""Medical report request and response schemas."""

from typing import Any, Dict, List, Optional

from clinic_portal.models.models import ReportStatus
from clinic_portal.models.records import CamelModel, CamelRequest, MedicalReport


class ReportCreateRequest(CamelRequest):
    file_name: Optional[str] = None
    file_size: Optional[str] = None
    report_type: str = "other"
    report_date: Optional[str] = None
    lab_name: Optional[str] = None
    cost: Optional[str] = None
    # Doctor who should see the report and get an activity entry
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    status: ReportStatus = ReportStatus.UPLOADED
    ai_analysis: Optional[Dict[str, Any]] = None


class ReportUpdateRequest(CamelRequest):
    report_type: Optional[str] = None
    report_date: Optional[str] = None
    lab_name: Optional[str] = None
    status: Optional[ReportStatus] = None
    ai_analysis: Optional[Dict[str, Any]] = None
    doctor_notes: Optional[str] = None


class ReportAnalyzeRequest(CamelRequest):
    """Report file as base64; without it only the mock fallback can answer."""
    file_content: Optional[str] = None
    mime_type: str = "application/pdf"


class ReportListData(CamelModel):
    reports: List[MedicalReport]
    total_count: int
    analyzed_count: int
    pending_count: int
