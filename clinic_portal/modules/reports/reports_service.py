# clinic_portal/modules/reports/reports_service.py
"""Medical report storage and analysis."""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

from clinic_portal.common.config import settings
from clinic_portal.common.database.indexed_collection import IndexedCollection
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.llm.report_analysis import AnalysisError, ReportAnalysisService
from clinic_portal.common.utils.errors import (
    BadRequestError, ClinicError, ForbiddenError, NotFoundError,
)
from clinic_portal.common.utils.global_functions import activity_item, generate_id, utc_now_iso
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import ReportStatus, UserRole

from .schemas import ReportAnalyzeRequest, ReportCreateRequest, ReportListData, ReportUpdateRequest

logger = logging.getLogger(__name__)

REPORT_ENTITY = "report"


def get_report_analyzer() -> ReportAnalysisService:
    """FastAPI dependency; tests override it with a stub transport."""
    return ReportAnalysisService(
        api_url=settings.GEMINI_API_URL,
        api_key=settings.GEMINI_API_KEY,
        timeout=settings.ANALYSIS_TIMEOUT_SECONDS,
        mock_fallback=settings.ANALYSIS_MOCK_FALLBACK,
    )


def report_collection(store: KVStore) -> IndexedCollection:
    return IndexedCollection(store, REPORT_ENTITY)


def report_owners(report: Dict[str, Any]) -> Dict[str, Optional[str]]:
    return {
        UserRole.PATIENT.value: report.get("patientId"),
        UserRole.DOCTOR.value: report.get("doctorId"),
    }


def sort_reports(reports: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Most recently uploaded first."""
    return sorted(
        reports,
        key=lambda r: r.get("uploadDate") or r.get("dateUploaded") or "",
        reverse=True,
    )


async def get_reports_for(store: KVStore, role: str, owner_id: str) -> List[Dict[str, Any]]:
    return sort_reports(await report_collection(store).list_for(role, owner_id))


async def list_reports(store: KVStore, profile: Dict[str, Any]) -> ReportListData:
    reports = await get_reports_for(store, profile["role"], profile["id"])
    analyzed = [r for r in reports if r.get("aiAnalysis")]
    return ReportListData(
        reports=reports,
        total_count=len(reports),
        analyzed_count=len(analyzed),
        pending_count=len(reports) - len(analyzed),
    )


async def create_report(store: KVStore, profile: Dict[str, Any], request: ReportCreateRequest) -> Dict[str, Any]:
    """Store an uploaded report for the calling patient."""
    if profile.get("role") != UserRole.PATIENT.value:
        raise ForbiddenError(GlobalMessages.PATIENT_ONLY)

    now = utc_now_iso()
    report = {
        "id": generate_id("report"),
        "patientId": profile["id"],
        "patientName": profile.get("fullName", ""),
        **request.model_dump(by_alias=True, mode="json", exclude_none=True),
        "uploadDate": now,
        "dateUploaded": now,
        "createdAt": now,
    }

    extra = {}
    if request.doctor_id:
        key, activity = activity_item(request.doctor_id, report["id"], {
            "type": "report_uploaded",
            "patientId": profile["id"],
            "patientName": profile.get("fullName", ""),
            "reportId": report["id"],
            "reportType": request.report_type,
            "uploadDate": now,
            "createdAt": now,
        })
        extra[key] = activity

    await report_collection(store).create(report, report_owners(report), extra=extra)
    logger.info("Report %s uploaded by patient %s", report["id"], profile["id"])
    return report


async def get_report(store: KVStore, profile: Dict[str, Any], report_id: str) -> Dict[str, Any]:
    report = await report_collection(store).get_for(profile["role"], profile["id"], report_id)
    if report is None:
        raise NotFoundError(GlobalMessages.REPORT_NOT_FOUND)
    return report


async def update_report(
    store: KVStore,
    profile: Dict[str, Any],
    report_id: str,
    changes: ReportUpdateRequest,
) -> Dict[str, Any]:
    await get_report(store, profile, report_id)
    updates = changes.model_dump(by_alias=True, mode="json", exclude_unset=True)
    return await report_collection(store).update(report_id, updates)


async def delete_report(store: KVStore, profile: Dict[str, Any], report_id: str) -> None:
    report = await get_report(store, profile, report_id)
    await report_collection(store).delete(report_id, report_owners(report))
    logger.info("Report %s deleted by %s", report_id, profile["id"])


def decode_content(request: ReportAnalyzeRequest) -> Optional[bytes]:
    if not request.file_content:
        return None
    data = request.file_content
    # Accept data URLs as produced by browsers
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadRequestError("fileContent must be base64 encoded") from exc


async def analyze_report(
    store: KVStore,
    profile: Dict[str, Any],
    report_id: str,
    request: ReportAnalyzeRequest,
    analyzer: ReportAnalysisService,
) -> Dict[str, Any]:
    """
    Run analysis for a stored report.

    The report moves to ``analyzing`` first, then to ``analyzed`` with the
    result attached. A failed analysis puts it back to ``uploaded``.
    """
    report = await get_report(store, profile, report_id)
    content = decode_content(request)
    collection = report_collection(store)
    await collection.update(report_id, {"status": ReportStatus.ANALYZING.value})

    try:
        analysis = await analyzer.analyze(
            report.get("fileName") or report.get("reportType") or report_id,
            content,
            request.mime_type,
        )
    except AnalysisError as exc:
        await collection.update(report_id, {"status": ReportStatus.UPLOADED.value})
        logger.error("Analysis of report %s failed: %s", report_id, exc)
        raise ClinicError(GlobalMessages.REPORT_ANALYSIS_FAILED) from exc

    changes: Dict[str, Any] = {
        "status": ReportStatus.ANALYZED.value,
        "aiAnalysis": analysis,
    }
    if report.get("reportType") in (None, "", "other") and analysis.get("reportType"):
        changes["reportType"] = analysis["reportType"]
    return await collection.update(report_id, changes)
