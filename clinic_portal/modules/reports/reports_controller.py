# clinic_portal/modules/reports/reports_controller.py

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status

from clinic_portal.auth.dependencies import get_current_profile
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.llm.report_analysis import ReportAnalysisService
from clinic_portal.common.schemas import ApiResponse, DeletedData
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.records import MedicalReport

from . import reports_service as service
from .schemas import ReportAnalyzeRequest, ReportCreateRequest, ReportListData, ReportUpdateRequest

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=ApiResponse[ReportListData])
async def get_reports(
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    return ApiResponse(data=await service.list_reports(store, profile))


@router.post("", response_model=ApiResponse[MedicalReport], status_code=status.HTTP_201_CREATED)
async def upload_report(
    request: ReportCreateRequest,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Store report metadata for the calling patient."""
    report = await service.create_report(store, profile, request)
    return ApiResponse(message=GlobalMessages.REPORT_UPLOADED, data=report)


@router.put("/{report_id}", response_model=ApiResponse[MedicalReport])
async def update_report(
    report_id: str,
    request: ReportUpdateRequest,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    report = await service.update_report(store, profile, report_id, request)
    return ApiResponse(message=GlobalMessages.REPORT_UPDATED, data=report)


@router.delete("/{report_id}", response_model=ApiResponse[DeletedData])
async def delete_report(
    report_id: str,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    await service.delete_report(store, profile, report_id)
    return ApiResponse(message=GlobalMessages.REPORT_DELETED, data=DeletedData(id=report_id))


@router.post("/{report_id}/analyze", response_model=ApiResponse[MedicalReport])
async def analyze_report(
    report_id: str,
    request: Optional[ReportAnalyzeRequest] = Body(None),
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
    analyzer: ReportAnalysisService = Depends(service.get_report_analyzer),
):
    """Analyze a stored report; status goes analyzing then analyzed, or back to uploaded."""
    report = await service.analyze_report(
        store, profile, report_id, request or ReportAnalyzeRequest(), analyzer
    )
    return ApiResponse(message=GlobalMessages.REPORT_ANALYZED, data=report)
