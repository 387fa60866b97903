# clinic_portal/modules/prescriptions/prescriptions_controller.py

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from clinic_portal.auth.dependencies import get_current_profile, require_doctor
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse, DeletedData
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.records import Prescription

from . import prescriptions_service as service
from .schemas import (
    PrescriptionCreateRequest, PrescriptionListData, PrescriptionUpdateRequest,
)

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=ApiResponse[PrescriptionListData])
async def get_prescriptions(
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Prescriptions written for (patient) or by (doctor) the caller."""
    return ApiResponse(data=await service.list_prescriptions(store, profile))


@router.post("", response_model=ApiResponse[Prescription], status_code=status.HTTP_201_CREATED)
async def create_prescription(
    request: PrescriptionCreateRequest,
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    prescription = await service.create_prescription(store, doctor, request.patient_id, request)
    return ApiResponse(message=GlobalMessages.PRESCRIPTION_ADDED, data=prescription)


@router.put("/{prescription_id}", response_model=ApiResponse[Prescription])
async def update_prescription(
    prescription_id: str,
    request: PrescriptionUpdateRequest,
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    prescription = await service.update_prescription(store, doctor, prescription_id, request)
    return ApiResponse(message=GlobalMessages.PRESCRIPTION_UPDATED, data=prescription)


@router.delete("/{prescription_id}", response_model=ApiResponse[DeletedData])
async def delete_prescription(
    prescription_id: str,
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    await service.delete_prescription(store, doctor, prescription_id)
    return ApiResponse(message=GlobalMessages.PRESCRIPTION_DELETED, data=DeletedData(id=prescription_id))
