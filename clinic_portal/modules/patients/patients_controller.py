# clinic_portal/modules/patients/patients_controller.py
"""Doctor-only patient management routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from clinic_portal.auth.dependencies import require_doctor
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.records import Prescription
from clinic_portal.modules.prescriptions import prescriptions_service
from clinic_portal.modules.prescriptions.schemas import PrescriptionFields

from . import patients_service as service
from .schemas import PatientDetailData, PatientListData

router = APIRouter(prefix="/doctor/patients", tags=["Patients"])


@router.get("", response_model=ApiResponse[PatientListData])
async def get_patients(
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    """Patients who booked with the calling doctor."""
    return ApiResponse(data=await service.list_patients(store, doctor))


@router.get("/{patient_id}", response_model=ApiResponse[PatientDetailData])
async def get_patient(
    patient_id: str,
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    return ApiResponse(data=await service.get_patient_detail(store, doctor, patient_id))


@router.post(
    "/{patient_id}/prescriptions",
    response_model=ApiResponse[Prescription],
    status_code=status.HTTP_201_CREATED,
)
async def add_patient_prescription(
    patient_id: str,
    request: PrescriptionFields,
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    """Prescribe for the patient named in the path."""
    prescription = await prescriptions_service.create_prescription(store, doctor, patient_id, request)
    return ApiResponse(message=GlobalMessages.PRESCRIPTION_ADDED, data=prescription)
