# clinic_portal/modules/dashboard/dashboard_controller.py
"""Dashboard controller with API routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from clinic_portal.auth.dependencies import require_doctor, require_patient
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse

from . import dashboard_service as service
from .schemas import DoctorDashboardData, PatientDashboardData

router = APIRouter(tags=["Dashboard"])


@router.get("/patient/dashboard", response_model=ApiResponse[PatientDashboardData])
async def get_patient_dashboard(
    store: KVStore = Depends(get_kv_store),
    patient: Dict[str, Any] = Depends(require_patient),
):
    """Upcoming care, recent prescriptions and reports, and the health score."""
    return ApiResponse(data=await service.get_patient_dashboard(store, patient))


@router.get("/doctor/dashboard", response_model=ApiResponse[DoctorDashboardData])
async def get_doctor_dashboard(
    store: KVStore = Depends(get_kv_store),
    doctor: Dict[str, Any] = Depends(require_doctor),
):
    """Today's schedule, the week ahead and the activity feed."""
    return ApiResponse(data=await service.get_doctor_dashboard(store, doctor))
