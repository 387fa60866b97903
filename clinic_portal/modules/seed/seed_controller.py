# clinic_portal/modules/seed/seed_controller.py
"""Seed endpoints for demos and manual testing."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from clinic_portal.auth.dependencies import get_current_profile, verify_anon_key
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse
from clinic_portal.common.utils.global_messages import GlobalMessages

from . import seed_service as service
from .schemas import DoctorSeedResult, SeedResult, SeedPatientResult

router = APIRouter(tags=["Seed"])


@router.post(
    "/init-doctors",
    response_model=ApiResponse[DoctorSeedResult],
    dependencies=[Depends(verify_anon_key)],
)
async def init_doctors(store: KVStore = Depends(get_kv_store)):
    """Seed the sample doctor directory (only when enabled in settings)."""
    result = await service.init_doctors(store)
    message = (
        f"Initialized {result.count} sample doctors"
        if result.count
        else "No sample doctors to initialize. Only registered doctors will appear."
    )
    return ApiResponse(message=message, data=result)


@router.post("/init-sample-data", response_model=ApiResponse[SeedResult])
async def init_sample_data(
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    result = await service.init_sample_data(store, profile)
    message = (
        GlobalMessages.SAMPLE_DATA_INITIALIZED
        if result.initialized
        else GlobalMessages.SAMPLE_DATA_ALREADY_PRESENT
    )
    return ApiResponse(message=message, data=result)


@router.post(
    "/create-test-patient",
    response_model=ApiResponse[SeedPatientResult],
    dependencies=[Depends(verify_anon_key)],
)
async def create_test_patient(store: KVStore = Depends(get_kv_store)):
    result = await service.create_test_patient(store)
    return ApiResponse(message="Test patient account created/verified", data=result)
