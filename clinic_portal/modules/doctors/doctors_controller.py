# clinic_portal/modules/doctors/doctors_controller.py
"""Doctor directory routes; open to the anon key."""

from fastapi import APIRouter, Depends

from clinic_portal.auth.dependencies import verify_anon_key
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse
from clinic_portal.models.records import DoctorProfile

from . import doctors_service as service
from .schemas import DoctorListData

router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"],
    dependencies=[Depends(verify_anon_key)],
)


@router.get("", response_model=ApiResponse[DoctorListData])
async def get_doctors(store: KVStore = Depends(get_kv_store)):
    """List registered doctors sorted by rating."""
    doctors = await service.list_doctors(store)
    return ApiResponse(data=DoctorListData(doctors=doctors, total_count=len(doctors)))


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorProfile])
async def get_doctor(doctor_id: str, store: KVStore = Depends(get_kv_store)):
    return ApiResponse(data=await service.get_doctor(store, doctor_id))
