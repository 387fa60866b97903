# clinic_portal/modules/appointments/appointments_controller.py
"""Appointments controller with API routes."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from clinic_portal.auth.dependencies import get_current_profile
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.records import Appointment

from . import appointments_service as service
from .schemas import AppointmentCreateRequest, AppointmentListData, AppointmentUpdateRequest

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=ApiResponse[AppointmentListData])
async def get_appointments(
    status_filter: Optional[str] = Query(
        None, alias="status",
        description="all, upcoming, today, or a literal status",
    ),
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Appointments of the caller (patient or doctor view)."""
    return ApiResponse(data=await service.list_appointments(store, profile, status_filter))


@router.post("", response_model=ApiResponse[Appointment], status_code=status.HTTP_201_CREATED)
async def book_appointment(
    request: AppointmentCreateRequest,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Book a new appointment (patients only)."""
    appointment = await service.book_appointment(store, profile, request)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_BOOKED, data=appointment)


@router.get("/{appointment_id}", response_model=ApiResponse[Appointment])
async def get_appointment(
    appointment_id: str,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    return ApiResponse(data=await service.get_appointment(store, profile, appointment_id))


@router.put("/{appointment_id}", response_model=ApiResponse[Appointment])
async def update_appointment(
    appointment_id: str,
    request: AppointmentUpdateRequest,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Update status or notes (doctors only)."""
    appointment = await service.update_appointment(store, profile, appointment_id, request)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_UPDATED, data=appointment)


@router.delete("/{appointment_id}", response_model=ApiResponse[Appointment])
async def cancel_appointment(
    appointment_id: str,
    store: KVStore = Depends(get_kv_store),
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """Cancel an appointment (patients only); the record is kept."""
    appointment = await service.cancel_appointment(store, profile, appointment_id)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_CANCELLED, data=appointment)
