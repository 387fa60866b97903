# clinic_portal/modules/appointments/appointments_service.py
"""Appointments service for business logic."""

import logging
from typing import Any, Dict, List, Optional

from clinic_portal.common.database.indexed_collection import IndexedCollection
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.appointment_filters import (
    count_appointments, filter_appointments, sort_appointments,
)
from clinic_portal.common.utils.errors import ForbiddenError, NotFoundError
from clinic_portal.common.utils.global_functions import activity_item, generate_id, utc_now_iso
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import AppointmentStatus, UserRole
from clinic_portal.modules.doctors.doctors_service import find_doctor

from .schemas import AppointmentCreateRequest, AppointmentListData, AppointmentUpdateRequest

logger = logging.getLogger(__name__)

APPOINTMENT_ENTITY = "appointment"


def appointment_collection(store: KVStore) -> IndexedCollection:
    return IndexedCollection(store, APPOINTMENT_ENTITY)


def appointment_owners(appointment: Dict[str, Any]) -> Dict[str, Optional[str]]:
    return {
        UserRole.PATIENT.value: appointment.get("patientId"),
        UserRole.DOCTOR.value: appointment.get("doctorId"),
    }


async def get_appointments_for(store: KVStore, role: str, owner_id: str) -> List[Dict[str, Any]]:
    """Every appointment indexed under ``owner_id``, oldest first."""
    items = await appointment_collection(store).list_for(role, owner_id)
    return sort_appointments(items)


async def list_appointments(
    store: KVStore,
    profile: Dict[str, Any],
    status_filter: Optional[str] = None,
) -> AppointmentListData:
    """Caller's appointments filtered by ``status_filter``; counts cover the whole list."""
    items = await get_appointments_for(store, profile["role"], profile["id"])
    counts = count_appointments(items)
    return AppointmentListData(appointments=filter_appointments(items, status_filter), **counts)


async def get_appointment(store: KVStore, profile: Dict[str, Any], appointment_id: str) -> Dict[str, Any]:
    appointment = await appointment_collection(store).get_for(
        profile["role"], profile["id"], appointment_id
    )
    if appointment is None:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)
    return appointment


async def book_appointment(
    store: KVStore,
    profile: Dict[str, Any],
    request: AppointmentCreateRequest,
) -> Dict[str, Any]:
    """
    Book an appointment as the calling patient.

    The record, both owner index entries and the doctor's activity entry are
    written in one transaction.
    """
    if profile.get("role") != UserRole.PATIENT.value:
        raise ForbiddenError(GlobalMessages.ONLY_PATIENTS_BOOK)

    doctor = await find_doctor(store, request.doctor_id)
    if doctor is None:
        raise NotFoundError(GlobalMessages.DOCTOR_NOT_FOUND)

    now = utc_now_iso()
    appointment = {
        "id": generate_id("apt"),
        "patientId": profile["id"],
        "patientName": profile.get("fullName", ""),
        "patientEmail": profile.get("email", ""),
        "patientPhone": profile.get("phone") or "",
        "doctorId": request.doctor_id,
        "doctorName": doctor.get("name", ""),
        "doctorSpecialization": doctor.get("specialization"),
        "hospitalName": doctor.get("hospital"),
        "appointmentDate": request.appointment_date,
        "appointmentTime": request.appointment_time,
        "appointmentType": request.appointment_type.value,
        "reasonForVisit": request.reason_for_visit,
        "status": AppointmentStatus.PENDING.value,
        "consultationFee": doctor.get("consultationFee"),
        "notes": "",
        "bookedAt": now,
    }
    activity_key, activity = activity_item(request.doctor_id, appointment["id"], {
        "type": "appointment_booked",
        "patientId": profile["id"],
        "patientName": profile.get("fullName", ""),
        "appointmentId": appointment["id"],
        "appointmentDate": request.appointment_date,
        "appointmentTime": request.appointment_time,
        "createdAt": now,
    })

    await appointment_collection(store).create(
        appointment, appointment_owners(appointment), extra={activity_key: activity}
    )
    logger.info("Appointment %s booked with doctor %s", appointment["id"], request.doctor_id)
    return appointment


async def update_appointment(
    store: KVStore,
    profile: Dict[str, Any],
    appointment_id: str,
    changes: AppointmentUpdateRequest,
) -> Dict[str, Any]:
    """Doctor changes status or notes on one of their appointments."""
    if profile.get("role") != UserRole.DOCTOR.value:
        raise ForbiddenError(GlobalMessages.ONLY_DOCTORS_UPDATE)

    collection = appointment_collection(store)
    if await collection.get_for(UserRole.DOCTOR.value, profile["id"], appointment_id) is None:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)

    updates = changes.model_dump(by_alias=True, mode="json", exclude_none=True)
    updated = await collection.update(appointment_id, updates)
    logger.info("Appointment %s updated by doctor %s: %s", appointment_id, profile["id"], updates)
    return updated


async def cancel_appointment(store: KVStore, profile: Dict[str, Any], appointment_id: str) -> Dict[str, Any]:
    """Patient cancellation keeps the record with status ``cancelled``."""
    if profile.get("role") != UserRole.PATIENT.value:
        raise ForbiddenError(GlobalMessages.ONLY_PATIENTS_CANCEL)

    collection = appointment_collection(store)
    if await collection.get_for(UserRole.PATIENT.value, profile["id"], appointment_id) is None:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)

    return await collection.update(appointment_id, {
        "status": AppointmentStatus.CANCELLED.value,
        "cancelledAt": utc_now_iso(),
        "cancelledBy": UserRole.PATIENT.value,
    })
