# clinic_portal/modules/doctors/doctors_service.py
"""Doctor directory built from registered doctor profiles."""

from typing import Any, Dict, List, Optional

from clinic_portal.auth.auth_service import DEFAULT_DAYS, DEFAULT_SLOTS
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.errors import NotFoundError
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import DOCTOR_KEY, USER_KEY, UserRole


def build_doctor_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Directory entry derived from a ``user:`` profile with defaults filled in."""
    return {
        "id": user["id"],
        "email": user.get("email"),
        "name": user.get("fullName", ""),
        "specialization": user.get("specialization") or "General Physician",
        "experience": user.get("experience") or "New Doctor",
        "rating": user.get("rating") or 4.5,
        "consultationFee": user.get("consultationFee") or 500,
        "hospital": user.get("hospital") or "Available for Consultation",
        "phone": user.get("phone") or "",
        "qualifications": user.get("qualifications") or user.get("medicalLicenseNumber") or "MBBS",
        "availableSlots": user.get("availableSlots") or DEFAULT_SLOTS,
        "availableDays": user.get("availableDays") or DEFAULT_DAYS,
        "createdAt": user.get("createdAt"),
        "isActive": True,
    }


async def find_doctor(store: KVStore, doctor_id: str) -> Optional[Dict[str, Any]]:
    """Full ``doctor:`` profile if present, otherwise one derived from the user profile."""
    doctor = await store.get(DOCTOR_KEY.format(doctor_id=doctor_id))
    if doctor:
        return doctor
    user = await store.get(USER_KEY.format(user_id=doctor_id))
    if not user or user.get("role") != UserRole.DOCTOR.value:
        return None
    return build_doctor_profile(user)


async def get_doctor(store: KVStore, doctor_id: str) -> Dict[str, Any]:
    doctor = await find_doctor(store, doctor_id)
    if doctor is None:
        raise NotFoundError(GlobalMessages.DOCTOR_NOT_FOUND)
    return doctor


async def list_doctors(store: KVStore) -> List[Dict[str, Any]]:
    """All registered doctors, highest rated first."""
    users = await store.get_by_prefix("user:")
    doctor_users = [
        user for user in users
        if isinstance(user, dict) and user.get("role") == UserRole.DOCTOR.value
    ]
    full_profiles = await store.mget(
        DOCTOR_KEY.format(doctor_id=user["id"]) for user in doctor_users
    )

    doctors = [
        full or build_doctor_profile(user)
        for user, full in zip(doctor_users, full_profiles)
    ]
    doctors.sort(key=lambda doctor: doctor.get("rating") or 0, reverse=True)
    return doctors
