# clinic_portal/modules/prescriptions/prescriptions_service.py
"""Prescriptions service for business logic."""

import logging
from typing import Any, Dict, List, Optional

from clinic_portal.common.database.indexed_collection import IndexedCollection
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.errors import NotFoundError
from clinic_portal.common.utils.global_functions import generate_id, utc_now_iso
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import PrescriptionStatus, USER_KEY, UserRole

from .schemas import PrescriptionFields, PrescriptionListData, PrescriptionUpdateRequest

logger = logging.getLogger(__name__)

PRESCRIPTION_ENTITY = "prescription"


def prescription_collection(store: KVStore) -> IndexedCollection:
    return IndexedCollection(store, PRESCRIPTION_ENTITY)


def prescription_owners(prescription: Dict[str, Any]) -> Dict[str, Optional[str]]:
    return {
        UserRole.PATIENT.value: prescription.get("patientId"),
        UserRole.DOCTOR.value: prescription.get("doctorId"),
    }


def sort_prescriptions(prescriptions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Newest first."""
    return sorted(prescriptions, key=lambda p: p.get("prescribedDate") or "", reverse=True)


async def get_prescriptions_for(store: KVStore, role: str, owner_id: str) -> List[Dict[str, Any]]:
    return sort_prescriptions(await prescription_collection(store).list_for(role, owner_id))


def build_list(prescriptions: List[Dict[str, Any]]) -> PrescriptionListData:
    def count(status: PrescriptionStatus) -> int:
        return len([p for p in prescriptions if p.get("status") == status.value])

    return PrescriptionListData(
        prescriptions=prescriptions,
        total_count=len(prescriptions),
        active_count=count(PrescriptionStatus.ACTIVE),
        completed_count=count(PrescriptionStatus.COMPLETED),
        cancelled_count=count(PrescriptionStatus.CANCELLED),
    )


async def list_prescriptions(store: KVStore, profile: Dict[str, Any]) -> PrescriptionListData:
    return build_list(await get_prescriptions_for(store, profile["role"], profile["id"]))


async def get_patient_profile(store: KVStore, patient_id: str) -> Dict[str, Any]:
    patient = await store.get(USER_KEY.format(user_id=patient_id))
    if not patient or patient.get("role") != UserRole.PATIENT.value:
        raise NotFoundError(GlobalMessages.PATIENT_NOT_FOUND)
    return patient


async def create_prescription(
    store: KVStore,
    doctor: Dict[str, Any],
    patient_id: str,
    data: PrescriptionFields,
) -> Dict[str, Any]:
    """Prescribe for ``patient_id``; the record and both index entries commit together."""
    patient = await get_patient_profile(store, patient_id)
    now = utc_now_iso()
    fields = data.model_dump(by_alias=True, mode="json", exclude={"patient_id"})

    prescription = {
        "id": generate_id("presc"),
        "patientId": patient_id,
        "patientName": patient.get("fullName", ""),
        "doctorId": doctor["id"],
        "doctorName": doctor.get("fullName", ""),
        "doctorSpecialization": doctor.get("specialization") or "General Physician",
        **fields,
        "labTests": fields.get("labTests") or [],
        "prescribedDate": now,
        "status": PrescriptionStatus.ACTIVE.value,
        "createdAt": now,
    }
    await prescription_collection(store).create(prescription, prescription_owners(prescription))
    logger.info("Prescription %s created for patient %s", prescription["id"], patient_id)
    return prescription


async def get_doctor_prescription(store: KVStore, doctor: Dict[str, Any], prescription_id: str) -> Dict[str, Any]:
    prescription = await prescription_collection(store).get_for(
        UserRole.DOCTOR.value, doctor["id"], prescription_id
    )
    if prescription is None:
        raise NotFoundError(GlobalMessages.PRESCRIPTION_NOT_FOUND)
    return prescription


async def update_prescription(
    store: KVStore,
    doctor: Dict[str, Any],
    prescription_id: str,
    changes: PrescriptionUpdateRequest,
) -> Dict[str, Any]:
    await get_doctor_prescription(store, doctor, prescription_id)
    updates = changes.model_dump(by_alias=True, mode="json", exclude_unset=True)
    return await prescription_collection(store).update(prescription_id, updates)


async def delete_prescription(store: KVStore, doctor: Dict[str, Any], prescription_id: str) -> None:
    """Remove the record together with its patient and doctor index entries."""
    prescription = await get_doctor_prescription(store, doctor, prescription_id)
    await prescription_collection(store).delete(prescription_id, prescription_owners(prescription))
    logger.info("Prescription %s deleted by doctor %s", prescription_id, doctor["id"])
