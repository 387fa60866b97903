# clinic_portal/auth/auth_service.py

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from clinic_portal.common.config import settings
from clinic_portal.common.utils.global_functions import utc_now_iso
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.common.utils.errors import BadRequestError, UnauthorizedError
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import (
    IDENTITY_EMAIL_KEY, IDENTITY_KEY, USER_EMAIL_KEY, USER_KEY, UserRole,
)
from clinic_portal.auth.schemas import ProfileUpdateRequest, SignupRequest

logger = logging.getLogger(__name__)

# Initialize the password context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_SLOTS = ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"]
DEFAULT_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify that the provided password matches the hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """Create a JWT token including an expiration date."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ============================================================================
# IDENTITIES
# ============================================================================

def build_identity(email: str, password: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(uuid.uuid4()),
        "email": normalize_email(email),
        "passwordHash": hash_password(password),
        "userMetadata": metadata,
        "createdAt": utc_now_iso(),
    }


async def find_identity_by_email(store: KVStore, email: str) -> Optional[Dict[str, Any]]:
    user_id = await store.get(IDENTITY_EMAIL_KEY.format(email=normalize_email(email)))
    if not user_id:
        return None
    return await store.get(IDENTITY_KEY.format(user_id=user_id))


async def resolve_token(store: KVStore, token: str) -> Dict[str, Any]:
    """Decode a bearer token and return the identity it names."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except InvalidTokenError as exc:
        raise UnauthorizedError(GlobalMessages.UNAUTHORIZED) from exc

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError(GlobalMessages.UNAUTHORIZED)

    identity = await store.get(IDENTITY_KEY.format(user_id=user_id))
    if identity is None:
        raise UnauthorizedError(GlobalMessages.UNAUTHORIZED)
    return identity


# ============================================================================
# PROFILES
# ============================================================================

def build_profile(user_id: str, data: SignupRequest) -> Dict[str, Any]:
    """Profile document stored at ``user:{id}``."""
    profile: Dict[str, Any] = {
        "id": user_id,
        "email": normalize_email(data.email),
        "fullName": data.full_name.strip(),
        "phone": data.phone,
        "role": data.role.value,
        "createdAt": utc_now_iso(),
    }
    if data.role == UserRole.PATIENT:
        profile.update({
            "dateOfBirth": data.date_of_birth,
            "gender": data.gender,
            "bloodGroup": data.blood_group,
        })
    else:
        # Default values for newly registered doctors
        profile.update({
            "medicalLicenseNumber": data.medical_license_number,
            "specialization": data.specialization,
            "experience": data.experience or "New Doctor",
            "rating": data.rating or 4.5,
            "consultationFee": data.consultation_fee or 500,
            "hospital": data.hospital or "Available for Consultation",
            "qualifications": data.qualifications or data.medical_license_number or "MBBS",
            "availableSlots": data.available_slots or DEFAULT_SLOTS,
            "availableDays": data.available_days or DEFAULT_DAYS,
            "isActive": True,
        })
    return profile


async def signup_user(store: KVStore, data: SignupRequest) -> str:
    """
    Create an identity and its profile.

    Identity, email lookup, profile and profile email lookup are written in
    one transaction.
    """
    if await find_identity_by_email(store, data.email):
        raise BadRequestError(GlobalMessages.ACCOUNT_ALREADY_EXISTS)

    identity = build_identity(
        data.email,
        data.password,
        {"full_name": data.full_name, "role": data.role.value},
    )
    user_id = identity["id"]
    email = identity["email"]
    await store.mset({
        IDENTITY_KEY.format(user_id=user_id): identity,
        IDENTITY_EMAIL_KEY.format(email=email): user_id,
        USER_KEY.format(user_id=user_id): build_profile(user_id, data),
        USER_EMAIL_KEY.format(email=email): user_id,
    })
    logger.info("Registered %s account %s", data.role.value, user_id)
    return user_id


async def login_user(store: KVStore, email: str, password: str) -> Tuple[str, Optional[Dict[str, Any]]]:
    """Check credentials; returns the access token and the profile (if any)."""
    identity = await find_identity_by_email(store, email)
    if identity is None or not verify_password(password, identity["passwordHash"]):
        raise UnauthorizedError(GlobalMessages.INVALID_CREDENTIALS)

    token = create_access_token({"sub": identity["id"]})
    profile = await store.get(USER_KEY.format(user_id=identity["id"]))
    return token, profile


async def update_profile(
    store: KVStore,
    profile: Dict[str, Any],
    changes: ProfileUpdateRequest,
) -> Dict[str, Any]:
    updates = changes.model_dump(by_alias=True, exclude_unset=True)
    updated = {**profile, **updates, "updatedAt": utc_now_iso()}
    await store.set(USER_KEY.format(user_id=profile["id"]), updated)
    return updated
