# clinic_portal/auth/dependencies.py

from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from clinic_portal.auth import auth_service
from clinic_portal.common.config import settings
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.utils.errors import (
    ForbiddenError, NotFoundError, UnauthorizedError,
)
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.models import USER_KEY, UserRole

# auto_error=False so a missing header becomes our 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: KVStore = Depends(get_kv_store),
) -> Dict[str, Any]:
    """
    Dependency resolving the bearer token in the Authorization header to an identity.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(GlobalMessages.UNAUTHORIZED)
    return await auth_service.resolve_token(store, credentials.credentials)


async def get_current_profile(
    identity: Dict[str, Any] = Depends(get_current_identity),
    store: KVStore = Depends(get_kv_store),
) -> Dict[str, Any]:
    """Profile stored at ``user:{id}`` for the calling identity."""
    profile = await store.get(USER_KEY.format(user_id=identity["id"]))
    if profile is None:
        raise NotFoundError(GlobalMessages.PROFILE_NOT_FOUND)
    return profile


async def require_patient(profile: Dict[str, Any] = Depends(get_current_profile)) -> Dict[str, Any]:
    if profile.get("role") != UserRole.PATIENT.value:
        raise ForbiddenError(GlobalMessages.PATIENT_ONLY)
    return profile


async def require_doctor(profile: Dict[str, Any] = Depends(get_current_profile)) -> Dict[str, Any]:
    if profile.get("role") != UserRole.DOCTOR.value:
        raise ForbiddenError(GlobalMessages.DOCTOR_ONLY)
    return profile


async def verify_anon_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: KVStore = Depends(get_kv_store),
) -> None:
    """Accept the public anon key or any valid access token."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(GlobalMessages.AUTH_HEADER_MISSING)
    if credentials.credentials == settings.ANON_KEY:
        return
    await auth_service.resolve_token(store, credentials.credentials)
