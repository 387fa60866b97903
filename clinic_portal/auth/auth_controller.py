# clinic_portal/auth/auth_controller.py

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from clinic_portal.auth import auth_service, schemas
from clinic_portal.auth.dependencies import get_current_profile, verify_anon_key
from clinic_portal.common.database.kv_store import KVStore, get_kv_store
from clinic_portal.common.schemas import ApiResponse
from clinic_portal.common.utils.global_messages import GlobalMessages
from clinic_portal.models.records import UserProfile

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=ApiResponse[schemas.SignupResult],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(verify_anon_key)],
)
async def signup(
    signup_data: schemas.SignupRequest,
    store: KVStore = Depends(get_kv_store),
):
    """
    Register a new account and its profile.

    - **email**, **password**, **fullName**, **phone**, **role**
    - patients: **dateOfBirth**, **gender**, **bloodGroup**
    - doctors: **medicalLicenseNumber**, **specialization** (required)
    """
    user_id = await auth_service.signup_user(store, signup_data)
    return ApiResponse(
        message=GlobalMessages.ACCOUNT_CREATED,
        data=schemas.SignupResult(user_id=user_id),
    )


@router.post(
    "/login",
    response_model=ApiResponse[schemas.LoginResult],
    dependencies=[Depends(verify_anon_key)],
)
async def login(
    credentials: schemas.LoginRequest,
    store: KVStore = Depends(get_kv_store),
):
    """Exchange email and password for a bearer access token."""
    token, profile = await auth_service.login_user(store, credentials.email, credentials.password)
    return ApiResponse(
        message=GlobalMessages.LOGIN_SUCCESS,
        data=schemas.LoginResult(access_token=token, user=profile),
    )


@router.get("/profile", response_model=ApiResponse[UserProfile])
async def get_profile(profile: Dict[str, Any] = Depends(get_current_profile)):
    """Profile of the authenticated caller."""
    return ApiResponse(data=profile)


@router.put("/profile", response_model=ApiResponse[UserProfile])
async def update_profile(
    changes: schemas.ProfileUpdateRequest,
    profile: Dict[str, Any] = Depends(get_current_profile),
    store: KVStore = Depends(get_kv_store),
):
    updated = await auth_service.update_profile(store, profile, changes)
    return ApiResponse(message=GlobalMessages.PROFILE_UPDATED, data=updated)
