# clinic_portal/auth/schemas.py

import re
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from clinic_portal.models.models import UserRole
from clinic_portal.models.records import CamelModel, CamelRequest, UserProfile

PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-()]{7,20}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SignupRequest(CamelRequest):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=2)
    phone: str = ""
    role: UserRole = UserRole.PATIENT
    # Patient specific
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    # Doctor specific
    medical_license_number: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[str] = None
    rating: Optional[float] = None
    consultation_fee: Optional[float] = None
    hospital: Optional[str] = None
    qualifications: Optional[str] = None
    available_slots: Optional[List[str]] = None
    available_days: Optional[List[str]] = None

    @field_validator("phone")
    def validate_phone(cls, value):
        if value and not PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone number")
        return value

    @field_validator("date_of_birth")
    def validate_date_of_birth(cls, value):
        if value and not DATE_PATTERN.match(value):
            raise ValueError("dateOfBirth must be YYYY-MM-DD")
        return value

    @model_validator(mode="after")
    def validate_doctor_fields(self):
        if self.role == UserRole.DOCTOR:
            if not self.specialization:
                raise ValueError("specialization is required for doctors")
            if not self.medical_license_number:
                raise ValueError("medicalLicenseNumber is required for doctors")
        return self


class SignupResult(CamelModel):
    user_id: str


class LoginRequest(CamelRequest):
    email: EmailStr
    password: str


class LoginResult(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[UserProfile] = None


class ProfileUpdateRequest(CamelRequest):
    """Mutable profile fields; identity fields (id, email, role) are ignored."""
    full_name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    blood_group: Optional[str] = None
    specialization: Optional[str] = None
    experience: Optional[str] = None
    consultation_fee: Optional[float] = None
    hospital: Optional[str] = None
    qualifications: Optional[str] = None
    available_slots: Optional[List[str]] = None
    available_days: Optional[List[str]] = None

    @field_validator("phone")
    def validate_phone(cls, value):
        if value and not PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone number")
        return value
