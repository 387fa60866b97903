# clinic_portal/common/schemas.py
"""Response envelope used by every endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: T


class ErrorResponse(BaseModel):
    error: str


class DeletedData(BaseModel):
    id: str
