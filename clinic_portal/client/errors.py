# clinic_portal/client/errors.py

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    AUTH = "auth"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    INTERNAL = "internal"


STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTH,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.VALIDATION,
}


class DataAccessError(Exception):
    """A failed data operation, typed so callers can branch on ``kind``."""

    def __init__(self, kind: ErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int, message: str) -> "DataAccessError":
        return cls(STATUS_KINDS.get(status_code, ErrorKind.INTERNAL), message, status_code)

    @property
    def is_network(self) -> bool:
        return self.kind is ErrorKind.NETWORK

    def __repr__(self) -> str:
        return f"DataAccessError({self.kind.value}, {self.message!r})"
