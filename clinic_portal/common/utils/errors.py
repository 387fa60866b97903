# clinic_portal/common/utils/errors.py
"""Service-level errors mapped to the ``{"error": ...}`` envelope in main.py."""


class ClinicError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ClinicError):
    status_code = 400


class UnauthorizedError(ClinicError):
    status_code = 401


class ForbiddenError(ClinicError):
    status_code = 403


class NotFoundError(ClinicError):
    status_code = 404
