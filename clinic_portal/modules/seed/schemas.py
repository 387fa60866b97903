# clinic_portal/modules/seed/schemas.py

from clinic_portal.models.records import CamelModel


class SeedResult(CamelModel):
    initialized: bool
    appointments: int = 0
    prescriptions: int = 0
    reports: int = 0


class DoctorSeedResult(CamelModel):
    count: int


class SeedPatientResult(CamelModel):
    user_id: str
    email: str
