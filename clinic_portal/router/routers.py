# clinic_portal/router/routers.py

from fastapi import FastAPI

from clinic_portal.auth.auth_controller import router as auth_router
from clinic_portal.common.config import settings
from clinic_portal.modules.appointments.appointments_controller import router as appointments_router
from clinic_portal.modules.dashboard.dashboard_controller import router as dashboard_router
from clinic_portal.modules.doctors.doctors_controller import router as doctors_router
from clinic_portal.modules.patients.patients_controller import router as patients_router
from clinic_portal.modules.prescriptions.prescriptions_controller import router as prescriptions_router
from clinic_portal.modules.reports.reports_controller import router as reports_router
from clinic_portal.modules.seed.seed_controller import router as seed_router


def include_routers(app: FastAPI) -> None:
    """Include all API routers under the function path prefix."""
    prefix = settings.API_PREFIX
    app.include_router(auth_router, prefix=prefix)
    app.include_router(doctors_router, prefix=prefix)
    app.include_router(appointments_router, prefix=prefix)
    app.include_router(prescriptions_router, prefix=prefix)
    app.include_router(reports_router, prefix=prefix)
    app.include_router(dashboard_router, prefix=prefix)
    app.include_router(patients_router, prefix=prefix)
    app.include_router(seed_router, prefix=prefix)
