import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ANON_KEY", "test-anon-key")
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("ANALYSIS_MOCK_FALLBACK", "true")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clinic_portal.common.config import settings
from clinic_portal.common.database.database import build_engine, create_tables, get_db_session
from clinic_portal.common.database.kv_store import KVStore
from clinic_portal.main import app

ANON_HEADERS = {"Authorization": f"Bearer {settings.ANON_KEY}"}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def session_factory():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def store(session_factory):
    async with session_factory() as session:
        yield KVStore(session)


@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    # Unhandled errors must come back as the 500 envelope, not be re-raised
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url=f"http://test{settings.API_PREFIX}") as http:
        yield http
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Sign up and log in an account; returns (token, profile)."""

    async def _register(email, role="patient", full_name="Test User", **extra):
        body = {"email": email, "password": "secret123", "fullName": full_name, "role": role, **extra}
        if role == "doctor":
            body.setdefault("specialization", "Cardiologist")
            body.setdefault("medicalLicenseNumber", "MCI-12345")
        response = await client.post("/auth/signup", json=body, headers=ANON_HEADERS)
        assert response.status_code == 201, response.text

        response = await client.post(
            "/auth/login", json={"email": email, "password": "secret123"}, headers=ANON_HEADERS
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        return data["accessToken"], data["user"]

    return _register


@pytest.fixture
async def patient(register):
    return await register("patient@example.com", full_name="Asha Patel", phone="+91 90000 00001")


@pytest.fixture
async def doctor(register):
    return await register("doctor@example.com", role="doctor", full_name="Dr. Vikram Rao")
