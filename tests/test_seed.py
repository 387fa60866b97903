from clinic_portal.common.config import settings
from clinic_portal.models.models import SEED_MARKER_KEY

from conftest import ANON_HEADERS, bearer


async def test_init_sample_data_runs_once(client, session_factory, patient):
    token, user = patient

    first = await client.post("/init-sample-data", headers=bearer(token))
    assert first.status_code == 200
    data = first.json()["data"]
    assert data["initialized"] is True
    assert data["appointments"] == 5

    before = (await client.get("/appointments", headers=bearer(token))).json()["data"]

    second = await client.post("/init-sample-data", headers=bearer(token))
    assert second.status_code == 200
    repeat = second.json()["data"]
    assert repeat["initialized"] is False
    assert {k: repeat[k] for k in ("appointments", "prescriptions", "reports")} == {
        k: data[k] for k in ("appointments", "prescriptions", "reports")
    }

    after = (await client.get("/appointments", headers=bearer(token))).json()["data"]
    assert after["totalCount"] == before["totalCount"] == 5


async def test_sample_data_ids_are_deterministic(client, store, patient):
    token, user = patient
    await client.post("/init-sample-data", headers=bearer(token))

    marker = await store.get(SEED_MARKER_KEY.format(kind="sample", owner_id=user["id"]))
    assert marker["counts"]["appointments"] == 5

    prescriptions = (await client.get("/prescriptions", headers=bearer(token))).json()["data"]["prescriptions"]
    assert all(p["id"].startswith(f"sample_{user['id']}_") for p in prescriptions)


async def test_doctor_sample_data_fills_dashboard(client, doctor):
    token, _ = doctor
    response = await client.post("/init-sample-data", headers=bearer(token))
    assert response.json()["data"]["appointments"] == 6

    dashboard = (await client.get("/doctor/dashboard", headers=bearer(token))).json()["data"]
    assert dashboard["totalAppointments"] == 3
    assert dashboard["completedToday"] == 1
    assert dashboard["pendingToday"] == 1
    assert dashboard["totalPatients"] == 5
    assert len(dashboard["recentActivity"]) == 3


async def test_init_doctors_disabled_by_default(client):
    response = await client.post("/init-doctors", headers=ANON_HEADERS)
    assert response.status_code == 200
    assert response.json()["data"] == {"count": 0}


async def test_init_doctors_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "SEED_SAMPLE_DOCTORS", True)

    response = await client.post("/init-doctors", headers=ANON_HEADERS)
    assert response.json()["data"] == {"count": 3}

    doctors = (await client.get("/doctors", headers=ANON_HEADERS)).json()["data"]["doctors"]
    assert [d["id"] for d in doctors] == ["dr1", "dr2", "dr3"]

    doctor = (await client.get("/doctors/dr2", headers=ANON_HEADERS)).json()["data"]
    assert doctor["name"] == "Dr. Rajesh Kumar"


async def test_create_test_patient_is_idempotent(client):
    first = await client.post("/create-test-patient", headers=ANON_HEADERS)
    second = await client.post("/create-test-patient", headers=ANON_HEADERS)
    assert first.status_code == second.status_code == 200
    assert first.json()["data"]["userId"] == second.json()["data"]["userId"]

    response = await client.post(
        "/auth/login",
        json={"email": settings.TEST_PATIENT_EMAIL, "password": settings.TEST_PATIENT_PASSWORD},
        headers=ANON_HEADERS,
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["fullName"] == "Arjun Sharma"


async def test_seed_endpoints_need_anon_key(client):
    response = await client.post("/create-test-patient")
    assert response.status_code == 401
