from conftest import ANON_HEADERS, bearer


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_signup_and_login_returns_profile(client, register):
    token, user = await register("Meera@Example.com", full_name="Meera Iyer", bloodGroup="B+")
    assert token
    assert user["email"] == "meera@example.com"
    assert user["role"] == "patient"
    assert user["bloodGroup"] == "B+"

    response = await client.get("/auth/profile", headers=bearer(token))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["id"] == user["id"]


async def test_doctor_signup_applies_defaults(register):
    _, user = await register("dr@example.com", role="doctor", full_name="Dr. Kiran Das")
    assert user["specialization"] == "Cardiologist"
    assert user["consultationFee"] == 500
    assert user["availableDays"] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


async def test_duplicate_signup_is_rejected(client, register):
    await register("dup@example.com")
    response = await client.post(
        "/auth/signup",
        json={"email": "dup@example.com", "password": "secret123", "fullName": "Again"},
        headers=ANON_HEADERS,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "A user with this email already exists."}


async def test_signup_validation_uses_error_envelope(client):
    response = await client.post(
        "/auth/signup",
        json={"email": "not-an-email", "password": "secret123", "fullName": "Someone"},
        headers=ANON_HEADERS,
    )
    assert response.status_code == 400
    assert "email" in response.json()["error"]


async def test_doctor_signup_requires_license(client):
    response = await client.post(
        "/auth/signup",
        json={
            "email": "nolicense@example.com", "password": "secret123",
            "fullName": "Dr. No License", "role": "doctor", "specialization": "ENT",
        },
        headers=ANON_HEADERS,
    )
    assert response.status_code == 400
    assert "medicalLicenseNumber" in response.json()["error"]


async def test_wrong_password_is_unauthorized(client, register):
    await register("login@example.com")
    response = await client.post(
        "/auth/login", json={"email": "login@example.com", "password": "wrong-pass"}, headers=ANON_HEADERS
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials provided."


async def test_missing_or_invalid_token(client):
    response = await client.get("/auth/profile")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

    response = await client.get("/auth/profile", headers=bearer("not-a-jwt"))
    assert response.status_code == 401


async def test_anon_key_routes_require_a_key(client):
    response = await client.get("/doctors")
    assert response.status_code == 401
    assert response.json()["error"] == "Authorization header is missing."

    response = await client.get("/doctors", headers=ANON_HEADERS)
    assert response.status_code == 200


async def test_profile_update_keeps_identity_fields(client, patient):
    token, user = patient
    response = await client.put(
        "/auth/profile",
        json={"fullName": "Asha P.", "phone": "+91 90000 11111", "role": "doctor", "email": "x@y.com"},
        headers=bearer(token),
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["fullName"] == "Asha P."
    assert updated["phone"] == "+91 90000 11111"
    assert updated["role"] == "patient"
    assert updated["email"] == user["email"]


async def test_token_without_profile_is_not_found(client, patient, store):
    token, user = patient
    await store.delete(f"user:{user['id']}")
    response = await client.get("/auth/profile", headers=bearer(token))
    assert response.status_code == 404
    assert response.json() == {"error": "User profile not found"}
