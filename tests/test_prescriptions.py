from conftest import bearer

MEDICINES = [
    {
        "name": "Amlodipine",
        "dosage": "5mg",
        "frequency": {"breakfast": {"before": False, "after": True}},
        "duration": "30 days",
    },
    {"name": "Atorvastatin", "dosage": "10mg", "frequency": "Once at night", "duration": "30 days"},
]


async def book(client, patient_token, doctor_id):
    response = await client.post(
        "/appointments",
        json={"doctorId": doctor_id, "appointmentDate": "2025-03-01", "appointmentTime": "10:00"},
        headers=bearer(patient_token),
    )
    assert response.status_code == 201


async def roster_entry(client, doctor_token, patient_id):
    response = await client.get("/doctor/patients", headers=bearer(doctor_token))
    assert response.status_code == 200
    return next(p for p in response.json()["data"]["patients"] if p["id"] == patient_id)


async def test_delete_prescription_updates_lists_and_counts(client, patient, doctor):
    patient_token, patient_user = patient
    doctor_token, doctor_user = doctor
    await book(client, patient_token, doctor_user["id"])

    response = await client.post(
        f"/doctor/patients/{patient_user['id']}/prescriptions",
        json={"diagnosis": "Hypertension", "medicines": MEDICINES, "followUpDate": "2025-04-01"},
        headers=bearer(doctor_token),
    )
    assert response.status_code == 201
    prescription = response.json()["data"]
    assert prescription["status"] == "active"
    assert prescription["labTests"] == []
    assert len(prescription["medicines"]) == 2
    assert (await roster_entry(client, doctor_token, patient_user["id"]))["totalPrescriptions"] == 1

    response = await client.get("/prescriptions", headers=bearer(patient_token))
    assert [p["id"] for p in response.json()["data"]["prescriptions"]] == [prescription["id"]]

    response = await client.delete(f"/prescriptions/{prescription['id']}", headers=bearer(doctor_token))
    assert response.status_code == 200
    assert response.json()["data"] == {"id": prescription["id"]}

    response = await client.get("/prescriptions", headers=bearer(patient_token))
    data = response.json()["data"]
    assert prescription["id"] not in [p["id"] for p in data["prescriptions"]]
    assert data["totalCount"] == 0
    assert (await roster_entry(client, doctor_token, patient_user["id"]))["totalPrescriptions"] == 0


async def test_create_prescription_by_body_and_update(client, patient, doctor):
    _, patient_user = patient
    doctor_token, _ = doctor

    response = await client.post(
        "/prescriptions",
        json={"patientId": patient_user["id"], "diagnosis": "Migraine", "labTests": ["MRI"]},
        headers=bearer(doctor_token),
    )
    assert response.status_code == 201
    prescription = response.json()["data"]
    assert prescription["patientName"] == "Asha Patel"
    assert prescription["doctorName"] == "Dr. Vikram Rao"

    response = await client.put(
        f"/prescriptions/{prescription['id']}", json={"status": "completed"}, headers=bearer(doctor_token)
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["status"] == "completed"
    assert updated["diagnosis"] == "Migraine"
    assert updated["labTests"] == ["MRI"]

    response = await client.get("/prescriptions", headers=bearer(doctor_token))
    data = response.json()["data"]
    assert (data["activeCount"], data["completedCount"]) == (0, 1)


async def test_prescription_permissions(client, register, patient, doctor):
    patient_token, patient_user = patient
    doctor_token, doctor_user = doctor

    response = await client.post(
        "/prescriptions", json={"patientId": patient_user["id"]}, headers=bearer(patient_token)
    )
    assert response.status_code == 403

    response = await client.post(
        "/prescriptions", json={"patientId": doctor_user["id"]}, headers=bearer(doctor_token)
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found"}

    created = (await client.post(
        "/prescriptions", json={"patientId": patient_user["id"]}, headers=bearer(doctor_token)
    )).json()["data"]
    other_token, _ = await register("second.doctor@example.com", role="doctor", full_name="Dr. Second")
    response = await client.delete(f"/prescriptions/{created['id']}", headers=bearer(other_token))
    assert response.status_code == 404


async def test_patient_detail_is_scoped_to_the_doctor(client, register, patient, doctor):
    patient_token, patient_user = patient
    doctor_token, doctor_user = doctor
    other_token, other_user = await register("third.doctor@example.com", role="doctor", full_name="Dr. Third")

    await book(client, patient_token, doctor_user["id"])
    await book(client, patient_token, other_user["id"])
    await client.post("/prescriptions", json={"patientId": patient_user["id"]}, headers=bearer(other_token))
    await client.post("/reports", json={"fileName": "cbc.pdf"}, headers=bearer(patient_token))

    response = await client.get(f"/doctor/patients/{patient_user['id']}", headers=bearer(doctor_token))
    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["patient"]["fullName"] == "Asha Patel"
    assert detail["stats"] == {"totalAppointments": 1, "totalPrescriptions": 0, "totalReports": 1}

    response = await client.get("/doctor/patients", headers=bearer(patient_token))
    assert response.status_code == 403

    response = await client.get("/doctor/patients/unknown", headers=bearer(doctor_token))
    assert response.status_code == 404
