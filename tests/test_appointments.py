from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from conftest import bearer


def booking(doctor_id, days_ahead=3, time="10:00", **extra):
    return {
        "doctorId": doctor_id,
        "appointmentDate": (date.today() + timedelta(days=days_ahead)).isoformat(),
        "appointmentTime": time,
        "appointmentType": "in-person",
        "reasonForVisit": "Chest pain",
        **extra,
    }


async def test_booking_is_visible_to_both_sides_and_updates_once(client, patient, doctor):
    patient_token, patient_user = patient
    doctor_token, doctor_user = doctor

    response = await client.post("/appointments", json=booking(doctor_user["id"]), headers=bearer(patient_token))
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["status"] == "pending"
    assert created["patientId"] == patient_user["id"]
    assert created["doctorName"] == "Dr. Vikram Rao"
    assert created["consultationFee"] == 500

    response = await client.get("/appointments", headers=bearer(doctor_token))
    doctor_list = response.json()["data"]
    assert [a["id"] for a in doctor_list["appointments"]] == [created["id"]]
    assert doctor_list["pendingCount"] == 1

    response = await client.put(
        f"/appointments/{created['id']}",
        json={"status": "confirmed", "notes": "Bring previous ECG"},
        headers=bearer(doctor_token),
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "confirmed"

    response = await client.get(f"/appointments/{created['id']}", headers=bearer(patient_token))
    patient_copy = response.json()["data"]
    response = await client.get(f"/appointments/{created['id']}", headers=bearer(doctor_token))
    doctor_copy = response.json()["data"]
    assert patient_copy == doctor_copy
    assert patient_copy["status"] == "confirmed"
    assert patient_copy["notes"] == "Bring previous ECG"

    response = await client.get("/appointments", headers=bearer(patient_token))
    counts = response.json()["data"]
    assert counts["totalCount"] == 1
    assert counts["confirmedCount"] == 1
    assert counts["upcomingCount"] == 1
    assert counts["pendingCount"] == 0


async def test_booking_records_doctor_activity(client, patient, doctor, store):
    patient_token, _ = patient
    _, doctor_user = doctor
    response = await client.post("/appointments", json=booking(doctor_user["id"]), headers=bearer(patient_token))
    appointment_id = response.json()["data"]["id"]

    activity = await store.get(f"activity:doctor:{doctor_user['id']}:{appointment_id}")
    assert activity["type"] == "appointment_booked"
    assert activity["patientName"] == "Asha Patel"


async def test_only_patients_book(client, doctor):
    doctor_token, doctor_user = doctor
    response = await client.post("/appointments", json=booking(doctor_user["id"]), headers=bearer(doctor_token))
    assert response.status_code == 403
    assert response.json() == {"error": "Only patients can book appointments"}


async def test_booking_unknown_doctor(client, patient):
    patient_token, _ = patient
    response = await client.post("/appointments", json=booking("nobody"), headers=bearer(patient_token))
    assert response.status_code == 404
    assert response.json() == {"error": "Doctor not found"}


async def test_booking_validates_date_and_time(client, patient, doctor):
    patient_token, _ = patient
    _, doctor_user = doctor
    body = booking(doctor_user["id"])
    body["appointmentTime"] = "10am"
    response = await client.post("/appointments", json=body, headers=bearer(patient_token))
    assert response.status_code == 400
    assert response.json()["error"].startswith("appointmentTime")


async def test_failed_booking_leaves_nothing_behind(client, patient, doctor, store, monkeypatch):
    patient_token, patient_user = patient
    _, doctor_user = doctor
    original_merge = AsyncSession.merge

    async def failing_merge(self, instance, **kwargs):
        if instance.key.startswith("activity:"):
            raise RuntimeError("connection reset")
        return await original_merge(self, instance, **kwargs)

    monkeypatch.setattr(AsyncSession, "merge", failing_merge)
    response = await client.post("/appointments", json=booking(doctor_user["id"]), headers=bearer(patient_token))
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert await store.get_by_prefix("appointment:") == []
    assert await store.get_by_prefix(f"activity:doctor:{doctor_user['id']}:") == []


async def test_doctor_cannot_update_someone_elses_appointment(client, register, patient, doctor):
    patient_token, _ = patient
    _, doctor_user = doctor
    other_token, _ = await register("other.doctor@example.com", role="doctor", full_name="Dr. Other")

    response = await client.post("/appointments", json=booking(doctor_user["id"]), headers=bearer(patient_token))
    appointment_id = response.json()["data"]["id"]

    response = await client.put(
        f"/appointments/{appointment_id}", json={"status": "completed"}, headers=bearer(other_token)
    )
    assert response.status_code == 404

    response = await client.put(
        f"/appointments/{appointment_id}", json={"status": "completed"}, headers=bearer(patient_token)
    )
    assert response.status_code == 403


async def test_cancel_keeps_record_and_filters_it_out(client, patient, doctor):
    patient_token, _ = patient
    doctor_token, doctor_user = doctor

    first = (await client.post(
        "/appointments", json=booking(doctor_user["id"], days_ahead=2), headers=bearer(patient_token)
    )).json()["data"]
    await client.post(
        "/appointments", json=booking(doctor_user["id"], days_ahead=0, time="09:00"), headers=bearer(patient_token)
    )

    response = await client.delete(f"/appointments/{first['id']}", headers=bearer(patient_token))
    assert response.status_code == 200
    cancelled = response.json()["data"]
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancelledBy"] == "patient"

    response = await client.get("/appointments", params={"status": "upcoming"}, headers=bearer(doctor_token))
    data = response.json()["data"]
    assert len(data["appointments"]) == 1
    assert data["totalCount"] == 2
    assert data["cancelledCount"] == 1
    assert data["todayCount"] == 1

    response = await client.get("/appointments", params={"status": "cancelled"}, headers=bearer(patient_token))
    assert [a["id"] for a in response.json()["data"]["appointments"]] == [first["id"]]

    response = await client.delete(f"/appointments/{first['id']}", headers=bearer(doctor_token))
    assert response.status_code == 403


async def test_past_dated_booking_reads_the_same_from_both_sides(client, patient, doctor):
    patient_token, _ = patient
    doctor_token, doctor_user = doctor
    body = {"doctorId": doctor_user["id"], "appointmentDate": "2025-03-01", "appointmentTime": "10:00"}

    created = (await client.post("/appointments", json=body, headers=bearer(patient_token))).json()["data"]

    for token in (patient_token, doctor_token):
        listed = (await client.get("/appointments", headers=bearer(token))).json()["data"]["appointments"]
        assert [(a["id"], a["status"]) for a in listed] == [(created["id"], "pending")]

    await client.put(f"/appointments/{created['id']}", json={"status": "confirmed"}, headers=bearer(doctor_token))

    for token in (patient_token, doctor_token):
        listed = (await client.get("/appointments", headers=bearer(token))).json()["data"]["appointments"]
        assert listed[0]["status"] == "confirmed"
