from datetime import date

import pytest

from clinic_portal.modules.dashboard.dashboard_stats import (
    build_doctor_dashboard, build_patient_dashboard, calculate_health_score, months_ago,
)

from conftest import bearer

TODAY = date(2025, 3, 12)  # a Wednesday


def apt(apt_id, day, status="confirmed", patient_id="p1", at="10:00"):
    return {
        "id": apt_id,
        "patientId": patient_id,
        "doctorId": "d1",
        "appointmentDate": day,
        "appointmentTime": at,
        "status": status,
    }


@pytest.mark.parametrize("today, months, expected", [
    (date(2025, 5, 31), 3, date(2025, 2, 28)),
    (date(2024, 5, 31), 3, date(2024, 2, 29)),
    (date(2025, 2, 10), 3, date(2024, 11, 10)),
])
def test_months_ago_clamps_to_month_end(today, months, expected):
    assert months_ago(today, months) == expected


def test_health_score_components():
    assert calculate_health_score(0, 0, 1, 0) == 70
    assert calculate_health_score(1, 0, 1, 0) == 80
    assert calculate_health_score(1, 1, 0, 1) == 100
    assert calculate_health_score(0, 0, 0, 0) == 75


def test_patient_dashboard_counts():
    appointments = [
        apt("a1", "2025-03-20"),
        apt("a2", "2025-03-12", status="pending"),
        apt("a3", "2025-03-30", status="cancelled"),
        apt("a4", "2025-01-05", status="completed"),
        apt("a5", "2024-10-01", status="completed"),
    ]
    prescriptions = [{"id": "rx1", "patientId": "p1", "status": "active"}]
    reports = [{"id": "r1", "patientId": "p1", "uploadDate": "2025-02-01T09:00:00+00:00"}]

    data = build_patient_dashboard(appointments, prescriptions, reports, today=TODAY)

    assert data.total_appointments == 5
    assert data.completed_appointments == 2
    assert data.upcoming_appointments_count == 2
    assert [a.id for a in data.upcoming_appointments] == ["a1", "a2"]
    assert data.active_prescriptions == 1
    assert data.recent_activity.appointments_last_3_months == 4
    assert data.recent_activity.reports_last_3_months == 1
    # recent appointment + recent report + upcoming, one active prescription
    assert data.health_score == 95


def test_doctor_dashboard_counts():
    appointments = [
        apt("a1", "2025-03-12", status="confirmed", patient_id="p1", at="14:00"),
        apt("a2", "2025-03-12", status="pending", patient_id="p2", at="09:00"),
        apt("a3", "2025-03-12", status="cancelled", patient_id="p3"),
        apt("a4", "2025-03-15", status="confirmed", patient_id="p1"),
        apt("a5", "2025-03-25", status="confirmed", patient_id="p4"),
        apt("a6", "2025-03-10", status="completed", patient_id="p2"),
        apt("a7", "2025-03-01", status="completed", patient_id="p5"),
    ]

    data = build_doctor_dashboard(appointments, [], [], [], today=TODAY)

    assert [a.id for a in data.today_appointments] == ["a2", "a1"]
    assert data.total_appointments == 2
    assert data.pending_today == 1
    assert data.completed_today == 0
    assert [a.id for a in data.upcoming_appointments] == ["a4"]
    assert data.total_patients == 5
    assert data.total_appointments_all_time == 7
    # Week starting Sunday 2025-03-09
    assert data.this_week_appointments == 6
    assert data.this_week_completed == 1


def test_undated_appointments_are_counted_but_never_upcoming():
    appointments = [apt("a1", "2025-03-13"), apt("undated", None, patient_id="p2")]

    patient = build_patient_dashboard(appointments, [], [], today=TODAY)
    assert patient.total_appointments == 2
    assert [a.id for a in patient.upcoming_appointments] == ["a1"]
    assert patient.recent_activity.appointments_last_3_months == 1

    doctor = build_doctor_dashboard(appointments, [], [], [], today=TODAY)
    assert [a.id for a in doctor.upcoming_appointments] == ["a1"]
    assert doctor.total_patients == 2
    assert doctor.this_week_appointments == 1


async def test_patient_dashboard_endpoint(client, patient, doctor):
    patient_token, _ = patient
    doctor_token, _ = doctor

    response = await client.get("/patient/dashboard", headers=bearer(patient_token))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalAppointments"] == 0
    assert data["healthScore"] == 75

    response = await client.get("/patient/dashboard", headers=bearer(doctor_token))
    assert response.status_code == 403


async def test_doctor_dashboard_endpoint(client, patient, doctor):
    patient_token, _ = patient
    doctor_token, _ = doctor

    response = await client.get("/doctor/dashboard", headers=bearer(doctor_token))
    assert response.status_code == 200
    assert response.json()["data"]["totalAppointmentsAllTime"] == 0

    response = await client.get("/doctor/dashboard", headers=bearer(patient_token))
    assert response.status_code == 403
