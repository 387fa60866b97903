# clinic_portal/modules/seed/sample_data.py
"""Sample records written by the seed endpoints.

Every id is derived from the owning user id, so seeding the same user twice
rewrites the same keys.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List

from clinic_portal.auth.auth_service import DEFAULT_DAYS, DEFAULT_SLOTS


def _day(offset: int) -> str:
    return (date.today() + timedelta(days=offset)).isoformat()


def _stamp(offset: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=offset)).isoformat()


SAMPLE_DOCTORS: List[Dict[str, Any]] = [
    {
        "id": "dr1",
        "email": "priya.sharma@clinic.example",
        "name": "Dr. Priya Sharma",
        "specialization": "Cardiologist",
        "experience": "15 years",
        "rating": 4.8,
        "consultationFee": 800,
        "hospital": "Apollo Hospital, Mumbai",
        "phone": "+91 98200 00001",
        "qualifications": "MBBS, MD (Cardiology)",
    },
    {
        "id": "dr2",
        "email": "rajesh.kumar@clinic.example",
        "name": "Dr. Rajesh Kumar",
        "specialization": "Neurologist",
        "experience": "12 years",
        "rating": 4.7,
        "consultationFee": 1200,
        "hospital": "Fortis Hospital, Delhi",
        "phone": "+91 98200 00002",
        "qualifications": "MBBS, DM (Neurology)",
    },
    {
        "id": "dr3",
        "email": "meera.reddy@clinic.example",
        "name": "Dr. Meera Reddy",
        "specialization": "General Physician",
        "experience": "8 years",
        "rating": 4.5,
        "consultationFee": 500,
        "hospital": "Max Healthcare, Bangalore",
        "phone": "+91 98200 00003",
        "qualifications": "MBBS",
    },
]


def sample_doctor_records() -> List[Dict[str, Any]]:
    """(user profile, doctor profile) pairs for the directory."""
    created = _stamp(0)
    records = []
    for doctor in SAMPLE_DOCTORS:
        profile = {
            **doctor,
            "availableSlots": DEFAULT_SLOTS,
            "availableDays": DEFAULT_DAYS,
            "createdAt": created,
            "isActive": True,
        }
        user = {
            "id": doctor["id"],
            "email": doctor["email"],
            "fullName": doctor["name"],
            "phone": doctor["phone"],
            "role": "doctor",
            "specialization": doctor["specialization"],
            "createdAt": created,
        }
        records.append({"user": user, "doctor": profile})
    return records


# ============================================================================
# PATIENT SAMPLES
# ============================================================================

def _patient_appointment(user_id, key, doctor_id, doctor, speciality, offset, at, status, reason, kind, hospital):
    return {
        "id": f"sample_{user_id}_{key}",
        "patientId": user_id,
        "doctorId": doctor_id,
        "doctorName": doctor,
        "doctorSpecialization": speciality,
        "hospitalName": hospital,
        "appointmentDate": _day(offset),
        "appointmentTime": at,
        "status": status,
        "reasonForVisit": reason,
        "appointmentType": kind,
        "notes": "",
    }


def patient_samples(user_id: str) -> Dict[str, List[Dict[str, Any]]]:
    appointments = [
        _patient_appointment(user_id, "apt1", "dr1", "Dr. Priya Sharma", "Cardiologist", 2, "10:00",
                             "confirmed", "Regular checkup", "in-person", "Apollo Hospital, Mumbai"),
        _patient_appointment(user_id, "apt2", "dr2", "Dr. Rajesh Kumar", "Neurologist", 5, "14:30",
                             "pending", "Follow-up consultation", "telemedicine", "Fortis Hospital, Delhi"),
        _patient_appointment(user_id, "apt3", "dr1", "Dr. Priya Sharma", "Cardiologist", -15, "09:00",
                             "completed", "Blood pressure check", "in-person", "Apollo Hospital, Mumbai"),
        _patient_appointment(user_id, "apt4", "dr3", "Dr. Meera Reddy", "General Physician", -60, "11:30",
                             "completed", "Annual health checkup", "in-person", "Max Healthcare, Bangalore"),
        _patient_appointment(user_id, "apt5", "dr2", "Dr. Rajesh Kumar", "Neurologist", -30, "15:00",
                             "completed", "Consultation", "telemedicine", "Fortis Hospital, Delhi"),
    ]

    prescriptions = [
        {
            "id": f"sample_{user_id}_presc1",
            "patientId": user_id,
            "doctorId": "dr1",
            "doctorName": "Dr. Priya Sharma",
            "prescribedDate": _stamp(-3),
            "status": "active",
            "medicines": [
                {"name": "Telmisartan", "dosage": "40mg", "frequency": "1x daily"},
                {"name": "Metformin", "dosage": "500mg", "frequency": "2x daily"},
            ],
        },
        {
            "id": f"sample_{user_id}_presc2",
            "patientId": user_id,
            "doctorId": "dr1",
            "doctorName": "Dr. Priya Sharma",
            "prescribedDate": _stamp(-15),
            "status": "completed",
            "medicines": [{"name": "Azithromycin", "dosage": "500mg", "frequency": "1x daily"}],
        },
        {
            "id": f"sample_{user_id}_presc3",
            "patientId": user_id,
            "doctorId": "dr2",
            "doctorName": "Dr. Rajesh Kumar",
            "prescribedDate": _stamp(-30),
            "status": "active",
            "medicines": [{"name": "Calcirol Sachet", "dosage": "60000 IU", "frequency": "Weekly"}],
        },
    ]

    reports = [
        {
            "id": f"sample_{user_id}_report1",
            "patientId": user_id,
            "reportType": "Blood Test",
            "uploadDate": _stamp(-7),
            "labName": "SRL Diagnostics",
            "cost": "₹1,250",
            "status": "analyzed",
            "aiAnalysis": {
                "summary": "Overall health parameters are within normal range.",
                "parameters": [
                    {"name": "Total Cholesterol", "value": "185", "unit": "mg/dL",
                     "normalRange": "<200", "status": "normal", "category": "Lipid Profile"},
                    {"name": "Blood Glucose", "value": "95", "unit": "mg/dL",
                     "normalRange": "70-100", "status": "normal", "category": "Blood Sugar"},
                ],
            },
        },
        {
            "id": f"sample_{user_id}_report2",
            "patientId": user_id,
            "reportType": "X-Ray",
            "uploadDate": _stamp(-45),
            "labName": "Radiology Center",
            "status": "analyzed",
            "aiAnalysis": {"summary": "Chest X-ray shows clear lung fields with no abnormalities detected."},
        },
        {
            "id": f"sample_{user_id}_report3",
            "patientId": user_id,
            "reportType": "ECG",
            "uploadDate": _stamp(-90),
            "labName": "Narayana Health Heart Centre",
            "cost": "₹800",
            "status": "analyzed",
            "aiAnalysis": {"summary": "Normal sinus rhythm with regular rate and no significant abnormalities."},
        },
    ]
    return {"appointments": appointments, "prescriptions": prescriptions, "reports": reports, "activity": []}


# ============================================================================
# DOCTOR SAMPLES
# ============================================================================

SAMPLE_PATIENTS = {
    "pat1": "Arjun Singh",
    "pat2": "Priyanka Patel",
    "pat3": "Suresh Gupta",
    "pat4": "Kavya Iyer",
    "pat5": "Vikram Joshi",
}


def _doctor_appointment(user_id, key, patient_id, offset, at, status, reason, kind):
    return {
        "id": f"sample_{user_id}_{key}",
        "patientId": patient_id,
        "patientName": SAMPLE_PATIENTS[patient_id],
        "doctorId": user_id,
        "appointmentDate": _day(offset),
        "appointmentTime": at,
        "status": status,
        "reasonForVisit": reason,
        "appointmentType": kind,
        "notes": "",
    }


def doctor_samples(user_id: str) -> Dict[str, List[Dict[str, Any]]]:
    appointments = [
        _doctor_appointment(user_id, "apt1", "pat1", 0, "09:00", "confirmed", "Regular checkup", "in-person"),
        _doctor_appointment(user_id, "apt2", "pat2", 0, "11:00", "pending", "Follow-up consultation", "in-person"),
        _doctor_appointment(user_id, "apt3", "pat3", 0, "14:00", "completed", "Blood pressure monitoring", "in-person"),
        _doctor_appointment(user_id, "apt4", "pat4", 1, "10:00", "confirmed", "Consultation", "telemedicine"),
        _doctor_appointment(user_id, "apt5", "pat5", -2, "15:30", "completed", "Prescription renewal", "in-person"),
        _doctor_appointment(user_id, "apt6", "pat1", -7, "09:00", "completed", "Follow-up", "in-person"),
    ]

    activity = [
        {"id": f"sample_{user_id}_act_{patient_id}", "type": "report_uploaded", "patientId": patient_id,
         "patientName": SAMPLE_PATIENTS[patient_id], "reportType": report_type, "uploadDate": _stamp(offset)}
        for patient_id, report_type, offset in (
            ("pat3", "X-Ray Chest", -1),
            ("pat1", "Blood Test", -3),
            ("pat4", "MRI Brain", -5),
        )
    ]

    prescriptions = [
        {
            "id": f"sample_{user_id}_presc{index}",
            "patientId": patient_id,
            "patientName": SAMPLE_PATIENTS[patient_id],
            "doctorId": user_id,
            "prescribedDate": _stamp(offset),
            "status": status,
            "medicines": [medicine],
        }
        for index, (patient_id, offset, status, medicine) in enumerate((
            ("pat1", -2, "active", {"name": "Telmisartan", "dosage": "40mg", "frequency": "1x daily"}),
            ("pat2", -5, "active", {"name": "Metformin", "dosage": "500mg", "frequency": "2x daily"}),
            ("pat3", -10, "completed", {"name": "Azithromycin", "dosage": "500mg", "frequency": "1x daily"}),
        ), start=1)
    ]

    reports = [
        {
            "id": f"sample_{user_id}_report1",
            "patientId": "pat1",
            "patientName": SAMPLE_PATIENTS["pat1"],
            "doctorId": user_id,
            "reportType": "Blood Test",
            "labName": "SRL Diagnostics",
            "uploadDate": _stamp(-3),
            "cost": "₹1,250",
            "status": "analyzed",
            "aiAnalysis": {"summary": "Blood parameters within normal range."},
        },
        {
            "id": f"sample_{user_id}_report2",
            "patientId": "pat3",
            "patientName": SAMPLE_PATIENTS["pat3"],
            "doctorId": user_id,
            "reportType": "X-Ray Chest",
            "labName": "Apollo Diagnostics",
            "uploadDate": _stamp(-1),
            "cost": "₹600",
            "status": "analyzed",
            "aiAnalysis": {"summary": "Chest X-ray shows clear lung fields."},
        },
    ]
    return {
        "appointments": appointments,
        "prescriptions": prescriptions,
        "reports": reports,
        "activity": activity,
    }
