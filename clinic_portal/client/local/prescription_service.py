# clinic_portal/client/local/prescription_service.py

from typing import Any, Dict, List

from clinic_portal.common.utils.global_functions import utc_now_iso

from .record_service import LocalRecordService

PRESCRIPTIONS_KEY = "clinic-prescriptions"
PRESCRIPTION_UPDATED = "prescriptionUpdated"


class PrescriptionService(LocalRecordService):
    storage_key = PRESCRIPTIONS_KEY
    event = PRESCRIPTION_UPDATED

    def demo_records(self) -> List[Dict[str, Any]]:
        now = utc_now_iso()
        return [{
            "id": "demo-presc-1",
            "patientId": "demo-patient-1",
            "patientName": "Arjun Singh",
            "patientEmail": "arjun.singh@email.com",
            "doctorId": "demo-doctor-1",
            "doctorName": "Dr. Demo Doctor",
            "diagnosis": "Seasonal Allergies",
            "medicines": [{
                "name": "Cetirizine",
                "dosage": "10mg",
                "frequency": {
                    "breakfast": {"before": False, "after": False},
                    "lunch": {"before": False, "after": False},
                    "dinner": {"before": False, "after": True},
                },
                "duration": "7 days",
                "refills": 0,
            }],
            "labTests": "",
            "instructions": "Avoid exposure to allergens",
            "followUpDate": None,
            "prescribedDate": now,
            "status": "active",
            "createdAt": now,
        }]
