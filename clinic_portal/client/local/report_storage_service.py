# clinic_portal/client/local/report_storage_service.py

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from .record_service import LocalRecordService

REPORTS_KEY = "clinic-medical-reports"
REPORT_UPDATED = "medicalReportUpdated"


class ReportStorageService(LocalRecordService):
    storage_key = REPORTS_KEY
    event = REPORT_UPDATED

    def demo_records(self) -> List[Dict[str, Any]]:
        taken = datetime.now(timezone.utc) - timedelta(days=15)
        day = taken.date().isoformat()
        return [{
            "id": "demo-report-1",
            "patientId": "demo-patient-1",
            "patientName": "Arjun Singh",
            "fileName": "blood_test_demo.pdf",
            "fileSize": "2.3 MB",
            "reportType": "blood-test",
            "dateUploaded": day,
            "uploadDate": taken.isoformat(),
            "reportDate": day,
            "status": "analyzed",
            "labName": "SRL Diagnostics",
            "cost": "₹1,250",
            "aiAnalysis": {
                "summary": (
                    "Complete blood count shows normal values across all parameters. "
                    "Hemoglobin and other markers are within healthy range."
                ),
                "reportType": "Complete Blood Count (CBC)",
                "parameters": [
                    {"name": "Hemoglobin", "value": "14.2", "unit": "g/dL",
                     "normalRange": "13.0-17.0", "status": "normal", "category": "Blood"},
                    {"name": "White Blood Cells", "value": "7.5", "unit": "×10³/μL",
                     "normalRange": "4.0-10.0", "status": "normal", "category": "Blood"},
                    {"name": "Platelets", "value": "250", "unit": "×10³/μL",
                     "normalRange": "150-400", "status": "normal", "category": "Blood"},
                ],
                "riskFactors": [],
                "recommendations": [
                    "Continue current healthy lifestyle",
                    "Regular exercise and balanced diet",
                    "Next blood test in 6 months",
                ],
                "analyzedAt": taken.isoformat(),
            },
            "createdAt": taken.isoformat(),
        }]
