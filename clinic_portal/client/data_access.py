# clinic_portal/client/data_access.py
"""
Single entry point for the presentation layer.

Every operation follows the same routing policy:

* demo mode: served by the local services and the demo datasets;
* otherwise a bearer token is required and the API is called;
* a network failure degrades that one call to local data (logged, and
  reported through ``DataResult.error``) without touching the global mode;
* an HTTP error comes back as a typed ``DataAccessError`` with empty data.
"""

import asyncio
import enum
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Set, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from clinic_portal.client.api_client import ClinicApiClient
from clinic_portal.client.auth_session import AuthSession
from clinic_portal.client.config import ClientSettings
from clinic_portal.client.demo_mode import DemoModeController
from clinic_portal.client.errors import DataAccessError, ErrorKind
from clinic_portal.client.local import HealthTimelineService, PrescriptionService, ReportStorageService
from clinic_portal.client.storage import ChangeNotifier, JsonFileStorage, LocalStorage
from clinic_portal.common.llm.report_analysis import (
    AnalysisError, ReportAnalysisService, extract_health_timeline_data,
)
from clinic_portal.common.utils.appointment_filters import filter_appointments, sort_appointments
from clinic_portal.common.utils.formatters import format_file_size
from clinic_portal.common.utils.global_functions import generate_id, utc_now_iso
from clinic_portal.models.models import PrescriptionStatus, ReportStatus, UserRole
from clinic_portal.models.records import (
    Appointment, DemoUser, DoctorProfile, HealthTimelineEntry, MedicalReport, Prescription,
    UserProfile,
)
from clinic_portal.modules.dashboard.dashboard_stats import (
    build_doctor_dashboard, build_patient_dashboard,
)
from clinic_portal.modules.dashboard.schemas import DoctorDashboardData, PatientDashboardData
from clinic_portal.modules.patients.schemas import (
    PatientDetailData, PatientInfo, PatientStats, PatientSummary,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataSource(str, enum.Enum):
    REMOTE = "remote"
    LOCAL = "local"


class DataResult(BaseModel, Generic[T]):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Optional[T] = None
    source: DataSource = DataSource.REMOTE
    error: Optional[DataAccessError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def merge_by_id(primary: List[Dict[str, Any]], extra: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """``primary`` followed by the ``extra`` records whose ids it lacks."""
    seen = {record.get("id") for record in primary}
    return primary + [record for record in extra if record.get("id") not in seen]


class DataAccessLayer:
    def __init__(
        self,
        session: AuthSession,
        api: ClinicApiClient,
        demo: DemoModeController,
        prescriptions: PrescriptionService,
        reports: ReportStorageService,
        timeline: HealthTimelineService,
        analyzer: Optional[ReportAnalysisService] = None,
    ):
        self.session = session
        self.api = api
        self.demo = demo
        self.prescriptions = prescriptions
        self.reports = reports
        self.timeline = timeline
        self.analyzer = analyzer or ReportAnalysisService()
        self._inflight: Set[asyncio.Future] = set()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ClientSettings] = None,
        storage: Optional[LocalStorage] = None,
        transport=None,
    ) -> "DataAccessLayer":
        """Wire a complete client: file-backed storage, API client, session and services."""
        settings = settings or ClientSettings()
        storage = storage or JsonFileStorage(settings.STORAGE_PATH)
        notifier = ChangeNotifier()
        demo = DemoModeController(storage)
        api = ClinicApiClient(settings, transport=transport)
        return cls(
            session=AuthSession(api, demo),
            api=api,
            demo=demo,
            prescriptions=PrescriptionService(storage, notifier),
            reports=ReportStorageService(storage, notifier),
            timeline=HealthTimelineService(storage, notifier),
            analyzer=ReportAnalysisService(
                api_key=settings.GEMINI_API_KEY,
                timeout=settings.ANALYSIS_TIMEOUT_SECONDS,
            ),
        )

    # ------------------------------------------------------------ lifecycle

    async def _track(self, awaitable: Awaitable[T]) -> T:
        task = asyncio.ensure_future(awaitable)
        self._inflight.add(task)
        try:
            return await task
        finally:
            self._inflight.discard(task)

    async def aclose(self) -> None:
        """Cancel in-flight calls and close the HTTP client."""
        pending = list(self._inflight)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.api.aclose()

    async def __aenter__(self) -> "DataAccessLayer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -------------------------------------------------------------- routing

    @property
    def user(self) -> Optional[UserProfile]:
        return self.session.user

    def _is_doctor(self) -> bool:
        return self.user is not None and self.user.role == UserRole.DOCTOR

    def _seed_demo(self) -> None:
        self.prescriptions.initialize_demo_data()
        self.reports.initialize_demo_data()

    def _serve_local(
        self,
        operation: str,
        local: Callable[[], T],
        empty: Any,
        network_error: Optional[DataAccessError] = None,
    ) -> DataResult:
        try:
            data = local()
        except ValidationError as exc:
            logger.warning("%s: rejected invalid data: %s", operation, exc)
            return DataResult(
                data=empty,
                source=DataSource.LOCAL,
                error=DataAccessError(ErrorKind.VALIDATION, f"Invalid {operation} data"),
            )
        return DataResult(data=data, source=DataSource.LOCAL, error=network_error)

    async def _call(
        self,
        operation: str,
        remote: Callable[[Optional[str]], Awaitable[T]],
        local: Callable[[], T],
        empty: Any = None,
        require_token: bool = True,
    ) -> DataResult:
        if self.demo.is_demo():
            self._seed_demo()
            return self._serve_local(operation, local, empty)

        token = self.session.token
        if require_token and not token:
            return DataResult(data=empty, error=DataAccessError(ErrorKind.AUTH, "Not signed in"))

        try:
            data = await self._track(remote(token))
        except DataAccessError as exc:
            if exc.is_network:
                logger.warning("%s: %s; serving local data", operation, exc.message)
                return self._serve_local(operation, local, empty, network_error=exc)
            return DataResult(data=empty, error=exc)
        except ValidationError as exc:
            logger.error("%s: malformed response: %s", operation, exc)
            return DataResult(
                data=empty, error=DataAccessError(ErrorKind.INTERNAL, f"Malformed {operation} response")
            )
        return DataResult(data=data)

    # --------------------------------------------------------- appointments

    def _local_appointments(self) -> List[Dict[str, Any]]:
        if self.user is None:
            return []
        return self.demo.get_appointments(self.user.id)

    async def get_appointments(self, status_filter: Optional[str] = None) -> DataResult:
        async def remote(token):
            data = await self.api.list_appointments(token, status_filter)
            return [Appointment.model_validate(a) for a in data["appointments"]]

        def local():
            items = filter_appointments(self._local_appointments(), status_filter)
            return [Appointment.model_validate(a) for a in sort_appointments(items)]

        return await self._call("get_appointments", remote, local, empty=[])

    async def book_appointment(self, appointment: Dict[str, Any]) -> DataResult:
        async def remote(token):
            return Appointment.model_validate(await self.api.book_appointment(token, appointment))

        def local():
            if self.user is None:
                return None
            demo_user = DemoUser.model_validate(self.user.to_record())
            return Appointment.model_validate(self.demo.book_appointment(demo_user, appointment))

        return await self._call("book_appointment", remote, local)

    async def update_appointment_status(
        self, appointment_id: str, status: str, notes: Optional[str] = None
    ) -> DataResult:
        changes: Dict[str, Any] = {"status": status}
        if notes is not None:
            changes["notes"] = notes

        async def remote(token):
            return Appointment.model_validate(
                await self.api.update_appointment(token, appointment_id, changes)
            )

        def local():
            updated = self.demo.update_appointment_status(appointment_id, status, notes)
            return Appointment.model_validate(updated) if updated else None

        return await self._call("update_appointment_status", remote, local)

    async def cancel_appointment(self, appointment_id: str) -> DataResult:
        async def remote(token):
            return Appointment.model_validate(await self.api.cancel_appointment(token, appointment_id))

        def local():
            cancelled = self.demo.cancel_appointment(appointment_id)
            return Appointment.model_validate(cancelled) if cancelled else None

        return await self._call("cancel_appointment", remote, local)

    async def get_doctors(self) -> DataResult:
        async def remote(token):
            data = await self.api.list_doctors()
            return [DoctorProfile.model_validate(d) for d in data["doctors"]]

        def local():
            return [DoctorProfile.model_validate(d) for d in self.demo.get_doctors()]

        return await self._call("get_doctors", remote, local, empty=[], require_token=False)

    # -------------------------------------------------------- prescriptions

    def _local_prescriptions(self) -> List[Dict[str, Any]]:
        if self.user is None:
            return []
        if self._is_doctor():
            return self.prescriptions.get_for_doctor(self.user.id)
        return self.prescriptions.get_for_patient(self.user.id)

    async def get_prescriptions(self) -> DataResult:
        async def remote(token):
            data = await self.api.list_prescriptions(token)
            return [Prescription.model_validate(p) for p in data["prescriptions"]]

        def local():
            return [Prescription.model_validate(p) for p in self._local_prescriptions()]

        return await self._call("get_prescriptions", remote, local, empty=[])

    async def add_prescription(self, prescription: Dict[str, Any]) -> DataResult:
        """``prescription`` is a camelCase body that names its ``patientId``."""
        async def remote(token):
            return Prescription.model_validate(await self.api.create_prescription(token, prescription))

        def local():
            if self.user is None:
                return None
            now = utc_now_iso()
            record = {
                "labTests": [],
                "instructions": "",
                **prescription,
                "id": generate_id("presc"),
                "doctorId": self.user.id,
                "doctorName": self.user.full_name,
                "status": PrescriptionStatus.ACTIVE.value,
                "prescribedDate": now,
            }
            Prescription.model_validate(record)
            return Prescription.model_validate(self.prescriptions.add(record))

        return await self._call("add_prescription", remote, local)

    async def delete_prescription(self, prescription_id: str) -> DataResult:
        async def remote(token):
            await self.api.delete_prescription(token, prescription_id)
            # Drop any reconciled local copy as well
            self.prescriptions.delete(prescription_id)
            return True

        def local():
            return self.prescriptions.delete(prescription_id)

        return await self._call("delete_prescription", remote, local, empty=False)

    # -------------------------------------------------------------- reports

    def _local_reports(self) -> List[Dict[str, Any]]:
        if self.user is None:
            return []
        if self._is_doctor():
            return self.reports.get_all()
        return self.reports.get_for_patient(self.user.id)

    async def get_reports(self) -> DataResult:
        async def remote(token):
            data = await self.api.list_reports(token)
            return [MedicalReport.model_validate(r) for r in data["reports"]]

        def local():
            return [MedicalReport.model_validate(r) for r in self._local_reports()]

        return await self._call("get_reports", remote, local, empty=[])

    def _record_timeline(self, report: Dict[str, Any]) -> int:
        """Replace the timeline entries derived from ``report``'s analysis."""
        analysis = report.get("aiAnalysis")
        if not analysis:
            return 0
        patient_id = report["patientId"]
        report_date = report.get("reportDate") or date.today().isoformat()
        self.timeline.delete_by_report(patient_id, report["id"])
        entries = extract_health_timeline_data(analysis, report["id"], report_date)
        return len(self.timeline.add_many(patient_id, entries))

    async def upload_report(
        self,
        file_name: str,
        content: bytes,
        mime_type: str = "application/pdf",
        details: Optional[Dict[str, Any]] = None,
    ) -> DataResult:
        """
        Store a report and analyze it.

        The record starts as ``analyzing``; a successful analysis leaves it
        ``analyzed`` with its trackable parameters copied into the health
        timeline, a failed one puts it back to ``uploaded``.
        """
        body = {
            "fileName": file_name,
            "fileSize": format_file_size(len(content)),
            "reportType": "other",
            **(details or {}),
            "status": ReportStatus.ANALYZING.value,
        }

        if self.demo.is_demo():
            self._seed_demo()
            return await self._upload_local(body, content, mime_type)

        token = self.session.token
        if not token:
            return DataResult(error=DataAccessError(ErrorKind.AUTH, "Not signed in"))

        try:
            created = await self._track(self.api.create_report(token, body))
        except DataAccessError as exc:
            if exc.is_network:
                logger.warning("upload_report: %s; storing the report locally", exc.message)
                result = await self._upload_local(body, content, mime_type)
                return DataResult(data=result.data, source=DataSource.LOCAL, error=result.error or exc)
            return DataResult(error=exc)

        try:
            analyzed = await self._track(
                self.api.analyze_report(token, created["id"], content, mime_type)
            )
        except DataAccessError as exc:
            logger.warning("Analysis of report %s failed: %s", created["id"], exc.message)
            reverted = {**created, "status": ReportStatus.UPLOADED.value}
            try:
                reverted = await self._track(
                    self.api.update_report(token, created["id"], {"status": ReportStatus.UPLOADED.value})
                )
            except DataAccessError as revert_exc:
                logger.warning("Could not revert report %s: %s", created["id"], revert_exc.message)
            return DataResult(data=MedicalReport.model_validate(reverted), error=exc)

        self._record_timeline(analyzed)
        return DataResult(data=MedicalReport.model_validate(analyzed))

    async def _upload_local(self, body: Dict[str, Any], content: bytes, mime_type: str) -> DataResult:
        if self.user is None:
            return DataResult(source=DataSource.LOCAL, error=DataAccessError(ErrorKind.AUTH, "Not signed in"))

        today = date.today().isoformat()
        record = self.reports.add({
            "reportDate": today,
            **body,
            "id": generate_id("report"),
            "patientId": self.user.id,
            "patientName": self.user.full_name,
            "dateUploaded": today,
            "uploadDate": utc_now_iso(),
        })

        try:
            analysis = await self._track(self.analyzer.analyze(record["fileName"], content, mime_type))
        except AnalysisError as exc:
            reverted = self.reports.update(record["id"], {"status": ReportStatus.UPLOADED.value})
            return DataResult(
                data=MedicalReport.model_validate(reverted),
                source=DataSource.LOCAL,
                error=DataAccessError(ErrorKind.INTERNAL, str(exc)),
            )

        changes: Dict[str, Any] = {"status": ReportStatus.ANALYZED.value, "aiAnalysis": analysis}
        if record.get("reportType") in (None, "", "other") and analysis.get("reportType"):
            changes["reportType"] = analysis["reportType"]
        analyzed = self.reports.update(record["id"], changes)
        self._record_timeline(analyzed)
        return DataResult(data=MedicalReport.model_validate(analyzed), source=DataSource.LOCAL)

    async def delete_report(self, report_id: str) -> DataResult:
        """Delete a report together with the timeline entries derived from it."""
        local_copy = self.reports.get_by_id(report_id)
        patient_id = local_copy["patientId"] if local_copy else (self.user.id if self.user else None)

        def drop_timeline() -> None:
            if patient_id:
                self.timeline.delete_by_report(patient_id, report_id)

        async def remote(token):
            await self.api.delete_report(token, report_id)
            self.reports.delete(report_id)
            drop_timeline()
            return True

        def local():
            deleted = self.reports.delete(report_id)
            drop_timeline()
            return deleted

        return await self._call("delete_report", remote, local, empty=False)

    # ------------------------------------------------------------- patients

    async def get_patients(self) -> DataResult:
        async def remote(token):
            data = await self.api.list_patients(token)
            return [PatientSummary.model_validate(p) for p in data["patients"]]

        return await self._call("get_patients", remote, self._local_roster, empty=[])

    def _doctor_prescriptions_for(self, patient_id: str) -> List[Dict[str, Any]]:
        return [
            p for p in self.prescriptions.get_for_patient(patient_id)
            if self.user is None or p.get("doctorId") == self.user.id
        ]

    def _local_roster(self) -> List[PatientSummary]:
        """Stored roster profiles with counts taken from the local collections, most recent visit first."""
        if self.user is None:
            return []
        appointments = self._local_appointments()
        patients: List[PatientSummary] = []
        for profile in self.demo.get_patients(self.user.id):
            patient_id = profile["id"]
            visits = [apt for apt in appointments if apt.get("patientId") == patient_id]
            last = sort_appointments(visits, reverse=True)[0] if visits else None
            patients.append(PatientSummary.model_validate({
                **profile,
                "lastVisit": last.get("appointmentDate") if last else None,
                "totalAppointments": len(visits),
                "totalPrescriptions": len(self._doctor_prescriptions_for(patient_id)),
                "totalReports": len(self.reports.get_for_patient(patient_id)),
            }))
        patients.sort(key=lambda p: p.last_visit or "", reverse=True)
        return patients

    def _detail(
        self,
        patient: Dict[str, Any],
        appointments: List[Dict[str, Any]],
        prescriptions: List[Dict[str, Any]],
        reports: List[Dict[str, Any]],
    ) -> PatientDetailData:
        return PatientDetailData(
            patient=PatientInfo.model_validate(patient),
            appointments=sort_appointments(appointments, reverse=True),
            prescriptions=prescriptions,
            reports=reports,
            stats=PatientStats(
                total_appointments=len(appointments),
                total_prescriptions=len(prescriptions),
                total_reports=len(reports),
            ),
        )

    async def get_patient_detail(self, patient_id: str) -> DataResult:
        """
        One patient as seen by the signed-in doctor.

        Remote detail is merged with locally stored prescriptions and reports
        for the patient, and the counts are recomputed from the merged lists.
        """
        async def remote(token):
            detail = await self.api.get_patient(token, patient_id)
            return self._detail(
                detail["patient"],
                detail.get("appointments") or [],
                merge_by_id(detail.get("prescriptions") or [], self._doctor_prescriptions_for(patient_id)),
                merge_by_id(detail.get("reports") or [], self.reports.get_for_patient(patient_id)),
            )

        def local():
            if self.user is None:
                return None
            roster = {p["id"]: p for p in self.demo.get_patients(self.user.id)}
            if patient_id not in roster:
                return None
            appointments = [
                a for a in self._local_appointments() if a.get("patientId") == patient_id
            ]
            return self._detail(
                roster[patient_id],
                appointments,
                self._doctor_prescriptions_for(patient_id),
                self.reports.get_for_patient(patient_id),
            )

        return await self._call("get_patient_detail", remote, local)

    # ----------------------------------------------------------- dashboards

    async def get_patient_dashboard(self) -> DataResult:
        async def remote(token) -> PatientDashboardData:
            return PatientDashboardData.model_validate(await self.api.patient_dashboard(token))

        def local() -> PatientDashboardData:
            return build_patient_dashboard(
                sort_appointments(self._local_appointments()),
                self._local_prescriptions(),
                self._local_reports(),
            )

        return await self._call("get_patient_dashboard", remote, local)

    async def get_doctor_dashboard(self) -> DataResult:
        async def remote(token) -> DoctorDashboardData:
            return DoctorDashboardData.model_validate(await self.api.doctor_dashboard(token))

        def local() -> DoctorDashboardData:
            return build_doctor_dashboard(
                self._local_appointments(),
                self._local_prescriptions(),
                self._local_reports(),
                activity=[],
            )

        return await self._call("get_doctor_dashboard", remote, local)

    # ------------------------------------------------------------- timeline

    def _timeline_owner(self, patient_id: Optional[str]) -> Optional[str]:
        return patient_id or (self.user.id if self.user else None)

    async def get_health_timeline(self, patient_id: Optional[str] = None) -> DataResult:
        """Timeline entries, newest first; the timeline only exists in local storage."""
        owner = self._timeline_owner(patient_id)
        if owner is None:
            return DataResult(data=[], source=DataSource.LOCAL,
                              error=DataAccessError(ErrorKind.AUTH, "Not signed in"))
        if self.demo.is_demo():
            self.timeline.initialize_demo_data(owner)
        entries = sorted(self.timeline.get_for_patient(owner), key=lambda e: e.get("date", ""), reverse=True)
        return DataResult(
            data=[HealthTimelineEntry.model_validate(e) for e in entries],
            source=DataSource.LOCAL,
        )

    async def add_timeline_entry(self, entry: Dict[str, Any], patient_id: Optional[str] = None) -> DataResult:
        owner = self._timeline_owner(patient_id)
        if owner is None:
            return DataResult(source=DataSource.LOCAL, error=DataAccessError(ErrorKind.AUTH, "Not signed in"))
        stored = self.timeline.add(owner, {"id": generate_id("timeline"), **entry})
        return DataResult(data=HealthTimelineEntry.model_validate(stored), source=DataSource.LOCAL)
