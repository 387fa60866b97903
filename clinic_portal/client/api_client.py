# clinic_portal/client/api_client.py
"""HTTP client for the clinic portal API."""

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from clinic_portal.client.config import ClientSettings
from clinic_portal.client.errors import DataAccessError, ErrorKind

logger = logging.getLogger(__name__)


class ClinicApiClient:
    """
    Thin async wrapper over the API routes.

    Each method returns the ``data`` member of the success envelope. Failures
    raise ``DataAccessError``: transport errors and timeouts as
    ``ErrorKind.NETWORK``, error envelopes by their HTTP status.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or ClientSettings()
        self._client = httpx.AsyncClient(
            base_url=self.settings.API_BASE_URL.rstrip("/"),
            timeout=self.settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ClinicApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        bearer = token or self.settings.ANON_KEY
        headers = {"Authorization": f"Bearer {bearer}"} if bearer else {}
        kwargs: Dict[str, Any] = {"headers": headers, "json": json, "params": params}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise DataAccessError(ErrorKind.NETWORK, f"{method} {path} timed out") from exc
        except httpx.TransportError as exc:
            raise DataAccessError(ErrorKind.NETWORK, f"{method} {path} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, path, response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = body.get("error") if isinstance(body, dict) else None
            raise DataAccessError.from_status(
                response.status_code, message or f"HTTP {response.status_code}"
            )
        if not isinstance(body, dict):
            raise DataAccessError(ErrorKind.INTERNAL, f"Unexpected response from {method} {path}")
        return body.get("data")

    # ---------------------------------------------------------------- auth

    async def signup(self, signup_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/auth/signup", json=signup_data)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/login", json={"email": email, "password": password})

    async def get_profile(self, token: str) -> Dict[str, Any]:
        return await self._request(
            "GET", "/auth/profile", token=token, timeout=self.settings.PROFILE_TIMEOUT
        )

    async def update_profile(self, token: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/auth/profile", token=token, json=changes)

    # ------------------------------------------------------------- doctors

    async def list_doctors(self) -> Dict[str, Any]:
        return await self._request("GET", "/doctors")

    async def get_doctor(self, doctor_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/doctors/{doctor_id}")

    # -------------------------------------------------------- appointments

    async def list_appointments(self, token: str, status_filter: Optional[str] = None) -> Dict[str, Any]:
        params = {"status": status_filter} if status_filter else None
        return await self._request("GET", "/appointments", token=token, params=params)

    async def book_appointment(self, token: str, appointment: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/appointments", token=token, json=appointment)

    async def update_appointment(self, token: str, appointment_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/appointments/{appointment_id}", token=token, json=changes)

    async def cancel_appointment(self, token: str, appointment_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/appointments/{appointment_id}", token=token)

    # ------------------------------------------------------- prescriptions

    async def list_prescriptions(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/prescriptions", token=token)

    async def create_prescription(self, token: str, prescription: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/prescriptions", token=token, json=prescription)

    async def update_prescription(self, token: str, prescription_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/prescriptions/{prescription_id}", token=token, json=changes)

    async def delete_prescription(self, token: str, prescription_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/prescriptions/{prescription_id}", token=token)

    # ------------------------------------------------------------- reports

    async def list_reports(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/reports", token=token)

    async def create_report(self, token: str, report: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/reports", token=token, json=report)

    async def update_report(self, token: str, report_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/reports/{report_id}", token=token, json=changes)

    async def delete_report(self, token: str, report_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/reports/{report_id}", token=token)

    async def analyze_report(
        self,
        token: str,
        report_id: str,
        content: Optional[bytes] = None,
        mime_type: str = "application/pdf",
    ) -> Dict[str, Any]:
        body = None
        if content is not None:
            body = {"fileContent": base64.b64encode(content).decode("ascii"), "mimeType": mime_type}
        return await self._request("POST", f"/reports/{report_id}/analyze", token=token, json=body)

    # ---------------------------------------------------------- dashboards

    async def patient_dashboard(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/patient/dashboard", token=token)

    async def doctor_dashboard(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/doctor/dashboard", token=token)

    # ------------------------------------------------------------ patients

    async def list_patients(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/doctor/patients", token=token)

    async def get_patient(self, token: str, patient_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/doctor/patients/{patient_id}", token=token)

    async def add_patient_prescription(
        self, token: str, patient_id: str, prescription: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/doctor/patients/{patient_id}/prescriptions", token=token, json=prescription
        )

    # ---------------------------------------------------------------- seed

    async def init_sample_data(self, token: str) -> Dict[str, Any]:
        return await self._request("POST", "/init-sample-data", token=token)

