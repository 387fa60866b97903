# clinic_portal/common/utils/appointment_filters.py
"""Appointment list filters shared by the API and the offline client."""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from clinic_portal.models.models import AppointmentStatus

CANCELLED = AppointmentStatus.CANCELLED.value


def today_iso() -> str:
    return date.today().isoformat()


def is_upcoming(appointment: Dict[str, Any], today: str) -> bool:
    """On or after today and not cancelled; ISO dates compare as strings."""
    return (
        (appointment.get("appointmentDate") or "") >= today
        and appointment.get("status") != CANCELLED
    )


def is_today(appointment: Dict[str, Any], today: str) -> bool:
    return appointment.get("appointmentDate") == today and appointment.get("status") != CANCELLED


def filter_appointments(
    appointments: Iterable[Dict[str, Any]],
    status_filter: Optional[str] = None,
    today: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Filter by ``status_filter``:

    - ``None`` / ``"all"``: everything
    - ``"upcoming"``: appointmentDate >= today and status != cancelled
    - ``"today"``: appointmentDate == today and status != cancelled
    - any other value: exact status match
    """
    today = today or today_iso()
    items = list(appointments)
    if not status_filter or status_filter == "all":
        return items
    if status_filter == "upcoming":
        return [apt for apt in items if is_upcoming(apt, today)]
    if status_filter == "today":
        return [apt for apt in items if is_today(apt, today)]
    return [apt for apt in items if apt.get("status") == status_filter]


def sort_appointments(appointments: Iterable[Dict[str, Any]], reverse: bool = False) -> List[Dict[str, Any]]:
    return sorted(
        appointments,
        key=lambda apt: (apt.get("appointmentDate") or "", apt.get("appointmentTime") or ""),
        reverse=reverse,
    )


def count_appointments(appointments: List[Dict[str, Any]], today: Optional[str] = None) -> Dict[str, int]:
    """Summary counts, always derived from the list itself."""
    today = today or today_iso()
    return {
        "totalCount": len(appointments),
        "upcomingCount": len(filter_appointments(appointments, "upcoming", today)),
        "todayCount": len(filter_appointments(appointments, "today", today)),
        "pendingCount": len(filter_appointments(appointments, AppointmentStatus.PENDING.value)),
        "confirmedCount": len(filter_appointments(appointments, AppointmentStatus.CONFIRMED.value)),
        "completedCount": len(filter_appointments(appointments, AppointmentStatus.COMPLETED.value)),
        "cancelledCount": len(filter_appointments(appointments, CANCELLED)),
    }
