# clinic_portal/modules/dashboard/dashboard_stats.py
"""
Dashboard figures computed from plain record lists.

No storage access happens here, so the API and the offline client build
their dashboards with the same rules.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional

from clinic_portal.common.utils.appointment_filters import (
    filter_appointments, is_upcoming, sort_appointments,
)
from clinic_portal.common.utils.global_functions import parse_iso
from clinic_portal.models.models import AppointmentStatus, PrescriptionStatus

from .schemas import DoctorDashboardData, PatientDashboardData, RecentActivityCounts

COMPLETED = AppointmentStatus.COMPLETED.value
PENDING = AppointmentStatus.PENDING.value


def months_ago(today: date, months: int) -> date:
    """Same day ``months`` earlier, clamped to the end of shorter months."""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(today.day, calendar.monthrange(year, month)[1]))


def calculate_health_score(
    recent_appointments: int,
    recent_reports: int,
    active_prescriptions: int,
    upcoming_appointments: int,
) -> int:
    """
    Additive engagement heuristic (not a clinical measure).

    Base 70; +10 for any appointment in the last three months, +10 for any
    recent report, +5 with no active prescriptions, +5 with anything upcoming.
    Capped at 100.
    """
    score = 70
    if recent_appointments > 0:
        score += 10
    if recent_reports > 0:
        score += 10
    if active_prescriptions == 0:
        score += 5
    if upcoming_appointments > 0:
        score += 5
    return min(score, 100)


def activity_time(entry: Dict[str, Any]) -> Optional[datetime]:
    return parse_iso(entry.get("uploadDate") or entry.get("createdAt"))


def recent_entries(entries: List[Dict[str, Any]], since: datetime) -> List[Dict[str, Any]]:
    """Entries stamped at or after ``since``, newest first."""
    recent = []
    for entry in entries:
        stamp = activity_time(entry)
        if stamp and stamp >= since:
            recent.append(entry)
    return sorted(recent, key=activity_time, reverse=True)


def build_patient_dashboard(
    appointments: List[Dict[str, Any]],
    prescriptions: List[Dict[str, Any]],
    reports: List[Dict[str, Any]],
    today: Optional[date] = None,
) -> PatientDashboardData:
    today = today or date.today()
    today_iso = today.isoformat()
    cutoff = months_ago(today, 3)
    cutoff_dt = datetime.combine(cutoff, time.min, tzinfo=timezone.utc)

    upcoming = [apt for apt in appointments if is_upcoming(apt, today_iso)]
    recent_appointments = [
        apt for apt in appointments if (apt.get("appointmentDate") or "") >= cutoff.isoformat()
    ]
    recent_reports = recent_entries(reports, cutoff_dt)
    active_prescriptions = len([
        p for p in prescriptions if p.get("status") == PrescriptionStatus.ACTIVE.value
    ])

    return PatientDashboardData(
        upcoming_appointments=upcoming[:3],
        recent_prescriptions=prescriptions[:3],
        recent_reports=reports[:1],
        total_appointments=len(appointments),
        completed_appointments=len(filter_appointments(appointments, COMPLETED)),
        upcoming_appointments_count=len(upcoming),
        active_prescriptions=active_prescriptions,
        total_prescriptions=len(prescriptions),
        total_reports=len(reports),
        health_score=calculate_health_score(
            len(recent_appointments), len(recent_reports), active_prescriptions, len(upcoming)
        ),
        recent_activity=RecentActivityCounts(
            appointments_last_3_months=len(recent_appointments),
            reports_last_3_months=len(recent_reports),
        ),
    )


def build_doctor_dashboard(
    appointments: List[Dict[str, Any]],
    prescriptions: List[Dict[str, Any]],
    reports: List[Dict[str, Any]],
    activity: List[Dict[str, Any]],
    today: Optional[date] = None,
) -> DoctorDashboardData:
    today = today or date.today()
    today_iso = today.isoformat()
    next_week_iso = (today + timedelta(days=7)).isoformat()
    # Weeks start on Sunday
    week_start_iso = (today - timedelta(days=(today.weekday() + 1) % 7)).isoformat()

    todays = filter_appointments(appointments, "today", today_iso)
    upcoming = [
        apt for apt in sort_appointments(appointments)
        if today_iso < (apt.get("appointmentDate") or "") <= next_week_iso
        and apt.get("status") != AppointmentStatus.CANCELLED.value
    ]
    this_week = [apt for apt in appointments if (apt.get("appointmentDate") or "") >= week_start_iso]

    return DoctorDashboardData(
        today_appointments=sort_appointments(todays),
        recent_activity=activity,
        upcoming_appointments=upcoming[:5],
        total_appointments=len(todays),
        completed_today=len(filter_appointments(todays, COMPLETED)),
        pending_today=len(filter_appointments(todays, PENDING)),
        total_patients=len({apt.get("patientId") for apt in appointments if apt.get("patientId")}),
        total_appointments_all_time=len(appointments),
        total_prescriptions=len(prescriptions),
        total_reports=len(reports),
        this_week_appointments=len(this_week),
        this_week_completed=len(filter_appointments(this_week, COMPLETED)),
    )
