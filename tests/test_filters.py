from datetime import date

import pytest

from clinic_portal.common.utils.appointment_filters import (
    count_appointments, filter_appointments, sort_appointments,
)
from clinic_portal.common.utils.formatters import (
    calculate_age, format_date, format_file_size, format_frequency, get_initials,
)
from clinic_portal.models.records import MealFrequency

TODAY = "2025-03-12"

APPOINTMENTS = [
    {"id": "past", "appointmentDate": "2025-03-01", "appointmentTime": "10:00", "status": "completed"},
    {"id": "today", "appointmentDate": TODAY, "appointmentTime": "09:30", "status": "pending"},
    {"id": "today-cancelled", "appointmentDate": TODAY, "appointmentTime": "11:00", "status": "cancelled"},
    {"id": "later", "appointmentDate": "2025-04-02", "appointmentTime": "08:00", "status": "confirmed"},
]


@pytest.mark.parametrize("status_filter, expected", [
    (None, ["past", "today", "today-cancelled", "later"]),
    ("all", ["past", "today", "today-cancelled", "later"]),
    ("upcoming", ["today", "later"]),
    ("today", ["today"]),
    ("cancelled", ["today-cancelled"]),
    ("completed", ["past"]),
    ("no-show", []),
])
def test_filter_appointments(status_filter, expected):
    result = filter_appointments(APPOINTMENTS, status_filter, TODAY)
    assert [apt["id"] for apt in result] == expected


def test_counts_derive_from_the_list():
    counts = count_appointments(APPOINTMENTS, TODAY)
    assert counts == {
        "totalCount": 4,
        "upcomingCount": 2,
        "todayCount": 1,
        "pendingCount": 1,
        "confirmedCount": 1,
        "completedCount": 1,
        "cancelledCount": 1,
    }


def test_sort_by_date_then_time():
    ordered = sort_appointments(APPOINTMENTS)
    assert [apt["id"] for apt in ordered] == ["past", "today", "today-cancelled", "later"]
    assert sort_appointments(APPOINTMENTS, reverse=True)[0]["id"] == "later"


def test_missing_date_sorts_first_and_is_not_upcoming():
    undated = {"id": "undated", "appointmentDate": None, "appointmentTime": None, "status": "pending"}
    appointments = APPOINTMENTS + [undated]

    assert [apt["id"] for apt in filter_appointments(appointments, "upcoming", TODAY)] == ["today", "later"]
    assert filter_appointments(appointments, "today", TODAY)[0]["id"] == "today"
    assert sort_appointments(appointments)[0]["id"] == "undated"
    assert count_appointments(appointments, TODAY)["pendingCount"] == 2


@pytest.mark.parametrize("frequency, expected", [
    ("Twice daily", "Twice daily"),
    ({"breakfast": {"before": True, "after": True}, "dinner": {"after": True}},
     "Breakfast (Before & After), Dinner (After)"),
    ({"lunch": {"before": False, "after": False}}, "As directed"),
    (None, "As directed"),
    (MealFrequency.model_validate({"lunch": {"before": True}}), "Lunch (Before)"),
])
def test_format_frequency(frequency, expected):
    assert format_frequency(frequency) == expected


def test_small_formatters():
    assert format_date("2024-03-05T10:00:00Z") == "05 Mar 2024"
    assert calculate_age("1990-06-15", today=date(2025, 6, 14)) == 34
    assert calculate_age("1990-06-15", today=date(2025, 6, 15)) == 35
    assert get_initials("Asha  Patel") == "AP"
    assert get_initials("madhav") == "M"
    assert format_file_size(512) == "512 B"
    assert format_file_size(2048) == "2.0 KB"
    assert format_file_size(3 * 1024 * 1024) == "3.0 MB"
