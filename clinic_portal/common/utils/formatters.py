# clinic_portal/common/utils/formatters.py
"""Display helpers for prescriptions, profiles and uploads."""

from datetime import date
from typing import Any, Optional

MEALS = ("breakfast", "lunch", "dinner")


def format_frequency(frequency: Any) -> str:
    """
    Human readable dosing frequency.

    Strings pass through. Meal-timing objects become e.g.
    ``"Breakfast (Before & After), Dinner (After)"``; anything else, or an
    object with no timings set, is ``"As directed"``.
    """
    if isinstance(frequency, str):
        return frequency
    if hasattr(frequency, "model_dump"):
        frequency = frequency.model_dump()
    if not isinstance(frequency, dict):
        return "As directed"

    parts = []
    for meal in MEALS:
        timing = frequency.get(meal) or {}
        if hasattr(timing, "model_dump"):
            timing = timing.model_dump()
        labels = [label for label in ("before", "after") if timing.get(label)]
        if labels:
            parts.append(f"{meal.capitalize()} ({' & '.join(label.capitalize() for label in labels)})")
    return ", ".join(parts) if parts else "As directed"


def format_date(value: str) -> str:
    """``2024-03-05`` -> ``05 Mar 2024``."""
    return date.fromisoformat(value[:10]).strftime("%d %b %Y")


def calculate_age(date_of_birth: str, today: Optional[date] = None) -> int:
    today = today or date.today()
    born = date.fromisoformat(date_of_birth[:10])
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def get_initials(name: str) -> str:
    return "".join(part[0] for part in name.split(" ") if part).upper()[:2]


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
