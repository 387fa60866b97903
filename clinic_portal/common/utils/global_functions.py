# common/utils/global_functions.py
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from clinic_portal.models.models import ACTIVITY_PREFIX


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_id(prefix: str) -> str:
    """Time-ordered id such as ``apt_1718000000000_3f9a1c``."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or datetime string into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def activity_item(doctor_id: str, entry_id: str, payload: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Key and value for one entry in a doctor's activity feed."""
    return ACTIVITY_PREFIX.format(doctor_id=doctor_id) + entry_id, payload
