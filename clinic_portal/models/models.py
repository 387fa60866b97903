# clinic_portal/models/models.py

import enum

from sqlalchemy import JSON, Column, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class UserRole(str, enum.Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"


class AppointmentType(str, enum.Enum):
    IN_PERSON = "in-person"
    TELEMEDICINE = "telemedicine"


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PrescriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReportStatus(str, enum.Enum):
    UPLOADED = "uploaded"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    REVIEWED = "reviewed"


class ParameterStatus(str, enum.Enum):
    NORMAL = "normal"
    LOW = "low"
    HIGH = "high"
    CRITICAL = "critical"


class RiskSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TimelineEntryType(str, enum.Enum):
    LAB_RESULT = "lab_result"
    VITAL_SIGN = "vital_sign"
    DIAGNOSIS = "diagnosis"
    MEDICATION = "medication"
    APPOINTMENT = "appointment"


# ============================================================================
# KEY-VALUE TABLE
# ============================================================================

class KVEntry(Base):
    """One row per key; values are arbitrary JSON documents."""
    __tablename__ = "kv_store"

    key = Column(Text, primary_key=True)
    value = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)


# Key namespaces shared by the services
USER_KEY = "user:{user_id}"
USER_EMAIL_KEY = "user_email:{email}"
DOCTOR_KEY = "doctor:{doctor_id}"
ACTIVITY_PREFIX = "activity:doctor:{doctor_id}:"
IDENTITY_KEY = "auth:identity:{user_id}"
IDENTITY_EMAIL_KEY = "auth:email:{email}"
SEED_MARKER_KEY = "seed:{kind}:{owner_id}"
