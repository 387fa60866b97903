"""Local storage backed services used in demo mode and as per-call fallbacks."""

from .health_timeline_service import HealthTimelineService
from .prescription_service import PrescriptionService
from .report_storage_service import ReportStorageService

__all__ = ["HealthTimelineService", "PrescriptionService", "ReportStorageService"]
