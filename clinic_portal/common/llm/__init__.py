"""Report analysis through the external model endpoint."""

from .report_analysis import AnalysisError, ReportAnalysisService, extract_health_timeline_data

__all__ = [
    "AnalysisError",
    "ReportAnalysisService",
    "extract_health_timeline_data",
]
