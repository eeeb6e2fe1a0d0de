"""
app/services package marker.
"""

from app.services.readiness_analysis_service import ReadinessAnalysisService
from app.services.record_loader import RecordLoader, RecordLoadError, detect_format

__all__ = [
    "ReadinessAnalysisService",
    "RecordLoader",
    "RecordLoadError",
    "detect_format",
]
