"""
app/schemas package marker.
"""

from app.schemas.readiness_report import (
    CoverageResponse,
    FieldMatchResponse,
    ReadinessReportResponse,
    ReportMetaResponse,
    RuleFindingResponse,
    ScoreBreakdownResponse,
)

__all__ = [
    "CoverageResponse",
    "FieldMatchResponse",
    "ReadinessReportResponse",
    "ReportMetaResponse",
    "RuleFindingResponse",
    "ScoreBreakdownResponse",
]
