"""
app/domain package marker.
"""

from app.domain.readiness import (
    CanonicalField,
    Category,
    CoverageResult,
    FieldMatch,
    LoadedRecords,
    Questionnaire,
    ReadinessReport,
    ReportMeta,
    RuleFinding,
    RulesResult,
    SchemaRegistry,
    ScoreBreakdown,
)

__all__ = [
    "CanonicalField",
    "Category",
    "CoverageResult",
    "FieldMatch",
    "LoadedRecords",
    "Questionnaire",
    "ReadinessReport",
    "ReportMeta",
    "RuleFinding",
    "RulesResult",
    "SchemaRegistry",
    "ScoreBreakdown",
]
