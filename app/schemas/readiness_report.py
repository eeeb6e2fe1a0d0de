"""
app/schemas/readiness_report.py

Response schemas for the readiness report bundle.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.readiness import ReadinessReport


class ScoreBreakdownResponse(BaseModel):
    """
    Sub-scores and overall readiness score.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    data: int = Field(..., ge=0, le=100)
    coverage: int = Field(..., ge=0, le=100)
    rules: int = Field(..., ge=0, le=100)
    posture: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)


class FieldMatchResponse(BaseModel):
    """
    One close (below-threshold) field match.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str
    candidate: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class CoverageResponse(BaseModel):
    """
    Matched, close, and missing canonical fields.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    matched: list[str] = Field(default_factory=list)
    close: list[FieldMatchResponse] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class RuleFindingResponse(BaseModel):
    """
    One business rule outcome.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rule: str
    ok: bool
    example_line: int | None = Field(default=None, ge=1)
    expected: float | None = None
    got: float | None = None
    value: str | None = None


class ReportMetaResponse(BaseModel):
    """
    Descriptive metadata for the analysed upload.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rows_parsed: int = Field(..., ge=0)
    lines_total: int = Field(..., ge=0)
    country: str | None = None
    erp: str | None = None


class ReadinessReportResponse(BaseModel):
    """
    Full readiness report bundle handed to the service layer.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scores: ScoreBreakdownResponse
    readiness: Literal["High", "Medium", "Low"]
    coverage: CoverageResponse
    rule_findings: list[RuleFindingResponse] = Field(..., min_length=5, max_length=5)
    gaps: list[str] = Field(default_factory=list)
    meta: ReportMetaResponse

    @classmethod
    def from_report(cls, report: ReadinessReport) -> "ReadinessReportResponse":
        return cls(
            scores=ScoreBreakdownResponse(**report.scores.to_dict()),
            readiness=report.readiness,
            coverage=CoverageResponse(**report.coverage.to_dict()),
            rule_findings=[RuleFindingResponse(**finding.to_dict()) for finding in report.rule_findings],
            gaps=list(report.gaps),
            meta=ReportMetaResponse(
                rows_parsed=report.meta.rows_parsed,
                lines_total=report.meta.lines_total,
                country=report.meta.country,
                erp=report.meta.erp,
            ),
        )
