"""
app/domain/readiness.py

Domain value objects used by the readiness analysis pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Union

FieldType = Literal["string", "number", "date", "boolean"]
ReadinessLabel = Literal["High", "Medium", "Low"]

Scalar = Union[str, int, float, bool, None]
RawRecord = Mapping[str, Scalar]

FIELD_TYPES: tuple[str, ...] = ("string", "number", "date", "boolean")
LINE_FIELD_PREFIX = "lines[]."


@dataclass(frozen=True)
class CanonicalField:
    """
    One canonical GETS field definition.
    """

    path: str
    type: FieldType
    required: bool
    category: str

    @property
    def is_line_field(self) -> bool:
        return self.path.startswith(LINE_FIELD_PREFIX)


@dataclass(frozen=True)
class Category:
    """
    Weighted grouping of canonical fields.
    """

    name: str
    weight: float


@dataclass(frozen=True)
class SchemaRegistry:
    """
    Immutable canonical field table with weighted categories.

    Field order is the declaration order of the source document and drives
    mapping order and gap order.
    """

    version: str
    fields: tuple[CanonicalField, ...]
    categories: tuple[Category, ...]

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(item.path for item in self.fields)

    def field(self, path: str) -> CanonicalField | None:
        for item in self.fields:
            if item.path == path:
                return item
        return None

    def fields_in_category(self, category: str) -> tuple[CanonicalField, ...]:
        return tuple(item for item in self.fields if item.category == category)


@dataclass(frozen=True)
class FieldMatch:
    """
    Best below-threshold candidate for a canonical field.
    """

    target: str
    candidate: str
    confidence: float


@dataclass(frozen=True)
class CoverageResult:
    """
    Partition of canonical fields into matched, close, and missing.
    """

    matched: tuple[str, ...] = ()
    close: tuple[FieldMatch, ...] = ()
    missing: tuple[str, ...] = ()

    def close_match_for(self, path: str) -> FieldMatch | None:
        for match in self.close:
            if match.target == path:
                return match
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched": list(self.matched),
            "close": [
                {
                    "target": match.target,
                    "candidate": match.candidate,
                    "confidence": match.confidence,
                }
                for match in self.close
            ],
            "missing": list(self.missing),
        }


@dataclass(frozen=True)
class RuleFinding:
    """
    Outcome of one business rule with an optional counter-example.
    """

    rule: str
    ok: bool
    example_line: int | None = None
    expected: float | None = None
    got: float | None = None
    value: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"rule": self.rule, "ok": self.ok}
        for key in ("example_line", "expected", "got", "value"):
            item = getattr(self, key)
            if item is not None:
                payload[key] = item
        return payload


@dataclass(frozen=True)
class RulesResult:
    """
    All rule findings plus the equal-weight rules score.
    """

    findings: tuple[RuleFinding, ...]
    score: int

    @property
    def failed(self) -> tuple[RuleFinding, ...]:
        return tuple(finding for finding in self.findings if not finding.ok)


@dataclass(frozen=True)
class Questionnaire:
    """
    Operational posture answers. Unanswered questions count as False.
    """

    webhooks: bool = False
    sandbox_env: bool = False
    retries: bool = False

    @classmethod
    def from_mapping(cls, answers: Mapping[str, Any] | None) -> "Questionnaire":
        answers = answers or {}
        return cls(
            webhooks=answers.get("webhooks") is True,
            sandbox_env=answers.get("sandbox_env") is True,
            retries=answers.get("retries") is True,
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Sub-scores and weighted overall score, each an integer in [0, 100].
    """

    data: int
    coverage: int
    rules: int
    posture: int
    overall: int

    def to_dict(self) -> dict[str, int]:
        return {
            "data": self.data,
            "coverage": self.coverage,
            "rules": self.rules,
            "posture": self.posture,
            "overall": self.overall,
        }


@dataclass(frozen=True)
class LoadedRecords:
    """
    Flat records produced by the record loader for one upload.
    """

    records: tuple[dict[str, Scalar], ...]
    rows_attempted: int
    rows_parsed: int
    lines_total: int
    source_format: str
    truncated: bool = False


@dataclass(frozen=True)
class ReportMeta:
    """
    Descriptive metadata attached to a readiness report.
    """

    rows_parsed: int
    lines_total: int
    country: str | None = None
    erp: str | None = None


@dataclass(frozen=True)
class ReadinessReport:
    """
    Complete result bundle of one readiness analysis.
    """

    scores: ScoreBreakdown
    readiness: ReadinessLabel
    coverage: CoverageResult
    rule_findings: tuple[RuleFinding, ...]
    gaps: tuple[str, ...]
    meta: ReportMeta
    questionnaire: Questionnaire = field(default_factory=Questionnaire)
