"""
app/services/readiness_analysis_service.py

Service layer for the readiness analysis pipeline.

Stages run strictly in order and never re-enter an earlier stage:

    1. FieldCoverageMapper.map_fields()  : canonical field coverage
    2. RulesValidator.validate()         : five business rules
    3. score_and_gap()                   : sub-scores, overall, gap lines

Record-level irregularities never raise; they surface as findings and gaps.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Sequence

from app.domain.readiness import (
    Questionnaire,
    RawRecord,
    ReadinessReport,
    ReportMeta,
    SchemaRegistry,
)
from app.logging_utils import log_event
from app.mappers.field_coverage_mapper import FieldCoverageMapper
from app.schema_registry.loader import get_schema_registry
from app.services.record_loader import RecordLoader
from app.validators.rules_validator import RulesValidator
from readiness.orchestrator import score_and_gap
from readiness.scoring import readiness_label

logger = logging.getLogger(__name__)


class ReadinessAnalysisService:
    """
    Coordinates coverage mapping, rule validation, and scoring.
    """

    def __init__(
        self,
        *,
        schema: SchemaRegistry | None = None,
        loader: RecordLoader | None = None,
        mapper: FieldCoverageMapper | None = None,
        validator: RulesValidator | None = None,
    ) -> None:
        self._schema = schema
        self._loader = loader
        self._mapper = mapper or FieldCoverageMapper()
        self._validator = validator or RulesValidator()

    @property
    def schema(self) -> SchemaRegistry:
        if self._schema is None:
            self._schema = get_schema_registry()
        return self._schema

    @property
    def loader(self) -> RecordLoader:
        if self._loader is None:
            self._loader = RecordLoader()
        return self._loader

    def analyze_text(
        self,
        data: str | bytes,
        *,
        source_format: str | None = None,
        questionnaire: Questionnaire | Mapping[str, Any] | None = None,
        country: str | None = None,
        erp: str | None = None,
    ) -> ReadinessReport:
        """
        Load CSV/JSON upload text and analyse the resulting records.

        Raises RecordLoadError when the text cannot be decoded.
        """

        loaded = self.loader.load(data, source_format)
        return self.analyze_records(
            loaded.records,
            questionnaire=questionnaire,
            rows_attempted=loaded.rows_attempted,
            lines_total=loaded.lines_total,
            country=country,
            erp=erp,
        )

    def analyze_records(
        self,
        records: Sequence[RawRecord],
        *,
        questionnaire: Questionnaire | Mapping[str, Any] | None = None,
        rows_attempted: int | None = None,
        lines_total: int | None = None,
        country: str | None = None,
        erp: str | None = None,
    ) -> ReadinessReport:
        """
        Run the full pipeline over already-loaded records.

        ``rows_attempted`` defaults to the record count, in which case the
        data score is 100 for any non-empty batch.
        """

        started = time.perf_counter()
        schema = self.schema
        answers = (
            questionnaire
            if isinstance(questionnaire, Questionnaire)
            else Questionnaire.from_mapping(questionnaire)
        )

        coverage = self._mapper.map_fields(records, schema)
        log_event(
            logger,
            logging.INFO,
            "coverage_mapped",
            records=len(records),
            matched=len(coverage.matched),
            close=len(coverage.close),
            missing=len(coverage.missing),
        )

        rules_result = self._validator.validate(records, coverage)
        log_event(
            logger,
            logging.INFO,
            "rules_validated",
            score=rules_result.score,
            failed=[finding.rule for finding in rules_result.failed],
        )

        attempted = len(records) if rows_attempted is None else rows_attempted
        scores, gaps = score_and_gap(
            len(records),
            attempted,
            coverage,
            rules_result,
            answers,
            schema=schema,
        )
        label = readiness_label(scores.overall)
        log_event(
            logger,
            logging.INFO,
            "readiness_scored",
            overall=scores.overall,
            readiness=label,
            gap_count=len(gaps),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )

        return ReadinessReport(
            scores=scores,
            readiness=label,
            coverage=coverage,
            rule_findings=rules_result.findings,
            gaps=tuple(gaps),
            meta=ReportMeta(
                rows_parsed=len(records),
                lines_total=len(records) if lines_total is None else lines_total,
                country=country,
                erp=erp,
            ),
            questionnaire=answers,
        )
