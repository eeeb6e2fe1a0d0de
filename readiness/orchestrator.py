"""
readiness/orchestrator.py

Entry points for score aggregation and gap generation. Delegates all
scoring math to ReadinessScoreModel and gap wording to readiness.gaps.
"""

from typing import Any, Mapping

from app.domain.readiness import CoverageResult, Questionnaire, RulesResult, ScoreBreakdown, SchemaRegistry
from app.schema_registry.loader import get_schema_registry
from readiness import gaps as gap_builder
from readiness.scoring import ReadinessScoreModel


def _as_questionnaire(answers: Questionnaire | Mapping[str, Any] | None) -> Questionnaire:
    if isinstance(answers, Questionnaire):
        return answers
    return Questionnaire.from_mapping(answers)


def calculate_scores(
    parsed_count: int,
    attempted_count: int,
    coverage: CoverageResult,
    rules_result: RulesResult,
    questionnaire: Questionnaire | Mapping[str, Any] | None = None,
    schema: SchemaRegistry | None = None,
) -> ScoreBreakdown:
    """Compute the readiness ScoreBreakdown.

    Args:
        parsed_count: Records successfully parsed.
        attempted_count: Records attempted; 0 yields a data score of 0.
        coverage: Field coverage result.
        rules_result: Rule validation result.
        questionnaire: Posture answers as a Questionnaire or a mapping with
            optional boolean keys webhooks, sandbox_env, retries.
        schema: Registry override; defaults to the process-wide registry.

    Returns:
        A ScoreBreakdown with all values in [0, 100].
    """
    return ReadinessScoreModel().score(
        parsed_count=parsed_count,
        attempted_count=attempted_count,
        coverage=coverage,
        rules_result=rules_result,
        questionnaire=_as_questionnaire(questionnaire),
        schema=schema or get_schema_registry(),
    )


def generate_gaps(
    coverage: CoverageResult,
    rules_result: RulesResult,
    schema: SchemaRegistry | None = None,
) -> list[str]:
    """Gap lines for missing required fields and failing rules."""
    return gap_builder.generate_gaps(coverage, rules_result, schema or get_schema_registry())


def score_and_gap(
    parsed_count: int,
    attempted_count: int,
    coverage: CoverageResult,
    rules_result: RulesResult,
    questionnaire: Questionnaire | Mapping[str, Any] | None = None,
    schema: SchemaRegistry | None = None,
) -> tuple[ScoreBreakdown, list[str]]:
    """Compute scores and gaps together against the same registry."""
    registry = schema or get_schema_registry()
    scores = calculate_scores(
        parsed_count,
        attempted_count,
        coverage,
        rules_result,
        questionnaire,
        schema=registry,
    )
    return scores, generate_gaps(coverage, rules_result, schema=registry)
