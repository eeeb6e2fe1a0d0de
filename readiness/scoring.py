"""
readiness/scoring.py

E-invoicing readiness model implementing BaseReadinessModel.
Computes data, coverage, rules, and posture sub-scores and their
weighted overall score.
"""

from app.domain.readiness import CoverageResult, Questionnaire, RulesResult, ScoreBreakdown, SchemaRegistry
from readiness.base import BaseReadinessModel
from readiness.normalizer import ScoreNormalizer, round_half_up


# ---------------------------------------------------------------------------
# Readiness label thresholds are inclusive lower bounds
# ---------------------------------------------------------------------------

_READINESS_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (75, "High"),
    (50, "Medium"),
)


def readiness_label(overall: int) -> str:
    """Map an overall score in [0, 100] to a readiness label.

    Args:
        overall: Integer overall readiness score.

    Returns:
        One of "High", "Medium", or "Low".
    """
    for threshold, label in _READINESS_THRESHOLDS:
        if overall >= threshold:
            return label
    return "Low"


class ReadinessScoreModel(BaseReadinessModel):
    """Weighted scoring model for e-invoicing readiness.

    Each sub-score is an integer on a 0–100 scale. The overall score is
    their weighted sum, clamped and rounded. All weights must sum to 1.0.
    """

    # Scoring weights must sum to 1.0
    DATA_WEIGHT: float = 0.25
    COVERAGE_WEIGHT: float = 0.35
    RULES_WEIGHT: float = 0.30
    POSTURE_WEIGHT: float = 0.10

    # Close matches earn this share of their confidence as coverage credit
    CLOSE_MATCH_CREDIT: float = 0.7

    POSTURE_QUESTIONS: tuple[str, ...] = ("webhooks", "sandbox_env", "retries")

    def __init__(self) -> None:
        """Initialize the model with a shared ScoreNormalizer instance."""
        self._normalizer = ScoreNormalizer()

    def score(
        self,
        *,
        parsed_count: int,
        attempted_count: int,
        coverage: CoverageResult,
        rules_result: RulesResult,
        questionnaire: Questionnaire,
        schema: SchemaRegistry,
    ) -> ScoreBreakdown:
        """Compute every sub-score and the overall readiness score.

        Args:
            parsed_count: Records successfully parsed from the upload.
            attempted_count: Records the loader attempted to parse.
            coverage: Field coverage result for the batch.
            rules_result: Rule validation result; its score passes through.
            questionnaire: Operational posture answers.
            schema: Registry providing field categories and weights.

        Returns:
            A ScoreBreakdown with all values in [0, 100].
        """
        sub_scores = {
            "data": self.data_score(parsed_count, attempted_count),
            "coverage": self.coverage_score(coverage, schema),
            "rules": int(rules_result.score),
            "posture": self.posture_score(questionnaire),
        }
        return ScoreBreakdown(overall=self.combine(sub_scores), **sub_scores)

    def data_score(self, parsed_count: int, attempted_count: int) -> int:
        """Share of attempted records that parsed, scaled to 0–100."""
        return self._normalizer.ratio_to_score(parsed_count, attempted_count)

    def coverage_score(self, coverage: CoverageResult, schema: SchemaRegistry) -> int:
        """Category-weighted coverage of the canonical schema.

        Matched fields earn full credit and close matches earn
        ``confidence * CLOSE_MATCH_CREDIT``. Categories without fields are
        left out of both the weighted sum and the total weight.
        """
        matched = set(coverage.matched)
        weighted_score = 0.0
        total_weight = 0.0

        for category in schema.categories:
            category_fields = schema.fields_in_category(category.name)
            if not category_fields:
                continue

            paths = {item.path for item in category_fields}
            matched_count = len(paths & matched)
            close_credit = sum(
                match.confidence * self.CLOSE_MATCH_CREDIT
                for match in coverage.close
                if match.target in paths
            )

            category_score = (matched_count + close_credit) / len(category_fields)
            weighted_score += category_score * category.weight
            total_weight += category.weight

        if total_weight <= 0:
            return 0
        return self._normalizer.percent(weighted_score / total_weight)

    def posture_score(self, questionnaire: Questionnaire) -> int:
        """Share of posture questions answered True, scaled to 0–100."""
        positive = sum(
            1 for question in self.POSTURE_QUESTIONS if getattr(questionnaire, question) is True
        )
        return self._normalizer.ratio_to_score(positive, len(self.POSTURE_QUESTIONS))

    def combine(self, sub_scores: dict) -> int:
        """Combine sub-scores into the weighted overall score.

        Missing keys default to 0 (no contribution from that signal).

        Args:
            sub_scores: Dictionary with keys data, coverage, rules, posture.

        Returns:
            An integer in [0, 100].
        """
        weighted_sum: float = (
            sub_scores.get("data", 0) * self.DATA_WEIGHT
            + sub_scores.get("coverage", 0) * self.COVERAGE_WEIGHT
            + sub_scores.get("rules", 0) * self.RULES_WEIGHT
            + sub_scores.get("posture", 0) * self.POSTURE_WEIGHT
        )
        return round_half_up(self._normalizer.clamp(weighted_sum, 0.0, 100.0))
