"""
app/mappers/field_coverage_mapper.py

Fuzzy field-coverage mapping from observed record keys to canonical GETS fields.
"""

from __future__ import annotations

import logging
from typing import Sequence

from rapidfuzz.distance import Levenshtein

from app.domain.readiness import CanonicalField, CoverageResult, FieldMatch, RawRecord, SchemaRegistry
from app.logging_utils import log_event
from app.mappers.value_types import infer_value_type, is_type_compatible
from app.schema_registry.loader import SchemaRegistryError, get_schema_registry
from readiness.normalizer import round_half_up

logger = logging.getLogger(__name__)

EXACT_SIMILARITY = 1.0
CONTAINS_SIMILARITY = 0.9
PREFIX_SIMILARITY = 0.85

MATCH_THRESHOLD = 0.8
CLOSE_THRESHOLD = 0.5
TYPE_MISMATCH_PENALTY = 0.7

_SEPARATOR_CHARS = frozenset("_-.")


def normalize_field_name(name: str) -> str:
    """
    Lowercase and drop `_`, `-`, `.` and whitespace for flexible matching.
    """

    return "".join(
        ch for ch in name.lower() if ch not in _SEPARATOR_CHARS and not ch.isspace()
    )


def field_similarity(canonical_path: str, candidate: str) -> float:
    """
    Tiered similarity between a canonical path and an observed key.

    Equality scores 1.0, containment 0.9, prefix 0.85, and anything else the
    normalized Levenshtein similarity. Names that normalize to nothing score 0.
    """

    canonical_norm = normalize_field_name(canonical_path)
    candidate_norm = normalize_field_name(candidate)
    if not canonical_norm or not candidate_norm:
        return 0.0

    if canonical_norm == candidate_norm:
        return EXACT_SIMILARITY
    if canonical_norm in candidate_norm or candidate_norm in canonical_norm:
        return CONTAINS_SIMILARITY
    if candidate_norm.startswith(canonical_norm) or canonical_norm.startswith(candidate_norm):
        return PREFIX_SIMILARITY

    max_length = max(len(canonical_norm), len(candidate_norm))
    distance = Levenshtein.distance(canonical_norm, candidate_norm)
    return max(0.0, 1.0 - distance / max_length)


def collect_candidate_keys(records: Sequence[RawRecord]) -> tuple[str, ...]:
    """
    Distinct keys across all records in first-seen order.
    """

    pool: dict[str, None] = {}
    for record in records:
        for key in record.keys():
            pool.setdefault(str(key), None)
    return tuple(pool)


class FieldCoverageMapper:
    """
    Classifies every canonical field as matched, close, or missing.
    """

    def __init__(
        self,
        *,
        match_threshold: float = MATCH_THRESHOLD,
        close_threshold: float = CLOSE_THRESHOLD,
        type_mismatch_penalty: float = TYPE_MISMATCH_PENALTY,
    ) -> None:
        self._match_threshold = match_threshold
        self._close_threshold = close_threshold
        self._type_mismatch_penalty = type_mismatch_penalty

    def map_fields(
        self,
        records: Sequence[RawRecord],
        schema: SchemaRegistry | None = None,
    ) -> CoverageResult:
        """
        Map observed record keys onto the canonical schema.

        Canonical fields are visited in schema order and each candidate key is
        consumed by at most one field. Candidates are scanned in first-seen
        order, so the first candidate reaching the match threshold wins.
        """

        registry = schema or get_schema_registry()
        if not registry.fields:
            raise SchemaRegistryError(message="Canonical schema has no fields; cannot map coverage.")

        if not records:
            return CoverageResult(missing=registry.paths)

        candidates = collect_candidate_keys(records)
        first_record = records[0]
        sample_types = {
            candidate: infer_value_type(first_record.get(candidate))
            for candidate in candidates
        }

        matched: list[str] = []
        close: list[FieldMatch] = []
        missing: list[str] = []
        used_candidates: set[str] = set()

        for canonical_field in registry.fields:
            outcome = self._match_field(
                canonical_field=canonical_field,
                candidates=candidates,
                sample_types=sample_types,
                used_candidates=used_candidates,
            )
            if isinstance(outcome, FieldMatch):
                close.append(outcome)
                used_candidates.add(outcome.candidate)
            elif outcome is not None:
                matched.append(canonical_field.path)
                used_candidates.add(outcome)
            else:
                missing.append(canonical_field.path)

        coverage = CoverageResult(
            matched=tuple(matched),
            close=tuple(close),
            missing=tuple(missing),
        )
        log_event(
            logger,
            logging.DEBUG,
            "field_coverage_mapped",
            candidate_count=len(candidates),
            matched=len(coverage.matched),
            close=len(coverage.close),
            missing=len(coverage.missing),
        )
        return coverage

    def score_candidate(self, canonical_field: CanonicalField, candidate: str, inferred_type: str) -> float:
        """
        Similarity adjusted for type compatibility with the candidate's sample.
        """

        similarity = field_similarity(canonical_field.path, candidate)
        if similarity > self._close_threshold and not is_type_compatible(canonical_field.type, inferred_type):
            similarity *= self._type_mismatch_penalty
        return similarity

    def _match_field(
        self,
        *,
        canonical_field: CanonicalField,
        candidates: Sequence[str],
        sample_types: dict[str, str],
        used_candidates: set[str],
    ) -> str | FieldMatch | None:
        best_candidate: str | None = None
        best_confidence = 0.0

        for candidate in candidates:
            if candidate in used_candidates:
                continue

            confidence = self.score_candidate(canonical_field, candidate, sample_types[candidate])
            if confidence >= self._match_threshold:
                return candidate
            if confidence > self._close_threshold and (
                best_candidate is None or confidence > best_confidence
            ):
                best_candidate = candidate
                best_confidence = confidence

        if best_candidate is None:
            return None
        return FieldMatch(
            target=canonical_field.path,
            candidate=best_candidate,
            confidence=round_half_up(best_confidence, 2),
        )


def map_fields(records: Sequence[RawRecord], schema: SchemaRegistry | None = None) -> CoverageResult:
    """
    Map records onto the canonical schema with default thresholds.
    """

    return FieldCoverageMapper().map_fields(records, schema)
