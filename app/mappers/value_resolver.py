"""
app/mappers/value_resolver.py

Resolve canonical field values from raw records using a coverage result.
"""

from __future__ import annotations

from app.domain.readiness import LINE_FIELD_PREFIX, CoverageResult, RawRecord, Scalar


def candidate_keys_for(path: str) -> tuple[str, ...]:
    """
    Conventional record keys for a matched canonical path, in lookup order.

    `lines[].qty` looks up `qty`, `lines_qty`, `line_qty`; `invoice.id`
    looks up `invoice_id` then `invoice.id`.
    """

    if path.startswith(LINE_FIELD_PREFIX):
        line_field = path[len(LINE_FIELD_PREFIX):]
        return (line_field, f"lines_{line_field}", f"line_{line_field}")
    return (path.replace(".", "_", 1), path)


def resolve_value(record: RawRecord, path: str, coverage: CoverageResult) -> Scalar:
    """
    Return the record's value for a canonical path, or None when unresolvable.

    None means "skip this record for checks on this field", never a failure.
    """

    if path in coverage.matched:
        for key in candidate_keys_for(path):
            value = record.get(key)
            if value is not None:
                return value
        return None

    close_match = coverage.close_match_for(path)
    if close_match is not None:
        return record.get(close_match.candidate)

    return None
