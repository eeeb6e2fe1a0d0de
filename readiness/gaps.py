"""
readiness/gaps.py

Human-readable gap lines derived from coverage and rule findings.
"""

from app.domain.readiness import CoverageResult, RuleFinding, RulesResult, SchemaRegistry
from app.validators.rules_validator import (
    ALLOWED_CURRENCIES,
    CURRENCY_ALLOWED,
    DATE_ISO,
    LINE_MATH,
    TOTALS_BALANCE,
    TRN_PRESENT,
)


def _totals_balance_gap(finding: RuleFinding) -> str:
    return "Invoice totals do not balance (total_excl_vat + vat_amount ≠ total_incl_vat)"


def _line_math_gap(finding: RuleFinding) -> str:
    return "Line item calculations incorrect (qty × unit_price ≠ line_total)"


def _date_iso_gap(finding: RuleFinding) -> str:
    return f"Invalid date format: {finding.value or 'dates'} should be YYYY-MM-DD"


def _currency_allowed_gap(finding: RuleFinding) -> str:
    allowed = ", ".join(ALLOWED_CURRENCIES)
    return f"Invalid currency: {finding.value or 'currency'} not in allowed list [{allowed}]"


def _trn_present_gap(finding: RuleFinding) -> str:
    return "Missing buyer.trn or seller.trn"


_RULE_GAP_MESSAGES = {
    TOTALS_BALANCE: _totals_balance_gap,
    LINE_MATH: _line_math_gap,
    DATE_ISO: _date_iso_gap,
    CURRENCY_ALLOWED: _currency_allowed_gap,
    TRN_PRESENT: _trn_present_gap,
}


def generate_gaps(coverage: CoverageResult, rules_result: RulesResult, schema: SchemaRegistry) -> list[str]:
    """Build advisory gap lines.

    Missing required fields come first in schema order, followed by one
    line per failing rule in rule order.

    Args:
        coverage: Field coverage result for the batch.
        rules_result: Rule validation result.
        schema: Registry used to look up which missing fields are required.

    Returns:
        A list of human-readable gap strings.
    """
    gaps: list[str] = []

    missing = set(coverage.missing)
    for canonical_field in schema.fields:
        if canonical_field.required and canonical_field.path in missing:
            gaps.append(f"Missing required field: {canonical_field.path}")

    for finding in rules_result.findings:
        if finding.ok:
            continue
        message = _RULE_GAP_MESSAGES.get(finding.rule)
        if message is not None:
            gaps.append(message(finding))

    return gaps
