"""
app/validators/rules_validator.py

Business-rule validation over mapped invoice record values.
"""

from __future__ import annotations

import math
from typing import Sequence

from app.domain.readiness import CoverageResult, RawRecord, RuleFinding, RulesResult
from app.mappers.value_resolver import resolve_value
from app.mappers.value_types import coerce_number, parse_iso_date
from readiness.normalizer import ScoreNormalizer, round_half_up


TOTALS_BALANCE = "TOTALS_BALANCE"
LINE_MATH = "LINE_MATH"
DATE_ISO = "DATE_ISO"
CURRENCY_ALLOWED = "CURRENCY_ALLOWED"
TRN_PRESENT = "TRN_PRESENT"

RULE_ORDER: tuple[str, ...] = (
    TOTALS_BALANCE,
    LINE_MATH,
    DATE_ISO,
    CURRENCY_ALLOWED,
    TRN_PRESENT,
)

ALLOWED_CURRENCIES: tuple[str, ...] = ("AED", "SAR", "MYR", "USD")

AMOUNT_TOLERANCE = 0.01
# Float noise allowance so a delta of exactly 0.01 stays within tolerance.
_TOLERANCE_EPSILON = 1e-9


class RulesValidator:
    """
    Runs the fixed business rules independently over all records.

    Each rule scans records in order and reports only the first
    counter-example. Records whose values are absent for a rule are skipped,
    so a rule with no applicable records passes.
    """

    def __init__(self, *, tolerance: float = AMOUNT_TOLERANCE) -> None:
        self._tolerance = tolerance
        self._normalizer = ScoreNormalizer()

    def validate(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RulesResult:
        findings = (
            self._check_totals_balance(records, coverage),
            self._check_line_math(records, coverage),
            self._check_date_iso(records, coverage),
            self._check_currency_allowed(records, coverage),
            self._check_trn_present(records, coverage),
        )
        passed = sum(1 for finding in findings if finding.ok)
        return RulesResult(
            findings=findings,
            score=self._normalizer.ratio_to_score(passed, len(findings)),
        )

    def _check_totals_balance(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RuleFinding:
        for line_number, record in enumerate(records, start=1):
            excl_vat = coerce_number(resolve_value(record, "invoice.total_excl_vat", coverage))
            vat_amount = coerce_number(resolve_value(record, "invoice.vat_amount", coverage))
            incl_vat = coerce_number(resolve_value(record, "invoice.total_incl_vat", coverage))
            if excl_vat is None or vat_amount is None or incl_vat is None:
                continue

            expected = excl_vat + vat_amount
            if not math.isfinite(expected):
                continue
            if not self._within_tolerance(expected, incl_vat):
                return RuleFinding(
                    rule=TOTALS_BALANCE,
                    ok=False,
                    example_line=line_number,
                    expected=round_half_up(expected, 2),
                    got=round_half_up(incl_vat, 2),
                )
        return RuleFinding(rule=TOTALS_BALANCE, ok=True)

    def _check_line_math(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RuleFinding:
        for line_number, record in enumerate(records, start=1):
            qty = coerce_number(resolve_value(record, "lines[].qty", coverage))
            unit_price = coerce_number(resolve_value(record, "lines[].unit_price", coverage))
            line_total = coerce_number(resolve_value(record, "lines[].line_total", coverage))
            if qty is None or unit_price is None or line_total is None:
                continue

            expected = qty * unit_price
            if not math.isfinite(expected):
                continue
            if not self._within_tolerance(expected, line_total):
                return RuleFinding(
                    rule=LINE_MATH,
                    ok=False,
                    example_line=line_number,
                    expected=round_half_up(expected, 2),
                    got=round_half_up(line_total, 2),
                )
        return RuleFinding(rule=LINE_MATH, ok=True)

    def _check_date_iso(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RuleFinding:
        for line_number, record in enumerate(records, start=1):
            issue_date = resolve_value(record, "invoice.issue_date", coverage)
            if issue_date is None:
                continue

            raw = str(issue_date)
            if parse_iso_date(raw) is None:
                return RuleFinding(rule=DATE_ISO, ok=False, example_line=line_number, value=raw)
        return RuleFinding(rule=DATE_ISO, ok=True)

    def _check_currency_allowed(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RuleFinding:
        for line_number, record in enumerate(records, start=1):
            currency = resolve_value(record, "invoice.currency", coverage)
            if currency is None:
                continue

            normalized = str(currency).upper()
            if normalized not in ALLOWED_CURRENCIES:
                return RuleFinding(
                    rule=CURRENCY_ALLOWED,
                    ok=False,
                    example_line=line_number,
                    value=normalized,
                )
        return RuleFinding(rule=CURRENCY_ALLOWED, ok=True)

    def _check_trn_present(self, records: Sequence[RawRecord], coverage: CoverageResult) -> RuleFinding:
        for line_number, record in enumerate(records, start=1):
            buyer_trn = resolve_value(record, "buyer.trn", coverage)
            seller_trn = resolve_value(record, "seller.trn", coverage)
            if self._is_blank(buyer_trn) or self._is_blank(seller_trn):
                return RuleFinding(rule=TRN_PRESENT, ok=False, example_line=line_number)
        return RuleFinding(rule=TRN_PRESENT, ok=True)

    def _within_tolerance(self, expected: float, actual: float) -> bool:
        return abs(expected - actual) <= self._tolerance + _TOLERANCE_EPSILON

    @staticmethod
    def _is_blank(value: object) -> bool:
        return value is None or str(value).strip() == ""


def validate_rules(records: Sequence[RawRecord], coverage: CoverageResult) -> RulesResult:
    """
    Run all business rules with default tolerance.
    """

    return RulesValidator().validate(records, coverage)
