from __future__ import annotations

import json
import unittest

from app.domain.readiness import Questionnaire
from app.schema_registry.loader import DEFAULT_SCHEMA_PATH, load_schema_registry
from app.services.readiness_analysis_service import ReadinessAnalysisService
from app.services.record_loader import RecordLoader, RecordLoadError

_CSV_HEADER = (
    "invoice_id,invoice_currency,invoice_issue_date,invoice_total_excl_vat,invoice_vat_amount,"
    "invoice_total_incl_vat,seller_name,seller_trn,buyer_name,buyer_trn,sku,description,qty,"
    "unit_price,line_total"
)
_CSV_ROW = (
    "INV-001,AED,2024-03-01,100.00,5.00,105.00,Acme Trading LLC,TRN-100200300,"
    "Globex FZE,TRN-400500600,SKU-1,Widget,2,50,100"
)


def _nested_invoice() -> dict:
    return {
        "invoice": {
            "id": "INV-9",
            "currency": "SAR",
            "issue_date": "2024-05-10",
            "total_excl_vat": 200,
            "vat_amount": 30,
            "total_incl_vat": 230,
        },
        "seller": {"name": "Acme", "trn": "TRN-300000000000003"},
        "buyer": {"name": "Globex", "trn": "TRN-300000000000004"},
        "lines": [
            {"description": "Widget", "qty": 1, "unit_price": 100, "line_total": 100},
            {"description": "Gadget", "qty": 2, "unit_price": 50, "line_total": 100},
        ],
    }


class TestReadinessAnalysisService(unittest.TestCase):
    def setUp(self) -> None:
        self.service = ReadinessAnalysisService(
            schema=load_schema_registry(DEFAULT_SCHEMA_PATH),
            loader=RecordLoader(max_records=200),
        )

    def test_clean_csv_upload_scores_high(self) -> None:
        report = self.service.analyze_text(f"{_CSV_HEADER}\n{_CSV_ROW}\n", country="AE", erp="Odoo")

        self.assertEqual(len(report.coverage.matched), 15)
        self.assertEqual(report.coverage.close, ())
        self.assertEqual(
            report.coverage.missing,
            ("invoice.due_date", "seller.address", "buyer.address", "lines[].vat_rate"),
        )
        self.assertTrue(all(finding.ok for finding in report.rule_findings))
        self.assertEqual(report.gaps, ())
        self.assertEqual(report.scores.to_dict(), {"data": 100, "coverage": 76, "rules": 100, "posture": 0, "overall": 82})
        self.assertEqual(report.readiness, "High")
        self.assertEqual(report.meta.rows_parsed, 1)
        self.assertEqual(report.meta.lines_total, 1)
        self.assertEqual((report.meta.country, report.meta.erp), ("AE", "Odoo"))

    def test_posture_answers_raise_overall(self) -> None:
        report = self.service.analyze_text(
            f"{_CSV_HEADER}\n{_CSV_ROW}\n",
            questionnaire={"webhooks": True, "sandbox_env": True, "retries": True},
        )

        self.assertEqual(report.scores.posture, 100)
        self.assertEqual(report.scores.overall, 92)
        self.assertEqual(report.questionnaire, Questionnaire(webhooks=True, sandbox_env=True, retries=True))

    def test_nested_json_reports_missing_line_fields(self) -> None:
        report = self.service.analyze_text(json.dumps({"invoices": [_nested_invoice()]}))

        self.assertEqual(report.meta.lines_total, 2)
        self.assertEqual(
            list(report.gaps),
            [
                "Missing required field: lines[].description",
                "Missing required field: lines[].qty",
                "Missing required field: lines[].unit_price",
                "Missing required field: lines[].line_total",
            ],
        )
        self.assertTrue(all(finding.ok for finding in report.rule_findings))

    def test_empty_upload_scores_low(self) -> None:
        report = self.service.analyze_text("[]")

        self.assertEqual(report.scores.to_dict(), {"data": 0, "coverage": 0, "rules": 100, "posture": 0, "overall": 30})
        self.assertEqual(report.readiness, "Low")
        self.assertEqual(len(report.gaps), 14)

    def test_unparseable_rows_lower_data_score(self) -> None:
        payload = [_nested_invoice(), "not an invoice", 42, None]

        report = self.service.analyze_text(json.dumps(payload))

        self.assertEqual(report.scores.data, 25)
        self.assertEqual(report.meta.rows_parsed, 1)

    def test_failing_rules_are_reported_as_gaps(self) -> None:
        invoice = _nested_invoice()
        invoice["invoice"]["currency"] = "eur"
        invoice["invoice"]["total_incl_vat"] = 999

        report = self.service.analyze_text(json.dumps([invoice]))

        failed = {finding.rule: finding for finding in report.rule_findings if not finding.ok}
        self.assertEqual(set(failed), {"TOTALS_BALANCE", "CURRENCY_ALLOWED"})
        self.assertEqual(failed["CURRENCY_ALLOWED"].value, "EUR")
        self.assertEqual(report.scores.rules, 60)
        self.assertIn("Invalid currency: EUR not in allowed list [AED, SAR, MYR, USD]", report.gaps)

    def test_analyze_records_defaults_attempted_to_record_count(self) -> None:
        records = [{"invoice_id": "A", "invoice_currency": "AED"}]

        report = self.service.analyze_records(records)

        self.assertEqual(report.scores.data, 100)
        self.assertEqual(report.meta.lines_total, 1)

    def test_invalid_upload_raises_load_error(self) -> None:
        with self.assertRaises(RecordLoadError):
            self.service.analyze_text("{not json")

    def test_report_is_deterministic(self) -> None:
        text = f"{_CSV_HEADER}\n{_CSV_ROW}\n"

        self.assertEqual(self.service.analyze_text(text), self.service.analyze_text(text))


if __name__ == "__main__":
    unittest.main()
