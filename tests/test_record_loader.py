from __future__ import annotations

import json
import unittest

from app.services.record_loader import RecordLoader, RecordLoadError, detect_format


class TestDetectFormat(unittest.TestCase):
    def test_json_detected_from_leading_bracket(self) -> None:
        self.assertEqual(detect_format('  [{"a": 1}]'), "json")
        self.assertEqual(detect_format('\ufeff{"invoices": []}'), "json")

    def test_everything_else_is_csv(self) -> None:
        self.assertEqual(detect_format("invoice_id,total\nA,1\n"), "csv")
        self.assertEqual(detect_format(""), "csv")


class TestJsonRecordLoader(unittest.TestCase):
    def setUp(self) -> None:
        self.loader = RecordLoader(max_records=200)

    def test_flattens_nested_objects_and_counts_lines(self) -> None:
        payload = [
            {
                "invoice": {"id": "INV-1", "currency": "AED"},
                "seller": {"name": "Acme", "address": {"city": "Dubai"}},
                "lines": [{"qty": 1}, {"qty": 2}],
            }
        ]

        loaded = self.loader.load(json.dumps(payload))

        self.assertEqual(loaded.source_format, "json")
        self.assertEqual(
            loaded.records,
            (
                {
                    "invoice_id": "INV-1",
                    "invoice_currency": "AED",
                    "seller_name": "Acme",
                    "seller_address_city": "Dubai",
                },
            ),
        )
        self.assertEqual(loaded.lines_total, 2)

    def test_reads_invoices_array(self) -> None:
        loaded = self.loader.load(json.dumps({"invoices": [{"invoice_id": "A"}, {"invoice_id": "B"}]}))

        self.assertEqual(loaded.rows_attempted, 2)
        self.assertEqual(loaded.rows_parsed, 2)
        self.assertEqual(loaded.lines_total, 2)

    def test_reads_lines_array_as_records(self) -> None:
        loaded = self.loader.load(json.dumps({"lines": [{"qty": 1}, {"qty": 2}, {"qty": 3}]}))

        self.assertEqual([record["qty"] for record in loaded.records], [1, 2, 3])

    def test_object_without_rows_yields_nothing(self) -> None:
        loaded = self.loader.load(json.dumps({"invoice_id": "A"}))

        self.assertEqual(loaded.records, ())
        self.assertEqual(loaded.rows_attempted, 0)

    def test_non_object_entries_are_attempted_but_not_parsed(self) -> None:
        loaded = self.loader.load(json.dumps([1, "x", {"invoice_id": "A"}]))

        self.assertEqual(loaded.rows_attempted, 3)
        self.assertEqual(loaded.rows_parsed, 1)

    def test_truncates_to_max_records(self) -> None:
        loader = RecordLoader(max_records=2)

        loaded = loader.load(json.dumps([{"n": 1}, {"n": 2}, {"n": 3}]))

        self.assertEqual(loaded.rows_attempted, 2)
        self.assertEqual([record["n"] for record in loaded.records], [1, 2])
        self.assertTrue(loaded.truncated)

    def test_accepts_utf8_bytes_with_bom(self) -> None:
        data = '[{"seller_name": "Société"}]'.encode("utf-8-sig")

        loaded = self.loader.load(data)

        self.assertEqual(loaded.records[0]["seller_name"], "Société")

    def test_invalid_json_raises_load_error(self) -> None:
        with self.assertRaises(RecordLoadError) as ctx:
            self.loader.load("[{broken", source_format="json")

        self.assertEqual(ctx.exception.to_dict(), {"message": "Invalid JSON format.", "source_format": "json"})


class TestCsvRecordLoader(unittest.TestCase):
    def setUp(self) -> None:
        self.loader = RecordLoader(max_records=200)

    def test_reads_rows_as_text_records(self) -> None:
        loaded = self.loader.load("invoice_id,qty\nINV-1,2\nINV-2,3\n")

        self.assertEqual(loaded.source_format, "csv")
        self.assertEqual(loaded.records, ({"invoice_id": "INV-1", "qty": "2"}, {"invoice_id": "INV-2", "qty": "3"}))
        self.assertEqual(loaded.lines_total, 2)

    def test_blank_rows_are_attempted_but_not_parsed(self) -> None:
        loaded = self.loader.load("invoice_id,qty\nINV-1,2\n,\nINV-2,3\n")

        self.assertEqual(loaded.rows_attempted, 3)
        self.assertEqual(loaded.rows_parsed, 2)

    def test_extra_cells_are_dropped(self) -> None:
        loaded = self.loader.load("invoice_id,qty\nINV-1,2,surplus\n")

        self.assertEqual(loaded.records, ({"invoice_id": "INV-1", "qty": "2"},))

    def test_short_rows_keep_none_values(self) -> None:
        loaded = self.loader.load("invoice_id,qty\nINV-1\n")

        self.assertEqual(loaded.records, ({"invoice_id": "INV-1", "qty": None},))

    def test_truncates_to_max_records(self) -> None:
        loaded = RecordLoader(max_records=1).load("invoice_id\nA\nB\n")

        self.assertEqual(loaded.rows_attempted, 1)
        self.assertTrue(loaded.truncated)

    def test_missing_header_raises_load_error(self) -> None:
        with self.assertRaises(RecordLoadError) as ctx:
            self.loader.load("", source_format="csv")

        self.assertEqual(ctx.exception.message, "CSV header row is missing.")

    def test_invalid_utf8_bytes_raise_load_error(self) -> None:
        with self.assertRaises(RecordLoadError) as ctx:
            self.loader.load(b"a,b\n\xff\xfe,1\n", source_format="csv")

        self.assertEqual(ctx.exception.to_dict(), {"message": "Upload is not valid UTF-8.", "source_format": "csv"})

    def test_unsupported_format_raises_load_error(self) -> None:
        with self.assertRaises(RecordLoadError):
            self.loader.load("<invoice/>", source_format="xml")

    def test_max_records_is_at_least_one(self) -> None:
        self.assertEqual(RecordLoader(max_records=0).max_records, 1)


if __name__ == "__main__":
    unittest.main()
