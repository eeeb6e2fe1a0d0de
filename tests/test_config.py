from __future__ import annotations

import logging
import os
import unittest
from unittest import mock

from app.config import DEFAULT_MAX_RECORDS, get_logging_settings, get_readiness_settings, resolve_project_path
from app.logging_utils import log_event


class TestReadinessSettings(unittest.TestCase):
    def setUp(self) -> None:
        get_readiness_settings.cache_clear()
        get_logging_settings.cache_clear()

    def tearDown(self) -> None:
        get_readiness_settings.cache_clear()
        get_logging_settings.cache_clear()

    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = get_readiness_settings()

        self.assertEqual(settings.max_records, DEFAULT_MAX_RECORDS)
        self.assertIsNone(settings.schema_path)

    def test_reads_max_records_from_environment(self) -> None:
        with mock.patch.dict(os.environ, {"READINESS_MAX_RECORDS": "50"}, clear=True):
            self.assertEqual(get_readiness_settings().max_records, 50)

    def test_invalid_max_records_falls_back(self) -> None:
        with mock.patch.dict(os.environ, {"READINESS_MAX_RECORDS": "lots"}, clear=True):
            self.assertEqual(get_readiness_settings().max_records, DEFAULT_MAX_RECORDS)

    def test_max_records_is_at_least_one(self) -> None:
        with mock.patch.dict(os.environ, {"READINESS_MAX_RECORDS": "0"}, clear=True):
            self.assertEqual(get_readiness_settings().max_records, 1)

    def test_relative_schema_path_resolves_against_project_root(self) -> None:
        with mock.patch.dict(os.environ, {"GETS_SCHEMA_PATH": "config/gets.json"}, clear=True):
            schema_path = get_readiness_settings().schema_path

        self.assertEqual(schema_path, str(resolve_project_path("config/gets.json")))
        self.assertTrue(schema_path.endswith(os.path.join("config", "gets.json")))

    def test_log_level_is_upper_cased(self) -> None:
        with mock.patch.dict(os.environ, {"LOG_LEVEL": " debug "}, clear=True):
            self.assertEqual(get_logging_settings().level, "DEBUG")


class TestLogEvent(unittest.TestCase):
    def test_emits_sorted_json_payload(self) -> None:
        logger = logging.getLogger("tests.readiness.log_event")

        with self.assertLogs(logger, level="INFO") as captured:
            log_event(logger, logging.INFO, "records_loaded", rows_parsed=2, source_format="csv")

        self.assertEqual(
            captured.records[0].getMessage(),
            '{"event": "records_loaded", "rows_parsed": 2, "source_format": "csv"}',
        )


if __name__ == "__main__":
    unittest.main()
