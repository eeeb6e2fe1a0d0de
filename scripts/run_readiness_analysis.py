"""
Run an e-invoicing readiness analysis on a local CSV/JSON file from CLI.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from app.config import get_logging_settings
from app.domain.readiness import Questionnaire
from app.logging_utils import configure_logging
from app.schema_registry.loader import SchemaRegistryError
from app.schemas.readiness_report import ReadinessReportResponse
from app.services.readiness_analysis_service import ReadinessAnalysisService
from app.services.record_loader import RecordLoadError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score invoice data for e-invoicing readiness.")
    parser.add_argument("path", help="CSV or JSON file with invoice rows.")
    parser.add_argument(
        "--format",
        dest="source_format",
        choices=("csv", "json"),
        default=None,
        help="Input format. Detected from the file contents when omitted.",
    )
    parser.add_argument("--webhooks", action="store_true", help="Webhooks are supported.")
    parser.add_argument("--sandbox-env", action="store_true", help="A sandbox environment exists.")
    parser.add_argument("--retries", action="store_true", help="Failed submissions are retried.")
    parser.add_argument("--country", default=None, help="Optional country code for report metadata.")
    parser.add_argument("--erp", default=None, help="Optional ERP name for report metadata.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_logging_settings().level)

    try:
        data = Path(args.path).read_bytes()
    except OSError as exc:
        print(json.dumps({"message": f"Cannot read {args.path}: {exc}"}, indent=2), file=sys.stderr)
        return 2

    service = ReadinessAnalysisService()
    try:
        report = service.analyze_text(
            data,
            source_format=args.source_format,
            questionnaire=Questionnaire(
                webhooks=args.webhooks,
                sandbox_env=args.sandbox_env,
                retries=args.retries,
            ),
            country=args.country,
            erp=args.erp,
        )
    except (RecordLoadError, SchemaRegistryError) as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2

    payload = ReadinessReportResponse.from_report(report).model_dump(mode="json")
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
