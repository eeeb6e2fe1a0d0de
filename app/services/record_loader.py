"""
app/services/record_loader.py

Turns raw CSV or JSON upload text into at most N flat invoice records.

JSON input may be an array of objects or an object holding an ``invoices``
or ``lines`` array. Nested objects are flattened with ``_`` so that
``{"invoice": {"id": 7}}`` becomes ``{"invoice_id": 7}``; list values are
counted as line items and left out of the flat record.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from typing import Any, Literal, Mapping

from app.config import get_readiness_settings
from app.domain.readiness import LoadedRecords, Scalar
from app.logging_utils import log_event

logger = logging.getLogger(__name__)

SourceFormat = Literal["csv", "json"]

_JSON_ROW_KEYS: tuple[str, ...] = ("invoices", "lines")


class RecordLoadError(ValueError):
    """
    Raised when upload text cannot be decoded into records.
    """

    def __init__(self, *, message: str, source_format: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source_format = source_format

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "source_format": self.source_format}


def detect_format(text: str) -> SourceFormat:
    """
    Guess the upload format: JSON when it opens with `{` or `[`, else CSV.
    """

    stripped = text.lstrip("\ufeff").strip()
    return "json" if stripped.startswith(("{", "[")) else "csv"


class RecordLoader:
    """
    Decodes upload text into flat records, truncating at ``max_records``.
    """

    def __init__(self, *, max_records: int | None = None) -> None:
        limit = max_records if max_records is not None else get_readiness_settings().max_records
        self._max_records = max(1, limit)

    @property
    def max_records(self) -> int:
        return self._max_records

    def load(self, data: str | bytes, source_format: str | None = None) -> LoadedRecords:
        """
        Decode ``data`` as CSV or JSON. The format is detected when omitted.
        """

        if isinstance(data, bytes):
            try:
                text = data.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise RecordLoadError(
                    message="Upload is not valid UTF-8.",
                    source_format=source_format,
                ) from exc
        else:
            text = data
        fmt = (source_format or detect_format(text)).strip().lower()
        if fmt == "json":
            loaded = self._load_json(text)
        elif fmt == "csv":
            loaded = self._load_csv(text)
        else:
            raise RecordLoadError(message=f"Unsupported format: {source_format}.", source_format=fmt)

        log_event(
            logger,
            logging.INFO,
            "records_loaded",
            source_format=loaded.source_format,
            rows_attempted=loaded.rows_attempted,
            rows_parsed=loaded.rows_parsed,
            lines_total=loaded.lines_total,
            truncated=loaded.truncated,
        )
        return loaded

    def _load_json(self, text: str) -> LoadedRecords:
        try:
            payload = json.loads(text.lstrip("\ufeff"))
        except json.JSONDecodeError as exc:
            raise RecordLoadError(message="Invalid JSON format.", source_format="json") from exc

        rows = self._json_rows(payload)
        attempted = rows[: self._max_records]

        records: list[dict[str, Scalar]] = []
        lines_total = 0
        for entry in attempted:
            if not isinstance(entry, Mapping):
                continue
            records.append(self._flatten(entry))
            lines_total += self._line_count(entry)

        return LoadedRecords(
            records=tuple(records),
            rows_attempted=len(attempted),
            rows_parsed=len(records),
            lines_total=lines_total,
            source_format="json",
            truncated=len(rows) > self._max_records,
        )

    def _load_csv(self, text: str) -> LoadedRecords:
        reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff"), newline=""))
        try:
            headers = reader.fieldnames or []
        except csv.Error as exc:
            raise RecordLoadError(message=f"CSV Parsing Error: {exc}", source_format="csv") from exc
        if not headers:
            raise RecordLoadError(message="CSV header row is missing.", source_format="csv")

        records: list[dict[str, Scalar]] = []
        attempted = 0
        truncated = False
        try:
            for raw_row in reader:
                if attempted >= self._max_records:
                    truncated = True
                    break
                attempted += 1
                record = {
                    key: value
                    for key, value in raw_row.items()
                    if key is not None and not isinstance(value, list)
                }
                if all(value is None or str(value).strip() == "" for value in record.values()):
                    continue
                records.append(record)
        except csv.Error as exc:
            raise RecordLoadError(message=f"CSV Parsing Error: {exc}", source_format="csv") from exc

        return LoadedRecords(
            records=tuple(records),
            rows_attempted=attempted,
            rows_parsed=len(records),
            lines_total=len(records),
            source_format="csv",
            truncated=truncated,
        )

    @staticmethod
    def _json_rows(payload: Any) -> list[Any]:
        if isinstance(payload, list):
            return payload
        if isinstance(payload, Mapping):
            for key in _JSON_ROW_KEYS:
                rows = payload.get(key)
                if isinstance(rows, list):
                    return rows
        return []

    @classmethod
    def _flatten(cls, entry: Mapping[str, Any], prefix: str = "") -> dict[str, Scalar]:
        record: dict[str, Scalar] = {}
        for key, value in entry.items():
            name = f"{prefix}{key}"
            if isinstance(value, Mapping):
                record.update(cls._flatten(value, prefix=f"{name}_"))
            elif not isinstance(value, list):
                record[name] = value
        return record

    @classmethod
    def _line_count(cls, entry: Mapping[str, Any]) -> int:
        """
        Total length of list values at any depth; an entry without lists is one line.
        """

        def count(node: Mapping[str, Any]) -> tuple[int, bool]:
            total = 0
            found = False
            for value in node.values():
                if isinstance(value, list):
                    total += len(value)
                    found = True
                elif isinstance(value, Mapping):
                    nested_total, nested_found = count(value)
                    total += nested_total
                    found = found or nested_found
            return total, found

        total, found = count(entry)
        return total if found else 1
