"""
Load the canonical GETS schema registry from its JSON resource.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from app.config import get_readiness_settings
from app.domain.readiness import CanonicalField, Category, SchemaRegistry
from app.logging_utils import log_event
from app.schema_registry.models import SchemaDocumentModel

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("gets_v0_1_schema.json")


class SchemaRegistryError(ValueError):
    """
    Raised when the canonical schema is missing, empty, or malformed.
    """

    def __init__(self, *, message: str, errors: Sequence[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors or ())

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "errors": list(self.errors)}


def build_schema_registry(document: Mapping[str, Any]) -> SchemaRegistry:
    """
    Validate a decoded schema document and freeze it into a registry.
    """

    if not isinstance(document, Mapping):
        raise SchemaRegistryError(message="Schema document must be a JSON object.")

    try:
        parsed = SchemaDocumentModel.model_validate(dict(document))
    except ValidationError as exc:
        raise SchemaRegistryError(
            message="Canonical schema document is invalid.",
            errors=[
                f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
                for error in exc.errors()
            ],
        ) from exc

    fields = tuple(
        CanonicalField(
            path=path.strip(),
            type=spec.type,
            required=spec.required,
            category=spec.category,
        )
        for path, spec in parsed.fields.items()
    )
    categories = tuple(
        Category(name=name, weight=spec.weight)
        for name, spec in parsed.categories.items()
    )
    return SchemaRegistry(version=parsed.version, fields=fields, categories=categories)


def load_schema_registry(path: str | Path) -> SchemaRegistry:
    """
    Read and validate a schema registry from a JSON file.
    """

    schema_path = Path(path)
    if not schema_path.exists():
        raise SchemaRegistryError(message=f"Canonical schema file not found: {schema_path}")

    try:
        raw_document = json.loads(schema_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SchemaRegistryError(
            message=f"Canonical schema file could not be read: {schema_path}",
            errors=[str(exc)],
        ) from exc

    registry = build_schema_registry(raw_document)
    log_event(
        logger,
        logging.INFO,
        "schema_registry_loaded",
        path=str(schema_path),
        version=registry.version,
        field_count=len(registry.fields),
        category_count=len(registry.categories),
    )
    return registry


@lru_cache(maxsize=1)
def get_schema_registry() -> SchemaRegistry:
    """
    Return the process-wide schema registry, loaded once.
    """

    settings = get_readiness_settings()
    return load_schema_registry(settings.schema_path or DEFAULT_SCHEMA_PATH)
