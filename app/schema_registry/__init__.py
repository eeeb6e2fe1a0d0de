"""
app/schema_registry package marker.
"""

from app.schema_registry.loader import (
    DEFAULT_SCHEMA_PATH,
    SchemaRegistryError,
    build_schema_registry,
    get_schema_registry,
    load_schema_registry,
)

__all__ = [
    "DEFAULT_SCHEMA_PATH",
    "SchemaRegistryError",
    "build_schema_registry",
    "get_schema_registry",
    "load_schema_registry",
]
