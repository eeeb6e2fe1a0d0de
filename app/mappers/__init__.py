"""
app/mappers package marker.
"""

from app.mappers.field_coverage_mapper import (
    FieldCoverageMapper,
    field_similarity,
    map_fields,
    normalize_field_name,
)
from app.mappers.value_resolver import resolve_value

__all__ = [
    "FieldCoverageMapper",
    "field_similarity",
    "map_fields",
    "normalize_field_name",
    "resolve_value",
]
