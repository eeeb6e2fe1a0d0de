"""
Pydantic models describing the declarative GETS schema document.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldSpecModel(BaseModel):
    """One canonical field entry keyed by its path."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["string", "number", "date", "boolean"]
    required: bool = False
    category: str = Field(min_length=1)
    description: str | None = None


class CategorySpecModel(BaseModel):
    """Category entry keyed by its name."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    weight: float = Field(gt=0)


class SchemaDocumentModel(BaseModel):
    """Top-level schema document: ordered fields plus weighted categories."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = "0.1"
    fields: dict[str, FieldSpecModel] = Field(min_length=1)
    categories: dict[str, CategorySpecModel] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_field_categories(self) -> "SchemaDocumentModel":
        undeclared = sorted(
            {spec.category for spec in self.fields.values()} - set(self.categories)
        )
        if undeclared:
            raise ValueError(
                "Fields reference undeclared categories: " + ", ".join(undeclared)
            )
        blank_paths = [path for path in self.fields if not path.strip()]
        if blank_paths:
            raise ValueError("Field paths must not be blank.")
        return self
