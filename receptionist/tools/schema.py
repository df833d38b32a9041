"""
Tool parameter schemas.

A small, tagged structural subset of JSON Schema, used both to describe a
tool to the model and to validate the parameters the model produced.

Validation rules (the complete set):
- required fields are present and not None
- primitive/array/object type matches
- enum membership
- format "email"

Usage:
    schema = ParameterSchema.from_dict({
        "type": "object",
        "properties": {
            "to": {"type": "string", "format": "email"},
            "priority": {"type": "string", "enum": ["low", "high"]},
        },
        "required": ["to"],
    })

    result = validate_parameters(schema, {"to": "nope"})
    result.errors  # ("Field 'to' must be a valid email address",)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True, slots=True)
class PropertySchema:
    """Schema of one parameter."""

    type: str | None = None
    description: str | None = None
    enum: tuple[Any, ...] | None = None
    format: str | None = None
    items: dict[str, Any] | None = None
    default: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PropertySchema:
        enum = data.get("enum")
        return cls(
            type=data.get("type"),
            description=data.get("description"),
            enum=tuple(enum) if enum is not None else None,
            format=data.get("format"),
            items=data.get("items"),
            default=data.get("default"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.type is not None:
            result["type"] = self.type
        if self.description is not None:
            result["description"] = self.description
        if self.enum is not None:
            result["enum"] = list(self.enum)
        if self.format is not None:
            result["format"] = self.format
        if self.items is not None:
            result["items"] = self.items
        if self.default is not None:
            result["default"] = self.default
        return result


@dataclass(frozen=True, slots=True)
class ParameterSchema:
    """Schema of a tool's whole parameter object."""

    type: str = "object"
    properties: dict[str, PropertySchema] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParameterSchema:
        return cls(
            type=data.get("type", "object"),
            properties={
                name: PropertySchema.from_dict(prop)
                for name, prop in (data.get("properties") or {}).items()
            },
            required=tuple(data.get("required") or ()),
        )

    @classmethod
    def coerce(cls, value: ParameterSchema | Mapping[str, Any]) -> ParameterSchema:
        if isinstance(value, ParameterSchema):
            return value
        return cls.from_dict(value)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": self.type,
            "properties": {name: prop.to_dict() for name, prop in self.properties.items()},
        }
        if self.required:
            result["required"] = list(self.required)
        return result


@dataclass(frozen=True, slots=True)
class SchemaValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


def json_type_name(value: Any) -> str:
    """Name a Python value the way JSON Schema would."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _matches_type(expected: str, value: Any) -> bool:
    actual = json_type_name(value)
    if expected == "number":
        return actual in ("number", "integer")
    if expected in ("string", "integer", "boolean", "array", "object", "null"):
        return actual == expected
    # Unknown type keywords are not enforced
    return True


def validate_parameters(
    schema: ParameterSchema | Mapping[str, Any],
    data: Any,
) -> SchemaValidationResult:
    """
    Validate tool parameters against a schema.

    Only object schemas are checked; anything else passes. Optional fields
    given as None are treated as absent.

    Returns:
        SchemaValidationResult with every violation found
    """
    schema = ParameterSchema.coerce(schema)

    if schema.type != "object":
        return SchemaValidationResult(valid=True)

    if not isinstance(data, Mapping):
        return SchemaValidationResult(
            valid=False,
            errors=(f"Parameters must be an object, got {json_type_name(data)}",),
        )

    errors: list[str] = []

    for name in schema.required:
        if data.get(name) is None:
            errors.append(f"Missing required field: {name}")

    for key, value in data.items():
        prop = schema.properties.get(key)
        if prop is None or value is None:
            continue

        if prop.type and not _matches_type(prop.type, value):
            if prop.type == "array":
                errors.append(f"Field '{key}' must be an array")
            else:
                errors.append(
                    f"Field '{key}' must be of type {prop.type}, got {json_type_name(value)}"
                )

        if prop.enum is not None and value not in prop.enum:
            errors.append(
                f"Field '{key}' must be one of: {', '.join(str(v) for v in prop.enum)}"
            )

        if prop.format == "email" and value:
            if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
                errors.append(f"Field '{key}' must be a valid email address")

    return SchemaValidationResult(valid=not errors, errors=tuple(errors))
