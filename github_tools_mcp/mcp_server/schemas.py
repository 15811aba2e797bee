"""Schema helpers: contract builders and argument validation.

Tool contracts are plain JSON Schema dicts, so the same object is published
to clients by ``list_tools`` and enforced by ``validate_tool_args``.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import jsonschema

from github_tools_mcp.mcp_server.errors import ToolInputValidationError

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def _with_description(schema: Dict[str, Any], description: Optional[str]) -> Dict[str, Any]:
    if description:
        schema["description"] = description
    return schema


def string_field(description: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    return _with_description({"type": "string", **extra}, description)


def integer_field(description: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    return _with_description({"type": "integer", **extra}, description)


def number_field(description: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    return _with_description({"type": "number", **extra}, description)


def boolean_field(description: Optional[str] = None) -> Dict[str, Any]:
    return _with_description({"type": "boolean"}, description)


def enum_field(values: Sequence[str], description: Optional[str] = None) -> Dict[str, Any]:
    return _with_description({"type": "string", "enum": list(values)}, description)


def array_field(items: Mapping[str, Any], description: Optional[str] = None) -> Dict[str, Any]:
    return _with_description({"type": "array", "items": dict(items)}, description)


def any_field(description: Optional[str] = None) -> Dict[str, Any]:
    """A field that accepts any JSON value; shape checks happen in the operation."""
    return _with_description({}, description)


def object_schema(
    properties: Mapping[str, Mapping[str, Any]],
    required: Iterable[str] = (),
    *,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Return a closed object schema (unknown properties are rejected)."""

    required_list = list(required)
    unknown = [name for name in required_list if name not in properties]
    if unknown:
        raise ValueError(f"required fields missing from properties: {', '.join(unknown)}")

    schema: Dict[str, Any] = {
        "type": "object",
        "properties": {name: dict(spec) for name, spec in properties.items()},
        "additionalProperties": False,
    }
    if required_list:
        schema["required"] = required_list
    return _with_description(schema, description)


def tool_input_schema(
    properties: Mapping[str, Mapping[str, Any]],
    required: Iterable[str] = (),
) -> Dict[str, Any]:
    """Top-level tool contract: a closed object schema tagged with its dialect."""

    schema = object_schema(properties, required)
    schema["$schema"] = JSON_SCHEMA_DIALECT
    return schema


def check_tool_schema(schema: Mapping[str, Any]) -> None:
    """Raise ``jsonschema.SchemaError`` if ``schema`` is not a valid contract."""

    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    if schema.get("type") != "object":
        raise jsonschema.SchemaError("tool input schemas must describe an object")


def _join_path(parts: Iterable[Any]) -> str:
    return ".".join(str(p) for p in parts)


def collect_violations(schema: Mapping[str, Any], arguments: Any) -> List[Dict[str, Any]]:
    """Validate ``arguments`` against ``schema`` and return every violation.

    Each violation names the offending field. Missing required fields and
    unexpected fields are reported one entry per field.
    """

    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema)

    violations: List[Dict[str, Any]] = []
    seen: set[tuple[str, str]] = set()

    def add(field: str, message: str, kind: str) -> None:
        key = (field, kind)
        if key in seen:
            return
        seen.add(key)
        violations.append({"field": field, "message": message, "validator": kind})

    for error in sorted(validator.iter_errors(arguments), key=lambda e: (_join_path(e.absolute_path), e.message)):
        base = list(error.absolute_path)
        if error.validator == "required" and isinstance(error.instance, Mapping):
            for name in error.validator_value:
                if name not in error.instance:
                    add(_join_path(base + [name]), f"'{name}' is a required property", "required")
            continue
        if error.validator == "additionalProperties" and isinstance(error.instance, Mapping):
            declared = error.schema.get("properties", {}) or {}
            for name in error.instance:
                if name not in declared:
                    add(_join_path(base + [name]), f"'{name}' is not an allowed field", "additionalProperties")
            continue
        add(_join_path(base) or "<root>", error.message, str(error.validator))

    return violations


def validate_tool_args(
    tool_name: str, schema: Mapping[str, Any], arguments: Mapping[str, Any]
) -> Dict[str, Any]:
    """Return a private copy of ``arguments`` or raise ``ToolInputValidationError``."""

    violations = collect_violations(schema, arguments)
    if violations:
        raise ToolInputValidationError(tool_name, violations)
    # Each invocation owns its own copy.
    return copy.deepcopy(dict(arguments))


__all__ = [
    "JSON_SCHEMA_DIALECT",
    "any_field",
    "array_field",
    "boolean_field",
    "check_tool_schema",
    "collect_violations",
    "enum_field",
    "integer_field",
    "number_field",
    "object_schema",
    "string_field",
    "tool_input_schema",
    "validate_tool_args",
]
