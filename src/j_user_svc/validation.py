"""
Request payload validation.

Schemas are pydantic models. ``parse`` turns an untyped value into an instance
of the schema or raises ``ValidationFailed`` listing every violated field with
a readable message. Extra fields are dropped unless the schema is declared with
``extra="forbid"``.
"""
import json
from typing import Any, Dict, List, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ValidationFailed(Exception):
    """
    Raised when a request payload does not satisfy its schema.

    Attributes:
        errors (list[dict]): one {"field": ..., "message": ...} entry per violation.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__("Validation failed")
        self.errors = errors


def _field_path(loc) -> str:
    # FastAPI prefixes locations with where the value came from ("body", "query", ...)
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts) or "body"


def _label(field: str) -> str:
    name = field.rsplit(".", 1)[-1]
    return name.replace("_", " ").capitalize()


def _message(error: Dict[str, Any], field: str) -> str:
    kind = error.get("type")
    ctx = error.get("ctx") or {}
    label = _label(field)

    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{label} cannot be empty"
        return f"{label} must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "extra_forbidden":
        return "Unknown field"
    if kind in ("model_type", "model_attributes_type", "dict_type"):
        return "Request body must be a JSON object"
    if kind == "value_error" and "email address" in error.get("msg", ""):
        return "Invalid email address"
    return error.get("msg", "Invalid value")


def format_errors(errors) -> List[Dict[str, str]]:
    """Convert pydantic error dicts into [{"field": ..., "message": ...}]."""
    formatted = []
    for error in errors:
        field = _field_path(error.get("loc", ()))
        formatted.append({"field": field, "message": _message(error, field)})
    return formatted


def parse(schema: Type[SchemaT], raw: Any) -> SchemaT:
    """
    Validate ``raw`` against ``schema``.

    Returns the parsed model instance. Raises ValidationFailed with every
    violation when the input does not match.
    """
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailed(format_errors(e.errors())) from e


def validated_body(schema: Type[SchemaT]):
    """
    Dependency factory: read the JSON request body and parse it with ``schema``.

    Usage::

        async def create(payload: CreateUser = Depends(validated_body(CreateUser))):
            ...
    """

    async def _dependency(request: Request) -> SchemaT:
        if not (await request.body()).strip():
            # No body at all counts as an empty object
            return parse(schema, {})
        try:
            raw = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationFailed([{"field": "body", "message": "Request body must be valid JSON"}]) from None
        return parse(schema, raw)

    return _dependency
