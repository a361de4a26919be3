"""Result schemas for query writers.

A writer carries an optional pydantic schema alongside its query text.
The schema never affects the compiled query; it is used by
:func:`parse_result` to validate a payload the caller has already
received from the database.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, create_model

from .exc import ResultError, ResultValidationError
from .query.types import Quantity, QueryWriter


def object_schema(shape: Mapping[str, Any], name: str = 'QueryResult') -> type[BaseModel]:
    """Build a pydantic model from a field shape.

    Each value is either a type (required field) or a ``(type, default)``
    tuple, as accepted by :func:`pydantic.create_model`.
    """
    fields: dict[str, Any] = {}
    for field_name, field_def in shape.items():
        if isinstance(field_def, tuple):
            fields[field_name] = field_def
        else:
            fields[field_name] = (field_def, ...)
    return create_model(
        name,
        __config__=ConfigDict(extra='allow'),
        **fields,
    )


def any_schema() -> TypeAdapter:
    """A schema that accepts any value."""
    return TypeAdapter(Any)


def validate(schema: Any, value: Any) -> Any:
    """Validate a single value against *schema*."""
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(value)
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            return schema.model_validate(value)
        return TypeAdapter(schema).validate_python(value)
    except ValidationError as e:
        raise ResultValidationError(
            f"Query result failed validation: {e.error_count()} error(s)",
            errors=e.errors(),
        ) from e


def parse_result(writer: QueryWriter, payload: Any) -> Any:
    """Unwrap and validate a query result according to *writer*.

    ``MANY`` returns a list, ``MAYBE`` the first item or None, and ``ONE``
    exactly one item.
    """
    rows = _as_rows(payload)
    quantity = writer.quantity
    schema = writer.schema

    if quantity is Quantity.MANY:
        if schema is None:
            return rows
        return [validate(schema, row) for row in rows]

    if quantity is Quantity.ONE and len(rows) != 1:
        raise ResultError(f"Expected exactly one result, got {len(rows)}")

    if not rows:
        return None
    if schema is None:
        return rows[0]
    return validate(schema, rows[0])


def _as_rows(payload: Any) -> list[Any]:
    if payload is None:
        return []
    if isinstance(payload, (list, tuple)):
        return list(payload)
    return [payload]
