"""Shared types for query writers."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Literal, Protocol, Union

from ..exc import WriterError


class Quantity(enum.Enum):
    """How many records a query is expected to produce."""
    ONE = 'one'
    MAYBE = 'maybe'
    MANY = 'many'


class ReturnMode(enum.Enum):
    """Which version of the affected records the database reports back."""
    NONE = 'none'
    BEFORE = 'before'
    AFTER = 'after'
    DIFF = 'diff'

    @classmethod
    def coerce(cls, mode: ReturnMode | str) -> ReturnMode:
        """Accept an enum member or its name in either case."""
        if isinstance(mode, cls):
            return mode
        if isinstance(mode, str):
            try:
                return cls(mode.lower())
            except ValueError:
                pass
        valid = ', '.join(m.value for m in cls)
        raise WriterError(f"Invalid return mode {mode!r}; expected one of: {valid}")


FIELDS = 'fields'

ReturnState = Union[ReturnMode, Literal['fields'], None]


@dataclass(frozen=True)
class DeleteQueryState:
    """Everything a DELETE writer has been told so far.

    ``unrelate`` is set only by :func:`delete_relation`, whose ``where``
    is fixed at construction.
    """

    schema: Any
    quantity: Quantity
    targets: str
    where: str | None = None
    return_mode: ReturnState = ReturnMode.BEFORE
    return_fields: tuple[str, ...] = ()
    timeout: float | int | None = None
    parallel: bool = False
    unrelate: bool = False


class QueryWriter(Protocol):
    """Anything that compiles to a SurrealQL string and declares its result shape."""

    @property
    def schema(self) -> Any: ...

    @property
    def quantity(self) -> Quantity: ...

    def compile(self) -> str: ...
