"""DeleteQueryWriter: immutable DELETE query writer -> ``DELETE <targets> ...``."""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from ..exc import QueryPreconditionError, WriterError
from ..schema import any_schema, object_schema
from ..values import (
    RecordRelation, assert_record_link, as_relation, is_list_like,
    relation_from, relation_to, thing, use_value_unsafe,
)
from .operators import eq
from .types import FIELDS, DeleteQueryState, Quantity, ReturnMode
from .where import compile_where

log = logging.getLogger("surql.writer")


class DeleteQueryWriter:
    """Immutable DELETE query writer.

    Every configuration method returns a new writer; the original is
    left untouched, so intermediate writers can be shared and branched.

    Usage::

        query = (delete('person')
                 .where({'age': lt(18)})
                 .return_(ReturnMode.NONE)
                 .timeout(5)
                 .compile())

    Only ``where`` escapes its values.  Targets are rendered verbatim, so
    never pass untrusted record ids to :func:`delete`; use
    :func:`delete_record` with an explicit table name instead.
    """

    __slots__ = ('_state',)

    def __init__(self, state: DeleteQueryState) -> None:
        self._state = state

    @property
    def schema(self) -> Any:
        """The schema used to validate results, or None."""
        return self._state.schema

    @property
    def quantity(self) -> Quantity:
        return self._state.quantity

    @property
    def state(self) -> DeleteQueryState:
        return self._state

    def _replace(self, **changes: Any) -> DeleteQueryWriter:
        return DeleteQueryWriter(dataclasses.replace(self._state, **changes))

    # ── Result schema ─────────────────────────────────────────────

    def with_(self, schema: Any) -> DeleteQueryWriter:
        """Use *schema* (a pydantic model or ``TypeAdapter``) to validate results."""
        return self._replace(schema=schema)

    def with_schema(self, shape: Mapping[str, Any]) -> DeleteQueryWriter:
        """Shorthand for ``with_(object_schema(shape))``."""
        return self.with_(object_schema(shape))

    def with_any(self) -> DeleteQueryWriter:
        """Accept any result value."""
        return self.with_(any_schema())

    # ── Clauses ───────────────────────────────────────────────────

    def where(self, where: str | Mapping[str, Any]) -> DeleteQueryWriter:
        """Set the WHERE clause.

        A mapping is compiled with all values escaped.  A string is used
        verbatim and is not escaped.
        """
        if self._state.unrelate:
            raise WriterError('Cannot use where clause with delete_relation')

        if isinstance(where, Mapping):
            where = compile_where(where)
        elif not isinstance(where, str):
            raise WriterError(
                f"Where clause must be a string or mapping, got {type(where).__name__}"
            )

        return self._replace(where=where)

    def return_(self, mode: ReturnMode | str) -> DeleteQueryWriter:
        """Set the RETURN mode (none, before, after, diff)."""
        return self._replace(return_mode=ReturnMode.coerce(mode), return_fields=())

    def return_fields(self, *fields: str) -> DeleteQueryWriter:
        """Return only the given fields, in order."""
        return self._replace(return_mode=FIELDS, return_fields=tuple(fields))

    def timeout(self, seconds: float) -> DeleteQueryWriter:
        """Set the query timeout in seconds."""
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise WriterError(f"Timeout must be a number, got {seconds!r}")
        if not math.isfinite(seconds):
            raise WriterError(f"Timeout must be finite, got {seconds!r}")
        return self._replace(timeout=seconds)

    def parallel(self) -> DeleteQueryWriter:
        """Run the query in parallel."""
        return self._replace(parallel=True)

    # ── Compilation ───────────────────────────────────────────────

    def compile(self) -> str:
        """Compile to a SurrealQL DELETE statement."""
        state = self._state

        if not state.targets:
            raise QueryPreconditionError('No targets specified')

        builder = f'DELETE {state.targets}'

        if state.where:
            builder += f' WHERE {state.where}'

        if state.return_mode == FIELDS:
            builder += f" RETURN {', '.join(state.return_fields)}"
        elif state.return_mode is not None:
            builder += f' RETURN {state.return_mode.value.upper()}'

        # A timeout of 0 means no timeout.
        if state.timeout:
            builder += f' TIMEOUT {_format_seconds(state.timeout)}s'

        if state.parallel:
            builder += ' PARALLEL'

        log.debug("compile: %s", builder)
        return builder

    def explain(self) -> str:
        """Return the compiled query with a header, for debugging."""
        return f"-- DeleteQuery ({self._state.quantity.value})\n{self.compile()}"

    def __str__(self) -> str:
        return self.compile()

    def __repr__(self) -> str:
        try:
            return f"DeleteQueryWriter({self.compile()})"
        except QueryPreconditionError:
            return f"DeleteQueryWriter({self._state!r})"


def _format_seconds(seconds: float) -> str:
    if isinstance(seconds, float) and seconds.is_integer():
        return str(int(seconds))
    return str(seconds)


# ── Entry points ──────────────────────────────────────────────────

def delete(*targets: Any) -> DeleteQueryWriter:
    """Start a DELETE query for one or more targets.

    Targets are table names, record links or :func:`~surql.values.raw`
    fragments, passed as separate arguments.  To delete a single record
    by id, prefer :func:`delete_record`.
    """
    if not targets:
        raise WriterError('At least one target must be specified')

    if is_list_like(*targets):
        raise WriterError('Multiple targets must be specified separately')

    return DeleteQueryWriter(DeleteQueryState(
        schema=None,
        quantity=Quantity.MANY,
        targets=', '.join(use_value_unsafe(t) for t in targets),
    ))


del_ = delete


@dataclass(frozen=True)
class ByLink:
    """A record given as a full ``table:id`` link."""
    link: str


@dataclass(frozen=True)
class ByTableAndId:
    """A record given as a table name and an id."""
    table: str
    id: Any


RecordRef = Union[ByLink, ByTableAndId]


def _record_ref(record: Any, record_id: Any = None) -> RecordRef:
    if isinstance(record, (ByLink, ByTableAndId)):
        if record_id is not None:
            raise WriterError('Cannot pass an id together with a record reference')
        return record
    if record_id is None:
        return ByLink(record)
    return ByTableAndId(record, record_id)


def _resolve_record(ref: RecordRef) -> str:
    if isinstance(ref, ByLink):
        return assert_record_link(ref.link)
    return thing(ref.table, ref.id)


def delete_record(record: Any, record_id: Any = None) -> DeleteQueryWriter:
    """Start a DELETE query for a single record.

    Call with a full link (``delete_record('person:1')``) or with a table
    and id (``delete_record('person', '1')``).  The two-argument form pins
    the table name, so a spoofed link for another table is rejected.
    """
    link = _resolve_record(_record_ref(record, record_id))

    return DeleteQueryWriter(DeleteQueryState(
        schema=None,
        quantity=Quantity.MAYBE,
        targets=link,
    ))


def delete_relation(relation: RecordRelation | Mapping[str, Any]) -> DeleteQueryWriter:
    """Start a DELETE query for the edge between two records.

    The where clause is derived from the relation endpoints, so calling
    ``.where()`` on the result raises :class:`~surql.exc.WriterError`.
    """
    relation = as_relation(relation)

    return DeleteQueryWriter(DeleteQueryState(
        schema=None,
        quantity=Quantity.MAYBE,
        targets=relation.edge,
        where=compile_where({
            'in': eq(relation_from(relation)),
            'out': eq(relation_to(relation)),
        }),
        unrelate=True,
    ))
