"""Render Python values as SurrealQL literals and record links.

Two renderers are provided:

    use_value(value)          — always safe, strings become quoted literals
    use_value_unsafe(value)   — strings are emitted verbatim (table names,
                                record links, ``$params``)

Record links take the form ``table:id``.  Ids that are not plain
alphanumerics are wrapped in ``⟨...⟩``.
"""

from __future__ import annotations

import datetime
import decimal
import math
import re
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .exc import SerializationError, WriterError

_IDENT_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_PLAIN_ID_RE = re.compile(r'[A-Za-z0-9_]+')

# Array and object ids may only hold literals: numbers, quoted strings,
# booleans and NONE/NULL.  No identifiers, operators or statement separators.
_ID_LITERAL = (
    r'(?:-?\d+(?:\.\d+)?'
    r"|'(?:[^'\\\n]|\\[^\n])*'"
    r'|"(?:[^"\\\n]|\\[^\n])*"'
    r'|true|false|NONE|NULL)'
)
_ID_KEY = r'(?:[A-Za-z_][A-Za-z0-9_]*|"(?:[^"\\\n]|\\[^\n])*")'
_ARRAY_ID = rf'\[ *(?:{_ID_LITERAL} *(?:, *{_ID_LITERAL} *)*)?\]'
_OBJECT_ID = rf'\{{ *(?:{_ID_KEY} *: *{_ID_LITERAL} *(?:, *{_ID_KEY} *: *{_ID_LITERAL} *)*)?\}}'

_RECORD_LINK_RE = re.compile(
    r'(?P<table>[A-Za-z_][A-Za-z0-9_]*):'
    r'(?P<id>[A-Za-z0-9_]+|⟨(?:[^⟩\\\n]|\\[^\n])+⟩|`(?:[^`\\\n]|\\[^\n])+`'
    rf'|{_ARRAY_ID}|{_OBJECT_ID})'
)


class Raw:
    """A pre-rendered SurrealQL fragment, emitted verbatim."""
    __slots__ = ('text',)

    def __init__(self, text: str) -> None:
        self.text = text

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Raw) and other.text == self.text

    def __hash__(self) -> int:
        return hash(('Raw', self.text))

    def __repr__(self) -> str:
        return f"Raw({self.text!r})"


def raw(text: str) -> Raw:
    """Mark *text* as raw SurrealQL.  The caller is responsible for escaping."""
    return Raw(text)


# ── Literal rendering ─────────────────────────────────────────────

def use_value(value: Any) -> str:
    """Render *value* as a safely escaped SurrealQL literal."""
    if isinstance(value, Raw):
        return value.text
    if value is None:
        return 'NONE'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise SerializationError(f"Cannot render non-finite float {value!r}")
        return repr(value)
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            raise SerializationError(f"Cannot render non-finite decimal {value!r}")
        return f'{value}dec'
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
            return f"d'{value.isoformat()}Z'"
        return f"d'{value.isoformat()}'"
    if isinstance(value, datetime.date):
        return f"d'{value.isoformat()}'"
    if isinstance(value, uuid.UUID):
        return f"u'{value}'"
    if isinstance(value, Mapping):
        if not value:
            return '{}'
        items = ', '.join(
            f'{_object_key(k)}: {use_value(v)}' for k, v in value.items()
        )
        return f'{{ {items} }}'
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(use_value(v) for v in value) + ']'
    raise SerializationError(
        f"Cannot render value of type {type(value).__name__} as SurrealQL"
    )


def use_value_unsafe(value: Any) -> str:
    """Render *value*, emitting strings verbatim.

    Only pass trusted strings: nothing prevents injection here.
    """
    if isinstance(value, str):
        return value
    return use_value(value)


def _quote(text: str) -> str:
    escaped = text.replace('\\', '\\\\').replace("'", "\\'")
    return f"'{escaped}'"


def _object_key(key: Any) -> str:
    if not isinstance(key, str):
        raise SerializationError(f"Object keys must be strings, got {type(key).__name__}")
    if _IDENT_RE.fullmatch(key):
        return key
    return '"' + key.replace('\\', '\\\\').replace('"', '\\"') + '"'


# ── Record links ──────────────────────────────────────────────────

def is_record_link(value: Any) -> bool:
    """Return True if *value* is a well formed ``table:id`` string."""
    return isinstance(value, str) and _RECORD_LINK_RE.fullmatch(value) is not None


def assert_record_link(value: Any) -> str:
    """Return *value* unchanged, or raise :class:`WriterError` if it is not a link."""
    if not is_record_link(value):
        raise WriterError(f"Invalid record link: {value!r}")
    return value


def thing(table: str, record_id: Any) -> str:
    """Build a record link from a table name and an id.

    *record_id* may already be a full link, but only for the same table.
    """
    if not isinstance(table, str) or not _IDENT_RE.fullmatch(table):
        raise WriterError(f"Invalid table name: {table!r}")

    if isinstance(record_id, bool):
        raise WriterError(f"Invalid record id: {record_id!r}")
    if isinstance(record_id, int):
        return f'{table}:{record_id}'
    if not isinstance(record_id, str) or not record_id:
        raise WriterError(f"Invalid record id: {record_id!r}")

    if is_record_link(record_id):
        link_table = record_id.split(':', 1)[0]
        if link_table != table:
            raise WriterError(
                f"Record link {record_id!r} does not belong to table {table!r}"
            )
        return record_id

    if _PLAIN_ID_RE.fullmatch(record_id):
        return f'{table}:{record_id}'
    escaped = record_id.replace('\\', '\\\\').replace('⟩', '\\⟩')
    return f'{table}:⟨{escaped}⟩'


def is_list_like(*values: Any) -> bool:
    """Return True if any of *values* is a collection rather than a single value."""
    for value in values:
        if isinstance(value, (str, bytes, Mapping, Raw)):
            continue
        if isinstance(value, Iterable):
            return True
    return False


# ── Relations ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class RecordRelation:
    """A directed edge between two records: ``from_id -> edge -> to_id``."""

    from_id: str
    edge: str
    to_id: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RecordRelation:
        """Build from ``{'from': ..., 'edge': ..., 'to': ...}``.

        The ``from_id`` / ``to_id`` spellings are accepted as well.
        """
        try:
            from_id = data['from_id'] if 'from_id' in data else data['from']
            to_id = data['to_id'] if 'to_id' in data else data['to']
            edge = data['edge']
        except KeyError as e:
            raise WriterError(f"Relation is missing key {e.args[0]!r}") from None
        return cls(from_id=from_id, edge=edge, to_id=to_id)


def as_relation(relation: RecordRelation | Mapping[str, Any]) -> RecordRelation:
    if isinstance(relation, RecordRelation):
        return relation
    if isinstance(relation, Mapping):
        return RecordRelation.from_mapping(relation)
    raise WriterError(
        f"Expected a RecordRelation or mapping, got {type(relation).__name__}"
    )


def relation_from(relation: RecordRelation | Mapping[str, Any]) -> Raw:
    """The ``in`` endpoint of *relation* as a raw record link."""
    return Raw(assert_record_link(as_relation(relation).from_id))


def relation_to(relation: RecordRelation | Mapping[str, Any]) -> Raw:
    """The ``out`` endpoint of *relation* as a raw record link."""
    return Raw(assert_record_link(as_relation(relation).to_id))
