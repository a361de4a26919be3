"""Compile where-clause mappings to SurrealQL predicate text.

A mapping compiles entry by entry, entries joined with ``AND``::

    {'name': 'Alice', 'age': gte(18)}
        -> name = 'Alice' AND age >= 18

Special keys:

    'OR'    — sequence of mappings, joined with ``OR`` and parenthesised
    'AND'   — sequence of mappings, joined with ``AND`` and parenthesised
    'QUERY' — ``(subquery, Operator)`` pair; the subquery is a raw string
              or any writer with a ``compile()`` method
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from ..exc import WriterError
from ..values import Raw, use_value
from .operators import Operator

_FIELD_RE = re.compile(r'[A-Za-z_][\w.\[\]*]*')

_GROUP_KEYS = ('OR', 'AND')


def compile_where(where: Mapping[str, Any]) -> str:
    """Compile a where mapping to predicate text."""
    if not isinstance(where, Mapping):
        raise WriterError(
            f"Where clause must be a mapping, got {type(where).__name__}"
        )
    if not where:
        raise WriterError("Where clause must contain at least one condition")

    parts: list[str] = []
    for key, value in where.items():
        if key in _GROUP_KEYS:
            parts.append(_compile_group(key, value))
        elif key == 'QUERY':
            parts.append(_compile_subquery(value))
        else:
            parts.append(compile_condition(key, value))
    return ' AND '.join(parts)


def compile_condition(field: str, value: Any) -> str:
    """Compile one ``field <op> value`` condition.  Plain values use ``=``."""
    if not isinstance(field, str) or not _FIELD_RE.fullmatch(field):
        raise WriterError(f"Invalid field name in where clause: {field!r}")
    if isinstance(value, Operator):
        return f'{field} {value.symbol} {use_value(value.value)}'
    return f'{field} = {use_value(value)}'


def _compile_group(joiner: str, clauses: Any) -> str:
    if isinstance(clauses, (str, Mapping)) or not isinstance(clauses, Sequence):
        raise WriterError(f"{joiner} expects a sequence of where mappings")
    if not clauses:
        raise WriterError(f"{joiner} expects at least one where mapping")
    compiled = [f'({compile_where(c)})' for c in clauses]
    if len(compiled) == 1:
        return compiled[0]
    return '(' + f' {joiner} '.join(compiled) + ')'


def _compile_subquery(value: Any) -> str:
    if not (isinstance(value, (tuple, list)) and len(value) == 2):
        raise WriterError("QUERY expects a (subquery, operator) pair")
    query, op = value
    if isinstance(query, Raw):
        query = query.text
    elif hasattr(query, 'compile'):
        query = query.compile()
    if not isinstance(query, str) or not isinstance(op, Operator):
        raise WriterError("QUERY expects a (subquery, operator) pair")
    return f'({query}) {op.symbol} {use_value(op.value)}'
