"""Comparison operators for where-clause mappings.

Each constructor pairs a SurrealQL operator with a value, e.g.
``{'age': gte(18)}`` compiles to ``age >= 18``.  Values are escaped
by the where compiler unless wrapped in :func:`surql.values.raw`.
"""

from __future__ import annotations

from typing import Any


class Operator:
    """An operator and the right-hand value it compares against."""
    __slots__ = ('symbol', 'value')

    def __init__(self, symbol: str, value: Any) -> None:
        self.symbol = symbol
        self.value = value

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Operator)
            and other.symbol == self.symbol
            and other.value == self.value
        )

    def __hash__(self) -> int:
        return hash((self.symbol, repr(self.value)))

    def __repr__(self) -> str:
        return f"Operator({self.symbol} {self.value!r})"


# ── Equality ──────────────────────────────────────────────────────

def eq(value: Any) -> Operator:
    """``=``"""
    return Operator('=', value)

def eeq(value: Any) -> Operator:
    """``==`` (exact equality, no type coercion)."""
    return Operator('==', value)

def neq(value: Any) -> Operator:
    """``!=``"""
    return Operator('!=', value)


# ── Ordering ──────────────────────────────────────────────────────

def gt(value: Any) -> Operator:
    return Operator('>', value)

def gte(value: Any) -> Operator:
    return Operator('>=', value)

def lt(value: Any) -> Operator:
    return Operator('<', value)

def lte(value: Any) -> Operator:
    return Operator('<=', value)


# ── Set membership ────────────────────────────────────────────────

def contains(value: Any) -> Operator:
    return Operator('CONTAINS', value)

def contains_not(value: Any) -> Operator:
    return Operator('CONTAINSNOT', value)

def contains_all(value: Any) -> Operator:
    return Operator('CONTAINSALL', value)

def contains_any(value: Any) -> Operator:
    return Operator('CONTAINSANY', value)

def contains_none(value: Any) -> Operator:
    return Operator('CONTAINSNONE', value)

def inside(value: Any) -> Operator:
    return Operator('INSIDE', value)

def not_inside(value: Any) -> Operator:
    return Operator('NOTINSIDE', value)

def all_inside(value: Any) -> Operator:
    return Operator('ALLINSIDE', value)

def any_inside(value: Any) -> Operator:
    return Operator('ANYINSIDE', value)

def none_inside(value: Any) -> Operator:
    return Operator('NONEINSIDE', value)


# ── Geometry / text ───────────────────────────────────────────────

def outside(value: Any) -> Operator:
    return Operator('OUTSIDE', value)

def intersects(value: Any) -> Operator:
    return Operator('INTERSECTS', value)

def match(value: str) -> Operator:
    """``@@`` full-text match."""
    return Operator('@@', value)
