"""surql — immutable SurrealQL query writers.

Usage::

    from surql import delete, delete_record, delete_relation, eq, gte

    delete('person', 'dog').compile()
    # DELETE person, dog RETURN BEFORE

    (delete('person')
        .where({'name': 'Alice', 'age': gte(18)})
        .return_('none')
        .timeout(5)
        .parallel()
        .compile())
    # DELETE person WHERE name = 'Alice' AND age >= 18 RETURN NONE TIMEOUT 5s PARALLEL

    delete_relation({'from': 'person:1', 'edge': 'knows', 'to': 'person:2'}).compile()
    # DELETE knows WHERE in = person:1 AND out = person:2 RETURN BEFORE
"""

from .query.types import Quantity, ReturnMode, DeleteQueryState, QueryWriter
from .query.delete import (
    DeleteQueryWriter, ByLink, ByTableAndId,
    delete, del_, delete_record, delete_relation,
)
from .query.where import compile_where
from .query.operators import (
    Operator, eq, eeq, neq, gt, gte, lt, lte,
    contains, contains_not, contains_all, contains_any, contains_none,
    inside, not_inside, all_inside, any_inside, none_inside,
    outside, intersects, match,
)
from .values import (
    Raw, RecordRelation, raw, use_value, use_value_unsafe,
    thing, is_record_link, assert_record_link, relation_from, relation_to,
)
from .schema import object_schema, any_schema, parse_result
from .exc import (
    SurqlError, WriterError, QueryPreconditionError, SerializationError,
    ResultError, ResultValidationError,
)

__version__ = "0.1.0"

__all__ = [
    # Writers
    'DeleteQueryWriter', 'DeleteQueryState', 'QueryWriter',
    'Quantity', 'ReturnMode', 'ByLink', 'ByTableAndId',
    'delete', 'del_', 'delete_record', 'delete_relation',
    # Where clauses
    'compile_where', 'Operator',
    'eq', 'eeq', 'neq', 'gt', 'gte', 'lt', 'lte',
    'contains', 'contains_not', 'contains_all', 'contains_any', 'contains_none',
    'inside', 'not_inside', 'all_inside', 'any_inside', 'none_inside',
    'outside', 'intersects', 'match',
    # Values
    'Raw', 'RecordRelation', 'raw', 'use_value', 'use_value_unsafe',
    'thing', 'is_record_link', 'assert_record_link', 'relation_from', 'relation_to',
    # Schemas
    'object_schema', 'any_schema', 'parse_result',
    # Exceptions
    'SurqlError', 'WriterError', 'QueryPreconditionError', 'SerializationError',
    'ResultError', 'ResultValidationError',
]
