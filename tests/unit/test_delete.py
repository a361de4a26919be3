"""Unit tests for the DELETE query writer."""

import dataclasses
import itertools

import pytest

from surql import (
    DeleteQueryWriter, DeleteQueryState, Quantity, ReturnMode,
    ByLink, ByTableAndId, RecordRelation,
    delete, del_, delete_record, delete_relation,
    eq, gte, lt, raw,
    WriterError, QueryPreconditionError,
)


KNOWS = {'edge': 'knows:1', 'from': 'person:1', 'to': 'person:2'}


class TestDelete:
    def test_multiple_targets(self):
        assert delete('person', 'dog').compile() == 'DELETE person, dog RETURN BEFORE'

    def test_single_target(self):
        assert delete('person').compile() == 'DELETE person RETURN BEFORE'

    def test_record_link_target(self):
        assert delete('person:tobie').compile() == 'DELETE person:tobie RETURN BEFORE'

    def test_raw_target(self):
        q = delete(raw('$records')).compile()
        assert q == 'DELETE $records RETURN BEFORE'

    def test_del_alias(self):
        assert del_ is delete

    def test_quantity_is_many(self):
        w = delete('person')
        assert w.quantity is Quantity.MANY
        assert w.schema is None

    def test_no_targets_raises(self):
        with pytest.raises(WriterError, match="At least one target"):
            delete()

    def test_list_target_raises(self):
        with pytest.raises(WriterError, match="specified separately"):
            delete(['person', 'dog'])

    def test_tuple_target_raises(self):
        with pytest.raises(WriterError, match="specified separately"):
            delete('person', ('dog',))

    def test_generator_target_raises(self):
        with pytest.raises(WriterError, match="specified separately"):
            delete(t for t in ['person'])

    def test_empty_target_fails_at_compile(self):
        w = delete('')
        with pytest.raises(QueryPreconditionError, match="No targets specified"):
            w.compile()


class TestDeleteRecord:
    def test_table_and_id(self):
        w = delete_record('person', '123')
        assert w.state.targets == 'person:123'
        assert w.compile() == 'DELETE person:123 RETURN BEFORE'

    def test_full_link(self):
        assert delete_record('person:123').compile() == 'DELETE person:123 RETURN BEFORE'

    def test_integer_id(self):
        assert delete_record('person', 7).state.targets == 'person:7'

    def test_complex_id_is_escaped(self):
        assert delete_record('person', 'john doe').state.targets == 'person:⟨john doe⟩'

    def test_id_already_a_link_for_same_table(self):
        assert delete_record('person', 'person:123').state.targets == 'person:123'

    def test_spoofed_table_rejected(self):
        with pytest.raises(WriterError, match="does not belong to table"):
            delete_record('person', 'admin:1')

    def test_invalid_link_rejected(self):
        with pytest.raises(WriterError, match="Invalid record link"):
            delete_record('person')

    def test_tagged_references(self):
        assert delete_record(ByLink('person:1')).state.targets == 'person:1'
        assert delete_record(ByTableAndId('person', '1')).state.targets == 'person:1'

    def test_tagged_reference_with_extra_id_rejected(self):
        with pytest.raises(WriterError):
            delete_record(ByLink('person:1'), '2')

    def test_quantity_is_maybe(self):
        assert delete_record('person:1').quantity is Quantity.MAYBE


class TestDeleteRelation:
    def test_relation_filter(self):
        w = delete_relation(KNOWS)
        assert w.compile() == (
            'DELETE knows:1 WHERE in = person:1 AND out = person:2 RETURN BEFORE'
        )

    def test_relation_with_timeout_and_parallel(self):
        q = delete_relation(KNOWS).timeout(5).parallel().compile()
        assert q == (
            'DELETE knows:1 WHERE in = person:1 AND out = person:2 '
            'RETURN BEFORE TIMEOUT 5s PARALLEL'
        )

    def test_record_relation_dataclass(self):
        rel = RecordRelation(from_id='person:1', edge='knows', to_id='person:2')
        q = delete_relation(rel).compile()
        assert q == 'DELETE knows WHERE in = person:1 AND out = person:2 RETURN BEFORE'

    def test_where_is_forbidden(self):
        w = delete_relation(KNOWS)
        with pytest.raises(WriterError, match="Cannot use where clause"):
            w.where({'name': 'Alice'})
        with pytest.raises(WriterError, match="Cannot use where clause"):
            w.where('true')

    def test_where_forbidden_after_other_calls(self):
        w = delete_relation(KNOWS).return_('after').timeout(1).parallel()
        with pytest.raises(WriterError):
            w.where({'x': 1})

    def test_invalid_endpoint_rejected(self):
        with pytest.raises(WriterError, match="Invalid record link"):
            delete_relation({'edge': 'knows', 'from': 'person', 'to': 'person:2'})

    def test_missing_key_rejected(self):
        with pytest.raises(WriterError, match="missing key"):
            delete_relation({'edge': 'knows', 'from': 'person:1'})

    def test_state_flags(self):
        s = delete_relation(KNOWS).state
        assert s.unrelate is True
        assert s.quantity is Quantity.MAYBE


class TestWhere:
    def test_mapping_is_compiled(self):
        q = delete('person').where({'name': eq('Alice')}).compile()
        assert q == "DELETE person WHERE name = 'Alice' RETURN BEFORE"

    def test_multiple_conditions(self):
        q = delete('person').where({'age': gte(18), 'active': True}).compile()
        assert q == 'DELETE person WHERE age >= 18 AND active = true RETURN BEFORE'

    def test_string_used_verbatim(self):
        q = delete('person').where('age < 18').compile()
        assert q == 'DELETE person WHERE age < 18 RETURN BEFORE'

    def test_values_are_escaped(self):
        q = delete('person').where({'name': "x' OR true"}).compile()
        assert "name = 'x\\' OR true'" in q

    def test_last_where_wins(self):
        q = delete('person').where('a = 1').where('b = 2').compile()
        assert q == 'DELETE person WHERE b = 2 RETURN BEFORE'

    def test_invalid_type_rejected(self):
        with pytest.raises(WriterError, match="string or mapping"):
            delete('person').where(42)


class TestReturn:
    @pytest.mark.parametrize("mode,expected", [
        (ReturnMode.NONE, 'RETURN NONE'),
        (ReturnMode.BEFORE, 'RETURN BEFORE'),
        (ReturnMode.AFTER, 'RETURN AFTER'),
        ('diff', 'RETURN DIFF'),
        ('NONE', 'RETURN NONE'),
    ])
    def test_modes(self, mode, expected):
        assert delete('person').return_(mode).compile() == f'DELETE person {expected}'

    def test_invalid_mode(self):
        with pytest.raises(WriterError, match="Invalid return mode"):
            delete('person').return_('everything')

    def test_fields(self):
        q = delete('person').return_fields('name', 'age').compile()
        assert q == 'DELETE person RETURN name, age'

    def test_fields_keep_order_and_duplicates(self):
        w = delete('person').return_fields('b', 'a', 'b')
        assert w.state.return_fields == ('b', 'a', 'b')
        assert w.compile().endswith('RETURN b, a, b')

    def test_mode_clears_fields(self):
        w = delete('person').return_fields('name').return_('after')
        assert w.state.return_fields == ()
        assert w.compile() == 'DELETE person RETURN AFTER'

    def test_no_return_mode(self):
        state = DeleteQueryState(schema=None, quantity=Quantity.MANY,
                                 targets='person', return_mode=None)
        assert DeleteQueryWriter(state).compile() == 'DELETE person'


class TestTimeoutAndParallel:
    def test_timeout(self):
        assert delete('person').timeout(30).compile() == 'DELETE person RETURN BEFORE TIMEOUT 30s'

    def test_integral_float_timeout(self):
        assert delete('person').timeout(5.0).compile().endswith('TIMEOUT 5s')

    def test_fractional_timeout(self):
        assert delete('person').timeout(1.5).compile().endswith('TIMEOUT 1.5s')

    def test_zero_timeout_is_omitted(self):
        assert delete('person').timeout(0).compile() == 'DELETE person RETURN BEFORE'

    def test_non_numeric_timeout(self):
        with pytest.raises(WriterError, match="must be a number"):
            delete('person').timeout('5')
        with pytest.raises(WriterError, match="must be a number"):
            delete('person').timeout(True)

    def test_parallel(self):
        assert delete('person').parallel().compile() == 'DELETE person RETURN BEFORE PARALLEL'


class TestWriterProperties:
    def test_clause_order(self):
        q = (delete('person')
             .parallel()
             .timeout(10)
             .return_fields('id')
             .where({'age': lt(18)})
             .compile())
        assert q == 'DELETE person WHERE age < 18 RETURN id TIMEOUT 10s PARALLEL'

    def test_immutability(self):
        base = delete('person')
        before = base.compile()
        base.where({'a': 1})
        base.return_('none')
        base.return_fields('x')
        base.timeout(3)
        base.parallel()
        base.with_any()
        assert base.compile() == before
        assert base.state == DeleteQueryState(
            schema=None, quantity=Quantity.MANY, targets='person',
        )

    def test_state_is_frozen(self):
        w = delete('person')
        with pytest.raises(dataclasses.FrozenInstanceError):
            w.state.targets = 'dog'

    def test_branching(self):
        base = delete('person').where({'age': lt(18)})
        a = base.return_('none')
        b = base.parallel()
        assert a.compile() == 'DELETE person WHERE age < 18 RETURN NONE'
        assert b.compile() == 'DELETE person WHERE age < 18 RETURN BEFORE PARALLEL'

    def test_orthogonal_calls_commute(self):
        steps = [
            lambda w: w.return_('diff'),
            lambda w: w.timeout(2),
            lambda w: w.parallel(),
        ]
        results = set()
        for order in itertools.permutations(steps):
            w = delete('person')
            for step in order:
                w = step(w)
            results.add(w.compile())
        assert results == {'DELETE person RETURN DIFF TIMEOUT 2s PARALLEL'}

    def test_deterministic(self):
        w = delete('person').where({'name': 'x'}).timeout(1)
        assert w.compile() == w.compile()
        same = delete('person').where({'name': 'x'}).timeout(1)
        assert same.state == w.state
        assert same.compile() == w.compile()

    def test_schema_does_not_affect_query(self):
        w = delete('person')
        assert w.with_schema({'name': str}).compile() == w.compile()

    def test_str_and_repr(self):
        w = delete('person')
        assert str(w) == 'DELETE person RETURN BEFORE'
        assert 'DeleteQueryWriter' in repr(w)

    def test_explain(self):
        text = delete_record('person:1').explain()
        assert text.startswith('-- DeleteQuery (maybe)')
        assert 'DELETE person:1 RETURN BEFORE' in text


class TestInjectionGuards:
    def test_record_id_cannot_inject_statement(self):
        q = delete_record('person', 'person:[1]; DELETE admin; [2]').compile()
        assert q == 'DELETE person:⟨person:[1]; DELETE admin; [2]⟩ RETURN BEFORE'

    def test_record_link_with_trailing_newline_rejected(self):
        with pytest.raises(WriterError, match="Invalid record link"):
            delete_record('person:1\n')

    def test_relation_endpoint_cannot_widen_filter(self):
        with pytest.raises(WriterError, match="Invalid record link"):
            delete_relation({
                'edge': 'knows',
                'from': 'person:[1] OR true OR x = [2]',
                'to': 'person:2',
            })

    def test_relation_with_array_id_endpoint(self):
        q = delete_relation({'edge': 'knows', 'from': 'person:[1, 2]', 'to': 'person:2'}).compile()
        assert q == 'DELETE knows WHERE in = person:[1, 2] AND out = person:2 RETURN BEFORE'


class TestNonFiniteTimeout:
    @pytest.mark.parametrize("value", [float('nan'), float('inf'), float('-inf')])
    def test_rejected(self, value):
        with pytest.raises(WriterError, match="must be finite"):
            delete('person').timeout(value)


class TestRepr:
    def test_repr_without_targets(self):
        w = DeleteQueryWriter(DeleteQueryState(
            schema=None, quantity=Quantity.MANY, targets='',
        ))
        text = repr(w)
        assert text.startswith('DeleteQueryWriter(DeleteQueryState(')
        assert "targets=''" in text
