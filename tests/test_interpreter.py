## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from efecta.types import Block, Value, Int, String, RawLiteral, BlockValue, ListValue, Alias, VOID
from efecta.interpreter import evaluate, resolve_parameters, run_named, run_deferred, Procedure
from efecta.errors import EfectaStructureError, EfectaNameError, EfectaArityError
from efecta.runtime import Runtime


def B(*data, subs=(), meta=None):
    return Block(data, tuple(subs), meta)


@pytest.fixture
def recorder():
    """Runtime with a `REC` procedure that logs the literals of every invocation."""
    runtime, calls = Runtime(), []
    def rec(*args: Value) -> Value:
        calls.append(tuple(v.literal() for v in args))
        return String('r')
    runtime.register_operation('REC', rec)
    return runtime.context(), calls


def literals(tuples):
    return [tuple(v.literal() for v in t) for t in tuples]


def test_leaf_expression_is_raw_tuple(recorder):
    ctx, calls = recorder
    assert evaluate(B('x', 'y'), ctx) == [(RawLiteral('x'), RawLiteral('y'))]
    assert calls == []


def test_leaf_statement_invokes_once(recorder):
    ctx, calls = recorder
    assert evaluate(B('REC', 'a'), ctx, statement=True) == [(String('r'),)]
    assert calls == [('a',)]


def test_children_fan_out_left_to_right(recorder):
    ctx, calls = recorder
    result = evaluate(B('REC', subs=[B('1'), B('2'), B('3')]), ctx, statement=True)
    assert calls == [('1',), ('2',), ('3',)]
    assert len(result) == 3


def test_nested_children_multiply(recorder):
    ctx, calls = recorder
    tree = B('REC', 'p', subs=[B('a', subs=[B('1'), B('2')]), B('b', subs=[B('3')])])
    evaluate(tree, ctx, statement=True)
    assert calls == [('p', 'a', '1'), ('p', 'a', '2'), ('p', 'b', '3')]


def test_expression_concatenates_child_tuples(recorder):
    ctx, _ = recorder
    tree = B('x', subs=[B('1'), B('2', subs=[B('3'), B('4')])])
    assert literals(evaluate(tree, ctx)) == [('x', '1'), ('x', '2', '3'), ('x', '2', '4')]


def test_forced_execution_in_expression(recorder):
    ctx, calls = recorder
    evaluate(B('REC', subs=[B('*', 'ADD', '1', '2')]), ctx, statement=True)
    assert calls == [('3',)]


def test_forced_execution_each_child_tuple(recorder):
    ctx, calls = recorder
    evaluate(B('REC', subs=[B('*', 'ADD', '10', subs=[B('1'), B('2')])]), ctx, statement=True)
    assert calls == [('11',), ('12',)]


def test_forced_execution_in_statement_is_rejected(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaStructureError, match="Not necessary"):
        evaluate(B('*', 'REC'), ctx, statement=True)


def test_marker_without_name_is_rejected(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaStructureError):
        evaluate(B('*'), ctx)
    with pytest.raises(EfectaStructureError):
        evaluate(B('$'), ctx, statement=True)


def test_deferred_block_is_not_run(recorder):
    ctx, calls = recorder
    body = B('REC', 'inside')
    [(value,)] = evaluate(B('&', 'then', subs=[body]), ctx, statement=True)
    assert isinstance(value, BlockValue)
    assert value.as_block().data == ('then',)
    assert value.as_block().subs == (body,)
    assert calls == []


def test_deferred_block_takes_exactly_one_name(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaStructureError):
        evaluate(B('&'), ctx)
    with pytest.raises(EfectaStructureError):
        evaluate(B('&', 'a', 'b'), ctx)


def test_dynamic_dispatch_passes_receiver(recorder):
    ctx, calls = recorder
    ctx.assign('obj', Alias(String('datum'), ctx.library.get_procedure('REC')))
    evaluate(B('$', 'obj', 'x'), ctx, statement=True)
    assert calls == [('datum', 'x')]


def test_dynamic_dispatch_requires_invocable(recorder):
    ctx, _ = recorder
    ctx.assign('n', Int(3))
    with pytest.raises(EfectaNameError, match="not bound to a procedure"):
        evaluate(B('$', 'n'), ctx, statement=True)
    with pytest.raises(EfectaNameError):
        evaluate(B('$', 'missing'), ctx, statement=True)


def test_unknown_procedure(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaNameError, match="NOPE"):
        evaluate(B('NOPE', '1'), ctx, statement=True)


def test_parameter_references(recorder):
    ctx, calls = recorder
    ctx.assign('x', Int(5))
    ctx.push(String('q'))
    evaluate(B('REC', '$', 'x', '*', 'x', '*', 'RECEIVE', 'plain'), ctx, statement=True)
    assert calls == [('5', '5', 'q', 'plain')]


def test_parameter_reference_unknown(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaNameError, match="Variable or procedure `ghost`"):
        evaluate(B('REC', '$', 'ghost'), ctx, statement=True)


def test_parameter_reference_needs_name(recorder):
    ctx, _ = recorder
    with pytest.raises(EfectaStructureError):
        evaluate(B('REC', 'a', '$'), ctx, statement=True)


def test_only_raw_markers_are_references(recorder):
    ctx, _ = recorder
    values = (String('$'), RawLiteral('y'))
    assert resolve_parameters(values, ctx) == values


def test_errors_are_tagged_with_block_meta(recorder):
    ctx, _ = recorder
    meta = {'filename': 'demo.esf', 'line': 4}
    with pytest.raises(EfectaArityError) as exc:
        evaluate(B('DISPLAY', 'a', 'b', meta=meta), ctx, statement=True)
    assert exc.value.efecta_meta == meta
    assert exc.value.efecta_token == 'DISPLAY'


def test_run_named_returns_last_value(recorder):
    ctx, _ = recorder
    block = B('body', subs=[B('ID', '1'), B('LIST', 'a', 'b')])
    assert run_named(block, ctx) == ListValue((RawLiteral('a'), RawLiteral('b')))
    assert run_named(B('empty'), ctx) is VOID


def test_run_deferred_keeps_new_variables_local(recorder):
    ctx, _ = recorder
    ctx.assign('x', Int(1))
    run_deferred(B('then', subs=[B('SET', 'x', '2'), B('SET', 'y', '3')]), ctx)
    assert ctx.lookup('x').literal() == '2'
    assert 'y' not in ctx.variables


def test_procedure_runs_in_fresh_context(recorder):
    ctx, calls = recorder
    ctx.assign('x', Int(1))
    proc = Procedure('P', [B('REC', subs=[B('*', 'ARG', '0')]), B('RETURN', 'done'), B('REC', 'never')])
    assert proc.run((RawLiteral('arg'),), ctx).literal() == 'done'
    assert calls == [('arg',)]
    assert ctx.running


def test_procedure_cannot_see_caller_variables(recorder):
    ctx, _ = recorder
    ctx.assign('x', Int(1))
    with pytest.raises(EfectaNameError):
        Procedure('P', [B('REC', '$', 'x')]).run((), ctx)


def test_procedure_without_return_gives_void(recorder):
    ctx, _ = recorder
    assert Procedure('P', [B('REC')]).run((), ctx) is VOID
