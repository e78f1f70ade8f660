## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from efecta.runtime import Runtime
from efecta.types import Block, Value, String, RawLiteral, VOID
from efecta.errors import EfectaNameError, EfectaStructureError


HELLO = "PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tDISPLAY 5\n"


def test_run_program(capsys):
    assert Runtime().run(HELLO) is VOID
    assert capsys.readouterr().out == "5\n"


def test_run_returns_entry_value():
    source = "PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tRETURN\n\t\t* ARG 1\n"
    assert Runtime().run(source, arguments=('X', 'value')) == RawLiteral('value')


def test_entry_procedure_must_exist():
    with pytest.raises(EfectaNameError, match="Entry procedure `START`"):
        Runtime().run("PROGRAM-ID X\nENTER-IN START\nPROC MAIN\n")


def test_unknown_procedure_carries_location():
    with pytest.raises(EfectaNameError) as exc:
        Runtime().run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tNOPE\n", filename="x.esf")
    assert exc.value.efecta_meta == {'filename': "x.esf", 'line': 4}
    assert exc.value.efecta_token == 'NOPE'


def test_structure_errors_surface_before_execution(capsys):
    with pytest.raises(EfectaStructureError):
        Runtime().run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tDISPLAY 1\n\t\t\tDISPLAY 2\n")
    assert capsys.readouterr().out == ""


def test_stats_count_invocations():
    stats = {}
    Runtime().run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tID\n\t\t1\n\t\t2\n\tHELPER\nPROC HELPER\n", stats=stats)
    assert stats['steps'] == 3


def test_verbose_traces_user_procedures(capsys):
    Runtime().run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tHELPER a\nPROC HELPER\n\tID b\n", verbosity=1)
    out = capsys.readouterr().out
    assert "HELPER" in out
    assert "ID" not in out


def test_very_verbose_traces_everything(capsys):
    Runtime().run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tHELPER a\nPROC HELPER\n\tID b\n", verbosity=2)
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert "HELPER" in lines[0] and "a" in lines[0]
    assert "ID" in lines[1]


def test_register_operation_and_run(capsys):
    runtime = Runtime()
    def shout(text: str) -> str: return text.upper() + '!'
    runtime.register_operation('SHOUT', shout)
    runtime.run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\n\tDISPLAY\n\t\t* SHOUT hey\n")
    assert capsys.readouterr().out == "HEY!\n"


def test_evaluate_block_directly():
    runtime = Runtime()
    ctx = runtime.context()
    [(value,)] = runtime.evaluate(Block(('ADD', '1', '2')), ctx, statement=True)
    assert value.literal() == '3'


def test_introspection():
    runtime = Runtime()
    assert runtime.get_signature('ADD')['arity'] == (2, 2)
    assert 'QUEUE-SIZE' in runtime.list_operations()


def test_program_procedures_do_not_leak_between_runs():
    runtime = Runtime()
    runtime.run("PROGRAM-ID X\nENTER-IN MAIN\nPROC MAIN\nPROC HELPER\n")
    with pytest.raises(EfectaNameError):
        runtime.run("PROGRAM-ID Y\nENTER-IN MAIN\nPROC MAIN\n\tHELPER\n")
