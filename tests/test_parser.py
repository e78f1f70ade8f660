## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from efecta.parser import tokenize_line, tokenize, parse
from efecta.errors import EfectaParseError, EfectaStructureError


def test_tokenize_words_and_markers():
    assert tokenize_line("SET x $y*z") == (0, ['SET', 'x', '$', 'y', '*', 'z'])


def test_leading_tabs_give_depth():
    assert tokenize_line("\t\tDISPLAY 5") == (2, ['DISPLAY', '5'])


def test_literal_runs_to_end_of_line():
    depth, tokens = tokenize_line("DISPLAY #Hello, world ; not a comment")
    assert tokens == ['DISPLAY', 'Hello, world ; not a comment']


def test_empty_literal_is_dropped():
    assert tokenize_line("DISPLAY #") == (0, ['DISPLAY'])


def test_comment_is_ignored():
    assert tokenize_line("ADD 1 2 ; sum of both") == (0, ['ADD', '1', '2'])


def test_tab_inside_line_is_rejected():
    with pytest.raises(EfectaParseError):
        tokenize_line("DISPLAY\t5", filename="x.esf", line=3)


def test_tab_after_spaces_is_rejected():
    with pytest.raises(EfectaParseError) as exc:
        tokenize_line("  \tDISPLAY", line=1)
    assert exc.value.column == 3


def test_blank_and_comment_lines_are_skipped():
    lines = list(tokenize("A\n\n   \n; only a comment\n\tB", filename="f.esf"))
    assert [(d, t) for d, t, _ in lines] == [(0, ['A']), (1, ['B'])]
    assert lines[1][2] == {'filename': "f.esf", 'line': 5}


def test_parse_builds_nested_blocks():
    blocks = parse("A 1\n\tB 2\n\t\tC\n\tD\nE")
    assert [b.data for b in blocks] == [('A', '1'), ('E',)]
    assert [s.data for s in blocks[0].subs] == [('B', '2'), ('D',)]
    assert blocks[0].subs[0].subs[0].data == ('C',)
    assert blocks[1].subs == ()


def test_parse_keeps_line_metadata():
    blocks = parse("A\n\n\tB", filename="prog.esf")
    assert blocks[0].subs[0].meta == {'filename': "prog.esf", 'line': 3}


def test_skipping_a_level_is_structure_error():
    with pytest.raises(EfectaStructureError, match="Too deep"):
        parse("A\n\t\tB")


def test_indented_first_line_is_structure_error():
    with pytest.raises(EfectaStructureError):
        parse("\tA")


def test_other_whitespace_stays_inside_words():
    assert tokenize_line("DISPLAY a\u00a0b") == (0, ['DISPLAY', 'a\u00a0b'])
    assert tokenize_line("X\x0c1 2") == (0, ['X\x0c1', '2'])
