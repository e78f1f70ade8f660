## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import textwrap

import lark
from .types import Block
from .errors import EfectaParseError, EfectaStructureError


GRAMMAR = r"""start: TABS? (MARKER | WORD)* LITERAL?

// COMMENTS
COMMENT: /;[^\r\n]*/

// TOKENS
TABS: /\t+/
MARKER: /[*$&]/
LITERAL: /#[^\r\n]*/
WORD: /[^ \t\r\n#;*$&]+/

// WHITESPACE
SPACES: / +/
%ignore SPACES
%ignore COMMENT
"""

_LINE_PARSER = lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="contextual")


def tokenize_line(text: str, filename=None, line=None) -> tuple[int, list[str]]:
    """Split one source line into its nesting depth and tokens; `#` turns the rest into one token."""
    try:
        tree = _LINE_PARSER.parse(text)
    except lark.exceptions.UnexpectedInput as exc:
        column = getattr(exc, 'column', 0) or 0
        if (token_val := getattr(getattr(exc, 'token', None), 'value', None)) is None:
            token_val = text[column-1:column] if column > 0 else ''
        raise EfectaParseError(f"Unexpected {token_val!r} in line.", filename=filename, line=line,
                               column=column, token=token_val) from None

    depth, tokens = 0, []
    for tok in tree.children:
        match tok.type:
            case 'TABS':
                if tok.column != 1:
                    raise EfectaParseError("The tabs must be at the beginning of the line.", filename=filename,
                                           line=line, column=tok.column, token=tok.value)
                depth = len(tok.value)
            case 'LITERAL':
                if len(tok.value) > 1: tokens.append(tok.value[1:])
            case _:
                tokens.append(tok.value)
    return depth, tokens


def tokenize(source: str, filename=None):
    for number, text in enumerate(source.splitlines(), start=1):
        depth, tokens = tokenize_line(text, filename=filename, line=number)
        if tokens:
            yield depth, tokens, {'filename': filename, 'line': number}


def generate_blocks(lines) -> list[Block]:
    """Nest each line under the last block one level above it, then freeze the tree."""
    root = ([], [], None)
    for depth, tokens, meta in lines:
        node = root
        for _ in range(depth):
            if not node[1]:
                raise EfectaStructureError("Too deep level of indentation.", filename=meta['filename'],
                                           line=meta['line'], column=1, token=tokens[0], efecta_meta=meta)
            node = node[1][-1]
        node[1].append((tokens, [], meta))

    def _freeze(node):
        tokens, subs, meta = node
        return Block(tuple(tokens), tuple(_freeze(s) for s in subs), meta)
    return [_freeze(n) for n in root[1]]


def parse(source: str, filename=None) -> list[Block]:
    return generate_blocks(tokenize(source, filename=filename))


def load_source_line(meta: dict, keyword: str | None) -> str:
    if not meta or meta.get('filename') is None or not os.path.isfile(meta['filename']): return ""
    lines = open(meta['filename'], 'r', encoding='utf-8').read().splitlines()
    if not (0 < meta['line'] <= len(lines)): return ""
    text = lines[meta['line']-1].expandtabs(4)
    if keyword:
        text = text.replace(keyword, f"\033[48;5;30m\033[1;97m{keyword}\033[0m", 1)
    return text

def format_source_lines(meta: dict | None, identifier: str | None) -> str:
    if not meta: return ""
    header = f"\033[97m  File \"{meta['filename']}\", line {meta['line']}, in {identifier}\033[0m\n"
    line = load_source_line(meta, keyword=identifier)
    return header + (textwrap.indent(textwrap.dedent(line), prefix='    ') + "\n" if line else "")


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source else open(filename, 'r', encoding='utf-8').readlines()
    line = line or 1
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column and 0 < column <= len(line_content) and token_value:
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token_value)-1]}\033[0m" +
                    line_content[column+len(token_value)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content.expandtabs(4)}")
    return '\n' + '\n'.join(result) + '\n'
