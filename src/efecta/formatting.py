## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import Value, String, Void, Invocable


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def _format_value(it: Value, abbreviate: bool = False) -> str:
    if isinstance(it, Void): return '∅'
    if isinstance(it, Invocable): return f'@{it.name}'
    if isinstance(it, String) and not it.is_raw_literal():
        return f'≪string:{len(it.value)}≫' if abbreviate else '"' + it.value.replace('"', '\\"') + '"'
    if abbreviate and (items := it.as_list()) is not None:
        return f'≪list:{len(items)}≫'
    return it.literal()

def format_value(it: Value) -> str:
    return _format_value(it, abbreviate=False)

def format_arguments(values, width=72, abbreviate: bool = False) -> str:
    text = ' '.join(_format_value(v, abbreviate=abbreviate) for v in values) if values else '∅'
    if width is not None and len(text) > width:
        text = text[:width-2] + ' …'
    return text

def show_invocation(step: int, name: str, values, file=None):
    print(f"\033[90m{step:>3} :\033[0m  \033[97m{name}\033[0m \033[36m <=> \033[0m {format_arguments(values)}", file=file)

def format_block_tree(blocks, indent: int = 0) -> str:
    lines = []
    for block in blocks:
        lines.append('    ' * indent + ' '.join(block.data))
        if block.subs:
            lines.append(format_block_tree(block.subs, indent + 1))
    return '\n'.join(lines)
