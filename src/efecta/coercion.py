## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# efecta — Implicit coercion of values: native capability first, then parse the literal text.
#

import re

from .types import Value, Block, Invocable
from .errors import EfectaTypeError


TRUE_TOKENS = frozenset(('T', 'TRUE', 't', 'true', 'True'))
FALSE_TOKENS = frozenset(('F', 'FALSE', 'f', 'false', 'False'))

_INTEGER_RE = re.compile(r'[+-]?[0-9]+')
_DECIMAL_RE = re.compile(r'[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?')


def _mismatch(expected: str, value: Value) -> EfectaTypeError:
    return EfectaTypeError(f"{expected} type expected, got `{value.literal()}`.", efecta_token=value.literal())


def parse_int(text: str) -> int | None:
    return int(text) if _INTEGER_RE.fullmatch(text) else None

def parse_float(text: str) -> float | None:
    return float(text) if _DECIMAL_RE.fullmatch(text) else None


def to_int(value: Value) -> int:
    if (n := value.as_int()) is not None: return n
    if (n := parse_int(value.literal())) is None: raise _mismatch("Integer", value)
    return n

def to_float(value: Value) -> float:
    if (x := value.as_float()) is not None: return x
    if (x := parse_float(value.literal())) is None: raise _mismatch("Float", value)
    return x

def to_number(value: Value) -> int | float:
    """Integers stay integers; anything else must at least parse as a float."""
    if (n := value.as_int()) is not None: return n
    if (x := value.as_float()) is not None: return x
    text = value.literal()
    if (n := parse_int(text)) is not None: return n
    if (x := parse_float(text)) is None: raise _mismatch("Number", value)
    return x

def to_char(value: Value) -> str:
    if len(text := value.literal()) != 1: raise _mismatch("Char", value)
    return text

def to_bool(value: Value) -> bool:
    text = value.literal()
    if text in TRUE_TOKENS: return True
    if text in FALSE_TOKENS: return False
    raise _mismatch("Boolean", value)

def to_text(value: Value) -> str:
    if (s := value.as_string()) is not None: return s
    return value.literal()

def to_list(value: Value) -> list:
    if (items := value.as_list()) is None: raise _mismatch("List", value)
    return items

def to_map(value: Value) -> dict:
    if (entries := value.as_map()) is None: raise _mismatch("Map", value)
    return entries

def to_block(value: Value) -> Block:
    if (block := value.as_block()) is None: raise _mismatch("Block", value)
    return block

def to_invocable(value: Value) -> Invocable:
    if (inv := value.as_invocable()) is None: raise _mismatch("Procedure", value)
    return inv

def to_composite(value: Value):
    if (obj := value.as_composite()) is None: raise _mismatch("Composite", value)
    return obj
