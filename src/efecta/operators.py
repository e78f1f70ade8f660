## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import operator

from .types import Value, String, ListValue, MapValue
from .errors import EfectaValueError, EfectaLookupError, EfectaTypeError
from .coercion import parse_int, parse_float
from . import coercion


num = int | float

## ARITHMETIC
def op_add(b: num, a: num) -> num: return b + a
def op_sub(b: num, a: num) -> num: return b - a
def op_mul(b: num, a: num) -> num: return b * a
def op_neg(x: num) -> num: return -x
def op_abs(x: num) -> num: return abs(x)
def op_min(b: num, a: num) -> num: return min(b, a)
def op_max(b: num, a: num) -> num: return max(b, a)
def op_div(b: num, a: num) -> num:
    if a == 0: raise EfectaValueError("Division by zero.", efecta_token='DIV')
    return b // a if isinstance(b, int) and isinstance(a, int) else b / a
def op_mod(b: num, a: num) -> num:
    if a == 0: raise EfectaValueError("Division by zero.", efecta_token='MOD')
    return b % a
## COMPARISON
def _comparable(b: Value, a: Value) -> tuple:
    """Numbers compare numerically when both sides parse, anything else compares by literal."""
    def number(v):
        if (n := v.as_int()) is not None or (n := v.as_float()) is not None: return n
        text = v.literal()
        return n if (n := parse_int(text)) is not None else parse_float(text)
    if (x := number(b)) is not None and (y := number(a)) is not None:
        return x, y
    return b.literal(), a.literal()
def op_eq(b: Value, a: Value) -> bool: return operator.eq(*_comparable(b, a))
def op_ne(b: Value, a: Value) -> bool: return operator.ne(*_comparable(b, a))
def op_lt(b: Value, a: Value) -> bool: return operator.lt(*_comparable(b, a))
def op_gt(b: Value, a: Value) -> bool: return operator.gt(*_comparable(b, a))
def op_lte(b: Value, a: Value) -> bool: return operator.le(*_comparable(b, a))
def op_gte(b: Value, a: Value) -> bool: return operator.ge(*_comparable(b, a))
## BOOLEAN LOGIC
def op_not(x: bool) -> bool: return not x
def op_and(b: bool, a: bool) -> bool: return b and a
def op_or(b: bool, a: bool) -> bool: return b or a
## TYPE COERCION
def op_int(x: int) -> int: return x
def op_float(x: float) -> float: return x
def op_lit(x: Value) -> str: return x.literal()
def op_char(x: Value) -> str: return coercion.to_char(x)
def op_bool(x: bool) -> bool: return x
def op_lst(x: Value) -> Value:
    return ListValue(tuple(items)) if (items := x.as_list()) is not None else ListValue((x,))
## LISTS & MAPS
def op_list(*items: Value) -> Value: return ListValue(items)
def op_map(*pairs: Value) -> Value:
    if len(pairs) % 2:
        raise EfectaTypeError("`MAP` expects key and value pairs.", efecta_token='MAP')
    return MapValue(tuple((k.literal(), v) for k, v in zip(pairs[::2], pairs[1::2])))
def op_append(b: list, *a: Value) -> Value: return ListValue((*b, *a))
def op_prepend(b: list, *a: Value) -> Value: return ListValue((*a, *b))
def op_keys(x: dict) -> list: return list(x.keys())
def op_has(b: Value, a: Value) -> bool:
    if (entries := b.as_map()) is not None: return a.literal() in entries
    return any(v.literal() == a.literal() for v in coercion.to_list(b))
def op_get(b: Value, a: Value) -> Value:
    if (entries := b.as_map()) is not None:
        if (key := a.literal()) not in entries:
            raise EfectaLookupError(f"Key `{key}` not found in map.", efecta_token=key)
        return entries[key]
    items = b.as_list()
    if items is None: items = [String(ch) for ch in b.literal()]
    if not (0 <= (index := coercion.to_int(a)) < len(items)):
        raise EfectaLookupError(f"Index {index} out of range for {len(items)} item(s).", efecta_token=a.literal())
    return items[index]
def op_put(c: Value, b: Value, a: Value) -> Value:
    if (entries := c.as_map()) is not None:
        return MapValue({**entries, b.literal(): a})
    items = coercion.to_list(c)
    if not (0 <= (index := coercion.to_int(b)) < len(items)):
        raise EfectaLookupError(f"Index {index} out of range for {len(items)} item(s).", efecta_token=b.literal())
    items[index] = a
    return ListValue(tuple(items))
def op_len(x: Value) -> int:
    if (entries := x.as_map()) is not None: return len(entries)
    if (items := x.as_list()) is not None: return len(items)
    return len(x.literal())
## STRINGS
def op_concat(*items: str) -> str: return ''.join(items)
## INPUT/OUTPUT
def op_id(x: Value) -> Value: return x
def op_display(x: Value) -> None: print(x.literal())
