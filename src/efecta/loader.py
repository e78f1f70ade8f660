## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from types import UnionType
from typing import Any, Callable

from .types import Value, Block, Invocable
from .context import Context
from .composite import Composite
from .errors import EfectaTypeMissing, EfectaTypeError
from . import coercion


def get_python_name(efecta_name: str) -> str:
    """Map an Efecta procedure name to its Python function name."""
    return 'op_' + efecta_name.lower().replace('-', '_')


def get_efecta_name(py_name: str) -> str:
    """Inverse of `get_python_name` for well-formed operator names."""
    if not py_name.startswith("op_"):
        raise EfectaTypeMissing(f"Operator function `{py_name}` requires prefix `op_` by convention.", efecta_token=py_name)
    return py_name[3:].upper().replace('_', '-')


def _identity(value: Value) -> Value:
    return value

_COERCIONS: dict[Any, Callable[[Value], Any]] = {
    Any: _identity,
    Value: _identity,
    int: coercion.to_int,
    float: coercion.to_float,
    int | float: coercion.to_number,
    bool: coercion.to_bool,
    str: coercion.to_text,
    list: coercion.to_list,
    dict: coercion.to_map,
    Block: coercion.to_block,
    Invocable: coercion.to_invocable,
    Composite: coercion.to_composite,
}


def _get_coercion(annotation, op_name: str) -> Callable[[Value], Any]:
    if isinstance(annotation, UnionType):
        members = set(annotation.__args__) - {type(None)}
        if members == {int, float}: return coercion.to_number
        # Optional parameters, `None` only comes from the default.
        if len(members) == 1: annotation = members.pop()
    if (convert := _COERCIONS.get(annotation)) is None:
        raise EfectaTypeError(f"Operation `{op_name}` uses unsupported parameter type {annotation}.", efecta_token=op_name)
    return convert


def _is_context_annotation(annotation: Any) -> bool:
    return annotation is Context or annotation == 'Context'


def get_signature(*, fn: Callable, name: str = None) -> dict:
    """Parse the type annotations from Python to determine the calling convention in Efecta.

    A leading parameter annotated `Context` receives the caller's context.  The remaining
    positional parameters are the arguments, coerced according to their annotation; parameters
    with defaults are optional, and `*args` accepts any number of trailing arguments.
    """
    assert fn is not None, "Must specify the function to inspect."

    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    op_name = name or getattr(fn, '__name__', '<unnamed>')

    if sig.return_annotation is inspect.Signature.empty:
        raise EfectaTypeMissing(f"Operation `{op_name}` must declare a return annotation.", efecta_token=op_name)

    missing = [p.name for p in params if p.annotation is inspect.Parameter.empty]
    if missing:
        raise EfectaTypeMissing(f"Operation `{op_name}` must annotate parameters: {', '.join(missing)}.", efecta_token=op_name)

    pass_context = len(params) > 0 and _is_context_annotation(params[0].annotation)
    if pass_context: params = params[1:]

    positional = [p for p in params if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)]
    vararg = next((p for p in params if p.kind == inspect.Parameter.VAR_POSITIONAL), None)
    required = [p for p in positional if p.default is inspect.Parameter.empty]

    return {
        'context': pass_context,
        'arity': (len(required), None if vararg is not None else len(positional)),
        'inputs': [_get_coercion(p.annotation, op_name) for p in positional],
        'varargs': _get_coercion(vararg.annotation, op_name) if vararg is not None else None,
    }
