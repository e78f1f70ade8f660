## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Block, Value, Invocable, RawLiteral, BlockValue, ListValue, VOID
from .errors import EfectaStructureError, EfectaNameError, EfectaValueError
from .context import Context
from .formatting import show_invocation


EXECUTE = '*'
DYNAMIC = '$'
DEFERRED = '&'
REFERENCE_MARKERS = (DYNAMIC, EXECUTE)


def _tag_error(exc: Exception, block: Block, token: str) -> None:
    if getattr(exc, 'efecta_meta', None) is None:
        exc.efecta_meta = block.meta
    if getattr(exc, 'efecta_token', None) is None:
        exc.efecta_token = token


def resolve_parameters(values: tuple, ctx: Context) -> tuple:
    """Substitute each element that follows a raw `$` or `*` marker by the variable of that name,
    or failing that by the result of invoking the procedure of that name without arguments.
    """
    result, items = [], iter(values)
    for value in items:
        if not (value.is_raw_literal() and value.literal() in REFERENCE_MARKERS):
            result.append(value)
            continue
        if (ref := next(items, None)) is None:
            raise EfectaStructureError(f"Reference marker `{value.literal()}` must be followed by a name.", token=value.literal())
        name = ref.literal()
        if (found := ctx.variables.get(name)) is not None:
            result.append(found)
            continue
        try:
            proc = ctx.library.resolve(False, name, ctx)
        except EfectaNameError:
            raise EfectaNameError(f"Variable or procedure `{name}` not found.", efecta_token=name) from None
        result.append(_invoke(proc, (), ctx))
    return tuple(result)


def _invoke(proc: Invocable, values: tuple, ctx: Context) -> Value:
    lib = ctx.library
    arguments = resolve_parameters(values, ctx)
    lib.steps += 1
    if lib.verbosity >= 2 or (lib.verbosity == 1 and isinstance(proc, Procedure)):
        show_invocation(lib.steps, proc.name, arguments)
    return proc.run(arguments, ctx)


def evaluate(block: Block, ctx: Context, statement: bool = False) -> list[tuple]:
    """Turn a block into zero-or-more argument tuples, invoking procedures in call position.

    Every tuple produced by a child is joined to the block's own prefix, children from left to right,
    so nesting a block under a call runs that call once per tuple the nested block emits.
    """
    head = block.head
    if head == DEFERRED:
        if len(block.data) != 2:
            raise EfectaStructureError(f"`{DEFERRED}` must be followed just by one name.", token=head, efecta_meta=block.meta)
        return [(BlockValue(Block(block.data[1:], block.subs, block.meta)),)]

    x = 1 if head in (EXECUTE, DYNAMIC) else 0
    if head == EXECUTE and statement:
        raise EfectaStructureError(f"Not necessary execution specifier `{EXECUTE}` in statement.", token=head, efecta_meta=block.meta)
    if len(block.data) <= x:
        raise EfectaStructureError(f"`{head}` must be followed by a procedure name.", token=head, efecta_meta=block.meta)

    if not statement and x == 0:
        local = tuple(RawLiteral(t) for t in block.data)
        if not block.subs:
            return [local]
        return [local + values for sub in block.subs for values in evaluate(sub, ctx)]

    name = block.data[x]
    try:
        proc = ctx.library.resolve(head == DYNAMIC, name, ctx)
        prefix = tuple(RawLiteral(t) for t in block.data[x+1:])
        if head == DYNAMIC:
            prefix = (ctx.lookup(name).target(),) + prefix

        if not block.subs:
            return [(_invoke(proc, prefix, ctx),)]
        result = []
        for sub in block.subs:
            for values in evaluate(sub, ctx):
                result.append((_invoke(proc, prefix + values, ctx),))
        return result
    except Exception as exc:
        _tag_error(exc, block, name)
        raise


def run_named(block: Block, ctx: Context) -> Value:
    """Run the children of a block for effect; the value is the last tuple of the last statement."""
    last = ()
    for sub in block.subs:
        if (tuples := evaluate(sub, ctx, statement=True)):
            last = tuples[-1]
        if not ctx.running: break
    if not last:
        return VOID
    return last[0] if len(last) == 1 else ListValue(last)


def run_deferred(block: Block, ctx: Context) -> Value:
    child = ctx.clone()
    result = run_named(block, child)
    ctx.pour(child)
    return result


class Procedure(Invocable):
    """User-defined procedure, running its body statements against a fresh context."""

    def __init__(self, name: str, body: tuple, meta: dict | None = None):
        self.name = name
        self.body = tuple(body)
        self.meta = meta

    def run(self, arguments: tuple, context: Context) -> Value:
        ctx = Context(context.library, arguments)
        try:
            for statement in self.body:
                evaluate(statement, ctx, statement=True)
                if not ctx.running: break
        except RecursionError:
            raise EfectaValueError(f"Recursion too deep in `{self.name}`.", efecta_token=self.name) from None
        return ctx.retval
