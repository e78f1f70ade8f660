## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# efecta — Standard procedures that read or mutate the calling context.
#

from .types import Value, Block, Alias, VOID
from .errors import EfectaLookupError
from .context import Context
from .composite import Composite
from .interpreter import run_deferred
from .coercion import to_invocable


def comb_return(ctx: Context, value: Value) -> None:
    """Stores the value in the return register and stops the rest of the procedure body."""
    ctx.retval = value
    ctx.running = False

def comb_arg(ctx: Context, index: int) -> Value:
    arguments = ctx.arguments
    if not (0 <= index < len(arguments)):
        raise EfectaLookupError(f"Argument {index} out of range for {len(arguments)} argument(s).", efecta_token=str(index))
    return arguments[index]

def comb_set(ctx: Context, name: str, value: Value) -> None:
    ctx.assign(name, value)

def comb_if(ctx: Context, condition: bool, then: Block, otherwise: Block | None = None) -> Value:
    """Runs one of the deferred blocks in a child context, merging back only pre-existing variables.
    A false condition without alternative leaves the context untouched.
    """
    if condition:
        return run_deferred(then, ctx)
    if otherwise is not None:
        return run_deferred(otherwise, ctx)
    return VOID

def comb_run(ctx: Context, block: Block) -> Value:
    return run_deferred(block, ctx)

## EXPLICIT QUEUE
def comb_push(ctx: Context, *values: Value) -> None:
    ctx.push(*values)

def comb_receive(ctx: Context) -> Value:
    return ctx.receive()

def comb_queue_size(ctx: Context) -> int:
    return len(ctx.queue)

## FIRST-CLASS PROCEDURES
def comb_ref(ctx: Context, name: str) -> Value:
    return ctx.library.get_procedure(name)

def comb_bind(ctx: Context, datum: Value, name: str) -> Value:
    """Attaches a procedure to a value; `$ var ...` then calls it with the value as receiver."""
    return Alias(datum, ctx.library.get_procedure(name))

def comb_invoke(ctx: Context, target: Value, *arguments: Value) -> Value:
    """Calls the procedure behind a value with the value itself as receiver, like `$ var ...`."""
    return to_invocable(target).run((target.target(), *arguments), ctx)

## COMPOSITE TYPES
def comb_new(ctx: Context, name: str) -> Value:
    return Composite(name, ctx.library)

def comb_define(ctx: Context, instance: Composite, method: Block) -> None:
    instance.define_method(method, ctx)

def comb_field(ctx: Context, instance: Composite, name: str, value: Value) -> None:
    instance.set_field(name, value)
