## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Block, Value, Invocable, ListValue, VOID
from .errors import EfectaNameError, EfectaArityError, EfectaValueError
from .context import Context, ARGUMENTS
from .interpreter import run_named
from . import coercion


class Dispatch(Invocable):
    """Invocable face of a composite: `(receiver, method, *arguments)` routes to that method."""

    def __init__(self, instance: "Composite"):
        self.instance = instance
        self.name = instance.name

    def run(self, arguments: tuple, context: Context) -> Value:
        if len(arguments) < 2:
            raise EfectaArityError(f"`{self.name}` expects a receiver and a method name, got {len(arguments)} argument(s).",
                                   efecta_token=self.name)
        return self.instance.invoke(arguments[1].literal(), tuple(arguments[2:]))


class Composite(Value):
    """User-defined type instance: named methods with captured contexts, plus a self context holding
    the state that persists from one method call to the next.  Instances are shared, not copied.
    """

    def __init__(self, name: str, library):
        self.name = name
        self.methods: dict[str, tuple[Block, Context]] = {}
        self.state = Context(library)

    def define_method(self, block: Block, captured: Context) -> None:
        self.methods[block.head] = (block, captured.clone())

    def set_field(self, name: str, value: Value) -> None:
        self.state.variables[name] = value

    def has_method(self, name: str) -> bool:
        return name in self.methods

    def invoke(self, name: str, arguments: tuple = ()) -> Value:
        if (method := self.methods.get(name)) is None:
            raise EfectaNameError(f"Method `{name}` not found in type `{self.name}`.", efecta_token=name)
        block, captured = method

        work = captured.clone()
        work.variables.update(self.state.variables)
        work.variables[ARGUMENTS] = ListValue(tuple(arguments))
        work.retval, work.running = VOID, True

        # Only variables rebound by this call go back to the state.
        baseline = dict(work.variables)
        try:
            result = run_named(block, work)
        except RecursionError:
            raise EfectaValueError(f"Recursion too deep in method `{name}`.", efecta_token=name) from None
        self.state.pour(work, baseline)
        return work.retval if not work.running else result

    def _project(self, method: str, convert):
        if not self.has_method(method): return None
        return convert(self.invoke(method))

    # Capabilities backed by conventionally named methods.
    def literal(self) -> str:
        if self.has_method('LIT'): return self.invoke('LIT').literal()
        return f"<{self.name}>"

    def as_int(self): return self._project('INT', coercion.to_int)
    def as_float(self): return self._project('FLOAT', coercion.to_float)
    def as_string(self): return self._project('STR', coercion.to_text)
    def as_list(self): return self._project('LST', coercion.to_list)
    def as_map(self): return self._project('MAP', coercion.to_map)
    def as_block(self): return self._project('BLOCK', coercion.to_block)
    def as_composite(self): return self
    def as_invocable(self) -> Invocable: return Dispatch(self)

    def __repr__(self):
        return f"<Composite {self.name} methods=[{' '.join(self.methods)}]>"
