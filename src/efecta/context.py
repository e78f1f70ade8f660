## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from collections import deque

from .types import Value, ListValue, VOID
from .errors import EfectaNameError, EfectaLookupError


ARGUMENTS = 'ARGS'


class Context:
    """Mutable state of one procedure invocation: variables, explicit queue, return register and
    continuation flag.  Nested constructs run on a `clone()` that is merged back with `pour()`.
    """

    def __init__(self, library, arguments: tuple = ()):
        self.library = library
        self.variables: dict[str, Value] = {ARGUMENTS: ListValue(tuple(arguments))}
        self.queue: deque[Value] = deque()
        self.retval: Value = VOID
        self.running: bool = True

    def clone(self) -> "Context":
        child = Context.__new__(Context)
        child.library = self.library
        child.variables = dict(self.variables)
        child.queue = deque(self.queue)
        child.retval = self.retval
        child.running = self.running
        return child

    def pour(self, child: "Context", baseline: dict | None = None) -> None:
        """Merge a child back: registers and queue unconditionally, variables only if pre-existing.
        With a `baseline` snapshot of the child, only variables the child rebound are written.
        """
        self.retval = child.retval
        self.running = child.running
        self.queue = deque(child.queue)
        for name in self.variables:
            if name not in child.variables: continue
            if baseline is None or child.variables[name] is not baseline.get(name):
                self.variables[name] = child.variables[name]

    # Variables ───────────────────────────────────────────────────────────────────────────────
    def lookup(self, name: str) -> Value:
        if (value := self.variables.get(name)) is None:
            raise EfectaNameError(f"Variable `{name}` not found.", efecta_token=name)
        return value

    def assign(self, name: str, value: Value) -> None:
        self.variables[name] = value

    @property
    def arguments(self) -> list[Value]:
        return self.variables[ARGUMENTS].as_list() or []

    # Queue ───────────────────────────────────────────────────────────────────────────────────
    def push(self, *values: Value) -> None:
        self.queue.extend(values)

    def receive(self) -> Value:
        if not self.queue:
            raise EfectaLookupError("Cannot receive from an empty queue.", efecta_token='RECEIVE')
        return self.queue.popleft()

    def __repr__(self):
        names = ' '.join(sorted(self.variables))
        return f"<Context vars=[{names}] queue={len(self.queue)} running={self.running}>"
