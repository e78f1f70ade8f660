## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field, replace

from .types import Value, Invocable, to_value
from .errors import EfectaNameError, EfectaArityError
from .loader import get_signature


class Builtin(Invocable):
    """Standard procedure implemented in Python, with arguments checked and coerced by signature."""

    def __init__(self, name: str, fn: Callable[..., Any]):
        self.name = name
        self.fn = fn
        self.meta = get_signature(fn=fn, name=name)

    def _expected(self) -> str:
        lo, hi = self.meta['arity']
        if hi is None: return f"at least {lo}"
        return str(lo) if lo == hi else f"{lo} to {hi}"

    def run(self, arguments: tuple, context) -> Value:
        lo, hi = self.meta['arity']
        if len(arguments) < lo or (hi is not None and len(arguments) > hi):
            raise EfectaArityError(f"`{self.name}` expects {self._expected()} argument(s), got {len(arguments)}.",
                                   efecta_token=self.name)

        inputs, extra = self.meta['inputs'], self.meta['varargs']
        args = [convert(v) for convert, v in zip(inputs, arguments)]
        args += [extra(v) for v in arguments[len(inputs):]]
        if self.meta['context']:
            args.insert(0, context)
        return to_value(self.fn(*args))


@dataclass
class Library:
    procedures: list[Invocable]
    aliases: dict[str, str] = field(default_factory=dict)
    verbosity: int = 0
    steps: int = 0

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        self.procedures.append(Builtin(name, fn))

    def ensure_consistent(self) -> None:
        for proc in self.procedures:
            assert proc.as_invocable() is proc and proc.name

    def get_procedure(self, name: str) -> Invocable:
        """Static lookup; the most recent registration of a name shadows earlier ones."""
        resolved_name = self.aliases.get(name, name)
        for proc in reversed(self.procedures):
            if proc.name == resolved_name:
                return proc
        raise EfectaNameError(f"Procedure `{name}` not found.", efecta_token=name)

    def resolve(self, is_dynamic: bool, name: str, context) -> Invocable:
        if not is_dynamic:
            return self.get_procedure(name)
        if (inv := context.lookup(name).as_invocable()) is None:
            raise EfectaNameError(f"Variable `{name}` is not bound to a procedure.", efecta_token=name)
        return inv

    def with_procedures(self, procedures: list[Invocable], verbosity: int = 0) -> "Library":
        """Create new view sharing the standard procedures, with user procedures registered after."""
        return replace(self, procedures=self.procedures + list(procedures), verbosity=verbosity, steps=0)
