## efecta — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from .types import Block, Value, RawLiteral
from .parser import parse
from .linker import Program, link_program
from .library import Library
from .context import Context
from .builtins import load_builtins_library
from .interpreter import evaluate


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, library: Library | None = None):
        self.library = library or load_builtins_library()

    # Loading ─────────────────────────────────────────────────────────────────────────────────
    def parse(self, source: str, filename: str | None = None) -> list[Block]:
        return parse(source, filename=filename)

    def load(self, source: str, filename: str | None = None) -> Program:
        return link_program(self.parse(source, filename=filename))

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, source: str, arguments: tuple = (), filename: str | None = None,
            verbosity: int = 0, stats: dict | None = None) -> Value:
        return self.execute(self.load(source, filename=filename), arguments, verbosity=verbosity, stats=stats)

    def execute(self, program: Program, arguments: tuple = (), verbosity: int = 0, stats: dict | None = None) -> Value:
        """Run the entry procedure with the invocation arguments, also bound as `ARGS` in the seed context."""
        lib = self.library.with_procedures(program.procedures, verbosity=verbosity)
        values = tuple(a if isinstance(a, Value) else RawLiteral(str(a)) for a in arguments)
        entry = program.get_entry()
        try:
            return entry.run(values, Context(lib, values))
        finally:
            if stats is not None:
                stats['steps'] = stats.get('steps', 0) + lib.steps

    def context(self, arguments: tuple = (), procedures: list | None = None) -> Context:
        return Context(self.library.with_procedures(procedures or []), arguments)

    def evaluate(self, block: Block, context: Context, statement: bool = False) -> list[tuple]:
        return evaluate(block, context, statement=statement)

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable[..., Any]) -> None:
        self.library.add_function(name, func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def get_signature(self, name: str) -> dict:
        return self.library.get_procedure(name).meta

    def list_operations(self) -> dict[str, dict]:
        return {p.name: p.meta for p in self.library.procedures}
