## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field

from .types import Block
from .errors import EfectaStructureError, EfectaNameError
from .interpreter import Procedure


PROGRAM_ID = 'PROGRAM-ID'
ENTER_IN = 'ENTER-IN'
PROC = 'PROC'


@dataclass
class Program:
    name: str
    entry_point: str
    procedures: list[Procedure] = field(default_factory=list)

    def get_entry(self) -> Procedure:
        """The last declaration of the entry name wins, like static procedure lookup."""
        for proc in reversed(self.procedures):
            if proc.name == self.entry_point:
                return proc
        raise EfectaNameError(f"Entry procedure `{self.entry_point}` not found.", efecta_token=self.entry_point)


def _directive_argument(block: Block, directive: str) -> str:
    if block.head != directive:
        raise EfectaStructureError(f"`{directive}` expected.", token=block.head, efecta_meta=block.meta,
                                   **_position(block))
    if len(block.data) != 2:
        raise EfectaStructureError(f"`{directive}` must be followed just by one argument.", token=directive,
                                   efecta_meta=block.meta, **_position(block))
    return block.data[1]

def _position(block: Block) -> dict:
    meta = block.meta or {}
    return {'filename': meta.get('filename'), 'line': meta.get('line'), 'column': 1}


def link_program(blocks: list[Block]) -> Program:
    """Assemble the top-level declarations: program name, entry point, then procedure definitions."""
    blocks = list(blocks)
    if not blocks:
        raise EfectaStructureError(f"`{PROGRAM_ID}` expected.", token=PROGRAM_ID)
    name = _directive_argument(blocks[0], PROGRAM_ID)
    if len(blocks) < 2:
        raise EfectaStructureError(f"`{ENTER_IN}` expected.", token=ENTER_IN)
    entry = _directive_argument(blocks[1], ENTER_IN)
    procedures = []
    for block in blocks[2:]:
        proc_name = _directive_argument(block, PROC)
        procedures.append(Procedure(proc_name, block.subs, meta=block.meta))
    return Program(name=name, entry_point=entry, procedures=procedures)
