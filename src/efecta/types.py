## efecta — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Block:
    data: tuple                   # tuple[str], head token first
    subs: tuple = ()              # tuple[Block]
    meta: dict | None = field(default=None, compare=False, hash=False)

    def __post_init__(self):
        if len(self.data) == 0:
            raise ValueError("Blocks must carry at least one token")
        object.__setattr__(self, 'data', tuple(self.data))
        object.__setattr__(self, 'subs', tuple(self.subs))

    @property
    def head(self) -> str:
        return self.data[0]

    def __repr__(self):
        return f"Block({' '.join(self.data)!r}, subs={len(self.subs)})"


class Value:
    """Capability protocol shared by every runtime datum.  Only `literal` is mandatory, all the
    other projections report absence with `None` so callers can fall back to coercion.
    """

    def literal(self) -> str:
        raise NotImplementedError

    def as_int(self) -> int | None: return None
    def as_float(self) -> float | None: return None
    def as_string(self) -> str | None: return None
    def as_list(self) -> list | None: return None
    def as_map(self) -> dict | None: return None
    def as_block(self) -> Block | None: return None
    def as_invocable(self) -> "Invocable | None": return None
    def as_composite(self) -> object | None: return None
    def is_raw_literal(self) -> bool: return False

    def target(self) -> "Value":
        return self

    def __str__(self):
        return self.literal()


@dataclass(frozen=True, repr=False)
class Void(Value):
    def literal(self) -> str: return ""
    def __repr__(self): return "Void"


@dataclass(frozen=True)
class Int(Value):
    value: int

    def literal(self) -> str: return str(self.value)
    def as_int(self) -> int: return self.value


@dataclass(frozen=True)
class Float(Value):
    value: float

    def literal(self) -> str:
        text = repr(self.value)
        return text[:-2] if text.endswith('.0') else text

    def as_float(self) -> float: return self.value


@dataclass(frozen=True)
class String(Value):
    value: str

    def literal(self) -> str: return self.value
    def as_string(self) -> str: return self.value


@dataclass(frozen=True)
class RawLiteral(String):
    """Source token not yet interpreted, eligible for variable-reference substitution."""

    def is_raw_literal(self) -> bool: return True


@dataclass(frozen=True)
class ListValue(Value):
    items: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    def literal(self) -> str: return '[' + ' '.join(v.literal() for v in self.items) + ']'
    def as_list(self) -> list: return list(self.items)


@dataclass(frozen=True)
class MapValue(Value):
    entries: tuple = ()           # tuple[tuple[str, Value]], insertion order

    def __post_init__(self):
        entries = self.entries.items() if isinstance(self.entries, dict) else self.entries
        object.__setattr__(self, 'entries', tuple((str(k), v) for k, v in entries))

    def literal(self) -> str: return '{' + ' '.join(f"{k}:{v.literal()}" for k, v in self.entries) + '}'
    def as_map(self) -> dict: return dict(self.entries)


@dataclass(frozen=True)
class BlockValue(Value):
    """Deferred code-as-data; only runs when a procedure unwraps it explicitly."""
    block: Block

    def literal(self) -> str: return '& ' + ' '.join(self.block.data)
    def as_block(self) -> Block: return self.block


class Invocable(Value):
    """Anything exposing a `name` and `run(arguments, context) -> Value`."""
    name: str

    def run(self, arguments: tuple, context) -> Value:
        raise NotImplementedError

    def literal(self) -> str: return self.name
    def as_invocable(self) -> "Invocable": return self

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


@dataclass(frozen=True)
class Alias(Value):
    """Pairs a datum with a procedure: every projection comes from `datum` except invocability,
    and `target()` yields the datum so that `$ name` passes it as receiver.
    """
    datum: Value
    invocable: Value

    def literal(self) -> str: return self.datum.literal()
    def as_int(self): return self.datum.as_int()
    def as_float(self): return self.datum.as_float()
    def as_string(self): return self.datum.as_string()
    def as_list(self): return self.datum.as_list()
    def as_map(self): return self.datum.as_map()
    def as_block(self): return self.datum.as_block()
    def as_composite(self): return self.datum.as_composite()
    def is_raw_literal(self): return self.datum.is_raw_literal()
    def as_invocable(self): return self.invocable.as_invocable()
    def target(self) -> Value: return self.datum


VOID = Void()
TRUE, FALSE = String('TRUE'), String('FALSE')


def to_value(result) -> Value:
    """Convert the Python result of a standard procedure into a runtime Value."""
    if isinstance(result, Value): return result
    if result is None: return VOID
    if isinstance(result, bool): return TRUE if result else FALSE
    if isinstance(result, int): return Int(result)
    if isinstance(result, float): return Float(result)
    if isinstance(result, str): return String(result)
    if isinstance(result, (list, tuple)): return ListValue(tuple(to_value(v) for v in result))
    if isinstance(result, dict): return MapValue({k: to_value(v) for k, v in result.items()})
    raise TypeError(f"Cannot convert {type(result).__name__} into a value.")
