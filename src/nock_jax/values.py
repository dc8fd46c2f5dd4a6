"""Noun value model: atoms, cells, and the crash sentinel."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Union

from .errors import NockTypeError


class Crash:
    """Evaluation failure marker. Never a noun and never stored inside a cell."""

    _instance: "Crash | None" = None

    def __new__(cls) -> "Crash":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CRASH"

    def __reduce__(self):
        return (Crash, ())


CRASH: Final[Crash] = Crash()


def _check_component(value: object, where: str) -> None:
    if type(value) is int:
        if value < 0:
            raise NockTypeError(f"{where} is a negative atom ({value})")
        return
    if isinstance(value, Cell):
        return
    if value is CRASH:
        raise NockTypeError(f"{where} is a crash; crashes cannot be stored in a cell")
    raise NockTypeError(f"{where} has unsupported noun type {type(value).__name__}")


@dataclass(frozen=True, eq=False)
class Cell:
    """An immutable ordered pair of nouns.

    Equality and hashing are structural. The hash is combined from the children's
    cached hashes at construction, so neither operation recurses on the host stack.
    """

    head: "Noun"
    tail: "Noun"
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _check_component(self.head, "cell head")
        _check_component(self.tail, "cell tail")
        object.__setattr__(self, "_hash", hash((hash(self.head), hash(self.tail))))

    def __hash__(self) -> int:
        return self._hash

    def __reduce__(self):
        return (Cell, (self.head, self.tail))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return nouns_equal(self, other)

    def __iter__(self):
        yield self.head
        yield self.tail

    def __repr__(self) -> str:
        return format_noun(self)

    __str__ = __repr__


Noun = Union[int, Cell]
MaybeNoun = Union[int, Cell, Crash]


class NounKind(str, Enum):
    ATOM = "atom"
    CELL = "cell"


@dataclass(frozen=True)
class NounInfo:
    kind: NounKind
    size: int
    depth: int
    leaves: int


def is_atom(value: object) -> bool:
    return type(value) is int and value >= 0


def is_cell_noun(value: object) -> bool:
    return isinstance(value, Cell)


def is_crash(value: object) -> bool:
    return value is CRASH


def kind_of(value: Noun) -> NounKind:
    if isinstance(value, Cell):
        return NounKind.CELL
    if is_atom(value):
        return NounKind.ATOM
    raise NockTypeError(f"value of type {type(value).__name__} is not a noun")


def nouns_equal(left: Noun, right: Noun) -> bool:
    """Structural equality over two nouns, walked with an explicit stack."""
    pending = [(left, right)]
    while pending:
        a, b = pending.pop()
        if a is b:
            continue
        a_cell = isinstance(a, Cell)
        if a_cell != isinstance(b, Cell):
            return False
        if not a_cell:
            if a != b:
                return False
            continue
        if a._hash != b._hash:
            return False
        pending.append((a.tail, b.tail))
        pending.append((a.head, b.head))
    return True


def cell(*items: Noun) -> Cell:
    """Build a right-nested cell: ``cell(a, b, c) == Cell(a, Cell(b, c))``."""
    if len(items) < 2:
        raise NockTypeError("cell() needs at least two nouns")
    out = items[-1]
    for item in reversed(items[:-1]):
        out = Cell(item, out)
    return out


def _atom_from_host(value: object, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{where} has unsupported runtime type {type(value).__name__}")
    atom = int(value)
    if atom < 0:
        raise ValueError(f"{where} is negative ({atom}); atoms are non-negative")
    return atom


def as_noun(value: object, *, where: str = "value") -> Noun:
    """Convert host data (ints, nested tuples/lists, nouns) into a noun.

    Sequences of two or more items are right-nested, so ``(1, 2, 3)`` becomes
    ``[1 [2 3]]``.
    """
    if isinstance(value, Cell):
        return value
    if not isinstance(value, (tuple, list)):
        return _atom_from_host(value, where)

    # Postorder over sequences; each frame is (sequence, converted items, where).
    root_items: list[Noun] = []
    frames: list[tuple[tuple | list, list[Noun], str]] = []

    def open_frame(seq, path: str) -> None:
        if len(seq) < 2:
            raise ValueError(f"{path} has {len(seq)} item(s); a cell needs at least two")
        frames.append((seq, [], path))

    open_frame(value, where)
    while frames:
        seq, done, path = frames[-1]
        if len(done) == len(seq):
            frames.pop()
            built = cell(*done)
            (frames[-1][1] if frames else root_items).append(built)
            continue
        idx = len(done)
        item = seq[idx]
        item_path = f"{path}[{idx}]"
        if isinstance(item, Cell):
            done.append(item)
        elif isinstance(item, (tuple, list)):
            open_frame(item, item_path)
        else:
            done.append(_atom_from_host(item, item_path))
    return root_items[0]


def to_python(noun: Noun):
    """Render a noun as nested 2-tuples of ints."""
    if not isinstance(noun, Cell):
        return noun
    # Postorder: push children, then combine once both are built.
    results: list[object] = []
    stack: list[tuple[Noun, bool]] = [(noun, False)]
    while stack:
        node, expanded = stack.pop()
        if not isinstance(node, Cell):
            results.append(node)
        elif expanded:
            tail = results.pop()
            head = results.pop()
            results.append((head, tail))
        else:
            stack.append((node, True))
            stack.append((node.tail, False))
            stack.append((node.head, False))
    return results[0]


def validate_noun(value: object, *, where: str = "noun") -> None:
    if isinstance(value, Cell):
        # Cells validate their components at construction.
        return
    if value is CRASH:
        raise NockTypeError(f"{where} is a crash, not a noun")
    if type(value) is not int:
        raise NockTypeError(f"{where} has unsupported noun type {type(value).__name__}")
    if value < 0:
        raise NockTypeError(f"{where} is a negative atom ({value})")


def noun_info(value: Noun) -> NounInfo:
    kind = kind_of(value)
    size = 0
    leaves = 0
    depth = 0
    stack = [(value, 0)]
    while stack:
        node, level = stack.pop()
        size += 1
        depth = max(depth, level)
        if isinstance(node, Cell):
            stack.append((node.tail, level + 1))
            stack.append((node.head, level + 1))
        else:
            leaves += 1
    return NounInfo(kind=kind, size=size, depth=depth, leaves=leaves)


def format_noun(value: MaybeNoun) -> str:
    """Bracket notation with right-nested tails collapsed: ``[1 2 3]``."""
    if value is CRASH:
        return "crash"
    if not isinstance(value, Cell):
        return str(value)

    parts: list[str] = []
    # Work items are nouns to print, or literal text to emit.
    work: list[object] = [value]
    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if not isinstance(item, Cell):
            parts.append(str(item))
            continue
        row: list[Noun] = [item.head]
        rest = item.tail
        while isinstance(rest, Cell):
            row.append(rest.head)
            rest = rest.tail
        row.append(rest)
        work.append("]")
        for idx in range(len(row) - 1, -1, -1):
            work.append(row[idx])
            if idx:
                work.append(" ")
        work.append("[")
    return "".join(parts)
