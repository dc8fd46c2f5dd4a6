"""The three leaf operators: cell test, increment, and equality."""

from __future__ import annotations

from .values import CRASH, Cell, MaybeNoun, Noun, nouns_equal


def is_cell(noun: Noun) -> int:
    """0 if ``noun`` is a cell, 1 if it is an atom. Never crashes."""
    return 0 if isinstance(noun, Cell) else 1


def inc(noun: Noun) -> MaybeNoun:
    if type(noun) is int:
        return noun + 1
    return CRASH


def is_eq(pair: Noun) -> MaybeNoun:
    """Compare the head and tail of ``pair``; crash if it is not a cell."""
    if not isinstance(pair, Cell):
        return CRASH
    return 0 if nouns_equal(pair.head, pair.tail) else 1
