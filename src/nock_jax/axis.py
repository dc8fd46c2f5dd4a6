"""Axis addressing: subtree lookup and structural edit.

An axis is a positive integer. Axis 1 is the whole tree, ``2n`` is the head of the
node at ``n`` and ``2n + 1`` its tail, so the binary digits after the leading 1 spell
the path from the root, most significant first (0 = head, 1 = tail).
"""

from __future__ import annotations

from .values import CRASH, Cell, MaybeNoun, Noun


def _axis_path(axis: object) -> str | None:
    if type(axis) is not int or axis < 1:
        return None
    return format(axis, "b")[1:]


def find_at(axis: Noun, tree: Noun) -> MaybeNoun:
    """Subtree of ``tree`` at ``axis``; crash if the path runs off the tree."""
    path = _axis_path(axis)
    if path is None:
        return CRASH
    node = tree
    for step in path:
        if not isinstance(node, Cell):
            return CRASH
        node = node.tail if step == "1" else node.head
    return node


def replace_at(axis: Noun, new_leaf: Noun, tree: Noun) -> MaybeNoun:
    """Copy of ``tree`` with the subtree at ``axis`` replaced by ``new_leaf``.

    Only the cells on the path from the root are rebuilt; every other subtree is
    shared with ``tree``.
    """
    path = _axis_path(axis)
    if path is None:
        return CRASH
    spine: list[Cell] = []
    node = tree
    for step in path:
        if not isinstance(node, Cell):
            return CRASH
        spine.append(node)
        node = node.tail if step == "1" else node.head

    out = new_leaf
    for parent, step in zip(reversed(spine), reversed(path)):
        if step == "1":
            out = Cell(parent.head, out)
        else:
            out = Cell(out, parent.tail)
    return out
