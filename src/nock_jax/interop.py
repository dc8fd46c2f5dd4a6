"""Conversion between integer JAX arrays and nouns."""

from __future__ import annotations

import jax
import jax.numpy as jnp

from .errors import NockTypeError
from .values import Cell, Noun, cell, validate_noun


def _pack_items(items: list[Noun], *, null_terminated: bool, where: str) -> Noun:
    if null_terminated:
        if not items:
            return 0
        return cell(*items, 0)
    if len(items) < 2:
        raise ValueError(
            f"{where} has {len(items)} item(s); a tuple noun needs at least two (or use null_terminated=True)"
        )
    return cell(*items)


def _nest(value, *, null_terminated: bool, where: str) -> Noun:
    if not isinstance(value, list):
        return int(value)
    items = [
        _nest(item, null_terminated=null_terminated, where=f"{where}[{idx}]")
        for idx, item in enumerate(value)
    ]
    return _pack_items(items, null_terminated=null_terminated, where=where)


def noun_from_array(array, *, null_terminated: bool = False, where: str = "array") -> Noun:
    """Build a noun from an integer array.

    A 0-d array becomes an atom; each axis of a higher-rank array becomes one level of
    right-nested cells, row by row.
    """
    arr = jnp.asarray(array)
    if not jnp.issubdtype(arr.dtype, jnp.integer):
        raise TypeError(f"{where} must have an integer dtype, got {arr.dtype}")
    if arr.size and bool(jnp.any(arr < 0)):
        raise ValueError(f"{where} has negative entries; atoms are non-negative")
    return _nest(arr.tolist(), null_terminated=null_terminated, where=where)


def _list_items(noun: Noun, *, null_terminated: bool) -> list[Noun]:
    items: list[Noun] = []
    node = noun
    while isinstance(node, Cell):
        items.append(node.head)
        node = node.tail
    if null_terminated:
        if node != 0:
            raise ValueError(f"list does not end in 0 (ends in {node!r})")
    else:
        items.append(node)
    return items


def noun_to_array(noun: Noun, *, null_terminated: bool = False, dtype=jnp.int32):
    """Flatten a tuple (or null-terminated list) of atoms into a 1-d array.

    A bare atom becomes a 0-d array unless ``null_terminated`` is set, in which case
    only the atom 0 (the empty list) is accepted.
    """
    validate_noun(noun, where="noun")
    if not isinstance(noun, Cell) and not null_terminated:
        items = [noun]
        shape_scalar = True
    else:
        items = _list_items(noun, null_terminated=null_terminated)
        shape_scalar = False

    for idx, item in enumerate(items):
        if isinstance(item, Cell):
            raise NockTypeError(f"item {idx} is a cell; only flat lists of atoms convert to arrays")

    # Without x64 mode, JAX narrows 64-bit requests to 32 bits.
    dtype = jax.dtypes.canonicalize_dtype(dtype)
    info = jnp.iinfo(dtype)
    for idx, item in enumerate(items):
        if item > info.max:
            raise ValueError(f"item {idx} ({item}) does not fit {dtype.name}")

    if shape_scalar:
        return jnp.asarray(items[0], dtype=dtype)
    return jnp.asarray(items, dtype=dtype)
