"""nock-jax public API."""

import logging

from .axis import find_at, replace_at
from .errors import NockCrash, NockError, NockRecursionError, NockTypeError
from .evaluator import evaluate, nock, nock_or_raise
from .primitives import inc, is_cell, is_eq
from .values import (
    CRASH,
    Cell,
    Crash,
    NounInfo,
    NounKind,
    as_noun,
    cell,
    format_noun,
    is_atom,
    is_cell_noun,
    is_crash,
    kind_of,
    noun_info,
    nouns_equal,
    to_python,
    validate_noun,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    from .interop import noun_from_array, noun_to_array
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def noun_from_array(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for noun_from_array(). Install runtime deps first."
            ) from _jax_import_error

        def noun_to_array(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for noun_to_array(). Install runtime deps first."
            ) from _jax_import_error

    else:
        raise

__all__ = [
    "nock",
    "nock_or_raise",
    "evaluate",
    "find_at",
    "replace_at",
    "is_cell",
    "inc",
    "is_eq",
    "CRASH",
    "Crash",
    "Cell",
    "NounInfo",
    "NounKind",
    "cell",
    "as_noun",
    "to_python",
    "format_noun",
    "is_atom",
    "is_cell_noun",
    "is_crash",
    "kind_of",
    "noun_info",
    "nouns_equal",
    "validate_noun",
    "noun_from_array",
    "noun_to_array",
    "NockError",
    "NockTypeError",
    "NockCrash",
    "NockRecursionError",
]
