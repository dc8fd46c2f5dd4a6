"""Structured error types for host-side misuse of the engine."""

from __future__ import annotations


class NockError(Exception):
    """Base class for structured nock-jax errors."""


class NockTypeError(NockError, TypeError):
    """A host value does not fit the noun model."""


class NockCrash(NockError):
    """Raised by the strict entry points when evaluation crashes."""

    def __init__(self, pair: object, message: str = "evaluation crashed") -> None:
        super().__init__(message)
        self.pair = pair

    def __str__(self) -> str:
        return f"{self.args[0]}: {self.pair!r}"


class NockRecursionError(NockError, RecursionError):
    """The recursive engine exhausted the host stack before finishing."""
