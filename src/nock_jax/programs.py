"""Sample looping programs, shared by the test suites and the benchmarks."""

from __future__ import annotations

from .values import Cell, cell

# Subject: n. Counts up from 0 until counter + 1 == n. Loops forever for n == 0.
DECREMENT_ARM = cell(
    6,
    cell(5, cell(0, 7), 4, 0, 6),
    cell(0, 6),
    9, 2, 10, cell(6, 4, 0, 6), 0, 1,
)
DECREMENT = cell(8, cell(1, 0), 8, cell(1, DECREMENT_ARM), 9, 2, 0, 1)

# Subject: [a b]. Core is [arm counter a b]; axis 6 = counter, 14 = a, 15 = b.
ADD_ARM = cell(
    6,
    cell(5, cell(0, 6), 0, 15),
    cell(0, 14),
    9, 2, 10, cell(6, 4, 0, 6), 10, cell(14, 4, 0, 14), 0, 1,
)
ADD = cell(8, cell(1, 0), 8, cell(1, ADD_ARM), 9, 2, 0, 1)


def increment_chain(depth: int) -> Cell:
    """[4 [4 ... [0 1]]] with ``depth`` increments."""
    formula = cell(0, 1)
    for _ in range(depth):
        formula = cell(4, formula)
    return formula
