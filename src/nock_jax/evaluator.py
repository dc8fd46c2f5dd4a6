"""Reduction engine: evaluate a ``[subject formula]`` pair to a noun or a crash."""

from __future__ import annotations

import logging
import os
from typing import Callable, Final

from .axis import find_at, replace_at
from .errors import NockCrash, NockRecursionError
from .primitives import inc, is_cell, is_eq
from .values import CRASH, Cell, Crash, MaybeNoun, Noun, as_noun, validate_noun

logger = logging.getLogger(__name__)

_ENGINE_NAMES: Final[tuple[str, ...]] = ("stack", "recursive")
_DEFAULT_ENGINE: Final[str] = os.environ.get("NOCK_JAX_ENGINE", "stack").strip().lower() or "stack"
_LOG_CRASHES: Final[bool] = os.environ.get("NOCK_JAX_LOG_CRASHES", "0") == "1"

# [0 3]: take the tail of the subject.
_TAIL_FORMULA: Final[Cell] = Cell(0, 3)


def _crash(opcode: object, reason: str, *args: object) -> Crash:
    if _LOG_CRASHES:
        logger.debug("crash at opcode %s: " + reason, opcode, *args)
    return CRASH


def _checked(value: MaybeNoun, opcode: int, reason: str, *args: object) -> MaybeNoun:
    if value is CRASH:
        return _crash(opcode, reason, *args)
    return value


def _branch(test: MaybeNoun, branches: Cell) -> MaybeNoun:
    """Pick ``c`` or ``d`` out of ``[c d]`` for a test of 0 or 1; anything else crashes."""
    if type(test) is int and test == 0:
        return branches.head
    if type(test) is int and test == 1:
        return branches.tail
    return _crash(6, "test is not 0 or 1: %r", test)


# ---------------------------------------------------------------------------
# Recursive reference engine
# ---------------------------------------------------------------------------


def _reduce_recursive(subject: Noun, formula: Noun) -> MaybeNoun:
    if not isinstance(formula, Cell):
        return _crash(None, "formula is an atom")
    op = formula.head
    arg = formula.tail
    if type(op) is not int:
        return _crash(op, "formula head is not an opcode")

    if op == 0:
        return _checked(find_at(arg, subject), 0, "axis %r is not in the subject", arg)

    if op == 1:
        return arg

    if op == 2:
        if not isinstance(arg, Cell):
            return _crash(2, "expected [b c]")
        new_subject = _reduce_recursive(subject, arg.head)
        if new_subject is CRASH:
            return CRASH
        new_formula = _reduce_recursive(subject, arg.tail)
        if new_formula is CRASH:
            return CRASH
        return _reduce_recursive(new_subject, new_formula)

    if op == 3:
        value = _reduce_recursive(subject, arg)
        if value is CRASH:
            return CRASH
        return is_cell(value)

    if op == 4:
        value = _reduce_recursive(subject, arg)
        if value is CRASH:
            return CRASH
        return _checked(inc(value), 4, "cannot increment a cell")

    if op == 5:
        if not isinstance(arg, Cell):
            return _crash(5, "expected [b c]")
        left = _reduce_recursive(subject, arg.head)
        if left is CRASH:
            return CRASH
        right = _reduce_recursive(subject, arg.tail)
        if right is CRASH:
            return CRASH
        return is_eq(Cell(left, right))

    if op == 6:
        if not isinstance(arg, Cell) or not isinstance(arg.tail, Cell):
            return _crash(6, "expected [b c d]")
        test = _reduce_recursive(subject, arg.head)
        if test is CRASH:
            return CRASH
        chosen = _branch(test, arg.tail)
        if chosen is CRASH:
            return CRASH
        return _reduce_recursive(subject, chosen)

    if op == 7:
        if not isinstance(arg, Cell):
            return _crash(7, "expected [b c]")
        new_subject = _reduce_recursive(subject, arg.head)
        if new_subject is CRASH:
            return CRASH
        return _reduce_recursive(new_subject, arg.tail)

    if op == 8:
        if not isinstance(arg, Cell):
            return _crash(8, "expected [b c]")
        pushed = _reduce_recursive(subject, arg.head)
        if pushed is CRASH:
            return CRASH
        return _reduce_recursive(Cell(pushed, subject), arg.tail)

    if op == 9:
        if not isinstance(arg, Cell):
            return _crash(9, "expected [b c]")
        core = _reduce_recursive(subject, arg.tail)
        if core is CRASH:
            return CRASH
        arm = _checked(find_at(arg.head, core), 9, "arm axis %r is not in the core", arg.head)
        if arm is CRASH:
            return CRASH
        return _reduce_recursive(core, arm)

    if op == 10:
        if not isinstance(arg, Cell) or not isinstance(arg.head, Cell):
            return _crash(10, "expected [[b c] d]")
        new_value = _reduce_recursive(subject, arg.head.tail)
        if new_value is CRASH:
            return CRASH
        base = _reduce_recursive(subject, arg.tail)
        if base is CRASH:
            return CRASH
        return _checked(replace_at(arg.head.head, new_value, base), 10, "cannot edit axis %r", arg.head.head)

    if op == 11:
        if not isinstance(arg, Cell):
            return _crash(11, "expected [b c]")
        if isinstance(arg.head, Cell):
            hint = _reduce_recursive(subject, arg.head.tail)
            if hint is CRASH:
                return CRASH
            product = _reduce_recursive(subject, arg.tail)
            if product is CRASH:
                return CRASH
            return _reduce_recursive(Cell(hint, product), _TAIL_FORMULA)
        return _reduce_recursive(subject, arg.tail)

    return _crash(op, "unknown opcode")


def _run_recursive(subject: Noun, formula: Noun) -> MaybeNoun:
    try:
        return _reduce_recursive(subject, formula)
    except RecursionError as err:
        raise NockRecursionError(
            "recursive engine exhausted the host stack; use engine='stack' for deep programs"
        ) from err


# ---------------------------------------------------------------------------
# Work-stack engine
# ---------------------------------------------------------------------------

# Continuation tags. Each pending frame is a tuple whose first item is a tag and
# whose remaining items hold what the continuation needs once a value arrives.
_K_OP2_SUBJECT: Final = 0  # (tag, subject, formula-producing formula)
_K_OP2_FORMULA: Final = 1  # (tag, new subject)
_K_OP3: Final = 2  # (tag,)
_K_OP4: Final = 3  # (tag,)
_K_OP5_LEFT: Final = 4  # (tag, subject, right formula)
_K_OP5_RIGHT: Final = 5  # (tag, left value)
_K_OP6: Final = 6  # (tag, subject, [c d])
_K_OP7: Final = 7  # (tag, formula)
_K_OP8: Final = 8  # (tag, subject, formula)
_K_OP9: Final = 9  # (tag, arm axis)
_K_OP10_VALUE: Final = 10  # (tag, subject, axis, base formula)
_K_OP10_BASE: Final = 11  # (tag, axis, new value)
_K_OP11_HINT: Final = 12  # (tag, subject, formula)
_K_OP11_PAIR: Final = 13  # (tag, hint value)

_OP3_FRAME: Final = (_K_OP3,)
_OP4_FRAME: Final = (_K_OP4,)


def _reduce_stack(subject: Noun, formula: Noun) -> MaybeNoun:
    """Evaluate with an explicit continuation stack.

    Tail positions (opcodes 2, 6, 7, 8, 9, 11) replace ``subject``/``formula`` in
    place, so loops written with opcode 9 run in constant continuation space.
    """
    frames: list[tuple] = []
    while True:
        # Reduce (subject, formula) until it yields a value or needs a sub-result.
        if not isinstance(formula, Cell):
            value = _crash(None, "formula is an atom")
        else:
            op = formula.head
            arg = formula.tail
            if type(op) is not int:
                value = _crash(op, "formula head is not an opcode")
            elif op == 0:
                value = _checked(find_at(arg, subject), 0, "axis %r is not in the subject", arg)
            elif op == 1:
                value = arg
            elif op == 2:
                if not isinstance(arg, Cell):
                    value = _crash(2, "expected [b c]")
                else:
                    frames.append((_K_OP2_SUBJECT, subject, arg.tail))
                    formula = arg.head
                    continue
            elif op == 3:
                frames.append(_OP3_FRAME)
                formula = arg
                continue
            elif op == 4:
                frames.append(_OP4_FRAME)
                formula = arg
                continue
            elif op == 5:
                if not isinstance(arg, Cell):
                    value = _crash(5, "expected [b c]")
                else:
                    frames.append((_K_OP5_LEFT, subject, arg.tail))
                    formula = arg.head
                    continue
            elif op == 6:
                if not isinstance(arg, Cell) or not isinstance(arg.tail, Cell):
                    value = _crash(6, "expected [b c d]")
                else:
                    frames.append((_K_OP6, subject, arg.tail))
                    formula = arg.head
                    continue
            elif op == 7:
                if not isinstance(arg, Cell):
                    value = _crash(7, "expected [b c]")
                else:
                    frames.append((_K_OP7, arg.tail))
                    formula = arg.head
                    continue
            elif op == 8:
                if not isinstance(arg, Cell):
                    value = _crash(8, "expected [b c]")
                else:
                    frames.append((_K_OP8, subject, arg.tail))
                    formula = arg.head
                    continue
            elif op == 9:
                if not isinstance(arg, Cell):
                    value = _crash(9, "expected [b c]")
                else:
                    frames.append((_K_OP9, arg.head))
                    formula = arg.tail
                    continue
            elif op == 10:
                if not isinstance(arg, Cell) or not isinstance(arg.head, Cell):
                    value = _crash(10, "expected [[b c] d]")
                else:
                    frames.append((_K_OP10_VALUE, subject, arg.head.head, arg.tail))
                    formula = arg.head.tail
                    continue
            elif op == 11:
                if not isinstance(arg, Cell):
                    value = _crash(11, "expected [b c]")
                elif isinstance(arg.head, Cell):
                    frames.append((_K_OP11_HINT, subject, arg.tail))
                    formula = arg.head.tail
                    continue
                else:
                    formula = arg.tail
                    continue
            else:
                value = _crash(op, "unknown opcode")

        # Feed the value to pending continuations until one asks for a new reduction.
        while True:
            if value is CRASH or not frames:
                return value
            frame = frames.pop()
            tag = frame[0]
            if tag == _K_OP2_SUBJECT:
                frames.append((_K_OP2_FORMULA, value))
                subject = frame[1]
                formula = frame[2]
                break
            if tag == _K_OP2_FORMULA:
                subject = frame[1]
                formula = value
                break
            if tag == _K_OP3:
                value = is_cell(value)
                continue
            if tag == _K_OP4:
                value = _checked(inc(value), 4, "cannot increment a cell")
                continue
            if tag == _K_OP5_LEFT:
                frames.append((_K_OP5_RIGHT, value))
                subject = frame[1]
                formula = frame[2]
                break
            if tag == _K_OP5_RIGHT:
                value = is_eq(Cell(frame[1], value))
                continue
            if tag == _K_OP6:
                chosen = _branch(value, frame[2])
                if chosen is CRASH:
                    return CRASH
                subject = frame[1]
                formula = chosen
                break
            if tag == _K_OP7:
                subject = value
                formula = frame[1]
                break
            if tag == _K_OP8:
                subject = Cell(value, frame[1])
                formula = frame[2]
                break
            if tag == _K_OP9:
                arm = _checked(find_at(frame[1], value), 9, "arm axis %r is not in the core", frame[1])
                if arm is CRASH:
                    return CRASH
                subject = value
                formula = arm
                break
            if tag == _K_OP10_VALUE:
                frames.append((_K_OP10_BASE, frame[2], value))
                subject = frame[1]
                formula = frame[3]
                break
            if tag == _K_OP10_BASE:
                value = _checked(replace_at(frame[1], frame[2], value), 10, "cannot edit axis %r", frame[1])
                continue
            if tag == _K_OP11_HINT:
                frames.append((_K_OP11_PAIR, value))
                subject = frame[1]
                formula = frame[2]
                break
            if tag == _K_OP11_PAIR:
                subject = Cell(frame[1], value)
                formula = _TAIL_FORMULA
                break
            raise AssertionError(f"unknown continuation tag {tag!r}")


_ENGINES: Final[dict[str, Callable[[Noun, Noun], MaybeNoun]]] = {
    "stack": _reduce_stack,
    "recursive": _run_recursive,
}


def _resolve_engine(engine: str | None) -> Callable[[Noun, Noun], MaybeNoun]:
    name = _DEFAULT_ENGINE if engine is None else engine
    runner = _ENGINES.get(name)
    if runner is None:
        raise ValueError(f"unknown engine {name!r}; expected one of {', '.join(_ENGINE_NAMES)}")
    return runner


def nock(pair: Noun, *, engine: str | None = None) -> MaybeNoun:
    """Reduce ``[subject formula]`` to a noun, or return ``CRASH``."""
    runner = _resolve_engine(engine)
    validate_noun(pair, where="pair")
    if not isinstance(pair, Cell):
        return _crash(None, "top-level argument is an atom, not [subject formula]")
    return runner(pair.head, pair.tail)


def evaluate(subject: object, formula: object, *, engine: str | None = None) -> MaybeNoun:
    """Convert host data to nouns and reduce ``[subject formula]``."""
    pair = Cell(as_noun(subject, where="subject"), as_noun(formula, where="formula"))
    return nock(pair, engine=engine)


def nock_or_raise(pair: Noun, *, engine: str | None = None) -> Noun:
    """Like :func:`nock`, but raise :class:`NockCrash` instead of returning ``CRASH``."""
    result = nock(pair, engine=engine)
    if result is CRASH:
        raise NockCrash(pair)
    return result
