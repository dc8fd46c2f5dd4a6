from __future__ import annotations

import random
import sys
import unittest
from unittest import mock

from nock_programs import ADD, DECREMENT, increment_chain, random_formula, random_noun


class EngineEquivalenceTests(unittest.TestCase):
    def _both(self, pair):
        from nock_jax import nock

        return nock(pair, engine="stack"), nock(pair, engine="recursive")

    def test_random_terminating_formulas_agree(self) -> None:
        from nock_jax import CRASH, Cell

        rng = random.Random(7_1123)
        produced = 0
        for trial in range(400):
            pair = Cell(random_noun(rng, 4), random_formula(rng, 4))
            stack_out, recursive_out = self._both(pair)
            with self.subTest(trial=trial, pair=pair):
                self.assertEqual(stack_out, recursive_out)
            if stack_out is not CRASH:
                produced += 1
        self.assertGreater(produced, 0)

    def test_looping_programs_agree(self) -> None:
        from nock_jax import Cell, cell

        cases = [Cell(n, DECREMENT) for n in (1, 5, 40)]
        cases += [Cell(cell(a, b), ADD) for a, b in ((2, 3), (0, 30))]
        for pair in cases:
            with self.subTest(pair=pair):
                stack_out, recursive_out = self._both(pair)
                self.assertEqual(stack_out, recursive_out)

    def test_stack_engine_runs_loops_past_the_recursion_limit(self) -> None:
        from nock_jax import Cell, NockRecursionError, nock

        n = sys.getrecursionlimit() * 3
        self.assertEqual(nock(Cell(n, DECREMENT), engine="stack"), n - 1)
        with self.assertRaises(NockRecursionError):
            nock(Cell(n, DECREMENT), engine="recursive")

    def test_stack_engine_handles_deeply_nested_formulas(self) -> None:
        from nock_jax import Cell, NockRecursionError, nock

        depth = sys.getrecursionlimit() * 3
        pair = Cell(0, increment_chain(depth))
        self.assertEqual(nock(pair, engine="stack"), depth)
        with self.assertRaises(RecursionError):
            nock(pair, engine="recursive")
        with self.assertRaises(NockRecursionError):
            nock(pair, engine="recursive")

    def test_default_engine_follows_configuration(self) -> None:
        from nock_jax import evaluator

        self.assertIs(evaluator._resolve_engine("stack"), evaluator._reduce_stack)
        with mock.patch.object(evaluator, "_DEFAULT_ENGINE", "recursive"):
            self.assertIs(evaluator._resolve_engine(None), evaluator._run_recursive)
        with mock.patch.object(evaluator, "_DEFAULT_ENGINE", "stack"):
            self.assertIs(evaluator._resolve_engine(None), evaluator._reduce_stack)

    def test_unknown_engine_is_rejected(self) -> None:
        from nock_jax import cell, nock

        with self.assertRaises(ValueError):
            nock(cell(0, 1, 0), engine="jit")
        from nock_jax import evaluator

        with mock.patch.object(evaluator, "_DEFAULT_ENGINE", "bogus"):
            with self.assertRaises(ValueError):
                nock(cell(0, 1, 0))

    def test_crash_sites_are_logged_when_enabled(self) -> None:
        from nock_jax import CRASH, cell, evaluator, nock

        formula = cell(5, cell(1, 1), cell(4, cell(1, cell(9, 9))))
        for engine in ("stack", "recursive"):
            with self.subTest(engine=engine):
                with mock.patch.object(evaluator, "_LOG_CRASHES", True):
                    with self.assertLogs("nock_jax.evaluator", level="DEBUG") as logs:
                        self.assertIs(nock(cell(0, formula), engine=engine), CRASH)
                self.assertTrue(any("opcode 4" in line for line in logs.output))

    def test_crashes_are_silent_by_default(self) -> None:
        from nock_jax import CRASH, cell, evaluator, nock

        with mock.patch.object(evaluator, "_LOG_CRASHES", False):
            with self.assertNoLogs("nock_jax.evaluator", level="DEBUG"):
                self.assertIs(nock(cell(0, 4, 1, cell(2, 2))), CRASH)


if __name__ == "__main__":
    unittest.main()
