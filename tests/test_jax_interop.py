from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for array interop tests")
class JaxInteropTests(unittest.TestCase):
    def test_scalar_array_becomes_an_atom(self) -> None:
        import jax.numpy as jnp

        from nock_jax import noun_from_array

        out = noun_from_array(jnp.asarray(7))
        self.assertEqual(out, 7)
        self.assertIs(type(out), int)

    def test_vector_becomes_a_tuple_noun(self) -> None:
        import jax.numpy as jnp

        from nock_jax import cell, noun_from_array

        self.assertEqual(noun_from_array(jnp.arange(3)), cell(0, 1, 2))
        self.assertEqual(noun_from_array(jnp.arange(2), null_terminated=True), cell(0, 1, 0))
        self.assertEqual(noun_from_array(jnp.zeros((0,), dtype=jnp.int32), null_terminated=True), 0)

    def test_matrix_nests_row_by_row(self) -> None:
        import jax.numpy as jnp

        from nock_jax import cell, noun_from_array

        matrix = jnp.asarray([[1, 2], [3, 4], [5, 6]])
        self.assertEqual(noun_from_array(matrix), cell(cell(1, 2), cell(3, 4), cell(5, 6)))

    def test_from_array_rejects_bad_input(self) -> None:
        import jax.numpy as jnp

        from nock_jax import noun_from_array

        with self.assertRaises(TypeError):
            noun_from_array(jnp.asarray([1.0, 2.0]))
        with self.assertRaises(TypeError):
            noun_from_array(jnp.asarray([True, False]))
        with self.assertRaises(ValueError):
            noun_from_array(jnp.asarray([1, -2]))
        with self.assertRaises(ValueError):
            noun_from_array(jnp.asarray([5]))

    def test_to_array_flattens_atom_lists(self) -> None:
        import jax.numpy as jnp

        from nock_jax import cell, noun_to_array

        out = noun_to_array(cell(5, 6, 7))
        self.assertEqual(out.dtype, jnp.int32)
        self.assertEqual(out.tolist(), [5, 6, 7])

        listed = noun_to_array(cell(5, 6, 0), null_terminated=True)
        self.assertEqual(listed.tolist(), [5, 6])

        scalar = noun_to_array(9)
        self.assertEqual(scalar.shape, ())
        self.assertEqual(int(scalar), 9)

        empty = noun_to_array(0, null_terminated=True)
        self.assertEqual(empty.shape, (0,))

    def test_to_array_rejects_bad_nouns(self) -> None:
        import jax.numpy as jnp

        from nock_jax import NockTypeError, cell, noun_to_array

        with self.assertRaises(NockTypeError):
            noun_to_array(cell(cell(1, 2), 3))
        with self.assertRaises(ValueError):
            noun_to_array(cell(1, 2), null_terminated=True)
        with self.assertRaises(ValueError):
            noun_to_array(cell(1, 2**40))
        with self.assertRaises(ValueError):
            noun_to_array(cell(1, 300), dtype=jnp.uint8)

    def test_to_array_checks_range_against_the_effective_dtype(self) -> None:
        import jax
        import jax.numpy as jnp

        from nock_jax import cell, noun_to_array

        if jax.config.jax_enable_x64:
            self.skipTest("64-bit dtypes are kept as requested when x64 is enabled")
        with self.assertRaisesRegex(ValueError, "int32"):
            noun_to_array(cell(1, 2**40), dtype=jnp.int64)
        out = noun_to_array(cell(1, 2), dtype=jnp.int64)
        self.assertEqual(out.dtype, jnp.int32)
        self.assertEqual(out.tolist(), [1, 2])

    def test_arrays_feed_the_engine(self) -> None:
        import jax.numpy as jnp

        from nock_jax import cell, noun_from_array, noun_to_array, nock

        subject = noun_from_array(jnp.asarray([10, 20, 30]))
        # Increment the middle element in place: [10 [21 30]].
        formula = cell(10, cell(6, 4, 0, 6), cell(0, 1))
        result = nock(cell(subject, formula))
        self.assertEqual(noun_to_array(result).tolist(), [10, 21, 30])


if __name__ == "__main__":
    unittest.main()
