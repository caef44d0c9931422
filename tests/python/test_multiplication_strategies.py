import unittest
import sys
from pathlib import Path

import numpy as np

_REPO_ROOT = Path(__file__).resolve().parents[2]
_PYTHON_DIR = _REPO_ROOT / "python"
for _path in (_REPO_ROOT, _PYTHON_DIR):
    path_str = str(_path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

import pystrassen
from pystrassen import Matrix, PreconditionError, ShapeMismatchError


def _random(rows, cols, *, dtype, seed):
    return pystrassen.random_matrix(rows, cols, dtype=dtype, lower=-8, upper=8, seed=seed)


class TestConcreteScenario(unittest.TestCase):
    def setUp(self):
        self.a = pystrassen.matrix([[1, 2], [3, 4]], dtype="int32")
        self.b = pystrassen.matrix([[5, 6], [7, 8]], dtype="int32")
        self.expected = [[19, 22], [43, 50]]

    def test_all_strategies_agree(self):
        self.assertEqual(self.a.tb_multiply(self.b).tolist(), self.expected)
        self.assertEqual(self.a.bb_multiply(self.b).tolist(), self.expected)
        self.assertEqual(self.a.sb_multiply(self.b).tolist(), self.expected)

    def test_dispatch(self):
        for strategy in ("textbook", "tb", "block", "BB", "strassen", "sb"):
            out = pystrassen.multiply(self.a, self.b, strategy=strategy)
            self.assertEqual(out.tolist(), self.expected, strategy)
        self.assertEqual(self.a.multiply(self.b).tolist(), self.expected)
        self.assertEqual((self.a @ self.b).tolist(), self.expected)

    def test_float_variant(self):
        a = pystrassen.matrix([[1, 2], [3, 4]], dtype="float64")
        b = pystrassen.matrix([[5, 6], [7, 8]], dtype="float64")
        for fn in (pystrassen.textbook_multiply, pystrassen.block_recursive_multiply, pystrassen.strassen_multiply):
            out = fn(a, b)
            self.assertEqual(out.dtype, np.dtype("float64"))
            self.assertEqual(out.tolist(), [[19.0, 22.0], [43.0, 50.0]])

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            pystrassen.multiply(self.a, self.b, strategy="winograd")


class TestTextbook(unittest.TestCase):
    def test_rectangular_matches_inner_product(self):
        for seed, (m, k, n) in enumerate([(1, 1, 1), (3, 5, 4), (2, 7, 1), (1, 4, 6), (6, 3, 6)]):
            a = _random(m, k, dtype="int64", seed=seed)
            b = _random(k, n, dtype="int64", seed=seed + 100)
            c = pystrassen.textbook_multiply(a, b)
            self.assertEqual(c.shape, (m, n))
            an, bn = a.to_numpy(), b.to_numpy()
            for i in range(m):
                for j in range(n):
                    self.assertEqual(c[i, j], sum(int(an[i, p]) * int(bn[p, j]) for p in range(k)))

    def test_identity_is_neutral(self):
        for seed, (m, k) in enumerate([(1, 1), (2, 3), (4, 4), (5, 2)]):
            a = _random(m, k, dtype="int32", seed=seed)
            self.assertTrue(a.multiply(pystrassen.identity(a.cols(), dtype="int32")).equals(a))
            f = _random(m, k, dtype="float64", seed=seed)
            self.assertTrue(f.multiply(pystrassen.identity(f.cols(), dtype="float64")).equals(f))

    def test_mixed_dtypes_promote(self):
        a = pystrassen.matrix([[1, 2]], dtype="int32")
        b = pystrassen.matrix([[0.5], [0.25]], dtype="float64")
        c = a @ b
        self.assertEqual(c.dtype, np.dtype("float64"))
        self.assertEqual(c.tolist(), [[1.0]])


class TestRecursiveStrategiesAgainstTextbook(unittest.TestCase):
    def test_integer_exact(self):
        for n in (1, 2, 4, 8, 16):
            a = _random(n, n, dtype="int32", seed=n)
            b = _random(n, n, dtype="int32", seed=n + 1)
            expected = pystrassen.textbook_multiply(a, b)
            self.assertTrue(pystrassen.block_recursive_multiply(a, b).equals(expected), n)
            self.assertTrue(pystrassen.strassen_multiply(a, b).equals(expected), n)

    def test_float_within_tolerance(self):
        for n in (2, 4, 8, 16):
            a = _random(n, n, dtype="float64", seed=10 * n)
            b = _random(n, n, dtype="float64", seed=10 * n + 1)
            expected = a.tb_multiply(b)
            self.assertTrue(a.bb_multiply(b).equals(expected, 1e-6), n)
            self.assertTrue(a.sb_multiply(b).equals(expected, 1e-6), n)

    def test_float32_within_tolerance(self):
        a = _random(8, 8, dtype="float32", seed=3)
        b = _random(8, 8, dtype="float32", seed=4)
        expected = a.tb_multiply(b)
        out = a.sb_multiply(b)
        self.assertEqual(out.dtype, np.dtype("float32"))
        self.assertTrue(out.equals(expected, 1e-2))

    def test_leaf_size_does_not_change_result(self):
        a = _random(8, 8, dtype="int64", seed=21)
        b = _random(8, 8, dtype="int64", seed=22)
        expected = a.tb_multiply(b)
        for leaf in (1, 2, 3, 4, 8, 64):
            with pystrassen.temporary_leaf_size(leaf):
                self.assertTrue(a.bb_multiply(b).equals(expected), leaf)
                self.assertTrue(a.sb_multiply(b).equals(expected), leaf)

    def test_operands_are_not_modified(self):
        a = _random(4, 4, dtype="int32", seed=5)
        b = _random(4, 4, dtype="int32", seed=6)
        a0, b0 = a.copy(), b.copy()
        a.bb_multiply(b)
        a.sb_multiply(b)
        a.tb_multiply(b)
        self.assertTrue(a.equals(a0))
        self.assertTrue(b.equals(b0))


class TestFailures(unittest.TestCase):
    def test_inner_dimension_mismatch_is_recoverable(self):
        a = Matrix(2, 3)
        b = Matrix(2, 3)
        for fn in (pystrassen.textbook_multiply, pystrassen.block_recursive_multiply, pystrassen.strassen_multiply):
            with self.assertRaises(ShapeMismatchError) as ctx:
                fn(a, b)
            self.assertIn("dimension mismatch: 2x3 @ 2x3", str(ctx.exception))
        with self.assertRaises(ShapeMismatchError):
            a @ b
        self.assertEqual(a.shape, (2, 3))
        self.assertEqual(b.shape, (2, 3))

    def test_recursive_strategies_require_square_power_of_two(self):
        cases = [
            (Matrix(2, 4), Matrix(4, 2)),  # not square
            (Matrix(3), Matrix(3)),  # not a power of two
            (Matrix(6), Matrix(6)),
            (Matrix(4, 2), Matrix(2, 2)),
        ]
        for a, b in cases:
            with self.assertRaises(PreconditionError):
                a.bb_multiply(b)
            with self.assertRaises(PreconditionError):
                a.sb_multiply(b)
            # The textbook strategy has no such restriction.
            self.assertEqual(a.tb_multiply(b).shape, (a.rows(), b.cols()))

    def test_non_matrix_operand(self):
        with self.assertRaises(TypeError):
            pystrassen.textbook_multiply(Matrix(2), [[1, 0], [0, 1]])
        with self.assertRaises(TypeError):
            Matrix(2) @ 3


if __name__ == "__main__":
    unittest.main()
