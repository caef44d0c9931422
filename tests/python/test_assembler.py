import numpy as np
import pytest

import pystrassen
from pystrassen import Matrix, PreconditionError, ShapeMismatchError, assemble, split_quadrants


def test_assemble_orders_quadrants():
    parts = [pystrassen.matrix([[v]]) for v in (1, 2, 3, 4)]
    out = assemble(*parts)
    assert out.tolist() == [[1, 2], [3, 4]]


def test_assemble_blocks():
    m11 = pystrassen.matrix([[1, 1], [1, 1]])
    m12 = pystrassen.matrix([[2, 2], [2, 2]])
    m21 = pystrassen.matrix([[3, 3], [3, 3]])
    m22 = pystrassen.matrix([[4, 4], [4, 4]])
    out = assemble(m11, m12, m21, m22)
    assert out.shape == (4, 4)
    assert out.tolist() == [
        [1, 1, 2, 2],
        [1, 1, 2, 2],
        [3, 3, 4, 4],
        [3, 3, 4, 4],
    ]


@pytest.mark.parametrize("n", [2, 4, 6, 8, 10])
@pytest.mark.parametrize("dtype", ["int32", "float64"])
def test_split_then_assemble_round_trip(n, dtype):
    x = pystrassen.random_matrix(n, dtype=dtype, seed=n)
    q = split_quadrants(x)
    assert all(part.shape == (n // 2, n // 2) for part in q)
    assert assemble(*q).equals(x)


def test_split_quadrants_requires_even_square():
    with pytest.raises(PreconditionError):
        split_quadrants(Matrix(3))
    with pytest.raises(PreconditionError):
        split_quadrants(Matrix(2, 4))


def test_assemble_size_mismatch_is_reported():
    a = Matrix(2)
    b = Matrix(2)
    c = Matrix(2)
    d = Matrix(3)
    with pytest.raises(ShapeMismatchError) as excinfo:
        assemble(a, b, c, d)
    assert "assemble dimension mismatch: 2x2 vs 3x3" in str(excinfo.value)
    assert "quadrant 22" in str(excinfo.value)


def test_assemble_non_square_is_reported_and_inputs_untouched():
    a = pystrassen.matrix([[1, 2]])
    b = pystrassen.matrix([[3, 4]])
    with pytest.raises(ShapeMismatchError) as excinfo:
        assemble(a, b, a, b)
    assert "not square" in str(excinfo.value)
    assert a.tolist() == [[1, 2]]
    assert b.tolist() == [[3, 4]]


def test_assemble_promotes_dtype():
    ints = [pystrassen.matrix([[1]], dtype="int32") for _ in range(3)]
    half = pystrassen.matrix([[0.5]], dtype="float64")
    out = assemble(*ints, half)
    assert out.dtype == np.dtype("float64")
    assert out.tolist() == [[1.0, 1.0], [1.0, 0.5]]
