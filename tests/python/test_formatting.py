import io

import pystrassen
from pystrassen import Matrix


def test_str_header_and_rows():
    m = pystrassen.matrix([[1, 2], [3, 4]], dtype="int32")
    assert str(m) == "Matrix(shape=(2, 2), dtype=int32)\n[\n [1 2]\n [3 4]\n]"


def test_repr_is_structure_only():
    assert repr(Matrix(2, 3, dtype="float64")) == "<Matrix shape=(2, 3) dtype=float64>"


def test_float_values_use_general_format():
    m = pystrassen.matrix([[0.5, 2.0, -1.25]], dtype="float64")
    assert " [0.5 2 -1.25]" in str(m)


def test_truncation_uses_edge_items():
    m = pystrassen.matrix([[10 * i + j for j in range(5)] for i in range(5)])
    with pystrassen.temporary_settings(edge_items=1):
        lines = str(m).splitlines()
    assert lines[1:] == ["[", " [0 ... 4]", " [...]", " [40 ... 44]", "]"]

    # Small matrices are never truncated.
    assert "..." not in str(m)


def test_format_matrix_with_label():
    m = pystrassen.matrix([[1, 2, 3], [4, 5, 6]])
    text = pystrassen.format_matrix(m, "A")
    assert text.splitlines() == ["A: nRows = 2; nCols = 3", "1 2 3", "4 5 6", "----"]


def test_format_matrix_shape_only():
    m = Matrix(3, 7)
    assert pystrassen.format_matrix(m, show_contents=False) == "nRows = 3; nCols = 7\n----"


def test_display_writes_to_file():
    buf = io.StringIO()
    pystrassen.display(pystrassen.matrix([[7]]), "C", file=buf)
    assert buf.getvalue() == "C: nRows = 1; nCols = 1\n7\n----\n"


def test_display_defaults_to_stdout(capsys):
    pystrassen.display(Matrix(1, 2), show_contents=False)
    assert capsys.readouterr().out == "nRows = 1; nCols = 2\n----\n"
