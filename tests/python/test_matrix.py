"""
Tests for the Matrix class.
"""

import pytest
import numpy as np

from algebra.matrix import (
    Matrix,
    new,
    InvalidDimensionsError,
    NegativeIndexError,
    IndexOutOfRangeError,
    DimensionMismatchError,
    FormatConfig,
    get_config,
)
from conftest import assert_matrix_equal


class TestMatrixCreation:
    """Test Matrix construction."""

    @pytest.mark.parametrize("rows,cols", [(0, 0), (0, 4), (3, 0), (1, 1), (2, 3), (7, 5)])
    def test_new_zero_filled(self, rows, cols):
        """New matrices have the requested shape and only zeros."""
        m = new(rows, cols)
        assert m.dimensions() == (rows, cols)
        assert m.size == rows * cols
        for i in range(rows):
            for j in range(cols):
                assert m.get(i, j) == 0.0

    @pytest.mark.parametrize("rows,cols", [(-1, 3), (3, -1), (-2, -2)])
    def test_negative_dimensions(self, rows, cols):
        """Negative dimensions are rejected."""
        with pytest.raises(InvalidDimensionsError):
            Matrix(rows, cols)

    def test_invalid_dimensions_is_value_error(self):
        """Callers catching ValueError also see dimension errors."""
        with pytest.raises(ValueError, match="-1x3"):
            new(-1, 3)

    def test_non_integer_dimensions(self):
        with pytest.raises(TypeError):
            Matrix(2.5, 3)

    def test_numpy_integer_dimensions(self):
        m = Matrix(np.int64(2), np.int32(3))
        assert m.shape == (2, 3)

    def test_zeros(self):
        m = Matrix.zeros(2, 2)
        assert m.tolist() == [[0.0, 0.0], [0.0, 0.0]]

    def test_from_list(self, matrix_2x3):
        assert matrix_2x3.shape == (2, 3)
        assert matrix_2x3.get(1, 2) == 6.0

    def test_from_list_empty(self):
        assert Matrix.from_list([]).shape == (0, 0)
        assert Matrix.from_list([[], []]).shape == (2, 0)

    def test_from_list_ragged(self):
        with pytest.raises(InvalidDimensionsError, match="row 1"):
            Matrix.from_list([[1.0, 2.0], [3.0]])

    def test_from_list_one_dimensional(self):
        with pytest.raises(InvalidDimensionsError, match="row 0 is not a sequence"):
            Matrix.from_list([1.0, 2.0])

    def test_from_list_three_dimensional(self):
        with pytest.raises(InvalidDimensionsError, match=r"cell \(0, 0\) is a sequence"):
            Matrix.from_list([[[1.0]], [[2.0]]])

    def test_from_numpy_copies(self):
        arr = np.arange(6, dtype=np.float64).reshape(2, 3)
        m = Matrix.from_numpy(arr)
        arr[0, 0] = 100.0
        assert m.get(0, 0) == 0.0

    def test_from_numpy_converts_dtype(self):
        m = Matrix.from_numpy(np.array([[1, 2], [3, 4]], dtype=np.int32))
        assert m.get(1, 1) == 4.0
        assert isinstance(m.get(1, 1), float)

    def test_from_numpy_fortran_order(self):
        arr = np.asfortranarray(np.arange(6, dtype=np.float64).reshape(2, 3))
        m = Matrix.from_numpy(arr)
        assert m.tolist() == [[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]]

    @pytest.mark.parametrize("shape", [(3,), (2, 2, 2)])
    def test_from_numpy_wrong_ndim(self, shape):
        with pytest.raises(InvalidDimensionsError):
            Matrix.from_numpy(np.zeros(shape))

    def test_to_numpy_is_independent(self, matrix_a):
        arr = matrix_a.to_numpy()
        arr[0, 0] = -1.0
        assert matrix_a.get(0, 0) == 1.0
        assert arr.dtype == np.float64

    def test_shared_paths(self):
        assert Matrix(1, 1).is_shared
        assert not Matrix(1, 1, shared=False).is_shared
        assert not Matrix.from_list([[1.0]], shared=False).is_shared


class TestMatrixAccess:
    """Test bounds-checked element access."""

    def test_set_get_roundtrip(self, random_matrix):
        rows, cols = random_matrix.dimensions()
        for i in range(rows):
            for j in range(cols):
                v = i * 10.5 - j
                random_matrix.set(i, j, v)
                assert random_matrix.get(i, j) == v

    def test_row_major_layout(self, matrix_2x3):
        """Element (i, j) maps to flat position i*cols + j."""
        flat = matrix_2x3.to_numpy().reshape(-1)
        for i in range(2):
            for j in range(3):
                assert flat[i * 3 + j] == matrix_2x3.get(i, j)

    @pytest.mark.parametrize("i,j", [(-1, 0), (0, -1), (-5, -5)])
    def test_negative_index(self, matrix_2x3, i, j):
        with pytest.raises(NegativeIndexError, match="must not be negative"):
            matrix_2x3.get(i, j)
        with pytest.raises(NegativeIndexError):
            matrix_2x3.set(i, j, 1.0)

    @pytest.mark.parametrize("i,j", [(2, 0), (0, 3), (2, 3), (100, 1)])
    def test_index_out_of_range(self, matrix_2x3, i, j):
        with pytest.raises(IndexOutOfRangeError, match=r"\(0:1, 0:2\)"):
            matrix_2x3.get(i, j)
        with pytest.raises(IndexOutOfRangeError):
            matrix_2x3.set(i, j, 1.0)

    def test_index_errors_are_index_errors(self, matrix_2x3):
        with pytest.raises(IndexError):
            matrix_2x3.get(5, 5)
        with pytest.raises(IndexError):
            matrix_2x3.get(-1, 0)

    def test_failed_set_leaves_storage_untouched(self, matrix_2x3):
        before = matrix_2x3.tolist()
        with pytest.raises(IndexOutOfRangeError):
            matrix_2x3.set(0, 3, 99.0)
        assert matrix_2x3.tolist() == before

    def test_empty_matrix_has_no_valid_index(self):
        m = Matrix(0, 0)
        with pytest.raises(IndexOutOfRangeError):
            m.get(0, 0)

    def test_item_access(self, matrix_a):
        matrix_a[1, 0] = 9.0
        assert matrix_a[1, 0] == 9.0
        assert matrix_a.get(1, 0) == 9.0

    @pytest.mark.parametrize("key", [0, (0,), (0, 1, 2), "a"])
    def test_item_access_bad_key(self, matrix_a, key):
        with pytest.raises(TypeError):
            matrix_a[key]
        with pytest.raises(TypeError):
            matrix_a[key] = 1.0


class TestMatrixEach:
    """Test the per-element transform."""

    def test_each_row_major_order(self, granularity):
        m = Matrix(2, 3)
        visited = []

        def record(i, j, v):
            visited.append((i, j))
            return v

        m.each(record)
        assert visited == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]

    def test_each_replaces_values(self, matrix_2x3, granularity):
        matrix_2x3.each(lambda i, j, v: v * 10 + i - j)
        assert_matrix_equal(matrix_2x3, [[10, 19, 28], [41, 50, 59]])

    def test_each_callback_may_read_matrix(self, matrix_a, granularity):
        """A callback reading the same matrix does not deadlock."""
        matrix_a.each(lambda i, j, v: matrix_a.get(j, i))
        # Row-major pass: (0,1) reads original (1,0) = 3, (1,0) then reads updated (0,1) = 3.
        assert_matrix_equal(matrix_a, [[1, 3], [3, 4]])

    def test_each_on_empty(self):
        Matrix(0, 3).each(lambda i, j, v: pytest.fail("called on empty matrix"))


class TestMatrixTranspose:
    """Test transpose."""

    def test_transpose_shape_and_values(self, matrix_2x3, granularity):
        t = matrix_2x3.T
        assert t.dimensions() == (3, 2)
        for i in range(2):
            for j in range(3):
                assert t.get(j, i) == matrix_2x3.get(i, j)

    def test_transpose_involution(self, random_matrix, granularity):
        tt = random_matrix.transpose().transpose()
        assert tt.dimensions() == random_matrix.dimensions()
        np.testing.assert_array_equal(tt.to_numpy(), random_matrix.to_numpy())

    def test_transpose_does_not_alias(self, matrix_2x3):
        t = matrix_2x3.T
        t.set(0, 0, -1.0)
        assert matrix_2x3.get(0, 0) == 1.0
        matrix_2x3.set(1, 2, -2.0)
        assert t.get(2, 1) == 6.0

    @pytest.mark.parametrize("rows,cols", [(0, 0), (0, 3), (1, 4), (4, 1)])
    def test_transpose_degenerate(self, rows, cols):
        m = Matrix.from_numpy(np.arange(rows * cols, dtype=np.float64).reshape(rows, cols))
        t = m.T
        assert t.dimensions() == (cols, rows)
        np.testing.assert_array_equal(t.to_numpy(), m.to_numpy().T)

    def test_transpose_keeps_sharing_mode(self):
        assert not Matrix(2, 3, shared=False).T.is_shared


class TestMatrixClone:
    """Test clone independence."""

    def test_clone_values(self, random_matrix):
        c = random_matrix.clone()
        assert c.dimensions() == random_matrix.dimensions()
        np.testing.assert_array_equal(c.to_numpy(), random_matrix.to_numpy())

    def test_clone_independent(self, matrix_a):
        c = matrix_a.clone()
        matrix_a.set(0, 0, 100.0)
        assert c.get(0, 0) == 1.0
        c.set(1, 1, -100.0)
        assert matrix_a.get(1, 1) == 4.0


class TestMatrixArithmetic:
    """Test dimension-matched and scalar arithmetic."""

    def test_add(self, matrix_a, matrix_b, granularity):
        matrix_a.add(matrix_b)
        assert_matrix_equal(matrix_a, [[6, 8], [10, 12]])
        assert_matrix_equal(matrix_b, [[5, 6], [7, 8]])

    def test_sub(self, matrix_a, matrix_b, granularity):
        matrix_a.sub(matrix_b)
        assert_matrix_equal(matrix_a, [[-4, -4], [-4, -4]])

    def test_add_then_sub_restores(self, random_matrix, granularity):
        original = random_matrix.to_numpy()
        other = Matrix.from_numpy(np.random.default_rng(1).standard_normal((5, 7)))
        random_matrix.add(other)
        random_matrix.sub(other)
        np.testing.assert_allclose(random_matrix.to_numpy(), original, rtol=1e-12, atol=1e-12)

    def test_add_self(self, matrix_a, granularity):
        matrix_a.add(matrix_a)
        assert_matrix_equal(matrix_a, [[2, 4], [6, 8]])

    def test_sub_self(self, matrix_a, granularity):
        matrix_a.sub(matrix_a)
        assert_matrix_equal(matrix_a, [[0, 0], [0, 0]])

    def test_dot(self, matrix_a, matrix_b, granularity):
        assert matrix_a.dot(matrix_b) == 70.0

    def test_dot_is_not_matmul(self, matrix_a, matrix_b):
        assert matrix_a.dot(matrix_b) == pytest.approx(np.sum(matrix_a.to_numpy() * matrix_b.to_numpy()))

    def test_dot_empty(self):
        assert Matrix(0, 0).dot(Matrix(0, 0)) == 0.0

    @pytest.mark.parametrize("op", ["add", "sub", "dot"])
    def test_dimension_mismatch(self, op, granularity):
        a = Matrix.from_list([[1, 2, 3], [4, 5, 6]])
        b = Matrix(3, 2)
        with pytest.raises(DimensionMismatchError, match="2x3 and 3x2"):
            getattr(a, op)(b)
        assert a.tolist() == [[1, 2, 3], [4, 5, 6]]

    def test_dimension_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            Matrix(1, 2).add(Matrix(2, 1))

    def test_non_matrix_operand(self, matrix_a):
        with pytest.raises(TypeError):
            matrix_a.add([[1, 2], [3, 4]])

    def test_addn(self, matrix_a, granularity):
        matrix_a.addn(0.5)
        assert_matrix_equal(matrix_a, [[1.5, 2.5], [3.5, 4.5]])

    def test_scale(self, matrix_a, granularity):
        matrix_a.scale(-2)
        assert_matrix_equal(matrix_a, [[-2, -4], [-6, -8]])

    def test_scale_one_and_addn_zero_are_noops(self, random_matrix, granularity):
        original = random_matrix.to_numpy()
        random_matrix.scale(1)
        random_matrix.addn(0)
        np.testing.assert_array_equal(random_matrix.to_numpy(), original)


class TestMatrixString:
    """Test the text rendering."""

    def test_render_1x2(self):
        m = Matrix.from_list([[1.5, -2.25]])
        assert str(m) == "1.500" + " " * 10 + "-2.250" + " " * 9 + "\n"

    def test_render_rows(self, matrix_a):
        lines = str(matrix_a).split("\n")
        assert lines[-1] == ""
        assert len(lines) == 3
        assert lines[0] == f"{1.0:<15.3f}{2.0:<15.3f}"
        assert lines[1] == f"{3.0:<15.3f}{4.0:<15.3f}"

    def test_render_wide_value_not_truncated(self):
        m = Matrix.from_list([[123456789012.5]])
        assert str(m) == "123456789012.500\n"

    def test_render_empty(self):
        assert str(Matrix(0, 0)) == ""
        assert str(Matrix(2, 0)) == "\n\n"

    def test_render_non_finite(self):
        """NaN and infinities use Python's float formatting."""
        m = Matrix.from_list([[float("nan"), float("inf"), float("-inf")]])
        assert str(m) == "nan" + " " * 12 + "inf" + " " * 12 + "-inf" + " " * 11 + "\n"

    def test_render_format_config(self, matrix_a):
        with get_config().local(format=FormatConfig(width=6, precision=1)):
            assert str(matrix_a) == "1.0   2.0   \n3.0   4.0   \n"
        assert str(matrix_a).startswith("1.000" + " " * 10)

    def test_repr(self):
        assert repr(Matrix(2, 3)) == "<Matrix 2x3 [shared]>"
        assert repr(Matrix(1, 1, shared=False)) == "<Matrix 1x1 [unshared]>"
