"""
Tests for the operator algebra.

Validates:
    - Negation, addition, subtraction, scalar and matrix multiplication, division
    - Compound operators mutate the left operand in place
    - Non-compound operators never mutate a reference operand
    - Scalar-on-the-left forms
    - Shape mismatches raise instead of truncating
"""

import numpy as np
import pytest

from pydense import ArrayAccessor, Matrix
from pydense.core.exceptions import InvalidOperationError, ShapeMismatchError


@pytest.fixture
def a():
    return Matrix.from_array([[1.0, 2.0], [3.0, 4.0]])


@pytest.fixture
def ones():
    return Matrix(2, 2).fill_constant(1.0)


# ═══════════════════════════════════════════════════════════════════════
# Negation
# ═══════════════════════════════════════════════════════════════════════


class TestNeg:

    def test_identity(self):
        assert -Matrix(2, 2).fill_identity() == Matrix.from_array([[-1, 0], [0, -1]])

    def test_reference_operand_untouched(self, a):
        neg = -a
        assert neg == Matrix.from_array([[-1, -2], [-3, -4]])
        assert a[0, 0] == 1.0

    def test_view_operand(self, a):
        assert -a.T == Matrix.from_array([[-1, -3], [-2, -4]])


# ═══════════════════════════════════════════════════════════════════════
# Addition and subtraction
# ═══════════════════════════════════════════════════════════════════════


class TestAddSub:

    def test_add_matrices(self, ones):
        eye = Matrix(2, 2).fill_identity()
        assert eye + ones == Matrix.from_array([[2, 1], [1, 2]])

    def test_add_zero(self, random_4x4):
        assert random_4x4 + Matrix(4, 4) == random_4x4

    @pytest.mark.parametrize("rows, cols", [(1, 1), (2, 5), (0, 3)])
    def test_add_negation_is_zero(self, gen, rows, cols):
        m = Matrix(rows, cols).fill_random(gen)
        assert m + (-m) == Matrix(rows, cols)

    def test_add_scalar(self, a):
        assert a + 1.0 == Matrix.from_array([[2, 3], [4, 5]])

    def test_sub(self, a, ones):
        assert a - ones == Matrix.from_array([[0, 1], [2, 3]])

    def test_sub_scalar(self, a):
        assert a - 1 == Matrix.from_array([[0, 1], [2, 3]])

    def test_add_array_operand(self, a):
        assert a + np.ones((2, 2)) == Matrix.from_array([[2, 3], [4, 5]])
        assert a + ArrayAccessor([[1, 1], [1, 1]]) == a + 1.0

    def test_add_transposed_view(self, a):
        assert a + a.T == Matrix.from_array([[2, 5], [5, 8]])

    def test_operands_untouched(self, a, ones):
        a + ones
        a - ones
        assert a == Matrix.from_array([[1, 2], [3, 4]])
        assert ones == Matrix(2, 2).fill_constant(1.0)

    def test_shape_mismatch(self, a):
        with pytest.raises(ShapeMismatchError, match="add"):
            a + Matrix(2, 3)
        with pytest.raises(ShapeMismatchError, match="subtract"):
            a - Matrix(3, 2)

    def test_unsupported_operand(self, a):
        with pytest.raises(TypeError):
            a + "x"


class TestCompoundAddSub:

    def test_iadd_in_place(self, a, ones):
        target = a
        a += ones
        assert a is target
        assert a == Matrix.from_array([[2, 3], [4, 5]])

    def test_isub_scalar(self, a):
        a -= 1.0
        assert a == Matrix.from_array([[0, 1], [2, 3]])

    def test_iadd_through_mutable_view(self):
        m = Matrix(3, 3)
        view = m.slice_mut((0, 2), (1, 3))
        view += 2.0
        del view
        assert m == Matrix.from_array([[0, 2, 2], [0, 2, 2], [0, 0, 0]])

    def test_iadd_through_immutable_view(self, a):
        view = a.as_view()
        with pytest.raises(InvalidOperationError):
            view += 1.0

    def test_iadd_shape_mismatch_leaves_target(self, a):
        with pytest.raises(ShapeMismatchError):
            a += Matrix(1, 2)
        assert a == Matrix.from_array([[1, 2], [3, 4]])


# ═══════════════════════════════════════════════════════════════════════
# Multiplication
# ═══════════════════════════════════════════════════════════════════════


class TestMul:

    def test_scalar(self, a):
        assert a * 2.0 == Matrix.from_array([[2, 4], [6, 8]])

    def test_identity_times_matrix(self):
        m = Matrix(3, 5).fill_by(lambda r, c: r - 2 * c)
        assert Matrix(3, 3).fill_identity() * m == m

    def test_matmul_values(self, a):
        np.testing.assert_array_equal((a * a).to_numpy(), [[7, 10], [15, 22]])

    def test_matmul_operator_alias(self, a):
        assert a @ a == a * a

    def test_rectangular_shapes(self, seq_2x4):
        assert (seq_2x4 * seq_2x4.T).size() == (2, 2)
        assert (seq_2x4.T * seq_2x4).size() == (4, 4)

    def test_matmul_with_array(self, a):
        assert a * np.eye(2) == a

    def test_matmul_allocates(self, a):
        product = a * Matrix(2, 2).fill_identity()
        assert not np.shares_memory(product.window(), a.window())

    def test_inner_dimension_mismatch(self, seq_2x4):
        with pytest.raises(ShapeMismatchError) as exc_info:
            seq_2x4 * seq_2x4
        assert exc_info.value.operation == "matmul"
        assert exc_info.value.expected == 4
        assert exc_info.value.actual == 2

    def test_matmul_scalar_rejected(self, a):
        with pytest.raises(TypeError):
            a @ 2.0

    def test_imul_scalar(self, a):
        a *= 3
        assert a == Matrix.from_array([[3, 6], [9, 12]])

    def test_imul_matrix_rejected(self, a):
        with pytest.raises(InvalidOperationError, match="in-place matrix multiplication"):
            a *= a


# ═══════════════════════════════════════════════════════════════════════
# Division
# ═══════════════════════════════════════════════════════════════════════


class TestDiv:

    def test_scalar(self, a):
        assert a / 2 == Matrix.from_array([[0.5, 1], [1.5, 2]])

    def test_itruediv(self, a):
        a /= 4.0
        assert a[1, 1] == 1.0

    def test_divide_by_zero_warns(self, a):
        with pytest.warns(RuntimeWarning, match="divided by zero"):
            result = a / 0.0
        assert np.all(np.isinf(result.to_numpy()))

    def test_zero_over_zero_is_nan(self):
        with pytest.warns(RuntimeWarning):
            result = Matrix(1, 1) / 0
        assert np.isnan(result[0, 0])

    def test_matrix_divisor_unsupported(self, a):
        with pytest.raises(TypeError):
            a / a

    def test_scalar_over_matrix_unsupported(self, a):
        with pytest.raises(TypeError):
            2.0 / a


# ═══════════════════════════════════════════════════════════════════════
# Scalar on the left
# ═══════════════════════════════════════════════════════════════════════


class TestScalarLeft:

    def test_radd(self, a):
        assert 1.0 + a == a + 1.0

    def test_rsub(self, a):
        assert 10 - a == Matrix.from_array([[9, 8], [7, 6]])
        assert a[0, 0] == 1.0

    def test_rmul(self, a):
        assert 2 * a == a * 2

    def test_numpy_scalar(self, a):
        result = np.float64(2.0) * a
        assert isinstance(result, Matrix)
        assert result == a * 2
