"""
Tests for equality, approximate comparison and text rendering.
"""

import numpy as np
import pytest

from pydense import ArrayAccessor, Matrix, format_matrix
from pydense.core.exceptions import ValidationError


# ═══════════════════════════════════════════════════════════════════════
# Equality
# ═══════════════════════════════════════════════════════════════════════


class TestEquality:

    def test_equal_values(self, seq_2x4):
        assert seq_2x4 == Matrix(2, 4).fill_from_sequence(range(8))

    def test_shape_mismatch_is_unequal(self):
        assert Matrix(2, 3) != Matrix(3, 2)
        assert not (Matrix(1, 4) == Matrix(4, 1))

    def test_owned_vs_view(self, random_4x4):
        assert random_4x4.as_view() == random_4x4
        assert random_4x4 == random_4x4.as_view()

    def test_transposed_layouts_compare_logically(self, seq_2x4):
        physical = Matrix.from_array(seq_2x4.to_numpy().T)
        assert seq_2x4.T == physical

    def test_nan_never_equal(self):
        m = Matrix.from_array([[float("nan")]])
        assert m != m.clone()

    def test_negative_zero_equal(self):
        assert -Matrix(2, 2) == Matrix(2, 2)

    def test_against_accessor(self):
        assert Matrix.from_array([[1, 2]]) == ArrayAccessor([[1, 2]])
        assert Matrix.from_array([[1, 2]]) == [[1, 2]]

    def test_non_matrix_is_unequal(self, eye3):
        assert eye3 != 1.0
        assert eye3 != "eye"


class TestEqualityNeverRaises:
    """Operands that cannot be read as a 2-D matrix compare unequal."""

    @pytest.mark.parametrize("other", [
        np.zeros(3),
        np.zeros((3, 1, 1)),
        np.array(["a", "b"]),
        [[1.0], [2.0, 3.0]],
        [["a"], ["b"], ["c"]],
    ])
    def test_unequal(self, other):
        m = Matrix(3, 1)
        assert (m == other) is False
        assert m != other

    def test_2d_array_still_compared(self):
        assert Matrix(3, 1) == np.zeros((3, 1))


class TestAllclose:

    def test_within_tolerance(self, eye3):
        nudged = eye3 + 1e-15
        assert nudged != eye3
        assert nudged.allclose(eye3)

    def test_outside_tolerance(self, eye3):
        assert not (eye3 + 1e-6).allclose(eye3)

    def test_custom_tolerance(self, eye3):
        assert (eye3 + 1e-6).allclose(eye3, atol=1e-5)

    def test_shape_mismatch(self):
        assert not Matrix(2, 2).allclose(Matrix(2, 3))


# ═══════════════════════════════════════════════════════════════════════
# Display
# ═══════════════════════════════════════════════════════════════════════


class TestDisplay:

    def test_str_identity(self):
        text = str(Matrix(2, 2).fill_identity())
        assert text == (
            "[\n"
            "  1.000e+00,  0.000e+00,\n"
            "  0.000e+00,  1.000e+00,\n"
            "]"
        )

    def test_logical_row_order(self, seq_2x4):
        lines = str(seq_2x4.T).splitlines()
        assert len(lines) == 6
        assert lines[1] == "  0.000e+00,  4.000e+00,"

    def test_precision(self):
        m = Matrix.from_array([[1.23456]])
        assert m.to_string(1) == "[\n  1.2e+00,\n]"
        assert format_matrix(m, 5) == "[\n  1.23456e+00,\n]"

    def test_format_spec(self):
        m = Matrix.from_array([[-2.5]])
        assert format(m, ".2e") == "[\n  -2.50e+00,\n]"
        assert f"{m:.0}" == "[\n  -2e+00,\n]"
        assert f"{m}" == str(m)

    def test_bad_format_spec(self, eye3):
        with pytest.raises(ValueError, match="format specifier"):
            format(eye3, "d")

    def test_negative_precision(self, eye3):
        with pytest.raises(ValidationError):
            eye3.to_string(-1)

    def test_empty(self):
        assert str(Matrix(0, 0)) == "[\n]"
