"""
Arithmetic operator algebra for Matrix.

Compound operators mutate the left operand in place:
    m += x, m -= x      x a same-shaped matrix-like, or a scalar
    m *= s, m /= s      s a scalar

Non-compound operators never mutate what the caller passed in:
    -m, m + x, m - x, m * s, m / s, s + m, s - m, s * m
    m * x, m @ x        matrix multiplication, always a new allocation

Ownership policy for non-compound operators: a left operand passed by
reference (the normal case) is cloned once and the clone is mutated and
returned. A left operand passed by value through Matrix.consume() is
converted with into_owned(), so an owned buffer is reused without any
allocation.

Right operands are anything satisfying MatrixAccessor, or a 2-D array.
"""

from __future__ import annotations

import warnings
from typing import Any

import numpy as np

from pydense.core.exceptions import InvalidOperationError, ShapeMismatchError
from pydense.core.protocols import MatrixAccessor
from pydense.core.validation import check_same_shape
from pydense.matrix.accessor import is_scalar, materialize, try_accessor


def _operand(other: Any) -> float | MatrixAccessor | None:
    """A scalar, an accessor, or None when other is not an operand at all."""
    if is_scalar(other):
        return other
    return try_accessor(other)


def _warn_zero_division(divisor) -> None:
    if divisor == 0:
        warnings.warn(
            "matrix divided by zero; entries become inf or nan",
            RuntimeWarning,
            stacklevel=3,
        )


class MatrixAlgebra:
    """
    Operator mixin for Matrix.

    Relies on the host class for size(), window(), _write_window(),
    clone_with_shrink(), into_owned() and the _by_value flag.
    """

    __slots__ = ()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lhs_result(self):
        """Owned matrix a non-compound operator mutates and returns."""
        if self._by_value:
            return self.into_owned()
        return self.clone_with_shrink()

    def _release_by_value(self) -> None:
        if self._by_value:
            self._invalidate()

    def _elementwise(self, operand, ufunc, operation: str):
        if is_scalar(operand):
            window = self._write_window()
            ufunc(window, operand, out=window)
            return self
        check_same_shape(self.size(), operand.shape, operation)
        values = materialize(operand)
        window = self._write_window()
        ufunc(window, values, out=window)
        return self

    def _matmul(self, accessor: MatrixAccessor):
        rows, inner = self.size()
        other_rows, other_cols = accessor.shape
        if inner != other_rows:
            raise ShapeMismatchError(
                f"matmul: left has {inner} columns but right has {other_rows} rows",
                operation="matmul",
                expected=inner,
                actual=other_rows,
            )
        out = type(self)(rows, other_cols)
        out._write_window()[...] = self.window() @ materialize(accessor)
        self._release_by_value()
        return out

    # =========================================================================
    # Negation
    # =========================================================================

    def __neg__(self):
        out = self._lhs_result()
        window = out._write_window()
        np.negative(window, out=window)
        return out

    # =========================================================================
    # Compound operators
    # =========================================================================

    def __iadd__(self, other):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        return self._elementwise(operand, np.add, "add")

    def __isub__(self, other):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        return self._elementwise(operand, np.subtract, "subtract")

    def __imul__(self, other):
        if is_scalar(other):
            return self._elementwise(other, np.multiply, "multiply")
        if try_accessor(other) is not None:
            raise InvalidOperationError(
                "in-place matrix multiplication is not supported; use m = m * other"
            )
        return NotImplemented

    def __itruediv__(self, other):
        if not is_scalar(other):
            return NotImplemented
        _warn_zero_division(other)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._elementwise(other, np.divide, "divide")

    # =========================================================================
    # Non-compound operators
    # =========================================================================

    def __add__(self, other):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        if not is_scalar(operand):
            check_same_shape(self.size(), operand.shape, "add")
        return self._lhs_result()._elementwise(operand, np.add, "add")

    def __sub__(self, other):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        if not is_scalar(operand):
            check_same_shape(self.size(), operand.shape, "subtract")
        return self._lhs_result()._elementwise(operand, np.subtract, "subtract")

    def __mul__(self, other):
        operand = _operand(other)
        if operand is None:
            return NotImplemented
        if is_scalar(operand):
            return self._lhs_result()._elementwise(operand, np.multiply, "multiply")
        return self._matmul(operand)

    def __matmul__(self, other):
        accessor = try_accessor(other)
        if accessor is None:
            return NotImplemented
        return self._matmul(accessor)

    def __truediv__(self, other):
        if not is_scalar(other):
            return NotImplemented
        _warn_zero_division(other)
        out = self._lhs_result()
        with np.errstate(divide="ignore", invalid="ignore"):
            return out._elementwise(other, np.divide, "divide")

    # =========================================================================
    # Scalar on the left
    # =========================================================================

    def __radd__(self, other):
        if not is_scalar(other):
            return NotImplemented
        return self.__add__(other)

    def __rsub__(self, other):
        if not is_scalar(other):
            return NotImplemented
        # s - m == (-m) + s
        return (-self).__iadd__(other)

    def __rmul__(self, other):
        if not is_scalar(other):
            return NotImplemented
        return self.__mul__(other)
