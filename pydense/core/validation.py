"""
Input validation utilities for PyDense.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No truncation or padding to make shapes agree
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers
import operator

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pydense.core.exceptions import (
    OutOfRangeError,
    ShapeMismatchError,
    ValidationError,
)
from pydense.core.precision import FP


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with FP dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: complex dtype {result.dtype}, expected real data"
        )

    if result.dtype != FP:
        result = result.astype(FP)

    return result


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        ValidationError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise ValidationError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 2-dimensional.

    Raises:
        ValidationError: If array is not 2D
    """
    check_ndim(array, 2, name)


def check_dimension(value: Any, name: str) -> int:
    """
    Validate a matrix extent (number of rows or columns).

    Args:
        value: Candidate extent
        name: Parameter name for error messages

    Returns:
        The extent as a plain int

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name}: expected a non-negative integer, got bool")
    try:
        extent = operator.index(value)
    except TypeError as e:
        raise ValidationError(
            f"{name}: expected a non-negative integer, got {type(value).__name__}"
        ) from e
    if extent < 0:
        raise ValidationError(f"{name}: must be non-negative, got {extent}")
    return extent


def check_scalar(value: Any, name: str) -> float:
    """
    Validate a real scalar that is broadcast to every cell.

    Sequences and arrays are rejected rather than broadcast.

    Returns:
        The value as a plain float

    Raises:
        ValidationError: If value is not a real number
    """
    if not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real scalar, got {type(value).__name__}"
        )
    return float(value)


def check_same_shape(
    left: tuple[int, int],
    right: tuple[int, int],
    operation: str,
) -> None:
    """
    Verify two logical shapes are identical.

    Raises:
        ShapeMismatchError: If shapes differ
    """
    if tuple(left) != tuple(right):
        raise ShapeMismatchError(
            f"{operation}: shape mismatch, left is {tuple(left)}, right is {tuple(right)}",
            operation=operation,
            expected=tuple(left),
            actual=tuple(right),
        )


def check_index(row: Any, col: Any, shape: tuple[int, int]) -> tuple[int, int]:
    """
    Validate a logical (row, col) element index.

    Negative indices are not wrapped; they are out of range.

    Returns:
        (row, col) as plain ints

    Raises:
        OutOfRangeError: If either component lies outside the logical shape
    """
    try:
        r = operator.index(row)
        c = operator.index(col)
    except TypeError as e:
        raise OutOfRangeError(
            f"index ({row!r}, {col!r}) must be a pair of integers",
            index=(row, col),
            bounds=shape,
        ) from e
    nrows, ncols = shape
    if not (0 <= r < nrows and 0 <= c < ncols):
        raise OutOfRangeError(
            f"index ({r}, {c}) out of range for shape {shape}",
            index=(r, c),
            bounds=shape,
        )
    return r, c
