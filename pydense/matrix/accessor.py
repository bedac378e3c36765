"""
Accessor adapters for right-hand operands.

The operator algebra only needs a shape and an element getter from its
right operand (the MatrixAccessor protocol). Matrix satisfies it directly;
ArrayAccessor lets a plain 2-D array take part without first being copied
into a Matrix.
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydense.core.precision import FP
from pydense.core.protocols import MatrixAccessor
from pydense.core.validation import check_2d, check_array, check_index


class ArrayAccessor:
    """
    Read-only MatrixAccessor over a 2-D array-like.

    The array is validated and converted to FP once, then made read-only.
    Row-major input is fine; the accessor is indexed logically.
    """

    __slots__ = ("_array",)

    def __init__(self, array: ArrayLike, name: str = "array"):
        data = check_array(array, name)
        check_2d(data, name)
        data = data.view()
        data.flags.writeable = False
        self._array = data

    @property
    def shape(self) -> tuple[int, int]:
        return self._array.shape

    @property
    def array(self) -> NDArray[np.float64]:
        """Validated read-only array."""
        return self._array

    def get(self, row: int, col: int) -> float:
        r, c = check_index(row, col, self.shape)
        return float(self._array[r, c])

    def __repr__(self) -> str:
        return f"ArrayAccessor(shape={self.shape})"


def is_scalar(value: Any) -> bool:
    """True for real scalars (Python or numpy), which broadcast to every cell."""
    return isinstance(value, numbers.Real)


def try_accessor(obj: Any) -> MatrixAccessor | None:
    """
    Coerce obj to a MatrixAccessor, or return None if it is not matrix-like.

    Matrix and protocol implementers pass through unchanged; numpy arrays
    and nested sequences of rank 2 are wrapped in ArrayAccessor.
    """
    if isinstance(obj, MatrixAccessor):
        return obj
    if isinstance(obj, np.ndarray) or (
        isinstance(obj, (list, tuple)) and obj and isinstance(obj[0], (list, tuple))
    ):
        return ArrayAccessor(obj, "other")
    return None


def as_accessor(obj: Any, name: str = "other") -> MatrixAccessor:
    """
    Coerce obj to a MatrixAccessor.

    Raises:
        TypeError: If obj is neither matrix-like nor array-like
    """
    accessor = try_accessor(obj)
    if accessor is None:
        raise TypeError(
            f"{name}: expected a Matrix, MatrixAccessor or 2-D array, "
            f"got {type(obj).__name__}"
        )
    return accessor


def materialize(accessor: MatrixAccessor) -> NDArray[np.float64]:
    """
    Logical 2-D array of an accessor's values, for vectorized kernels.

    Matrix and ArrayAccessor are returned as views without copying; any
    other implementer is read cell by cell through get().
    """
    from pydense.matrix.matrix import Matrix

    if isinstance(accessor, Matrix):
        return accessor.window()
    if isinstance(accessor, ArrayAccessor):
        return accessor.array
    nrows, ncols = accessor.shape
    out = np.empty((nrows, ncols), dtype=FP)
    for c in range(ncols):
        for r in range(nrows):
            out[r, c] = accessor.get(r, c)
    return out
