"""
Matrix: dense column-major matrix handle.

A handle is a window onto a flat buffer:

    physical_rows, physical_cols   extents before transposition
    offset                         buffer index of logical (0, 0)
    stride                         buffer distance between physical columns
    transposed                     swap logical rows and columns
    storage                        OwnedBuffer | BorrowedView | BorrowedViewMut

Element (r, c) lives at offset + stride*c + r, or offset + stride*r + c
when transposed. Slicing and transposing build a new handle over the same
buffer in O(1); nothing is copied until a clone or an owned result is
asked for.

Construction:
    Matrix(rows, cols)              zero-filled, owned
    Matrix.new_like(other)          zero-filled, same logical shape
    Matrix.new_column_vector(n)     zero-filled (n, 1)
    Matrix.from_array(array)        copy of a 1-D or 2-D array-like
"""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydense.core.exceptions import InvalidOperationError, ValidationError
from pydense.core.precision import (
    DEFAULT_ATOL,
    DEFAULT_DISPLAY_PRECISION,
    DEFAULT_RTOL,
    FP,
    is_close,
)
from pydense.core.validation import (
    check_2d,
    check_array,
    check_dimension,
    check_index,
    check_same_shape,
    check_scalar,
)
from pydense.matrix.accessor import (
    ArrayAccessor,
    as_accessor,
    is_scalar,
    materialize,
    try_accessor,
)
from pydense.matrix.algebra import MatrixAlgebra
from pydense.matrix.borrow import Span
from pydense.matrix.bounds import RangeLike, resolve_range
from pydense.matrix.display import format_matrix, parse_precision
from pydense.matrix.storage import OwnedBuffer, Storage, StorageKind


class Matrix(MatrixAlgebra):
    """
    Dense column-major matrix of FP values.

    Owned matrices and borrowed views share this one type; the storage
    kind decides whether writes are allowed and whether the buffer can be
    handed over. See pydense.matrix.algebra for the operator surface.

    Example:
        >>> a = Matrix(4, 4).fill_identity()
        >>> center = a.slice_mut(slice(1, 3), slice(1, 3))
        >>> center.assign_constant(2.0)
        >>> a[1, 2]
        2.0
    """

    __slots__ = (
        "_nrows",
        "_ncols",
        "_offset",
        "_stride",
        "_transposed",
        "_storage",
        "_parent",
        "_by_value",
        "__weakref__",
    )

    # Matrices compare by value and are mutable
    __hash__ = None
    # Make numpy defer to the reflected operators below
    __array_ufunc__ = None
    # Index with (row, col); there is no single-axis iteration
    __iter__ = None

    def __init__(self, rows: int, cols: int):
        rows = check_dimension(rows, "rows")
        cols = check_dimension(cols, "cols")
        self._init(rows, cols, 0, rows, False, OwnedBuffer.zeros(rows * cols))

    def _init(
        self,
        nrows: int,
        ncols: int,
        offset: int,
        stride: int,
        transposed: bool,
        storage: Optional[Storage],
        parent: Optional[Matrix] = None,
        by_value: bool = False,
    ) -> None:
        self._nrows = nrows
        self._ncols = ncols
        self._offset = offset
        self._stride = stride
        self._transposed = transposed
        self._storage = storage
        self._parent = parent
        self._by_value = by_value

    @classmethod
    def _make(cls, *args, **kwargs) -> Matrix:
        obj = cls.__new__(cls)
        obj._init(*args, **kwargs)
        return obj

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls, rows: int, cols: int) -> Matrix:
        """Zero-filled owned matrix of shape (rows, cols)."""
        return cls(rows, cols)

    @classmethod
    def new_like(cls, other: Any) -> Matrix:
        """Zero-filled owned matrix with the logical shape of other."""
        rows, cols = as_accessor(other, "other").shape
        return cls(rows, cols)

    @classmethod
    def new_column_vector(cls, n: int) -> Matrix:
        """Zero-filled owned (n, 1) matrix."""
        return cls(n, 1)

    @classmethod
    def from_array(cls, array: ArrayLike) -> Matrix:
        """
        Owned copy of a 1-D or 2-D array-like.

        1-D input becomes a column vector. Values are converted to FP.

        Raises:
            ValidationError: For non-numeric input or more than 2 dimensions
        """
        data = check_array(array, "array")
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        check_2d(data, "array")
        out = cls(*data.shape)
        out._write_window()[...] = data
        return out

    # =========================================================================
    # Shape and storage queries
    # =========================================================================

    def size(self) -> tuple[int, int]:
        """Logical (rows, cols), honoring the transpose flag."""
        if self._transposed:
            return self._ncols, self._nrows
        return self._nrows, self._ncols

    @property
    def shape(self) -> tuple[int, int]:
        """Logical (rows, cols). Same as size()."""
        return self.size()

    @property
    def nrows(self) -> int:
        return self.size()[0]

    @property
    def ncols(self) -> int:
        return self.size()[1]

    @property
    def stride(self) -> int:
        """Buffer distance between starts of consecutive physical columns."""
        return self._stride

    @property
    def offset(self) -> int:
        """Buffer index of logical (0, 0)."""
        return self._offset

    @property
    def is_transposed(self) -> bool:
        return self._transposed

    @property
    def is_moved(self) -> bool:
        """True once the storage was handed to another handle."""
        return self._storage is None

    @property
    def storage_kind(self) -> StorageKind:
        return self._live_storage().kind

    @property
    def is_owning(self) -> bool:
        return self._live_storage().is_own()

    @property
    def buffer_len(self) -> int:
        """Length of the whole underlying buffer, not just this window."""
        return self._live_storage().get_len()

    # =========================================================================
    # Indexing engine
    # =========================================================================

    def _live_storage(self) -> Storage:
        storage = self._storage
        if storage is None:
            raise InvalidOperationError("matrix was moved; this handle can no longer be used")
        return storage

    def _index(self, row: int, col: int) -> int:
        """Physical buffer index of a validated logical (row, col)."""
        if self._transposed:
            return self._offset + self._stride * row + col
        return self._offset + self._stride * col + row

    def _span(self) -> Span:
        if self._nrows == 0 or self._ncols == 0:
            return None
        last = self._offset + self._stride * (self._ncols - 1) + (self._nrows - 1)
        return self._offset, last

    def _lineage(self) -> set[int]:
        """Identities of this handle and every handle it was derived from."""
        ids = set()
        node = self
        while node is not None:
            ids.add(id(node))
            node = node._parent
        return ids

    def _grid(self, buffer: NDArray[np.float64]) -> NDArray[np.float64]:
        """Logical 2-D numpy view of this window over buffer."""
        nrows, ncols = self._nrows, self._ncols
        if nrows == 0 or ncols == 0:
            physical = np.empty((nrows, ncols), dtype=FP)
        else:
            stride = self._stride
            col0, row0 = divmod(self._offset, stride)
            columns = buffer.reshape(buffer.shape[0] // stride, stride)
            physical = columns[col0:col0 + ncols, row0:row0 + nrows].T
        return physical.T if self._transposed else physical

    def _check_write(self) -> NDArray[np.float64]:
        """Writable buffer, after access and aliasing checks."""
        storage = self._live_storage()
        buffer = storage.get_mut()
        storage.registry.check_write(self._span(), self._lineage())
        return buffer

    def _write_window(self) -> NDArray[np.float64]:
        return self._grid(self._check_write())

    def window(self) -> NDArray[np.float64]:
        """
        Read-only numpy view of the logical window.

        No data is copied; the view reflects later writes to the buffer.
        """
        grid = self._grid(self._live_storage().get_ref()).view()
        grid.flags.writeable = False
        return grid

    def get(self, row: int, col: int) -> float:
        """Element at logical (row, col)."""
        r, c = check_index(row, col, self.size())
        return float(self._live_storage().get_ref()[self._index(r, c)])

    def set(self, row: int, col: int, value: float) -> None:
        """
        Write the element at logical (row, col).

        Raises:
            OutOfRangeError: Outside the logical shape
            ValidationError: If value is not a real scalar
            InvalidOperationError: Through an immutable view
        """
        r, c = check_index(row, col, self.size())
        value = check_scalar(value, "value")
        self._check_write()[self._index(r, c)] = value

    def __getitem__(self, key):
        row, col = self._split_key(key)
        if isinstance(row, (slice, range)) or isinstance(col, (slice, range)):
            return self.slice(row, col)
        return self.get(row, col)

    def __setitem__(self, key, value) -> None:
        row, col = self._split_key(key)
        if isinstance(row, (slice, range)) or isinstance(col, (slice, range)):
            target = self.slice_mut(row, col)
            if is_scalar(value):
                target.assign_constant(value)
                return
            source = try_accessor(value)
            if source is None:
                # 1-D and ragged input is rejected, never broadcast
                source = ArrayAccessor(value, "value")
            target.assign(source)
            return
        self.set(row, col, value)

    @staticmethod
    def _split_key(key) -> tuple[Any, Any]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError(f"matrix indices must be (row, col) pairs, got {key!r}")
        return key

    # =========================================================================
    # Transpose family
    # =========================================================================

    def transpose(self) -> Matrix:
        """Immutable view with rows and columns swapped. O(1)."""
        return self._derive(self._nrows, self._ncols, self._offset, not self._transposed, False)

    def transpose_mut(self) -> Matrix:
        """Mutable view with rows and columns swapped. O(1)."""
        return self._derive(self._nrows, self._ncols, self._offset, not self._transposed, True)

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def set_transposed(self) -> Matrix:
        """Flip this handle's transpose flag in place; returns self."""
        self._live_storage()
        self._transposed = not self._transposed
        return self

    # =========================================================================
    # Slicing engine
    # =========================================================================

    def _derive(
        self,
        nrows: int,
        ncols: int,
        offset: int,
        transposed: bool,
        mutable: bool,
    ) -> Matrix:
        storage = self._live_storage()
        borrowed = storage.borrow_mut() if mutable else storage.borrow()
        child = self._make(nrows, ncols, offset, self._stride, transposed, borrowed, parent=self)
        span = child._span()
        storage.registry.check_view(span, mutable, self._lineage())
        storage.registry.register(child, mutable, span)
        return child

    def _bounds(self, rows: RangeLike, cols: RangeLike) -> tuple[int, int, int, int]:
        lrows, lcols = self.size()
        row0, row1 = resolve_range(rows, lrows, "row")
        col0, col1 = resolve_range(cols, lcols, "col")
        if self._transposed:
            row0, row1, col0, col1 = col0, col1, row0, row1
        return row0, row1, col0, col1

    def _slice(self, rows: RangeLike, cols: RangeLike, mutable: bool) -> Matrix:
        self._live_storage()
        row0, row1, col0, col1 = self._bounds(rows, cols)
        offset = self._offset + self._stride * col0 + row0
        return self._derive(row1 - row0, col1 - col0, offset, self._transposed, mutable)

    def slice(self, rows: RangeLike = None, cols: RangeLike = None) -> Matrix:
        """
        Immutable view of a sub-block. Zero-copy.

        Args:
            rows: Logical row range (None, int, slice, range or (start, stop))
            cols: Logical column range, same forms

        Raises:
            OutOfRangeError: If a range leaves the logical shape
        """
        return self._slice(rows, cols, False)

    def slice_mut(self, rows: RangeLike = None, cols: RangeLike = None) -> Matrix:
        """Mutable view of a sub-block; writes land in this buffer."""
        return self._slice(rows, cols, True)

    def rows(self, rows: RangeLike) -> Matrix:
        return self.slice(rows, None)

    def cols(self, cols: RangeLike) -> Matrix:
        return self.slice(None, cols)

    def row(self, i: int) -> Matrix:
        return self.slice(i, None)

    def col(self, i: int) -> Matrix:
        return self.slice(None, i)

    def rows_mut(self, rows: RangeLike) -> Matrix:
        return self.slice_mut(rows, None)

    def cols_mut(self, cols: RangeLike) -> Matrix:
        return self.slice_mut(None, cols)

    def row_mut(self, i: int) -> Matrix:
        return self.slice_mut(i, None)

    def col_mut(self, i: int) -> Matrix:
        return self.slice_mut(None, i)

    def as_view(self) -> Matrix:
        return self.slice(None, None)

    def as_view_mut(self) -> Matrix:
        return self.slice_mut(None, None)

    # =========================================================================
    # Ownership conversion and cloning
    # =========================================================================

    def _invalidate(self) -> None:
        storage = self._storage
        if storage is not None and not storage.is_own():
            storage.registry.release(self)
        self._storage = None
        self._parent = None

    def _packed_copy(self) -> Matrix:
        rows, cols = self.size()
        out = type(self)(rows, cols)
        out._write_window()[...] = self.window()
        return out

    def into_owned(self) -> Matrix:
        """
        Convert this handle into an owned matrix (own-if-needed).

        An owning handle hands its buffer over without copying. A view is
        copied into a fresh packed buffer. Either way this handle is
        consumed and can no longer be used.
        """
        storage = self._live_storage()
        if storage.is_own():
            owned = OwnedBuffer(storage.take_owned(), storage.registry)
            out = self._make(
                self._nrows, self._ncols, self._offset, self._stride, self._transposed, owned
            )
        else:
            out = self._packed_copy()
        self._invalidate()
        return out

    def consume(self) -> Matrix:
        """
        Pass this matrix to the next operator by value.

        The returned handle carries the same storage; the next non-compound
        operator applied to it reuses an owned buffer instead of copying it.
        This handle is consumed and can no longer be used.

        Example:
            >>> c = a.consume() + b   # a's buffer becomes c's buffer
        """
        storage = self._live_storage()
        out = self._make(
            self._nrows,
            self._ncols,
            self._offset,
            self._stride,
            self._transposed,
            storage,
            parent=self._parent,
            by_value=True,
        )
        if not storage.is_own():
            mutable = storage.kind is StorageKind.BORROWED_MUT
            storage.registry.release(self)
            storage.registry.register(out, mutable, out._span())
        self._storage = None
        self._parent = None
        return out

    def clone_with_shrink(self) -> Matrix:
        """
        Owned, exactly-sized copy.

        When the buffer holds exactly rows*cols values the whole buffer is
        copied in bulk, keeping stride and transpose flag; otherwise the
        logical window is copied into a packed buffer.
        """
        storage = self._live_storage()
        rows, cols = self.size()
        if storage.get_len() == rows * cols:
            owned = OwnedBuffer(storage.get_ref().copy())
            return self._make(
                self._nrows, self._ncols, self._offset, self._stride, self._transposed, owned
            )
        return self._packed_copy()

    def clone(self) -> Matrix:
        return self.clone_with_shrink()

    def __copy__(self) -> Matrix:
        return self.clone_with_shrink()

    def __deepcopy__(self, memo) -> Matrix:
        return self.clone_with_shrink()

    def clone_to_diagonal(self) -> Matrix:
        """
        Square owned matrix with this column vector on its diagonal.

        Raises:
            InvalidOperationError: If this matrix has more than one column
        """
        rows, cols = self.size()
        if cols != 1:
            raise InvalidOperationError(
                f"clone_to_diagonal: source must be a column vector, got shape {(rows, cols)}"
            )
        out = type(self)(rows, rows)
        diagonal = np.arange(rows)
        out._write_window()[diagonal, diagonal] = self.window()[:, 0]
        return out

    def to_numpy(self) -> NDArray[np.float64]:
        """Fresh 2-D array holding a copy of the logical window."""
        return np.array(self.window(), dtype=FP)

    # =========================================================================
    # Mutation primitives
    # =========================================================================

    def assign_by(self, func: Callable[[int, int], Optional[float]]) -> None:
        """
        Set every cell to func(row, col).

        func is called exactly once per logical cell, walking column by
        column (row index fastest). A None result leaves the cell as is.
        """
        buffer = self._check_write()
        rows, cols = self.size()
        for c in range(cols):
            for r in range(rows):
                value = func(r, c)
                if value is not None:
                    buffer[self._index(r, c)] = value

    def assign_from_sequence(self, values: Iterable[float]) -> None:
        """
        Set cells from values taken in row-major order.

        Missing trailing values become 0; values beyond rows*cols are
        never pulled from the iterable.
        """
        buffer = self._check_write()
        rows, cols = self.size()
        it = iter(values)
        for r in range(rows):
            for c in range(cols):
                buffer[self._index(r, c)] = next(it, 0.0)

    def assign_identity(self) -> None:
        window = self._write_window()
        window[...] = 0.0
        diagonal = np.arange(min(window.shape))
        window[diagonal, diagonal] = 1.0

    def assign_constant(self, value: float) -> None:
        """
        Set every cell to value.

        Raises:
            ValidationError: If value is not a real scalar
        """
        value = check_scalar(value, "value")
        self._write_window()[...] = value

    def assign(self, source: Any) -> None:
        """
        Copy every element of source, which must have the same logical shape.

        Raises:
            ShapeMismatchError: If the shapes differ
        """
        accessor = as_accessor(source, "source")
        check_same_shape(self.size(), accessor.shape, "assign")
        values = materialize(accessor)
        self._write_window()[...] = values

    def fill_by(self, func: Callable[[int, int], Optional[float]]) -> Matrix:
        self.assign_by(func)
        return self

    def fill_from_sequence(self, values: Iterable[float]) -> Matrix:
        self.assign_from_sequence(values)
        return self

    def fill_identity(self) -> Matrix:
        self.assign_identity()
        return self

    def fill_constant(self, value: float) -> Matrix:
        self.assign_constant(value)
        return self

    def fill_random(self, generator) -> Matrix:
        """Fill with samples from a pydense.rng.Xor64, column by column."""
        return self.fill_by(lambda _r, _c: generator.random())

    # =========================================================================
    # Reductions
    # =========================================================================

    def norm_p2_squared(self) -> float:
        """Sum of squared elements."""
        window = self.window()
        return float(np.sum(window * window))

    def norm_p2(self) -> float:
        return math.sqrt(self.norm_p2_squared())

    def trace(self) -> float:
        """Sum of self[i, i] for i below min(rows, cols)."""
        return float(np.trace(self.window()))

    def inner_product(self, other: Any) -> float:
        """
        Sum of elementwise products with other.

        Raises:
            ShapeMismatchError: If the shapes differ
        """
        accessor = as_accessor(other, "other")
        check_same_shape(self.size(), accessor.shape, "inner_product")
        return float(np.sum(self.window() * materialize(accessor)))

    def _extreme(self, ufunc) -> Optional[float]:
        rows, cols = self.size()
        if rows == 0 or cols == 0:
            return None
        window = self.window()
        first = float(window[0, 0])
        if math.isnan(first):
            return first
        # fmax/fmin skip NaN, so only the first cell can yield NaN
        return float(ufunc.reduce(window, axis=None, initial=first))

    def max(self) -> Optional[float]:
        """
        Largest element, or None for a matrix without cells.

        The scan starts from self[0, 0]; NaN in any other cell is skipped.
        """
        return self._extreme(np.fmax)

    def min(self) -> Optional[float]:
        """
        Smallest element, or None for a matrix without cells.

        The scan starts from self[0, 0]; NaN in any other cell is skipped.
        """
        return self._extreme(np.fmin)

    # =========================================================================
    # Equality and display
    # =========================================================================

    def __eq__(self, other: Any) -> bool:
        try:
            accessor = try_accessor(other)
        except ValidationError:
            # Arrays that are not 2-D numeric never equal a matrix
            return False
        if accessor is None:
            return NotImplemented
        if self.size() != tuple(accessor.shape):
            return False
        return bool(np.array_equal(self.window(), materialize(accessor)))

    def allclose(
        self,
        other: Any,
        rtol: float = DEFAULT_RTOL,
        atol: float = DEFAULT_ATOL,
    ) -> bool:
        """Shape equality plus elementwise is_close within tolerances."""
        accessor = as_accessor(other, "other")
        if self.size() != tuple(accessor.shape):
            return False
        return bool(np.all(is_close(self.window(), materialize(accessor), rtol, atol)))

    def to_string(self, precision: int = DEFAULT_DISPLAY_PRECISION) -> str:
        return format_matrix(self, precision)

    def __str__(self) -> str:
        return format_matrix(self)

    def __format__(self, format_spec: str) -> str:
        return format_matrix(self, parse_precision(format_spec))

    def __repr__(self) -> str:
        if self._storage is None:
            return "Matrix(<moved>)"
        return (
            f"Matrix(shape={self.size()}, storage={self._storage.kind.value}, "
            f"transposed={self._transposed})"
        )
