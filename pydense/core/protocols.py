"""
Core protocols for PyDense.

These define structural interfaces the matrix layer is written against.
We use Protocol (structural typing) rather than ABC (nominal typing) so
that third-party matrix-like objects can take part in the operator
algebra without inheriting from anything in this package.

Design Principles:
    - Minimal contracts: prescribe only what every implementation needs
    - Read-only where possible: mutation goes through Matrix itself
"""

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class View(Protocol):
    """
    Storage access interface shared by the three storage kinds.

    A Matrix handle never touches its buffer directly; it asks its
    storage. The set of implementations is closed: OwnedBuffer,
    BorrowedView and BorrowedViewMut in pydense.matrix.storage.
    """

    def get_ref(self) -> NDArray[np.float64]:
        """Buffer for reading. Never written through."""
        ...

    def get_mut(self) -> NDArray[np.float64]:
        """
        Buffer for writing.

        Raises:
            InvalidOperationError: For immutable storage
        """
        ...

    def get_len(self) -> int:
        """Length of the whole underlying buffer."""
        ...

    def take_owned(self) -> NDArray[np.float64]:
        """
        Surrender the buffer to a new owner.

        Raises:
            InvalidOperationError: For borrowed storage
        """
        ...

    def is_own(self) -> bool:
        """True only for owning storage."""
        ...


@runtime_checkable
class MatrixAccessor(Protocol):
    """
    Read-only capability every right-hand operand must offer.

    Implemented by Matrix (owned or borrowed) and by ArrayAccessor.
    Operators, assign, inner_product and equality are written purely
    against this protocol, so any implementer can be passed to them.
    """

    @property
    def shape(self) -> tuple[int, int]:
        """Logical (rows, cols)."""
        ...

    def get(self, row: int, col: int) -> float:
        """Element at logical (row, col)."""
        ...
