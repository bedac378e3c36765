"""
Storage kinds behind a Matrix handle.

A handle either owns its buffer or borrows someone else's, immutably or
mutably. The three kinds form a closed set; each one implements the
View protocol so the handle code never branches on the kind itself.

    OwnedBuffer      owns a packed column-major buffer
    BorrowedView     read-only access to another handle's buffer
    BorrowedViewMut  read-write access to another handle's buffer

Every storage over the same physical buffer shares one BorrowRegistry,
which is how the aliasing discipline is enforced across handles.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import NDArray

from pydense.core.exceptions import InvalidOperationError
from pydense.core.precision import FP
from pydense.matrix.borrow import BorrowRegistry


class StorageKind(Enum):
    """Ownership mode of a handle's buffer."""
    OWNED = "owned"
    BORROWED = "borrowed"
    BORROWED_MUT = "borrowed_mut"


def _read_only(buffer: NDArray[np.float64]) -> NDArray[np.float64]:
    view = buffer.view()
    view.flags.writeable = False
    return view


class OwnedBuffer:
    """Owning storage. The only kind that can hand its buffer over."""

    __slots__ = ("_buffer", "registry")

    kind = StorageKind.OWNED

    def __init__(self, buffer: NDArray[np.float64], registry: BorrowRegistry | None = None):
        self._buffer = buffer
        self.registry = registry if registry is not None else BorrowRegistry()

    @classmethod
    def zeros(cls, length: int) -> OwnedBuffer:
        return cls(np.zeros(length, dtype=FP))

    def get_ref(self) -> NDArray[np.float64]:
        return self._buffer

    def get_mut(self) -> NDArray[np.float64]:
        return self._buffer

    def get_len(self) -> int:
        return self._buffer.shape[0]

    def take_owned(self) -> NDArray[np.float64]:
        return self._buffer

    def is_own(self) -> bool:
        return True

    def borrow(self) -> BorrowedView:
        return BorrowedView(self._buffer, self.registry)

    def borrow_mut(self) -> BorrowedViewMut:
        return BorrowedViewMut(self._buffer, self.registry)


class BorrowedView:
    """Immutable borrow. Reads see the owner's buffer; writes are refused."""

    __slots__ = ("_buffer", "registry")

    kind = StorageKind.BORROWED

    def __init__(self, buffer: NDArray[np.float64], registry: BorrowRegistry):
        self._buffer = _read_only(buffer)
        self.registry = registry

    def get_ref(self) -> NDArray[np.float64]:
        return self._buffer

    def get_mut(self) -> NDArray[np.float64]:
        raise InvalidOperationError("cannot borrow immutable view as mutable")

    def get_len(self) -> int:
        return self._buffer.shape[0]

    def take_owned(self) -> NDArray[np.float64]:
        raise InvalidOperationError("cannot take ownership of an immutable view")

    def is_own(self) -> bool:
        return False

    def borrow(self) -> BorrowedView:
        return BorrowedView(self._buffer, self.registry)

    def borrow_mut(self) -> BorrowedViewMut:
        raise InvalidOperationError("cannot borrow immutable view as mutable")


class BorrowedViewMut:
    """Mutable borrow. Writes land in the owner's buffer."""

    __slots__ = ("_buffer", "registry")

    kind = StorageKind.BORROWED_MUT

    def __init__(self, buffer: NDArray[np.float64], registry: BorrowRegistry):
        self._buffer = buffer
        self.registry = registry

    def get_ref(self) -> NDArray[np.float64]:
        return self._buffer

    def get_mut(self) -> NDArray[np.float64]:
        return self._buffer

    def get_len(self) -> int:
        return self._buffer.shape[0]

    def take_owned(self) -> NDArray[np.float64]:
        raise InvalidOperationError("cannot take ownership of a mutable view")

    def is_own(self) -> bool:
        return False

    def borrow(self) -> BorrowedView:
        return BorrowedView(self._buffer, self.registry)

    def borrow_mut(self) -> BorrowedViewMut:
        return BorrowedViewMut(self._buffer, self.registry)


Storage = OwnedBuffer | BorrowedView | BorrowedViewMut
