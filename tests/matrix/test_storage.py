"""
Tests for the three storage kinds behind a Matrix handle.
"""

import numpy as np
import pytest

from pydense.core.exceptions import InvalidOperationError
from pydense.core.protocols import View
from pydense.matrix.storage import (
    BorrowedView,
    BorrowedViewMut,
    OwnedBuffer,
    StorageKind,
)


@pytest.fixture
def owned():
    return OwnedBuffer(np.arange(6.0))


class TestStorageKinds:

    def test_all_satisfy_view_protocol(self, owned):
        assert isinstance(owned, View)
        assert isinstance(owned.borrow(), View)
        assert isinstance(owned.borrow_mut(), View)

    def test_kinds(self, owned):
        assert owned.kind is StorageKind.OWNED
        assert owned.borrow().kind is StorageKind.BORROWED
        assert owned.borrow_mut().kind is StorageKind.BORROWED_MUT

    def test_only_owned_is_own(self, owned):
        assert owned.is_own()
        assert not owned.borrow().is_own()
        assert not owned.borrow_mut().is_own()

    def test_borrows_share_registry(self, owned):
        assert owned.borrow().registry is owned.registry
        assert owned.borrow_mut().borrow().registry is owned.registry

    def test_zeros(self):
        buf = OwnedBuffer.zeros(4)
        assert buf.get_len() == 4
        assert buf.get_ref().dtype == np.float64


class TestOwnedBuffer:

    def test_take_owned_returns_buffer(self, owned):
        assert owned.take_owned() is owned.get_ref()

    def test_get_mut_writes_visible_to_borrows(self, owned):
        view = owned.borrow()
        owned.get_mut()[0] = 42.0
        assert view.get_ref()[0] == 42.0


class TestBorrowedView:

    def test_read_only_buffer(self, owned):
        with pytest.raises(ValueError):
            owned.borrow().get_ref()[0] = 1.0

    def test_get_mut_refused(self, owned):
        with pytest.raises(InvalidOperationError, match="immutable"):
            owned.borrow().get_mut()

    def test_take_owned_refused(self, owned):
        with pytest.raises(InvalidOperationError, match="ownership"):
            owned.borrow().take_owned()

    def test_borrow_mut_refused(self, owned):
        with pytest.raises(InvalidOperationError):
            owned.borrow().borrow_mut()

    def test_len_is_whole_buffer(self, owned):
        assert owned.borrow().get_len() == 6


class TestBorrowedViewMut:

    def test_writes_land_in_owner(self, owned):
        owned.borrow_mut().get_mut()[5] = -1.0
        assert owned.get_ref()[5] == -1.0

    def test_take_owned_refused(self, owned):
        with pytest.raises(InvalidOperationError, match="mutable view"):
            owned.borrow_mut().take_owned()

    def test_reborrow(self, owned):
        assert isinstance(owned.borrow_mut().borrow_mut(), BorrowedViewMut)
        assert isinstance(owned.borrow_mut().borrow(), BorrowedView)
