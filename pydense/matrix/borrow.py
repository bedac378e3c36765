"""
Runtime borrow checking for shared buffers.

Python has no borrow checker, so the aliasing rule for views is
validated at runtime: over any overlapping region of a buffer there may be
many live immutable views or one live mutable view, never both, and
nobody may write into a region another live view can see.

Each physical buffer carries one BorrowRegistry. Views register on
creation and drop out automatically when garbage collected (weak
references). A handle is exempt from conflicts with its own ancestors,
which is what lets a mutable view hand out narrower reborrows.

Overlap is decided on spans, the bounding interval [first, last] of
buffer indices a handle can reach. Spans are conservative: two disjoint
strided regions with interleaved columns may still be reported as
overlapping.

Checking is skipped entirely when disabled in pydense.core.config.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple
from weakref import ref

from pydense.core.config import get_config
from pydense.core.exceptions import BorrowError

Span = Optional[Tuple[int, int]]


def spans_overlap(a: Span, b: Span) -> bool:
    """True if two inclusive index intervals share at least one index."""
    if a is None or b is None:
        return False
    return a[0] <= b[1] and b[0] <= a[1]


class BorrowRegistry:
    """
    Live views over one physical buffer.

    Entries are keyed by handle identity; the weak reference callback
    removes an entry as soon as its handle is collected.
    """

    __slots__ = ("_live",)

    def __init__(self):
        self._live: dict[int, tuple[ref, bool, Span]] = {}

    def __len__(self) -> int:
        return sum(1 for entry in self._live.values() if entry[0]() is not None)

    def register(self, handle, mutable: bool, span: Span) -> None:
        """Record a newly created view."""
        key = id(handle)
        live = self._live

        def _release(_ref, key=key, live=live):
            live.pop(key, None)

        live[key] = (ref(handle, _release), mutable, span)

    def release(self, handle) -> None:
        """Forget a view before it is collected (moved-from handles)."""
        self._live.pop(id(handle), None)

    def check_view(self, span: Span, mutable: bool, exempt: Iterable[int]) -> None:
        """
        Validate creation of a view over span.

        Args:
            span: Span of the view about to be created
            mutable: Whether the new view is mutable
            exempt: Identities of the new view's ancestors

        Raises:
            BorrowError: If a conflicting live view overlaps the span
        """
        if not get_config().borrow_checking or span is None:
            return
        exempt = set(exempt)
        for key, (handle_ref, live_mutable, live_span) in list(self._live.items()):
            if key in exempt or handle_ref() is None:
                continue
            if not (mutable or live_mutable):
                continue
            if spans_overlap(span, live_span):
                requested = "view_mut" if mutable else "view"
                conflicting = "mutable view" if live_mutable else "immutable view"
                raise BorrowError(
                    f"cannot create {'mutable' if mutable else 'immutable'} view over "
                    f"buffer indices {span}: a live {conflicting} covers {live_span}",
                    requested=requested,
                    conflicting=conflicting,
                )

    def check_write(self, span: Span, exempt: Iterable[int]) -> None:
        """
        Validate a write through a handle covering span.

        Args:
            span: Span of the writing handle
            exempt: Identities of the writing handle and its ancestors

        Raises:
            BorrowError: If any other live view overlaps the span
        """
        if not get_config().borrow_checking or span is None:
            return
        exempt = set(exempt)
        for key, (handle_ref, live_mutable, live_span) in list(self._live.items()):
            if key in exempt or handle_ref() is None:
                continue
            if spans_overlap(span, live_span):
                conflicting = "mutable view" if live_mutable else "immutable view"
                raise BorrowError(
                    f"cannot write buffer indices {span}: a live {conflicting} "
                    f"covers {live_span}",
                    requested="write",
                    conflicting=conflicting,
                )

    def __repr__(self) -> str:
        return f"BorrowRegistry(live={len(self)})"
