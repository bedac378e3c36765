"""
Range resolution for the slicing engine.

A range argument may be:
    None              unbounded, the whole axis
    int i             the single index i
    slice(a, b)       half-open, either end may be None; step must be 1
    range(a, b)       half-open; step must be 1
    (a, b)            half-open pair, either end may be None

Ranges are resolved against the logical extent of one axis. Negative
values are not wrapped; they are out of range like any other index
outside [0, extent].
"""

from __future__ import annotations

import operator
from typing import Any, Union

from pydense.core.exceptions import InvalidOperationError, OutOfRangeError

RangeLike = Union[None, int, slice, range, tuple]


def _as_int(value: Any, axis: str, spec: Any, extent: int) -> int:
    try:
        return operator.index(value)
    except TypeError as e:
        raise OutOfRangeError(
            f"{axis} range {spec!r}: bounds must be integers or None",
            index=spec,
            bounds=extent,
        ) from e


def resolve_range(spec: RangeLike, extent: int, axis: str = "axis") -> tuple[int, int]:
    """
    Resolve a range argument to (start, stop) within [0, extent].

    Args:
        spec: Range argument (see module docstring)
        extent: Logical length of the axis
        axis: 'row' or 'col', used in error messages

    Returns:
        (start, stop) with 0 <= start <= stop <= extent

    Raises:
        OutOfRangeError: If the range leaves [0, extent] or start > stop
        InvalidOperationError: If a step other than 1 is given
    """
    if spec is None:
        return 0, extent

    if isinstance(spec, (slice, range)):
        if spec.step not in (None, 1):
            raise InvalidOperationError(
                f"{axis} range {spec!r}: strided slicing is not supported (step must be 1)"
            )
        start, stop = spec.start, spec.stop
    elif isinstance(spec, tuple):
        if len(spec) != 2:
            raise OutOfRangeError(
                f"{axis} range {spec!r}: expected a (start, stop) pair",
                index=spec,
                bounds=extent,
            )
        start, stop = spec
    else:
        index = _as_int(spec, axis, spec, extent)
        start, stop = index, index + 1

    start = 0 if start is None else _as_int(start, axis, spec, extent)
    stop = extent if stop is None else _as_int(stop, axis, spec, extent)

    if not (0 <= start <= stop <= extent):
        raise OutOfRangeError(
            f"{axis} range [{start}, {stop}) out of bounds for extent {extent}",
            index=(start, stop),
            bounds=extent,
        )
    return start, stop
