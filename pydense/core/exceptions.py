"""
Exception hierarchy for PyDense.

All exceptions inherit from PyDenseError to allow catching any
library-specific error. Every one of them signals a programmer error
(a call outside the operation's contract), never a recoverable runtime
condition.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never silently truncate, pad or reshape to make a call succeed
"""


class PyDenseError(Exception):
    """Base exception for all PyDense errors."""
    pass


class ValidationError(PyDenseError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks
    (negative dimensions, non-numeric arrays, wrong dimensionality).
    """
    pass


class ShapeMismatchError(ValidationError):
    """
    Operand shapes are incompatible for the requested operation.

    Raised by assign, compound add/subtract, inner_product and matrix
    multiplication. Equality never raises this; it compares unequal.

    Attributes:
        operation: Name of the operation that rejected the operands
        expected: Shape (or shared dimension) the operation required
        actual: Shape (or dimension) it received
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        expected: tuple[int, ...] | int | None = None,
        actual: tuple[int, ...] | int | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.expected = expected
        self.actual = actual


class OutOfRangeError(ValidationError):
    """
    Element or slice index lies outside the logical bounds.

    Attributes:
        index: The offending index or range
        bounds: The logical extent(s) it was checked against
    """

    def __init__(
        self,
        message: str,
        index: object = None,
        bounds: tuple[int, ...] | int | None = None,
    ):
        super().__init__(message)
        self.index = index
        self.bounds = bounds


class InvalidOperationError(PyDenseError):
    """
    Operation is not permitted on this handle.

    Examples: requesting mutable access through an immutable view,
    clone_to_diagonal on a source with more than one column, using a
    handle whose storage was moved out, in-place matrix multiplication.
    """
    pass


class BorrowError(InvalidOperationError):
    """
    Aliasing discipline violated.

    A buffer may carry any number of live immutable views or a single
    live mutable view over an overlapping region, never both.

    Attributes:
        requested: 'view', 'view_mut' or 'write'
        conflicting: Storage kind of the live view that blocked the request
    """

    def __init__(
        self,
        message: str,
        requested: str | None = None,
        conflicting: str | None = None,
    ):
        super().__init__(message)
        self.requested = requested
        self.conflicting = conflicting
