"""
Dense column-major matrices.

Submodules:
    matrix: Matrix handle (indexing, slicing, ownership, reductions)
    algebra: Operator mixin
    storage: Owned and borrowed storage kinds
    borrow: Runtime aliasing checks for views
    bounds: Range resolution
    accessor: Right-operand adapters
    display: Text rendering
"""

from pydense.matrix.matrix import Matrix
from pydense.matrix.storage import StorageKind
from pydense.matrix.accessor import ArrayAccessor, as_accessor
from pydense.matrix.display import format_matrix

__all__ = [
    "Matrix",
    "StorageKind",
    "ArrayAccessor",
    "as_accessor",
    "format_matrix",
]
