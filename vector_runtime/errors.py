"""Error taxonomy for vector_runtime.

Device failures surface as RuntimeError subclasses; precondition
violations that are programmer errors also derive from ValueError.
"""

from __future__ import annotations


class VectorError(RuntimeError):
    """Base class for all vector_runtime errors."""


class AllocationError(VectorError):
    """Device memory exhausted, or an invalid size/element type was requested."""


class TransferError(VectorError):
    """A host/device copy failed or the destination lacks capacity."""


class SizeMismatchError(VectorError, ValueError):
    """Binary elementwise operation on vectors of unequal logical size."""

    def __init__(self, op: str, left: int, right: int):
        super().__init__(f"{op}: size mismatch ({left} vs {right})")
        self.op = op
        self.left = left
        self.right = right


class OwnershipError(VectorError):
    """Release of a non-owning view, double release, or use after release."""


class StrideError(VectorError, ValueError):
    """Operation requires a unit-stride vector."""
