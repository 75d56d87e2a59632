"""Strided view: a (allocation, offset, stride, size) descriptor over device memory."""

from __future__ import annotations

from dataclasses import dataclass

from vector_runtime.backend import DeviceAllocation
from vector_runtime.errors import OwnershipError


@dataclass(frozen=True)
class StridedView:
    """Maps logical index i to element offset + i * stride of an allocation.

    Carries no ownership; the allocation is released through the owning
    vector only. Construction checks that the whole span lies inside the
    allocation.
    """
    allocation: DeviceAllocation
    offset: int
    stride: int
    size: int

    def __post_init__(self):
        if self.stride < 1:
            raise ValueError(f"stride must be >= 1, got {self.stride}")
        if self.size < 0 or self.offset < 0:
            raise ValueError(f"invalid view (offset={self.offset}, size={self.size})")
        if self.end > self.allocation.size:
            raise IndexError(
                f"view [offset={self.offset}, stride={self.stride}, size={self.size}] "
                f"exceeds allocation of {self.allocation.size} elements"
            )

    @property
    def end(self) -> int:
        """One past the last physical element touched."""
        if self.size == 0:
            return self.offset
        return self.offset + (self.size - 1) * self.stride + 1

    @property
    def is_contiguous(self) -> bool:
        return self.stride == 1 or self.size <= 1

    @property
    def address(self) -> int:
        return self.allocation.address + self.offset * self.allocation.dtype.itemsize

    def as_slice(self) -> slice:
        """Slice selecting the logical elements from the allocation's 1-D array."""
        return slice(self.offset, self.end, self.stride)

    def subview(self, offset: int, n: int) -> StridedView:
        """Descriptor for logical elements offset..offset+n-1, same stride."""
        if offset < 0 or n < 0 or offset + n > self.size:
            raise IndexError(f"subview(offset={offset}, n={n}) out of range for size {self.size}")
        return StridedView(self.allocation, self.offset + offset * self.stride, self.stride, n)

    def check_live(self) -> None:
        if self.allocation.released:
            raise OwnershipError("vector memory has already been released")
