"""Abstract backend interfaces for vector storage and element kernels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from vector_runtime.view import StridedView


class DeviceAllocation(ABC):
    """A single contiguous 1-D allocation of device memory."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Capacity in elements."""
        ...

    @property
    @abstractmethod
    def dtype(self) -> np.dtype:
        ...

    @property
    @abstractmethod
    def address(self) -> int:
        """Device address of element 0."""
        ...

    @property
    @abstractmethod
    def native_handle(self) -> Any:
        """Backend-native 1-D array backing the allocation (e.g. cupy.ndarray)."""
        ...

    @property
    @abstractmethod
    def released(self) -> bool:
        ...

    @property
    def size_bytes(self) -> int:
        return self.size * self.dtype.itemsize


class Backend(ABC):
    """Abstract vector execution backend.

    Element operations take StridedView descriptors and mutate the memory
    they describe in place. Preconditions (sizes, strides, liveness) are
    checked by the Vector layer before a backend is called.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def allocate(self, n: int, dtype: np.dtype) -> DeviceAllocation:
        """Reserve uninitialized storage for n elements; raise AllocationError on failure."""
        ...

    @abstractmethod
    def release(self, allocation: DeviceAllocation) -> None:
        ...

    @abstractmethod
    def fill(self, view: StridedView, value) -> None:
        ...

    @abstractmethod
    def scale(self, view: StridedView, x) -> None:
        ...

    @abstractmethod
    def add_constant(self, view: StridedView, x) -> None:
        ...

    @abstractmethod
    def multiply(self, a: StridedView, b: StridedView) -> None:
        ...

    @abstractmethod
    def divide(self, a: StridedView, b: StridedView) -> None:
        ...

    @abstractmethod
    def copy_device(self, dst: StridedView, src: StridedView) -> None:
        """Copy dst.size elements from src into dst (both unit stride)."""
        ...

    @abstractmethod
    def upload(self, dst: StridedView, host: np.ndarray) -> None:
        """Copy dst.size elements from a host array into dst."""
        ...

    @abstractmethod
    def download(self, src: StridedView) -> np.ndarray:
        """Return a fresh host array holding the logical elements of src."""
        ...

    @abstractmethod
    def synchronize(self):
        ...
