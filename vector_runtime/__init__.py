"""Vector runtime: 1-D strided device vectors with CUDA (CuPy) and host backends."""

from vector_runtime.backend import Backend, DeviceAllocation
from vector_runtime.cuda_backend import HAS_CUPY, CUDAAllocation, CUDABackend
from vector_runtime.device import cuda_available, get_backend, set_default_backend
from vector_runtime.dtypes import resolve_dtype
from vector_runtime.errors import (
    AllocationError,
    OwnershipError,
    SizeMismatchError,
    StrideError,
    TransferError,
    VectorError,
)
from vector_runtime.host_backend import HostBackend
from vector_runtime.launch_config import DEFAULT_LAUNCH, LaunchConfig
from vector_runtime.printer import format_vector, print_vector
from vector_runtime.vector import (
    OwnedVector,
    Vector,
    add_constant,
    allocate,
    allocate_zeroed,
    copy,
    divide,
    fill,
    multiply,
    release,
    scale,
    subvector,
)
from vector_runtime.view import StridedView

__all__ = [
    "Backend",
    "DeviceAllocation",
    "HostBackend",
    "CUDABackend",
    "CUDAAllocation",
    "HAS_CUPY",
    "StridedView",
    "Vector",
    "OwnedVector",
    "LaunchConfig",
    "DEFAULT_LAUNCH",
    "VectorError",
    "AllocationError",
    "TransferError",
    "SizeMismatchError",
    "OwnershipError",
    "StrideError",
    "allocate",
    "allocate_zeroed",
    "release",
    "subvector",
    "copy",
    "fill",
    "scale",
    "add_constant",
    "multiply",
    "divide",
    "format_vector",
    "print_vector",
    "resolve_dtype",
    "get_backend",
    "set_default_backend",
    "cuda_available",
]
