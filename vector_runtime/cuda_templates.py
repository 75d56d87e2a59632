"""CUDA kernel sources for strided vector operations.

The fill kernel is compiled via NVRTC (cupy.RawKernel); the transforms are
single-statement maps compiled through cupy.ElementwiseKernel, which
honours the strides of the views it is given.
"""

from __future__ import annotations

import numpy as np

# numpy dtype -> CUDA C element type
CTYPES = {
    np.dtype(np.float16): "__half",
    np.dtype(np.float32): "float",
    np.dtype(np.float64): "double",
    np.dtype(np.int32): "int",
    np.dtype(np.int64): "long long",
}


def fill_kernel_name(dtype: np.dtype) -> str:
    return f"fill_strided_{dtype.name}"


def fill_kernel_source(dtype: np.dtype) -> str:
    """Grid-stride fill: each thread writes indices tid, tid + nthreads, ...

    Correct for any grid size, including grids much smaller than n.
    """
    ctype = CTYPES[dtype]
    return rf"""
#include <cuda_fp16.h>
extern "C" {{
__global__ void {fill_kernel_name(dtype)}({ctype}* data, long long stride, long long n, {ctype} value) {{
    long long nthreads = (long long)blockDim.x * gridDim.x;
    for (long long i = (long long)blockIdx.x * blockDim.x + threadIdx.x; i < n; i += nthreads) {{
        data[i * stride] = value;
    }}
}}
}}
"""


# name -> (in_params, out_params, operation); a is both read and written
ELEMENTWISE_OPS = {
    "scale": ("T a_in, T x", "T a", "a = a_in * x"),
    "add_constant": ("T a_in, T x", "T a", "a = a_in + x"),
    "multiply": ("T a_in, T b", "T a", "a = a_in * b"),
    "divide": ("T a_in, T b", "T a", "a = a_in / b"),
}
