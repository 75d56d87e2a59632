"""Element types supported by vector backends."""

from __future__ import annotations

import ml_dtypes
import numpy as np

_DTYPE_MAP = {
    "float16": np.float16,
    "float32": np.float32,
    "float64": np.float64,
    "bfloat16": ml_dtypes.bfloat16,
    "int32": np.int32,
    "int64": np.int64,
}

SUPPORTED_DTYPES = frozenset(np.dtype(t) for t in _DTYPE_MAP.values())


def resolve_dtype(dtype) -> np.dtype:
    """Normalize a dtype name, numpy type, or np.dtype to a supported np.dtype.

    Raises:
        TypeError: if the element type is not one the backends can store.
    """
    if isinstance(dtype, str):
        if dtype not in _DTYPE_MAP:
            raise TypeError(f"Unsupported element type: {dtype!r}")
        return np.dtype(_DTYPE_MAP[dtype])
    resolved = np.dtype(dtype)
    if resolved not in SUPPORTED_DTYPES:
        raise TypeError(f"Unsupported element type: {resolved}")
    return resolved


def is_integer(dtype: np.dtype) -> bool:
    return np.issubdtype(dtype, np.integer)


def zero_of(dtype: np.dtype):
    """Zero value of the element type."""
    return dtype.type(0)
