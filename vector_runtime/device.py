"""Backend selection for vector allocation."""

from __future__ import annotations

import logging
import os

from vector_runtime.backend import Backend
from vector_runtime.host_backend import HostBackend

logger = logging.getLogger(__name__)

BACKEND_ENV_VAR = "VECTOR_RUNTIME_BACKEND"

_default_backend: Backend | None = None


def cuda_available() -> bool:
    """True when CuPy imports and at least one CUDA device is visible."""
    from vector_runtime.cuda_backend import HAS_CUPY, cp

    if not HAS_CUPY:
        return False
    try:
        return cp.cuda.runtime.getDeviceCount() > 0
    except cp.cuda.runtime.CUDARuntimeError:
        return False


def create_backend(name: str, **kwargs) -> Backend:
    """Construct a backend by name ("cuda" or "host")."""
    if name == "host":
        return HostBackend(**kwargs)
    if name == "cuda":
        from vector_runtime.cuda_backend import CUDABackend

        return CUDABackend(**kwargs)
    raise ValueError(f"Unknown backend: {name!r} (expected 'cuda' or 'host')")


def get_backend(name: str | None = None) -> Backend:
    """Return the named backend, or the process-wide default.

    The default comes from $VECTOR_RUNTIME_BACKEND when set, otherwise
    CUDA if a device is available and the host backend if not.
    """
    global _default_backend
    if name is not None:
        return create_backend(name)
    if _default_backend is None:
        chosen = os.environ.get(BACKEND_ENV_VAR) or ("cuda" if cuda_available() else "host")
        _default_backend = create_backend(chosen)
        logger.debug("Default vector backend: %s", _default_backend.name)
    return _default_backend


def set_default_backend(backend: Backend | str | None) -> None:
    """Override the default backend; None resets to automatic selection."""
    global _default_backend
    if isinstance(backend, str):
        backend = create_backend(backend)
    _default_backend = backend
