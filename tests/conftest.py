"""Shared fixtures and helpers for vector runtime tests."""

import numpy as np
import pytest

from vector_runtime import device
from vector_runtime.host_backend import HostBackend
from vector_runtime.vector import Vector
from vector_runtime.view import StridedView


@pytest.fixture(scope="session")
def backend():
    """Session-scoped host backend."""
    return HostBackend()


@pytest.fixture(autouse=True)
def default_backend(backend):
    """Route allocations without an explicit backend to the host backend."""
    saved = device._default_backend
    device.set_default_backend(backend)
    yield backend
    device.set_default_backend(saved)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


def strided(parent: Vector, stride: int, n: int, offset: int = 0) -> Vector:
    """Non-owning view over parent's allocation with the given stride."""
    view = StridedView(parent.view.allocation, parent.offset + offset, stride, n)
    return Vector(view, parent.backend)
