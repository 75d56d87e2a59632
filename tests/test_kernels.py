"""Tests for fill and the strided elementwise transforms."""

import numpy as np
import numpy.testing as npt
import pytest

from tests.conftest import strided
from vector_runtime import (
    LaunchConfig,
    SizeMismatchError,
    Vector,
    add_constant,
    allocate,
    allocate_zeroed,
    divide,
    fill,
    multiply,
    scale,
)
from vector_runtime.host_backend import HostBackend


class TestFill:
    def test_fill_then_scale(self, backend):
        """5 doubles filled with 2.0 and scaled by 3.0 read back as 6.0."""
        v = allocate(5, dtype=np.float64, backend=backend)
        fill(v, 2.0)
        scale(v, 3.0)
        npt.assert_array_equal(v.to_numpy(), [6.0, 6.0, 6.0, 6.0, 6.0])
        v.release()

    @pytest.mark.parametrize("n", [1, 7, 8, 9, 1000])
    @pytest.mark.parametrize("workers", [1, 3, 8, 64])
    def test_grid_stride_covers_every_element(self, n, workers):
        """Correctness does not depend on worker count versus size."""
        backend = HostBackend(LaunchConfig(host_workers=workers))
        v = allocate_zeroed(n, backend=backend)
        v.fill(1.5)
        npt.assert_array_equal(v.to_numpy(), np.full(n, 1.5))
        v.release()

    def test_fill_strided_leaves_gaps(self, backend):
        v = allocate_zeroed(10, backend=backend)
        evens = strided(v, stride=2, n=5)
        evens.fill(7.0)
        npt.assert_array_equal(v.to_numpy(), [7, 0, 7, 0, 7, 0, 7, 0, 7, 0])
        v.release()

    def test_fill_strided_with_offset_and_few_workers(self):
        backend = HostBackend(LaunchConfig(host_workers=2))
        v = allocate_zeroed(11, backend=backend)
        view = strided(v, stride=3, n=3, offset=1)
        view.fill(-1.0)
        npt.assert_array_equal(v.to_numpy(), [0, -1, 0, 0, -1, 0, 0, -1, 0, 0, 0])
        v.release()

    def test_fill_subvector_only(self, backend):
        v = allocate_zeroed(5, backend=backend)
        v.subvector(1, 3).fill(4.0)
        npt.assert_array_equal(v.to_numpy(), [0, 4, 4, 4, 0])
        v.release()

    def test_fill_empty(self, backend):
        v = allocate(0, backend=backend)
        v.fill(1.0)
        v.release()

    def test_fill_casts_to_element_type(self, backend):
        v = allocate(3, dtype="int32", backend=backend)
        v.fill(2.9)
        npt.assert_array_equal(v.to_numpy(), np.array([2, 2, 2], dtype=np.int32))
        v.release()


class TestScalarTransforms:
    def test_scale_roundtrip(self, backend, rng):
        data = rng.standard_normal(64)
        v = Vector.from_numpy(data, backend=backend)
        v.scale(3.7)
        v.scale(1 / 3.7)
        npt.assert_allclose(v.to_numpy(), data, rtol=1e-12)
        v.release()

    def test_add_constant(self, backend):
        v = Vector.from_numpy(np.array([1.0, 2.0, 3.0]), backend=backend)
        add_constant(v, 0.5)
        npt.assert_array_equal(v.to_numpy(), [1.5, 2.5, 3.5])
        v.release()

    def test_scale_strided(self, backend):
        v = Vector.from_numpy(np.arange(8, dtype=np.float64), backend=backend)
        strided(v, stride=2, n=4, offset=1).scale(10.0)
        npt.assert_array_equal(v.to_numpy(), [0, 10, 2, 30, 4, 50, 6, 70])
        v.release()

    def test_add_constant_float32(self, backend):
        v = Vector.from_numpy(np.zeros(4, dtype=np.float32), backend=backend)
        v.add_constant(0.25)
        result = v.to_numpy()
        assert result.dtype == np.float32
        npt.assert_array_equal(result, np.full(4, 0.25, dtype=np.float32))
        v.release()

    def test_scale_integer_truncates_scalar(self, backend):
        v = Vector.from_numpy(np.array([1, 2, 3], dtype=np.int64), backend=backend)
        v.scale(2.7)
        npt.assert_array_equal(v.to_numpy(), [2, 4, 6])
        v.release()


class TestBinaryTransforms:
    def test_multiply(self, backend):
        a = Vector.from_numpy(np.array([1.0, 2.0, 3.0, 4.0]), backend=backend)
        b = Vector.from_numpy(np.array([1.0, 2.0, 3.0, 4.0]), backend=backend)
        multiply(a, b)
        npt.assert_array_equal(a.to_numpy(), [1.0, 4.0, 9.0, 16.0])
        npt.assert_array_equal(b.to_numpy(), [1.0, 2.0, 3.0, 4.0])
        a.release()
        b.release()

    def test_multiply_then_divide_restores(self, backend, rng):
        data = rng.standard_normal(100)
        a = Vector.from_numpy(data, backend=backend)
        b = Vector.from_numpy(rng.uniform(0.5, 2.0, 100), backend=backend)
        a.multiply(b)
        divide(a, b)
        npt.assert_allclose(a.to_numpy(), data, rtol=1e-12)
        a.release()
        b.release()

    def test_different_strides(self, backend):
        a = Vector.from_numpy(np.array([1.0, 1.0, 1.0, 1.0]), backend=backend)
        b_parent = Vector.from_numpy(np.arange(8, dtype=np.float64), backend=backend)
        a.multiply(strided(b_parent, stride=2, n=4))
        npt.assert_array_equal(a.to_numpy(), [0.0, 2.0, 4.0, 6.0])
        a.release()
        b_parent.release()

    def test_strided_destination(self, backend):
        a_parent = Vector.from_numpy(np.full(6, 2.0), backend=backend)
        b = Vector.from_numpy(np.array([1.0, 2.0, 4.0]), backend=backend)
        strided(a_parent, stride=2, n=3).divide(b)
        npt.assert_array_equal(a_parent.to_numpy(), [2.0, 2.0, 1.0, 2.0, 0.5, 2.0])
        a_parent.release()
        b.release()

    def test_size_mismatch_rejected(self, backend):
        a = Vector.from_numpy(np.ones(4), backend=backend)
        b = Vector.from_numpy(np.ones(3), backend=backend)
        with pytest.raises(SizeMismatchError) as excinfo:
            a.multiply(b)
        assert (excinfo.value.left, excinfo.value.right) == (4, 3)
        with pytest.raises(ValueError):
            a.divide(b)
        npt.assert_array_equal(a.to_numpy(), np.ones(4))
        a.release()
        b.release()

    def test_element_type_mismatch_rejected(self, backend):
        a = Vector.from_numpy(np.ones(2), backend=backend)
        b = Vector.from_numpy(np.ones(2, dtype=np.float32), backend=backend)
        with pytest.raises(TypeError):
            a.multiply(b)
        a.release()
        b.release()

    def test_different_backends_rejected(self, backend):
        a = Vector.from_numpy(np.ones(2), backend=backend)
        b = Vector.from_numpy(np.ones(2), backend=HostBackend())
        with pytest.raises(ValueError):
            a.multiply(b)
        a.release()
        b.release()

    def test_divide_by_zero_follows_float_semantics(self, backend):
        a = Vector.from_numpy(np.array([1.0, -1.0, 0.0]), backend=backend)
        b = allocate_zeroed(3, backend=backend)
        a.divide(b)
        result = a.to_numpy()
        assert result[0] == np.inf
        assert result[1] == -np.inf
        assert np.isnan(result[2])
        a.release()
        b.release()

    def test_integer_divide_truncates_toward_zero(self, backend):
        a = Vector.from_numpy(np.array([7, -7, 7, -7], dtype=np.int32), backend=backend)
        b = Vector.from_numpy(np.array([2, 2, -2, -2], dtype=np.int32), backend=backend)
        a.divide(b)
        npt.assert_array_equal(a.to_numpy(), [3, -3, -3, 3])
        a.release()
        b.release()

    @pytest.mark.parametrize("dtype,divisor", [(np.int32, 2), (np.int64, 4)])
    def test_integer_divide_most_negative_value(self, backend, dtype, divisor):
        lowest = np.iinfo(dtype).min
        a = Vector.from_numpy(np.array([lowest, lowest + 1], dtype=dtype), backend=backend)
        b = Vector.from_numpy(np.array([divisor, divisor], dtype=dtype), backend=backend)
        a.divide(b)
        expected = np.array([lowest // divisor, -((-(lowest + 1)) // divisor)], dtype=dtype)
        npt.assert_array_equal(a.to_numpy(), expected)
        assert (a.to_numpy() < 0).all()
        a.release()
        b.release()

    def test_integer_divide_by_zero_yields_zero(self, backend):
        a = Vector.from_numpy(np.array([5, -5, 0], dtype=np.int64), backend=backend)
        b = allocate_zeroed(3, dtype="int64", backend=backend)
        a.divide(b)
        npt.assert_array_equal(a.to_numpy(), [0, 0, 0])
        a.release()
        b.release()

    def test_non_vector_operand_rejected(self, backend):
        a = Vector.from_numpy(np.ones(3), backend=backend)
        with pytest.raises(TypeError):
            a.multiply(np.ones(3))
        with pytest.raises(TypeError):
            a.divide([1.0, 1.0, 1.0])
        npt.assert_array_equal(a.to_numpy(), np.ones(3))
        a.release()

    def test_multiply_by_itself(self, backend):
        a = Vector.from_numpy(np.array([2.0, 3.0]), backend=backend)
        a.multiply(a)
        npt.assert_array_equal(a.to_numpy(), [4.0, 9.0])
        a.release()
