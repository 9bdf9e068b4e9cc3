import numpy as np
import pytest
from numba import cuda

from heatstencil.core.grid import GridLayout
from heatstencil.strategies.naive import naive_stencil
from heatstencil.strategies.reference import initial_grid, reference_stencil
from heatstencil.strategies.tiled import make_tiled_stencil_kernel, tiled_stencil
from heatstencil.utils.errors import ConfigurationError

STRATEGIES = [naive_stencil, tiled_stencil]


def step_on_device(strategy, layout, src, dt, dst=None):
	d_src = cuda.to_device(src)
	d_dst = cuda.to_device(np.zeros(layout.size) if dst is None else dst)
	strategy.apply(d_src, d_dst, layout, dt)
	return d_dst.copy_to_host()


def random_grid(layout, seed=0):
	rng = np.random.default_rng(seed)
	grid = initial_grid(layout).reshape(layout.height, layout.width)
	grid[1:-1, 1:-1] = rng.random((layout.ny, layout.nx))
	return grid.reshape(-1)


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
@pytest.mark.parametrize("block", [(4, 4), (2, 2)])
def test_single_step_from_initial_state(strategy_cls, block):
	layout = GridLayout(nx=4, ny=4)
	src = initial_grid(layout)
	out = layout.as_2d(step_on_device(strategy_cls(*block), layout, src, 0.1, dst=src.copy()))

	# Rows next to the north and south boundary see one neighbour at 1.0.
	np.testing.assert_allclose(out[1, 1:-1], 0.1, rtol=0, atol=1e-15)
	np.testing.assert_allclose(out[4, 1:-1], 0.1, rtol=0, atol=1e-15)
	np.testing.assert_array_equal(out[2:4, 1:-1], 0.0)
	np.testing.assert_array_equal(out[0, :], 1.0)
	np.testing.assert_array_equal(out[-1, :], 1.0)


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
def test_halo_cells_are_never_written(strategy_cls):
	layout = GridLayout(nx=6, ny=5)
	src = random_grid(layout)
	sentinel = np.full(layout.size, -7.0)
	out = layout.as_2d(step_on_device(strategy_cls(4, 4), layout, src, 0.2, dst=sentinel))

	mask = layout.halo_mask()
	np.testing.assert_array_equal(out[mask], -7.0)
	assert not np.any(out[~mask] == -7.0)


@pytest.mark.parametrize("nx,ny,block", [(8, 8, (4, 4)), (6, 9, (4, 4)), (5, 3, (8, 2)), (3, 7, (2, 4))])
def test_naive_and_tiled_agree(nx, ny, block):
	layout = GridLayout(nx=nx, ny=ny)
	src = random_grid(layout, seed=nx * ny)
	naive = step_on_device(naive_stencil(*block), layout, src, 0.2)
	tiled = step_on_device(tiled_stencil(*block), layout, src, 0.2)
	np.testing.assert_allclose(tiled, naive, rtol=1e-12, atol=1e-12)


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
def test_device_matches_cpu_reference(strategy_cls):
	layout = GridLayout(nx=7, ny=6)
	src = random_grid(layout, seed=3)

	expected = np.zeros(layout.size)
	reference_stencil().apply(src, expected, layout, 0.15)
	out = step_on_device(strategy_cls(4, 4), layout, src, 0.15)

	np.testing.assert_allclose(out, expected, rtol=1e-12, atol=1e-12)


def test_reference_matches_formula():
	layout = GridLayout(nx=3, ny=3)
	src = random_grid(layout, seed=11)
	dst = np.zeros(layout.size)
	reference_stencil().apply(src, dst, layout, 0.1)

	pos = layout.index(1, 1)
	w = layout.width
	expected = src[pos] + 0.1 * (-4 * src[pos] + src[pos - w] + src[pos + w] + src[pos - 1] + src[pos + 1])
	assert dst[pos] == pytest.approx(expected, rel=1e-12)


@pytest.mark.parametrize("strategy_cls", STRATEGIES)
def test_values_stay_within_boundary_range(strategy_cls):
	layout = GridLayout(nx=6, ny=6)
	d_a = cuda.to_device(initial_grid(layout))
	d_b = cuda.to_device(initial_grid(layout))
	strategy = strategy_cls(4, 4)
	for _ in range(12):
		strategy.apply(d_a, d_b, layout, 0.2)
		grid = d_b.copy_to_host()
		assert grid.min() >= 0.0
		assert grid.max() <= 1.0
		d_a, d_b = d_b, d_a


def test_tiled_kernel_is_built_once_per_block_shape():
	assert make_tiled_stencil_kernel(4, 4) is make_tiled_stencil_kernel(4, 4)
	assert make_tiled_stencil_kernel(4, 4) is not make_tiled_stencil_kernel(8, 4)


def test_tiled_rejects_tile_larger_than_shared_memory(stub_gpu):
	layout = GridLayout(nx=128, ny=16)
	strategy = tiled_stencil(16, 16)
	# 18 x 18 doubles
	assert strategy.tile_bytes == 2592
	strategy.check_launch(layout, stub_gpu(shared_memory=2592))
	with pytest.raises(ConfigurationError, match="shared memory"):
		strategy.check_launch(layout, stub_gpu(shared_memory=2591))


def test_naive_ignores_shared_memory_but_checks_threads(stub_gpu):
	layout = GridLayout(nx=128, ny=16)
	naive_stencil(16, 16).check_launch(layout, stub_gpu(shared_memory=1))
	with pytest.raises(ConfigurationError, match="threads"):
		naive_stencil(64, 32).check_launch(layout, stub_gpu())
