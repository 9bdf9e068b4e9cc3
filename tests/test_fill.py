import numpy as np
from numba import cuda

from heatstencil.core.fill import apply_boundary_condition, fill
from heatstencil.core.grid import GridLayout


def test_fill_touches_only_requested_range():
	d_buf = cuda.to_device(np.full(50, -3.0))
	fill(d_buf, 10, 17, 2.5, block_size=8)
	out = d_buf.copy_to_host()

	np.testing.assert_array_equal(out[10:27], 2.5)
	np.testing.assert_array_equal(out[:10], -3.0)
	np.testing.assert_array_equal(out[27:], -3.0)


def test_fill_with_zero_count_is_noop():
	d_buf = cuda.to_device(np.full(8, 4.0))
	fill(d_buf, 0, 0, 1.0, block_size=4)
	np.testing.assert_array_equal(d_buf.copy_to_host(), 4.0)


def test_boundary_condition_layout():
	layout = GridLayout(nx=5, ny=4)
	d_buf = cuda.to_device(np.full(layout.size, 9.0))
	apply_boundary_condition(d_buf, layout, block_size=16)
	grid = layout.as_2d(d_buf.copy_to_host())

	np.testing.assert_array_equal(grid[0, :], 1.0)
	np.testing.assert_array_equal(grid[-1, :], 1.0)
	np.testing.assert_array_equal(grid[1:-1, :], 0.0)
