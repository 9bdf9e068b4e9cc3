################################################################################
# MIT License

# Copyright (c) 2025 Advanced Micro Devices, Inc. All Rights Reserved.

# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
################################################################################

import functools
import logging

from numba import cuda, float64

from heatstencil.strategies.stencil_base import Stencil_Base
from heatstencil.utils.errors import ConfigurationError

DOUBLE_BYTES = 8


@functools.lru_cache(maxsize=None)
def make_tiled_stencil_kernel(block_x: int, block_y: int):
	"""
	Build the shared-memory stencil kernel for one block shape.

	The tile holds the block's cells plus a one-cell ring: ``(block_y + 2)``
	rows by ``(block_x + 2)`` columns. Its four corners are never staged and
	never read, which only holds for the axis-aligned 5-point stencil. A
	stencil that reads diagonal neighbours needs corner staging first.
	"""
	tile_shape = (block_y + 2, block_x + 2)

	@cuda.jit
	def tiled_stencil_kernel(src, dst, nx, ny, dt):
		tile = cuda.shared.array(shape=tile_shape, dtype=float64)

		tx = cuda.threadIdx.x
		ty = cuda.threadIdx.y
		i, j = cuda.grid(2)

		width = nx + 2
		pos = (i + 1) + (j + 1) * width
		sx = tx + 1
		sy = ty + 1
		inside = i < nx and j < ny

		if inside:
			tile[sy, sx] = src[pos]
			if tx == 0:
				tile[sy, 0] = src[pos - 1]
			# The last in-range column of a partial block is its right edge.
			if tx == cuda.blockDim.x - 1 or i == nx - 1:
				tile[sy, sx + 1] = src[pos + 1]
			if ty == 0:
				tile[0, sx] = src[pos - width]
			if ty == cuda.blockDim.y - 1 or j == ny - 1:
				tile[sy + 1, sx] = src[pos + width]

		# Out-of-range threads must reach the barrier too.
		cuda.syncthreads()

		if inside:
			center = tile[sy, sx]
			dst[pos] = center + dt * (
				-4.0 * center + tile[sy - 1, sx] + tile[sy + 1, sx] + tile[sy, sx - 1] + tile[sy, sx + 1]
			)

	logging.debug(f"Built tiled stencil kernel for block {block_x}x{block_y}, tile {tile_shape}")
	return tiled_stencil_kernel


class tiled_stencil(Stencil_Base):
	name = "tiled"

	@property
	def tile_shape(self):
		return (self.block_y + 2, self.block_x + 2)

	@property
	def tile_bytes(self):
		rows, cols = self.tile_shape
		return rows * cols * DOUBLE_BYTES

	def check_launch(self, layout, gpu):
		super().check_launch(layout, gpu)
		capacity = gpu.get_shared_memory_per_block()
		if self.tile_bytes > capacity:
			raise ConfigurationError(
				f"Tile {self.tile_shape[0]}x{self.tile_shape[1]} for block {self.block_x}x{self.block_y} needs "
				f"{self.tile_bytes} bytes of shared memory; the device provides {capacity} per block."
			)

	def apply(self, source, destination, layout, dt: float, stream=0):
		kernel = make_tiled_stencil_kernel(self.block_x, self.block_y)
		blocks, threads = self.launch_config(layout)
		kernel[blocks, threads, stream](source, destination, layout.nx, layout.ny, dt)

	def describe(self):
		info = super().describe()
		info["tile_bytes"] = self.tile_bytes
		return info
