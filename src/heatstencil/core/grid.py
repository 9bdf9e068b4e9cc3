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

import numpy as np


class GridLayout:
	"""
	Row-major padded grid of ``(nx + 2) * (ny + 2)`` cells.

	Interior cell ``(i, j)`` with ``0 <= i < nx`` and ``0 <= j < ny`` lives at
	``(i + 1) + (j + 1) * (nx + 2)``. Row 0, row ``ny + 1``, column 0 and
	column ``nx + 1`` form the one-cell halo.
	"""

	def __init__(self, nx: int, ny: int):
		self.nx = nx
		self.ny = ny

	@property
	def width(self) -> int:
		return self.nx + 2

	@property
	def height(self) -> int:
		return self.ny + 2

	@property
	def size(self) -> int:
		return self.width * self.height

	@property
	def interior_points(self) -> int:
		return self.nx * self.ny

	def index(self, i: int, j: int) -> int:
		if not (0 <= i < self.nx and 0 <= j < self.ny):
			raise IndexError(f"interior coordinate ({i}, {j}) outside {self.nx}x{self.ny}")
		return (i + 1) + (j + 1) * self.width

	def top_row(self) -> tuple:
		"""Return (start, count) of the north halo row."""
		return (0, self.width)

	def bottom_row(self) -> tuple:
		"""Return (start, count) of the south halo row."""
		return ((self.ny + 1) * self.width, self.width)

	def as_2d(self, flat):
		return np.asarray(flat).reshape(self.height, self.width)

	def halo_mask(self):
		mask = np.zeros((self.height, self.width), dtype=bool)
		mask[0, :] = True
		mask[-1, :] = True
		mask[:, 0] = True
		mask[:, -1] = True
		return mask

	def launch_grid(self, block_x: int, block_y: int) -> tuple:
		return ((self.nx + block_x - 1) // block_x, (self.ny + block_y - 1) // block_y)

	def __repr__(self):
		return f"GridLayout(nx={self.nx}, ny={self.ny})"


class DoubleBuffer:
	"""
	Two equal-size grids that alternate between the readable ``current`` role
	and the writable ``next`` role. ``swap`` exchanges roles, never data.
	"""

	def __init__(self, first, second):
		if first.shape != second.shape:
			raise ValueError(f"buffers differ in shape: {first.shape} != {second.shape}")
		self._buffers = (first, second)
		self._current = 0
		self.swaps = 0

	def current(self):
		return self._buffers[self._current]

	def next(self):
		return self._buffers[1 - self._current]

	def swap(self):
		self._current = 1 - self._current
		self.swaps += 1

	def both(self):
		return self._buffers

	@property
	def current_index(self) -> int:
		return self._current
