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

from numba import cuda


@cuda.jit
def fill_kernel(buf, n, value):
	idx = cuda.grid(1)
	if idx < n:
		buf[idx] = value


def fill(buf, start: int, n: int, value: float, block_size: int, stream=0):
	"""
	Set ``buf[start:start + n]`` to ``value`` on the device.

	The kernel sees a view starting at ``start``, so no thread can touch an
	element outside the requested range.
	"""
	if n <= 0:
		return
	blocks = (n + block_size - 1) // block_size
	fill_kernel[blocks, block_size, stream](buf[start : start + n], n, value)


def apply_boundary_condition(buf, layout, block_size: int, stream=0):
	"""
	Zero the whole grid, then pin the north and south halo rows to 1.

	East/west halo columns stay 0 and act as a zero Dirichlet condition.
	"""
	fill(buf, 0, layout.size, 0.0, block_size, stream)
	for start, count in (layout.top_row(), layout.bottom_row()):
		fill(buf, start, count, 1.0, block_size, stream)
