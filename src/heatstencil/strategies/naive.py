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

from heatstencil.strategies.stencil_base import Stencil_Base


@cuda.jit
def naive_stencil_kernel(src, dst, nx, ny, dt):
	i, j = cuda.grid(2)
	if i < nx and j < ny:
		width = nx + 2
		pos = (i + 1) + (j + 1) * width
		center = src[pos]
		# Five independent global loads, no reuse across threads.
		dst[pos] = center + dt * (-4.0 * center + src[pos - width] + src[pos + width] + src[pos - 1] + src[pos + 1])


class naive_stencil(Stencil_Base):
	name = "naive"

	def apply(self, source, destination, layout, dt: float, stream=0):
		blocks, threads = self.launch_config(layout)
		naive_stencil_kernel[blocks, threads, stream](source, destination, layout.nx, layout.ny, dt)
