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

import logging

import numpy as np
import torch
import torch.nn.functional as F

from heatstencil.core.grid import DoubleBuffer, GridLayout
from heatstencil.strategies.stencil_base import Stencil_Base

LAPLACIAN = torch.tensor(
	[
		[0.0, 1.0, 0.0],
		[1.0, -4.0, 1.0],
		[0.0, 1.0, 0.0],
	],
	dtype=torch.float64,
).view(1, 1, 3, 3)


class reference_stencil(Stencil_Base):
	"""
	Host-side update on float64 torch tensors. Used to check the device kernels.
	"""

	name = "reference"

	def __init__(self, block_x: int = 1, block_y: int = 1):
		super().__init__(block_x, block_y)

	def check_launch(self, layout, gpu):
		pass

	def apply(self, source, destination, layout, dt: float, stream=0):
		src = torch.from_numpy(np.asarray(source)).view(1, 1, layout.height, layout.width)
		# Shares memory with the numpy destination, so only the interior is written.
		dst = torch.from_numpy(destination).view(layout.height, layout.width)
		laplacian = F.conv2d(src, LAPLACIAN)[0, 0]
		dst[1:-1, 1:-1] = src[0, 0, 1:-1, 1:-1] + dt * laplacian


def initial_grid(layout):
	grid = np.zeros(layout.size, dtype=np.float64)
	for start, count in (layout.top_row(), layout.bottom_row()):
		grid[start : start + count] = 1.0
	return grid


def run_reference(config):
	"""
	Repeat the whole initialise-and-step sequence on the CPU.

	Returns:
	    np.ndarray: final flat grid
	"""
	layout = GridLayout(config.nx, config.ny)
	buffers = DoubleBuffer(initial_grid(layout), initial_grid(layout))
	strategy = reference_stencil()
	logging.debug(f"Running CPU reference for {config.nsteps} steps on {layout}")
	for _ in range(config.nsteps):
		strategy.apply(buffers.current(), buffers.next(), layout, config.dt)
		buffers.swap()
	return buffers.current().copy()
