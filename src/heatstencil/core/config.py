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
from dataclasses import dataclass
from typing import Optional

from heatstencil.utils.errors import ConfigurationError

# Interior width used by the command line tool.
DEFAULT_NX = 128
DEFAULT_DT = 0.1
# Threads per block along x and y for the stencil launches.
DEFAULT_BLOCK_X = 16
DEFAULT_BLOCK_Y = 16
# Threads per block for the 1D fill launches.
DEFAULT_FILL_BLOCK = 192


@dataclass
class StencilConfig:
	"""
	Parameters of one time-stepping run.

	Attributes:
	    power: Interior height is ``2**power``.
	    nsteps: Number of explicit time steps.
	    tiled: Use the shared-memory tiled kernel instead of the naive one.
	    nx: Interior width.
	    dt: Time step. The scheme is stable for ``4 * dt <= 1``.
	    block_x, block_y: Stencil thread block shape.
	    fill_block: Thread block size of the fill launches.
	    shared_memory_limit: Shared memory per block in bytes. ``None`` asks the device.
	    device_id: CUDA device to run on. ``None`` keeps the current one.
	"""

	power: int
	nsteps: int
	tiled: bool = False
	nx: int = DEFAULT_NX
	dt: float = DEFAULT_DT
	block_x: int = DEFAULT_BLOCK_X
	block_y: int = DEFAULT_BLOCK_Y
	fill_block: int = DEFAULT_FILL_BLOCK
	shared_memory_limit: Optional[int] = None
	device_id: Optional[int] = None

	@property
	def ny(self) -> int:
		return 2**self.power

	@property
	def block_shape(self) -> tuple:
		return (self.block_x, self.block_y)

	@property
	def is_stable(self) -> bool:
		return 4.0 * self.dt <= 1.0

	def validate(self):
		if self.power < 0:
			raise ConfigurationError(f"power must be non-negative, got {self.power}")
		if self.nsteps < 0:
			raise ConfigurationError(f"nsteps must be non-negative, got {self.nsteps}")
		if self.nx < 1:
			raise ConfigurationError(f"nx must be positive, got {self.nx}")
		if self.dt <= 0.0:
			raise ConfigurationError(f"dt must be positive, got {self.dt}")
		for name in ("block_x", "block_y", "fill_block"):
			if getattr(self, name) < 1:
				raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
		if self.shared_memory_limit is not None and self.shared_memory_limit < 1:
			raise ConfigurationError(f"shared_memory_limit must be positive, got {self.shared_memory_limit}")
		if not self.is_stable:
			logging.warning(f"dt={self.dt} violates 4*dt <= 1; the explicit scheme will not stay bounded.")
		return self
