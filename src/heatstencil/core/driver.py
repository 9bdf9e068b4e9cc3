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
from enum import Enum

from numba import cuda

from heatstencil.core.config import StencilConfig
from heatstencil.core.fill import apply_boundary_condition
from heatstencil.core.gpu_spec import GPUSpec
from heatstencil.core.grid import DoubleBuffer, GridLayout
from heatstencil.core.memory import (
	allocate_device,
	allocate_host,
	copy_to_host,
	elapsed_seconds,
	record_marker,
	wait_marker,
)
from heatstencil.utils.env import cuda_simulation_enabled
from heatstencil.utils.errors import HeatStencilError


class DriverState(Enum):
	IDLE = "idle"
	INITIALIZING = "initializing"
	RUNNING = "running"
	DONE = "done"


class RunResult:
	def __init__(self, grid, layout, strategy: str, nsteps: int, dt: float, elapsed_seconds: float, final_buffer: int = 0):
		self.grid = grid
		self.layout = layout
		self.strategy = strategy
		self.nsteps = nsteps
		self.dt = dt
		self.elapsed_seconds = elapsed_seconds
		# Which of the two device buffers held the result.
		self.final_buffer = final_buffer

	@property
	def throughput(self) -> float:
		"""Interior points updated per second over the whole run."""
		if self.elapsed_seconds <= 0.0:
			# The CUDA simulator reports zero for every event pair.
			return 0.0
		return self.nsteps * self.layout.interior_points / self.elapsed_seconds

	def grid_2d(self):
		return self.layout.as_2d(self.grid)

	def to_dict(self):
		return {
			"strategy": self.strategy,
			"nx": self.layout.nx,
			"ny": self.layout.ny,
			"nsteps": self.nsteps,
			"dt": self.dt,
			"elapsed_seconds": self.elapsed_seconds,
			"throughput": self.throughput,
			"final_buffer": self.final_buffer,
		}


def select_strategy(config: StencilConfig):
	if config.tiled:
		from heatstencil.strategies.tiled import tiled_stencil

		strategy = tiled_stencil
	else:
		from heatstencil.strategies.naive import naive_stencil

		strategy = naive_stencil
	return strategy(config.block_x, config.block_y)


class TimeSteppingDriver:
	"""
	Drive one run: IDLE -> INITIALIZING -> RUNNING -> DONE.

	All work goes to a single stream, so each launch reads what the previous
	one wrote and the host only waits once, at the end.
	"""

	def __init__(self, config: StencilConfig, gpu: GPUSpec = None):
		self.config = config.validate()
		self.layout = GridLayout(config.nx, config.ny)
		self.strategy = select_strategy(config)
		self.state = DriverState.IDLE
		self.steps_issued = 0
		self._gpu = gpu

	@property
	def gpu(self):
		return self._gpu

	def _transition(self, state: DriverState):
		logging.debug(f"Driver state {self.state.value} -> {state.value}")
		self.state = state

	def preflight(self):
		"""
		Check the launch shape against the device before anything is allocated.
		"""
		if self._gpu is None:
			self._gpu = GPUSpec(self.config.device_id, self.config.shared_memory_limit)
		self.strategy.check_launch(self.layout, self._gpu)

	def run(self) -> RunResult:
		if self.state is not DriverState.IDLE:
			raise HeatStencilError(f"Driver already used (state: {self.state.value}).")

		config = self.config
		layout = self.layout
		self.preflight()
		if cuda_simulation_enabled():
			logging.info("Running on the CUDA simulator; elapsed time and throughput will read as zero.")
		logging.info(
			f"Running {config.nsteps} steps of the {self.strategy.name} stencil on {layout.nx}x{layout.ny} "
			f"with blocks of {config.block_x}x{config.block_y}, dt={config.dt}"
		)

		self._transition(DriverState.INITIALIZING)
		stream = cuda.stream()
		buffers = DoubleBuffer(allocate_device(layout.size), allocate_device(layout.size))
		host = allocate_host(layout.size)
		# Either buffer can end up current, so both start boundary-consistent.
		for buf in buffers.both():
			apply_boundary_condition(buf, layout, config.fill_block, stream)

		self._transition(DriverState.RUNNING)
		start = record_marker(stream)
		for step in range(config.nsteps):
			self.strategy.apply(buffers.current(), buffers.next(), layout, config.dt, stream)
			buffers.swap()
			self.steps_issued = step + 1
		end = record_marker(stream)
		logging.debug(f"Issued {self.steps_issued} steps, {buffers.swaps} buffer swaps; result in buffer {buffers.current_index}")

		wait_marker(end)
		copy_to_host(buffers.current(), host, stream)
		stream.synchronize()
		self._transition(DriverState.DONE)

		result = RunResult(
			grid=host,
			layout=layout,
			strategy=self.strategy.name,
			nsteps=config.nsteps,
			dt=config.dt,
			elapsed_seconds=elapsed_seconds(start, end),
			final_buffer=buffers.current_index,
		)
		logging.info(f"Finished in {result.elapsed_seconds:.6f} s, {result.throughput:.3e} points/s")
		return result


def run(config: StencilConfig, gpu: GPUSpec = None) -> RunResult:
	return TimeSteppingDriver(config, gpu).run()
