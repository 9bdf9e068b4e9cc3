import os

# Kernels run on numba's CUDA simulator unless a caller opts out with
# NUMBA_ENABLE_CUDASIM=0. Must be set before numba is first imported.
os.environ.setdefault("NUMBA_ENABLE_CUDASIM", "1")

import pytest

from heatstencil.core.config import StencilConfig


class StubGPU:
	def __init__(self, shared_memory=48 * 1024, max_threads=1024):
		self.shared_memory = shared_memory
		self.max_threads = max_threads

	def get_shared_memory_per_block(self):
		return self.shared_memory

	def get_max_threads_per_block(self):
		return self.max_threads

	def describe(self):
		return {"name": "stub", "shared_memory_per_block": self.shared_memory}


@pytest.fixture
def stub_gpu():
	return StubGPU


@pytest.fixture
def small_config():
	def make(**overrides):
		params = {"power": 3, "nsteps": 4, "nx": 8, "block_x": 4, "block_y": 4, "fill_block": 32}
		params.update(overrides)
		return StencilConfig(**params)

	return make

