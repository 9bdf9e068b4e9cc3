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
from numba import cuda
from numba.cuda.cudadrv.driver import CudaAPIError

from heatstencil.utils.errors import AllocationError

DTYPE = np.float64


def _allocate(kind, allocator, n):
	try:
		buf = allocator(n, dtype=DTYPE)
	except (CudaAPIError, MemoryError) as e:
		raise AllocationError(f"Failed to allocate {kind} buffer of {n} doubles ({n * 8} bytes): {e}") from e
	logging.debug(f"Allocated {kind} buffer of {n} doubles")
	return buf


def allocate_host(n: int):
	"""Page-locked host buffer of ``n`` doubles."""
	return _allocate("pinned host", cuda.pinned_array, n)


def allocate_device(n: int):
	"""Device-resident buffer of ``n`` doubles."""
	return _allocate("device", cuda.device_array, n)


def copy_to_host(device_buf, host_buf, stream=0):
	if device_buf.shape != host_buf.shape:
		raise ValueError(f"copy size mismatch: device {device_buf.shape} vs host {host_buf.shape}")
	device_buf.copy_to_host(host_buf, stream=stream)
	return host_buf


def record_marker(stream=0):
	marker = cuda.event()
	marker.record(stream=stream)
	return marker


def wait_marker(marker):
	marker.synchronize()


def elapsed_seconds(start, end) -> float:
	# event timings are milliseconds
	return start.elapsed_time(end) / 1000.0
