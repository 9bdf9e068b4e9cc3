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

import json
import logging
from abc import abstractmethod
from pprint import pformat

import numpy as np

from heatstencil.utils.errors import ConfigurationError


class Result:
	def __init__(self, success: bool, error_report: str = "", asset=None):
		self.success: bool = success
		# Only set error report if failure occurs
		if not self.success and error_report == "":
			raise ValueError("A failed Result must carry an error report.")
		self.error_report: str = error_report
		self.asset = asset

	def __bool__(self):
		return self.success

	def report_out(self):
		if self.success and self.asset is not None:
			if isinstance(self.asset, dict):
				logging.debug("\n%s", json.dumps(self.asset, indent=2, default=str))
			else:
				logging.debug("\n%s", pformat(self.asset))


class Stencil_Base:
	"""
	One way of applying the explicit 5-point update to a padded grid.

	Every strategy honours the same contract: read ``source``, write the
	interior of ``destination``, never touch a halo cell and keep no reference
	to either buffer after ``apply`` returns.
	"""

	name = "base"

	def __init__(self, block_x: int, block_y: int):
		self.block_x = block_x
		self.block_y = block_y

	def launch_config(self, layout):
		"""
		Returns:
		    tuple: (blocks per grid, threads per block) covering the interior.
		"""
		return layout.launch_grid(self.block_x, self.block_y), (self.block_x, self.block_y)

	def check_launch(self, layout, gpu):
		"""
		Reject a launch shape the device cannot run. Called once, before any step.
		"""
		threads = self.block_x * self.block_y
		max_threads = gpu.get_max_threads_per_block()
		if threads > max_threads:
			raise ConfigurationError(
				f"{self.name} stencil block {self.block_x}x{self.block_y} has {threads} threads; "
				f"the device allows {max_threads} per block."
			)
		logging.debug(f"{self.name} launch for {layout}: {self.launch_config(layout)}")

	@abstractmethod
	def apply(self, source, destination, layout, dt: float, stream=0):
		"""
		Issue one time step from ``source`` into ``destination``.
		"""
		pass

	def describe(self):
		return {"strategy": self.name, "block": [self.block_x, self.block_y]}


def max_abs_difference(arr1, arr2):
	return float(np.max(np.abs(np.asarray(arr1) - np.asarray(arr2))))


def validate_arrays(arr1, arr2, tolerance):
	"""
	Validate if two grids agree within an absolute tolerance.

	Args:
	        arr1: First array to compare
	        arr2: Second array to compare
	        tolerance: Absolute tolerance for comparison

	Returns:
	        Result: success when every cell is within tolerance
	"""
	if np.shape(arr1) != np.shape(arr2):
		return Result(success=False, error_report=f"Shape mismatch: {np.shape(arr1)} vs {np.shape(arr2)}")
	diff = max_abs_difference(arr1, arr2)
	if np.allclose(arr1, arr2, rtol=0.0, atol=tolerance):
		return Result(success=True, asset={"max_abs_difference": diff})
	return Result(
		success=False,
		error_report=f"Grids differ by up to {diff:.3e}, above the tolerance {tolerance:.3e}.",
		asset={"max_abs_difference": diff},
	)
