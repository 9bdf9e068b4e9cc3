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
from pathlib import Path

import numpy as np

DEFAULT_VARIABLE = "temperature"

_FORMATS = {"DOUBLE": "f8", "FLOAT": "f4"}
_ENDIAN = {"LITTLE": "<", "BIG": ">"}


def write_bov(grid, layout, prefix, variable: str = DEFAULT_VARIABLE):
	"""
	Write a grid as a brick-of-values pair: ``<prefix>.bin`` with the raw
	little-endian doubles in row-major order and ``<prefix>.bov`` describing it.

	Returns:
	    tuple: (descriptor path, data path)
	"""
	prefix = Path(prefix)
	prefix.parent.mkdir(parents=True, exist_ok=True)
	data_path = prefix.with_name(prefix.name + ".bin")
	bov_path = prefix.with_name(prefix.name + ".bov")

	data = np.ascontiguousarray(grid, dtype="<f8").reshape(-1)
	if data.size != layout.size:
		raise ValueError(f"grid holds {data.size} values, layout expects {layout.size}")
	data.tofile(data_path)

	header = [
		"TIME: 0.0",
		f"DATA_FILE: {data_path.name}",
		f"DATA_SIZE: {layout.width} {layout.height} 1",
		"DATA_FORMAT: DOUBLE",
		f"VARIABLE: {variable}",
		"DATA_ENDIAN: LITTLE",
		"CENTERING: nodal",
		"BRICK_SIZE: 1.0 1.0 1.0",
	]
	with open(bov_path, "w") as f:
		f.write("\n".join(header) + "\n")

	logging.info(f"Wrote {data_path} and {bov_path}")
	return bov_path, data_path


def parse_bov_header(bov_path):
	header = {}
	with open(bov_path, "r") as f:
		for line in f:
			line = line.strip()
			if not line or line.startswith("#"):
				continue
			key, sep, value = line.partition(":")
			if not sep:
				raise ValueError(f"Malformed BOV line in {bov_path}: {line!r}")
			header[key.strip()] = value.strip()
	return header


def read_bov(bov_path):
	"""
	Read a grid written by ``write_bov``.

	Returns:
	    tuple: (array of shape (size_y, size_x), parsed header dict)
	"""
	bov_path = Path(bov_path)
	header = parse_bov_header(bov_path)
	size_x, size_y, size_z = (int(v) for v in header["DATA_SIZE"].split())
	dtype = np.dtype(_ENDIAN[header.get("DATA_ENDIAN", "LITTLE")] + _FORMATS[header["DATA_FORMAT"]])

	data = np.fromfile(bov_path.parent / header["DATA_FILE"], dtype=dtype)
	expected = size_x * size_y * size_z
	if data.size != expected:
		raise ValueError(f"{header['DATA_FILE']} holds {data.size} values, descriptor declares {expected}")
	if size_z == 1:
		return data.reshape(size_y, size_x), header
	return data.reshape(size_z, size_y, size_x), header
