import numpy as np
import pytest

from heatstencil.core.grid import GridLayout
from heatstencil.output.bov import parse_bov_header, read_bov, write_bov


def test_round_trip_is_byte_exact(tmp_path):
	layout = GridLayout(nx=5, ny=4)
	grid = np.random.default_rng(7).random(layout.size)

	bov_path, data_path = write_bov(grid, layout, tmp_path / "heat")
	assert data_path.read_bytes() == grid.astype("<f8").tobytes()

	back, header = read_bov(bov_path)
	assert back.shape == (layout.height, layout.width)
	assert back.reshape(-1).tobytes() == grid.astype("<f8").tobytes()
	assert header["VARIABLE"] == "temperature"


def test_descriptor_contents(tmp_path):
	layout = GridLayout(nx=128, ny=2)
	bov_path, _ = write_bov(np.zeros(layout.size), layout, tmp_path / "out" / "step", variable="phi")

	assert bov_path.read_text().splitlines() == [
		"TIME: 0.0",
		"DATA_FILE: step.bin",
		"DATA_SIZE: 130 4 1",
		"DATA_FORMAT: DOUBLE",
		"VARIABLE: phi",
		"DATA_ENDIAN: LITTLE",
		"CENTERING: nodal",
		"BRICK_SIZE: 1.0 1.0 1.0",
	]


def test_write_rejects_wrong_size(tmp_path):
	with pytest.raises(ValueError):
		write_bov(np.zeros(10), GridLayout(nx=2, ny=2), tmp_path / "bad")


def test_read_detects_truncated_data(tmp_path):
	layout = GridLayout(nx=3, ny=3)
	bov_path, data_path = write_bov(np.ones(layout.size), layout, tmp_path / "cut")
	data_path.write_bytes(data_path.read_bytes()[:-8])
	with pytest.raises(ValueError):
		read_bov(bov_path)


def test_malformed_header(tmp_path):
	path = tmp_path / "broken.bov"
	path.write_text("DATA_FILE broken.bin\n")
	with pytest.raises(ValueError):
		parse_bov_header(path)
