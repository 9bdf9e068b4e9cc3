import json

import pandas as pd
import pytest

from heatstencil.output.results import flatten_dict, write_results
from heatstencil.utils.errors import ConfigurationError

SUMMARY = {"strategy": "tiled", "nsteps": 3, "device": {"name": "stub", "warp_size": 32}}


def test_json(tmp_path):
	path = tmp_path / "run.json"
	write_results(SUMMARY, str(path))
	assert json.loads(path.read_text()) == SUMMARY


def test_csv_flattens_nested_fields(tmp_path):
	path = tmp_path / "run.csv"
	write_results(SUMMARY, str(path))
	df = pd.read_csv(path)
	assert list(df.columns) == ["strategy", "nsteps", "device_name", "device_warp_size"]
	assert df.loc[0, "device_warp_size"] == 32


def test_stdout(capsys):
	write_results(SUMMARY)
	assert json.loads(capsys.readouterr().out) == SUMMARY


def test_unknown_extension(tmp_path):
	with pytest.raises(ConfigurationError):
		write_results(SUMMARY, str(tmp_path / "run.xml"))


def test_flatten_dict():
	assert flatten_dict({"a": {"b": {"c": 1}}, "d": 2}) == {"a_b_c": 1, "d": 2}
