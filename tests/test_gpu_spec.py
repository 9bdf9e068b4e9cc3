import pytest

from heatstencil.core import gpu_spec
from heatstencil.utils.errors import ConfigurationError


def test_warp_size_positive():
	# Falls back to the CUDA default when the simulator has no attribute
	warp = gpu_spec.get_warp_size()
	assert warp > 0, "Expected a positive warp size"


def test_shared_memory_within_static_limit():
	shared = gpu_spec.get_max_shared_memory_per_block()
	assert 0 < shared <= gpu_spec.STATIC_SHARED_MEMORY_LIMIT


def test_caller_limit_caps_shared_memory():
	spec = gpu_spec.GPUSpec(shared_memory_limit=1024)
	assert spec.get_shared_memory_per_block() == 1024
	assert spec.get_max_threads_per_block() >= 256


def test_describe_has_launch_limits():
	info = gpu_spec.GPUSpec().describe()
	assert isinstance(info["name"], str)
	assert info["shared_memory_per_block"] > 0
	assert info["max_threads_per_block"] > 0


def test_current_device_is_found():
	assert gpu_spec.get_device() is not None
	assert gpu_spec.get_device_count() >= 1


def test_select_first_device():
	spec = gpu_spec.GPUSpec(device_id=0)
	assert spec.device_id == 0
	assert spec.get_warp_size() > 0


def test_unknown_device_is_a_configuration_error():
	count = gpu_spec.get_device_count()
	with pytest.raises(ConfigurationError, match="does not exist"):
		gpu_spec.GPUSpec(device_id=count)
