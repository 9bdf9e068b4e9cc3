#!/usr/bin/env python3
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


def heatstencil_parser(argv=None):
	import argparse

	parser = argparse.ArgumentParser(
		description="Time-step the 2D heat equation on a CUDA device with a naive or shared-memory tiled stencil.",
		prog="heatstencil",
		formatter_class=lambda prog: argparse.RawTextHelpFormatter(prog, max_help_position=30),
		usage="""
        heatstencil [options] -p <power> -n <nsteps>

        Example:
        # 1000 steps of the naive kernel on a 128 x 1024 interior
        heatstencil -p 10 -n 1000
        # Same run with the tiled kernel, checked against the CPU reference
        heatstencil -p 10 -n 1000 --tiled --validate -o heat
        """,
	)
	parser.add_argument(
		"-v",
		"--verbose",
		action="count",
		default=0,
		help="Increase verbosity level (e.g., -v, -vv, -vvv).",
	)

	# Required arguments group
	required_args = parser.add_argument_group("required arguments")
	required_args.add_argument(
		"-p",
		"--power",
		type=int,
		required=True,
		metavar="",
		help="Interior height is 2**power.",
	)
	required_args.add_argument(
		"-n",
		"--nsteps",
		type=int,
		required=True,
		metavar="",
		help="Number of time steps.",
	)

	# Optional arguments group
	optional_args = parser.add_argument_group("optional arguments")
	optional_args.add_argument(
		"--tiled",
		action="store_true",
		help="Stage each block's tile in shared memory before computing (default: naive kernel)",
	)
	optional_args.add_argument(
		"--dt",
		type=float,
		default=0.1,
		metavar="",
		help="Time step; stable for 4*dt <= 1 (default: 0.1)",
	)
	optional_args.add_argument(
		"--block_x",
		type=int,
		default=16,
		metavar="",
		help="Stencil block width in threads (default: 16)",
	)
	optional_args.add_argument(
		"--block_y",
		type=int,
		default=16,
		metavar="",
		help="Stencil block height in threads (default: 16)",
	)
	optional_args.add_argument(
		"-d",
		"--device",
		type=int,
		default=None,
		metavar="",
		help="CUDA device id (default: current device)",
	)
	optional_args.add_argument(
		"--shared_memory_limit",
		type=int,
		default=None,
		metavar="",
		help="Cap on shared memory per block in bytes (default: device limit)",
	)
	optional_args.add_argument(
		"--validate",
		action="store_true",
		help="Compare the final grid against the CPU reference (default: false)",
	)
	optional_args.add_argument(
		"-t",
		"--tolerance",
		type=float,
		default=1e-12,
		metavar="",
		help="Absolute tolerance for --validate (default: 1e-12)",
	)

	# Output arguments
	optional_args.add_argument(
		"-o",
		"--output_prefix",
		type=str,
		metavar="",
		help="Write <prefix>.bin and <prefix>.bov with the final grid.\nRelative prefixes go to $HEATSTENCIL_OUTPUT_DIR when set.",
	)
	optional_args.add_argument("--variable", type=str, default="temperature", metavar="", help="Variable name in the .bov descriptor")
	optional_args.add_argument("--results_file", type=str, metavar="", help="Run summary file (.json, .csv or .txt)")

	args = parser.parse_args(argv)

	if args.power < 0:
		parser.error("--power must be non-negative.")
	if args.nsteps < 0:
		parser.error("--nsteps must be non-negative.")

	return args


def main(argv=None):
	args = heatstencil_parser(argv)

	# Set logging level based on verbosity
	import logging

	logging.raiseExceptions = True
	if args.verbose == 1:
		logging.basicConfig(level=logging.INFO, format="[HEATSTENCIL] %(levelname)s: %(message)s")
	elif args.verbose == 2:
		logging.basicConfig(level=logging.DEBUG, format="[HEATSTENCIL] %(levelname)s: %(message)s")
	elif args.verbose >= 3:
		logging.basicConfig(level=logging.NOTSET, format="[HEATSTENCIL] %(levelname)s: %(message)s")
	else:
		logging.basicConfig(level=logging.WARNING, format="[HEATSTENCIL] %(levelname)s: %(message)s")

	from heatstencil.core.config import StencilConfig
	from heatstencil.core.driver import TimeSteppingDriver
	from heatstencil.utils.errors import HeatStencilError, exit_on_fail

	config = StencilConfig(
		power=args.power,
		nsteps=args.nsteps,
		tiled=args.tiled,
		dt=args.dt,
		block_x=args.block_x,
		block_y=args.block_y,
		device_id=args.device,
		shared_memory_limit=args.shared_memory_limit,
	)

	try:
		driver = TimeSteppingDriver(config)
		result = driver.run()
	except HeatStencilError as e:
		exit_on_fail(success=False, message=f"Run aborted: {e}")

	print(
		f"{result.strategy}: {result.nsteps} steps on {result.layout.nx}x{result.layout.ny} "
		f"in {result.elapsed_seconds:.6f} s ({result.throughput:.3e} points/s)"
	)

	summary = result.to_dict()
	summary["launch"] = driver.strategy.describe()
	summary["device"] = driver.gpu.describe()

	if args.validate:
		from heatstencil.strategies.reference import run_reference
		from heatstencil.strategies.stencil_base import validate_arrays

		validation = validate_arrays(result.grid, run_reference(config), args.tolerance)
		validation.report_out()
		summary["validation"] = validation.asset
		exit_on_fail(success=bool(validation), message="Validation against the CPU reference failed.", log=validation.error_report)
		logging.info("Validation against the CPU reference succeeded.")

	import sys

	try:
		if args.output_prefix:
			from heatstencil.output.bov import write_bov
			from heatstencil.utils.env import resolve_output_path

			bov_path, data_path = write_bov(result.grid, result.layout, resolve_output_path(args.output_prefix), args.variable)
			summary["output"] = {"bov": str(bov_path), "data": str(data_path)}
		if args.results_file:
			from heatstencil.output.results import write_results

			write_results(summary, args.results_file)
	except (OSError, HeatStencilError) as e:
		logging.error(f"Error writing results: {e}")
		sys.exit(1)
	sys.exit(0)


if __name__ == "__main__":
	main()
