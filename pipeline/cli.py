"""
Device Simulator Pipeline - Command Line Interface
==================================================

Entry point for the `device-simulator` console script.

Commands:
---------
run      Start the simulated device and stream frames until the duration
         expires or Ctrl+C is pressed
inspect  Decode a persisted <YYYYmmddHHMMSS>.gzip frame file

Examples:
---------
$ device-simulator run --target tcp://127.0.0.1:9000 --persist-dir frames/
$ device-simulator run --config config/simulator.yaml --duration 60
$ device-simulator inspect frames/20261019123045.gzip

Exit Codes:
-----------
0  clean stop
1  pipeline error (connection, compression, frame decoding)
2  configuration error

Author: Device Simulator Team
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from telemetry.frames import read_frame_file
from transport.connection import create_connection
from utils.config import (
    ConfigError,
    DEFAULT_CONFIG,
    SimulatorConfig,
    load_config,
    merge_configs,
)
from utils.errors import PipelineError
from utils.logging import log_error, log_statistics, setup_logging

from .simulation import RunOutcome, SimulationLoop

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="device-simulator",
        description="Simulated accelerometer device streaming gzip telemetry frames",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Stream telemetry to an endpoint")
    run.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file",
    )
    run.add_argument(
        "--target",
        default=None,
        help=f"Connection target (default: {DEFAULT_CONFIG['connection_target']})",
    )
    run.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Samples per frame (default: {DEFAULT_CONFIG['batch_size']})",
    )
    run.add_argument(
        "--tick-interval-ms",
        type=float,
        default=None,
        help=f"Delay between ticks in ms (default: {DEFAULT_CONFIG['tick_interval_ms']})",
    )
    run.add_argument(
        "--persist-dir",
        type=Path,
        default=None,
        help="Store every sent frame in this directory",
    )
    run.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until interrupted)",
    )
    run.add_argument(
        "--log-level",
        default=None,
        help=f"Log level (default: {DEFAULT_CONFIG['logging']['level']})",
    )
    run.add_argument(
        "--log-dir",
        default=None,
        help="Also write rotating log files to this directory",
    )

    inspect = subparsers.add_parser("inspect", help="Decode a stored frame file")
    inspect.add_argument("path", type=Path, help="Path to a .gzip frame file")

    return parser


def build_run_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge defaults, the optional config file and command-line overrides.

    Returns:
        Raw configuration dictionary
    """
    file_config = load_config(args.config) if args.config else {}
    config = merge_configs(DEFAULT_CONFIG, file_config)

    overrides: Dict[str, Any] = {}
    if args.target is not None:
        overrides["connection_target"] = args.target
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.tick_interval_ms is not None:
        overrides["tick_interval_ms"] = args.tick_interval_ms
    if args.persist_dir is not None:
        overrides["persist_enabled"] = True
        overrides["persist_directory"] = str(args.persist_dir)
    if args.log_level is not None:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_dir is not None:
        overrides.setdefault("logging", {}).update({"dir": args.log_dir, "file_output": True})

    return merge_configs(config, overrides)


async def run_simulation(config: SimulatorConfig,
                         duration: Optional[float] = None) -> RunOutcome:
    """
    Run the simulated device until duration expires, the run fails or the
    task is interrupted.

    Args:
        config: Simulator configuration
        duration: Seconds to run (None: until interrupted)

    Returns:
        RunOutcome of the run
    """
    sim = SimulationLoop(config, create_connection(config.connection_target))
    await sim.start()

    try:
        await sim.wait(timeout=duration)
    except asyncio.CancelledError:
        logger.info("Interrupted, stopping")
    outcome = await sim.stop()

    log_statistics(sim.get_statistics())
    return outcome


def run_command(args: argparse.Namespace) -> int:
    """Execute the `run` command."""
    try:
        raw = build_run_config(args)
        log_settings = raw["logging"]
        setup_logging(
            log_dir=log_settings["dir"],
            level=log_settings["level"],
            file_output=bool(log_settings["file_output"]),
        )
        config = SimulatorConfig.from_dict(raw)
        create_connection(config.connection_target)  # reject unknown targets before starting
        if config.persist_enabled:
            config.persist_directory.mkdir(parents=True, exist_ok=True)
    except (ConfigError, ValueError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        outcome = asyncio.run(run_simulation(config, duration=args.duration))
    except KeyboardInterrupt:
        return 0
    except PipelineError as e:
        log_error(e, context="Simulation failed to start")
        return 1

    return 0 if outcome == RunOutcome.CANCELLED else 1


def inspect_command(args: argparse.Namespace) -> int:
    """Execute the `inspect` command."""
    try:
        samples = read_frame_file(args.path)
    except (PipelineError, OSError) as e:
        print(f"Cannot read {args.path}: {e}", file=sys.stderr)
        return 1

    for sample in samples:
        print(f"{sample.timestamp.isoformat()}  "
              f"x={sample.x:+.4f}  y={sample.y:+.4f}  z={sample.z:+.4f}")
    print(f"{len(samples)} samples")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "run":
        return run_command(args)
    return inspect_command(args)


if __name__ == "__main__":
    sys.exit(main())
