#!/usr/bin/env python3
# cli.py: command-line entry point for pingstorm

import argparse
import asyncio
import logging
import sys

from pingstorm.config import RunConfig, parse_duration
from pingstorm.core import StressRun
from pingstorm.errors import ConfigError, IncompleteRunError, LaunchError
from pingstorm.launcher import DEFAULT_PING_BIN, PingLauncher, ProbeOptions
from pingstorm.logging_config import setup_logging
from pingstorm.rendering import render_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pingstorm",
        description="Flood one host with parallel ping workers and report delivery and bandwidth.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "target",
        nargs="?",
        help="Host name or address to probe (prompted for when omitted)",
    )
    parser.add_argument(
        "-d",
        "--duration",
        default=None,
        help="Run duration in whole seconds (prompted for when omitted)",
    )

    # Probe
    parser.add_argument(
        "-6",
        "--ipv6",
        action="store_true",
        help="Force IPv6 probing",
    )
    parser.add_argument(
        "--ping-bin",
        default=DEFAULT_PING_BIN,
        help="Path to the ping executable",
    )

    # Output & Debugging
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show the progress spinner",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to write logs to (e.g., pingstorm.log)",
    )

    return parser


def prompt(label: str) -> str:
    try:
        return input(label)
    except EOFError:
        return ""


def resolve_config(args: argparse.Namespace) -> RunConfig:
    target = args.target if args.target is not None else prompt("Enter the host: ")
    raw_duration = args.duration if args.duration is not None else prompt("Enter duration in seconds: ")
    duration = parse_duration(raw_duration)
    return RunConfig.create(target=target, duration_s=duration)


async def run(args: argparse.Namespace) -> int:
    config = resolve_config(args)
    launcher = PingLauncher(ProbeOptions(ping_bin=args.ping_bin, ipv6=args.ipv6))

    logger.info(f"Using {config.worker_count} workers against {config.target} for {config.duration_s}s")

    stress = StressRun(config, launcher=launcher, use_progress_bar=not args.no_progress)
    report = await stress.run()

    print("\n" + "=" * 60)
    print(render_report(report))
    print("=" * 60)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    setup_logging(level=log_level, log_file=args.log_file)

    try:
        return asyncio.run(run(args))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except (LaunchError, IncompleteRunError) as e:
        logger.error(f"Run aborted: {e}")
        print(f"error: {e}", file=sys.stderr)
        return EXIT_RUN_FAILED


if __name__ == "__main__":
    sys.exit(main())
