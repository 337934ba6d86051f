"""Command-line interface for the encode action."""

import argparse
import logging
import os
import sys
import uuid

from ffencode.binary import resolve_binary
from ffencode.config import load_settings
from ffencode.encoder import execute
from ffencode.errors import EncodeError
from ffencode.models import EncodeOptions, Job
from ffencode.presets import PRESETS, list_presets


def parse_param(value: str):
    """Parse a FLAG=VALUE pair given on the command line."""
    flag, sep, arg = value.partition("=")
    if not sep or not flag:
        raise argparse.ArgumentTypeError(f"Expected FLAG=VALUE, got '{value}'")
    if not flag.startswith("-"):
        flag = "-" + flag
    return flag, arg


def configure_logging(level: str):
    """Set up root logging unless the entry script already did."""
    log_level = os.environ.get("LOG_LEVEL", level).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="[%(levelname)s] %(asctime)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def print_presets():
    """Print all presets with their default flags."""
    for name in list_presets():
        defaults = PRESETS[name]
        print(f"[{name}]")
        for flag, value in defaults.items():
            print(f"  {flag} {value}")
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ffmpeg encode action")
    parser.add_argument("--config", help="Path to settings JSON")
    parser.add_argument("--workpath", help="Directory used to cache the ffmpeg binary")
    parser.add_argument("--debug", action="store_true", help="Log ffmpeg stdout as well")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("presets", help="List available presets")
    subparsers.add_parser("fetch", help="Locate or download the ffmpeg binary")

    encode_parser = subparsers.add_parser("encode", help="Encode a file")
    encode_parser.add_argument("input", help="Path to input file")
    encode_parser.add_argument("output", help="Path to output file")
    encode_parser.add_argument("--preset", help=f"Output preset ({', '.join(list_presets())})")
    encode_parser.add_argument(
        "--param", type=parse_param, action="append", default=[],
        metavar="FLAG=VALUE", help="Override or add an ffmpeg flag, leading dash optional (repeatable)",
    )
    return parser


def cli_main(argv=None) -> int:
    """Command-line interface entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "presets":
        print_presets()
        return 0

    if args.command not in ("fetch", "encode"):
        parser.print_help()
        return 1

    settings = load_settings(args.config, workpath=args.workpath)
    configure_logging(settings.log_level)
    settings.debug = settings.debug or args.debug

    try:
        if args.command == "fetch":
            print(resolve_binary(settings))
            return 0

        def print_progress(job, percentage):
            print(f"\rProgress: {percentage}%", end="", flush=True)

        job = Job(uid=uuid.uuid4().hex[:8], workpath=os.getcwd(), output=args.input)
        options = EncodeOptions(
            preset=args.preset,
            output=args.output,
            params=dict(args.param),
            on_progress=print_progress,
        )
        execute(job, settings, options)
        print("\n[✓] Encoding completed successfully!")
        return 0
    except EncodeError as e:
        print(f"\n[✗] {e}", file=sys.stderr)
        return 1


def main():
    sys.exit(cli_main())
