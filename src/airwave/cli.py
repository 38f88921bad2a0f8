"""
Airwave CLI - entry point.

Command-line flags are translated into AIRWAVE_* environment variables so
they take precedence over config.toml through the normal config layering.
"""

import argparse
import os
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="airwave",
        description="Airwave - internet radio in your terminal",
    )
    parser.add_argument(
        "--mode",
        choices=("rc", "http"),
        help="VLC control interface (overrides playback.mode)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the built-in sample stations instead of radio-browser",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config.toml",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="Log file verbosity (overrides logging.level)",
    )
    return parser


def apply_args(args: argparse.Namespace, environ=None) -> None:
    """Export parsed flags as environment overrides."""
    env = os.environ if environ is None else environ
    if args.mode:
        env["AIRWAVE_PLAYBACK_MODE"] = args.mode
    if args.offline:
        env["AIRWAVE_OFFLINE"] = "1"
    if args.config:
        env["AIRWAVE_CONFIG"] = args.config
    if args.log_level:
        env["AIRWAVE_LOG_LEVEL"] = args.log_level


def main() -> None:
    """Main entry point for the airwave command."""
    args = build_parser().parse_args()
    apply_args(args)

    from .main import interactive_mode

    sys.exit(interactive_mode())


if __name__ == "__main__":
    main()
