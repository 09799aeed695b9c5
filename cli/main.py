#!/usr/bin/env python3
"""
devsetup CLI - bring a freshly cloned workspace to a runnable dev environment.

Usage:
    devsetup                    - interactive setup in the current directory
    devsetup --root ../my-app   - set up another workspace
    devsetup --defaults         - accept every default, decline optional steps
    devsetup -v                 - verbose diagnostic logging

Config: tool behaviour is read from DEVSETUP_* environment variables
        (package manager, org scope, readiness budget). See core/config.py.
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from bootstrap.wizard import run_setup
from cli.prompts import Prompter
from core.config import get_settings
from core.console import print_error
from core.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devsetup",
        description="Set up .env files, package names, and local services for a workspace",
    )
    parser.add_argument(
        "--root", type=Path, default=None,
        help="Workspace root (default: current directory)",
    )
    parser.add_argument(
        "--defaults", action="store_true",
        help="Non-interactive: accept defaults, skip optional steps",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    workspace = (args.root or Path.cwd()).resolve()
    if not workspace.is_dir():
        print_error(f"Workspace not found: {workspace}")
        sys.exit(2)

    try:
        settings = get_settings()
    except ValidationError as e:
        print_error(f"Invalid DEVSETUP_* settings:\n{e}")
        sys.exit(2)

    prompter = Prompter(assume_defaults=args.defaults)
    sys.exit(run_setup(workspace, settings, prompter))


if __name__ == "__main__":
    main()
