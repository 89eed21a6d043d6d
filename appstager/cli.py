"""CLI entrypoint: ``appstager SERVICE_YAML STAGED_DIR``.

Stdout carries only the path of the staged service manifest; all progress
and diagnostics go to stderr.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from .errors import StagingError
from .logging import configure_logging
from .orchestrator import Orchestrator


class _StagerArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _StagerArgumentParser(
        prog="appstager",
        description="Stage an App Engine Go app in an empty directory.",
    )
    parser.add_argument(
        "service_yaml",
        type=Path,
        metavar="SERVICE_YAML",
        help="Path to the original '<service>.yaml' file (app.yaml); left untouched.",
    )
    parser.add_argument(
        "staged_dir",
        type=Path,
        metavar="STAGED_DIR",
        help="Path to an empty directory where the app should be staged.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for appstager."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        report = Orchestrator().run(args.service_yaml, args.staged_dir)
    except StagingError as exc:
        parser.exit(1, f"appstager: {exc}\n")
    print(report.manifest_path)


if __name__ == "__main__":
    main(sys.argv[1:])
