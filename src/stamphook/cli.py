"""Command-line interface for stamphook."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

from stamphook import __version__
from stamphook.errors import ConfigurationError, InstallFailed
from stamphook.hooks.features import KNOWN_FEATURES
from stamphook.installer import install_hooks, render_hooks
from stamphook.logging import configure_logging, get_logger, select_level
from stamphook.settings import resolve_settings, split_features

EXIT_OK = 0
EXIT_INSTALL_FAILED = 1
EXIT_CONFIG_ERROR = 2


@dataclasses.dataclass(frozen=True)
class CliArgs:
    """Parsed command-line arguments."""

    command: Literal["install", "show"]
    project_root: Path | None
    tool_version: str | None
    features: tuple[str, ...]
    no_default_features: bool
    log_level: str
    log_file: Path | None
    debug: bool
    quiet: bool


def parse_args(argv: Sequence[str] | None = None) -> CliArgs:
    """
    Parse command-line arguments.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Parsed arguments as CliArgs dataclass.
    """
    parser = argparse.ArgumentParser(
        prog="stamphook",
        description="Install version-stamped Git hooks that run project checks",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["install", "show"],
        default="install",
        help="install hooks, or show the scripts that would be installed "
        "(default: install)",
    )

    parser.add_argument(
        "--project-root",
        type=Path,
        default=None,
        help="Project root (default: $STAMPHOOK_PROJECT_ROOT or current directory)",
    )

    parser.add_argument(
        "--tool-version",
        default=None,
        help="Version stamped into hooks (default: $STAMPHOOK_VERSION or "
        "the installed stamphook version)",
    )

    parser.add_argument(
        "--features",
        action="append",
        default=[],
        metavar="LIST",
        help=f"Comma-separated features to enable ({', '.join(KNOWN_FEATURES)})",
    )

    parser.add_argument(
        "--no-default-features",
        action="store_true",
        help="Do not enable the default features",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (default: INFO; DEBUG with --debug, WARNING with --quiet)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Log file path (default: stderr)",
    )

    parser.add_argument(
        "-v",
        "--debug",
        action="store_true",
        help="Enable debug mode (sets log level to DEBUG unless --log-level is specified)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report skipped hooks and errors (sets log level to WARNING)",
    )

    args = parser.parse_args(argv)

    log_level = select_level(
        explicit=args.log_level, debug=args.debug, quiet=args.quiet
    )

    features: list[str] = []
    for value in args.features:
        features.extend(split_features(value))

    return CliArgs(
        command=args.command,
        project_root=args.project_root,
        tool_version=args.tool_version,
        features=tuple(features),
        no_default_features=args.no_default_features,
        log_level=log_level,
        log_file=args.log_file,
        debug=args.debug,
        quiet=args.quiet,
    )


def run(argv: Sequence[str] | None = None) -> int:
    """
    Run stamphook.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code: 0 on success (skips included), 1 when writing a hook
        failed, 2 on a configuration error.
    """
    args = parse_args(argv)

    configure_logging(level=args.log_level, log_file=args.log_file)
    logger = get_logger("main")
    logger.debug("Configuration: %s", args)

    try:
        settings = resolve_settings(
            project_root=args.project_root,
            version=args.tool_version,
            features=args.features,
            no_default_features=args.no_default_features,
        )

        if args.command == "show":
            for script in render_hooks(
                settings.project_root, settings.version, settings.features
            ):
                sys.stdout.write(f"==> {script.name} <==\n{script.content}")
            return EXIT_OK

        install_hooks(settings.project_root, settings.version, settings.features)
        return EXIT_OK

    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    except InstallFailed as exc:
        logger.error("%s", exc)
        return EXIT_INSTALL_FAILED


def main() -> None:
    sys.exit(run())
