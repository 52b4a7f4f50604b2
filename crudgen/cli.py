# File: crudgen/cli.py
"""
crudgen - Command-Line Interface
==================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Basic generation inside a Laravel application
    crudgen Product --fields="title:string,price:decimal:nullable"

    # With relations, into another application root
    crudgen Comment --fields="body:text" \\
        --relations="belongsTo:Post,belongsTo:User" -p ../blog

    # See what would be written
    crudgen Product --fields="title:string" --dry-run -v

    # Show version
    crudgen --version

Exit codes:
    0 — success
    1 — lint warnings with --fail-on-warnings
    3 — export error
    4 — input/config error
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_LINT_FAILURE: int = 1
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root crudgen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crudgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from crudgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crudgen",
        description=(
            "crudgen — Laravel CRUD API scaffolding.\n\n"
            "Generates the migration, model, controller, form requests, "
            "API resource, routes, factory, seeder and feature test for "
            "one resource."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  %(prog)s Product --fields="title:string,price:decimal:nullable"\n'
            '  %(prog)s Comment --fields="body:text" --relations="belongsTo:Post"\n'
            '  %(prog)s Product --fields="title:string" --dry-run -v\n'
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"crudgen v{__version__}",
    )

    # --- Resource ---
    parser.add_argument(
        "name",
        metavar="NAME",
        help="Resource name in PascalCase, e.g. 'Product'.",
    )
    parser.add_argument(
        "--fields",
        type=str,
        default=None,
        metavar="SPEC",
        help="Comma-separated 'name[:type[:nullable]]' list.",
    )
    parser.add_argument(
        "--relations",
        type=str,
        default=None,
        metavar="SPEC",
        help="Comma-separated 'belongsTo:Model' / 'hasMany:Model' list.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Accepted for compatibility; existing files are always overwritten.",
    )

    # --- Config overrides ---
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON or YAML file with generation settings.",
    )
    config_group.add_argument(
        "-p", "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Laravel application root (default: current directory).",
    )
    config_group.add_argument(
        "--timestamp",
        type=str,
        default=None,
        metavar="Y_m_d_His",
        help="Fixed migration timestamp, e.g. '2024_01_31_120000'.",
    )
    config_group.add_argument(
        "--api-prefix",
        type=str,
        default=None,
        metavar="PREFIX",
        help="URL prefix used by the generated tests (default '/api').",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Render and report, but don't write files to disk.",
    )
    mode_group.add_argument(
        "--fail-on-warnings",
        action="store_true",
        default=False,
        help="Abort before writing anything if the input linter warns.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.base_path is not None:
        overrides["base_path"] = args.base_path

    if args.timestamp is not None:
        overrides["migration_timestamp"] = args.timestamp

    if args.api_prefix is not None:
        overrides["api_prefix"] = args.api_prefix

    if args.force:
        overrides["force"] = True

    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace, quiet: bool) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from crudgen.generator import CrudGenerator, GenerationReport, build_config
    from crudgen.models import GenerationConfig

    try:
        config: GenerationConfig = build_config(
            args.config, _build_config_overrides(args)
        )
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_INPUT_ERROR

    generator: CrudGenerator = CrudGenerator(
        fail_on_warnings=args.fail_on_warnings,
        dry_run=args.dry_run,
    )

    try:
        report: GenerationReport = generator.generate(
            args.name,
            fields_raw=args.fields,
            relations_raw=args.relations,
            config=config,
        )
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INPUT_ERROR

    if not quiet:
        print(report.summary())

    if report.aborted_on_warnings:
        return EXIT_LINT_FAILURE
    if report.export_errors:
        return EXIT_EXPORT_ERROR

    if not quiet and not report.dry_run:
        for step in report.next_steps():
            print(f"  → {step}")

    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    logger.info("Resource:   %s", args.name)
    logger.info("Fields:     %s", args.fields or "(none)")
    logger.info("Relations:  %s", args.relations or "(none)")

    exit_code: int = _run_generation(args, quiet=args.quiet)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_LINT_FAILURE",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("crudgen.cli loaded.")
