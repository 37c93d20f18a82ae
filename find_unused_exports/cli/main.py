"""
Command line entrypoints for find-unused-exports.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from find_unused_exports import __version__
from find_unused_exports.cli.command_handlers import handle_find, handle_server, report_cli_error
from find_unused_exports.config import load_config
from find_unused_exports.core.logging_utils import configure_logging

logger = logging.getLogger(__name__)

CLI_DESCRIPTION = "find-unused-exports"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="find-unused-exports",
        description=(
            "Find unused ECMAScript module exports in the project in the current "
            "working directory. .gitignore files are used to ignore files."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --module-glob "**/*.{mjs,jsx}"
  %(prog)s --resolve-file-extensions mjs,js --resolve-index-files
  %(prog)s --json > unused-exports.json

Ignore exports with a comment in the module:
  // ignore unused exports
  // ignore unused exports a, default
        """,
    )
    parser.add_argument(
        "--module-glob",
        default=None,
        help="Module file glob pattern (default: all JavaScript and TypeScript modules).",
    )
    parser.add_argument(
        "--resolve-file-extensions",
        default=None,
        metavar="EXTENSIONS",
        help="Comma separated file extensions (without the leading '.', in preference "
        "order) to resolve extensionless import specifiers, e.g. 'mjs,js'.",
    )
    parser.add_argument(
        "--resolve-index-files",
        action="store_true",
        help="Resolve directory index files in extensionless import specifiers. "
        "Requires --resolve-file-extensions.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file path (default: find-unused-exports.yaml if present).",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``find-unused-exports`` CLI and return the exit code."""
    args = build_parser().parse_args(argv)
    cwd = Path.cwd()

    try:
        config = load_config(cwd, args.config)
        configure_logging(
            "DEBUG" if args.verbose else config.logging.level,
            log_file=config.logging.path,
        )
        return handle_find(
            cwd=cwd,
            config=config,
            module_glob=args.module_glob,
            resolve_file_extensions=args.resolve_file_extensions,
            resolve_index_files=args.resolve_index_files,
            as_json=args.json,
            no_color=args.no_color,
        )
    except Exception as error:
        report_cli_error(CLI_DESCRIPTION, error)
        return 1


def server_main(argv: Sequence[str] | None = None) -> int:
    """Run the ``find-unused-exports-server`` API server."""
    parser = argparse.ArgumentParser(
        prog="find-unused-exports-server",
        description="Serve the find-unused-exports HTTP API.",
    )
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Default project directory.")
    parser.add_argument("--host", default=None, help="Host to bind (default from config).")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default from config).")
    parser.add_argument("--config", default=None, help="Config file path.")
    args = parser.parse_args(argv)

    root = Path(str(args.root).strip('"\'')).resolve()
    try:
        config = load_config(root, args.config)
        configure_logging(config.logging.level, log_file=config.logging.path)
        handle_server(root, config, args.host, args.port)
    except Exception as error:
        report_cli_error("find-unused-exports-server", error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
