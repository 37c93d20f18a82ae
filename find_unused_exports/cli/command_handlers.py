"""Handlers behind the find-unused-exports command line entrypoints."""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import TextIO

from find_unused_exports.config import FinderConfig
from find_unused_exports.core.analyzer import find_unused_exports
from find_unused_exports.core.exceptions import CliError, FindUnusedExportsError
from find_unused_exports.core.report import BOLD, GREEN, RED, UnusedExportsReport, style

logger = logging.getLogger(__name__)


def use_color(stream: TextIO, disabled: bool = False) -> bool:
    """Whether ANSI colors should be written to ``stream``."""
    if disabled or os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return hasattr(stream, "isatty") and stream.isatty()


def report_cli_error(cli_description: str, error: BaseException, stream: TextIO | None = None, color: bool | None = None) -> None:
    """Report a CLI error on ``stderr``.

    Anticipated errors are shown by message only, anything else with its
    traceback.
    """
    if not isinstance(cli_description, str):
        raise TypeError("Argument 1 `cli_description` must be a string.")

    stream = stream or sys.stderr
    if color is None:
        color = use_color(stream)

    if isinstance(error, FindUnusedExportsError):
        detail = error.message
    else:
        detail = "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()

    print(f"\n{style(f'Error running {cli_description}:', BOLD, RED, color=color)}\n", file=stream)
    for line in detail.splitlines():
        print("  " + style(line, RED, color=color), file=stream)
    print(file=stream)


def merge_options(
    config: FinderConfig,
    module_glob: str | None,
    resolve_file_extensions: str | None,
    resolve_index_files: bool,
) -> dict:
    """Merge CLI arguments over config values into analysis options."""
    extensions = (
        resolve_file_extensions.split(",")
        if resolve_file_extensions is not None
        else config.resolve_file_extensions
    )
    index_files = resolve_index_files or config.resolve_index_files

    if resolve_index_files and not extensions:
        raise CliError(
            "The `--resolve-index-files` flag can only be used with the "
            "`--resolve-file-extensions` argument."
        )

    return {
        "module_glob": module_glob if module_glob is not None else config.module_glob,
        "resolve_file_extensions": extensions,
        "resolve_index_files": index_files,
        "max_workers": config.max_workers,
    }


def handle_find(
    cwd: Path,
    config: FinderConfig,
    module_glob: str | None,
    resolve_file_extensions: str | None,
    resolve_index_files: bool,
    as_json: bool,
    no_color: bool,
) -> int:
    """Find unused exports under ``cwd``, print the report and return the exit code."""
    options = merge_options(config, module_glob, resolve_file_extensions, resolve_index_files)
    logger.debug("Finding unused exports in %s with %s", cwd, options)

    unused_exports = find_unused_exports(cwd=cwd, **options)
    report = UnusedExportsReport.from_result(cwd, unused_exports)

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
        return 1 if report.module_count else 0

    if report.module_count:
        color = use_color(sys.stderr, no_color)
        for line in report.format_lines(color=color):
            print(line, file=sys.stderr)
        return 1

    color = use_color(sys.stdout, no_color)
    print(f"\n{style('0 unused exports.', BOLD, GREEN, color=color)}\n")
    return 0


def handle_server(root: Path, config: FinderConfig, host: str | None, port: int | None) -> None:
    """Start the find-unused-exports API server."""
    # Imported here so the plain CLI doesn't load the web stack.
    from find_unused_exports.server.api import FinderAPIServer

    server = FinderAPIServer(
        root=root,
        host=host or config.server.host,
        port=port or config.server.port,
        config=config,
    )
    server.start()
