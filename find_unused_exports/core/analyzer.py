"""
Project analysis: find unused ECMAScript module exports.

Options are validated before any module is scanned, the project is scanned
into a complete scan index, then unused exports are resolved across modules.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Optional, Sequence

from .exceptions import ConfigurationError
from .resolver import UnusedExportsResult, resolve_unused_exports
from .scanner import MODULE_GLOB, ProjectScanner

logger = logging.getLogger(__name__)


def is_directory_path(path: str | os.PathLike) -> bool:
    """Check if a filesystem path is an accessible directory."""
    if not isinstance(path, (str, os.PathLike)):
        raise TypeError("Argument 1 `path` must be a string.")

    try:
        return Path(path).is_dir()
    except OSError:
        return False


def validate_options(
    cwd: Any,
    module_glob: Any,
    resolve_file_extensions: Any,
    resolve_index_files: Any,
) -> str:
    """Validate analysis options, returning the absolute ``cwd``.

    Raises :class:`ConfigurationError` for the first invalid option.
    """
    if cwd is None:
        cwd = os.getcwd()

    if not isinstance(cwd, (str, os.PathLike)):
        raise ConfigurationError("Option `cwd` must be a string.")

    if not is_directory_path(cwd):
        raise ConfigurationError(
            "Option `cwd` must be an accessible directory path.",
            details={"cwd": str(cwd)},
        )

    if not isinstance(module_glob, str):
        raise ConfigurationError("Option `moduleGlob` must be a string.")

    if resolve_file_extensions is not None and (
        not isinstance(resolve_file_extensions, (list, tuple))
        or not resolve_file_extensions
        or not all(isinstance(ext, str) and ext for ext in resolve_file_extensions)
    ):
        raise ConfigurationError("Option `resolveFileExtensions` must be an array of strings.")

    if not isinstance(resolve_index_files, bool):
        raise ConfigurationError("Option `resolveIndexFiles` must be a boolean.")

    if resolve_index_files and not resolve_file_extensions:
        raise ConfigurationError(
            "Option `resolveIndexFiles` can only be `true` if the option "
            "`resolveFileExtensions` is used."
        )

    return os.path.abspath(cwd)


def find_unused_exports(
    cwd: Optional[str | os.PathLike] = None,
    module_glob: str = MODULE_GLOB,
    resolve_file_extensions: Optional[Sequence[str]] = None,
    resolve_index_files: bool = False,
    max_workers: Optional[int] = None,
) -> UnusedExportsResult:
    """Find unused ECMAScript module exports in a project.

    ``.gitignore`` files are used to ignore files.

    Args:
        cwd: Directory to scope the search for modules and ``.gitignore``
            files, defaulting to the process working directory.
        module_glob: Module file glob pattern, defaulting to ``MODULE_GLOB``.
        resolve_file_extensions: File extensions (without the leading ``.``,
            in preference order) to automatically resolve in extensionless
            import specifiers, e.g. ``["mjs", "js"]`` for projects that
            resolve extensionless imports at build time.
        resolve_index_files: Whether directory index files are automatically
            resolved in extensionless import specifiers. Only valid with
            ``resolve_file_extensions``.
        max_workers: Maximum number of threads scanning modules.

    Returns:
        Map of module file paths to their unused export names.
    """
    cwd = validate_options(cwd, module_glob, resolve_file_extensions, resolve_index_files)

    start_time = time.time()
    scanner = ProjectScanner(cwd, module_glob=module_glob, max_workers=max_workers)
    scans = scanner.scan()

    unused_exports = resolve_unused_exports(
        scans,
        resolve_file_extensions=list(resolve_file_extensions) if resolve_file_extensions else None,
        resolve_index_files=resolve_index_files,
    )

    logger.info(
        "Found %d unused exports in %d of %d modules (%.2fs)",
        sum(len(names) for names in unused_exports.values()),
        len(unused_exports),
        len(scans),
        time.time() - start_time,
    )
    return unused_exports
