"""Cross-module resolution of unused exports.

All possibly unused exports are mapped by module absolute file path, then any
found to be imported by a project module are eliminated. Elimination only ever
removes names, so processing order, import cycles and self imports need no
special handling.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Mapping, Optional, Sequence, Set
from urllib.parse import unquote, urlsplit

from .exceptions import ConfigurationError
from .language.js_ts import NAMESPACE, ModuleScan

logger = logging.getLogger(__name__)

ProjectScanIndex = Mapping[str, ModuleScan]
UnusedExportsResult = Dict[str, Set[str]]

RELATIVE_SPECIFIER_PREFIXES = ("/", "./", "../")

# TypeScript import specifiers may use a JavaScript file extension to resolve
# a TypeScript file in that directory with the same name.
SIBLING_EXTENSIONS = {
    ".mjs": (".mts",),
    ".cjs": (".cts",),
    ".js": (".ts", ".tsx"),
}


def resolve_specifier_path(specifier: str, importer_path: str) -> Optional[str]:
    """Resolve an import specifier to an absolute file path.

    Only relative (``./``, ``../``), absolute (``/``) and ``file:`` URL
    specifiers resolve; bare specifiers and other URL schemes aren't project
    files, so ``None`` is returned for them.
    """
    if specifier.startswith(RELATIVE_SPECIFIER_PREFIXES):
        path = unquote(urlsplit(specifier).path)
        return os.path.normpath(os.path.join(os.path.dirname(importer_path), path))

    parts = urlsplit(specifier)
    if parts.scheme == "file":
        return os.path.normpath(unquote(parts.path))

    return None


def candidate_module_paths(
    specifier_path: str,
    resolve_file_extensions: Optional[Sequence[str]] = None,
    resolve_index_files: bool = False,
) -> List[str]:
    """List possible module file paths for a resolved specifier path.

    The order is the resolution preference; the first path that's a scanned
    module wins.
    """
    paths = [specifier_path]
    stem, extension = os.path.splitext(specifier_path)

    if extension in SIBLING_EXTENSIONS:
        paths.extend(f"{stem}{sibling}" for sibling in SIBLING_EXTENSIONS[extension])
    elif not extension and resolve_file_extensions:
        paths.extend(f"{specifier_path}.{ext}" for ext in resolve_file_extensions)
        if resolve_index_files:
            paths.extend(
                os.path.join(specifier_path, f"index.{ext}") for ext in resolve_file_extensions
            )

    return paths


def resolve_unused_exports(
    scans: ProjectScanIndex,
    resolve_file_extensions: Optional[Sequence[str]] = None,
    resolve_index_files: bool = False,
) -> UnusedExportsResult:
    """Find exports of the scanned modules never imported by another module.

    Args:
        scans: Module scans keyed by absolute module file path.
        resolve_file_extensions: File extensions (without the leading ``.``,
            in preference order) to resolve extensionless import specifiers.
        resolve_index_files: Whether extensionless import specifiers also
            resolve directory index files. Requires ``resolve_file_extensions``.

    Returns:
        Map of module file paths to their unused export names. Modules without
        unused exports are absent.
    """
    if resolve_index_files and not resolve_file_extensions:
        raise ConfigurationError(
            "Option `resolveIndexFiles` can only be `true` if the option "
            "`resolveFileExtensions` is used."
        )

    possibly_unused: UnusedExportsResult = {
        path: set(scan.exports) for path, scan in scans.items() if scan.exports
    }

    for path, scan in scans.items():
        for specifier, imported_names in scan.imports.items():
            specifier_path = resolve_specifier_path(specifier, path)
            if specifier_path is None:
                logger.debug("Skipping unresolvable specifier %r in %s", specifier, path)
                continue

            # No match means either none of the imported module's exports
            # remain unused, or the import isn't a project module.
            imported_module_path = next(
                (
                    candidate
                    for candidate in candidate_module_paths(
                        specifier_path, resolve_file_extensions, resolve_index_files
                    )
                    if candidate in possibly_unused
                ),
                None,
            )
            if imported_module_path is None:
                continue

            remaining = possibly_unused[imported_module_path]
            if NAMESPACE in imported_names:
                remaining.clear()
            else:
                remaining.difference_update(imported_names)

            if not remaining:
                del possibly_unused[imported_module_path]

    return possibly_unused
