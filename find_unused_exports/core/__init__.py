"""Core modules for scanning modules and resolving unused exports."""

from .analyzer import find_unused_exports, is_directory_path
from .exceptions import (
    CliError,
    ConfigurationError,
    FindUnusedExportsError,
    ModuleParseError,
    ModuleReadError,
)
from .language.js_ts import ModuleScan, scan_module_code
from .report import UnusedExportsReport
from .resolver import resolve_unused_exports
from .scanner import MODULE_GLOB, ProjectScanner, scan_module_file

__all__ = [
    "MODULE_GLOB",
    "CliError",
    "ConfigurationError",
    "FindUnusedExportsError",
    "ModuleParseError",
    "ModuleReadError",
    "ModuleScan",
    "ProjectScanner",
    "UnusedExportsReport",
    "find_unused_exports",
    "is_directory_path",
    "resolve_unused_exports",
    "scan_module_code",
    "scan_module_file",
]
