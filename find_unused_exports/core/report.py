"""Reporting helpers for unused export results."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

BOLD = "\033[1m"
DIM = "\033[2m"
UNDERLINE = "\033[4m"
RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"


def style(text: str, *codes: str, color: bool = True) -> str:
    """Wrap ``text`` in ANSI escape ``codes`` when ``color`` is enabled."""
    if not color or not codes:
        return text
    return "".join(codes) + text + RESET


@dataclass(slots=True)
class UnusedModule:
    """A module with unused exports."""

    path: str
    relative_path: str
    exports: list[str] = field(default_factory=list)


@dataclass(slots=True)
class UnusedExportsReport:
    """Serializable report summarizing unused exports found in a project."""

    cwd: Path
    modules: list[UnusedModule]
    schema_version: str = "1.0"

    @property
    def module_count(self) -> int:
        return len(self.modules)

    @property
    def export_count(self) -> int:
        return sum(len(module.exports) for module in self.modules)

    @staticmethod
    def from_result(cwd: Path | str, result: Mapping[str, Iterable[str]]) -> "UnusedExportsReport":
        """Build a report from a map of module paths to unused export names.

        Modules are sorted by path so the report is deterministic.
        """
        cwd = Path(cwd)
        modules = [
            UnusedModule(
                path=path,
                relative_path=Path(os.path.relpath(path, cwd)).as_posix(),
                exports=sorted(result[path]),
            )
            for path in sorted(result)
        ]
        return UnusedExportsReport(cwd=cwd, modules=modules)

    def to_dict(self) -> dict[str, object]:
        """Represent the report as a JSON-serializable dictionary.

        The schema for this dictionary is:
        {
            "report_schema_version": "1.0",
            "cwd": str,
            "modules": [
                {"path": str, "relative_path": str, "exports": [str]}
            ],
            "module_count": int,
            "export_count": int
        }
        """
        return {
            "report_schema_version": self.schema_version,
            "cwd": str(self.cwd),
            "modules": [
                {
                    "path": module.path,
                    "relative_path": module.relative_path,
                    "exports": list(module.exports),
                }
                for module in self.modules
            ],
            "module_count": self.module_count,
            "export_count": self.export_count,
        }

    def summary(self) -> str:
        exports = self.export_count
        modules = self.module_count
        return (
            f"{exports} unused export{'' if exports == 1 else 's'} "
            f"in {modules} module{'' if modules == 1 else 's'}."
        )

    def format_lines(self, color: bool = True) -> list[str]:
        """Render the report for a terminal, one module per group of lines."""
        lines: list[str] = []
        for module in self.modules:
            lines.append("")
            lines.append(style(module.relative_path, UNDERLINE, RED, color=color))
            lines.append("  " + style(", ".join(module.exports), DIM, RED, color=color))
        lines.append("")
        lines.append(style(self.summary(), BOLD, RED, color=color))
        lines.append("")
        return lines
