"""Project module discovery and scanning."""

from __future__ import annotations

import concurrent.futures
import logging
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List

from .exceptions import FindUnusedExportsError, ModuleReadError
from .language.js_ts import ModuleScan, scan_module_code

logger = logging.getLogger(__name__)

# Recursively matches TypeScript (`.mts`, `.cts`, `.ts` and `.tsx`) and
# JavaScript (`.mjs`, `.cjs`, `.js` and `.jsx`) modules. TypeScript definition
# files are excluded by the scanner while this glob is in use.
MODULE_GLOB = "**/*.{mjs,cjs,js,jsx,mts,cts,ts,tsx}"

GITIGNORE_FILE = ".gitignore"


def _translate_glob(pattern: str, braces: bool = True) -> str:
    """Translate a glob to a regular expression matching POSIX relative paths.

    Supports ``**`` (any number of directories), ``*``, ``?``, ``[...]``
    classes and, if ``braces`` is set, nestable ``{a,b}`` alternation.
    """
    if braces and pattern.count("{") != pattern.count("}"):
        braces = False

    out: List[str] = []
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            at_segment_start = i == 0 or pattern[i - 1] == "/"
            if j - i >= 2 and at_segment_start and (j == n or pattern[j] == "/"):
                if j == n:
                    out.append(".*")
                    i = j
                else:
                    out.append("(?:[^/]*/)*")
                    i = j + 1
                continue
            out.append("[^/]*")
            i = j
            continue
        if char == "?":
            out.append("[^/]")
        elif char == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[i + 1:end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        elif char == "{" and braces:
            depth += 1
            out.append("(?:")
        elif char == "," and braces and depth:
            out.append("|")
        elif char == "}" and braces and depth:
            depth -= 1
            out.append(")")
        elif char == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(pattern[i]))
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


def compile_glob(pattern: str, braces: bool = True) -> re.Pattern[str]:
    """Compile a glob for use with :meth:`re.Pattern.fullmatch`."""
    return re.compile(_translate_glob(pattern, braces=braces))


@dataclass(slots=True)
class IgnoreRule:
    """A single ``.gitignore`` pattern, scoped to the directory declaring it."""

    base: str
    regex: re.Pattern[str]
    negated: bool = False
    directory_only: bool = False

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.base:
            prefix = self.base + "/"
            if not relative_path.startswith(prefix):
                return False
            relative_path = relative_path[len(prefix):]
        return self.regex.fullmatch(relative_path) is not None


def parse_gitignore(text: str, base: str = "") -> List[IgnoreRule]:
    """Parse ``.gitignore`` content into rules relative to ``base``."""
    rules: List[IgnoreRule] = []
    for line in text.splitlines():
        stripped = line.rstrip()
        if stripped.endswith("\\") and len(line) > len(stripped):
            # An escaped trailing space is kept.
            stripped = stripped[:-1] + " "
        line = stripped
        if not line or line.startswith("#"):
            continue

        negated = line.startswith("!")
        if negated:
            line = line[1:]
        elif line.startswith(("\\#", "\\!")):
            line = line[1:]

        directory_only = line.endswith("/")
        line = line.rstrip("/")
        if not line:
            continue

        # A slash anywhere but the end anchors the pattern to its directory.
        if "/" not in line:
            line = "**/" + line
        rules.append(
            IgnoreRule(
                base=base,
                regex=compile_glob(line.lstrip("/"), braces=False),
                negated=negated,
                directory_only=directory_only,
            )
        )
    return rules


class ProjectScanner:
    """Discover a project's modules and scan them into a project scan index."""

    # Excluded only with the default module glob; a custom glob replaces it.
    DEFAULT_IGNORE_GLOBS = [
        "**/*.d.ts",
        "**/*.d.mts",
        "**/*.d.cts",
    ]
    PRUNED_DIRS = {".git"}

    def __init__(
        self,
        cwd: Path | str,
        module_glob: str = MODULE_GLOB,
        ignore_globs: list[str] | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.cwd = Path(os.path.abspath(cwd))
        self.module_glob = module_glob
        self.module_pattern = compile_glob(module_glob)
        self.ignore_patterns = [
            compile_glob(pattern)
            for pattern in [
                *(self.DEFAULT_IGNORE_GLOBS if module_glob == MODULE_GLOB else []),
                *(ignore_globs or []),
            ]
        ]
        self.max_workers = max_workers

    def iter_module_paths(self) -> Iterator[str]:
        """Yield absolute paths of modules matching the module glob.

        Files and directories ignored by ``.gitignore`` files are skipped.
        Dotfiles are included.
        """
        rules: List[IgnoreRule] = []

        for dirpath, dirnames, filenames in os.walk(self.cwd):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.cwd).as_posix()
            rel_dir = "" if rel_dir == "." else rel_dir

            if GITIGNORE_FILE in filenames:
                rules.extend(self._load_gitignore(current / GITIGNORE_FILE, rel_dir))

            dirnames.sort()
            for i in range(len(dirnames) - 1, -1, -1):
                name = dirnames[i]
                if name in self.PRUNED_DIRS or self._is_gitignored(rules, _join(rel_dir, name), True):
                    del dirnames[i]

            for name in sorted(filenames):
                rel_path = _join(rel_dir, name)
                if not self.module_pattern.fullmatch(rel_path):
                    continue
                if any(pattern.fullmatch(rel_path) for pattern in self.ignore_patterns):
                    continue
                if self._is_gitignored(rules, rel_path, False):
                    continue
                yield str(current / name)

    @staticmethod
    def _load_gitignore(path: Path, base: str) -> List[IgnoreRule]:
        try:
            return parse_gitignore(path.read_text(encoding="utf-8"), base)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return []

    @staticmethod
    def _is_gitignored(rules: List[IgnoreRule], relative_path: str, is_dir: bool) -> bool:
        # The last matching rule wins, so negations can re-include paths.
        ignored = False
        for rule in rules:
            if rule.matches(relative_path, is_dir):
                ignored = not rule.negated
        return ignored

    def scan(self) -> Dict[str, ModuleScan]:
        """Scan every module concurrently and return the complete scan index.

        The first read or parse failure aborts the scan, as resolving unused
        exports requires every module.
        """
        start_time = time.time()
        paths = list(self.iter_module_paths())
        logger.debug("Found %d modules in %s", len(paths), self.cwd)

        index: Dict[str, ModuleScan] = {}

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {executor.submit(scan_module_file, path): path for path in paths}
            try:
                for future in concurrent.futures.as_completed(future_to_path):
                    index[future_to_path[future]] = future.result()
            except FindUnusedExportsError:
                for future in future_to_path:
                    future.cancel()
                raise

        logger.debug("Scanned %d modules in %.4fs", len(index), time.time() - start_time)
        return index


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name


def scan_module_file(path: str) -> ModuleScan:
    """Read a module file and scan it."""
    try:
        code = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ModuleReadError(f"Could not read module file {path}: {e}", path=path) from e
    return scan_module_code(code, path)
