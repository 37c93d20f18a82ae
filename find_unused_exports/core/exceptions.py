"""find-unused-exports exceptions."""

from __future__ import annotations


class FindUnusedExportsError(Exception):
    """Base exception for all find-unused-exports errors."""
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}

class ConfigurationError(FindUnusedExportsError, TypeError):
    """Raised when an option or config file value is invalid."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="INVALID_OPTION", details=details)

class ModuleReadError(FindUnusedExportsError):
    """Raised when a module file can't be read."""
    def __init__(self, message: str, path: str, details: dict | None = None):
        super().__init__(message, code="READ_FAILED", details={"path": path, **(details or {})})
        self.path = path

class ModuleParseError(FindUnusedExportsError):
    """Raised when module code can't be parsed.

    ``line`` and ``column`` are 1-based and point at the first syntax error.
    """
    def __init__(
        self,
        message: str,
        path: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        location = ""
        if path:
            location = path
        if line is not None:
            location = f"{location}:{line}:{column}" if location else f"{line}:{column}"
        super().__init__(
            f"{location}: {message}" if location else message,
            code="PARSE_FAILED",
            details={"path": path, "line": line, "column": column},
        )
        self.reason = message
        self.path = path
        self.line = line
        self.column = column

class CliError(FindUnusedExportsError):
    """An anticipated CLI error (e.g. invalid arguments), reported without a traceback."""
    def __init__(self, message: str):
        if not isinstance(message, str):
            raise TypeError("Argument 1 `message` must be a string.")
        super().__init__(message, code="CLI_ERROR")
