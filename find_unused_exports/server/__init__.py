"""HTTP API for find-unused-exports."""

from .api import FinderAPIServer

__all__ = ["FinderAPIServer"]
