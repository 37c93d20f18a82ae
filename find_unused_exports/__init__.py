"""find-unused-exports package bootstrap."""

from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "__version__",
]

try:
    __version__ = version("find-unused-exports")
except PackageNotFoundError:
    # Fallback when running from a source checkout without installing
    __version__ = "1.0.0"
