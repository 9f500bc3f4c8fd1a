"""fussel: lint a source tree and report rustc-style diagnostics."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fussel")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
