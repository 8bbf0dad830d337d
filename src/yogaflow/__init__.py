"""yogaflow - yoga sequence generation, editing and persistence service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("yogaflow")
except PackageNotFoundError:
    __version__ = "unknown"
