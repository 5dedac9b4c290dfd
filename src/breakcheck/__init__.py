"""breakcheck: detect breaking changes between resource schema versions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("breakcheck")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
