"""Echo test server: canned HTTP responses with a signal-driven graceful shutdown."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("echo-test-server")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
