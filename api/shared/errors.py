"""
Error taxonomy for the burritos webapp.

Core modules (codec, path resolver, stores) raise these exceptions and never
log-and-swallow them. ``main.py`` registers a single handler that turns them
into ``{"detail": message}`` responses with the matching status code.
"""


class BurritosError(Exception):
    """Base class for every error the API maps to an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidFilename(BurritosError):
    """Path traversal attempt, bad extension or unknown path component."""

    status_code = 400


class InvalidFormat(BurritosError):
    """Input that does not encode what it should (date, configuration)."""

    status_code = 400


class NotFound(BurritosError):
    status_code = 404


class StorageError(BurritosError):
    """Unexpected filesystem failure (permissions, corrupt JSON, ...)."""

    status_code = 500


class ConfigUnavailable(BurritosError):
    """One or more configuration documents are missing or corrupt."""

    status_code = 500


class UpstreamProcessFailure(BurritosError):
    """The external analysis script could not be run or exited non-zero."""

    status_code = 500

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class AuthenticationError(BurritosError):
    status_code = 401
