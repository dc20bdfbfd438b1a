class WalrusApiException(Exception):
    """Base class for failures raised while producing node data."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(WalrusApiException):
    """The health command output held no usable JSON document."""


class SubprocessError(WalrusApiException):
    """The health command could not be run or exited abnormally."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class FetchError(WalrusApiException):
    """No cached data exists and fetching fresh data failed."""
