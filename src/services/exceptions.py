"""Error kinds surfaced to the user when a request to the task API fails."""


class ClientError(Exception):
    """Base class for failures that are reported as a notice and never fatal."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ApplicationError(ClientError):
    """
    Raised when the API answered with a non-success status.

    The message comes from the response body when the server supplied one,
    otherwise from the fallback of the operation that failed.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransportError(ClientError):
    """Raised when a request could not complete (connection refused, timeout, ...)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)
