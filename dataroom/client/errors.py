from typing import Any, Optional


NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
TIMEOUT_ERROR_MESSAGE = "Request timed out. Please try again."


class APIClientError(Exception):
    """
    The single error type raised by the API clients.

    status_code is the HTTP status, or 0 when the request never got a
    response (network failure, timeout). details holds the decoded error
    body or the underlying exception.
    """

    def __init__(self, message: str, status_code: int = 0, details: Optional[Any] = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_network_error(self) -> bool:
        return self.status_code == 0

    def __repr__(self):
        return f"APIClientError({self.message!r}, status_code={self.status_code})"
