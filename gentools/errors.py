"""Error types shared by both commands.

Every failure is terminal for the invocation: the CLI prints the message
and exits with status 1.
"""


class GenError(Exception):
    """Base class for all gentools failures."""
    pass


class MissingCredentialError(GenError):
    """Raised when the API key or endpoint is not configured."""
    pass


class EmptyInputError(GenError):
    """Raised when there is nothing to send (empty diff or clipboard)."""
    pass


class ToolUnavailableError(GenError):
    """Raised when a required local program (git, clipboard tool) is missing."""
    pass


class TransportError(GenError):
    """Raised when the HTTP request never produced a response."""
    pass


class HttpError(GenError):
    """Raised for a non-2xx response from the chat-completion API."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"HTTP {status_code} returned by the chat-completion API.")
        self.status_code = status_code
        self.body = body


class MalformedResponseError(GenError):
    """Raised when the response body is not the expected JSON document."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class ApiError(GenError):
    """Raised when the response carries a top-level ``error`` field."""

    def __init__(self, details):
        message = details.get("message") if isinstance(details, dict) else None
        super().__init__(f"Error from the chat-completion API: {message or details}")
        self.details = details


class EmptyResultError(GenError):
    """Raised when the response has no usable message content."""

    def __init__(self, message: str = "Empty or malformed response.", body: str = ""):
        super().__init__(message)
        self.body = body


__all__ = [
    "GenError",
    "MissingCredentialError",
    "EmptyInputError",
    "ToolUnavailableError",
    "TransportError",
    "HttpError",
    "MalformedResponseError",
    "ApiError",
    "EmptyResultError",
]
