"""Error types and classification utilities.

Every failure talking to the card API surfaces as a ``RemoteAPIError``.
Nothing in the bot retries; errors are either logged and dropped per event
or fatal for the whole process. ``classify_error`` only feeds log records.

Example:
    from fabtcg_bot.core.errors import RemoteAPIError, classify_error

    try:
        cards = await client.list_cards("command and conquer")
    except RemoteAPIError as ex:
        logger.warning("failed_to_query_cards", category=classify_error(ex).name)
"""

import asyncio
from enum import Enum, auto


class ErrorCategory(Enum):
    """Classification of error types for log records."""

    TIMEOUT = auto()  # Request/operation timeout
    NETWORK = auto()  # Network connectivity issues
    NOT_FOUND = auto()  # Resource not found (404)
    SERVICE_UNAVAILABLE = auto()  # Remote outage (5xx)
    INVALID_RESPONSE = auto()  # Undecodable or empty payload
    UNKNOWN = auto()  # Unclassified error


class ConfigurationError(Exception):
    """Raised when settings are missing or malformed."""


class RemoteAPIError(Exception):
    """Error returned by the remote card API.

    Attributes:
        status_code: HTTP status code of the failing response, or None when
            no response was received at all.
    """

    def __init__(self, message: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return self.message
        return f"HTTP Requests failed with statuscode {self.status_code}"

    @classmethod
    def from_response(cls, status_code: int, content_type: str) -> "RemoteAPIError":
        """Build the error for a non-2xx response.

        Args:
            status_code: The HTTP status code.
            content_type: Value of the response Content-Type header.

        Returns:
            A RemoteAPIError whose message says whether the body was JSON.
        """
        if not content_type.startswith("application/json"):
            return cls(
                f"HTTP response with status code {status_code} does not "
                "contain Content-Type: application/json",
                status_code=status_code,
            )
        return cls(
            f"HTTP response with status code {status_code}",
            status_code=status_code,
        )


class DecodeError(RemoteAPIError):
    """The response body could not be decoded into card records."""


class EmptyResultError(RemoteAPIError):
    """A search returned no card records."""


def classify_error(error: BaseException) -> ErrorCategory:
    """Classify an exception into an error category.

    Args:
        error: The exception to classify.

    Returns:
        The ErrorCategory that best matches the error.
    """
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(error, (DecodeError, EmptyResultError)):
        return ErrorCategory.INVALID_RESPONSE

    if isinstance(error, RemoteAPIError):
        if error.status_code is None:
            return ErrorCategory.NETWORK
        if error.status_code == 404:
            return ErrorCategory.NOT_FOUND
        if error.status_code >= 500:
            return ErrorCategory.SERVICE_UNAVAILABLE
        return ErrorCategory.UNKNOWN

    if isinstance(error, ConnectionError):
        return ErrorCategory.NETWORK

    error_str = str(error).lower()
    if "connection" in error_str or "network" in error_str:
        return ErrorCategory.NETWORK
    if "timed out" in error_str or "timeout" in error_str:
        return ErrorCategory.TIMEOUT

    return ErrorCategory.UNKNOWN
