"""Exception types and error message extraction for API calls."""

from typing import Optional

import requests


class TempoMcpError(Exception):
    """Base class for all errors raised by tempo_mcp_server."""


class ConfigurationError(TempoMcpError, ValueError):
    """Raised when required configuration is missing or invalid."""


class ValidationError(TempoMcpError, ValueError):
    """Raised when caller input fails validation."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}" if field else message)


class ApiError(TempoMcpError):
    """Raised when a remote service call fails.

    The string form always carries the call context, e.g.
    ``Failed to get issue for PROJ-1: 404 - Issue does not exist``.
    """

    def __init__(
        self, context: str, message: str, status_code: Optional[int] = None
    ) -> None:
        self.context = context
        self.message = message
        self.status_code = status_code
        if status_code is not None:
            text = f"{context}: {status_code} - {message}"
        else:
            text = f"{context}: {message}"
        super().__init__(text)


def extract_error_message(error: BaseException) -> str:
    """Extract the most useful message from an exception.

    For HTTP errors with a JSON body the service message is preferred
    (``message``, then Jira's ``errorMessages``), otherwise the transport
    message is used.

    Args:
        error: Exception raised by a client call

    Returns:
        Human-readable error message
    """
    if isinstance(error, requests.RequestException) and error.response is not None:
        try:
            data = error.response.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            if data.get("message"):
                return str(data["message"])
            error_messages = data.get("errorMessages") or []
            if error_messages:
                return ", ".join(str(m) for m in error_messages)
    return str(error)


def format_error(error: BaseException) -> str:
    """Format any exception for inclusion in a tool response."""
    if isinstance(error, TempoMcpError):
        return str(error)
    return extract_error_message(error)


def wrap_error(error: BaseException, context: str) -> ApiError:
    """Wrap an exception into an ApiError prefixed with call context.

    Args:
        error: Original exception
        context: Description of the failed call

    Returns:
        ApiError carrying the HTTP status code when available
    """
    if isinstance(error, ApiError):
        return ApiError(context, str(error))
    status_code = None
    if isinstance(error, requests.RequestException) and error.response is not None:
        status_code = error.response.status_code
    return ApiError(context, extract_error_message(error), status_code)
