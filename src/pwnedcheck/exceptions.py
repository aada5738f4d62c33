"""Custom exceptions for pwnedcheck.

All exceptions inherit from PwnedCheckError with context fields
for better error tracking and debugging. Every failure of a range
lookup surfaces as an ApiError subclass.
"""

from typing import Any


class PwnedCheckError(Exception):
    """Base exception for all pwnedcheck errors.

    Includes context dict for structured error information.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ConfigurationError(PwnedCheckError):
    """Raised when configuration is invalid or missing."""

    pass


class PreconditionError(PwnedCheckError):
    """Raised when a password is too short to be worth looking up."""

    pass


class ApiError(PwnedCheckError):
    """Raised when a range lookup cannot be completed."""

    pass


class TransportError(ApiError):
    """Raised on connection failures and request timeouts."""

    pass


class ProtocolError(ApiError):
    """Raised when the API breaks its response contract."""

    pass


class MalformedResponseError(ProtocolError):
    """Raised when a response body line is not HEXSUFFIX:COUNT."""

    pass


class UnexpectedStatusError(ApiError):
    """Raised on any status other than success or throttling."""

    pass


class RetriesExhaustedError(ApiError):
    """Raised when every attempt was throttled."""

    pass
