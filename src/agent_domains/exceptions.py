"""
Exception classes for the agent domains client.

Every failure that leaves the public surface is an AgentDomainsError carrying
a machine-readable code, an HTTP-status-like numeric class, a message, and
optional structured details.
"""

from typing import Any, Optional


class AgentDomainsError(Exception):
    """Base exception for all classified client errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 0,
        details: Optional[Any] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status = status
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, "
            f"status={self.status!r}, message={self.message!r})"
        )

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "status": self.status,
            "message": self.message,
            "details": self.details,
        }


class NetworkError(AgentDomainsError):
    """Raised when the transport fails before any response is received."""

    pass


class InvalidResponseError(AgentDomainsError):
    """Raised when a response is not a parseable JSON envelope."""

    pass


class PaymentError(AgentDomainsError):
    """Raised when the payment-bearing submission fails for payment reasons."""

    pass


class ApiError(AgentDomainsError):
    """Raised when the remote service rejects a request with an error envelope."""

    pass


class OrderValidationError(AgentDomainsError):
    """Raised when the pre-payment order validation reports the order invalid."""

    pass


class MissingFieldError(AgentDomainsError):
    """Raised when a required field is missing before any network call."""

    pass


class PaymentTransportError(Exception):
    """
    Raised by the payment transport when a 402 challenge cannot be answered.

    Not an AgentDomainsError: the API session classifies it like any other
    payment transport failure.
    """

    pass
