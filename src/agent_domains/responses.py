"""
Response and error classification.

Every transport outcome becomes either a parsed success envelope or an
AgentDomainsError. Classification order:

1. Transport failure before any response -> network_error, status 0
2. Response body not a JSON envelope -> invalid_response, response status
3. Envelope with success false, or non-2xx status -> code/message from the
   envelope's error field, status from the response
4. On the payment-bearing path, transport failures mentioning payment
   keywords -> payment_error, status 402

An AgentDomainsError is never reclassified.
"""

from typing import Any

import httpx

from .enums import ErrorCode
from .exceptions import (
    AgentDomainsError,
    ApiError,
    InvalidResponseError,
    NetworkError,
    PaymentError,
)


DEFAULT_ERROR_MESSAGE = "Request failed"
UNKNOWN_REASON = "Unknown error"

# Substring heuristic over the transport's error text
PAYMENT_ERROR_KEYWORDS = (
    "insufficient",
    "balance",
    "allowance",
    "signature",
    "payment",
    "402",
)


def describe_failure(error: BaseException) -> str:
    """Human-readable reason of a transport failure."""
    reason = str(error).strip()
    return reason or UNKNOWN_REASON


def parse_envelope(response: httpx.Response) -> dict[str, Any]:
    """
    Parse a ``{success, data?, error?}`` envelope.

    Raises:
        InvalidResponseError: If the body is not a JSON object
        ApiError: If the envelope or the HTTP status reports failure
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        raise InvalidResponseError(
            code=ErrorCode.INVALID_RESPONSE.value,
            message=f"Server returned non-JSON response (HTTP {response.status_code})",
            status=response.status_code,
        )

    if not payload.get("success") or not response.is_success:
        raw_error = payload.get("error")
        if isinstance(raw_error, dict):
            code = raw_error.get("code") or ErrorCode.UNKNOWN.value
            message = raw_error.get("message") or DEFAULT_ERROR_MESSAGE
        elif isinstance(raw_error, str):
            code = ErrorCode.UNKNOWN.value
            message = raw_error
        else:
            code = ErrorCode.UNKNOWN.value
            message = DEFAULT_ERROR_MESSAGE
        raise ApiError(
            code=code,
            message=message,
            status=response.status_code,
            details=raw_error,
        )

    return payload


def classify_transport_error(error: BaseException) -> AgentDomainsError:
    """Classify a failure of the plain (non-paying) transport."""
    if isinstance(error, AgentDomainsError):
        return error
    return NetworkError(
        code=ErrorCode.NETWORK_ERROR.value,
        message=f"Network request failed: {describe_failure(error)}",
        status=0,
    )


def is_payment_failure(reason: str) -> bool:
    lowered = reason.lower()
    return any(keyword in lowered for keyword in PAYMENT_ERROR_KEYWORDS)


def classify_payment_transport_error(error: BaseException) -> AgentDomainsError:
    """Classify a failure of the payment-bearing transport."""
    if isinstance(error, AgentDomainsError):
        return error

    reason = describe_failure(error)
    if is_payment_failure(reason):
        return PaymentError(
            code=ErrorCode.PAYMENT_ERROR.value,
            message=f"Payment failed: {reason}",
            status=402,
        )
    return NetworkError(
        code=ErrorCode.NETWORK_ERROR.value,
        message=f"Network request failed: {reason}",
        status=0,
    )
