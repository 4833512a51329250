"""
Enumeration types for the agent domains client.

These enums provide type-safe constants for error codes, order lifecycle
states, source-chain tags, and logging levels.
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes produced locally by the client."""

    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    PAYMENT_ERROR = "payment_error"
    VALIDATION_ERROR = "validation_error"
    MISSING_FIELD = "missing_field"
    UNKNOWN = "unknown"


class ValidationIssueCode(Enum):
    """Validation issue codes the client reacts to."""

    DOMAIN_ALREADY_REGISTERED = "domain_already_registered"


class OrderStatus(Enum):
    """Remote order lifecycle status."""

    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"
    CREDITED = "credited"


TERMINAL_ORDER_STATUSES = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.FAILED,
    OrderStatus.EXPIRED,
    OrderStatus.CREDITED,
})


class SourceChain(Enum):
    """Source-chain metadata tag stored with an order (x402 settles on Base)."""

    BASE = "base"
    ARBITRUM = "arbitrum"
    ETHEREUM = "ethereum"
    SOLANA = "solana"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
