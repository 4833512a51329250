"""
Agent Domains - Python client for Agent Native Domains.

This package provides an async client for checking domain availability,
generating domain ideas, and registering domains paid in USDC on Base via
the x402 payment protocol, with idempotent purchases and order tracking.
"""

__version__ = "0.1.0"
__author__ = "Agent Domains Team"

from agent_domains.exceptions import (
    AgentDomainsError,
    NetworkError,
    InvalidResponseError,
    PaymentError,
    ApiError,
    OrderValidationError,
    MissingFieldError,
    PaymentTransportError,
)
from agent_domains.enums import (
    ErrorCode,
    ValidationIssueCode,
    OrderStatus,
    TERMINAL_ORDER_STATUSES,
    SourceChain,
    LogLevel,
)
from agent_domains.config import (
    DEFAULT_BASE_URL,
    DEFAULT_NETWORK,
    NETWORK_MAP,
    LoggingConfig,
    ClientConfig,
    resolve_network,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
    load_config_from_env,
)
from agent_domains.models import (
    RegistrantAddress,
    Registrant,
    RegistrantInput,
    PurchaseOptions,
    DomainPricing,
    RegistrationPeriod,
    DomainCheck,
    BulkCheckResult,
    DomainSuggestion,
    SuggestDomainsResult,
    ValidationIssue,
    OrderValidationResult,
    OrderRegistration,
    OrderFailure,
    OrderCredit,
    Order,
)
from agent_domains.audit_logger import (
    AuditLogger,
    LogEntry,
)
from agent_domains.signer import (
    EvmSigner,
    LocalAccountSigner,
    build_wallet_proof_message,
)
from agent_domains.payment import PaymentClient
from agent_domains.transport import (
    Transport,
    HttpxTransport,
    PaymentTransport,
)
from agent_domains.normalizer import (
    build_intent_body,
    derive_idempotency_key,
    build_submission_body,
)
from agent_domains.api import (
    ApiResponse,
    ApiSession,
)
from agent_domains.orchestrator import (
    PurchaseOrchestrator,
)
from agent_domains.client import (
    AgentDomains,
)

__all__ = [
    # Exceptions
    "AgentDomainsError",
    "NetworkError",
    "InvalidResponseError",
    "PaymentError",
    "ApiError",
    "OrderValidationError",
    "MissingFieldError",
    "PaymentTransportError",
    # Enums
    "ErrorCode",
    "ValidationIssueCode",
    "OrderStatus",
    "TERMINAL_ORDER_STATUSES",
    "SourceChain",
    "LogLevel",
    # Configuration
    "DEFAULT_BASE_URL",
    "DEFAULT_NETWORK",
    "NETWORK_MAP",
    "LoggingConfig",
    "ClientConfig",
    "resolve_network",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
    "load_config_from_env",
    # Models
    "RegistrantAddress",
    "Registrant",
    "RegistrantInput",
    "PurchaseOptions",
    "DomainPricing",
    "RegistrationPeriod",
    "DomainCheck",
    "BulkCheckResult",
    "DomainSuggestion",
    "SuggestDomainsResult",
    "ValidationIssue",
    "OrderValidationResult",
    "OrderRegistration",
    "OrderFailure",
    "OrderCredit",
    "Order",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # Signer
    "EvmSigner",
    "LocalAccountSigner",
    "build_wallet_proof_message",
    # Transports
    "PaymentClient",
    "Transport",
    "HttpxTransport",
    "PaymentTransport",
    # Normalizer
    "build_intent_body",
    "derive_idempotency_key",
    "build_submission_body",
    # API Session
    "ApiResponse",
    "ApiSession",
    # Orchestrator
    "PurchaseOrchestrator",
    # Client
    "AgentDomains",
]
