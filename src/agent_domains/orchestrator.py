"""
Purchase orchestrator for the agent domains client.

Runs one buy_domain call end to end:

1. Build: submission body and idempotency key
2. Validate: pre-payment dry-run (skippable)
3. Recover: unpaid probe for an order already created under the same key,
   entered only when validation reports the domain already has an order
4. Prove: best-effort wallet-ownership signature headers
5. Submit: payment-bearing order creation

At most one payment-bearing call is made per invocation, and none when the
recovery probe returns an existing order.
"""

from typing import Any, Optional

from .api import ApiSession
from .audit_logger import AuditLogger
from .enums import ErrorCode, LogLevel, ValidationIssueCode
from .exceptions import AgentDomainsError, MissingFieldError, OrderValidationError
from .models import Order, OrderValidationResult, PurchaseOptions
from .normalizer import build_submission_body
from .signer import (
    WALLET_MESSAGE_HEADER,
    WALLET_SIGNATURE_HEADER,
    EvmSigner,
    build_wallet_proof_message,
    resolve_signature,
    supports_message_signing,
)


ORDERS_PATH = "/v1/orders"
VALIDATE_PATH = "/v1/orders/validate"

DEFAULT_VALIDATION_MESSAGE = "Order validation failed"


class PurchaseOrchestrator:
    """
    Sequences validation, recovery, wallet proof and paid submission.

    Instances hold only read-only state (session, signer, wallet address),
    so concurrent calls on one instance are independent.
    """

    def __init__(
        self,
        session: ApiSession,
        signer: EvmSigner,
        wallet_address: str,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Args:
            session: API session carrying both transports
            signer: Wallet signer; ``sign_message`` enables wallet proof
            wallet_address: Lower-cased signer address
            logger: Optional audit logger
        """
        self._session = session
        self._signer = signer
        self._wallet_address = wallet_address
        self._logger = logger

    async def buy_domain(self, domain: str, options: PurchaseOptions) -> Order:
        """
        Register ``domain``, paying through the payment-bearing transport.

        Returns:
            The order snapshot returned by the remote service

        Raises:
            AgentDomainsError: For every failure, already classified
        """
        self._check_preconditions(domain, options)

        body = build_submission_body(domain, options, self._wallet_address)
        self._log_info(
            "Purchase started",
            {
                "domain": domain,
                "years": body["years"],
                "idempotency_key": body["idempotency_key"],
                "prevalidate": options.prevalidate,
            },
        )

        if options.prevalidate is not False:
            validation = await self._validate(body)
            if not validation.valid:
                if validation.has_error(ValidationIssueCode.DOMAIN_ALREADY_REGISTERED.value):
                    existing = await self._probe_existing_order(body)
                    if existing is not None:
                        self._log_info(
                            "Recovered existing order; no payment attempted",
                            {"order_id": existing.order_id, "status": existing.status},
                        )
                        return existing
                raise self._validation_error(validation)

        proof_headers = await self._build_wallet_proof_headers()

        response = await self._session.payable_request(
            "POST", ORDERS_PATH, body, proof_headers
        )
        order = Order.from_dict(response.data_object())
        self._log_info(
            "Order submitted",
            {"order_id": order.order_id, "status": order.status},
        )
        return order

    def _check_preconditions(self, domain: str, options: PurchaseOptions) -> None:
        if not domain or not domain.strip():
            raise MissingFieldError(
                code=ErrorCode.MISSING_FIELD.value,
                message="domain is required",
                status=400,
            )
        if not options.registrant:
            raise MissingFieldError(
                code=ErrorCode.MISSING_FIELD.value,
                message="registrant is required",
                status=400,
            )

    async def _validate(self, body: dict[str, Any]) -> OrderValidationResult:
        response = await self._session.request("POST", VALIDATE_PATH, body)
        validation = OrderValidationResult.from_dict(response.data_object())
        if validation.warnings:
            self._log(
                LogLevel.WARN,
                "Order validation warnings",
                {"warnings": [w.to_dict() for w in validation.warnings]},
            )
        return validation

    async def _probe_existing_order(self, body: dict[str, Any]) -> Optional[Order]:
        """
        Re-submit the body with no payment attached.

        A 2xx carrying an order means the idempotency key matched an
        existing order. A 402, or a 2xx without an order object, means no
        order exists under this key and no funds moved.
        """
        try:
            response = await self._session.request("POST", ORDERS_PATH, body)
        except AgentDomainsError as e:
            if e.status == 402:
                self._log_no_existing_order(body)
                return None
            raise
        if not isinstance(response.data, dict):
            self._log_no_existing_order(body)
            return None
        return Order.from_dict(response.data)

    def _log_no_existing_order(self, body: dict[str, Any]) -> None:
        self._log_info(
            "No existing order under idempotency key",
            {"idempotency_key": body["idempotency_key"]},
        )

    def _validation_error(self, validation: OrderValidationResult) -> OrderValidationError:
        first = validation.errors[0] if validation.errors else None
        return OrderValidationError(
            code=(first.code if first and first.code else ErrorCode.VALIDATION_ERROR.value),
            message=(first.message if first and first.message else DEFAULT_VALIDATION_MESSAGE),
            status=400,
            details=[issue.to_dict() for issue in validation.errors],
        )

    async def _build_wallet_proof_headers(self) -> dict[str, str]:
        """
        Sign a wallet-ownership message for payment priority.

        Best effort: a signer without ``sign_message``, or one that fails,
        yields no headers and the purchase proceeds.
        """
        if not supports_message_signing(self._signer):
            return {}
        try:
            message = build_wallet_proof_message(self._wallet_address)
            signature = await resolve_signature(self._signer.sign_message(message))
        except Exception as e:
            self._log(
                LogLevel.WARN,
                "Wallet proof skipped",
                {"reason": type(e).__name__},
            )
            return {}
        return {
            WALLET_SIGNATURE_HEADER: signature,
            WALLET_MESSAGE_HEADER: message,
        }

    def _log_info(self, message: str, data: dict) -> None:
        self._log(LogLevel.INFO, message, data)

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "PurchaseOrchestrator", message, data)
