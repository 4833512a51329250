"""
HTTP transports for the agent domains client.

A transport turns an ``httpx.Request`` into an ``httpx.Response``. The API
session depends only on the ``Transport`` protocol, so production code uses
``HttpxTransport`` (optionally wrapped in ``PaymentTransport``) while tests
substitute an in-memory double.
"""

from typing import Optional, Protocol, runtime_checkable

import httpx

from .audit_logger import AuditLogger
from .enums import LogLevel
from .exceptions import PaymentTransportError
from .payment import PaymentClient
from .signer import EvmSigner


@runtime_checkable
class Transport(Protocol):
    """Fetch-like capability: send one request, return one response."""

    async def send(self, request: httpx.Request) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        ...


class HttpxTransport:
    """
    Transport backed by an ``httpx.AsyncClient`` with TLS verification.

    The client is created lazily on first use unless one is supplied.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = timeout
        self._client = client

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def send(self, request: httpx.Request) -> httpx.Response:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=True,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
        request.extensions.setdefault("timeout", httpx.Timeout(self._timeout).as_dict())
        return await self._client.send(request)

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None


def _with_headers(request: httpx.Request, extra: dict[str, str]) -> httpx.Request:
    headers = request.headers.copy()
    headers.update(extra)
    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=request.content,
    )


class PaymentTransport:
    """
    Payment-bearing transport speaking the x402 protocol.

    A request answered with HTTP 402 is retried once with a signed USDC
    transfer authorization for the configured network. Any other response,
    including the response to the paid retry, is returned unchanged.
    """

    def __init__(
        self,
        inner: Transport,
        signer: EvmSigner,
        network: str,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Args:
            inner: Transport used for both the first attempt and the retry
            signer: Signer producing EIP-712 signatures
            network: CAIP-2 network to pay on (e.g. 'eip155:8453')
            logger: Optional audit logger
        """
        self._inner = inner
        self._payments = PaymentClient(signer, network)
        self._logger = logger

    @property
    def network(self) -> str:
        return self._payments.network

    async def send(self, request: httpx.Request) -> httpx.Response:
        response = await self._inner.send(request)
        if response.status_code != 402:
            return response

        await response.aread()
        try:
            payment_required = self._payments.read_payment_required(response)
        except Exception as e:
            raise PaymentTransportError(
                f"Payment required (HTTP 402) but the challenge could not be read: {e}"
            ) from e

        requirement = self._payments.find_requirement(payment_required)
        if requirement is None:
            raise PaymentTransportError(
                f"Payment required (HTTP 402) but no supported payment option "
                f"was offered for {self.network}"
            )

        if self._logger:
            self._logger.log(
                LogLevel.INFO,
                "PaymentTransport",
                "Answering payment challenge",
                {
                    "url": str(request.url),
                    "network": self.network,
                    "amount": str(getattr(requirement, "amount", "")),
                    "pay_to": getattr(requirement, "pay_to", None),
                },
            )

        headers = await self._payments.create_payment_headers(payment_required)
        return await self._inner.send(_with_headers(request, headers))

    async def aclose(self) -> None:
        await self._inner.aclose()
