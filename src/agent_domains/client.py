"""
Public client for Agent Native Domains.

Check availability, generate domain ideas, register domains paid in USDC
through the x402 protocol, and follow order status.

Usage:
    signer = LocalAccountSigner.from_key("0x...")
    async with AgentDomains(signer) as client:
        check = await client.check_domain("cool.dev")
        order = await client.buy_domain("cool.dev", registrant=registrant)
"""

from typing import Optional, Union
from urllib.parse import quote, urlencode

from .api import ApiSession
from .audit_logger import AuditLogger
from .config import ClientConfig, create_default_config, resolve_network
from .enums import SourceChain
from .models import (
    BulkCheckResult,
    DomainCheck,
    Order,
    PurchaseOptions,
    RegistrantInput,
    SuggestDomainsResult,
)
from .orchestrator import ORDERS_PATH, PurchaseOrchestrator
from .signer import EvmSigner
from .transport import HttpxTransport, PaymentTransport, Transport


# Characters encodeURIComponent leaves unescaped besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


class AgentDomains:
    """
    Async client for the domain registration API.

    Discovery calls are free and unauthenticated. ``buy_domain`` pays with
    the signer's wallet; payment is the authentication.
    """

    def __init__(
        self,
        signer: EvmSigner,
        config: Optional[ClientConfig] = None,
        logger: Optional[AuditLogger] = None,
        transport: Optional[Transport] = None,
        payment_transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            signer: Wallet signer with an address and typed-data signing
            config: Client configuration (defaults to mainnet production API)
            logger: Optional audit logger
            transport: Transport for unpaid requests (defaults to httpx)
            payment_transport: Payment-bearing transport (defaults to an
                x402 PaymentTransport over httpx)

        Raises:
            ValueError: If the signer has no address or the network is unknown
        """
        self._config = config or create_default_config()
        self._logger = logger

        address = getattr(signer, "address", None)
        if not address:
            raise ValueError("account must have an address")
        self._signer = signer
        self._wallet_address = str(address).lower()

        network = resolve_network(self._config.network)

        if transport is None:
            transport = HttpxTransport(timeout=self._config.timeout_seconds)
        if payment_transport is None:
            payment_transport = PaymentTransport(
                HttpxTransport(timeout=self._config.timeout_seconds),
                signer,
                network,
                logger=logger,
            )

        self._session = ApiSession(
            base_url=self._config.base_url,
            transport=transport,
            payment_transport=payment_transport,
            logger=logger,
        )
        self._orchestrator = PurchaseOrchestrator(
            session=self._session,
            signer=signer,
            wallet_address=self._wallet_address,
            logger=logger,
        )

    async def __aenter__(self) -> "AgentDomains":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def wallet_address(self) -> str:
        return self._wallet_address

    @property
    def base_url(self) -> str:
        return self._session.base_url

    # ------------------------------------------------------------------
    # Domain discovery (free)
    # ------------------------------------------------------------------

    async def check_domain(
        self,
        domain: str,
        registrant_country: Optional[str] = None,
    ) -> DomainCheck:
        """
        Check availability and USDC pricing of a domain.

        Args:
            domain: Full domain name, e.g. "cool.dev"
            registrant_country: ISO 3166-1 alpha-2 code for restriction warnings
        """
        params = {"domain": domain}
        if registrant_country:
            params["registrant_country"] = registrant_country

        response = await self._session.request(
            "GET", f"/v1/domains/check?{urlencode(params)}"
        )
        return DomainCheck.from_dict(response.data_object())

    async def check_bulk(self, domains: list[str]) -> list[BulkCheckResult]:
        """Check up to 50 domains at once."""
        response = await self._session.request(
            "POST", "/v1/domains/check/bulk", {"domains": list(domains)}
        )
        results = response.data_object().get("results") or []
        return [BulkCheckResult.from_dict(item) for item in results if isinstance(item, dict)]

    async def suggest_domains(
        self,
        keywords: list[str],
        tlds: Optional[list[str]] = None,
        patterns: Optional[list[str]] = None,
        max_to_check: Optional[int] = None,
        include_unavailable: Optional[bool] = None,
    ) -> SuggestDomainsResult:
        """
        Generate domain ideas from keywords and check their availability.

        Args:
            keywords: Keywords to generate ideas from
            tlds: TLDs to check, e.g. ["dev", "ai", "com"]
            patterns: Any of "exact", "hyphenated", "prefix", "suffix"
            max_to_check: Upper bound on domains checked
            include_unavailable: Also return taken domains
        """
        body: dict = {"keywords": list(keywords)}
        if tlds is not None:
            body["tlds"] = list(tlds)
        if patterns is not None:
            body["patterns"] = list(patterns)
        if max_to_check is not None:
            body["max_to_check"] = max_to_check
        if include_unavailable is not None:
            body["include_unavailable"] = include_unavailable

        response = await self._session.request("POST", "/v1/domains/ideas", body)
        return SuggestDomainsResult.from_dict(response.data_object())

    # ------------------------------------------------------------------
    # Registration (paid)
    # ------------------------------------------------------------------

    async def buy_domain(
        self,
        domain: str,
        registrant: RegistrantInput,
        years: Optional[int] = None,
        nameservers: Optional[list[str]] = None,
        source_chain: Optional[Union[SourceChain, str]] = None,
        idempotency_key: Optional[str] = None,
        prevalidate: bool = True,
    ) -> Order:
        """
        Register a domain. Payment is handled by the payment transport.

        Retrying with the same arguments derives the same idempotency key,
        so the remote service never creates a second paid order for it.

        Args:
            domain: Domain to register
            registrant: Registrant record or its wire-form dict
            years: Registration years (default 1)
            nameservers: Custom nameservers; omitted from the order when empty
            source_chain: Source-chain metadata tag (default "base")
            idempotency_key: Explicit key, used verbatim
            prevalidate: Dry-run the order before paying (default True)
        """
        options = PurchaseOptions(
            registrant=registrant,
            years=years,
            nameservers=nameservers,
            source_chain=source_chain,
            idempotency_key=idempotency_key,
            prevalidate=prevalidate,
        )
        return await self._orchestrator.buy_domain(domain, options)

    async def get_order(self, order_id: str) -> Order:
        """Fetch the current status of an order."""
        response = await self._session.request(
            "GET", f"{ORDERS_PATH}/{quote(order_id, safe=_URI_COMPONENT_SAFE)}"
        )
        return Order.from_dict(response.data_object())

    async def close(self) -> None:
        await self._session.aclose()
