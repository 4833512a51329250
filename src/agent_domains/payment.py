"""
x402 payment client.

Payment challenges are decoded and answered by the x402 SDK: an
``x402Client`` with the EVM ``exact`` scheme registered for one network
signs an EIP-3009 USDC transfer authorization through the wallet signer,
and ``x402HTTPClient`` maps between HTTP headers and SDK payloads.
"""

import inspect
from typing import Any, Optional

import httpx
from x402 import x402Client
from x402.http import x402HTTPClient
from x402.mechanisms.evm.exact import ExactEvmScheme

from .signer import EvmSigner


EXACT_SCHEME = "exact"


class PaymentClient:
    """Pays x402 challenges on one network with one signer."""

    def __init__(self, signer: EvmSigner, network: str) -> None:
        """
        Args:
            signer: Signer satisfying the x402 EVM client signer interface
            network: CAIP-2 network to pay on (e.g. 'eip155:8453')
        """
        self._network = network
        self._client = x402Client()
        self._client.register(network, ExactEvmScheme(signer=signer))
        self._http = x402HTTPClient(self._client)

    @property
    def network(self) -> str:
        return self._network

    def read_payment_required(self, response: httpx.Response) -> Any:
        """
        Decode the payment requirements of a 402 response.

        The SDK reads the ``PAYMENT-REQUIRED`` header first and falls back
        to the JSON body.

        Raises:
            ValueError: If the response carries no payment requirements
        """
        try:
            body = response.json()
        except ValueError:
            body = None

        payment_required = self._http.get_payment_required_response(response.headers.get, body)
        if payment_required is None:
            raise ValueError("response carries no payment requirements")
        return payment_required

    def find_requirement(self, payment_required: Any) -> Optional[Any]:
        """First ``exact`` requirement offered on the configured network."""
        for requirement in getattr(payment_required, "accepts", None) or []:
            if (
                getattr(requirement, "scheme", None) == EXACT_SCHEME
                and getattr(requirement, "network", None) == self._network
            ):
                return requirement
        return None

    async def create_payment_headers(self, payment_required: Any) -> dict[str, str]:
        """Sign a payment for ``payment_required`` and encode it as request headers."""
        payload = self._client.create_payment_payload(payment_required)
        if inspect.isawaitable(payload):
            payload = await payload
        return self._http.encode_payment_signature_header(payload)
