"""
Wallet signer capability for the agent domains client.

A signer is a capability set, not a class hierarchy: it must expose an
``address`` and ``sign_typed_data`` in the shape the x402 SDK signs
payments with; ``sign_message`` is optional and its presence is detected
at call time. ``LocalAccountSigner`` adapts an eth-account LocalAccount
to this protocol.
"""

import inspect
import time
from typing import Any, Optional, Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from x402.mechanisms.evm import EthAccountSigner


WALLET_SIGNATURE_HEADER = "X-Wallet-Signature"
WALLET_MESSAGE_HEADER = "X-Wallet-Message"


@runtime_checkable
class EvmSigner(Protocol):
    """Minimal signer the client depends on (the x402 EVM client signer)."""

    address: str

    def sign_typed_data(
        self,
        domain: Any,
        types: Any,
        primary_type: str,
        message: dict[str, Any],
    ) -> bytes:
        """Return the raw EIP-712 signature."""
        ...


def supports_message_signing(signer: Any) -> bool:
    """True if the signer offers the optional ``sign_message`` capability."""
    return callable(getattr(signer, "sign_message", None))


async def resolve_signature(result: Any) -> str:
    """Accept signers whose methods are either sync or async."""
    if inspect.isawaitable(result):
        result = await result
    return str(result)


def build_wallet_proof_message(wallet_address: str, timestamp_ms: Optional[int] = None) -> str:
    """Message binding a wallet address to the current time."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return (
        f"Sign this message to verify ownership of {wallet_address} "
        f"for agent-native-domains. Timestamp: {timestamp_ms}"
    )


class LocalAccountSigner:
    """EvmSigner backed by an in-process eth-account private key."""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account
        self._payment_signer = EthAccountSigner(account)
        self.address: str = account.address

    @classmethod
    def from_key(cls, private_key: str) -> "LocalAccountSigner":
        """Create a signer from a hex private key."""
        return cls(Account.from_key(private_key))

    @classmethod
    def create(cls) -> "LocalAccountSigner":
        """Create a signer for a fresh random key."""
        return cls(Account.create())

    def sign_typed_data(
        self,
        domain: Any,
        types: Any,
        primary_type: str,
        message: dict[str, Any],
    ) -> bytes:
        return self._payment_signer.sign_typed_data(domain, types, primary_type, message)

    async def sign_message(self, message: str) -> str:
        signed = self._account.sign_message(encode_defunct(text=message))
        return "0x" + bytes(signed.signature).hex()
