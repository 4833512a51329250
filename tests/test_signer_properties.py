"""
Property-based tests for the signer capability helpers and LocalAccountSigner.
"""

import asyncio
import re

from eth_account import Account
from eth_account.messages import encode_defunct
from hypothesis import given, settings
from hypothesis import strategies as st

from agent_domains.signer import (
    EvmSigner,
    LocalAccountSigner,
    build_wallet_proof_message,
    resolve_signature,
    supports_message_signing,
)

from fakes import FakeSigner, WALLET


SIGNATURE_PATTERN = re.compile(r"^0x[0-9a-f]{130}$")

# Hardhat's first development key
DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class TestLocalAccountSigner:
    """Tests for the eth-account backed signer."""

    def test_from_key_derives_checksum_address(self) -> None:
        signer = LocalAccountSigner.from_key(DEV_KEY)

        assert signer.address == DEV_ADDRESS
        assert isinstance(signer, EvmSigner)

    @given(message=st.text(min_size=1, max_size=200))
    @settings(max_examples=20, deadline=None)
    def test_message_signature_recovers_to_signer(self, message: str) -> None:
        """*For any* message, the personal-sign signature SHALL recover to the signer address."""
        signer = LocalAccountSigner.from_key(DEV_KEY)

        signature = asyncio.run(signer.sign_message(message))

        assert SIGNATURE_PATTERN.match(signature)
        recovered = Account.recover_message(encode_defunct(text=message), signature=signature)
        assert recovered == DEV_ADDRESS

    def test_created_signers_are_distinct(self) -> None:
        assert LocalAccountSigner.create().address != LocalAccountSigner.create().address

    def test_fake_signer_satisfies_protocol(self) -> None:
        assert isinstance(FakeSigner(), EvmSigner)
        assert isinstance(FakeSigner(with_message_signing=False), EvmSigner)


class TestCapabilityHelpers:
    """Tests for optional capability detection and signature resolution."""

    def test_message_signing_detected(self) -> None:
        assert supports_message_signing(FakeSigner())
        assert supports_message_signing(LocalAccountSigner.create())

    def test_missing_message_signing_detected(self) -> None:
        assert not supports_message_signing(FakeSigner(with_message_signing=False))

    def test_non_callable_attribute_is_not_a_capability(self) -> None:
        signer = FakeSigner(with_message_signing=False)
        signer.sign_message = "not a function"

        assert not supports_message_signing(signer)

    @given(value=st.text(alphabet="0123456789abcdef", min_size=1, max_size=20))
    @settings(max_examples=20)
    def test_sync_and_async_results_resolve_alike(self, value: str) -> None:
        """*For any* signature value, sync and async signer results SHALL resolve to the same string."""
        async def async_result() -> str:
            return "0x" + value

        sync_resolved = asyncio.run(resolve_signature("0x" + value))
        async_resolved = asyncio.run(resolve_signature(async_result()))

        assert sync_resolved == async_resolved == "0x" + value


class TestWalletProofMessage:
    """Tests for the wallet ownership message."""

    @given(timestamp=st.integers(min_value=0, max_value=10**13))
    @settings(max_examples=50)
    def test_message_format(self, timestamp: int) -> None:
        """*For any* timestamp, the message SHALL bind the wallet and the timestamp."""
        message = build_wallet_proof_message(WALLET, timestamp)

        assert message == (
            f"Sign this message to verify ownership of {WALLET} "
            f"for agent-native-domains. Timestamp: {timestamp}"
        )

    def test_default_timestamp_is_milliseconds(self) -> None:
        message = build_wallet_proof_message(WALLET)

        timestamp = int(message.rsplit(" ", 1)[1])
        assert timestamp > 10**12
