"""
Purchase request normalization.

Builds the exact wire body of a purchase intent and derives a stable
idempotency key from it. Field insertion order is fixed here and the body
is serialized without key sorting, so identical intents always produce
byte-identical serializations and therefore identical keys.
"""

import hashlib
import json
from typing import Any, Optional, Union

from .enums import SourceChain
from .models import PurchaseOptions, registrant_to_dict


DEFAULT_YEARS = 1
DEFAULT_SOURCE_CHAIN = SourceChain.BASE.value
IDEMPOTENCY_KEY_PREFIX = "sdk_"
IDEMPOTENCY_KEY_HEX_LENGTH = 48


def _source_chain_value(source_chain: Optional[Union[SourceChain, str]]) -> str:
    if source_chain is None:
        return DEFAULT_SOURCE_CHAIN
    if isinstance(source_chain, SourceChain):
        return source_chain.value
    return source_chain


def build_intent_body(
    domain: str,
    options: PurchaseOptions,
    wallet_address: str,
) -> dict[str, Any]:
    """
    Build the purchase intent body.

    ``nameservers`` is present only when at least one nameserver was
    supplied; an empty or missing list leaves the field out entirely.
    """
    body: dict[str, Any] = {
        "domain": domain,
        "years": options.years if options.years is not None else DEFAULT_YEARS,
        "wallet_address": wallet_address,
        "source_chain": _source_chain_value(options.source_chain),
        "registrant": registrant_to_dict(options.registrant),
    }
    if options.nameservers:
        body["nameservers"] = list(options.nameservers)
    return body


def canonical_json(body: dict[str, Any]) -> str:
    """Compact JSON in insertion order."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def derive_idempotency_key(body: dict[str, Any]) -> str:
    """``sdk_`` + first 48 hex chars of SHA-256 over the canonical JSON."""
    digest = hashlib.sha256(canonical_json(body).encode("utf-8")).hexdigest()
    return f"{IDEMPOTENCY_KEY_PREFIX}{digest[:IDEMPOTENCY_KEY_HEX_LENGTH]}"


def build_submission_body(
    domain: str,
    options: PurchaseOptions,
    wallet_address: str,
) -> dict[str, Any]:
    """
    Intent body plus its idempotency key.

    A caller-supplied key is used verbatim and never validated; otherwise
    the key is derived from the intent body.
    """
    intent = build_intent_body(domain, options, wallet_address)
    key = options.idempotency_key or derive_idempotency_key(intent)
    return {**intent, "idempotency_key": key}
