"""
Data models for the agent domains client.

This module defines the registrant contact record, availability and idea
results, order snapshots, and validation outcomes. Parsers read only the
defined fields of a payload; the raw payload is kept where callers may need
fields this client does not model.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .enums import OrderStatus, TERMINAL_ORDER_STATUSES


@dataclass
class RegistrantAddress:
    """Postal address of a registrant."""

    street: str
    city: str
    state: str
    postal_code: str
    country: str  # ISO 3166-1 alpha-2, e.g. "US"
    street2: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize in wire field order, omitting unset optional fields."""
        data = {"street": self.street}
        if self.street2:
            data["street2"] = self.street2
        data["city"] = self.city
        data["state"] = self.state
        data["postal_code"] = self.postal_code
        data["country"] = self.country
        return data


@dataclass
class Registrant:
    """ICANN registrant contact record."""

    first_name: str
    last_name: str
    email: str
    phone: str  # E.164, e.g. "+12025551234"
    address: RegistrantAddress
    type: str = "individual"  # 'individual' or 'organization'
    organization: Optional[str] = None
    fax: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize in wire field order, omitting unset optional fields."""
        data = {
            "type": self.type,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
        if self.organization:
            data["organization"] = self.organization
        data["email"] = self.email
        data["phone"] = self.phone
        if self.fax:
            data["fax"] = self.fax
        data["address"] = self.address.to_dict()
        return data


RegistrantInput = Union[Registrant, dict]


@dataclass
class PurchaseOptions:
    """Caller options for a single buy_domain call."""

    registrant: Optional[RegistrantInput]
    years: Optional[int] = None
    nameservers: Optional[list[str]] = None
    source_chain: Optional[str] = None
    idempotency_key: Optional[str] = None
    prevalidate: Optional[bool] = True  # only an explicit False skips validation


@dataclass
class DomainPricing:
    """Pricing block of an availability check (USDC amounts as strings)."""

    per_year: str
    registration: dict[str, str]
    min_required_total: str
    renewal: str
    currency: str
    whois_privacy: str

    @classmethod
    def from_dict(cls, data: dict) -> "DomainPricing":
        return cls(
            per_year=data.get("per_year", ""),
            registration=dict(data.get("registration") or {}),
            min_required_total=data.get("min_required_total", ""),
            renewal=data.get("renewal", ""),
            currency=data.get("currency", ""),
            whois_privacy=data.get("whois_privacy", ""),
        )


@dataclass
class RegistrationPeriod:
    """Allowed registration period for a TLD."""

    min_years: int
    max_years: int


@dataclass
class DomainCheck:
    """Availability and pricing of a single domain."""

    domain: str
    available: bool
    tld: str
    pricing: Optional[DomainPricing]
    registration_period: Optional[RegistrationPeriod]
    registrant_requirements: list[dict] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "DomainCheck":
        pricing = data.get("pricing")
        period = data.get("registration_period")
        return cls(
            domain=data.get("domain", ""),
            available=bool(data.get("available", False)),
            tld=data.get("tld", ""),
            pricing=DomainPricing.from_dict(pricing) if isinstance(pricing, dict) else None,
            registration_period=RegistrationPeriod(
                min_years=period.get("min_years", 1),
                max_years=period.get("max_years", 10),
            ) if isinstance(period, dict) else None,
            registrant_requirements=list(data.get("registrant_requirements") or []),
            warnings=list(data.get("warnings") or []),
            raw=data,
        )


@dataclass
class BulkCheckResult:
    """One row of a bulk availability check."""

    domain: str
    available: bool
    price: Optional[str]

    @classmethod
    def from_dict(cls, data: dict) -> "BulkCheckResult":
        return cls(
            domain=data.get("domain", ""),
            available=bool(data.get("available", False)),
            price=data.get("price"),
        )


@dataclass
class DomainSuggestion:
    """A generated domain idea with its availability."""

    domain: str
    available: bool
    price_usd: Optional[str]
    status: str  # 'available' or 'unavailable'

    @classmethod
    def from_dict(cls, data: dict) -> "DomainSuggestion":
        return cls(
            domain=data.get("domain", ""),
            available=bool(data.get("available", False)),
            price_usd=data.get("price_usd"),
            status=data.get("status", ""),
        )


@dataclass
class SuggestDomainsResult:
    """Result of domain idea generation."""

    results: list[DomainSuggestion]
    checked_count: int
    available_count: int
    currency: str
    tlds: list[str]
    patterns: list[str]
    include_unavailable: bool

    @classmethod
    def from_dict(cls, data: dict) -> "SuggestDomainsResult":
        return cls(
            results=[
                DomainSuggestion.from_dict(item)
                for item in data.get("results") or []
                if isinstance(item, dict)
            ],
            checked_count=data.get("checked_count", 0),
            available_count=data.get("available_count", 0),
            currency=data.get("currency", ""),
            tlds=list(data.get("tlds") or []),
            patterns=list(data.get("patterns") or []),
            include_unavailable=bool(data.get("include_unavailable", False)),
        )


@dataclass
class ValidationIssue:
    """A single validation error or warning."""

    code: str
    message: str
    field: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationIssue":
        return cls(
            code=data.get("code", ""),
            message=data.get("message", ""),
            field=data.get("field"),
        )

    def to_dict(self) -> dict:
        data = {"code": self.code, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        return data


@dataclass
class OrderValidationResult:
    """Outcome of a pre-payment order dry-run."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    price: Optional[dict] = None
    tld_rules: Optional[dict] = None

    @classmethod
    def from_dict(cls, data: dict) -> "OrderValidationResult":
        return cls(
            valid=bool(data.get("valid", False)),
            errors=[
                ValidationIssue.from_dict(item)
                for item in data.get("errors") or []
                if isinstance(item, dict)
            ],
            warnings=[
                ValidationIssue.from_dict(item)
                for item in data.get("warnings") or []
                if isinstance(item, dict)
            ],
            price=data.get("price"),
            tld_rules=data.get("tld_rules"),
        )

    def has_error(self, code: str) -> bool:
        return any(issue.code == code for issue in self.errors)


@dataclass
class OrderRegistration:
    """Registration details of a completed order."""

    registrar: str
    registered_at: str
    expires_at: str
    nameservers: list[str]
    auto_renew: bool


@dataclass
class OrderFailure:
    """Failure details of a failed order."""

    reason: str
    message: str
    failed_at: str


@dataclass
class OrderCredit:
    """Credit details of a credited order."""

    status: str
    amount_usdc: str
    credited_at: Optional[str] = None


@dataclass
class Order:
    """
    Snapshot of a remote registration order.

    The client never owns order storage; each snapshot is exactly what the
    remote service returned at that moment.
    """

    order_id: str
    domain: str
    status: str
    amount_usdc: str
    expires_at: str
    created_at: str
    paid_at: Optional[str] = None
    payment: Optional[dict] = None
    registration: Optional[OrderRegistration] = None
    failure: Optional[OrderFailure] = None
    credit: Optional[OrderCredit] = None
    next_steps: Optional[dict] = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        registration = data.get("registration")
        failure = data.get("failure")
        credit = data.get("credit")
        return cls(
            order_id=data.get("order_id", ""),
            domain=data.get("domain", ""),
            status=data.get("status", ""),
            amount_usdc=data.get("amount_usdc", ""),
            expires_at=data.get("expires_at", ""),
            created_at=data.get("created_at", ""),
            paid_at=data.get("paid_at"),
            payment=data.get("payment"),
            registration=OrderRegistration(
                registrar=registration.get("registrar", ""),
                registered_at=registration.get("registered_at", ""),
                expires_at=registration.get("expires_at", ""),
                nameservers=list(registration.get("nameservers") or []),
                auto_renew=bool(registration.get("auto_renew", False)),
            ) if isinstance(registration, dict) else None,
            failure=OrderFailure(
                reason=failure.get("reason", ""),
                message=failure.get("message", ""),
                failed_at=failure.get("failed_at", ""),
            ) if isinstance(failure, dict) else None,
            credit=OrderCredit(
                status=credit.get("status", ""),
                amount_usdc=credit.get("amount_usdc", ""),
                credited_at=credit.get("credited_at"),
            ) if isinstance(credit, dict) else None,
            next_steps=data.get("next_steps"),
            raw=data,
        )

    @property
    def order_status(self) -> Optional[OrderStatus]:
        """Status as an enum, or None for a status this client does not know."""
        try:
            return OrderStatus(self.status)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        return self.order_status in TERMINAL_ORDER_STATUSES


def registrant_to_dict(registrant: Any) -> Any:
    """Return the wire form of a registrant; dicts pass through verbatim."""
    if isinstance(registrant, Registrant):
        return registrant.to_dict()
    return registrant
