"""Paddle API data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Status(StrEnum):
    """Entity status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class CatalogType(StrEnum):
    """Catalog type of a product or price."""

    STANDARD = "standard"
    CUSTOM = "custom"


class TaxCategory(StrEnum):
    """Tax category of a product."""

    DIGITAL_GOODS = "digital-goods"
    EBOOKS = "ebooks"
    IMPLEMENTATION_SERVICES = "implementation-services"
    PROFESSIONAL_SERVICES = "professional-services"
    SAAS = "saas"
    SOFTWARE_PROGRAMMING_SERVICES = "software-programming-services"
    STANDARD = "standard"
    TRAINING_SERVICES = "training-services"
    WEBSITE_HOSTING = "website-hosting"


class DiscountType(StrEnum):
    FLAT = "flat"
    FLAT_PER_SEAT = "flat_per_seat"
    PERCENTAGE = "percentage"


class CollectionMode(StrEnum):
    """How payment is collected for a subscription or transaction."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    PAUSED = "paused"
    TRIALING = "trialing"


class TransactionStatus(StrEnum):
    DRAFT = "draft"
    READY = "ready"
    BILLED = "billed"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELED = "canceled"
    PAST_DUE = "past_due"


class TransactionOrigin(StrEnum):
    API = "api"
    SUBSCRIPTION_CHARGE = "subscription_charge"
    SUBSCRIPTION_PAYMENT_METHOD_CHANGE = "subscription_payment_method_change"
    SUBSCRIPTION_RECURRING = "subscription_recurring"
    SUBSCRIPTION_UPDATE = "subscription_update"
    WEB = "web"


class ScheduledChangeAction(StrEnum):
    CANCEL = "cancel"
    PAUSE = "pause"
    RESUME = "resume"


class EffectiveFrom(StrEnum):
    """When a subscription change takes effect."""

    NEXT_BILLING_PERIOD = "next_billing_period"
    IMMEDIATELY = "immediately"


class OnResume(StrEnum):
    """Billing period handling when a paused subscription resumes."""

    CONTINUE_EXISTING_BILLING_PERIOD = "continue_existing_billing_period"
    START_NEW_BILLING_PERIOD = "start_new_billing_period"


@dataclass
class ApiValidationError:
    """Field level validation problem reported by the API."""

    field: str
    message: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiValidationError:
        return cls(field=data.get("field", ""), message=data.get("message", ""))


@dataclass
class ApiErrorDetail:
    """Body of an API error envelope."""

    type: str
    code: str
    detail: str
    documentation_url: str = ""
    errors: list[ApiValidationError] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiErrorDetail:
        return cls(
            type=data.get("type", ""),
            code=data.get("code", ""),
            detail=data.get("detail", ""),
            documentation_url=data.get("documentation_url", ""),
            errors=[ApiValidationError.from_dict(e) for e in data.get("errors") or []],
        )


@dataclass
class Pagination:
    """``meta.pagination`` block of a list response."""

    has_more: bool
    next: str = ""
    per_page: int = 0
    estimated_total: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pagination:
        has_more = data.get("has_more", False)
        if not isinstance(has_more, bool):
            raise TypeError(f"has_more must be a boolean, got {has_more!r}")
        return cls(
            has_more=has_more,
            next=data.get("next") or "",
            per_page=data.get("per_page", 0),
            estimated_total=data.get("estimated_total", 0),
        )


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint."""

    items: list[T]
    has_more: bool
    next_cursor: str | None = None
    request_id: str = ""
    per_page: int = 0
    estimated_total: int = 0


@dataclass
class Money:
    """Amount in the lowest denomination of a currency."""

    amount: str
    currency_code: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Money:
        return cls(amount=str(data["amount"]), currency_code=data["currency_code"])

    def to_dict(self) -> dict[str, Any]:
        return {"amount": self.amount, "currency_code": self.currency_code}


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp; None passes through."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value!r}")
    return parsed


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


@dataclass
class Event:
    """A webhook notification or an entry of the events list."""

    event_id: str
    event_type: str = ""
    occurred_at: datetime | None = None
    notification_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Decode an event payload.

        Raises:
            KeyError: ``event_id`` is missing.
            TypeError: a field has the wrong JSON type.
            ValueError: ``occurred_at`` is not an RFC 3339 timestamp.
        """
        event_id = data["event_id"]
        if not isinstance(event_id, str) or not event_id:
            raise TypeError("event_id must be a non-empty string")
        payload = data.get("data")
        if payload is None:
            payload = {}
        elif not isinstance(payload, dict):
            raise TypeError("event data must be an object")
        return cls(
            event_id=event_id,
            event_type=_optional_str(data, "event_type") or "",
            occurred_at=_parse_timestamp(data.get("occurred_at")),
            notification_id=_optional_str(data, "notification_id"),
            data=payload,
        )


@dataclass
class EventType:
    """An event type the API can notify about."""

    name: str
    description: str = ""
    group: str = ""
    available_versions: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventType:
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            group=data.get("group", ""),
            available_versions=list(data.get("available_versions", [])),
        )


@dataclass
class Price:
    """A price attached to a product."""

    id: str
    product_id: str
    description: str
    unit_price: Money
    name: str | None = None
    type: CatalogType = CatalogType.STANDARD
    billing_cycle: dict[str, Any] | None = None
    trial_period: dict[str, Any] | None = None
    tax_mode: str = "account_setting"
    status: Status = Status.ACTIVE
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Price:
        return cls(
            id=data["id"],
            product_id=data["product_id"],
            description=data.get("description", ""),
            unit_price=Money.from_dict(data["unit_price"]),
            name=data.get("name"),
            type=CatalogType(data.get("type", "standard")),
            billing_cycle=data.get("billing_cycle"),
            trial_period=data.get("trial_period"),
            tax_mode=data.get("tax_mode", "account_setting"),
            status=Status(data.get("status", "active")),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Product:
    """A product in the catalog."""

    id: str
    name: str
    tax_category: str
    type: CatalogType = CatalogType.STANDARD
    description: str | None = None
    image_url: str | None = None
    status: Status = Status.ACTIVE
    custom_data: dict[str, Any] | None = None
    prices: list[Price] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            id=data["id"],
            name=data["name"],
            tax_category=data.get("tax_category", ""),
            type=CatalogType(data.get("type", "standard")),
            description=data.get("description"),
            image_url=data.get("image_url"),
            status=Status(data.get("status", "active")),
            custom_data=data.get("custom_data"),
            prices=[Price.from_dict(p) for p in data.get("prices") or []],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Customer:
    """A customer record."""

    id: str
    email: str
    name: str | None = None
    marketing_consent: bool = False
    status: Status = Status.ACTIVE
    locale: str = "en"
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Customer:
        return cls(
            id=data["id"],
            email=data["email"],
            name=data.get("name"),
            marketing_consent=bool(data.get("marketing_consent", False)),
            status=Status(data.get("status", "active")),
            locale=data.get("locale", "en"),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Address:
    """A customer address."""

    id: str
    customer_id: str
    country_code: str
    description: str | None = None
    first_line: str | None = None
    second_line: str | None = None
    city: str | None = None
    postal_code: str | None = None
    region: str | None = None
    status: Status = Status.ACTIVE
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Address:
        return cls(
            id=data["id"],
            customer_id=data["customer_id"],
            country_code=data["country_code"],
            description=data.get("description"),
            first_line=data.get("first_line"),
            second_line=data.get("second_line"),
            city=data.get("city"),
            postal_code=data.get("postal_code"),
            region=data.get("region"),
            status=Status(data.get("status", "active")),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Business:
    """A business a customer buys on behalf of."""

    id: str
    customer_id: str
    name: str
    company_number: str | None = None
    tax_identifier: str | None = None
    status: Status = Status.ACTIVE
    contacts: list[dict[str, Any]] = field(default_factory=list)
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Business:
        return cls(
            id=data["id"],
            customer_id=data["customer_id"],
            name=data["name"],
            company_number=data.get("company_number"),
            tax_identifier=data.get("tax_identifier"),
            status=Status(data.get("status", "active")),
            contacts=list(data.get("contacts") or []),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Discount:
    """A discount applied at checkout or to a subscription.

    ``amount`` is a percentage for ``percentage`` discounts and an amount in
    the lowest denomination of ``currency_code`` otherwise.
    """

    id: str
    description: str
    type: DiscountType
    amount: str
    status: Status = Status.ACTIVE
    enabled_for_checkout: bool = False
    code: str | None = None
    currency_code: str | None = None
    recur: bool = False
    maximum_recurring_intervals: int | None = None
    usage_limit: int | None = None
    restrict_to: list[str] | None = None
    expires_at: str | None = None
    times_used: int = 0
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Discount:
        return cls(
            id=data["id"],
            description=data.get("description", ""),
            type=DiscountType(data["type"]),
            amount=str(data["amount"]),
            status=Status(data.get("status", "active")),
            enabled_for_checkout=bool(data.get("enabled_for_checkout", False)),
            code=data.get("code"),
            currency_code=data.get("currency_code"),
            recur=bool(data.get("recur", False)),
            maximum_recurring_intervals=data.get("maximum_recurring_intervals"),
            usage_limit=data.get("usage_limit"),
            restrict_to=data.get("restrict_to"),
            expires_at=data.get("expires_at"),
            times_used=data.get("times_used", 0),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Subscription:
    """A recurring billing agreement with a customer."""

    id: str
    status: SubscriptionStatus
    customer_id: str
    address_id: str
    currency_code: str
    collection_mode: CollectionMode = CollectionMode.AUTOMATIC
    business_id: str | None = None
    items: list[dict[str, Any]] = field(default_factory=list)
    billing_cycle: dict[str, Any] | None = None
    current_billing_period: dict[str, Any] | None = None
    scheduled_change: dict[str, Any] | None = None
    discount: dict[str, Any] | None = None
    started_at: str | None = None
    first_billed_at: str | None = None
    next_billed_at: str | None = None
    paused_at: str | None = None
    canceled_at: str | None = None
    custom_data: dict[str, Any] | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subscription:
        return cls(
            id=data["id"],
            status=SubscriptionStatus(data["status"]),
            customer_id=data["customer_id"],
            address_id=data["address_id"],
            currency_code=data["currency_code"],
            collection_mode=CollectionMode(data.get("collection_mode", "automatic")),
            business_id=data.get("business_id"),
            items=list(data.get("items") or []),
            billing_cycle=data.get("billing_cycle"),
            current_billing_period=data.get("current_billing_period"),
            scheduled_change=data.get("scheduled_change"),
            discount=data.get("discount"),
            started_at=data.get("started_at"),
            first_billed_at=data.get("first_billed_at"),
            next_billed_at=data.get("next_billed_at"),
            paused_at=data.get("paused_at"),
            canceled_at=data.get("canceled_at"),
            custom_data=data.get("custom_data"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Transaction:
    """A charge, draft or completed, for one or more items."""

    id: str
    status: TransactionStatus
    currency_code: str
    origin: TransactionOrigin = TransactionOrigin.API
    collection_mode: CollectionMode = CollectionMode.AUTOMATIC
    customer_id: str | None = None
    address_id: str | None = None
    business_id: str | None = None
    subscription_id: str | None = None
    discount_id: str | None = None
    invoice_number: str | None = None
    items: list[dict[str, Any]] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)
    payments: list[dict[str, Any]] = field(default_factory=list)
    checkout: dict[str, Any] | None = None
    billing_period: dict[str, Any] | None = None
    custom_data: dict[str, Any] | None = None
    billed_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            id=data["id"],
            status=TransactionStatus(data["status"]),
            currency_code=data["currency_code"],
            origin=TransactionOrigin(data.get("origin", "api")),
            collection_mode=CollectionMode(data.get("collection_mode", "automatic")),
            customer_id=data.get("customer_id"),
            address_id=data.get("address_id"),
            business_id=data.get("business_id"),
            subscription_id=data.get("subscription_id"),
            discount_id=data.get("discount_id"),
            invoice_number=data.get("invoice_number"),
            items=list(data.get("items") or []),
            details=data.get("details") or {},
            payments=list(data.get("payments") or []),
            checkout=data.get("checkout"),
            billing_period=data.get("billing_period"),
            custom_data=data.get("custom_data"),
            billed_at=data.get("billed_at"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )
