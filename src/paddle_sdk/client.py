"""Paddle API client."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from . import webhooks
from .config import PRODUCTION, SANDBOX, PaddleConfig
from .exceptions import ConfigError, ConfigErrorCodes, PaddleErrorCodes, TransportError
from .models import (
    Address,
    Business,
    CatalogType,
    CollectionMode,
    Customer,
    Discount,
    DiscountType,
    EffectiveFrom,
    Event,
    EventType,
    Money,
    OnResume,
    Price,
    Product,
    ScheduledChangeAction,
    Status,
    Subscription,
    SubscriptionStatus,
    TaxCategory,
    Transaction,
    TransactionOrigin,
    TransactionStatus,
)
from .pagination import ListRequest, PageTraverser, encode_query_value
from .transport import HttpTransport, Transport
from .webhooks import MaximumVariance

T = TypeVar("T")


_DATE_OPERATORS = frozenset({"LT", "LTE", "GT", "GTE"})

DateFilter = datetime | str | Mapping[str, datetime | str]


def _body(fields: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, Money):
            value = value.to_dict()
        elif isinstance(value, datetime):
            value = value.isoformat()
        body[key] = value
    return body


def _ids(values: Iterable[str] | None) -> list[str] | None:
    return list(values) if values is not None else None


def _date_filter(name: str, value: DateFilter | None) -> dict[str, Any]:
    """Expand a date filter into query keys.

    A single value matches exactly; a mapping such as ``{"gte": start}``
    becomes ``name[GTE]=start``.
    """
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        return {name: value}
    filters: dict[str, Any] = {}
    for operator, bound in value.items():
        op = operator.upper()
        if op not in _DATE_OPERATORS:
            raise ValueError(f"unknown date operator for {name}: {operator!r}")
        filters[f"{name}[{op}]"] = bound
    return filters


class Paddle:
    """Async client for the Paddle Billing API.

    Example:
        client = Paddle(PaddleConfig.from_env())
        customers = await client.customers_list(per_page=50).fetch_all()
    """

    PRODUCTION = PRODUCTION
    SANDBOX = SANDBOX
    ALLOWED_WEBHOOK_IPS_PRODUCTION = webhooks.ALLOWED_WEBHOOK_IPS_PRODUCTION
    ALLOWED_WEBHOOK_IPS_SANDBOX = webhooks.ALLOWED_WEBHOOK_IPS_SANDBOX

    def __init__(self, config: PaddleConfig, transport: Transport | None = None) -> None:
        self._config = config
        self._transport = transport or HttpTransport(config)

    @classmethod
    def new(cls, api_key: str, base_url: str = SANDBOX) -> Paddle:
        return cls(PaddleConfig(api_key=api_key, base_url=base_url))

    @property
    def config(self) -> PaddleConfig:
        return self._config

    def _list(
        self,
        path: str,
        item_factory: Callable[[dict[str, Any]], T],
        per_page: int | None,
        filters: dict[str, Any],
    ) -> PageTraverser[T]:
        request = ListRequest(path=path, filters=filters, per_page=per_page)
        return PageTraverser(self._transport, request, item_factory)

    async def _entity(
        self,
        method: str,
        path: str,
        item_factory: Callable[[dict[str, Any]], T],
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> T:
        data = await self._transport.request(method, path, params=params, json=json)
        entity = data.get("data")
        try:
            if not isinstance(entity, dict):
                raise TypeError("'data' is not an object")
            return item_factory(entity)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"{method} {path}: failed to decode response: {e}",
                cause=e,
            ) from e

    @staticmethod
    def _include(include: Iterable[str] | None) -> dict[str, str] | None:
        if include is None:
            return None
        return {"include": encode_query_value(list(include))}

    def products_list(
        self,
        *,
        after: str | None = None,
        ids: Iterable[str] | None = None,
        include: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        status: Status | None = None,
        tax_category: Iterable[TaxCategory] | None = None,
        catalog_type: CatalogType | None = None,
    ) -> PageTraverser[Product]:
        """List products. Only ``active`` products are returned by default."""
        filters = {
            "after": after,
            "id": _ids(ids),
            "include": _ids(include),
            "order_by": order_by,
            "status": status,
            "tax_category": _ids(tax_category),
            "type": catalog_type,
        }
        return self._list("/products", Product.from_dict, per_page, filters)

    async def product_get(
        self, product_id: str, *, include: Iterable[str] | None = None
    ) -> Product:
        return await self._entity(
            "GET", f"/products/{product_id}", Product.from_dict, params=self._include(include)
        )

    async def product_create(
        self, name: str, tax_category: TaxCategory, **fields: Any
    ) -> Product:
        body = _body({"name": name, "tax_category": tax_category, **fields})
        return await self._entity("POST", "/products", Product.from_dict, json=body)

    async def product_update(self, product_id: str, **fields: Any) -> Product:
        return await self._entity(
            "PATCH", f"/products/{product_id}", Product.from_dict, json=_body(fields)
        )

    def prices_list(
        self,
        *,
        after: str | None = None,
        ids: Iterable[str] | None = None,
        include: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        product_ids: Iterable[str] | None = None,
        status: Status | None = None,
        recurring: bool | None = None,
        catalog_type: CatalogType | None = None,
    ) -> PageTraverser[Price]:
        filters = {
            "after": after,
            "id": _ids(ids),
            "include": _ids(include),
            "order_by": order_by,
            "product_id": _ids(product_ids),
            "status": status,
            "recurring": recurring,
            "type": catalog_type,
        }
        return self._list("/prices", Price.from_dict, per_page, filters)

    async def price_get(self, price_id: str, *, include: Iterable[str] | None = None) -> Price:
        return await self._entity(
            "GET", f"/prices/{price_id}", Price.from_dict, params=self._include(include)
        )

    async def price_create(
        self,
        product_id: str,
        description: str,
        amount: int,
        currency_code: str,
        **fields: Any,
    ) -> Price:
        """Create a price; ``amount`` is in the lowest denomination (cents)."""
        body = _body(
            {
                "product_id": product_id,
                "description": description,
                "unit_price": Money(amount=str(amount), currency_code=currency_code),
                **fields,
            }
        )
        return await self._entity("POST", "/prices", Price.from_dict, json=body)

    async def price_update(self, price_id: str, **fields: Any) -> Price:
        return await self._entity(
            "PATCH", f"/prices/{price_id}", Price.from_dict, json=_body(fields)
        )

    def customers_list(
        self,
        *,
        after: str | None = None,
        emails: Iterable[str] | None = None,
        ids: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        search: str | None = None,
        status: Status | None = None,
    ) -> PageTraverser[Customer]:
        filters = {
            "after": after,
            "email": _ids(emails),
            "id": _ids(ids),
            "order_by": order_by,
            "search": search,
            "status": status,
        }
        return self._list("/customers", Customer.from_dict, per_page, filters)

    async def customer_get(self, customer_id: str) -> Customer:
        return await self._entity("GET", f"/customers/{customer_id}", Customer.from_dict)

    async def customer_create(self, email: str, **fields: Any) -> Customer:
        body = _body({"email": email, **fields})
        return await self._entity("POST", "/customers", Customer.from_dict, json=body)

    async def customer_update(self, customer_id: str, **fields: Any) -> Customer:
        return await self._entity(
            "PATCH", f"/customers/{customer_id}", Customer.from_dict, json=_body(fields)
        )

    def discounts_list(
        self,
        *,
        after: str | None = None,
        codes: Iterable[str] | None = None,
        ids: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        status: Status | None = None,
    ) -> PageTraverser[Discount]:
        filters = {
            "after": after,
            "code": _ids(codes),
            "id": _ids(ids),
            "order_by": order_by,
            "status": status,
        }
        return self._list("/discounts", Discount.from_dict, per_page, filters)

    async def discount_get(self, discount_id: str) -> Discount:
        return await self._entity("GET", f"/discounts/{discount_id}", Discount.from_dict)

    async def discount_create(
        self, amount: str, description: str, discount_type: DiscountType, **fields: Any
    ) -> Discount:
        """Create a discount.

        ``amount`` is a percentage for ``percentage`` discounts, otherwise an
        amount in the lowest denomination; pass ``currency_code`` with it.
        """
        body = _body(
            {"amount": amount, "description": description, "type": discount_type, **fields}
        )
        return await self._entity("POST", "/discounts", Discount.from_dict, json=body)

    async def discount_update(self, discount_id: str, **fields: Any) -> Discount:
        return await self._entity(
            "PATCH", f"/discounts/{discount_id}", Discount.from_dict, json=_body(fields)
        )

    def addresses_list(
        self,
        customer_id: str,
        *,
        after: str | None = None,
        ids: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        search: str | None = None,
        status: Status | None = None,
    ) -> PageTraverser[Address]:
        filters = {
            "after": after,
            "id": _ids(ids),
            "order_by": order_by,
            "search": search,
            "status": status,
        }
        path = f"/customers/{customer_id}/addresses"
        return self._list(path, Address.from_dict, per_page, filters)

    async def address_get(self, customer_id: str, address_id: str) -> Address:
        return await self._entity(
            "GET", f"/customers/{customer_id}/addresses/{address_id}", Address.from_dict
        )

    async def address_create(self, customer_id: str, country_code: str, **fields: Any) -> Address:
        body = _body({"country_code": country_code, **fields})
        return await self._entity(
            "POST", f"/customers/{customer_id}/addresses", Address.from_dict, json=body
        )

    async def address_update(self, customer_id: str, address_id: str, **fields: Any) -> Address:
        return await self._entity(
            "PATCH",
            f"/customers/{customer_id}/addresses/{address_id}",
            Address.from_dict,
            json=_body(fields),
        )

    def businesses_list(
        self,
        customer_id: str,
        *,
        after: str | None = None,
        ids: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        search: str | None = None,
        status: Status | None = None,
    ) -> PageTraverser[Business]:
        filters = {
            "after": after,
            "id": _ids(ids),
            "order_by": order_by,
            "search": search,
            "status": status,
        }
        path = f"/customers/{customer_id}/businesses"
        return self._list(path, Business.from_dict, per_page, filters)

    async def business_get(self, customer_id: str, business_id: str) -> Business:
        return await self._entity(
            "GET", f"/customers/{customer_id}/businesses/{business_id}", Business.from_dict
        )

    async def business_create(self, customer_id: str, name: str, **fields: Any) -> Business:
        body = _body({"name": name, **fields})
        return await self._entity(
            "POST", f"/customers/{customer_id}/businesses", Business.from_dict, json=body
        )

    async def business_update(
        self, customer_id: str, business_id: str, **fields: Any
    ) -> Business:
        return await self._entity(
            "PATCH",
            f"/customers/{customer_id}/businesses/{business_id}",
            Business.from_dict,
            json=_body(fields),
        )

    def subscriptions_list(
        self,
        *,
        address_ids: Iterable[str] | None = None,
        after: str | None = None,
        collection_mode: CollectionMode | None = None,
        customer_ids: Iterable[str] | None = None,
        ids: Iterable[str] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        price_ids: Iterable[str] | None = None,
        scheduled_change_action: Iterable[ScheduledChangeAction] | None = None,
        statuses: Iterable[SubscriptionStatus] | None = None,
    ) -> PageTraverser[Subscription]:
        filters = {
            "address_id": _ids(address_ids),
            "after": after,
            "collection_mode": collection_mode,
            "customer_id": _ids(customer_ids),
            "id": _ids(ids),
            "order_by": order_by,
            "price_id": _ids(price_ids),
            "scheduled_change_action": _ids(scheduled_change_action),
            "status": _ids(statuses),
        }
        return self._list("/subscriptions", Subscription.from_dict, per_page, filters)

    async def subscription_get(
        self, subscription_id: str, *, include: Iterable[str] | None = None
    ) -> Subscription:
        return await self._entity(
            "GET",
            f"/subscriptions/{subscription_id}",
            Subscription.from_dict,
            params=self._include(include),
        )

    async def subscription_update(self, subscription_id: str, **fields: Any) -> Subscription:
        """Update a subscription.

        Changes to items or billing dates need ``proration_billing_mode``.
        """
        return await self._entity(
            "PATCH",
            f"/subscriptions/{subscription_id}",
            Subscription.from_dict,
            json=_body(fields),
        )

    async def subscription_activate(self, subscription_id: str) -> Subscription:
        """Activate a trialing subscription and bill it immediately."""
        return await self._entity(
            "POST", f"/subscriptions/{subscription_id}/activate", Subscription.from_dict, json={}
        )

    async def subscription_pause(
        self,
        subscription_id: str,
        *,
        effective_from: EffectiveFrom | None = None,
        resume_at: datetime | str | None = None,
        on_resume: OnResume | None = None,
    ) -> Subscription:
        """Pause a subscription, by default at the end of the billing period.

        Without ``resume_at`` the pause is open ended.
        """
        body = _body(
            {"effective_from": effective_from, "resume_at": resume_at, "on_resume": on_resume}
        )
        return await self._entity(
            "POST", f"/subscriptions/{subscription_id}/pause", Subscription.from_dict, json=body
        )

    async def subscription_resume(
        self,
        subscription_id: str,
        *,
        effective_from: EffectiveFrom | None = None,
        resume_at: datetime | str | None = None,
        on_resume: OnResume | None = None,
    ) -> Subscription:
        body = _body(
            {"effective_from": effective_from, "resume_at": resume_at, "on_resume": on_resume}
        )
        return await self._entity(
            "POST", f"/subscriptions/{subscription_id}/resume", Subscription.from_dict, json=body
        )

    async def subscription_cancel(
        self, subscription_id: str, *, effective_from: EffectiveFrom | None = None
    ) -> Subscription:
        body = _body({"effective_from": effective_from})
        return await self._entity(
            "POST", f"/subscriptions/{subscription_id}/cancel", Subscription.from_dict, json=body
        )

    def transactions_list(
        self,
        *,
        after: str | None = None,
        billed_at: DateFilter | None = None,
        collection_mode: CollectionMode | None = None,
        created_at: DateFilter | None = None,
        customer_ids: Iterable[str] | None = None,
        ids: Iterable[str] | None = None,
        include: Iterable[str] | None = None,
        invoice_numbers: Iterable[str] | None = None,
        origins: Iterable[TransactionOrigin] | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
        statuses: Iterable[TransactionStatus] | None = None,
        subscription_ids: Iterable[str] | None = None,
        updated_at: DateFilter | None = None,
    ) -> PageTraverser[Transaction]:
        """List transactions.

        ``billed_at``, ``created_at`` and ``updated_at`` take a single value
        for an exact match or a mapping of ``lt``/``lte``/``gt``/``gte`` to
        bounds.
        """
        filters = {
            "after": after,
            "collection_mode": collection_mode,
            "customer_id": _ids(customer_ids),
            "id": _ids(ids),
            "include": _ids(include),
            "invoice_number": _ids(invoice_numbers),
            "origin": _ids(origins),
            "order_by": order_by,
            "status": _ids(statuses),
            "subscription_id": _ids(subscription_ids),
            **_date_filter("billed_at", billed_at),
            **_date_filter("created_at", created_at),
            **_date_filter("updated_at", updated_at),
        }
        return self._list("/transactions", Transaction.from_dict, per_page, filters)

    async def transaction_get(
        self, transaction_id: str, *, include: Iterable[str] | None = None
    ) -> Transaction:
        return await self._entity(
            "GET",
            f"/transactions/{transaction_id}",
            Transaction.from_dict,
            params=self._include(include),
        )

    async def transaction_create(
        self, items: Iterable[dict[str, Any]], **fields: Any
    ) -> Transaction:
        body = _body({"items": list(items), **fields})
        return await self._entity("POST", "/transactions", Transaction.from_dict, json=body)

    async def transaction_update(self, transaction_id: str, **fields: Any) -> Transaction:
        return await self._entity(
            "PATCH",
            f"/transactions/{transaction_id}",
            Transaction.from_dict,
            json=_body(fields),
        )

    def events_list(
        self,
        *,
        after: str | None = None,
        order_by: str | None = None,
        per_page: int | None = None,
    ) -> PageTraverser[Event]:
        filters = {"after": after, "order_by": order_by}
        return self._list("/events", Event.from_dict, per_page, filters)

    async def event_types_list(self) -> list[EventType]:
        """Return every event type. The endpoint is not paginated."""
        data = await self._transport.request("GET", "/event-types")
        raw = data.get("data")
        try:
            if not isinstance(raw, list):
                raise TypeError("'data' is not a list")
            return [EventType.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"GET /event-types: failed to decode response: {e}",
                cause=e,
            ) from e

    @staticmethod
    def unmarshal(
        raw_body: bytes | str,
        secret_key: bytes | str,
        header_value: str | None,
        max_variance: MaximumVariance = webhooks.DEFAULT_MAXIMUM_VARIANCE,
        now: datetime | float | None = None,
    ) -> Event:
        """Verify a webhook delivery and return the decoded event."""
        return webhooks.unmarshal(raw_body, secret_key, header_value, max_variance, now)

    def verify_webhook(
        self,
        raw_body: bytes | str,
        header_value: str | None,
        now: datetime | float | None = None,
    ) -> Event:
        """Verify a delivery with the secret and variance from the settings."""
        if not self._config.webhook_secret:
            raise ConfigError(
                code=ConfigErrorCodes.VALIDATION,
                message="webhook_secret is not configured",
            )
        variance = MaximumVariance(self._config.max_variance())
        return webhooks.verify(
            raw_body, self._config.webhook_secret, header_value, variance, now
        )
