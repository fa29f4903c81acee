"""Paddle Billing API client library."""

from .client import Paddle
from .config import PRODUCTION, SANDBOX, PaddleConfig, load_config
from .exceptions import (
    ApiError,
    ConfigError,
    ConfigErrorCodes,
    EventDecodeError,
    MalformedHeaderError,
    PaddleError,
    PaddleErrorCodes,
    SignatureMismatchError,
    TimestampOutOfRangeError,
    TransportError,
    VerificationError,
)
from .logger import new_logger
from .models import (
    Address,
    ApiErrorDetail,
    ApiValidationError,
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
    Page,
    Pagination,
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
from .pagination import (
    MAX_PER_PAGE,
    MIN_PER_PAGE,
    ListRequest,
    PageTraverser,
    PerPageValidationError,
    order_by_asc,
    order_by_desc,
    validate_per_page,
)
from .transport import HttpTransport, Transport
from .webhooks import (
    ALLOWED_WEBHOOK_IPS_PRODUCTION,
    ALLOWED_WEBHOOK_IPS_SANDBOX,
    DEFAULT_MAXIMUM_VARIANCE,
    SIGNATURE_HEADER,
    MaximumVariance,
    SignatureHeader,
    generate_signature,
    is_allowed_webhook_ip,
    unmarshal,
    verify,
    verify_signature,
)

__all__ = [
    "Paddle",
    "PaddleConfig",
    "load_config",
    "PRODUCTION",
    "SANDBOX",
    "new_logger",
    "Transport",
    "HttpTransport",
    "ListRequest",
    "PageTraverser",
    "PerPageValidationError",
    "MIN_PER_PAGE",
    "MAX_PER_PAGE",
    "validate_per_page",
    "order_by_asc",
    "order_by_desc",
    "SignatureHeader",
    "MaximumVariance",
    "DEFAULT_MAXIMUM_VARIANCE",
    "SIGNATURE_HEADER",
    "ALLOWED_WEBHOOK_IPS_PRODUCTION",
    "ALLOWED_WEBHOOK_IPS_SANDBOX",
    "is_allowed_webhook_ip",
    "generate_signature",
    "verify",
    "verify_signature",
    "unmarshal",
    "Page",
    "Pagination",
    "Event",
    "EventType",
    "Product",
    "Price",
    "Customer",
    "Address",
    "Business",
    "Discount",
    "Subscription",
    "Transaction",
    "Money",
    "Status",
    "CatalogType",
    "TaxCategory",
    "DiscountType",
    "CollectionMode",
    "SubscriptionStatus",
    "TransactionStatus",
    "TransactionOrigin",
    "ScheduledChangeAction",
    "EffectiveFrom",
    "OnResume",
    "ApiErrorDetail",
    "ApiValidationError",
    "PaddleError",
    "PaddleErrorCodes",
    "VerificationError",
    "MalformedHeaderError",
    "SignatureMismatchError",
    "TimestampOutOfRangeError",
    "EventDecodeError",
    "TransportError",
    "ApiError",
    "ConfigError",
    "ConfigErrorCodes",
]
