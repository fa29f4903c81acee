"""Cursor pagination over list endpoints."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar
from urllib.parse import parse_qs, urlsplit

import structlog

from .exceptions import PaddleErrorCodes, TransportError
from .models import Page, Pagination
from .transport import Transport

T = TypeVar("T")

logger = structlog.stdlib.get_logger(__name__)

MIN_PER_PAGE = 1
MAX_PER_PAGE = 200


class PerPageValidationError(ValueError):
    """Raised when per_page is out of valid range."""

    def __init__(self, value: int) -> None:
        super().__init__(
            f"invalid per_page: {value} (must be between {MIN_PER_PAGE} and {MAX_PER_PAGE})"
        )
        self.value = value


def validate_per_page(per_page: int) -> int:
    """Validate that per_page is between 1 and 200."""
    if per_page < MIN_PER_PAGE or per_page > MAX_PER_PAGE:
        raise PerPageValidationError(per_page)
    return per_page


def encode_query_value(value: Any) -> str:
    """Render a filter value the way the API expects it in a query string.

    Sequences are comma separated, booleans are lowercase and datetimes are
    ISO 8601.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(encode_query_value(v) for v in value)
    return str(value)


def order_by_asc(field_name: str) -> str:
    return f"{field_name}[ASC]"


def order_by_desc(field_name: str) -> str:
    return f"{field_name}[DESC]"


def resolve_cursor(next_value: str | None) -> str | None:
    """Extract the ``after`` cursor from ``meta.pagination.next``.

    The API returns a full URL for the next page; a bare token is taken as is.
    """
    if not next_value:
        return None
    if "://" not in next_value and "?" not in next_value:
        return next_value
    after = parse_qs(urlsplit(next_value).query).get("after")
    return after[0] if after and after[0] else None


@dataclass(frozen=True)
class ListRequest:
    """A list endpoint with its filters and page size hint."""

    path: str
    filters: Mapping[str, Any] = field(default_factory=dict)
    per_page: int | None = None

    def __post_init__(self) -> None:
        if self.per_page is not None:
            validate_per_page(self.per_page)
        object.__setattr__(self, "filters", dict(self.filters))

    def query(self, cursor: str | None = None) -> dict[str, str]:
        """Build query params with ``after`` and ``per_page`` merged in."""
        params = {
            key: encode_query_value(value)
            for key, value in self.filters.items()
            if value is not None
        }
        if self.per_page is not None:
            params["per_page"] = str(self.per_page)
        if cursor is not None:
            params["after"] = cursor
        return params


class PageTraverser(Generic[T]):
    """Forward-only traversal of one list request.

    ``fetch_next`` is the single step; ``fetch_all`` and async iteration are
    built on it. Not safe for concurrent use of one instance.
    """

    def __init__(
        self,
        transport: Transport,
        request: ListRequest,
        item_factory: Callable[[dict[str, Any]], T],
    ) -> None:
        self._transport = transport
        self._request = request
        self._item_factory = item_factory
        self._cursor: str | None = None
        self._exhausted = False

    @property
    def request(self) -> ListRequest:
        return self._request

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    async def fetch_next(self) -> Page[T] | None:
        """Fetch the next page, or return None once the traversal is over."""
        if self._exhausted:
            return None
        params = self._request.query(self._cursor)
        data = await self._transport.request("GET", self._request.path, params=params)
        page = self._decode_page(data)
        if page.next_cursor is None:
            self._exhausted = True
        else:
            self._cursor = page.next_cursor
        logger.debug(
            "paddle page fetched",
            path=self._request.path,
            items=len(page.items),
            has_more=page.has_more,
            request_id=page.request_id,
        )
        return page

    async def fetch_all(self) -> list[T]:
        """Fetch every remaining page and concatenate the items in order."""
        items: list[T] = []
        while (page := await self.fetch_next()) is not None:
            items.extend(page.items)
        return items

    def __aiter__(self) -> PageTraverser[T]:
        return self

    async def __anext__(self) -> Page[T]:
        page = await self.fetch_next()
        if page is None:
            raise StopAsyncIteration
        return page

    def _decode_page(self, data: dict[str, Any]) -> Page[T]:
        raw_items = data.get("data")
        meta = data.get("meta")
        raw_pagination = meta.get("pagination") if isinstance(meta, dict) else None
        if not isinstance(raw_items, list) or not isinstance(raw_pagination, dict):
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"GET {self._request.path}: response is not a paginated list",
            )
        try:
            pagination = Pagination.from_dict(raw_pagination)
            items = [self._item_factory(item) for item in raw_items]
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"GET {self._request.path}: failed to decode page: {e}",
                cause=e,
            ) from e
        next_cursor = resolve_cursor(pagination.next) if pagination.has_more else None
        return Page(
            items=items,
            has_more=pagination.has_more,
            next_cursor=next_cursor,
            request_id=meta.get("request_id", ""),
            per_page=pagination.per_page,
            estimated_total=pagination.estimated_total,
        )
