"""HTTP/JSON transport used by every API call."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from .config import PaddleConfig
from .exceptions import ApiError, PaddleErrorCodes, TransportError
from .models import ApiErrorDetail

logger = structlog.stdlib.get_logger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class Transport(ABC):
    """Sends one request and returns the decoded JSON object."""

    @abstractmethod
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...


class HttpTransport(Transport):
    """httpx based transport with bearer authentication."""

    def __init__(self, config: PaddleConfig) -> None:
        self._config = config
        self._base_url = config.base_url_for()
        self._headers: dict[str, str] = {
            "Content-Type": "application/json; charset=utf-8",
        }
        if config.api_key:
            self._headers["Authorization"] = f"Bearer {config.api_key}"

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._config.timeout_seconds,
        )

    def _handle_error(self, resp: httpx.Response, context: str) -> None:
        if resp.status_code < 400:
            return
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            meta = body.get("meta") or {}
            raise ApiError(
                status_code=resp.status_code,
                detail=ApiErrorDetail.from_dict(body["error"]),
                request_id=meta.get("request_id", "") if isinstance(meta, dict) else "",
            )
        raise TransportError(
            code=PaddleErrorCodes.HTTP_ERROR,
            message=f"{context}: HTTP {resp.status_code}: {resp.text}",
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        method = method.upper()
        context = f"{method} {path}"
        kwargs: dict[str, Any] = {}
        if params:
            kwargs["params"] = params
        if method in _BODY_METHODS:
            kwargs["json"] = json if json is not None else {}
        try:
            async with self._make_client() as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("paddle request failed", method=method, path=path, error=str(e))
            raise TransportError(
                code=PaddleErrorCodes.NETWORK_ERROR,
                message=f"{context}: {e}",
                cause=e,
            ) from e

        logger.debug(
            "paddle request", method=method, path=path, status_code=resp.status_code
        )
        try:
            self._handle_error(resp, context)
        except TransportError as e:
            logger.warning(
                "paddle request rejected",
                method=method,
                path=path,
                status_code=resp.status_code,
                code=e.code,
            )
            raise

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"{context}: response is not valid JSON",
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise TransportError(
                code=PaddleErrorCodes.DECODE_ERROR,
                message=f"{context}: response is not a JSON object",
            )
        return data
