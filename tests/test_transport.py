"""HttpTransport unit tests (respx mocks)."""

import json

import httpx
import pytest
import respx

from paddle_sdk.config import PaddleConfig
from paddle_sdk.exceptions import ApiError, PaddleErrorCodes, TransportError
from paddle_sdk.transport import HttpTransport

BASE_URL = "http://paddle-mock:8080"


def make_transport(api_key: str = "test-key") -> HttpTransport:
    return HttpTransport(PaddleConfig(api_key=api_key, base_url=BASE_URL))


@respx.mock
async def test_get_sends_params_and_bearer_token() -> None:
    """GET sends query params and the bearer token."""
    route = respx.get(f"{BASE_URL}/products").mock(
        return_value=httpx.Response(200, json={"data": [], "meta": {"request_id": "r1"}})
    )
    data = await make_transport().request("GET", "/products", params={"per_page": "5"})
    assert data["meta"]["request_id"] == "r1"
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["Content-Type"].startswith("application/json")
    assert request.url.params["per_page"] == "5"


@respx.mock
async def test_post_sends_json_body() -> None:
    """POST sends a JSON body."""
    route = respx.post(f"{BASE_URL}/customers").mock(
        return_value=httpx.Response(201, json={"data": {"id": "ctm_1"}})
    )
    await make_transport().request("POST", "/customers", json={"email": "a@example.com"})
    assert json.loads(route.calls.last.request.content) == {"email": "a@example.com"}


@respx.mock
async def test_no_authorization_header_without_key() -> None:
    """No Authorization header is sent without an API key."""
    route = respx.get(f"{BASE_URL}/event-types").mock(
        return_value=httpx.Response(200, json={"data": []})
    )
    await make_transport(api_key="").request("GET", "/event-types")
    assert "Authorization" not in route.calls.last.request.headers


@respx.mock
async def test_api_error_envelope() -> None:
    """An error envelope becomes ApiError."""
    respx.get(f"{BASE_URL}/products/pro_missing").mock(
        return_value=httpx.Response(
            404,
            json={
                "error": {
                    "type": "request_error",
                    "code": "not_found",
                    "detail": "Entity pro_missing not found",
                    "documentation_url": "https://developer.paddle.com/v1/errors/shared/not_found",
                },
                "meta": {"request_id": "req-404"},
            },
        )
    )
    with pytest.raises(ApiError) as exc_info:
        await make_transport().request("GET", "/products/pro_missing")
    err = exc_info.value
    assert err.code == PaddleErrorCodes.API_ERROR
    assert err.status_code == 404
    assert err.detail.code == "not_found"
    assert err.detail.errors == []
    assert err.request_id == "req-404"
    assert isinstance(err, TransportError)


@respx.mock
async def test_api_validation_errors() -> None:
    """Field validation errors are decoded."""
    respx.post(f"{BASE_URL}/customers").mock(
        return_value=httpx.Response(
            400,
            json={
                "error": {
                    "type": "request_error",
                    "code": "bad_request",
                    "detail": "Invalid request.",
                    "errors": [{"field": "email", "message": "invalid email"}],
                },
                "meta": {"request_id": "req-400"},
            },
        )
    )
    with pytest.raises(ApiError) as exc_info:
        await make_transport().request("POST", "/customers", json={"email": "x"})
    assert exc_info.value.detail.errors[0].field == "email"


@respx.mock
async def test_server_error_without_envelope() -> None:
    """An error without an envelope is HTTP_ERROR."""
    respx.get(f"{BASE_URL}/products").mock(
        return_value=httpx.Response(502, text="Bad Gateway")
    )
    with pytest.raises(TransportError) as exc_info:
        await make_transport().request("GET", "/products")
    assert exc_info.value.code == PaddleErrorCodes.HTTP_ERROR
    assert not isinstance(exc_info.value, ApiError)


@respx.mock
async def test_connection_error() -> None:
    """A connection failure is NETWORK_ERROR."""
    respx.get(f"{BASE_URL}/products").mock(
        side_effect=httpx.ConnectError("Connection refused")
    )
    with pytest.raises(TransportError) as exc_info:
        await make_transport().request("GET", "/products")
    assert exc_info.value.code == PaddleErrorCodes.NETWORK_ERROR
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@respx.mock
async def test_invalid_json_response() -> None:
    """A non JSON body is DECODE_ERROR."""
    respx.get(f"{BASE_URL}/products").mock(return_value=httpx.Response(200, text="<html>"))
    with pytest.raises(TransportError) as exc_info:
        await make_transport().request("GET", "/products")
    assert exc_info.value.code == PaddleErrorCodes.DECODE_ERROR


@respx.mock
async def test_non_object_response() -> None:
    """A JSON array body is DECODE_ERROR."""
    respx.get(f"{BASE_URL}/products").mock(return_value=httpx.Response(200, json=[1, 2]))
    with pytest.raises(TransportError) as exc_info:
        await make_transport().request("GET", "/products")
    assert exc_info.value.code == PaddleErrorCodes.DECODE_ERROR
