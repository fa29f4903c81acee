"""Error type tests."""

from paddle_sdk.exceptions import (
    ApiError,
    EventDecodeError,
    MalformedHeaderError,
    PaddleError,
    PaddleErrorCodes,
    SignatureMismatchError,
    TimestampOutOfRangeError,
    TransportError,
    VerificationError,
)
from paddle_sdk.models import ApiErrorDetail


def test_paddle_error_str_includes_code() -> None:
    """str() renders code and message."""
    err = PaddleError(code=PaddleErrorCodes.HTTP_ERROR, message="HTTP 500")
    assert str(err) == "HTTP_ERROR: HTTP 500"


def test_paddle_error_cause() -> None:
    """The cause is kept on the error."""
    cause = ValueError("boom")
    err = TransportError(code=PaddleErrorCodes.NETWORK_ERROR, message="failed", cause=cause)
    assert err.__cause__ is cause


def test_verification_errors_share_base() -> None:
    """Every verification failure is a VerificationError."""
    errors = [
        MalformedHeaderError("bad"),
        SignatureMismatchError(),
        TimestampOutOfRangeError(timestamp=1, skew_seconds=10.0, max_seconds=5.0),
        EventDecodeError("bad body"),
    ]
    assert all(isinstance(e, VerificationError) for e in errors)
    assert [e.code for e in errors] == [
        PaddleErrorCodes.MALFORMED_HEADER,
        PaddleErrorCodes.SIGNATURE_MISMATCH,
        PaddleErrorCodes.TIMESTAMP_OUT_OF_RANGE,
        PaddleErrorCodes.DECODE_ERROR,
    ]


def test_timestamp_error_message() -> None:
    """The timestamp error reports skew and limit."""
    err = TimestampOutOfRangeError(timestamp=100, skew_seconds=12.0, max_seconds=5.0)
    assert "12s" in str(err)
    assert "5s" in str(err)


def test_api_error_is_transport_error() -> None:
    """ApiError carries the status and detail."""
    detail = ApiErrorDetail(type="request_error", code="not_found", detail="missing")
    err = ApiError(status_code=404, detail=detail, request_id="r1")
    assert isinstance(err, TransportError)
    assert str(err) == "API_ERROR: HTTP 404: not_found: missing"
