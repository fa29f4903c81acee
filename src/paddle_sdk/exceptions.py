"""Error types for the Paddle SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ApiErrorDetail


class PaddleError(Exception):
    """Base class for every error raised by the SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class PaddleErrorCodes:
    """Error code constants for PaddleError."""

    MALFORMED_HEADER: str = "MALFORMED_HEADER"
    SIGNATURE_MISMATCH: str = "SIGNATURE_MISMATCH"
    TIMESTAMP_OUT_OF_RANGE: str = "TIMESTAMP_OUT_OF_RANGE"
    DECODE_ERROR: str = "DECODE_ERROR"
    HTTP_ERROR: str = "HTTP_ERROR"
    NETWORK_ERROR: str = "NETWORK_ERROR"
    API_ERROR: str = "API_ERROR"


class VerificationError(PaddleError):
    """A webhook delivery could not be authenticated or decoded."""


class MalformedHeaderError(VerificationError):
    """The signature header is absent or does not match ``ts=...;h1=...``."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(PaddleErrorCodes.MALFORMED_HEADER, message, cause)


class SignatureMismatchError(VerificationError):
    """The header digest does not match the computed HMAC."""

    def __init__(self, message: str = "signature does not match request body") -> None:
        super().__init__(PaddleErrorCodes.SIGNATURE_MISMATCH, message)


class TimestampOutOfRangeError(VerificationError):
    """The signature is valid but its timestamp is outside the variance window."""

    def __init__(self, timestamp: int, skew_seconds: float, max_seconds: float) -> None:
        self.timestamp = timestamp
        self.skew_seconds = skew_seconds
        self.max_seconds = max_seconds
        super().__init__(
            PaddleErrorCodes.TIMESTAMP_OUT_OF_RANGE,
            f"signature timestamp {timestamp} is {skew_seconds:.0f}s away from now "
            f"(maximum {max_seconds:.0f}s)",
        )


class EventDecodeError(VerificationError):
    """The verified body is not a valid event payload."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(PaddleErrorCodes.DECODE_ERROR, message, cause)


class TransportError(PaddleError):
    """HTTP failure or undecodable response while talking to the API."""


class ApiError(TransportError):
    """The API answered with an error envelope."""

    def __init__(
        self,
        status_code: int,
        detail: ApiErrorDetail,
        request_id: str = "",
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.request_id = request_id
        super().__init__(
            PaddleErrorCodes.API_ERROR,
            f"HTTP {status_code}: {detail.code}: {detail.detail}",
        )


class ConfigError(PaddleError):
    """Client settings could not be loaded."""


class ConfigErrorCodes:
    """ConfigError code constants."""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
