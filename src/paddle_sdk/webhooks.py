"""Webhook signature verification.

A delivery carries a ``Paddle-Signature`` header of the form
``ts=<unix seconds>;h1=<hex HMAC-SHA256>``. The HMAC is computed with the
notification destination's secret key over ``"<ts>:" + raw body``. The raw
body must be passed exactly as received; re-serialized JSON will not match.

Usage:
    from paddle_sdk.webhooks import verify

    event = verify(
        raw_body=request_body,
        secret_key=secret,
        header_value=request.headers["Paddle-Signature"],
    )
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

import structlog

from .exceptions import (
    EventDecodeError,
    MalformedHeaderError,
    SignatureMismatchError,
    TimestampOutOfRangeError,
    VerificationError,
)
from .models import Event

logger = structlog.stdlib.get_logger(__name__)

SIGNATURE_HEADER = "paddle-signature"

_DIGEST_SIZE = hashlib.sha256().digest_size
# unix seconds fit in a signed 64-bit integer
_MAX_TIMESTAMP_DIGITS = 19

# Source addresses of webhook deliveries, per environment.
ALLOWED_WEBHOOK_IPS_PRODUCTION: frozenset[str] = frozenset(
    {
        "34.232.58.13",
        "34.195.105.136",
        "34.237.3.244",
        "35.155.119.135",
        "52.11.166.252",
        "34.212.5.7",
    }
)

ALLOWED_WEBHOOK_IPS_SANDBOX: frozenset[str] = frozenset(
    {
        "34.194.127.46",
        "54.234.237.108",
        "3.208.120.145",
        "44.226.236.210",
        "44.241.183.62",
        "100.20.172.113",
    }
)


def is_allowed_webhook_ip(
    ip: str, environment: Literal["production", "sandbox"] = "production"
) -> bool:
    """Return True if ``ip`` is a known webhook source for the environment."""
    if environment == "production":
        return ip in ALLOWED_WEBHOOK_IPS_PRODUCTION
    return ip in ALLOWED_WEBHOOK_IPS_SANDBOX


@dataclass(frozen=True)
class MaximumVariance:
    """Allowed distance between the signature timestamp and now.

    A ``duration`` of None disables the timestamp check.
    """

    duration: timedelta | None = timedelta(seconds=5)

    @classmethod
    def seconds(cls, seconds: int) -> MaximumVariance:
        return cls(timedelta(seconds=seconds))

    @classmethod
    def disabled(cls) -> MaximumVariance:
        return cls(None)


DEFAULT_MAXIMUM_VARIANCE = MaximumVariance()


@dataclass(frozen=True)
class SignatureHeader:
    """Parsed ``Paddle-Signature`` header."""

    timestamp: int
    digest: bytes

    @classmethod
    def parse(cls, header_value: str | None) -> SignatureHeader:
        """Parse ``ts=<timestamp>;h1=<digest>``.

        Raises:
            MalformedHeaderError: the value is empty, a part is not
                ``key=value``, ``ts`` or ``h1`` is missing, ``ts`` is not a
                decimal integer of at most 19 digits or ``h1`` is not a
                SHA-256 hex digest.
        """
        if not header_value:
            raise MalformedHeaderError("signature header is empty")

        timestamp: int | None = None
        digest: bytes | None = None
        for part in header_value.split(";"):
            key, sep, value = part.strip().partition("=")
            if not sep or not key or "=" in value:
                raise MalformedHeaderError(f"invalid signature part: {part!r}")
            if key == "ts":
                if not value.isdigit() or not value.isascii():
                    raise MalformedHeaderError(f"invalid timestamp: {value!r}")
                if len(value) > _MAX_TIMESTAMP_DIGITS:
                    raise MalformedHeaderError(
                        f"timestamp longer than {_MAX_TIMESTAMP_DIGITS} digits"
                    )
                timestamp = int(value)
            elif key == "h1":
                if len(value) != _DIGEST_SIZE * 2:
                    raise MalformedHeaderError(
                        f"signature must be {_DIGEST_SIZE * 2} hex characters"
                    )
                try:
                    digest = bytes.fromhex(value)
                except ValueError as e:
                    raise MalformedHeaderError("signature is not valid hex", cause=e) from e
                if len(digest) != _DIGEST_SIZE:
                    raise MalformedHeaderError("signature is not valid hex")

        if timestamp is None or digest is None:
            raise MalformedHeaderError("signature header must contain ts and h1")
        return cls(timestamp=timestamp, digest=digest)

    def format(self) -> str:
        return f"ts={self.timestamp};h1={self.digest.hex()}"


def _to_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_digest(raw_body: bytes | str, secret_key: bytes | str, timestamp: int) -> bytes:
    """HMAC-SHA256 of ``"<timestamp>:" + raw_body`` keyed with ``secret_key``."""
    signed_payload = f"{timestamp}:".encode() + _to_bytes(raw_body)
    return hmac.new(_to_bytes(secret_key), signed_payload, hashlib.sha256).digest()


def generate_signature(
    raw_body: bytes | str, secret_key: bytes | str, timestamp: int | None = None
) -> str:
    """Build a header value for ``raw_body`` as the API would send it."""
    if timestamp is None:
        timestamp = int(time.time())
    digest = compute_digest(raw_body, secret_key, timestamp)
    return SignatureHeader(timestamp=timestamp, digest=digest).format()


def _now_seconds(now: datetime | float | None) -> float:
    if now is None:
        return time.time()
    if isinstance(now, datetime):
        return now.timestamp()
    return float(now)


def verify_signature(
    raw_body: bytes | str,
    secret_key: bytes | str,
    header_value: str | None,
    max_variance: MaximumVariance = DEFAULT_MAXIMUM_VARIANCE,
    now: datetime | float | None = None,
) -> SignatureHeader:
    """Authenticate a delivery without decoding its body.

    Raises:
        MalformedHeaderError: see ``SignatureHeader.parse``.
        SignatureMismatchError: the digest does not match.
        TimestampOutOfRangeError: the digest matches but the timestamp is
            further than ``max_variance`` from ``now``.
    """
    try:
        header = SignatureHeader.parse(header_value)
        expected = compute_digest(raw_body, secret_key, header.timestamp)
        if not hmac.compare_digest(expected, header.digest):
            raise SignatureMismatchError()
        if max_variance.duration is not None:
            skew = abs(_now_seconds(now) - header.timestamp)
            limit = max_variance.duration.total_seconds()
            if skew > limit:
                raise TimestampOutOfRangeError(header.timestamp, skew, limit)
    except VerificationError as e:
        logger.warning("webhook signature rejected", code=e.code)
        raise
    return header


def verify(
    raw_body: bytes | str,
    secret_key: bytes | str,
    header_value: str | None,
    max_variance: MaximumVariance = DEFAULT_MAXIMUM_VARIANCE,
    now: datetime | float | None = None,
) -> Event:
    """Authenticate a delivery and decode it into an ``Event``.

    Args:
        raw_body: request body exactly as received.
        secret_key: secret key of the notification destination.
        header_value: value of the ``Paddle-Signature`` header.
        max_variance: allowed clock skew; ``MaximumVariance.disabled()`` skips
            the check.
        now: reference time, defaults to the current time.

    Returns:
        the decoded event.

    Raises:
        MalformedHeaderError, SignatureMismatchError, TimestampOutOfRangeError:
            the delivery is not authentic.
        EventDecodeError: the delivery is authentic but the body is not an
            event payload.
    """
    verify_signature(raw_body, secret_key, header_value, max_variance, now)
    try:
        payload = json.loads(_to_bytes(raw_body).decode("utf-8"))
        if not isinstance(payload, dict):
            raise TypeError("event payload must be a JSON object")
        event = Event.from_dict(payload)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("webhook body rejected", error=type(e).__name__)
        raise EventDecodeError(f"verified body is not a valid event: {e}", cause=e) from e
    logger.debug("webhook verified", event_id=event.event_id, event_type=event.event_type)
    return event


unmarshal = verify
