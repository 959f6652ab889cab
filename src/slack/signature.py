"""Slack request signature verification.

Slack signs every request with HMAC-SHA256 over ``v0:<timestamp>:<body>``
keyed by the app's signing secret and sends the result as
``x-slack-signature: v0=<hex>`` alongside ``x-slack-request-timestamp``.
"""

from __future__ import annotations

import hashlib
import hmac
import time

from src.models import SignedRequest

SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"

_VERSION = "v0"


def compute_signature(signing_secret: str, timestamp: str, body: str | bytes) -> str:
    """Return the ``v0=<hex>`` signature Slack would send for this body."""
    if isinstance(body, str):
        body = body.encode()
    message = f"{_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(signing_secret.encode(), message, hashlib.sha256).hexdigest()
    return f"{_VERSION}={digest}"


def verify(
    signing_secret: str,
    signature_header: str | None,
    timestamp_header: str,
    raw_body: str | bytes,
) -> bool:
    """Verify a Slack request signature.

    Returns False for a missing or malformed header, an unknown version
    prefix, or a digest mismatch. Comparison is constant-time via
    hmac.compare_digest.
    """
    if not signature_header:
        return False
    version, sep, provided = signature_header.partition("=")
    if not sep or version != _VERSION or not provided:
        return False

    expected = compute_signature(signing_secret, timestamp_header, raw_body)
    return hmac.compare_digest(
        provided.encode(), expected[len(_VERSION) + 1:].encode(),
    )


def is_fresh(timestamp_header: str, max_age_seconds: int, now: float | None = None) -> bool:
    """Return True if the timestamp is within max_age_seconds of now.

    A max_age_seconds of 0 disables the check.
    """
    if max_age_seconds <= 0:
        return True
    try:
        request_time = int(timestamp_header)
    except ValueError:
        return False
    current = time.time() if now is None else now
    return abs(current - request_time) <= max_age_seconds


class SlackSignatureVerifier:
    """Authentication gate for inbound Slack requests."""

    def __init__(self, signing_secret: str, max_request_age_seconds: int = 0) -> None:
        self._signing_secret = signing_secret
        self._max_age = max_request_age_seconds

    def verify_request(self, request: SignedRequest) -> bool:
        """Return True only if both headers are present, fresh and the digest matches."""
        signature = request.signature_header
        timestamp = request.timestamp_header
        if not signature or not timestamp:
            return False
        if not is_fresh(timestamp, self._max_age):
            return False
        return verify(self._signing_secret, signature, timestamp, request.raw_body)

    @staticmethod
    def from_headers(headers: dict[str, str], body: bytes) -> SignedRequest:
        """Collect the signing headers (lowercase names) and raw body."""
        return SignedRequest(
            raw_body=body,
            signature_header=headers.get(SIGNATURE_HEADER),
            timestamp_header=headers.get(TIMESTAMP_HEADER),
        )
