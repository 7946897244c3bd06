"""GitHub webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac


class InvalidSignatureError(Exception):
    """Delivery signature is missing or does not match the shared secret."""


def verify_signature(
    secret: str,
    body: bytes,
    signature_256: str | None = None,
    signature_sha1: str | None = None,
) -> None:
    """Check a delivery's HMAC against the shared secret.

    X-Hub-Signature-256 is preferred; the legacy SHA-1 X-Hub-Signature is
    accepted when it is the only one present. An empty secret disables the
    check.

    Raises:
        InvalidSignatureError: If no signature is present or none matches.
    """
    if not secret:
        return

    if signature_256:
        algorithm, header = "sha256", signature_256
    elif signature_sha1:
        algorithm, header = "sha1", signature_sha1
    else:
        raise InvalidSignatureError("Delivery is not signed")

    prefix, _, received = header.partition("=")
    if prefix != algorithm or not received:
        raise InvalidSignatureError(f"Unsupported signature format: {prefix!r}")

    expected = hmac.new(secret.encode(), body, getattr(hashlib, algorithm)).hexdigest()
    if not hmac.compare_digest(expected, received):
        raise InvalidSignatureError("Secret did not match")
