# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Shared Key request signing for the Log Analytics Data Collector API.

Provides:
- RFC 1123 x-ms-date formatting (locale independent)
- Canonical string-to-sign construction
- HMAC-SHA256 signing and verification (via cryptography)
- Authorization header assembly

Wire contract:
    The receiver rebuilds the string-to-sign from the request it got and
    compares HMACs. Every byte matters: the date text, the UTF-8 byte length
    of the body, the field order, and the absence of a trailing newline.

    POST\\n<content-length>\\napplication/json\\nx-ms-date:<date>\\n/api/logs

Example:
    >>> date = "Fri, 20 Jul 2018 16:28:59 GMT"
    >>> build_string_to_sign(2, date)
    'POST\\n2\\napplication/json\\nx-ms-date:Fri, 20 Jul 2018 16:28:59 GMT\\n/api/logs'
"""

import base64
import binascii
from datetime import datetime, timezone
from email.utils import format_datetime

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from .errors import ArgumentError

HTTP_METHOD = "POST"
CONTENT_TYPE = "application/json"
RESOURCE = "/api/logs"
X_MS_DATE_HEADER = "x-ms-date"
AUTHORIZATION_SCHEME = "SharedKey"


# =============================================================================
# Dates
# =============================================================================

def format_x_ms_date(when: datetime | None = None) -> str:
    """
    Format a timestamp the way the x-ms-date header expects it.

    time.strftime("%a %b") follows the process locale; email.utils does not,
    so weekday and month names are always English.

    Args:
        when: Timestamp to format (default: now). Naive values are UTC.

    Returns:
        e.g. "Fri, 20 Jul 2018 16:28:59 GMT"
    """
    if when is None:
        when = datetime.now(timezone.utc)
    elif when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    else:
        when = when.astimezone(timezone.utc)
    return format_datetime(when.replace(microsecond=0), usegmt=True)


# =============================================================================
# String-to-sign
# =============================================================================

def content_length(body: str | bytes) -> int:
    """UTF-8 byte length of the request body (not its character count)."""
    if isinstance(body, bytes):
        return len(body)
    return len(body.encode("utf-8"))


def build_string_to_sign(
    content_length: int,
    x_ms_date: str,
    method: str = HTTP_METHOD,
    content_type: str = CONTENT_TYPE,
    resource: str = RESOURCE,
) -> str:
    """
    Build the canonical string-to-sign.

    Fields are joined by single newlines with no trailing newline. A zero
    length is rendered as "0", never as an empty segment.
    """
    x_headers = f"{X_MS_DATE_HEADER}:{x_ms_date}"
    return f"{method}\n{int(content_length)}\n{content_type}\n{x_headers}\n{resource}"


# =============================================================================
# HMAC
# =============================================================================

def decode_workspace_key(workspace_key: str) -> bytes:
    """
    Decode the base64 shared key into raw HMAC key bytes.

    Whitespace and line breaks are ignored and missing "=" padding is
    restored, so keys copied from a portal or a wrapped config file work.

    Raises:
        ArgumentError: If the key contains characters outside the base64 alphabet
    """
    compact = "".join(workspace_key.split())
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ArgumentError(f"workspace_key is not valid base64: {e}") from e


def _hmac_sha256(key: bytes) -> hmac.HMAC:
    return hmac.HMAC(key, hashes.SHA256())


def compute_signature(workspace_key: str, string_to_sign: str) -> str:
    """
    Sign the canonical string with the workspace key.

    Args:
        workspace_key: Base64-encoded shared key
        string_to_sign: Output of build_string_to_sign()

    Returns:
        Base64-encoded HMAC-SHA256 digest
    """
    mac = _hmac_sha256(decode_workspace_key(workspace_key))
    mac.update(string_to_sign.encode("utf-8"))
    return base64.b64encode(mac.finalize()).decode("ascii")


def verify_signature(workspace_key: str, string_to_sign: str, signature: str) -> bool:
    """
    Check a signature the way the receiver does (constant-time compare).

    Returns:
        True if signature matches, False otherwise (including malformed base64)
    """
    try:
        expected = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError):
        return False

    mac = _hmac_sha256(decode_workspace_key(workspace_key))
    mac.update(string_to_sign.encode("utf-8"))
    try:
        mac.verify(expected)
        return True
    except InvalidSignature:
        return False


# =============================================================================
# Authorization header
# =============================================================================

def build_authorization(workspace_id: str, signature: str) -> str:
    """Authorization header value: "SharedKey {workspace_id}:{signature}"."""
    return f"{AUTHORIZATION_SCHEME} {workspace_id}:{signature}"


def parse_authorization(header: str) -> tuple[str, str]:
    """
    Split an Authorization header into (workspace_id, signature).

    Raises:
        ValueError: If the header is not a SharedKey header
    """
    scheme, _, credentials = header.partition(" ")
    workspace_id, sep, signature = credentials.rpartition(":")
    if scheme != AUTHORIZATION_SCHEME or not sep or not workspace_id or not signature:
        raise ValueError(f"Not a {AUTHORIZATION_SCHEME} authorization header: {header!r}")
    return workspace_id, signature


def sign_request(
    workspace_id: str,
    workspace_key: str,
    body: str | bytes,
    x_ms_date: str,
) -> str:
    """
    Compute the Authorization header for one POST to /api/logs.

    Args:
        workspace_id: Workspace (customer) ID
        workspace_key: Base64-encoded shared key
        body: Request body exactly as it will be sent
        x_ms_date: Value of the x-ms-date header on the same request

    Returns:
        "SharedKey {workspace_id}:{signature}"
    """
    string_to_sign = build_string_to_sign(content_length(body), x_ms_date)
    return build_authorization(workspace_id, compute_signature(workspace_key, string_to_sign))
