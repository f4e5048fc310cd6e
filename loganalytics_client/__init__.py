# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Log Analytics Python SDK - Shared Key signed log ingestion

Submits log records to the Log Analytics HTTP Data Collector API. Each
request carries a fresh x-ms-date and an HMAC-SHA256 signature computed
from the workspace's base64 shared key.

Features:
- Byte-exact canonical string-to-sign and SharedKey Authorization header
- One POST per send(), no hidden batching, queueing or retries
- Pluggable async transport (aiohttp by default)
- Typed errors (post) or a single SendFailure (send)

Usage:
    from loganalytics_client import LogAnalyticsClient

    async with LogAnalyticsClient(workspace_id, workspace_key) as client:
        await client.send('[{"event": "login", "user": "alice"}]', "AppAudit")

Usage (environment configuration):
    # LOG_ANALYTICS_WORKSPACE_ID / LOG_ANALYTICS_WORKSPACE_KEY
    async with LogAnalyticsClient.from_env() as client:
        await client.send_json([{"event": "login"}], "AppAudit", time_generated_field="ts")

Usage (signing only):
    from loganalytics_client import format_x_ms_date, sign_request

    date = format_x_ms_date()
    authorization = sign_request(workspace_id, workspace_key, body, date)
"""

# Client
from .client import (
    DEFAULT_API_VERSION,
    DEFAULT_URL_SUFFIX,
    ClientConfig,
    LogAnalyticsClient,
    build_url,
)

# Errors
from .errors import (
    ArgumentError,
    ClientClosedError,
    LogAnalyticsError,
    RejectedResponseError,
    SendFailure,
    TransportError,
)

# Signing
from .signing import (
    build_authorization,
    build_string_to_sign,
    compute_signature,
    content_length,
    decode_workspace_key,
    format_x_ms_date,
    parse_authorization,
    sign_request,
    verify_signature,
)

# Transport
from .transport import AiohttpTransport, HttpRequest, HttpResponse, Transport

__version__ = "0.1.0"
__all__ = [
    # Client
    "LogAnalyticsClient",
    "ClientConfig",
    "build_url",
    "DEFAULT_URL_SUFFIX",
    "DEFAULT_API_VERSION",
    # Errors
    "LogAnalyticsError",
    "ArgumentError",
    "TransportError",
    "RejectedResponseError",
    "ClientClosedError",
    "SendFailure",
    # Signing
    "format_x_ms_date",
    "content_length",
    "build_string_to_sign",
    "decode_workspace_key",
    "compute_signature",
    "verify_signature",
    "build_authorization",
    "parse_authorization",
    "sign_request",
    # Transport
    "Transport",
    "HttpRequest",
    "HttpResponse",
    "AiohttpTransport",
]
