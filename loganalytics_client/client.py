# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Log Analytics Client - signed submission of log records to the Data Collector API.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import (
    ArgumentError,
    ClientClosedError,
    LogAnalyticsError,
    RejectedResponseError,
    SendFailure,
    TransportError,
)
from .signing import (
    CONTENT_TYPE,
    RESOURCE,
    X_MS_DATE_HEADER,
    format_x_ms_date,
    sign_request,
)
from .transport import (
    AiohttpTransport,
    HttpRequest,
    Transport,
    is_transport,
    release_transport,
)

logger = logging.getLogger(__name__)

DEFAULT_URL_SUFFIX = "ods.opinsights.azure.com"
DEFAULT_API_VERSION = "2016-04-01"
DEFAULT_TIMEOUT_MS = 5000
URL_FORMAT = "https://{workspace_id}.{url_suffix}" + RESOURCE + "?api-version={api_version}"

LOG_TYPE_HEADER = "Log-Type"
TIME_GENERATED_FIELD_HEADER = "time-generated-field"

ENV_WORKSPACE_ID = "LOG_ANALYTICS_WORKSPACE_ID"
ENV_WORKSPACE_KEY = "LOG_ANALYTICS_WORKSPACE_KEY"
ENV_URL_SUFFIX = "LOG_ANALYTICS_URL_SUFFIX"
ENV_API_VERSION = "LOG_ANALYTICS_API_VERSION"
ENV_TIMEOUT_MS = "LOG_ANALYTICS_TIMEOUT_MS"


# str.isspace() accepts these, java.lang.Character.isWhitespace() does not
_NON_BREAKING_SPACES = frozenset("\u0085\u00a0\u2007\u202f")


def _is_whitespace(ch: str) -> bool:
    return ch.isspace() and ch not in _NON_BREAKING_SPACES


def is_null_or_whitespace(value: Any) -> bool:
    """
    True for None, non-strings, "", and whitespace-only strings.

    Non-breaking spaces (U+00A0, U+2007, U+202F) and NEL (U+0085) are not
    whitespace here, matching the service's reference client.
    """
    if not isinstance(value, str) or not value:
        return True
    return all(_is_whitespace(ch) for ch in value)


def _require(name: str, value: Any) -> None:
    if is_null_or_whitespace(value):
        raise ArgumentError(f"{name} cannot be null, empty, or only whitespace")


def build_url(workspace_id: str, url_suffix: str, api_version: str) -> str:
    """https://{workspace_id}.{url_suffix}/api/logs?api-version={api_version}"""
    return URL_FORMAT.format(
        workspace_id=workspace_id,
        url_suffix=url_suffix,
        api_version=api_version,
    )


@dataclass
class ClientConfig:
    """Log Analytics client configuration."""
    workspace_id: str
    workspace_key: str = field(repr=False)
    url_suffix: str = DEFAULT_URL_SUFFIX
    api_version: str = DEFAULT_API_VERSION
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Missing workspace ID or key are left empty so that LogAnalyticsClient
        reports them with the usual ArgumentError.

        Raises:
            ArgumentError: If LOG_ANALYTICS_TIMEOUT_MS is not an integer
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get(ENV_TIMEOUT_MS, "").strip()
        try:
            timeout_ms = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_MS
        except ValueError as e:
            raise ArgumentError(
                f"{ENV_TIMEOUT_MS} must be an integer, got {raw_timeout!r}"
            ) from e

        return cls(
            workspace_id=env.get(ENV_WORKSPACE_ID, "").strip(),
            workspace_key=env.get(ENV_WORKSPACE_KEY, "").strip(),
            url_suffix=env.get(ENV_URL_SUFFIX, "").strip() or DEFAULT_URL_SUFFIX,
            api_version=env.get(ENV_API_VERSION, "").strip() or DEFAULT_API_VERSION,
            timeout_ms=timeout_ms,
        )


class LogAnalyticsClient:
    """
    Async client for the Log Analytics HTTP Data Collector API.

    Every call builds a fresh x-ms-date and Shared Key signature, then issues
    exactly one POST. Nothing is batched, queued, or retried; callers that
    need retries wrap send().

    Features:
    - Byte-exact Shared Key (HMAC-SHA256) signing per request
    - Pluggable transport (default: aiohttp with cookies and decompression off)
    - Two error surfaces: post() raises typed errors, send() raises SendFailure

    Usage:
        async with LogAnalyticsClient(workspace_id, workspace_key) as client:
            await client.send('[{"message": "hello"}]', "MyAppLogs")

            # Let the receiver use a field from the body as TimeGenerated
            await client.send(body, "MyAppLogs", time_generated_field="ts")

            # Typed errors instead of SendFailure
            try:
                await client.post(body, "MyAppLogs")
            except RejectedResponseError as e:
                print(e.status_code, e.reason)
    """

    def __init__(
        self,
        workspace_id: str,
        workspace_key: str,
        transport: Transport | None = None,
        url_suffix: str = DEFAULT_URL_SUFFIX,
        api_version: str = DEFAULT_API_VERSION,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        close_transport: bool | None = None,
    ):
        _require("workspace_id", workspace_id)
        _require("workspace_key", workspace_key)
        _require("url_suffix", url_suffix)
        _require("api_version", api_version)

        if transport is None:
            transport = AiohttpTransport(timeout_ms=timeout_ms)
            owns_transport = True
        elif not is_transport(transport):
            raise ArgumentError("transport cannot be null and must provide execute()")
        else:
            owns_transport = bool(close_transport)

        self._workspace_id = workspace_id
        self._workspace_key = workspace_key
        self._url_suffix = url_suffix
        self._api_version = api_version
        self._url = build_url(workspace_id, url_suffix, api_version)
        self._transport = transport
        self._owns_transport = owns_transport
        self._closed = False

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Transport | None = None,
        close_transport: bool | None = None,
    ) -> "LogAnalyticsClient":
        """Build a client from a ClientConfig."""
        return cls(
            config.workspace_id,
            config.workspace_key,
            transport=transport,
            url_suffix=config.url_suffix,
            api_version=config.api_version,
            timeout_ms=config.timeout_ms,
            close_transport=close_transport,
        )

    @classmethod
    def from_env(cls, transport: Transport | None = None) -> "LogAnalyticsClient":
        """Build a client from LOG_ANALYTICS_* environment variables."""
        return cls.from_config(ClientConfig.from_env(), transport=transport)

    @property
    def workspace_id(self) -> str:
        return self._workspace_id

    @property
    def url_suffix(self) -> str:
        return self._url_suffix

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def url(self) -> str:
        """Fixed request URL, computed once at construction."""
        return self._url

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(workspace_id={self._workspace_id!r}, "
            f"url={self._url!r}, closed={self._closed})"
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    async def close(self) -> None:
        """
        Close the client.

        The transport is released only if this client owns it (default
        transport, or close_transport=True). Calling close() twice is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            await release_transport(self._transport)

    def build_request(
        self,
        body: str,
        log_type: str,
        time_generated_field: str | None = None,
        x_ms_date: str | None = None,
    ) -> HttpRequest:
        """
        Validate inputs and assemble the signed request without sending it.

        Args:
            body: Serialized log record(s), sent as UTF-8
            log_type: Custom log (table) name on the receiver side
            time_generated_field: Body field to use as TimeGenerated (optional)
            x_ms_date: Override the request date (default: now)

        Raises:
            ArgumentError: If body or log_type is empty/whitespace, the body is
                not encodable as UTF-8, or the key is not valid base64
        """
        _require("body", body)
        _require("log_type", log_type)

        if x_ms_date is None:
            x_ms_date = format_x_ms_date()

        try:
            payload = body.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ArgumentError(f"body cannot be encoded as UTF-8: {e}") from e
        authorization = sign_request(
            self._workspace_id,
            self._workspace_key,
            payload,
            x_ms_date,
        )

        headers = {
            "Content-Type": CONTENT_TYPE,
            LOG_TYPE_HEADER: log_type,
            X_MS_DATE_HEADER: x_ms_date,
            "Authorization": authorization,
        }
        if time_generated_field is not None:
            headers[TIME_GENERATED_FIELD_HEADER] = time_generated_field

        return HttpRequest(method="POST", url=self._url, headers=headers, body=payload)

    async def post(
        self,
        body: str,
        log_type: str,
        time_generated_field: str | None = None,
    ) -> None:
        """
        Send one signed request, raising typed errors.

        Raises:
            ArgumentError: Invalid body/log_type (before any I/O)
            ClientClosedError: Client already closed
            TransportError: The HTTP exchange failed
            RejectedResponseError: Status code other than 200
        """
        if self._closed:
            raise ClientClosedError("LogAnalyticsClient is closed")

        request = self.build_request(body, log_type, time_generated_field)
        logger.debug(
            f"POST {self._url} log_type={log_type} content_length={len(request.body)}"
        )

        try:
            response = await self._transport.execute(request)
        except LogAnalyticsError:
            raise
        except Exception as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            logger.warning(
                f"Log Analytics rejected {log_type} events: "
                f"{response.status_code} {response.reason}"
            )
            raise RejectedResponseError(response.status_code, response.reason, response.text)

    async def send(
        self,
        body: str,
        log_type: str,
        time_generated_field: str | None = None,
    ) -> None:
        """
        Send one signed request to Log Analytics.

        Args:
            body: Serialized log record(s), typically a JSON array
            log_type: Custom log (table) name
            time_generated_field: Body field to use as TimeGenerated (optional)

        Raises:
            SendFailure: On any failure; the original error is the cause
        """
        try:
            await self.post(body, log_type, time_generated_field)
        except Exception as e:
            raise SendFailure(e) from e

    async def send_json(
        self,
        records: dict | list,
        log_type: str,
        time_generated_field: str | None = None,
    ) -> None:
        """
        Serialize records with json.dumps and send them.

        Non-JSON values (datetime, UUID, Decimal) are converted with str().

        Raises:
            SendFailure: On serialization or send failure
        """
        try:
            body = json.dumps(records, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            raise SendFailure(e) from e
        await self.send(body, log_type, time_generated_field)
