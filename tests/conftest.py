# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""Shared fixtures: test keys and a recording fake transport."""

import base64

import pytest

from loganalytics_client.transport import HttpRequest, HttpResponse


class RecordingTransport:
    """Fake transport that records requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200, reason: str = "OK", text: str = "",
                 error: Exception | None = None):
        self.status_code = status_code
        self.reason = reason
        self.text = text
        self.error = error
        self.requests: list[HttpRequest] = []
        self.close_calls = 0

    async def execute(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return HttpResponse(status_code=self.status_code, reason=self.reason, text=self.text)

    async def close(self) -> None:
        self.close_calls += 1

    @property
    def last(self) -> HttpRequest:
        return self.requests[-1]


@pytest.fixture
def workspace_key():
    """Base64 shared key for tests."""
    return base64.b64encode(b"0123456789abcdef0123456789abcdef").decode("ascii")


@pytest.fixture
def transport():
    """Transport that accepts everything with 200 OK."""
    return RecordingTransport()
