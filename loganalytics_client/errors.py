# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Error types for the Log Analytics client.

Two call-time surfaces:
- LogAnalyticsClient.post() raises the typed errors below directly
- LogAnalyticsClient.send() wraps every failure in SendFailure

Construction errors (ArgumentError) are never wrapped.
"""


class LogAnalyticsError(Exception):
    """Base class for all client errors."""
    pass


class ArgumentError(LogAnalyticsError, ValueError):
    """Raised when a required string parameter is None, empty, or whitespace-only."""
    pass


class TransportError(LogAnalyticsError):
    """The HTTP exchange itself failed (connection, DNS, TLS, timeout)."""
    pass


class ClientClosedError(LogAnalyticsError):
    """Raised when a request is attempted on a closed client."""
    pass


class RejectedResponseError(LogAnalyticsError):
    """
    The service answered with a status other than 200.

    Attributes:
        status_code: Numeric HTTP status
        reason: HTTP reason phrase
        body: Response text (truncated), useful for diagnosing 403s
    """

    MAX_BODY_CHARS = 512

    def __init__(self, status_code: int, reason: str, body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body[: self.MAX_BODY_CHARS] if body else ""
        super().__init__(
            f"Error sending Log Analytics events: {reason} ({status_code})"
        )


class SendFailure(LogAnalyticsError, OSError):
    """
    Uniform failure raised by LogAnalyticsClient.send().

    The original exception is kept as ``__cause__`` (and ``cause``) so callers
    can still tell an ArgumentError from a RejectedResponseError:

        try:
            await client.send(body, "MyLog")
        except SendFailure as e:
            if isinstance(e.cause, RejectedResponseError):
                print(e.cause.status_code)
    """

    MESSAGE = "Error sending to Log Analytics"

    def __init__(self, cause: BaseException | None = None):
        self._cause = cause
        super().__init__(self.MESSAGE)

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    def __str__(self) -> str:
        if self._cause is None:
            return self.MESSAGE
        return f"{self.MESSAGE}: {self._cause}"
