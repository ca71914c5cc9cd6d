"""
Platform and workflow errors.
"""

from __future__ import annotations


class PlatformError(Exception):
    """Base class for failures talking to the Digital Human platform."""


class PlatformUnavailable(PlatformError):
    """The platform API is offline or unreachable."""


class PlatformHTTPError(PlatformError):
    """The platform answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code} - {body}")


class PlatformResponseError(PlatformError):
    """The platform answered 2xx but the payload is unusable."""


class WorkflowError(Exception):
    """Missing user input or a step attempted out of order."""
