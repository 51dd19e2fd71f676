"""Exceptions raised by the opportunity discovery pipeline."""

from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised when mandatory configuration is missing."""


class UpstreamError(RuntimeError):
    """Raised when the search provider call fails or returns a non-2xx response."""

    def __init__(self, status_code: Optional[int], body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Brave Search request failed: {body}"
        else:
            message = f"Brave Search API error: {status_code} - {body}"
        super().__init__(message)
