"""Error types specific to the Connect Cloud API layer.

Purpose:
- Provide a typed exception raised by `ConnectCloudApiClient` for every failed call.
- Expose HTTP-oriented context (status code, error body) for diagnosis.

Usage:
- Catch `ConnectCloudApiError` and inspect `status_code` or `details`.
"""

from __future__ import annotations

from typing import Any, Optional


class ConnectCloudApiError(Exception):
    """Base error for Connect Cloud API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (JSON body or text).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details
