"""Error types for driver-instruction resolution.

Two kinds of failure exist:

- ``InstructionSourceError`` is raised by a single source (remote API, local
  store) when it fails in a way the resolver recovers from by moving to the
  next tier. It never reaches callers of :meth:`InstructionResolver.resolve`.
- ``InstructionResolutionError`` is terminal: the generic tier itself is
  missing or unreadable, so no document can be produced.
"""

from __future__ import annotations

from typing import Optional


class InstructionError(Exception):
    """Base error for all driver-instruction exceptions."""


class InstructionSourceError(InstructionError):
    """Raised when one instruction source fails for a canonical driver id."""

    def __init__(self, source: str, canonical_id: str, message: str) -> None:
        super().__init__(f"{source} instructions unavailable for '{canonical_id}': {message}")
        self.source = source
        self.canonical_id = canonical_id


class InstructionResolutionError(InstructionError):
    """Raised when no instruction document can be produced for a driver name.

    Args:
        driver_name: The raw driver name the caller asked for.
        cause: The underlying failure, also chained as ``__cause__`` by callers.
    """

    def __init__(self, driver_name: str, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to resolve instructions for driver '{driver_name}'{detail}")
        self.driver_name = driver_name
        self.cause = cause
