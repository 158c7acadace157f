"""Core InstructionSource protocol used by the instruction subsystem.

This module defines :class:`InstructionSource`, a small, runtime-checkable
protocol that every tier of the resolver follows. Concrete sources live in
:mod:`connectcloud_mcp.info_provider.instructions.local` and
:mod:`connectcloud_mcp.info_provider.instructions.remote`.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .models import DriverInstructions


@runtime_checkable
class InstructionSource(Protocol):
    """Protocol for driver instruction sources.

    Key design points:

    - **Canonical keys**: sources are always addressed by a canonical driver
      id (see :func:`normalize_driver_name`), never by raw client input.
    - **Absence is not an error**: ``fetch`` returns ``None`` when the source
      simply has nothing for the id (missing file, HTTP 404).
    - **Failures are typed**: anything else (transport errors, malformed JSON,
      unexpected statuses) is raised as :class:`InstructionSourceError` so the
      resolver can log it and move to the next tier.
    """

    name: str

    def fetch(self, canonical_id: str) -> Optional[DriverInstructions]:
        """Return the document for ``canonical_id`` or ``None`` if the source has none."""

        ...
