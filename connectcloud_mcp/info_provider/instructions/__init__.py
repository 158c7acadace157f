"""Driver instruction facade.

This subpackage resolves client-supplied driver names to instruction
documents that explain how to query a given Connect Cloud driver. It
re-exports the types callers are expected to use:

- ``normalize_driver_name`` – alias normalization to canonical ids.
- ``InstructionsCache`` / ``CacheSweeper`` – per-entry TTL cache and its
  periodic sweeper.
- ``InstructionSource`` – protocol implemented by every source tier.
- ``LocalInstructionStore`` – packaged JSON documents (plus ``generic``).
- ``RemoteInstructionSource`` – best-effort remote instruction API.
- ``InstructionResolver`` – cache → remote → local → generic orchestration.
- ``load_instruction_resolver`` – builds a resolver from settings.

Higher layers (the MCP tool surface) should import from this module rather
than individual implementation files.
"""

from .aliases import DRIVER_ALIASES, GENERIC_DRIVER_ID, normalize_driver_name
from .base import InstructionSource
from .cache import CacheSweeper, InstructionsCache
from .errors import InstructionError, InstructionResolutionError, InstructionSourceError
from .loader import load_instruction_resolver
from .local import LocalInstructionStore
from .models import DriverInstructions, InstructionSourceTag, ResolvedInstructions
from .remote import RemoteInstructionSource
from .resolver import InstructionResolver, InstructionTier

__all__ = [
    "DRIVER_ALIASES",
    "GENERIC_DRIVER_ID",
    "normalize_driver_name",
    "InstructionSource",
    "CacheSweeper",
    "InstructionsCache",
    "InstructionError",
    "InstructionResolutionError",
    "InstructionSourceError",
    "load_instruction_resolver",
    "LocalInstructionStore",
    "DriverInstructions",
    "InstructionSourceTag",
    "ResolvedInstructions",
    "RemoteInstructionSource",
    "InstructionResolver",
    "InstructionTier",
]
