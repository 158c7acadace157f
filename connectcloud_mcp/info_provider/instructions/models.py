"""Driver instruction models.

``DriverInstructions`` mirrors the JSON documents served by the remote
instruction API and packaged under ``instructions/data``. Documents are frozen
once validated; a fresher fetch replaces a document wholesale.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

from pydantic import ConfigDict, Field

from ..schemas.base import BaseSchema


class _FrozenSchema(BaseSchema):
    model_config = ConfigDict(frozen=True)


class DataModel(_FrozenSchema):
    """How the driver's tables are organized."""

    hierarchy: str = Field(..., description="Containment hierarchy of the driver's objects.")
    key_tables: List[str] = Field(default_factory=list, description="Most useful tables, in reading order.")
    relationships: str = Field("", description="How the key tables join together.")


class QueryPatterns(_FrozenSchema):
    """Recommended ways of querying the driver."""

    time_filtering: str = Field("", description="How to filter rows by date/time.")
    common_queries: List[str] = Field(default_factory=list, description="Example SQL statements.")
    best_practices: List[str] = Field(default_factory=list, description="Query guidance.")


class InstructionBody(_FrozenSchema):
    """The instructional content of a driver document."""

    overview: str
    data_model: DataModel
    query_patterns: QueryPatterns
    field_conventions: Dict[str, str] = Field(
        default_factory=dict, description="Convention name to description (e.g. userFields, dateFields)."
    )
    limitations: List[str] = Field(default_factory=list)
    troubleshooting: List[str] = Field(default_factory=list)


class DriverInstructions(_FrozenSchema):
    """Instruction document for one driver (or the generic fallback)."""

    driver_name: str = Field(..., description="Identity of the driver this document describes.")
    version: str
    instructions: InstructionBody
    last_updated: str = Field(..., description="Timestamp string of the last content update.")

    def to_payload(self) -> dict:
        """Serialize to the camelCase wire shape."""
        return self.model_dump(by_alias=True, mode="json")


class InstructionSourceTag(str, Enum):
    """Which tier satisfied a resolution."""

    CACHE = "cache"
    REMOTE = "remote"
    LOCAL = "local"
    GENERIC = "generic"


class ResolvedInstructions(_FrozenSchema):
    """Envelope returned by :class:`InstructionResolver`."""

    canonical_id: str
    source: InstructionSourceTag
    instructions: DriverInstructions
