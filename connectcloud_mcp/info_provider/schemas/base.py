"""Pydantic base schema utilities for provider models.

Provides a common :class:`BaseSchema` that enforces aliasing for every DTO and
domain model under ``connectcloud_mcp.info_provider``. Connect Cloud and the
instruction documents both speak camelCase JSON, while Python code uses
snake_case attributes.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """Shared base for all Pydantic models in the provider layer.

    - Enables ``populate_by_name`` for using either snake_case or camelCase
    - Uses a snake->camel alias generator for JSON interop
    - Ignores unknown fields so newer server payloads still parse
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        alias_generator=_to_camel,  # snake_case -> camelCase aliases
    )
