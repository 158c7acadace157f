"""Resolver loader utilities.

Maps :class:`InstructionsConfig` (environment-driven settings) to a wired
:class:`InstructionResolver`.

The remote tier is only enabled when both the instruction API URL and its
token are configured. A missing remote configuration is a normal state: the
resolver then goes straight from the cache to the packaged documents.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from connectcloud_mcp.server.core.config import InstructionsConfig

from .cache import InstructionsCache
from .local import LocalInstructionStore
from .remote import RemoteInstructionSource
from .resolver import InstructionResolver

_LOGGER = logging.getLogger(__name__)


def load_instruction_resolver(
    config: InstructionsConfig,
    *,
    local_store: Optional[LocalInstructionStore] = None,
    http_client: Optional[httpx.Client] = None,
) -> InstructionResolver:
    """Build the :class:`InstructionResolver` described by ``config``.

    Args:
        config: Instruction settings (remote URL/token and TTLs).
        local_store: Override for the packaged document store.
        http_client: Optional ``httpx.Client`` for the remote source.

    Returns:
        A resolver with its own cache. The caller owns the background sweeper.
    """
    remote: Optional[RemoteInstructionSource] = None
    if config.remote_enabled:
        remote = RemoteInstructionSource(
            config.api_url or "",
            auth_token=config.api_token,
            timeout=config.remote_timeout,
            client=http_client,
        )
        _LOGGER.info("InstructionResolverLoader: remote tier enabled; base_url=%s", remote.base_url)
    elif config.api_url or config.api_token:
        _LOGGER.warning(
            "InstructionResolverLoader: remote tier disabled; both CDATA_INSTRUCTIONS_API_URL and "
            "CDATA_INSTRUCTIONS_API_TOKEN are required"
        )

    return InstructionResolver(
        cache=InstructionsCache(default_ttl=config.cache_ttl),
        local_store=local_store,
        remote=remote,
        default_ttl=config.cache_ttl,
        generic_ttl=config.generic_ttl,
    )
