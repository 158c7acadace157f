"""Tiered driver-instruction resolver.

Resolution order for a raw driver name:

1. Normalize to a canonical id (:func:`normalize_driver_name`).
2. In-memory cache; a hit returns immediately with source ``cache``.
3. Remote instruction API, when configured.
4. Packaged document for the canonical id.
5. Packaged generic document.

Tiers are tried strictly in order and the first document wins; it is cached
under the canonical id before returning. Failures in the remote and local
tiers are logged and skipped. The generic tier is required: if it cannot
produce a document the resolution fails with
:class:`InstructionResolutionError`.

Generic documents are cached with a shorter TTL than specific ones so that
real instructions are picked up soon after they become available.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .aliases import GENERIC_DRIVER_ID, normalize_driver_name
from .base import InstructionSource
from .cache import DEFAULT_TTL_SECONDS, InstructionsCache
from .errors import InstructionResolutionError, InstructionSourceError
from .local import LocalInstructionStore
from .models import DriverInstructions, InstructionSourceTag, ResolvedInstructions

DEFAULT_GENERIC_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class InstructionTier:
    """One candidate source in the resolution chain.

    Attributes:
        tag: Source tag reported when this tier satisfies a request.
        fetch: Returns a document for a canonical id, ``None`` when it has
            nothing, or raises :class:`InstructionSourceError`.
        ttl: Cache TTL for documents from this tier; ``None`` uses the cache default.
        required: When true a failure of this tier ends the resolution with an error.
    """

    tag: InstructionSourceTag
    fetch: Callable[[str], Optional[DriverInstructions]]
    ttl: Optional[float] = None
    required: bool = False


class InstructionResolver:
    """Resolve driver names to instruction documents through cache and fallback tiers.

    Example:
        resolver = InstructionResolver(remote=RemoteInstructionSource(url, auth_token=token))
        result = resolver.resolve("Azure DevOps Services")
        result.source          # InstructionSourceTag.REMOTE / LOCAL / GENERIC / CACHE
        result.instructions    # DriverInstructions
    """

    def __init__(
        self,
        *,
        cache: Optional[InstructionsCache] = None,
        local_store: Optional[LocalInstructionStore] = None,
        remote: Optional[InstructionSource] = None,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        generic_ttl: float = DEFAULT_GENERIC_TTL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            cache: Cache shared across resolutions; created with ``default_ttl`` when omitted.
            local_store: Packaged document store; defaults to the bundled documents.
            remote: Optional remote source. ``None`` skips the remote tier entirely.
            default_ttl: TTL in seconds for remote and local documents.
            generic_ttl: TTL in seconds for generic documents.
            logger: Optional logger; defaults to this module's logger.
        """
        self._cache = cache or InstructionsCache(default_ttl=default_ttl)
        self._local = local_store or LocalInstructionStore()
        self._remote = remote
        self._default_ttl = default_ttl
        self._generic_ttl = generic_ttl
        self._logger = logger or logging.getLogger(__name__)

    @property
    def cache(self) -> InstructionsCache:
        return self._cache

    @property
    def local_store(self) -> LocalInstructionStore:
        return self._local

    @property
    def remote(self) -> Optional[InstructionSource]:
        return self._remote

    @property
    def remote_enabled(self) -> bool:
        return self._remote is not None

    def tiers(self) -> List[InstructionTier]:
        """Return the fallback chain in resolution order (cache excluded)."""
        chain: List[InstructionTier] = []
        if self._remote is not None:
            chain.append(InstructionTier(InstructionSourceTag.REMOTE, self._remote.fetch, ttl=self._default_ttl))
        chain.append(InstructionTier(InstructionSourceTag.LOCAL, self._fetch_local, ttl=self._default_ttl))
        chain.append(
            InstructionTier(InstructionSourceTag.GENERIC, self._fetch_generic, ttl=self._generic_ttl, required=True)
        )
        return chain

    def _fetch_local(self, canonical_id: str) -> Optional[DriverInstructions]:
        # generic.json is served by the generic tier so it keeps its own tag and TTL
        if canonical_id == GENERIC_DRIVER_ID:
            return None
        return self._local.fetch(canonical_id)

    def _fetch_generic(self, canonical_id: str) -> DriverInstructions:
        document = self._local.fetch_generic()
        if document is None:
            raise InstructionSourceError(
                InstructionSourceTag.GENERIC.value,
                canonical_id,
                f"{GENERIC_DRIVER_ID}.json not found in {self._local.data_dir}",
            )
        return document.model_copy(update={"driver_name": canonical_id})

    def resolve(
        self,
        driver_name: str,
        connection_id: Optional[str] = None,
        *,
        correlation_id: Optional[str] = None,
    ) -> ResolvedInstructions:
        """Resolve ``driver_name`` to an instruction document.

        Args:
            driver_name: Raw driver name from the client.
            connection_id: Optional connection the caller is working with; used for logging only.
            correlation_id: Token identifying the originating request in log lines.

        Returns:
            The document together with its canonical id and the tier that produced it.

        Raises:
            InstructionResolutionError: If the generic tier cannot produce a document.
        """
        rid = correlation_id or "-"
        canonical_id = normalize_driver_name(driver_name) or GENERIC_DRIVER_ID
        self._logger.debug(
            "[%s] resolving instructions: driver=%r canonical=%s connection=%s",
            rid,
            driver_name,
            canonical_id,
            connection_id or "-",
        )

        cached = self._cache.get(canonical_id)
        if cached is not None:
            self._logger.debug("[%s] instructions for '%s' served from cache", rid, canonical_id)
            return ResolvedInstructions(
                canonical_id=canonical_id, source=InstructionSourceTag.CACHE, instructions=cached
            )

        for tier in self.tiers():
            try:
                document = tier.fetch(canonical_id)
            except InstructionSourceError as exc:
                if tier.required:
                    self._logger.error("[%s] %s tier failed for '%s': %s", rid, tier.tag.value, canonical_id, exc)
                    raise InstructionResolutionError(driver_name, exc) from exc
                self._logger.debug("[%s] %s tier skipped for '%s': %s", rid, tier.tag.value, canonical_id, exc)
                continue
            if document is None:
                continue

            self._cache.set(canonical_id, document, ttl=tier.ttl)
            self._logger.info("[%s] instructions for '%s' resolved from %s", rid, canonical_id, tier.tag.value)
            return ResolvedInstructions(canonical_id=canonical_id, source=tier.tag, instructions=document)

        # The generic tier is always last and either returns or raises.
        raise InstructionResolutionError(driver_name)
