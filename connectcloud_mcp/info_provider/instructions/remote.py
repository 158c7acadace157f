"""Remote driver instruction source.

Overview
--------
Fetches instruction documents from an external instruction service:

- Method/Path: ``GET {base_url}/driver-instructions/{canonical_id}``
  (the id is URL-encoded)
- Auth: ``Authorization: Bearer <token>``
- ``200`` → JSON body shaped as :class:`DriverInstructions`
- ``404`` → the service has no instructions for this driver

The source is best-effort. A 404 is reported as "nothing here" (``None``);
every other failure is raised as :class:`InstructionSourceError` for the
resolver to log and skip.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .errors import InstructionSourceError
from .models import DriverInstructions


class RemoteInstructionSource:
    """Thin HTTP client for the remote driver instruction API.

    Responsibilities
    ----------------
    - Authenticate requests with a static bearer token or a token provider.
    - Map HTTP outcomes onto the :class:`InstructionSource` contract.
    - Validate payloads into :class:`DriverInstructions`.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        *,
        auth_token: Optional[str] = None,
        token_provider: Optional[Callable[[], str]] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Create a remote instruction source.

        Args:
            base_url: Base URL of the instruction service.
            auth_token: Bearer token, with or without the ``"Bearer "`` prefix.
            token_provider: Callable invoked before each request to fetch a fresh token.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.Client`` to use.
        """
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self._token_provider = token_provider
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    def _ensure_token(self) -> None:
        """Refresh the token from ``token_provider`` when one was supplied.

        Provider failures are logged and the request proceeds with the
        previous token.
        """
        if self._token_provider is not None:
            try:
                self.auth_token = self._token_provider()
            except Exception as e:
                self._logger.warning("RemoteInstructionSource token_provider failed: %s", e)

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.auth_token:
            token = self.auth_token
            if not token.lower().startswith("bearer "):
                token = f"Bearer {token}"
            headers["Authorization"] = token
        return headers

    def url_for(self, canonical_id: str) -> str:
        return f"{self.base_url}/driver-instructions/{quote(canonical_id, safe='')}"

    def fetch(self, canonical_id: str) -> Optional[DriverInstructions]:
        """Fetch the instruction document for ``canonical_id``.

        Returns:
            The parsed document, or ``None`` when the service answers 404.

        Raises:
            InstructionSourceError: On transport errors, non-2xx statuses other
                than 404, non-JSON bodies or payloads that fail validation.
        """
        self._ensure_token()
        url = self.url_for(canonical_id)
        try:
            r = self._client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise InstructionSourceError(self.name, canonical_id, f"request failed: {exc}") from exc

        if r.status_code == 404:
            self._logger.debug("RemoteInstructionSource: no instructions for '%s' (404)", canonical_id)
            return None
        try:
            r.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise InstructionSourceError(self.name, canonical_id, f"HTTP {r.status_code}") from exc

        try:
            return DriverInstructions.model_validate(r.json())
        except (ValueError, ValidationError) as exc:
            raise InstructionSourceError(self.name, canonical_id, f"invalid payload: {exc}") from exc

    def close(self) -> None:
        """Close the underlying HTTP client if this source created it."""
        if self._owns_client:
            self._client.close()
