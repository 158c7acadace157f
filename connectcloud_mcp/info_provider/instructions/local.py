"""Packaged instruction documents.

The package ships one JSON document per supported driver under
``instructions/data/<canonical-id>.json`` plus ``generic.json``, the document
used when nothing more specific exists.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .aliases import GENERIC_DRIVER_ID
from .errors import InstructionSourceError
from .models import DriverInstructions

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"

_SAFE_ID = re.compile(r"^[a-z0-9][a-z0-9-]*$")


class LocalInstructionStore:
    """Read-only store of instruction documents on the local filesystem.

    Args:
        data_dir: Directory holding ``<canonical-id>.json`` files. Defaults to
            the documents packaged with this module.
    """

    name = "local"

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self._data_dir = Path(data_dir) if data_dir is not None else DEFAULT_DATA_DIR

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, canonical_id: str) -> Optional[Path]:
        # Ids are collapsed to [a-z0-9-] by the normalizer; anything else can't name a packaged file.
        if not _SAFE_ID.match(canonical_id):
            return None
        return self._data_dir / f"{canonical_id}.json"

    def fetch(self, canonical_id: str) -> Optional[DriverInstructions]:
        """Load the document for ``canonical_id``.

        Returns:
            The parsed document, or ``None`` when no file exists for the id.

        Raises:
            InstructionSourceError: If the file exists but cannot be read or
                does not contain a valid instruction document.
        """
        path = self._path_for(canonical_id)
        if path is None or not path.is_file():
            logger.debug("LocalInstructionStore: no document for '%s' in %s", canonical_id, self._data_dir)
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            return DriverInstructions.model_validate(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise InstructionSourceError(self.name, canonical_id, f"{path.name}: {exc}") from exc

    def fetch_generic(self) -> Optional[DriverInstructions]:
        """Load the generic fallback document (same contract as :meth:`fetch`)."""
        return self.fetch(GENERIC_DRIVER_ID)

    def supported_drivers(self) -> List[str]:
        """Return the display names of every driver with a packaged document, generic excluded."""
        names: List[str] = []
        if not self._data_dir.is_dir():
            return names
        for path in sorted(self._data_dir.glob("*.json")):
            if path.stem == GENERIC_DRIVER_ID:
                continue
            try:
                document = self.fetch(path.stem)
            except InstructionSourceError:
                logger.debug("LocalInstructionStore: skipping unreadable document %s", path.name)
                continue
            if document is not None:
                names.append(document.driver_name)
        return names
