from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from connectcloud_mcp.info_provider.instructions import DriverInstructions, LocalInstructionStore


def document_payload(driver_name: str, *, version: str = "1.0.0", overview: Optional[str] = None) -> Dict:
    return {
        "driverName": driver_name,
        "version": version,
        "instructions": {
            "overview": overview or f"How to query {driver_name}.",
            "dataModel": {
                "hierarchy": "Catalog > Schema > Table",
                "keyTables": ["Accounts"],
                "relationships": "Accounts.Id = Contacts.AccountId",
            },
            "queryPatterns": {
                "timeFiltering": "WHERE ModifiedDate > '2024-01-01'",
                "commonQueries": ["SELECT * FROM Accounts LIMIT 10"],
                "bestPractices": ["Always LIMIT results"],
            },
            "fieldConventions": {"dateFields": "ISO-8601 strings"},
            "limitations": ["No JOIN pushdown"],
            "troubleshooting": ["Check table names"],
        },
        "lastUpdated": "2024-01-15T00:00:00Z",
    }


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def make_document() -> Callable[..., DriverInstructions]:
    def _make(driver_name: str, **kwargs) -> DriverInstructions:
        return DriverInstructions.model_validate(document_payload(driver_name, **kwargs))

    return _make


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    """Document directory holding ``azure-devops`` and ``generic``."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "azure-devops.json").write_text(json.dumps(document_payload("Azure DevOps")), encoding="utf-8")
    (directory / "generic.json").write_text(json.dumps(document_payload("Generic")), encoding="utf-8")
    return directory


@pytest.fixture()
def local_store(data_dir: Path) -> LocalInstructionStore:
    return LocalInstructionStore(data_dir)


@pytest.fixture()
def make_payload() -> Callable[..., Dict]:
    return document_payload
