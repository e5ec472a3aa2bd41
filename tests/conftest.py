"""
Shared fixtures and in-memory stand-ins for the database-backed stores.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List

import pytest

from contact_distributor.ingestion.normalize import CanonicalRecord
from contact_distributor.ingestion.uploads import LocalTempFileStore


@dataclass
class FakeAgent:
    id: int
    name: str


class FakeRoster:
    """Agent roster returning a fixed list, or raising when configured to."""

    def __init__(self, agents=None, error: Exception = None):
        self.agents = list(agents or [])
        self.error = error
        self.calls = 0

    async def list_agents(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.agents)


class InMemoryDistributionStore:
    """
    Distribution store without transactions: a failed insert leaves the
    store cleared.
    """

    def __init__(self, rows=None, fail_on_delete=False, fail_on_insert=False, fail_on_commit=False):
        self.rows = list(rows or [])
        self.fail_on_delete = fail_on_delete
        self.fail_on_insert = fail_on_insert
        self.fail_on_commit = fail_on_commit
        self.calls: List[str] = []

    @asynccontextmanager
    async def unit_of_work(self):
        yield self
        if self.fail_on_commit:
            raise RuntimeError("commit failed")

    async def delete_all(self):
        self.calls.append("delete_all")
        if self.fail_on_delete:
            raise RuntimeError("delete failed")
        self.rows = []

    async def insert_many(self, distributions):
        self.calls.append("insert_many")
        if self.fail_on_insert:
            raise RuntimeError("insert failed")
        self.rows.extend(distributions)
        return len(distributions)


class RecordingTempFileStore(LocalTempFileStore):
    def __init__(self):
        self.removed: List[str] = []

    def remove(self, path):
        self.removed.append(path)
        super().remove(path)


@pytest.fixture
def make_agents():
    def _make(count: int):
        return [FakeAgent(id=i + 1, name=f"Agent {i + 1}") for i in range(count)]
    return _make


@pytest.fixture
def make_records():
    def _make(count: int):
        return [
            CanonicalRecord(first_name=f"Contact{i}", phone=f"555000{i:04d}", notes=f"note {i}")
            for i in range(count)
        ]
    return _make


@pytest.fixture
def write_file(tmp_path):
    """Write text (or bytes) to a file under tmp_path and return its path as str."""
    def _write(name: str, content) -> str:
        path = Path(tmp_path) / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def memory_store():
    return InMemoryDistributionStore()
