"""
Record store interface for saved translations.

Records are plain dicts shaped `{id, projectId, name, text, timestamp}`.
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .exceptions import PersistenceError

Record = Dict[str, Any]

REQUIRED_FIELDS = ("id", "projectId")


def validate_record(record: Record) -> None:
    """
    Raises:
        PersistenceError: If the record lacks its id or project key
    """
    missing = [name for name in REQUIRED_FIELDS if not record.get(name)]
    if missing:
        raise PersistenceError(f"Record is missing {', '.join(missing)}", operation="put")


class PersistenceGateway(ABC):
    """Key/list/delete access to persisted translation records"""

    @abstractmethod
    async def put(self, record: Record) -> None:
        """Insert or replace the record with the same id."""
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Remove a record; no-op when it does not exist."""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str) -> List[Record]:
        """All records of a project, in no particular order."""
        pass

    @abstractmethod
    async def clear_project(self, project_id: str) -> None:
        """Remove every record of a project."""
        pass

    async def close(self) -> None:
        pass


class InMemoryGateway(PersistenceGateway):
    """
    Dict-backed gateway.

    Writes to the same record id are serialized with a per-id lock, so a
    rename followed by an edit cannot interleave.
    """

    def __init__(self):
        self._records: Dict[str, Record] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, record_id: str) -> asyncio.Lock:
        if record_id not in self._locks:
            self._locks[record_id] = asyncio.Lock()
        return self._locks[record_id]

    async def put(self, record: Record) -> None:
        validate_record(record)
        async with self._lock_for(record["id"]):
            self._records[record["id"]] = copy.deepcopy(record)

    async def delete(self, record_id: str) -> None:
        lock = self._lock_for(record_id)
        async with lock:
            self._records.pop(record_id, None)
        if not lock.locked():
            self._locks.pop(record_id, None)

    async def list_by_project(self, project_id: str) -> List[Record]:
        return [
            copy.deepcopy(record)
            for record in self._records.values()
            if record.get("projectId") == project_id
        ]

    async def clear_project(self, project_id: str) -> None:
        for record_id in [rid for rid, rec in self._records.items() if rec.get("projectId") == project_id]:
            await self.delete(record_id)
