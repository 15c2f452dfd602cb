"""
SQLite record store for saved translations.
"""

import asyncio
import logging
import os
import sqlite3
import threading
from typing import List, Optional

from novtl.config import DATABASE_PATH
from .exceptions import PersistenceError
from .gateway import PersistenceGateway, Record, validate_record

logger = logging.getLogger(__name__)


class SQLiteGateway(PersistenceGateway):
    """
    Persists saved translations in a SQLite database.

    Blocking sqlite calls run in a worker thread so the event loop keeps
    running. All writes go through one lock, which also serializes writes to
    any given record id.
    """

    def __init__(self, db_path: str = DATABASE_PATH):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file (":memory:" for a throwaway store)
        """
        self.db_path = db_path
        self._lock = threading.RLock()
        self._connection: Optional[sqlite3.Connection] = None

        # Ensure directory exists
        directory = os.path.dirname(db_path)
        if directory and db_path != ":memory:":
            os.makedirs(directory, exist_ok=True)

        # Initialize schema
        self._initialize_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get the shared database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=30.0
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def _initialize_schema(self):
        """Create database tables if they don't exist."""
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS saved_translations (
                    id TEXT PRIMARY KEY,
                    project_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    text TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_translations_project
                ON saved_translations(project_id)
            """)

            conn.commit()

    # Synchronous operations (run in a worker thread)

    def _put_sync(self, record: Record) -> None:
        with self._lock:
            conn = self._get_connection()
            try:
                conn.execute("""
                    INSERT OR REPLACE INTO saved_translations
                    (id, project_id, name, text, timestamp)
                    VALUES (?, ?, ?, ?, ?)
                """, (
                    record["id"],
                    record["projectId"],
                    record.get("name", ""),
                    record.get("text", ""),
                    record.get("timestamp", ""),
                ))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise PersistenceError(f"Could not save record {record['id']}: {e}", operation="put")

    def _delete_sync(self, record_id: str) -> None:
        with self._lock:
            conn = self._get_connection()
            try:
                conn.execute("DELETE FROM saved_translations WHERE id = ?", (record_id,))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise PersistenceError(f"Could not delete record {record_id}: {e}", operation="delete")

    def _list_sync(self, project_id: str) -> List[Record]:
        with self._lock:
            try:
                cursor = self._get_connection().execute(
                    "SELECT * FROM saved_translations WHERE project_id = ?",
                    (project_id,)
                )
                return [
                    {
                        "id": row["id"],
                        "projectId": row["project_id"],
                        "name": row["name"],
                        "text": row["text"],
                        "timestamp": row["timestamp"],
                    }
                    for row in cursor.fetchall()
                ]
            except sqlite3.Error as e:
                raise PersistenceError(f"Could not list records of {project_id}: {e}", operation="list")

    def _clear_sync(self, project_id: str) -> None:
        with self._lock:
            conn = self._get_connection()
            try:
                conn.execute("DELETE FROM saved_translations WHERE project_id = ?", (project_id,))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise PersistenceError(f"Could not clear records of {project_id}: {e}", operation="clear")

    # Gateway interface

    async def put(self, record: Record) -> None:
        validate_record(record)
        await asyncio.to_thread(self._put_sync, record)

    async def delete(self, record_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, record_id)

    async def list_by_project(self, project_id: str) -> List[Record]:
        return await asyncio.to_thread(self._list_sync, project_id)

    async def clear_project(self, project_id: str) -> None:
        await asyncio.to_thread(self._clear_sync, project_id)
        logger.info(f"Cleared saved translations of project {project_id}")

    async def close(self):
        """Close database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
