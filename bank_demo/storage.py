"""
Storage Backend Module

Document storage used by the persistent bank store. Each collection holds JSON
documents keyed by id; monetary values are stored as Decimal strings.
Provides an in-memory backend (testing) and a SQLite backend (persistence).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Union
from datetime import datetime, timezone
from pathlib import Path
from contextlib import contextmanager
import copy
import json
import re
import sqlite3
import threading


_COLLECTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_collection(collection: str) -> str:
    """Collection names are interpolated into SQL, so keep them to identifiers"""
    if not _COLLECTION_NAME.match(collection):
        raise ValueError(f"Invalid collection name: {collection!r}")
    return collection


def _matches(document: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(key in document and document[key] == value for key, value in filters.items())


class StorageInterface(ABC):
    """Abstract interface for document storage backends"""

    @abstractmethod
    def save(self, collection: str, document_id: str, document: Dict[str, Any]) -> None:
        """Insert or replace a document"""

    @abstractmethod
    def load(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Load a document, or None if absent"""

    @abstractmethod
    def load_all(self, collection: str) -> List[Dict[str, Any]]:
        """Load every document in insertion order"""

    @abstractmethod
    def find(self, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find documents whose fields equal all the given filter values"""

    @abstractmethod
    def close(self) -> None:
        """Release backend resources"""

    def begin_transaction(self) -> None:
        """Start a transaction (default no-op)"""

    def commit(self) -> None:
        """Commit current transaction (default no-op)"""

    def rollback(self) -> None:
        """Rollback current transaction (default no-op)"""

    @contextmanager
    def atomic(self):
        """Context manager for atomic operations"""
        self.begin_transaction()
        try:
            yield
            self.commit()
        except BaseException:
            self.rollback()
            raise


class InMemoryStorage(StorageInterface):
    """
    In-memory document storage.

    Documents are deep-copied on the way in and out. Transactions keep a
    snapshot of the data so rollback restores it.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self._snapshot: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._data.setdefault(_check_collection(collection), {})

    def save(self, collection: str, document_id: str, document: Dict[str, Any]) -> None:
        # Round trip through JSON so stored documents match what SQLite returns
        encoded = json.loads(json.dumps(document, default=str))
        with self._lock:
            self._collection(collection)[document_id] = encoded

    def load(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._collection(collection).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def load_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(doc) for doc in self._collection(collection).values()]

    def find(self, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(doc)
                for doc in self._collection(collection).values()
                if _matches(doc, filters)
            ]

    def close(self) -> None:
        """Close storage (no-op for in-memory)"""

    def begin_transaction(self) -> None:
        self._lock.acquire()
        if self._snapshot is not None:
            self._lock.release()
            raise RuntimeError("Nested transactions are not supported")
        self._snapshot = copy.deepcopy(self._data)

    def commit(self) -> None:
        self._snapshot = None
        self._lock.release()

    def rollback(self) -> None:
        if self._snapshot is not None:
            self._data = self._snapshot
        self._snapshot = None
        self._lock.release()


class SQLiteStorage(StorageInterface):
    """SQLite document storage for persistence"""

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self.db_path = str(db_path)
        # isolation_level=None puts the connection in autocommit mode; explicit
        # transactions are opened with BEGIN in begin_transaction
        self._connection = sqlite3.connect(
            self.db_path, check_same_thread=False, isolation_level=None
        )
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._in_transaction = False
        self._known_collections = set()

        if self.db_path != ":memory:":
            with self._lock:
                self._connection.execute("PRAGMA journal_mode = WAL")
                self._connection.execute("PRAGMA synchronous = NORMAL")

    def _ensure_collection(self, collection: str) -> str:
        """Create the backing table on first use"""
        table = _check_collection(collection)
        if table in self._known_collections:
            return table
        self._connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {table} (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._known_collections.add(table)
        return table

    def save(self, collection: str, document_id: str, document: Dict[str, Any]) -> None:
        with self._lock:
            table = self._ensure_collection(collection)
            now = datetime.now(timezone.utc).isoformat()
            data_json = json.dumps(document, default=str)

            # Upsert keeps seq and created_at of an existing row
            self._connection.execute(f"""
                INSERT INTO {table} (id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
            """, (document_id, data_json, now, now))

    def load(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            table = self._ensure_collection(collection)
            row = self._connection.execute(
                f"SELECT data FROM {table} WHERE id = ?", (document_id,)
            ).fetchone()
            return json.loads(row['data']) if row else None

    def load_all(self, collection: str) -> List[Dict[str, Any]]:
        with self._lock:
            table = self._ensure_collection(collection)
            cursor = self._connection.execute(f"SELECT data FROM {table} ORDER BY seq")
            return [json.loads(row['data']) for row in cursor.fetchall()]

    def find(self, collection: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self._lock:
            table = self._ensure_collection(collection)
            conditions = []
            params = []
            for key, value in filters.items():
                conditions.append("json_extract(data, ?) = ?")
                params.extend([f"$.{key}", value])

            where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            cursor = self._connection.execute(
                f"SELECT data FROM {table} {where_clause} ORDER BY seq", params
            )
            return [json.loads(row['data']) for row in cursor.fetchall()]

    def begin_transaction(self) -> None:
        self._lock.acquire()
        if self._in_transaction:
            self._lock.release()
            raise RuntimeError("Nested transactions are not supported")
        try:
            self._connection.execute("BEGIN IMMEDIATE")
        except sqlite3.Error:
            self._lock.release()
            raise
        self._in_transaction = True

    def commit(self) -> None:
        # On failure the transaction stays open and the lock held until rollback
        self._connection.execute("COMMIT")
        self._in_transaction = False
        self._lock.release()

    def rollback(self) -> None:
        if not self._in_transaction:
            return
        try:
            if self._connection.in_transaction:
                self._connection.execute("ROLLBACK")
        finally:
            # Tables created inside the transaction are gone again
            self._known_collections.clear()
            self._in_transaction = False
            self._lock.release()

    def close(self) -> None:
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None
