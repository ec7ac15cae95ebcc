"""Document store handles.

The ledger treats its backing store as a key/value + equality-query document
store with atomic multi-document batches. Two implementations live here:

  * InMemoryDocumentStore - process-local, used by tests and as a fake.
  * JsonDocumentStore     - same semantics, persisted to one JSON file that is
                            replaced atomically on every commit.

Batches support preconditions so callers do not have to rely on a separate
read followed by a write:
  create(...)               fails with DocumentExists if the id is taken
  update(..., expected_version=n) fails with VersionConflict if the document changed
  delete(..., must_exist=True)    fails with DocumentMissing if it is gone

A batch is validated as a whole against the current state and applied only if
every precondition holds; otherwise nothing is written.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_IN_CLAUSE_LIMIT = 10


class StoreError(Exception):
    """Base class for store-level write failures."""


class DocumentExists(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} already exists")
        self.collection = collection
        self.doc_id = doc_id


class DocumentMissing(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id


class VersionConflict(StoreError):
    def __init__(self, collection: str, doc_id: str, expected: int, actual: int):
        super().__init__(f"{collection}/{doc_id} changed (expected version {expected}, found {actual})")
        self.collection = collection
        self.doc_id = doc_id


def chunked(items: List[Any], size: int) -> Iterable[List[Any]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


class WriteBatch:
    """Collects writes; nothing touches the store until commit()."""

    def __init__(self, store: "InMemoryDocumentStore"):
        self._store = store
        self.operations: List[Tuple[str, str, str, Optional[Dict[str, Any]], Dict[str, Any]]] = []

    def create(self, collection: str, doc_id: str, data: Dict[str, Any]):
        self.operations.append(("create", collection, doc_id, dict(data), {}))
        return self

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]):
        self.operations.append(("set", collection, doc_id, dict(data), {}))
        return self

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any], expected_version: Optional[int] = None):
        self.operations.append(("update", collection, doc_id, dict(fields), {"expected_version": expected_version}))
        return self

    def delete(self, collection: str, doc_id: str, must_exist: bool = False):
        self.operations.append(("delete", collection, doc_id, None, {"must_exist": must_exist}))
        return self

    def __len__(self):
        return len(self.operations)

    def commit(self):
        self._store.commit(self)


class InMemoryDocumentStore:
    def __init__(self, data: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
                 in_clause_limit: int = DEFAULT_IN_CLAUSE_LIMIT):
        self._lock = Lock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = copy.deepcopy(data) if data else {}
        self._versions: Dict[Tuple[str, str], int] = {}
        for collection, docs in self._data.items():
            for doc_id in docs:
                self._versions[(collection, doc_id)] = 1
        self.in_clause_limit = in_clause_limit

    # --- Reads -------------------------------------------------------------
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._data.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def exists(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return doc_id in self._data.get(collection, {})

    def version(self, collection: str, doc_id: str) -> int:
        """0 for a missing document; bumped on every write."""
        with self._lock:
            return self._versions.get((collection, doc_id), 0)

    def get_many(self, collection: str, doc_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """Fetch documents by id, in IN-clause sized chunks."""
        ids = list(dict.fromkeys(doc_ids))
        found: Dict[str, Dict[str, Any]] = {}
        for chunk in chunked(ids, self.in_clause_limit):
            with self._lock:
                docs = self._data.get(collection, {})
                for doc_id in chunk:
                    if doc_id in docs:
                        found[doc_id] = copy.deepcopy(docs[doc_id])
        return found

    def query(self, collection: str, where: Optional[Dict[str, Any]] = None,
              order_by: Optional[str] = None) -> List[Tuple[str, Dict[str, Any]]]:
        """Equality filters; a list/tuple/set value means membership ('in')."""
        where = where or {}
        with self._lock:
            docs = list(self._data.get(collection, {}).items())
        result = []
        for doc_id, doc in docs:
            ok = True
            for field, expected in where.items():
                value = doc.get(field)
                if isinstance(expected, (list, tuple, set, frozenset)):
                    if value not in expected:
                        ok = False
                        break
                elif value != expected:
                    ok = False
                    break
            if ok:
                result.append((doc_id, copy.deepcopy(doc)))
        if order_by:
            result.sort(key=lambda item: (item[1].get(order_by) is None, item[1].get(order_by) or ""))
        return result

    # --- Writes ------------------------------------------------------------
    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def commit(self, batch: WriteBatch) -> None:
        with self._lock:
            staged = copy.deepcopy(self._data)
            versions = dict(self._versions)
            self._apply(batch, staged, versions)
            self._persist(staged)
            self._data = staged
            self._versions = versions
        logger.debug("Committed batch with %s operation(s)", len(batch))

    def _apply(self, batch: WriteBatch, data, versions) -> None:
        for op, collection, doc_id, payload, options in batch.operations:
            docs = data.setdefault(collection, {})
            key = (collection, doc_id)
            if op == "create":
                if doc_id in docs:
                    raise DocumentExists(collection, doc_id)
                docs[doc_id] = payload
            elif op == "set":
                docs[doc_id] = payload
            elif op == "update":
                if doc_id not in docs:
                    raise DocumentMissing(collection, doc_id)
                expected = options.get("expected_version")
                actual = versions.get(key, 0)
                if expected is not None and expected != actual:
                    raise VersionConflict(collection, doc_id, expected, actual)
                docs[doc_id].update(payload)
            elif op == "delete":
                if doc_id not in docs:
                    if options.get("must_exist"):
                        raise DocumentMissing(collection, doc_id)
                    continue
                del docs[doc_id]
                versions.pop(key, None)
                continue
            else:  # pragma: no cover - WriteBatch only emits the ops above
                raise StoreError(f"Unknown batch operation: {op}")
            versions[key] = versions.get(key, 0) + 1

    def _persist(self, data) -> None:
        """Hook for durable stores; called with the staged state before it becomes current."""

    def dump(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        with self._lock:
            return copy.deepcopy(self._data)


class JsonDocumentStore(InMemoryDocumentStore):
    """File-backed store: the whole database is one JSON object {collection: {id: doc}}."""

    def __init__(self, path: Path, in_clause_limit: int = DEFAULT_IN_CLAUSE_LIMIT):
        self.path = Path(path)
        super().__init__(self._load(), in_clause_limit=in_clause_limit)

    def _load(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f) or {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in store file {self.path}: {e}")
            raise
        if not isinstance(data, dict):
            raise StoreError(f"Store file {self.path} must contain a JSON object")
        return data

    def _persist(self, data) -> None:
        os.makedirs(self.path.parent, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False, default=str)
            shutil.move(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to persist store %s: %s", self.path, e)
            raise StoreError(f"Failed to persist store: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


__all__ = [
    'InMemoryDocumentStore', 'JsonDocumentStore', 'WriteBatch', 'StoreError',
    'DocumentExists', 'DocumentMissing', 'VersionConflict', 'chunked',
]
