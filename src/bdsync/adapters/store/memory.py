"""In-memory document store.

Backs Demo Mode and local development without Firestore credentials,
and doubles as a deterministic store for tests. Watchers are awaited
inline, in registration order, after each write.
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from typing import Any

from bdsync.core.exceptions import NotFoundError
from bdsync.core.interfaces import DocumentListener, ErrorListener, Unsubscribe


class InMemoryDocumentStore:
    """Dict-backed implementation of the DocumentStore protocol.

    Attributes:
        write_count: Number of successful writes, for diagnostics.
    """

    def __init__(self, documents: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        """Initialize the store.

        Args:
            documents: Optional initial contents as
                ``{collection: {key: document}}``.
        """
        self._documents: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        for collection, docs in (documents or {}).items():
            for key, value in docs.items():
                self._documents[collection][key] = copy.deepcopy(value)
        self._watchers: dict[tuple[str, str], list[DocumentListener]] = defaultdict(list)
        self.write_count = 0

    def clear(self) -> None:
        """Drop every document. Watchers stay registered."""
        self._documents.clear()

    def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        return len(self._documents.get(collection, {}))

    async def subscribe_document(
        self,
        collection: str,
        key: str,
        on_snapshot: DocumentListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        """Watch a document; the current contents are delivered immediately."""
        watchers = self._watchers[(collection, key)]
        watchers.append(on_snapshot)

        def unsubscribe() -> None:
            if on_snapshot in watchers:
                watchers.remove(on_snapshot)

        await on_snapshot(self._snapshot(collection, key))
        return unsubscribe

    async def get_document(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read a document, None when missing."""
        return self._snapshot(collection, key)

    async def set_document(
        self,
        collection: str,
        key: str,
        value: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Upsert a document."""
        existing = self._documents[collection].get(key)
        if merge and existing is not None:
            existing.update(copy.deepcopy(value))
        else:
            self._documents[collection][key] = copy.deepcopy(value)
        await self._written(collection, key)

    async def update_document(self, collection: str, key: str, fields: dict[str, Any]) -> None:
        """Update fields of an existing document."""
        existing = self._documents[collection].get(key)
        if existing is None:
            raise NotFoundError(f"{collection}/{key} not found")
        existing.update(copy.deepcopy(fields))
        await self._written(collection, key)

    async def add_document(self, collection: str, value: dict[str, Any]) -> str:
        """Insert a document under a generated id."""
        key = uuid.uuid4().hex[:20]
        self._documents[collection][key] = copy.deepcopy(value)
        await self._written(collection, key)
        return key

    async def query_documents(
        self,
        collection: str,
        field: str | None = None,
        value: Any = None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """List documents, optionally filtered by field equality."""
        return [
            (key, copy.deepcopy(doc))
            for key, doc in self._documents.get(collection, {}).items()
            if field is None or doc.get(field) == value
        ]

    async def array_union(
        self,
        collection: str,
        key: str,
        field: str,
        values: list[Any],
    ) -> None:
        """Append values missing from an array field."""
        existing = self._documents[collection].get(key)
        if existing is None:
            raise NotFoundError(f"{collection}/{key} not found")
        current = list(existing.get(field) or [])
        for value in values:
            if value not in current:
                current.append(value)
        existing[field] = current
        await self._written(collection, key)

    def _snapshot(self, collection: str, key: str) -> dict[str, Any] | None:
        doc = self._documents.get(collection, {}).get(key)
        return copy.deepcopy(doc) if doc is not None else None

    async def _written(self, collection: str, key: str) -> None:
        self.write_count += 1
        snapshot = self._snapshot(collection, key)
        for listener in list(self._watchers.get((collection, key), [])):
            await listener(copy.deepcopy(snapshot))
