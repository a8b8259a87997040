"""Firestore implementation of the DocumentStore protocol.

Reads and writes go through the async client. Live document
subscriptions use the sync client's watch stream, which runs on the
library's own thread; snapshots are handed back to the event loop with
``asyncio.run_coroutine_threadsafe``.

The watch stream reports no error of its own when it closes, so each
subscription polls ``is_active`` and reports a closed stream through
``on_error``.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from typing import Any

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from bdsync.core.exceptions import NotFoundError, StoreUnavailableError
from bdsync.core.interfaces import DocumentListener, ErrorListener, Unsubscribe

logger = structlog.get_logger()

DEFAULT_WATCH_CHECK_INTERVAL_SECONDS = 5.0


class FirestoreDocumentStore:
    """Document store backed by Google Cloud Firestore."""

    def __init__(
        self,
        project_id: str,
        database: str | None = None,
        client: firestore.AsyncClient | None = None,
        watch_client: firestore.Client | None = None,
        watch_check_interval: float = DEFAULT_WATCH_CHECK_INTERVAL_SECONDS,
    ) -> None:
        """Initialize the store.

        Args:
            project_id: Google Cloud project id.
            database: Firestore database id. Uses the default database if not provided.
            client: Pre-built async client.
            watch_client: Pre-built sync client used for live subscriptions.
                Built on a worker thread on first subscription if not provided.
            watch_check_interval: Seconds between checks that a watch
                stream is still open.
        """
        self._project_id = project_id
        self._database = database
        self._client = client or firestore.AsyncClient(project=project_id, database=database)
        self._watch_client = watch_client
        self._watch_check_interval = watch_check_interval

    async def _watcher(self) -> firestore.Client:
        if self._watch_client is None:
            # Credential discovery blocks; keep it off the event loop.
            self._watch_client = await asyncio.to_thread(
                firestore.Client,
                project=self._project_id,
                database=self._database,
            )
        return self._watch_client

    async def subscribe_document(
        self,
        collection: str,
        key: str,
        on_snapshot: DocumentListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        """Watch a document through a Firestore listen stream.

        A stream that closes while subscribed is logged and reported to
        ``on_error`` as StoreUnavailableError.
        """
        loop = asyncio.get_running_loop()

        def deliver_done(future: Future[None]) -> None:
            error = future.exception()
            if error is None:
                return
            logger.error(
                "document_listener_failed",
                collection=collection,
                key=key,
                error=str(error),
            )
            if on_error is not None:
                asyncio.run_coroutine_threadsafe(on_error(error), loop)

        def callback(snapshots: list[Any], changes: list[Any], read_time: Any) -> None:
            snapshot = snapshots[0] if snapshots else None
            data = snapshot.to_dict() if snapshot is not None and snapshot.exists else None
            future = asyncio.run_coroutine_threadsafe(on_snapshot(data), loop)
            future.add_done_callback(deliver_done)

        try:
            watcher = await self._watcher()
            reference = watcher.collection(collection).document(key)
            watch = reference.on_snapshot(callback)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not watch {collection}/{key}: {e}") from e

        monitor = asyncio.create_task(self._monitor_watch(watch, collection, key, on_error))

        def unsubscribe() -> None:
            monitor.cancel()
            watch.unsubscribe()

        return unsubscribe

    async def _monitor_watch(
        self,
        watch: Any,
        collection: str,
        key: str,
        on_error: ErrorListener | None,
    ) -> None:
        while watch.is_active:
            await asyncio.sleep(self._watch_check_interval)
        logger.error("document_watch_closed", collection=collection, key=key)
        if on_error is not None:
            await on_error(StoreUnavailableError(f"Watch on {collection}/{key} closed"))

    async def get_document(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read a document, None when missing."""
        try:
            snapshot = await self._client.collection(collection).document(key).get()
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not read {collection}/{key}: {e}") from e
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    async def set_document(
        self,
        collection: str,
        key: str,
        value: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Upsert a document."""
        try:
            await self._client.collection(collection).document(key).set(value, merge=merge)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not write {collection}/{key}: {e}") from e

    async def update_document(self, collection: str, key: str, fields: dict[str, Any]) -> None:
        """Update fields of an existing document."""
        try:
            await self._client.collection(collection).document(key).update(fields)
        except google_exceptions.NotFound as e:
            raise NotFoundError(f"{collection}/{key} not found") from e
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not update {collection}/{key}: {e}") from e

    async def add_document(self, collection: str, value: dict[str, Any]) -> str:
        """Insert a document with a Firestore-generated id."""
        try:
            _, reference = await self._client.collection(collection).add(value)
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not add to {collection}: {e}") from e
        return str(reference.id)

    async def query_documents(
        self,
        collection: str,
        field: str | None = None,
        value: Any = None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """List documents, optionally filtered by field equality."""
        query: Any = self._client.collection(collection)
        if field is not None:
            query = query.where(filter=FieldFilter(field, "==", value))
        try:
            return [(snapshot.id, snapshot.to_dict() or {}) async for snapshot in query.stream()]
        except google_exceptions.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Could not query {collection}: {e}") from e

    async def array_union(
        self,
        collection: str,
        key: str,
        field: str,
        values: list[Any],
    ) -> None:
        """Add values to an array field with a server-side union."""
        await self.update_document(collection, key, {field: firestore.ArrayUnion(values)})
