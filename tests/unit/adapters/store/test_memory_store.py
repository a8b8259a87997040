"""Tests for the in-memory document store."""

from __future__ import annotations

from typing import Any

import pytest

from bdsync.adapters.store.memory import InMemoryDocumentStore
from bdsync.core.exceptions import NotFoundError


class TestInMemoryDocumentStore:
    """Test CRUD and watch behaviour."""

    @pytest.mark.asyncio
    async def test_subscribe_delivers_current_then_changes(self) -> None:
        """Watchers get the current contents, then every write."""
        store = InMemoryDocumentStore()
        seen: list[dict[str, Any] | None] = []

        async def on_snapshot(data: dict[str, Any] | None) -> None:
            seen.append(data)

        unsubscribe = await store.subscribe_document("users", "u1", on_snapshot)
        await store.set_document("users", "u1", {"name": "a"})
        unsubscribe()
        await store.set_document("users", "u1", {"name": "b"})

        assert seen == [None, {"name": "a"}]

    @pytest.mark.asyncio
    async def test_documents_are_copied(self) -> None:
        """Callers cannot mutate stored documents through references."""
        store = InMemoryDocumentStore()
        value = {"tags": ["a"]}
        await store.set_document("teams", "t1", value)
        value["tags"].append("b")

        stored = await store.get_document("teams", "t1")
        assert stored == {"tags": ["a"]}

    @pytest.mark.asyncio
    async def test_set_merge(self) -> None:
        """Merge keeps fields not in the new value."""
        store = InMemoryDocumentStore({"users": {"u1": {"a": 1, "b": 2}}})

        await store.set_document("users", "u1", {"b": 3}, merge=True)

        assert await store.get_document("users", "u1") == {"a": 1, "b": 3}

    @pytest.mark.asyncio
    async def test_update_missing_raises(self) -> None:
        """Updating a missing document raises NotFoundError."""
        store = InMemoryDocumentStore()

        with pytest.raises(NotFoundError):
            await store.update_document("users", "nope", {"teamId": "t"})

    @pytest.mark.asyncio
    async def test_add_and_query(self) -> None:
        """Added documents get ids and can be filtered by field."""
        store = InMemoryDocumentStore()
        first = await store.add_document("meetings", {"teamId": "t1"})
        await store.add_document("meetings", {"teamId": "t2"})

        results = await store.query_documents("meetings", "teamId", "t1")

        assert results == [(first, {"teamId": "t1"})]
        assert store.count("meetings") == 2
        assert len(await store.query_documents("meetings")) == 2

    @pytest.mark.asyncio
    async def test_array_union_skips_duplicates(self) -> None:
        """Existing values are not added twice."""
        store = InMemoryDocumentStore({"teams": {"t1": {"memberIds": ["a"]}}})

        await store.array_union("teams", "t1", "memberIds", ["a", "b"])

        assert await store.get_document("teams", "t1") == {"memberIds": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_clear(self) -> None:
        """Clear drops every document."""
        store = InMemoryDocumentStore({"teams": {"t1": {}}})

        store.clear()

        assert store.count("teams") == 0
