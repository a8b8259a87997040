"""Document store adapters."""

from bdsync.adapters.store.firestore import FirestoreDocumentStore
from bdsync.adapters.store.memory import InMemoryDocumentStore

__all__ = ["FirestoreDocumentStore", "InMemoryDocumentStore"]
