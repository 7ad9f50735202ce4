"""
Document store boundary.

Parts, reports and users live in an external keyed-document store (one
collection each, documents keyed by an opaque id). The services talk to it
through the async DocumentStore protocol below; InMemoryDocumentStore is the
implementation wired into the API by default and used by the tests.

Writes to reports are targeted partial updates, never whole-document
replacements.
"""
import asyncio
import copy
import logging
import uuid
from typing import AsyncGenerator, Dict, List, Mapping, Optional, Protocol

from qc_inspection.core.exceptions import ConcurrentUpdateError, NotFound


logger = logging.getLogger(__name__)

PARTS = "parts"
REPORTS = "inspectionReports"
USERS = "users"

COLLECTIONS = (PARTS, REPORTS, USERS)


class DocumentStore(Protocol):
    """Async keyed-document store."""

    async def get(self, collection: str, doc_id: str) -> Optional[dict]: ...

    async def list(self, collection: str) -> List[dict]: ...

    async def add(self, collection: str, document: dict) -> str: ...

    async def set(self, collection: str, doc_id: str, document: dict) -> None: ...

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict,
        precondition: Optional[Mapping[str, object]] = None,
    ) -> None: ...

    async def delete(self, collection: str, doc_id: str) -> None: ...


class InMemoryDocumentStore:
    """
    Process-local DocumentStore.

    Documents are copied on the way in and out so callers never share state
    with the store. `update` with a precondition is a compare-and-set: every
    precondition field must still hold its expected value or the update is
    refused with ConcurrentUpdateError.
    """

    def __init__(self, seed: Optional[Dict[str, Dict[str, dict]]] = None):
        self._collections: Dict[str, Dict[str, dict]] = {name: {} for name in COLLECTIONS}
        self._lock = asyncio.Lock()
        for name, documents in (seed or {}).items():
            self._collections.setdefault(name, {})
            for doc_id, document in documents.items():
                self._collections[name][doc_id] = self._stored(doc_id, document)

    @staticmethod
    def _stored(doc_id: str, document: dict) -> dict:
        stored = copy.deepcopy(document)
        stored["id"] = doc_id
        return stored

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self._collections.setdefault(collection, {})

    async def get(self, collection: str, doc_id: str) -> Optional[dict]:
        document = self._collection(collection).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def list(self, collection: str) -> List[dict]:
        return [copy.deepcopy(doc) for doc in self._collection(collection).values()]

    async def add(self, collection: str, document: dict) -> str:
        doc_id = uuid.uuid4().hex
        async with self._lock:
            self._collection(collection)[doc_id] = self._stored(doc_id, document)
        return doc_id

    async def set(self, collection: str, doc_id: str, document: dict) -> None:
        async with self._lock:
            self._collection(collection)[doc_id] = self._stored(doc_id, document)

    async def update(
        self,
        collection: str,
        doc_id: str,
        fields: dict,
        precondition: Optional[Mapping[str, object]] = None,
    ) -> None:
        async with self._lock:
            document = self._collection(collection).get(doc_id)
            if document is None:
                raise NotFound(f"{collection}/{doc_id} not found", details={"id": doc_id})
            for key, expected in (precondition or {}).items():
                if document.get(key) != expected:
                    raise ConcurrentUpdateError(
                        f"{collection}/{doc_id} was changed by someone else; reload and try again.",
                        details={"id": doc_id, "field": key, "expected": expected, "actual": document.get(key)},
                    )
            document.update(copy.deepcopy(fields))

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._lock:
            if self._collection(collection).pop(doc_id, None) is None:
                raise NotFound(f"{collection}/{doc_id} not found", details={"id": doc_id})


_default_store = InMemoryDocumentStore()


async def get_store() -> AsyncGenerator[DocumentStore, None]:
    """Dependency that provides the document store."""
    yield _default_store
