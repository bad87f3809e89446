"""
CrudHub Backend — Resource Registry
=====================================

What:  Knows every mounted resource, the collection behind it and whether that
       collection is currently available.
Why:   Startup needs one place that connects all stores, decides what a
       failure means (abort or degrade), and exposes availability to /health.
How:   Built from Settings: one MemoryCollection per MEMORY_RESOURCES entry,
       one DocumentCollection per DOCUMENT_RESOURCES entry, all document
       collections sharing a single DocumentStore.
Who:   Created by create_app(); connected/closed by the lifespan; read by the
       health route.

Startup failure policy:
    fail_fast=True   → the first StoreUnavailableError propagates (startup aborts)
    fail_fast=False  → the resource is marked unavailable, its error recorded,
                       and startup continues; its routes answer 503
"""

import logging
from typing import Dict, Iterator, List, Optional

from crudhub.collections import Collection, DocumentCollection, MemoryCollection
from crudhub.config import Settings
from crudhub.database import DocumentStore
from crudhub.exceptions import CrudHubError, StoreUnavailableError
from crudhub.seeds import SEED_DATA

logger = logging.getLogger(__name__)

PING_FAILED = "Health check ping failed"


class Resource:
    """A named collection plus its last known availability."""

    def __init__(self, name: str, collection: Collection):
        self.name = name
        self.collection = collection
        self.available = False
        self.error: Optional[str] = None

    @property
    def backend(self) -> str:
        return self.collection.backend

    def __repr__(self) -> str:
        return f"<Resource(name='{self.name}', backend='{self.backend}', available={self.available})>"


class ResourceRegistry:
    """Ordered set of resources keyed by name."""

    def __init__(self, store: Optional[DocumentStore] = None, seed_documents: bool = False):
        self.store = store
        self.seed_documents = seed_documents
        self._resources: Dict[str, Resource] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResourceRegistry":
        """
        Build collections for every configured resource.

        No I/O happens here; the document store is only created (not
        connected) and only when at least one document resource exists.
        """
        document_names = settings.document_resources_list
        store = DocumentStore(settings) if document_names else None
        registry = cls(store=store, seed_documents=settings.seed_document_resources)

        for name in settings.memory_resources_list:
            initial = SEED_DATA.get(name, []) if settings.seed_memory_resources else []
            registry.add(MemoryCollection(name, initial=initial))

        for name in document_names:
            registry.add(DocumentCollection(name, store))

        return registry

    def add(self, collection: Collection) -> Resource:
        if collection.name in self._resources:
            raise ValueError(f"Resource '{collection.name}' is already registered")
        resource = Resource(collection.name, collection)
        self._resources[collection.name] = resource
        return resource

    def get(self, name: str) -> Resource:
        return self._resources[name]

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)

    @property
    def names(self) -> List[str]:
        return list(self._resources)

    async def connect_all(self, fail_fast: bool = True) -> None:
        """
        Connect every collection, then seed empty document collections.

        Raises:
            StoreUnavailableError: a collection could not connect and
                fail_fast is True.
            CrudHubError: seeding a document collection failed and
                fail_fast is True.
        """
        for resource in self:
            try:
                await resource.collection.connect()
            except StoreUnavailableError as e:
                resource.available = False
                resource.error = e.message
                logger.error(
                    "Resource '%s' unavailable (%s backend): %s",
                    resource.name,
                    resource.backend,
                    e.message,
                )
                if fail_fast:
                    raise
                continue

            resource.available = True
            resource.error = None
            logger.info("Resource '%s' ready (%s backend)", resource.name, resource.backend)

            if self.seed_documents and isinstance(resource.collection, DocumentCollection):
                try:
                    await self._seed(resource.collection)
                except CrudHubError as e:
                    resource.available = False
                    resource.error = e.message
                    logger.error("Seeding '%s' failed: %s", resource.name, e.message)
                    if fail_fast:
                        raise

    async def check(self) -> Dict[str, bool]:
        """Ping every collection and refresh availability flags."""
        for resource in self:
            resource.available = await resource.collection.ping()
            if resource.available:
                resource.error = None
            elif resource.error is None:
                resource.error = PING_FAILED
        return {resource.name: resource.available for resource in self}

    async def close_all(self) -> None:
        for resource in self:
            await resource.collection.close()
            resource.available = False
        if self.store is not None:
            await self.store.dispose()

    async def _seed(self, collection: DocumentCollection) -> None:
        items = SEED_DATA.get(collection.name, [])
        if not items or await collection.count() > 0:
            return
        for item in items:
            await collection.insert(item)
        logger.info("Seeded '%s' with %d documents", collection.name, len(items))
