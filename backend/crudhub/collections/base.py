"""
CrudHub Backend — Abstract Collection Interface
=================================================

What:  Abstract base class defining the contract every collection adapter meets.
Why:   The CRUD router is written once against this contract, so an in-memory
       list of teas and a document-store collection of games are served by
       identical route logic. No caller branches on the concrete type.
How:   Concrete implementations inherit from Collection and implement the
       five data operations plus the connect / ping / close lifecycle.
Who:   Called by the CRUD router (data operations) and by the ResourceRegistry
       (lifecycle).

Implementations:
    - MemoryCollection:   ordered in-process mapping (teas, biscuits)
    - DocumentCollection: JSON documents in the document store (games)

Item shape:
    Items are plain dicts. The collection assigns `_id` on insert and returns
    it as the first key of every item. `_id` inside a payload is ignored.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

Item = Dict[str, Any]

ID_FIELD = "_id"


def strip_id(item: Item) -> Item:
    """Copy of a payload without the store-owned identifier field."""
    return {key: value for key, value in item.items() if key != ID_FIELD}


class Collection(ABC):
    """
    Abstract interface for a named collection of schemaless items.

    Contract:
        - find_one / update / delete raise NotFoundError for unknown ids
        - returned items are copies; mutating them never changes the store
        - update is a full replacement of the item's fields
        - operations on a store that is not connected raise StoreUnavailableError
    """

    #: Short label reported by /health ("memory", "database")
    backend: str = "abstract"

    def __init__(self, name: str):
        self.name = name

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Prepare the backing store. Raises StoreUnavailableError on failure."""

    async def ping(self) -> bool:
        """Cheap availability probe for the health endpoint."""
        return True

    async def close(self) -> None:
        """Release anything connect() acquired."""

    # ── Data Operations ───────────────────────────────────────────────────

    @abstractmethod
    async def find_all(self) -> List[Item]:
        """Every item in insertion order."""
        ...

    @abstractmethod
    async def find_one(self, item_id: str) -> Item:
        """
        One item by identifier.

        Raises:
            NotFoundError: no item has this identifier.
        """
        ...

    @abstractmethod
    async def insert(self, item: Item) -> Item:
        """Store a new item under a freshly generated identifier and return it."""
        ...

    @abstractmethod
    async def update(self, item_id: str, item: Item) -> Item:
        """
        Replace the fields of an existing item, keeping its identifier.

        Raises:
            NotFoundError: no item has this identifier.
        """
        ...

    @abstractmethod
    async def delete(self, item_id: str) -> Item:
        """
        Remove an item and return it as it was.

        Raises:
            NotFoundError: no item has this identifier.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(name='{self.name}')>"
