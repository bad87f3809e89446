"""
CrudHub Backend — In-Memory Collection
========================================

What:  A Collection kept in a dict for the lifetime of the process.
Why:   Small fixed resources (teas, biscuits) need no database at all.
How:   Insertion-ordered dict of id → fields. Identifiers are generated uuid4
       hex strings, so deleting an item never renumbers the others.

Concurrency:
    No operation awaits, so each one runs to completion on the event loop
    before another request can touch the dict. Concurrent updates of the same
    id are last-write-wins.
"""

import copy
import logging
import uuid
from typing import Dict, Iterable, List, Optional

from crudhub.collections.base import ID_FIELD, Collection, Item, strip_id
from crudhub.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class MemoryCollection(Collection):
    """Collection backed by an ordered in-process mapping."""

    backend = "memory"

    def __init__(self, name: str, initial: Optional[Iterable[Item]] = None):
        super().__init__(name)
        self._items: Dict[str, Item] = {}
        for item in initial or ():
            self._put(uuid.uuid4().hex, item)
        if self._items:
            logger.debug("Collection '%s' seeded with %d items", name, len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    async def find_all(self) -> List[Item]:
        return [self._render(item_id) for item_id in self._items]

    async def find_one(self, item_id: str) -> Item:
        self._require(item_id)
        return self._render(item_id)

    async def insert(self, item: Item) -> Item:
        item_id = uuid.uuid4().hex
        self._put(item_id, item)
        return self._render(item_id)

    async def update(self, item_id: str, item: Item) -> Item:
        self._require(item_id)
        self._put(item_id, item)
        return self._render(item_id)

    async def delete(self, item_id: str) -> Item:
        self._require(item_id)
        removed = self._render(item_id)
        del self._items[item_id]
        return removed

    def _put(self, item_id: str, item: Item) -> None:
        # Deep copy on the way in and out: callers never share state with the store
        self._items[item_id] = copy.deepcopy(strip_id(item))

    def _render(self, item_id: str) -> Item:
        return {ID_FIELD: item_id, **copy.deepcopy(self._items[item_id])}

    def _require(self, item_id: str) -> None:
        if item_id not in self._items:
            raise NotFoundError(resource=self.name, resource_id=item_id)
