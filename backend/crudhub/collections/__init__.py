# Collections package init
"""
CrudHub Backend — Collection Adapters
=======================================

What:  Storage adapters the CRUD router talks to.
Why:   One contract (Collection), several backings; the router never knows which.

Inventory:
    - base.py:     Collection ABC, Item alias, `_id` helpers
    - memory.py:   MemoryCollection (in-process, optionally seeded)
    - document.py: DocumentCollection (rows of the documents table)
"""

from crudhub.collections.base import ID_FIELD, Collection, Item
from crudhub.collections.document import DocumentCollection
from crudhub.collections.memory import MemoryCollection

__all__ = [
    "ID_FIELD",
    "Collection",
    "DocumentCollection",
    "Item",
    "MemoryCollection",
]
