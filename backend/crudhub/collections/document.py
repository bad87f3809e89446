"""
CrudHub Backend — Document Store Collection
=============================================

What:  A Collection whose items are rows of the `documents` table.
Why:   Resources that must survive restarts (games) live in the database.
How:   Every operation opens its own session from the shared DocumentStore,
       scoped to rows whose `collection` column equals this collection's name.
Who:   Created by the ResourceRegistry for each DOCUMENT_RESOURCES entry.

Error Handling Strategy:
    - Store not connected        → StoreUnavailableError (503)
    - Unknown id                 → NotFoundError (404)
    - Any SQLAlchemyError        → logged, wrapped in DatabaseError (500)
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crudhub.collections.base import Collection, Item, strip_id
from crudhub.database import DocumentStore
from crudhub.exceptions import DatabaseError, NotFoundError
from crudhub.models.document import Document

logger = logging.getLogger(__name__)


class DocumentCollection(Collection):
    """
    One named collection inside a DocumentStore.

    The handle is cheap to create and performs no I/O until used, like a
    database driver's `db.collection(name)`.
    """

    backend = "database"

    def __init__(self, name: str, store: DocumentStore):
        super().__init__(name)
        self.store = store

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        await self.store.connect()

    async def ping(self) -> bool:
        return await self.store.ping()

    # close() is inherited: the registry disposes the shared store once

    # ── Data Operations ───────────────────────────────────────────────────

    async def find_all(self) -> List[Item]:
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session:
                result = await session.execute(
                    select(Document)
                    .where(Document.collection == self.name)
                    .order_by(Document.pk)
                )
                return [doc.to_item() for doc in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._database_error("list", e)

    async def find_one(self, item_id: str) -> Item:
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session:
                doc = await self._get(session, item_id)
                return doc.to_item()
        except SQLAlchemyError as e:
            raise self._database_error("read", e, item_id)

    async def insert(self, item: Item) -> Item:
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session, session.begin():
                doc = Document(collection=self.name, body=strip_id(item))
                session.add(doc)
                # Flush assigns pk, id and timestamps inside the transaction
                await session.flush()
                return doc.to_item()
        except SQLAlchemyError as e:
            raise self._database_error("insert", e)

    async def update(self, item_id: str, item: Item) -> Item:
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session, session.begin():
                doc = await self._get(session, item_id)
                # New dict object so the JSON column is marked dirty
                doc.body = strip_id(item)
                await session.flush()
                return doc.to_item()
        except SQLAlchemyError as e:
            raise self._database_error("update", e, item_id)

    async def delete(self, item_id: str) -> Item:
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session, session.begin():
                doc = await self._get(session, item_id)
                removed = doc.to_item()
                await session.delete(doc)
                return removed
        except SQLAlchemyError as e:
            raise self._database_error("delete", e, item_id)

    async def count(self) -> int:
        """Number of documents in this collection (used to decide on seeding)."""
        self.store.ensure_connected()
        try:
            async with self.store.session_factory() as session:
                result = await session.execute(
                    select(func.count(Document.pk)).where(Document.collection == self.name)
                )
                return result.scalar() or 0
        except SQLAlchemyError as e:
            raise self._database_error("count", e)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get(self, session: AsyncSession, item_id: str) -> Document:
        result = await session.execute(
            select(Document).where(
                Document.collection == self.name,
                Document.id == item_id,
            )
        )
        doc = result.scalar_one_or_none()
        if doc is None:
            raise NotFoundError(resource=self.name, resource_id=item_id)
        return doc

    def _database_error(
        self, operation: str, error: Exception, item_id: Optional[str] = None
    ) -> DatabaseError:
        logger.error(
            "Database error during %s on '%s' (id=%s): %s",
            operation,
            self.name,
            item_id,
            str(error),
            exc_info=True,
        )
        context = {"collection": self.name, "operation": operation}
        if item_id:
            context["item_id"] = item_id
        context["error_type"] = type(error).__name__
        return DatabaseError(
            message=f"Could not {operation} {self.name}. Please try again.",
            context=context,
        )
