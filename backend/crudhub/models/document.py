"""
CrudHub Backend — Document SQLAlchemy Model
=============================================

What:  ORM model representing the `documents` table.
Why:   Stores schemaless items as JSON bodies, one row per item, for every
       document-backed resource.
How:   Inherits from Base; Alembic migration 001 creates the same table.
Who:   Used by DocumentCollection for CRUD operations.

Table Design:
    - pk: Autoincrement surrogate key, gives a stable insertion order
    - id: Public identifier (uuid4 hex) assigned at insert, never reused
    - collection: Resource name; all document resources share this table
    - body: The item itself, without its `_id`
    - created_at / updated_at: UTC timestamps

    Index on (collection, pk):
        Index listing is "all rows of one collection in insertion order".
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from crudhub.database import Base


def new_document_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """
    One item of one document-backed collection.

    Lifecycle:
        1. Inserted by POST (id generated, body stored)
        2. Body replaced by PUT (id and created_at unchanged)
        3. Row deleted by DELETE
    """

    __tablename__ = "documents"

    pk: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Surrogate key; defines insertion order",
    )

    id: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        default=new_document_id,
        comment="Public item identifier returned as _id",
    )

    collection: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Name of the resource this document belongs to",
    )

    # JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
    body: Mapped[Dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
        comment="Item content without its identifier",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        Index("idx_documents_collection_pk", "collection", "pk"),
    )

    def to_item(self) -> Dict[str, Any]:
        """The API representation: `_id` first, then the stored fields."""
        return {"_id": self.id, **self.body}

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, collection='{self.collection}')>"
