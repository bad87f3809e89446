"""Create documents table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `documents` table shared by every document-backed resource.
How:   JSONB body on PostgreSQL, plain JSON elsewhere; see crudhub/models/document.py.

Rollback: downgrade() drops the table entirely (destructive: all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the documents table with its ordering index."""
    op.create_table(
        "documents",

        # Surrogate key: defines insertion order within a collection
        sa.Column("pk", sa.Integer(), autoincrement=True, nullable=False),

        # Public identifier returned to clients as _id
        sa.Column("id", sa.String(32), nullable=False),

        # Resource name (teas, games, ...)
        sa.Column("collection", sa.String(64), nullable=False),

        sa.Column(
            "body",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),

        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),

        sa.PrimaryKeyConstraint("pk"),
        sa.UniqueConstraint("id"),
    )

    # Index listing reads one collection in pk order
    op.create_index(
        "idx_documents_collection_pk",
        "documents",
        ["collection", "pk"],
    )


def downgrade() -> None:
    """Drop the documents table and every stored item."""
    op.drop_index("idx_documents_collection_pk", table_name="documents")
    op.drop_table("documents")
