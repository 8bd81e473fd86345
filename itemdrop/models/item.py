"""
ItemDrop Backend - Item SQLAlchemy Model
==========================================

What:  ORM model representing the `items` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ItemService to insert new items.

Table Design:
    - UUID primary key, assigned on insert
    - user_id: opaque identifier of the submitting user (indexed)
    - source_url / raw_text: optional submission fields, stored as given
    - image_path: object key in the content bucket, NULL when no image was sent
    - status: 'pending' at creation; later transitions belong to the processor
    - created_at: UTC with timezone

Column types are the dialect-neutral SQLAlchemy types so the same model runs
against PostgreSQL in production and SQLite in tests. Server-side defaults
(gen_random_uuid(), CURRENT_TIMESTAMP) live in the Alembic migration.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from itemdrop.database import Base

STATUS_PENDING = "pending"


class Item(Base):
    """
    One ingested submission.

    Lifecycle:
        1. Inserted by POST /api/ingest with status = 'pending'
        2. Picked up and transitioned by a downstream processor (not this service)
    """

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Assigned at flush; the migration adds gen_random_uuid() for other writers",
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Opaque identifier of the submitting user",
    )

    source_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Where the submission came from, if known",
    )

    raw_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Free-text note sent with the submission",
    )

    # Format: <user_id>/<token>.jpg inside the content bucket
    image_path: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        comment="Object key of the uploaded image in the content bucket",
    )

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=STATUS_PENDING,
        comment="Processing state: pending, processed, failed",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When this item was ingested (UTC)",
    )

    __table_args__ = (
        Index("idx_items_created_at", "created_at"),
        Index("idx_items_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Item(id={self.id}, user_id='{self.user_id}', "
            f"status='{self.status}', image_path={self.image_path!r})>"
        )
