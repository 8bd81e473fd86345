"""
ItemDrop Backend - Item Service (Ingest Orchestrator)
=======================================================

What:  Runs the ingest workflow for one submission.
How:   Composes the object store and the database session it is handed.
Who:   Called by the POST /api/ingest route handler.

Orchestration Flow:
    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│  Decode    │───▶│  Upload to   │───▶│  Insert  │
    │ user_id  │    │  image     │    │  bucket      │    │  item    │
    └──────────┘    └────────────┘    └──────────────┘    └──────────┘
                     (only when image_base64 is sent)

    Each step either succeeds or ends the request:
    - Validation failure → ValidationError (400), nothing written
    - Upload failure     → ObjectStorageError (500), no insert
    - Insert failure     → DatabaseError (500), uploaded image stays as an orphan

ItemService keeps no state; the session and store arrive with each call.
"""

import base64
import binascii
import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from itemdrop.config import settings
from itemdrop.exceptions import DatabaseError, ValidationError
from itemdrop.models.item import STATUS_PENDING, Item
from itemdrop.schemas.item import IngestRequest, IngestResponse
from itemdrop.services.object_store import JPEG_CONTENT_TYPE, ObjectStore

logger = logging.getLogger(__name__)


def build_image_path(user_id: str) -> str:
    """Object key for a new image: <user_id>/<random hex token>.jpg"""
    return f"{user_id}/{uuid.uuid4().hex}.jpg"


class ItemService:
    """
    Business logic for item ingestion.

    Error Handling Strategy:
        Client mistakes become ValidationError. Backend failures keep the
        backend's message (ObjectStorageError from the store, DatabaseError
        wrapping SQLAlchemy errors). Nothing is retried or compensated.
    """

    def __init__(self, max_image_size: Optional[int] = None):
        self.max_image_size = max_image_size or settings.max_image_size

    def decode_image(self, image_base64: str) -> bytes:
        """
        Decode the submitted base64 image.

        Whitespace (line-wrapped base64) is ignored and missing trailing "="
        padding is restored. Anything else outside the base64 alphabet, a
        truncated quantum, or an empty result is a ValidationError.
        """
        compact = "".join(image_base64.split())
        compact += "=" * (-len(compact) % 4)
        try:
            data = base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(
                message="invalid image_base64",
                field="image_base64",
                context={"decode_error": str(e)},
            ) from e

        if not data:
            raise ValidationError(message="invalid image_base64", field="image_base64")

        if len(data) > self.max_image_size:
            raise ValidationError(
                message="image too large",
                field="image_base64",
                context={"size": len(data), "max_size": self.max_image_size},
            )
        return data

    async def upload_image(self, store: ObjectStore, user_id: str, data: bytes) -> str:
        """Write the image to the content bucket and return its object key."""
        image_path = build_image_path(user_id)
        await store.upload(
            bucket=settings.content_bucket,
            path=image_path,
            data=data,
            content_type=JPEG_CONTENT_TYPE,
        )
        return image_path

    async def insert_item(
        self,
        db: AsyncSession,
        user_id: str,
        source_url: Optional[str],
        raw_text: Optional[str],
        image_path: Optional[str],
    ) -> Item:
        """
        Insert one `pending` item and return it with its assigned id.

        The row is committed here so a failing insert surfaces inside the
        request and maps to its own 500 response.
        """
        item = Item(
            user_id=user_id,
            source_url=source_url,
            raw_text=raw_text,
            image_path=image_path,
            status=STATUS_PENDING,
        )
        try:
            db.add(item)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            original = getattr(e, "orig", None)
            message = str(original) if original is not None else str(e)
            logger.error("Insert into items failed for user %s: %s", user_id, message)
            raise DatabaseError(
                message=message,
                context={"user_id": user_id, "image_path": image_path},
            ) from e
        return item

    async def ingest(
        self,
        db: AsyncSession,
        store: ObjectStore,
        payload: Optional[IngestRequest],
    ) -> IngestResponse:
        """
        Complete workflow: validate → (decode → upload) → insert.

        Args:
            db: Async database session (injected by FastAPI)
            store: Object store for the content bucket (injected by FastAPI)
            payload: Parsed request body; None when no body was sent

        Returns:
            IngestResponse carrying the new item id

        Raises:
            ValidationError: user_id missing, or image_base64 not decodable
            ObjectStorageError: image upload failed
            DatabaseError: item insert failed
        """
        payload = payload or IngestRequest()

        if not payload.user_id:
            raise ValidationError(message="missing user_id", field="user_id")

        image_path: Optional[str] = None
        if payload.image_base64:
            data = self.decode_image(payload.image_base64)
            image_path = await self.upload_image(store, payload.user_id, data)
            logger.info("Image uploaded for user %s: %s", payload.user_id, image_path)

        item = await self.insert_item(
            db,
            user_id=payload.user_id,
            source_url=payload.source_url,
            raw_text=payload.note,
            image_path=image_path,
        )
        logger.info("Item %s created for user %s (image=%s)", item.id, item.user_id, bool(image_path))

        return IngestResponse(ok=True, item_id=item.id)


item_service = ItemService()
