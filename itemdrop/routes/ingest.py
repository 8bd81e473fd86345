"""
ItemDrop Backend - Ingest Route Handler
=========================================

What:  Handles POST /api/ingest for user-submitted items.
How:   Parses the JSON body, delegates to ItemService, returns the new item id.
Who:   Called by clients saving a note, link, and/or image.

Request Flow:
    1. Any method other than POST is answered 405 by the router (body unread)
    2. FastAPI parses the JSON body into IngestRequest (missing body → None)
    3. ItemService validates, uploads the image if present, inserts the item
    4. Return 200 with {"ok": true, "item_id": ...}
    5. Errors are turned into responses by the global exception handlers
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from itemdrop.database import get_db_session
from itemdrop.exceptions import ItemDropError, UnexpectedError
from itemdrop.schemas.item import ErrorResponse, IngestRequest, IngestResponse
from itemdrop.services.item_service import item_service
from itemdrop.services.object_store import ObjectStore, get_object_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Ingest"])


@router.post(
    "/ingest",
    status_code=200,
    response_model=IngestResponse,
    responses={
        200: {"description": "Item stored with status 'pending'", "model": IngestResponse},
        400: {"description": "Missing user_id or invalid image", "model": ErrorResponse},
        405: {"description": "Method other than POST", "model": ErrorResponse},
        500: {"description": "Upload, insert, or internal failure", "model": ErrorResponse},
    },
    summary="Ingest a note, link and/or image",
    description=(
        "Stores a submitted item with status 'pending'. When image_base64 is present "
        "the decoded JPEG is uploaded to the content bucket first and its path is "
        "recorded on the item."
    ),
)
async def ingest_item(
    payload: Optional[IngestRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
    store: ObjectStore = Depends(get_object_store),
) -> IngestResponse:
    """
    Ingest one item.

    Error responses (handled by global exception handlers):
        HTTP 400: ValidationError (missing user_id, bad image_base64)
        HTTP 500: ObjectStorageError / DatabaseError with the backend message
        HTTP 500: UnexpectedError → {"error": "internal_error", "message": ...}
    """
    try:
        return await item_service.ingest(db=db, store=store, payload=payload)
    except ItemDropError:
        raise
    except Exception as e:
        logger.error("Unexpected error in ingest: %s", str(e), exc_info=True)
        raise UnexpectedError(
            message=str(e),
            context={"error_type": type(e).__name__},
        ) from e
