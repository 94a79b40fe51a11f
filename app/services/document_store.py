"""
Durable document store backed by MongoDB through Beanie.

Every status change is a single conditional update_one: the filter pins the
document's current status to a legal predecessor of the target, and $set
writes status plus any result fields together. A reader therefore sees
either the old record or the new one, and a stale writer can never move a
document backwards.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.models.document import Document, DocumentInfo, DocumentStatus
from app.models.sequence import Sequence
from app.services.exceptions import PersistenceError

logger = logging.getLogger(__name__)

DOCUMENT_SEQUENCE = "documents"

# Newest first; ids break ties between uploads landing in the same millisecond
_NEWEST_FIRST = ("-uploaded_at", "-_id")


class DocumentStore:
    """
    All reads and writes of Document records go through here.
    Constructed once at startup and handed to the services that need it.
    """

    async def next_id(self) -> int:
        try:
            counter = await Sequence.get_motor_collection().find_one_and_update(
                {"_id": DOCUMENT_SEQUENCE},
                {"$inc": {"value": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PersistenceError(f"Could not allocate document id: {e}") from e
        return int(counter["value"])

    async def create(
        self,
        original_name: str,
        content: bytes,
        size: int,
        mime_type: str,
    ) -> Document:
        """Insert a new document in PENDING state and return it."""
        doc = Document(
            id=await self.next_id(),
            original_name=original_name,
            content=content,
            size=size,
            mime_type=mime_type,
            status=DocumentStatus.PENDING,
        )
        try:
            await doc.insert()
        except PyMongoError as e:
            raise PersistenceError(f"Could not save document: {e}") from e
        logger.info("Stored document %s (%s, %d bytes)", doc.id, mime_type, size)
        return doc

    async def get(self, document_id: int) -> Optional[Document]:
        try:
            return await Document.get(document_id)
        except PyMongoError as e:
            raise PersistenceError(f"Could not load document {document_id}: {e}") from e

    async def list_all(self) -> List[DocumentInfo]:
        try:
            return await Document.find_all().project(DocumentInfo).sort(*_NEWEST_FIRST).to_list()
        except PyMongoError as e:
            raise PersistenceError(f"Could not list documents: {e}") from e

    async def search_text(self, query: str) -> List[DocumentInfo]:
        """Case-insensitive substring match on extracted_text, newest first."""
        criteria = {"extracted_text": {"$regex": re.escape(query), "$options": "i"}}
        try:
            return await Document.find(criteria).project(DocumentInfo).sort(*_NEWEST_FIRST).to_list()
        except PyMongoError as e:
            raise PersistenceError(f"Could not search documents: {e}") from e

    async def delete(self, document_id: int) -> int:
        """Remove the document whatever its status. Returns rows removed (0 or 1)."""
        try:
            result = await Document.get_motor_collection().delete_one({"_id": document_id})
        except PyMongoError as e:
            raise PersistenceError(f"Could not delete document {document_id}: {e}") from e
        return result.deleted_count

    async def mark_processing(self, document_id: int) -> bool:
        return await self._transition(document_id, DocumentStatus.PROCESSING)

    async def mark_completed(self, document_id: int, text: str, confidence: float) -> bool:
        return await self._transition(
            document_id,
            DocumentStatus.COMPLETED,
            extracted_text=text,
            confidence=confidence,
        )

    async def mark_failed(self, document_id: int) -> bool:
        return await self._transition(document_id, DocumentStatus.FAILED)

    async def _transition(
        self,
        document_id: int,
        target: DocumentStatus,
        **fields: Any,
    ) -> bool:
        """
        Move a document to target if its current status allows it.
        Returns False when nothing matched (document gone or not in a
        predecessor state); the caller decides whether that matters.
        """
        allowed_from = [status.value for status in target.predecessors]
        changes: Dict[str, Any] = {"status": target.value, **fields}
        try:
            result = await Document.get_motor_collection().update_one(
                {"_id": document_id, "status": {"$in": allowed_from}},
                {"$set": changes},
            )
        except PyMongoError as e:
            raise PersistenceError(
                f"Could not move document {document_id} to {target.value}: {e}"
            ) from e
        return result.matched_count == 1
