"""Read-side operations over stored documents, plus deletion."""

import logging
from typing import List

from app.models.document import Document, DocumentInfo
from app.services.document_store import DocumentStore
from app.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class QueryService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def list_documents(self) -> List[DocumentInfo]:
        """All documents, newest upload first."""
        return await self._store.list_all()

    async def get_document(self, document_id: int) -> Document:
        doc = await self._store.get(document_id)
        if doc is None:
            raise NotFoundError(document_id)
        return doc

    async def search_documents(self, query: str) -> List[DocumentInfo]:
        """
        Documents whose extracted text contains query, ignoring case.
        Documents without text yet never match. A blank query lists everything.
        """
        if not query or not query.strip():
            return await self.list_documents()
        return await self._store.search_text(query)

    async def delete_document(self, document_id: int) -> int:
        """Delete regardless of status. Deleting a missing id is not an error."""
        deleted = await self._store.delete(document_id)
        if deleted:
            logger.info("Deleted document %s", document_id)
        else:
            logger.info("Delete requested for unknown document %s; nothing removed", document_id)
        return deleted
