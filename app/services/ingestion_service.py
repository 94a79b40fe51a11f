"""
Upload handling: validate, persist as pending, hand off to the background.

Validation happens before anything touches the store, so a rejected upload
never leaves a partial record behind.
"""

import logging
from typing import Optional

from app.models.document import Document
from app.services.document_store import DocumentStore
from app.services.exceptions import ValidationError
from app.workers.task_runner import TaskScheduler

logger = logging.getLogger(__name__)


class IngestionService:
    def __init__(
        self,
        store: DocumentStore,
        scheduler: TaskScheduler,
        max_upload_bytes: int,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._max_upload_bytes = max_upload_bytes

    def validate(self, content: bytes, mime_type: Optional[str], size: int) -> None:
        if not content:
            raise ValidationError("No file uploaded")
        if not mime_type or not mime_type.lower().startswith("image/"):
            raise ValidationError("Only image files are allowed")
        if size > self._max_upload_bytes:
            limit_mb = self._max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"File size exceeds {limit_mb:g} MB")

    async def upload(
        self,
        original_name: str,
        content: bytes,
        mime_type: Optional[str],
        size: Optional[int] = None,
    ) -> Document:
        """
        Store an uploaded image with status=pending and schedule OCR for it.
        Returns as soon as the record is written; OCR runs later.
        """
        if size is None:
            size = len(content)
        # Declared size can understate what was actually sent
        self.validate(content, mime_type, max(size, len(content)))

        doc = await self._store.create(
            original_name=original_name,
            content=content,
            size=size,
            mime_type=mime_type,
        )
        self._scheduler.schedule(doc.id)
        logger.info("Accepted upload %r as document %s; processing scheduled", original_name, doc.id)
        return doc
