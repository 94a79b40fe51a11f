"""
Background OCR worker.

Runs once per uploaded document, scheduled by the ingestion service through
the task runner: pending -> processing -> completed | failed.

Why background: OCR on a large scan can take seconds to minutes. Doing it in
the request handler would hold the client's connection open, so the upload
returns as soon as the record exists and the client polls GET /documents/{id}.

Nothing here is retried. A failed document stays failed; a process that dies
mid-OCR leaves its document in processing. Re-uploading is the only recovery.
"""

import asyncio
import logging
import math
from typing import Optional

from app.models.document import DocumentStatus
from app.services.document_store import DocumentStore
from app.services.exceptions import EngineFailure, NotFoundError, PersistenceError
from app.services.ocr_service import OCREngine, OCRResult

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """
    Drives a single document through OCR. language is the hint passed to the
    engine; timeout_seconds bounds the OCR call (None waits forever).
    """

    def __init__(
        self,
        store: DocumentStore,
        engine: OCREngine,
        language: str = "eng",
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._language = language
        self._timeout_seconds = timeout_seconds

    async def process(self, document_id: int) -> Optional[DocumentStatus]:
        """
        Full pipeline for one document. Returns the status the document ends in,
        or None if it was deleted before its result could be saved.
        Raises NotFoundError if the document does not exist.
        """
        doc = await self._store.get(document_id)
        if doc is None:
            raise NotFoundError(document_id)

        # Mark as processing before OCR so GET /documents/{id} shows progress
        if not await self._store.mark_processing(document_id):
            current = await self._store.get(document_id)
            if current is None:
                logger.info("Document %s was deleted before OCR started; skipping.", document_id)
                return None
            logger.info("Document %s already in status %s; skipping.", document_id, current.status.value)
            return current.status
        logger.info("Started OCR for document %s (%s)", document_id, doc.original_name)

        try:
            result = self._checked(await self._recognize(doc.content))
        except Exception as e:
            logger.exception("OCR failed for document %s: %s", document_id, e)
            return await self._fail(document_id)

        try:
            saved = await self._store.mark_completed(document_id, result.text, result.confidence)
        except PersistenceError:
            logger.exception("Could not save OCR result for document %s", document_id)
            return await self._fail(document_id)

        if not saved:
            # Deleted while OCR was running
            logger.warning("Document %s vanished before its OCR result was saved", document_id)
            return None
        logger.info(
            "OCR completed for document %s; %d characters, confidence %.1f",
            document_id,
            len(result.text),
            result.confidence,
        )
        return DocumentStatus.COMPLETED

    async def _recognize(self, content: bytes) -> OCRResult:
        call = self._engine.recognize(content, self._language)
        if self._timeout_seconds is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._timeout_seconds)
        except asyncio.TimeoutError as e:
            raise EngineFailure(f"OCR timed out after {self._timeout_seconds:g}s") from e

    @staticmethod
    def _checked(result: OCRResult) -> OCRResult:
        """Bring an engine result into the shape the store accepts: str text, confidence in [0, 100]."""
        if not isinstance(result.text, str):
            raise EngineFailure(f"Engine returned non-text result: {type(result.text).__name__}")
        try:
            confidence = float(result.confidence)
        except (TypeError, ValueError) as e:
            raise EngineFailure(f"Engine returned unusable confidence {result.confidence!r}") from e
        if math.isnan(confidence):
            raise EngineFailure("Engine returned NaN confidence")
        return OCRResult(text=result.text, confidence=min(100.0, max(0.0, confidence)))

    async def _fail(self, document_id: int) -> DocumentStatus:
        await self._store.mark_failed(document_id)
        logger.info("Document %s marked failed", document_id)
        return DocumentStatus.FAILED
