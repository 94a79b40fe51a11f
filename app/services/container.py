"""
Explicit wiring of the pipeline components.

Nothing reaches for a global store or engine: everything is built here and
passed down, so tests can swap in an in-memory database or a fake engine.
"""

from dataclasses import dataclass
from typing import Optional

from app.config import Settings
from app.services.document_store import DocumentStore
from app.services.ingestion_service import IngestionService
from app.services.ocr_service import OCREngine, TesseractEngine
from app.services.query_service import QueryService
from app.workers.document_processor import DocumentProcessor
from app.workers.task_runner import BackgroundTaskRunner


@dataclass
class Services:
    store: DocumentStore
    processor: DocumentProcessor
    runner: BackgroundTaskRunner
    ingestion: IngestionService
    queries: QueryService


def build_services(
    settings: Settings,
    ocr_engine: Optional[OCREngine] = None,
    store: Optional[DocumentStore] = None,
) -> Services:
    """Build the service graph. Beanie must already be initialized."""
    store = store or DocumentStore()
    engine = ocr_engine or TesseractEngine(settings.tesseract_cmd)
    processor = DocumentProcessor(
        store,
        engine,
        language=settings.ocr_language,
        timeout_seconds=settings.ocr_timeout_seconds,
    )
    runner = BackgroundTaskRunner(processor.process)
    return Services(
        store=store,
        processor=processor,
        runner=runner,
        ingestion=IngestionService(store, runner, settings.max_upload_bytes),
        queries=QueryService(store),
    )
