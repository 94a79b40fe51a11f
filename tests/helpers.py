"""Test doubles shared across the suite."""

import asyncio
import io
from typing import List, Optional, Tuple

from PIL import Image

from app.services.ocr_service import OCREngine, OCRResult


class FakeOCREngine(OCREngine):
    """
    Stand-in for Tesseract. Returns a fixed result, or raises error if given.
    With a gate, recognize() blocks until the gate is set so tests can look
    at the document while it is still processing.
    """

    def __init__(
        self,
        text: str = "Invoice #42",
        confidence: float = 91.5,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.text = text
        self.confidence = confidence
        self.error = error
        self.gate = gate
        self.started = asyncio.Event()
        self.calls: List[Tuple[bytes, str]] = []

    async def recognize(self, content: bytes, language: str) -> OCRResult:
        self.calls.append((content, language))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return OCRResult(text=self.text, confidence=self.confidence)


class RecordingScheduler:
    """Scheduler that only remembers what it was asked to run."""

    def __init__(self) -> None:
        self.scheduled: List[int] = []

    def schedule(self, document_id: int) -> None:
        self.scheduled.append(document_id)


def make_image_bytes(fmt: str = "PNG", size: Tuple[int, int] = (120, 40)) -> bytes:
    img = Image.new("RGB", size, "white")
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()
