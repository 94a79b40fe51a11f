"""
OCR engine adapter.

The pipeline only needs one capability: image bytes in, text plus a 0-100
confidence out, or a single EngineFailure. Tesseract is CPU-bound and
blocking, so the production engine runs it in a thread pool to keep the
event loop free.
"""

import asyncio
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from app.services.exceptions import EngineFailure

logger = logging.getLogger(__name__)


@dataclass
class OCRResult:
    """Text extracted from one image and the engine's confidence in it (0-100)."""

    text: str
    confidence: float


class OCREngine(ABC):
    """Anything that can turn image bytes into text."""

    @abstractmethod
    async def recognize(self, content: bytes, language: str) -> OCRResult:
        """Return extracted text; raise EngineFailure if the image cannot be read."""


def _mean_word_confidence(data: dict) -> float:
    """Average Tesseract word confidence, ignoring non-word boxes (conf == -1)."""
    confidences: List[float] = []
    for word, conf in zip(data.get("text", []), data.get("conf", [])):
        try:
            value = float(conf)
        except (TypeError, ValueError):
            continue
        if value >= 0 and str(word).strip():
            confidences.append(value)
    if not confidences:
        return 0.0
    return min(100.0, max(0.0, sum(confidences) / len(confidences)))


class TesseractEngine(OCREngine):
    """
    pytesseract-backed engine. tesseract_cmd points at a non-default
    tesseract binary; None uses whatever is on PATH.
    """

    def __init__(self, tesseract_cmd: Optional[str] = None) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    async def recognize(self, content: bytes, language: str) -> OCRResult:
        try:
            return await asyncio.to_thread(self._recognize_sync, content, language)
        except EngineFailure:
            raise
        except Exception as e:
            raise EngineFailure(f"Tesseract failed: {e}") from e

    def _recognize_sync(self, content: bytes, language: str) -> OCRResult:
        """Blocking OCR; call via asyncio.to_thread."""
        try:
            image = Image.open(io.BytesIO(content))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise EngineFailure(f"Could not decode image: {e}") from e

        text = pytesseract.image_to_string(image, lang=language)
        data = pytesseract.image_to_data(
            image,
            lang=language,
            output_type=pytesseract.Output.DICT,
        )
        confidence = _mean_word_confidence(data)
        logger.debug("Tesseract read %d characters, confidence %.1f", len(text), confidence)
        return OCRResult(text=text.strip(), confidence=confidence)
