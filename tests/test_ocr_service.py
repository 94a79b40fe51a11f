"""Tests for the Tesseract adapter; pytesseract itself is mocked out."""

from unittest.mock import patch

import pytest
import pytesseract

from app.services.exceptions import EngineFailure
from app.services.ocr_service import TesseractEngine, _mean_word_confidence
from tests.helpers import make_image_bytes


def _data(words, confs) -> dict:
    return {"text": words, "conf": confs}


class TestMeanWordConfidence:
    def test_averages_real_words(self) -> None:
        data = _data(["", "Invoice", "#42"], [-1, 90, 80])
        assert _mean_word_confidence(data) == pytest.approx(85.0)

    def test_ignores_blank_words_with_confidence(self) -> None:
        data = _data(["  ", "Total"], [95, 60])
        assert _mean_word_confidence(data) == pytest.approx(60.0)

    def test_accepts_string_confidences(self) -> None:
        data = _data(["a", "b"], ["70.5", "-1"])
        assert _mean_word_confidence(data) == pytest.approx(70.5)

    def test_no_words_is_zero(self) -> None:
        assert _mean_word_confidence(_data([], [])) == 0.0

    def test_clamped_to_range(self) -> None:
        assert _mean_word_confidence(_data(["x"], [250])) == 100.0


class TestTesseractEngine:
    async def test_returns_text_and_confidence(self) -> None:
        engine = TesseractEngine()
        with patch.object(
            pytesseract, "image_to_string", return_value="Invoice #42\n"
        ) as to_string, patch.object(
            pytesseract, "image_to_data", return_value=_data(["Invoice", "#42"], [92, 88])
        ):
            result = await engine.recognize(make_image_bytes(), "eng")

        assert result.text == "Invoice #42"
        assert result.confidence == pytest.approx(90.0)
        assert to_string.call_args.kwargs["lang"] == "eng"

    async def test_language_hint_is_passed_through(self) -> None:
        engine = TesseractEngine()
        with patch.object(pytesseract, "image_to_string", return_value="") as to_string, patch.object(
            pytesseract, "image_to_data", return_value=_data([], [])
        ) as to_data:
            await engine.recognize(make_image_bytes(), "deu")

        assert to_string.call_args.kwargs["lang"] == "deu"
        assert to_data.call_args.kwargs["lang"] == "deu"

    async def test_undecodable_image_is_engine_failure(self) -> None:
        engine = TesseractEngine()
        with pytest.raises(EngineFailure):
            await engine.recognize(b"definitely not an image", "eng")

    async def test_tesseract_error_is_engine_failure(self) -> None:
        engine = TesseractEngine()
        with patch.object(
            pytesseract,
            "image_to_string",
            side_effect=pytesseract.TesseractError(1, "boom"),
        ):
            with pytest.raises(EngineFailure):
                await engine.recognize(make_image_bytes(), "eng")

    async def test_missing_binary_is_engine_failure(self) -> None:
        engine = TesseractEngine()
        with patch.object(
            pytesseract,
            "image_to_string",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(EngineFailure):
                await engine.recognize(make_image_bytes(), "eng")

    def test_custom_binary_path(self) -> None:
        original = pytesseract.pytesseract.tesseract_cmd
        try:
            TesseractEngine(tesseract_cmd="/opt/tesseract/bin/tesseract")
            assert pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"
        finally:
            pytesseract.pytesseract.tesseract_cmd = original
