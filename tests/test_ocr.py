"""Tests for the Tesseract text recognizer (Tesseract itself is stubbed out)."""

import pytest
from io import BytesIO

import pytesseract
from PIL import Image

from pocket_ledger.services.ocr import TesseractTextRecognizer, TextRecognitionFailedError


def png_bytes(mode="RGB"):
    buffer = BytesIO()
    Image.new(mode, (40, 20), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


class TestTesseractTextRecognizer:
    """Tests for page recognition."""

    @pytest.mark.asyncio
    async def test_recognize_passes_grayscale_page(self, monkeypatch):
        seen = {}

        def fake_image_to_string(image, lang):
            seen["mode"] = image.mode
            seen["lang"] = lang
            return "Apple 45.00\n"

        monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

        text = await TesseractTextRecognizer().recognize(png_bytes())

        assert text == "Apple 45.00\n"
        assert seen == {"mode": "L", "lang": "eng"}

    @pytest.mark.asyncio
    async def test_empty_page(self):
        with pytest.raises(TextRecognitionFailedError):
            await TesseractTextRecognizer().recognize(b"")

    @pytest.mark.asyncio
    async def test_not_an_image(self):
        with pytest.raises(TextRecognitionFailedError):
            await TesseractTextRecognizer().recognize(b"definitely not a png")

    @pytest.mark.asyncio
    async def test_tesseract_failure(self, monkeypatch):
        def broken(image, lang):
            raise pytesseract.TesseractError(1, "bad language")

        monkeypatch.setattr(pytesseract, "image_to_string", broken)

        with pytest.raises(TextRecognitionFailedError):
            await TesseractTextRecognizer().recognize(png_bytes("L"))
