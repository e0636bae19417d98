"""
OCR Service using Tesseract

The OCR step is an external collaborator: it turns one captured bill
page into plain text. Everything after that (finding item lines and
prices) is the bill text extractor's job, not this service's.

This service handles:
1. Decoding the page image with Pillow
2. Normalizing orientation and converting to grayscale
3. Running Tesseract in a worker thread so the event loop is not blocked
"""

import asyncio
from abc import ABC, abstractmethod
from io import BytesIO

import pytesseract
from PIL import Image, ImageOps

from pocket_ledger.config import get_settings


class OCRError(Exception):
    """Base exception for OCR errors."""
    pass


class TextRecognitionFailedError(OCRError):
    """A page image could not be turned into text."""
    pass


class TextRecognizerInterface(ABC):
    """
    Abstract interface for text recognition.

    One call per captured page.
    """

    @abstractmethod
    async def recognize(self, image_bytes: bytes) -> str:
        """
        Recognize the text on one page image.

        Returns:
            The recognized text, lines separated by newlines

        Raises:
            TextRecognitionFailedError: If the page can't be read
        """
        pass


class TesseractTextRecognizer(TextRecognizerInterface):
    """Text recognition backed by a local Tesseract install."""

    def __init__(self):
        self._settings = get_settings().ocr
        if self._settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._settings.tesseract_cmd

    def _recognize_sync(self, image_bytes: bytes) -> str:
        with Image.open(BytesIO(image_bytes)) as img:
            # Phone photos carry their rotation in EXIF
            upright = ImageOps.exif_transpose(img)
            gray = upright.convert("L") if upright.mode != "L" else upright
            return pytesseract.image_to_string(
                gray,
                lang=self._settings.language,
            )

    async def recognize(self, image_bytes: bytes) -> str:
        if not image_bytes:
            raise TextRecognitionFailedError("Empty page image")
        try:
            return await asyncio.to_thread(self._recognize_sync, image_bytes)
        except (OSError, pytesseract.TesseractError) as e:
            # UnidentifiedImageError and TesseractNotFoundError are OSErrors
            raise TextRecognitionFailedError(f"Failed to read page: {e}")
