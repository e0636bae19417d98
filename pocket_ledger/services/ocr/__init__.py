"""OCR services package."""

from pocket_ledger.services.ocr.tesseract_service import (
    OCRError,
    TesseractTextRecognizer,
    TextRecognitionFailedError,
    TextRecognizerInterface,
)

__all__ = [
    "OCRError",
    "TesseractTextRecognizer",
    "TextRecognitionFailedError",
    "TextRecognizerInterface",
]
