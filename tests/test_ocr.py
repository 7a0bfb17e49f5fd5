#!/usr/bin/env python3
"""
Tests for OCR preprocessing and the Tesseract language fallback.
Tesseract itself is mocked out.
"""

import unittest
from unittest.mock import patch

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytesseract
from PIL import Image

from budget_parser.ocr import MIN_OCR_WIDTH, OCREngine


class TestOCREngine(unittest.TestCase):
    """Test cases for OCREngine."""

    def setUp(self):
        """Set up test fixtures."""
        self.engine = OCREngine()
        self.image = Image.new("RGB", (100, 50), "white")

    def test_preprocess_grayscale_and_upscale(self):
        processed = self.engine.preprocess(self.image)
        self.assertEqual(processed.mode, "L")
        self.assertEqual(processed.size, (MIN_OCR_WIDTH, 800))

    def test_preprocess_keeps_large_images(self):
        large = Image.new("RGB", (2000, 1000), "white")
        self.assertEqual(self.engine.preprocess(large).size, (2000, 1000))

    @patch('budget_parser.ocr.pytesseract.image_to_string')
    def test_image_to_text(self, mock_ocr):
        mock_ocr.return_value = "2 unid Caderno\n"

        self.assertEqual(self.engine.image_to_text(self.image), "2 unid Caderno\n")
        self.assertEqual(mock_ocr.call_args.kwargs["lang"], "por")
        self.assertEqual(mock_ocr.call_args.kwargs["config"], "--psm 6")

    @patch('budget_parser.ocr.pytesseract.image_to_string')
    def test_missing_language_falls_back_to_english(self, mock_ocr):
        mock_ocr.side_effect = [pytesseract.TesseractError(1, "missing por.traineddata"), "Caneta"]

        self.assertEqual(self.engine.image_to_text(self.image), "Caneta")
        self.assertEqual(mock_ocr.call_count, 2)
        self.assertEqual(mock_ocr.call_args.kwargs["lang"], "eng")

    @patch('budget_parser.ocr.pytesseract.image_to_string')
    def test_english_failure_is_raised(self, mock_ocr):
        mock_ocr.side_effect = pytesseract.TesseractError(1, "broken")

        with self.assertRaises(pytesseract.TesseractError):
            OCREngine("eng").image_to_text(self.image)
        self.assertEqual(mock_ocr.call_count, 1)


if __name__ == "__main__":
    unittest.main()
