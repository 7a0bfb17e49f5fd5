#!/usr/bin/env python3
"""
Tests for document routing and text extraction.
"""

import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from PIL import UnidentifiedImageError

from budget_parser.exceptions import DecodeFailure
from budget_parser.text_extractor import DocumentTextExtractor, clean_text


def make_page(text, layout_text=None):
    """Build a fake pdfplumber page."""
    page = MagicMock()

    def extract_text(layout=False, **kwargs):
        return layout_text if layout else text

    page.extract_text.side_effect = extract_text
    return page


class TestDocumentTextExtractor(unittest.TestCase):
    """Test cases for DocumentTextExtractor."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = Path(tempfile.mkdtemp())
        self.ocr = MagicMock()
        self.extractor = DocumentTextExtractor(self.ocr)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def touch(self, name, data=b"placeholder"):
        path = self.tmpdir / name
        path.write_bytes(data)
        return path

    def test_plain_text(self):
        path = self.touch("lista.txt", "2 unid Caderno\n\n3x Caneta Azul\n".encode('utf-8'))
        self.assertEqual(self.extractor.extract_lines(path), ["2 unid Caderno", "3x Caneta Azul"])

    def test_latin1_text(self):
        path = self.touch("lista.txt", "1 Lápis\n".encode('latin-1'))
        self.assertEqual(self.extractor.extract_lines(path), ["1 Lápis"])

    def test_missing_file(self):
        with self.assertRaises(DecodeFailure) as ctx:
            self.extractor.extract_text(self.tmpdir / "missing.pdf")
        self.assertEqual(ctx.exception.stage, "open")

    def test_unsupported_extension(self):
        path = self.touch("lista.xyz")
        with self.assertRaises(DecodeFailure) as ctx:
            self.extractor.extract_text(path)
        self.assertEqual(ctx.exception.stage, "route")
        self.assertIn(".xyz", str(ctx.exception))

    @patch('budget_parser.text_extractor.pdfplumber.open')
    def test_pdf_text_layer(self, mock_pdf):
        path = self.touch("lista.pdf")
        mock_pdf.return_value.__enter__.return_value.pages = [
            make_page("LISTA DE MATERIAL\n2 unid Caderno (cid:3)"),
            make_page("3x Caneta Azul"),
        ]

        lines = self.extractor.extract_lines(path)

        self.assertEqual(lines, ["LISTA DE MATERIAL", "2 unid Caderno", "3x Caneta Azul"])
        self.ocr.image_to_text.assert_not_called()

    @patch('budget_parser.text_extractor.pdfplumber.open')
    def test_pdf_layout_retry(self, mock_pdf):
        path = self.touch("lista.pdf")
        mock_pdf.return_value.__enter__.return_value.pages = [make_page("", "1 Mochila")]

        self.assertEqual(self.extractor.extract_lines(path), ["1 Mochila"])
        self.ocr.image_to_text.assert_not_called()

    @patch('budget_parser.text_extractor.pdfplumber.open')
    def test_scanned_pdf_page_uses_ocr(self, mock_pdf):
        path = self.touch("lista.pdf")
        mock_pdf.return_value.__enter__.return_value.pages = [
            make_page("2 unid Caderno"),
            make_page(None, "   "),
        ]
        self.ocr.image_to_text.return_value = "3x Caneta Azul\n"

        lines = self.extractor.extract_lines(path)

        self.assertEqual(lines, ["2 unid Caderno", "3x Caneta Azul"])
        self.ocr.image_to_text.assert_called_once()

    @patch('budget_parser.text_extractor.pdfplumber.open')
    def test_ocr_failure_on_pdf_page(self, mock_pdf):
        path = self.touch("lista.pdf")
        mock_pdf.return_value.__enter__.return_value.pages = [make_page("")]
        self.ocr.image_to_text.side_effect = RuntimeError("tesseract not installed")

        with self.assertRaises(DecodeFailure) as ctx:
            self.extractor.extract_text(path)
        self.assertEqual(ctx.exception.stage, "ocr")

    @patch('budget_parser.text_extractor.pdfplumber.open')
    def test_broken_pdf(self, mock_pdf):
        path = self.touch("lista.pdf")
        mock_pdf.side_effect = ValueError("not a PDF")

        with self.assertRaises(DecodeFailure) as ctx:
            self.extractor.extract_text(path)
        self.assertEqual(ctx.exception.stage, "pdf")
        self.assertEqual(ctx.exception.path, str(path))

    @patch('budget_parser.text_extractor.Document')
    def test_docx_paragraphs_and_tables(self, mock_document):
        path = self.touch("lista.docx")

        def cell(text):
            return MagicMock(text=text)

        row = MagicMock(cells=[cell("2"), cell("Caderno"), cell("Caderno ")])
        table = MagicMock(rows=[row])
        mock_document.return_value = MagicMock(
            paragraphs=[MagicMock(text="LISTA DE MATERIAL"), MagicMock(text=""),
                        MagicMock(text="3x Caneta Azul")],
            tables=[table],
        )

        lines = self.extractor.extract_lines(path)

        self.assertEqual(lines, ["LISTA DE MATERIAL", "3x Caneta Azul", "2 Caderno"])

    def test_image_goes_to_ocr(self):
        path = self.touch("foto.JPG")
        self.ocr.image_file_to_text.return_value = "1 Mochila\n2 unid Caderno"

        self.assertEqual(self.extractor.extract_lines(path), ["1 Mochila", "2 unid Caderno"])
        self.ocr.image_file_to_text.assert_called_once_with(path)

    def test_unreadable_image(self):
        path = self.touch("foto.png")
        self.ocr.image_file_to_text.side_effect = UnidentifiedImageError("cannot identify image file")

        with self.assertRaises(DecodeFailure) as ctx:
            self.extractor.extract_text(path)
        self.assertEqual(ctx.exception.stage, "ocr")


class TestCleanText(unittest.TestCase):

    def test_removes_cid_artifacts(self):
        self.assertEqual(clean_text("Caneta(cid:12) Azul  \r\nLápis"), "Caneta Azul\nLápis")

    def test_empty(self):
        self.assertEqual(clean_text(None), "")
        self.assertEqual(clean_text(""), "")


if __name__ == "__main__":
    unittest.main()
