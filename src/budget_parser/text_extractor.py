#!/usr/bin/env python3
"""
Document text extraction.
Routes a file to the right reader by extension and returns its text lines.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import pdfplumber
from docx import Document
from PIL import UnidentifiedImageError

from .engine import split_lines
from .exceptions import DecodeFailure
from .ocr import OCREngine

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp', '.gif', '.webp'}
SUPPORTED_EXTENSIONS = {'.txt', '.pdf', '.docx'} | IMAGE_EXTENSIONS

# Pages rasterised for OCR when they have no text layer
OCR_RESOLUTION = 300


class DocumentTextExtractor:
    """Text extractor for plain text, PDF, DOCX and image documents."""

    def __init__(self, ocr_engine: Optional[OCREngine] = None):
        self.ocr = ocr_engine or OCREngine()
        self.readers: Dict[str, Tuple[str, Callable[[Path], str]]] = {
            '.txt': ('txt', self._read_txt),
            '.pdf': ('pdf', self._read_pdf),
            '.docx': ('docx', self._read_docx),
        }
        for ext in IMAGE_EXTENSIONS:
            self.readers[ext] = ('ocr', self._read_image)

    def extract_text(self, path: Union[str, Path]) -> str:
        """
        Extract the text of a document.

        Args:
            path: Path to a .txt, .pdf, .docx or image file

        Returns:
            Extracted text

        Raises:
            DecodeFailure: the file is missing, unsupported or unreadable
        """
        path = Path(path)
        if not path.is_file():
            raise DecodeFailure(str(path), "open", "file not found")

        ext = path.suffix.lower()
        if ext not in self.readers:
            raise DecodeFailure(str(path), "route", f"unsupported file format: {ext or '(none)'}")

        stage, reader = self.readers[ext]
        logger.info(f"[ROUTER] Using the {stage} reader for {path.name}")
        try:
            text = reader(path)
        except DecodeFailure:
            raise
        except Exception as e:
            logger.error(f"❌ {stage} reader failed for {path}: {e}")
            raise DecodeFailure(str(path), stage, str(e)) from e

        logger.info(f"Extracted {len(text)} characters from {path.name}")
        return text

    def extract_lines(self, path: Union[str, Path]) -> List[str]:
        return split_lines(self.extract_text(path))

    def _read_txt(self, path: Path) -> str:
        try:
            return path.read_text(encoding='utf-8')
        except UnicodeDecodeError:
            logger.warning(f"{path.name} is not UTF-8, reading as Latin-1")
            return path.read_text(encoding='latin-1')

    def _read_pdf(self, path: Path) -> str:
        pages = []
        with pdfplumber.open(path) as pdf:
            for i, page in enumerate(pdf.pages):
                page_text = page.extract_text() or ""
                if not page_text.strip():
                    page_text = page.extract_text(layout=True, x_tolerance=3, y_tolerance=3) or ""

                if not page_text.strip():
                    logger.info(f"Page {i + 1} has no text layer, running OCR")
                    try:
                        image = page.to_image(resolution=OCR_RESOLUTION).original
                        page_text = self.ocr.image_to_text(image)
                    except Exception as e:
                        raise DecodeFailure(str(path), "ocr", f"page {i + 1}: {e}") from e

                pages.append(clean_text(page_text))

        return "\n".join(pages)

    def _read_docx(self, path: Path) -> str:
        document = Document(str(path))
        lines = [paragraph.text for paragraph in document.paragraphs]

        for table in document.tables:
            for row in table.rows:
                cells = []
                for cell in row.cells:
                    # Merged cells repeat across the row
                    text = cell.text.strip()
                    if text and text not in cells:
                        cells.append(text)
                if cells:
                    lines.append(" ".join(cells))

        return "\n".join(lines)

    def _read_image(self, path: Path) -> str:
        try:
            return self.ocr.image_file_to_text(path)
        except UnidentifiedImageError as e:
            raise DecodeFailure(str(path), "ocr", f"not a readable image: {e}") from e


def clean_text(text: str) -> str:
    """Remove CID encoding artifacts and trailing whitespace from extracted text."""
    if not text:
        return ""

    text = re.sub(r'\(cid:\d+\)', '', text)
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    return "\n".join(line.rstrip() for line in text.split('\n'))


def extract_document_lines(path: Union[str, Path], language: Optional[str] = None) -> List[str]:
    """
    Convenience function to extract the non-blank lines of a document.

    Args:
        path: Path to the document
        language: Tesseract language for scanned documents

    Returns:
        Lines in document order
    """
    ocr = OCREngine(language) if language else OCREngine()
    lines = DocumentTextExtractor(ocr).extract_lines(path)
    logger.info(f"Extracted {len(lines)} lines from {path}")
    return lines
