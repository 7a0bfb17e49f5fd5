#!/usr/bin/env python3
"""
OCR for scanned supply lists.
Cleans up photos and scans with Pillow before handing them to Tesseract.
"""

import logging
from pathlib import Path
from typing import Union

import pytesseract
from PIL import Image, ImageFilter, ImageOps

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "por"
FALLBACK_LANGUAGE = "eng"
# Tesseract reads small text poorly; smaller images are upscaled to this width
MIN_OCR_WIDTH = 1600


class OCREngine:
    """Tesseract wrapper with preprocessing tuned for printed and photographed lists."""

    def __init__(self, language: str = DEFAULT_LANGUAGE, config: str = "--psm 6"):
        self.language = language
        self.config = config

    def preprocess(self, image: Image.Image) -> Image.Image:
        """
        Grayscale, upscale, stretch contrast and sharpen.

        Args:
            image: Source image in any mode

        Returns:
            Image ready for OCR
        """
        image = ImageOps.exif_transpose(image)
        gray = ImageOps.grayscale(image)

        if gray.width < MIN_OCR_WIDTH:
            scale = MIN_OCR_WIDTH / gray.width
            gray = gray.resize((MIN_OCR_WIDTH, int(gray.height * scale)), Image.LANCZOS)

        enhanced = ImageOps.autocontrast(gray, cutoff=1)
        return enhanced.filter(ImageFilter.SHARPEN)

    def image_to_text(self, image: Image.Image) -> str:
        processed = self.preprocess(image)
        try:
            text = pytesseract.image_to_string(processed, lang=self.language, config=self.config)
        except pytesseract.TesseractError as e:
            if self.language == FALLBACK_LANGUAGE:
                raise
            # Usually a missing language pack
            logger.warning(f"Tesseract failed with lang={self.language} ({e}), retrying with {FALLBACK_LANGUAGE}")
            text = pytesseract.image_to_string(processed, lang=FALLBACK_LANGUAGE, config=self.config)

        logger.info(f"OCR extracted {len(text)} characters")
        return text

    def image_file_to_text(self, image_path: Union[str, Path]) -> str:
        with Image.open(image_path) as image:
            image.load()
            return self.image_to_text(image)
