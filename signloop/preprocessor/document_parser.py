"""
Document parser that turns uploaded bytes into plain text.
"""

import io
import asyncio
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Iterable

import fitz  # PyMuPDF for PDF
import pytesseract
from PIL import Image

from signloop.config import Config
from signloop.exceptions import ExtractionError, UnsupportedMediaTypeError

logger = logging.getLogger(__name__)

SCANNED_PDF_PLACEHOLDER = "[OCR required - scanned PDF detected]"


class ExtractionMethod(str, Enum):
    """Strategy that produced an extraction result."""
    DIRECT_PARSE = "pdf_parse"
    SCANNED_FALLBACK = "pdf_ocr_fallback"
    IMAGE_OCR = "tesseract_ocr"


@dataclass(frozen=True)
class ExtractionResult:
    """Text recovered from a single upload."""
    text: str
    method: ExtractionMethod
    confidence: Optional[float] = None


def validate_mime_type(mime_type: str, allowed: Optional[Iterable[str]] = None) -> None:
    """
    Check a declared MIME type against the allow-list.

    Args:
        mime_type: Declared content type of the upload
        allowed: Override for the allow-list (defaults to Config.ALLOWED_MIME_TYPES)

    Raises:
        UnsupportedMediaTypeError: If the type is not allowed
    """
    allowed = list(allowed) if allowed is not None else Config().ALLOWED_MIME_TYPES
    if mime_type not in allowed:
        raise UnsupportedMediaTypeError(mime_type, allowed)


def classify_pdf_text(text: str, page_count: int, min_text_density: int = 50,
                      max_scanned_chars: int = 500) -> ExtractionResult:
    """
    Decide whether directly parsed PDF text is usable or the PDF looks scanned.

    Args:
        text: Trimmed text from the direct parse
        page_count: Number of pages in the document
        min_text_density: Average characters per page below which the PDF looks scanned
        max_scanned_chars: Total characters below which the PDF looks scanned

    Returns:
        ExtractionResult tagged DIRECT_PARSE or SCANNED_FALLBACK
    """
    page_count = max(page_count, 1)
    avg_chars_per_page = len(text) / page_count

    if avg_chars_per_page < min_text_density and len(text) < max_scanned_chars:
        logger.warning(
            "PDF looks scanned (%d chars over %d pages), OCR would be needed",
            len(text), page_count
        )
        return ExtractionResult(
            text=text or SCANNED_PDF_PLACEHOLDER,
            method=ExtractionMethod.SCANNED_FALLBACK,
            confidence=0,
        )

    return ExtractionResult(text=text, method=ExtractionMethod.DIRECT_PARSE, confidence=100)


class DocumentParser:
    """Text extractor dispatching on the declared MIME type."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize document parser.

        Args:
            config: Configuration settings, or use defaults
        """
        self.config = config or Config()

    async def extract(self, file_content: bytes, mime_type: str) -> ExtractionResult:
        """
        Extract text from file content based on its MIME type.

        Args:
            file_content: Binary file content
            mime_type: Declared MIME type of the file

        Returns:
            ExtractionResult with text, method and confidence

        Raises:
            UnsupportedMediaTypeError: If the MIME type is not allowed
            ExtractionError: If the chosen strategy fails
        """
        validate_mime_type(mime_type, self.config.ALLOWED_MIME_TYPES)

        if mime_type == "text/plain":
            return self._extract_plain_text(file_content)

        # Let the CPU-bound task run in a thread pool
        loop = asyncio.get_event_loop()
        if mime_type == "application/pdf":
            return await loop.run_in_executor(None, self._extract_pdf, file_content)
        if mime_type.startswith("image/"):
            return await loop.run_in_executor(None, self._extract_image, file_content)

        raise UnsupportedMediaTypeError(mime_type, self.config.ALLOWED_MIME_TYPES)

    def _extract_plain_text(self, content: bytes) -> ExtractionResult:
        text = content.decode("utf-8", errors="replace").strip()
        return ExtractionResult(text=text, method=ExtractionMethod.DIRECT_PARSE, confidence=100)

    def _extract_pdf(self, content: bytes) -> ExtractionResult:
        """
        Parse the PDF text layer and fall back to a scanned marker on low density.

        Args:
            content: PDF file content

        Returns:
            ExtractionResult for the PDF
        """
        try:
            text, page_count = self._extract_pdf_text(content)
        except Exception as e:
            logger.error(f"Failed to parse PDF: {str(e)}")
            raise ExtractionError(ExtractionMethod.DIRECT_PARSE, e) from e

        logger.info("Parsed PDF: %d pages, %d chars", page_count, len(text))
        return classify_pdf_text(
            text,
            page_count,
            min_text_density=self.config.MIN_TEXT_DENSITY,
            max_scanned_chars=self.config.SCANNED_PDF_MAX_CHARS,
        )

    def _extract_pdf_text(self, content: bytes) -> Tuple[str, int]:
        """
        Helper method to extract the text layer of a PDF.

        Args:
            content: PDF file content

        Returns:
            Trimmed text and the page count
        """
        with fitz.open(stream=content, filetype="pdf") as document:
            page_texts = []

            for page_num in range(len(document)):
                page = document.load_page(page_num)
                text_blocks = []

                # Text blocks carry spans; image blocks (type 1) have no text layer
                for block in page.get_text("dict")["blocks"]:
                    if block.get("type") == 0:
                        block_text = ""
                        for line in block.get("lines", []):
                            for span in line.get("spans", []):
                                block_text += span.get("text", "")
                            block_text += "\n"

                        if block_text.strip():
                            text_blocks.append(block_text.strip())

                if text_blocks:
                    page_texts.append("\n\n".join(text_blocks))

            return "\n\n".join(page_texts).strip(), len(document)

    def _extract_image(self, content: bytes) -> ExtractionResult:
        """
        Run OCR over an image.

        Args:
            content: Image file content

        Returns:
            ExtractionResult with the OCR engine's mean word confidence
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                if image.mode in ("RGB", "L"):
                    data = self._run_tesseract(image)
                else:
                    rgb_image = image.convert("RGB")
                    try:
                        data = self._run_tesseract(rgb_image)
                    finally:
                        rgb_image.close()
        except Exception as e:
            logger.error(f"Failed to OCR image: {str(e)}")
            raise ExtractionError(ExtractionMethod.IMAGE_OCR, e) from e

        text, confidence = _assemble_ocr_output(data)
        logger.info("OCR finished: %d chars, confidence %.1f", len(text), confidence)
        return ExtractionResult(text=text, method=ExtractionMethod.IMAGE_OCR, confidence=confidence)

    def _run_tesseract(self, image: Image.Image) -> Dict[str, List]:
        return pytesseract.image_to_data(
            image,
            lang=self.config.OCR_LANGUAGE,
            output_type=pytesseract.Output.DICT,
        )


def _assemble_ocr_output(data: Dict[str, List]) -> Tuple[str, float]:
    """
    Rebuild text lines from tesseract word boxes and average their confidence.

    Args:
        data: Output of pytesseract.image_to_data as a dict

    Returns:
        Trimmed text and the mean confidence (0-100) of recognised words
    """
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    paragraphs: List[Tuple[int, int]] = []
    confidences = []

    for i, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        if not word:
            continue

        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        lines.setdefault(key, []).append(word)

        conf = float(data["conf"][i])
        if conf >= 0:
            confidences.append(conf)

    output = []
    for (block, par, _line), words in lines.items():
        # Blank line between paragraphs
        if paragraphs and paragraphs[-1] != (block, par):
            output.append("")
        paragraphs.append((block, par))
        output.append(" ".join(words))

    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return "\n".join(output).strip(), round(confidence, 2)
