"""Text extraction from uploaded contract files (PDF, Word, images, plain text)."""
import io
import logging
from enum import Enum

import PyPDF2
import pytesseract
from docx import Document
from PIL import Image, UnidentifiedImageError

from contractshield.errors import ExtractionFailed


logger = logging.getLogger(__name__)

OCR_LANGUAGE = "eng"


class MediaKind(str, Enum):
    """Extraction path chosen for a declared media type."""

    PDF = "pdf"
    WORD = "word"
    IMAGE = "image"
    TEXT = "text"


def classify_media_type(media_type: str) -> MediaKind:
    """
    Map a declared media type to an extraction path. First matching rule wins.

    Anything unrecognised falls through to ``MediaKind.TEXT``, a best-effort
    raw decode of the bytes.
    """
    mt = (media_type or "").strip().lower()
    if mt == "application/pdf":
        return MediaKind.PDF
    if "word" in mt or "document" in mt:
        return MediaKind.WORD
    if mt.startswith("image/"):
        return MediaKind.IMAGE
    return MediaKind.TEXT


def extract_text_from_pdf(file_content: bytes) -> str:
    """
    Extract text from a PDF document.

    Args:
        file_content: Binary content of the PDF document

    Returns:
        Extracted text as string
    """
    try:
        pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_content))
        if pdf_reader.is_encrypted:
            raise ExtractionFailed("the PDF is encrypted or password protected")

        text_parts = []
        for page in pdf_reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                text_parts.append(page_text.strip())

        full_text = "\n".join(text_parts)
        logger.info(f"Extracted text from PDF document, pages: {len(pdf_reader.pages)}, length: {len(full_text)}")
        return full_text

    except ExtractionFailed:
        raise
    except Exception as e:
        logger.error(f"Failed to extract text from PDF document, error: {str(e)}")
        raise ExtractionFailed("the PDF may be corrupted or encrypted") from e


def extract_text_from_docx(file_content: bytes) -> str:
    """
    Extract text from a Word document, including table cells.

    Legacy binary ``.doc`` files are not readable by python-docx and fail here
    with a clear reason.
    """
    try:
        doc = Document(io.BytesIO(file_content))
        text_parts = []

        for paragraph in doc.paragraphs:
            if paragraph.text.strip():
                text_parts.append(paragraph.text.strip())

        for table in doc.tables:
            for row in table.rows:
                row_text = []
                for cell in row.cells:
                    if cell.text.strip():
                        row_text.append(cell.text.strip())
                if row_text:
                    text_parts.append(" | ".join(row_text))

        full_text = "\n".join(text_parts)
        logger.info(f"Extracted text from Word document, length: {len(full_text)}")
        return full_text

    except Exception as e:
        logger.error(f"Failed to extract text from Word document, error: {str(e)}")
        raise ExtractionFailed(
            "the document may be corrupted or in an unsupported format (save it as .docx)"
        ) from e


def extract_text_from_image(file_content: bytes) -> str:
    """Run OCR over an image (English)."""
    try:
        with Image.open(io.BytesIO(file_content)) as image:
            text = pytesseract.image_to_string(image, lang=OCR_LANGUAGE)
    except UnidentifiedImageError as e:
        logger.error(f"Failed to open image, error: {str(e)}")
        raise ExtractionFailed("the image could not be read and may be corrupted") from e
    except pytesseract.TesseractNotFoundError as e:
        logger.error("Tesseract OCR binary is not installed")
        raise ExtractionFailed("image text recognition is unavailable on this server") from e
    except Exception as e:
        logger.error(f"Failed to run OCR on image, error: {str(e)}")
        raise ExtractionFailed("text recognition failed for this image") from e

    logger.info(f"Extracted text from image, length: {len(text)}")
    return text


def extract_text_from_text(file_content: bytes) -> str:
    """Best-effort decode of raw bytes: UTF-8 first, then latin-1."""
    try:
        text = file_content.decode("utf-8")
    except UnicodeDecodeError:
        # latin-1 maps every byte, so this cannot fail
        text = file_content.decode("latin-1")
    logger.info(f"Decoded raw text, length: {len(text)}")
    return text


_EXTRACTORS = {
    MediaKind.PDF: extract_text_from_pdf,
    MediaKind.WORD: extract_text_from_docx,
    MediaKind.IMAGE: extract_text_from_image,
    MediaKind.TEXT: extract_text_from_text,
}


def extract_text(file_content: bytes, media_type: str, file_name: str = "") -> str:
    """
    Extract text from a document based on its declared media type.

    Args:
        file_content: Binary content of the file
        media_type: Declared media type of the upload
        file_name: Original filename, used for logging only

    Returns:
        Extracted text as string

    Raises:
        ExtractionFailed: the file could not be converted to text
    """
    kind = classify_media_type(media_type)
    logger.info(f"Extracting text, file_name: {file_name}, media_type: {media_type}, path: {kind.value}")
    return _EXTRACTORS[kind](file_content)
