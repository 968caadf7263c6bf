"""Tests for media-type dispatch and text extraction."""
import io

import pytest
from docx import Document
from PIL import Image

from contractshield.errors import ExtractionFailed
from contractshield.services import extractor
from contractshield.services.extractor import MediaKind, classify_media_type, extract_text


def _docx_bytes(*paragraphs, table_rows=()):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.mark.parametrize("media_type, kind", [
    ("application/pdf", MediaKind.PDF),
    ("application/msword", MediaKind.WORD),
    ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", MediaKind.WORD),
    ("image/png", MediaKind.IMAGE),
    ("image/jpeg", MediaKind.IMAGE),
    ("text/plain", MediaKind.TEXT),
    ("", MediaKind.TEXT),
])
def test_classify_media_type(media_type, kind):
    assert classify_media_type(media_type) is kind


def test_docx_paragraphs_and_tables_are_extracted():
    content = _docx_bytes(
        "Employment Agreement",
        "The employee is entitled to 21 days of annual leave.",
        table_rows=[("Salary", "R25 000"), ("Notice", "1 month")],
    )

    text = extract_text(content, "application/vnd.openxmlformats-officedocument.wordprocessingml.document", "a.docx")

    assert "Employment Agreement" in text
    assert "21 days of annual leave" in text
    assert "Salary | R25 000" in text


def test_corrupted_docx_raises_extraction_failed():
    with pytest.raises(ExtractionFailed) as exc_info:
        extract_text(b"this is not a zip archive", "application/msword", "broken.doc")

    assert "corrupted" in exc_info.value.message


def test_corrupted_pdf_raises_extraction_failed():
    with pytest.raises(ExtractionFailed) as exc_info:
        extract_text(b"%PDF-1.4 garbage without structure", "application/pdf", "broken.pdf")

    assert "corrupted or encrypted" in exc_info.value.message


def test_image_is_run_through_ocr(monkeypatch):
    calls = {}

    def fake_image_to_string(image, lang):
        calls["size"] = image.size
        calls["lang"] = lang
        return "Clause 1. The tenant shall pay rent monthly."

    monkeypatch.setattr(extractor.pytesseract, "image_to_string", fake_image_to_string)

    text = extract_text(_png_bytes(), "image/png", "scan.png")

    assert text.startswith("Clause 1.")
    assert calls == {"size": (40, 20), "lang": "eng"}


def test_unreadable_image_raises_extraction_failed():
    with pytest.raises(ExtractionFailed):
        extract_text(b"\x89PNG but not really", "image/png", "scan.png")


def test_missing_tesseract_is_reported(monkeypatch):
    def missing(image, lang):
        raise extractor.pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(extractor.pytesseract, "image_to_string", missing)

    with pytest.raises(ExtractionFailed) as exc_info:
        extract_text(_png_bytes(), "image/jpeg", "photo.jpg")

    assert "unavailable" in exc_info.value.message


def test_raw_text_decode_falls_back_to_latin1():
    assert extract_text("Clause naïve".encode("utf-8"), "text/plain") == "Clause naïve"
    assert extract_text("Café terms".encode("latin-1"), "application/octet-stream") == "Café terms"
