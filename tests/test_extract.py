import pytest

from bulk_feedback.services.extract import extract_paragraphs, extract_text


def test_txt_paragraphs():
    data = "First paragraph.\r\n\r\nSecond paragraph.\n\n\n".encode("utf-8")
    assert extract_paragraphs("notes.TXT", data) == ["First paragraph.", "Second paragraph."]


def test_txt_bad_bytes_are_replaced():
    assert "�" in extract_text("a.txt", b"caf\xe9 au lait")


def test_pdf_text(sample_pdf_bytes):
    text = extract_text("in.pdf", sample_pdf_bytes)
    assert "libraries" in text


def test_docx_paragraphs(sample_docx_bytes):
    assert extract_paragraphs("in.docx", sample_docx_bytes) == [
        "This is a smaple sentence about libraries.",
        "Another paragraph here.",
    ]
    assert "\n\n" in extract_text("in.docx", sample_docx_bytes)


def test_unsupported_extension():
    with pytest.raises(ValueError):
        extract_text("slides.pptx", b"...")
