from __future__ import annotations

from pathlib import Path

import fitz
import pytest
import pytesseract

from lecturesnap.extract.text_extractor import PAGE_SEPARATOR, extract_pdf_text, extract_text, is_supported


def _make_pdf(path: Path, pages: list[str]) -> Path:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    doc.save(path)
    doc.close()
    return path


def test_extract_pdf_reads_first_pages_only(tmp_path: Path) -> None:
    pdf = _make_pdf(tmp_path / "lecture.pdf", ["Matrix rank", "Eigenvalues", "Appendix"])

    text = extract_text(pdf, 2)

    assert text is not None
    assert text.split(PAGE_SEPARATOR) == ["Matrix rank", "Eigenvalues"]
    assert "Appendix" not in text


def test_blank_pdf_without_ocr_is_none(tmp_path: Path) -> None:
    pdf = _make_pdf(tmp_path / "blank.pdf", [""])
    assert extract_pdf_text(pdf, 2, ocr=False) is None


def test_corrupt_pdf_is_none(tmp_path: Path) -> None:
    bad = tmp_path / "broken.pdf"
    bad.write_bytes(b"not a pdf at all")
    assert extract_text(bad) is None


def test_unsupported_and_missing_files(tmp_path: Path) -> None:
    doc = tmp_path / "notes.docx"
    doc.write_text("hello")
    assert extract_text(doc) is None
    assert extract_text(tmp_path / "ghost.pdf") is None


@pytest.mark.parametrize(
    ("name", "expected"),
    [("a.PDF", True), ("b.jpeg", True), ("c.tiff", True), ("d.png", True), ("e.docx", False), ("f", False)],
)
def test_is_supported(name: str, expected: bool) -> None:
    assert is_supported(name) is expected


def test_blank_page_goes_through_ocr(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pdf = _make_pdf(tmp_path / "scan.pdf", ["Typed notes", ""])
    monkeypatch.setattr(pytesseract, "image_to_string", lambda image, lang="eng": "  Handwritten notes \n")

    assert extract_text(pdf) == f"Typed notes{PAGE_SEPARATOR}Handwritten notes"


def test_ocr_failure_keeps_readable_pages(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pdf = _make_pdf(tmp_path / "mixed.pdf", ["Linear Algebra lecture one", ""])

    def no_tesseract(image, lang="eng"):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", no_tesseract)

    assert extract_text(pdf) == "Linear Algebra lecture one"


def test_ocr_failure_on_only_page_is_none(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    pdf = _make_pdf(tmp_path / "scan.pdf", [""])

    def broken(image, lang="eng"):
        raise pytesseract.TesseractError(1, "bad image")

    monkeypatch.setattr(pytesseract, "image_to_string", broken)

    assert extract_pdf_text(pdf, 2) is None
