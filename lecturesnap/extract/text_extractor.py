"""
# extract/text_extractor.py

Extraction de texte : couche texte PDF (PyMuPDF), OCR tesseract pour les images
et les pages PDF sans couche texte.
"""

from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image, UnidentifiedImageError
import pytesseract

from lecturesnap.models.exceptions import ExtractionError
from lecturesnap.models.types import StrOrPath
from lecturesnap.utils.config import EXTRACT_MAX_PAGES, OCR_LANG
from lecturesnap.utils.logger import LoggerProtocol, ensure_logger, with_child_logger

PDF_SUFFIXES = frozenset({".pdf"})
IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".tif", ".tiff"})
SUPPORTED_SUFFIXES = PDF_SUFFIXES | IMAGE_SUFFIXES
PAGE_SEPARATOR = "\n\n"


def is_supported(file_path: StrOrPath) -> bool:
    return Path(file_path).suffix.lower() in SUPPORTED_SUFFIXES


def ocr_image(image: Image.Image, lang: str = OCR_LANG) -> str:
    return pytesseract.image_to_string(image, lang=lang).strip()


def _ocr_page(page: fitz.Page, lang: str) -> str:
    pix = page.get_pixmap(matrix=fitz.Matrix(2, 2))
    image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    return ocr_image(image, lang)


def _read_page(doc: fitz.Document, index: int, ocr: bool) -> str:
    page = doc.load_page(index)
    text = page.get_text().strip()
    if not text and ocr:
        text = _ocr_page(page, OCR_LANG)
    return text


@with_child_logger
def extract_pdf_text(
    file_path: Path,
    max_pages: int = EXTRACT_MAX_PAGES,
    *,
    ocr: bool = True,
    logger: LoggerProtocol | None = None,
) -> str | None:
    """
    Lit au plus max_pages pages, pages jointes par une ligne vide.

    Une page sans couche texte passe par l'OCR si ocr=True. Une page en échec
    (OCR ou rendu) est ignorée, les autres sont gardées.
    Lève ExtractionError seulement si le document ne s'ouvre pas.
    """
    logger = ensure_logger(logger, __name__)
    try:
        doc = fitz.open(file_path)
    except (fitz.FileDataError, RuntimeError, OSError) as exc:
        raise ExtractionError("PDF illisible", ctx={"file": str(file_path), "root_msg": str(exc)}) from exc

    pages: list[str] = []
    with doc:
        for index in range(min(max_pages, doc.page_count)):
            try:
                text = _read_page(doc, index, ocr)
            except (RuntimeError, OSError, pytesseract.TesseractError) as exc:
                logger.warning("[EXTRACT] Page %d ignorée (%s) : %s", index + 1, Path(file_path).name, exc)
                continue
            if text:
                pages.append(text)
    return PAGE_SEPARATOR.join(pages) if pages else None


def extract_image_text(file_path: Path) -> str | None:
    try:
        with Image.open(file_path) as image:
            text = ocr_image(image.convert("RGB"))
    except (UnidentifiedImageError, OSError, pytesseract.TesseractError) as exc:
        raise ExtractionError("Image illisible", ctx={"file": str(file_path), "root_msg": str(exc)}) from exc
    return text or None


@with_child_logger
def extract_text(
    file_path: StrOrPath,
    max_pages: int = EXTRACT_MAX_PAGES,
    *,
    logger: LoggerProtocol | None = None,
) -> str | None:
    """
    Texte brut d'un PDF ou d'une image, None si rien d'exploitable.

    Ne lève pas : format non supporté, fichier illisible ou vide → None (journalisé).
    """
    logger = ensure_logger(logger, __name__)
    path = Path(file_path)
    suffix = path.suffix.lower()
    if not path.is_file():
        logger.warning("[EXTRACT] Fichier introuvable : %s", path)
        return None

    try:
        if suffix in PDF_SUFFIXES:
            text = extract_pdf_text(path, max_pages, logger=logger)
        elif suffix in IMAGE_SUFFIXES:
            text = extract_image_text(path)
        else:
            logger.warning("[EXTRACT] Format non supporté (%s) : %s", suffix or "?", path.name)
            return None
    except ExtractionError as exc:
        logger.error("[EXTRACT] ❌ %s | ctx=%r", exc, exc.ctx)
        return None

    if not text:
        logger.warning("[EXTRACT] Aucun texte extrait : %s", path.name)
        return None
    logger.debug("[EXTRACT] %d caractères extraits de %s", len(text), path.name)
    return text
