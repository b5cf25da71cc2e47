# --- lofpdf_lib/readback.py ---
"""
lofpdf_lib/readback.py: Reads a written PDF back to check where listings landed.
"""
import logging
import os

from pdfminer.high_level import extract_pages
from pdfminer.layout import LTTextContainer

log = logging.getLogger("lofpdf.inspect")


def read_page_texts(pdf_path: str) -> list[str]:
    """Returns the text of every page, top to bottom."""
    if not os.path.exists(pdf_path):
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")
    texts = []
    for page_layout in extract_pages(pdf_path):
        containers = [e for e in page_layout if isinstance(e, LTTextContainer)]
        containers.sort(key=lambda e: (-e.y1, e.x0))
        texts.append("\n".join(e.get_text().strip() for e in containers))
    log.debug("Read %d pages from %s", len(texts), pdf_path)
    return texts


def verify_listing(pdf_path: str, section, page_range) -> list[str]:
    """Checks that every entry of `section` appears within `page_range`.

    Returns the titles that could not be found there.
    """
    texts = read_page_texts(pdf_path)
    listing = "\n".join(texts[page - 1] for page in page_range if page <= len(texts))
    flattened = " ".join(listing.split())
    missing = []
    for entry in section.collect():
        title = " ".join(entry.title.split())
        if title not in flattened:
            missing.append(entry.title)
    if missing:
        log.warning(
            "%d '%s' entries not found on pages %s", len(missing), section.kind.value, page_range
        )
    return missing
