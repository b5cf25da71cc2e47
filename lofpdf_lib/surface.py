# --- lofpdf_lib/surface.py ---
"""
lofpdf_lib/surface.py: The paginated output surface that every renderer draws on.

Drawing operations are recorded per page and only turned into PDF content by
`save`, so a renderer can jump back to an earlier page (the reserved pages at
the front of the document) after later pages exist. A scratch copy tracks page
and cursor movement exactly like the real surface but discards what is drawn.
"""
import logging
from dataclasses import dataclass

from reportlab.lib import colors, pagesizes
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .constants import EPSILON
from .extent import Cursor

log = logging.getLogger("lofpdf.layout")


@dataclass
class TextOp:
    """A run of text placed on one line of a page."""

    x: float
    offset: float
    text: str
    font: str
    size: float
    color: str
    line_height: float


@dataclass
class ImageOp:
    path: str
    x: float
    offset: float
    width: float
    height: float


def _page_size(name: str):
    """Maps a theme page size ("A4", "LETTER", "595x842") to points."""
    if "x" in name.lower():
        width, height = name.lower().split("x", 1)
        return float(width), float(height)
    try:
        return getattr(pagesizes, name.upper())
    except AttributeError:
        raise ValueError(f"Unknown page size: {name}")


class PageSurface:
    """Tracks the current page and cursor and collects drawing operations."""

    def __init__(self, theme, scratch=False):
        self.theme = theme
        self.scratch = scratch
        self.page_width, self.page_height = _page_size(theme.resolve("page.size"))
        self.margin_top = theme.resolve_float("page.margin_top")
        self.margin_bottom = theme.resolve_float("page.margin_bottom")
        self.margin_left = theme.resolve_float("page.margin_left")
        self.margin_right = theme.resolve_float("page.margin_right")
        self.bounds_width = self.page_width - self.margin_left - self.margin_right
        self.bounds_height = self.page_height - self.margin_top - self.margin_bottom
        self.line_height_factor = theme.resolve_float("base.line_height")
        if self.bounds_width <= 0 or self.bounds_height <= 0:
            raise ValueError("Page margins leave no room for content")
        self.pages: list[list] = []
        self.page_number = 0
        self.offset = 0.0
        self.discarded_ops = 0

    # --- Page and cursor state ---
    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def cursor(self) -> Cursor:
        return Cursor(self.page_number, self.offset)

    def start_new_page(self):
        self.pages.append([])
        self.page_number = len(self.pages)
        self.offset = 0.0
        log.debug("Started page %d%s", self.page_number, " (scratch)" if self.scratch else "")

    def go_to_page(self, page_number: int):
        if not 1 <= page_number <= self.page_count:
            raise ValueError(
                f"Page {page_number} does not exist (page count: {self.page_count})"
            )
        self.page_number = page_number
        self.offset = 0.0

    def move_cursor_to(self, offset: float):
        if offset < 0:
            raise ValueError(f"Cursor offset cannot be negative: {offset}")
        self.offset = min(offset, self.bounds_height)

    def move_down(self, amount: float):
        """Moves the cursor down, stopping at the bottom of the content box."""
        self.offset = min(self.offset + amount, self.bounds_height)

    def advance_page(self):
        """Continues onto the next page, reusing it if it already exists."""
        if self.page_number < self.page_count:
            self.go_to_page(self.page_number + 1)
        else:
            self.start_new_page()

    def ensure_room(self, height: float):
        """Breaks to the next page unless `height` fits below the cursor.

        Content taller than a whole page is placed at the top of a page anyway.
        """
        if self.offset > 0 and self.offset + height > self.bounds_height + EPSILON:
            self.advance_page()

    # --- Measurement ---
    def width_of(self, text: str, font: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, font, size)

    def line_height(self, size: float) -> float:
        return size * self.line_height_factor

    def wrap(self, text: str, width: float, font: str, size: float) -> list[str]:
        """Greedy word wrap; a single word wider than `width` gets its own line."""
        lines, current = [], ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if current and self.width_of(candidate, font, size) > width + EPSILON:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current or not lines:
            lines.append(current)
        return lines

    # --- Drawing ---
    def _record(self, op):
        if self.scratch:
            self.discarded_ops += 1
            return
        self.pages[self.page_number - 1].append(op)

    def write_text(self, text, x, font, size, color, line_height=None):
        """Places text on the current line without moving the cursor."""
        if not text:
            return
        self._record(
            TextOp(x, self.offset, text, font, size, color, line_height or self.line_height(size))
        )

    def write_line(self, text, font, size, color, align="left", indent=0.0):
        """Writes one full line of text and moves the cursor below it."""
        height = self.line_height(size)
        self.ensure_room(height)
        width = self.width_of(text, font, size)
        available = self.bounds_width - indent
        if align == "center":
            x = indent + max(available - width, 0) / 2
        elif align == "right":
            x = indent + max(available - width, 0)
        else:
            x = indent
        self.write_text(text, x, font, size, color, height)
        self.move_down(height)

    def draw_image(self, path, x, width, height):
        self._record(ImageOp(path, x, self.offset, width, height))

    def text_on_page(self, page_number: int) -> list[str]:
        """The text runs drawn on a page, in drawing order."""
        return [op.text for op in self.pages[page_number - 1] if isinstance(op, TextOp)]

    # --- Scratch mode ---
    def scratch_copy(self) -> "PageSurface":
        """A surface at the same position and page count whose output is discarded."""
        scratch = PageSurface(self.theme, scratch=True)
        scratch.pages = [[] for _ in self.pages]
        scratch.page_number = self.page_number
        scratch.offset = self.offset
        return scratch

    # --- Output ---
    def save(self, path: str, page_labels: dict = None):
        """Writes all pages to a PDF file with ReportLab."""
        if self.scratch:
            raise RuntimeError("A scratch surface cannot be saved")
        pdf = canvas.Canvas(path, pagesize=(self.page_width, self.page_height))
        top = self.page_height - self.margin_top
        footer_size = self.theme.resolve_float("footer.font_size")
        for page_number, ops in enumerate(self.pages, start=1):
            for op in ops:
                if isinstance(op, TextOp):
                    baseline = top - op.offset - op.line_height / 2 - op.size * 0.35
                    pdf.setFont(op.font, op.size)
                    pdf.setFillColor(colors.HexColor(op.color))
                    pdf.drawString(self.margin_left + op.x, baseline, op.text)
                elif isinstance(op, ImageOp):
                    pdf.drawImage(
                        op.path,
                        self.margin_left + op.x,
                        top - op.offset - op.height,
                        op.width,
                        op.height,
                        preserveAspectRatio=True,
                    )
            label = (page_labels or {}).get(page_number)
            if label:
                pdf.setFont(self.theme.resolve("base.font_family"), footer_size)
                pdf.setFillColor(colors.HexColor(self.theme.resolve("base.font_color")))
                pdf.drawCentredString(self.page_width / 2, self.margin_bottom / 2, label)
            pdf.showPage()
        pdf.save()
        log.info("Wrote %d pages to %s", self.page_count, path)
