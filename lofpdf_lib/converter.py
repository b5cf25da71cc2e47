# --- lofpdf_lib/converter.py ---
"""
lofpdf_lib/converter.py: Lays out a document onto a PageSurface and owns the
two list-section phases.

Conversion runs in a fixed order:
  1. Front matter: the title page (or title heading).
  2. Allocation: every registered list section reserves its pages.
  3. Body: nodes are inked and stamped with the page they start on.
  4. Render: list sections are inked into their reservations, now that every
     target page is known.
  5. Output: the surface is written to PDF.
"""
import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .constants import POINTS_PER_PIXEL
from .registry import SectionRegistry
from .sections import SectionKind, section_for
from .surface import PageSurface
from .xref import PageIndex

log = logging.getLogger("lofpdf.layout")

_FALSE_ATTRIBUTES = {False, "false", "no", "0"}
_DEFAULT_IMAGE_SIZE = (144.0, 96.0)


def _flag_set(value) -> bool:
    """Document flags are on when present, unless spelled as a false value."""
    return value is not None and value not in _FALSE_ATTRIBUTES


@dataclass
class ConversionResult:
    """What a conversion produced, for reporting and verification."""

    page_count: int
    front_matter_pages: int
    reservations: list
    page_ranges: dict = field(default_factory=dict)
    omitted: set = field(default_factory=set)
    output_path: Optional[str] = None


class Converter:
    """Converts a Document tree into paginated output."""

    def __init__(self, theme):
        self.theme = theme
        self.surface: PageSurface = None
        self.registry: SectionRegistry = None
        self._counters = defaultdict(int)
        self._handlers = {
            "document": self._convert_subdocument,
            "section": self._convert_section,
            "paragraph": self._convert_paragraph,
            "image": self._convert_image,
            "table": self._convert_table,
            "example": self._convert_example,
            "list_macro": self._convert_list_macro,
        }
        self.font = theme.resolve("base.font_family")
        self.font_size = theme.resolve_float("base.font_size")
        self.font_color = theme.resolve("base.font_color")
        self.block_margin = theme.resolve_float("block.margin_bottom")

    # --- Pipeline ---
    def build_registry(self, document) -> SectionRegistry:
        """Table of contents first (if requested), then directives in document order."""
        registry = SectionRegistry()
        if _flag_set(document.attr("toc")):
            registry.register(section_for(SectionKind.TOC, document, self.theme))
        macros = document.find_by(lambda n: n.context == "list_macro", traverse_documents=True)
        for macro in macros:
            if macro.kind not in registry:
                registry.register(section_for(macro.kind, document, self.theme))
        return registry

    def convert(self, document, output_path=None, reserve_only=False) -> ConversionResult:
        """Runs the whole pipeline; with `reserve_only`, stops after allocation."""
        self.surface = PageSurface(self.theme)
        self._counters = defaultdict(int)
        self.surface.start_new_page()
        self._ink_front_matter(document)

        self.registry = self.build_registry(document)
        log.info("--- Allocation: %d list section(s) ---", len(self.registry))
        self.registry.reserve_all(self.surface)

        if self.theme.resolve("page.numbering_start") == "body":
            front_matter_pages = self.surface.page_number - 1
        else:
            front_matter_pages = 0
        result = ConversionResult(
            page_count=self.surface.page_count,
            front_matter_pages=front_matter_pages,
            reservations=self.registry.reservations,
            omitted=set(self.registry.omitted),
        )
        if reserve_only:
            return result

        log.info("--- Body: converting from page %d ---", self.surface.page_number)
        for child in document.children:
            self.convert_node(child)

        index = PageIndex(front_matter_pages)
        log.info("--- Render: inking list sections ---")
        result.page_ranges = self.registry.render_all(self.surface, index)
        result.page_count = self.surface.page_count

        if output_path:
            labels = {}
            if self.theme.resolve_bool("footer.page_numbers"):
                labels = {p: index.label(p) for p in range(1, self.surface.page_count + 1)}
            self.surface.save(output_path, labels)
            result.output_path = output_path
        return result

    def convert_node(self, node):
        handler = self._handlers.get(node.context)
        if handler is None:
            raise ValueError(f"No converter for node context '{node.context}'")
        handler(node)

    # --- Front matter ---
    def _ink_front_matter(self, document):
        title = document.attr("title")
        if not title:
            return
        size = self.theme.resolve_float("heading.h1_font_size")
        font = self.theme.resolve("heading.font_family")
        color = self.theme.resolve("heading.font_color")
        surface = self.surface
        if _flag_set(document.attr("title-page")):
            surface.move_cursor_to(surface.bounds_height / 3)
            for line in surface.wrap(title, surface.bounds_width, font, size):
                surface.write_line(line, font, size, color, align="center")
            author = document.attr("author")
            if author:
                surface.move_down(size)
                surface.write_line(
                    author, self.font, self.font_size, self.font_color, align="center"
                )
            surface.start_new_page()
        else:
            for line in surface.wrap(title, surface.bounds_width, font, size):
                surface.write_line(line, font, size, color)
            surface.move_down(self.theme.resolve_float("heading.margin_bottom"))

    # --- Node handlers ---
    def _stamp(self, node):
        node.page_start = self.surface.page_number

    def _caption(self, node, signifier_key):
        self._counters[node.context] += 1
        if not node.title:
            return None
        signifier = self.theme.resolve(signifier_key)
        return f"{signifier} {self._counters[node.context]}. {node.title}"

    def _write_wrapped(self, text, font, size, color, indent=0.0):
        surface = self.surface
        for line in surface.wrap(text, surface.bounds_width - indent, font, size):
            surface.write_line(line, font, size, color, indent=indent)

    def _convert_subdocument(self, node):
        self._stamp(node)
        for child in node.children:
            self.convert_node(child)

    def _convert_section(self, node):
        surface = self.surface
        level = min(max(node.level, 0) + 1, 6)
        font = self.theme.resolve("heading.font_family")
        size = self.theme.resolve_float(f"heading.h{level}_font_size")
        color = self.theme.resolve("heading.font_color")
        if surface.offset > 0:
            surface.move_down(self.theme.resolve_float("heading.margin_top"))
        surface.ensure_room(surface.line_height(size) + surface.line_height(self.font_size))
        self._stamp(node)
        self._write_wrapped(node.title or "", font, size, color)
        surface.move_down(self.theme.resolve_float("heading.margin_bottom"))
        log.debug("Section '%s' starts on page %d", node.title, node.page_start)
        for child in node.children:
            self.convert_node(child)

    def _convert_paragraph(self, node):
        self.surface.ensure_room(self.surface.line_height(self.font_size))
        self._stamp(node)
        self._write_wrapped(node.text, self.font, self.font_size, self.font_color)
        self.surface.move_down(self.block_margin)

    def _image_size(self, node):
        """Intrinsic size in points, from the image file or the node attributes."""
        path = node.target
        if path and os.path.exists(path):
            try:
                with Image.open(path) as img:
                    px_width, px_height = img.size
                return px_width * POINTS_PER_PIXEL, px_height * POINTS_PER_PIXEL, True
            except (UnidentifiedImageError, OSError) as e:
                log.warning("Could not read image %s: %s", path, e)
        else:
            log.warning("Image not found: %s", path)
        width = float(node.attributes.get("width", _DEFAULT_IMAGE_SIZE[0]))
        height = float(node.attributes.get("height", _DEFAULT_IMAGE_SIZE[1]))
        if width <= 0 or height <= 0:
            raise ValueError(
                f"Image {node.id} ({path}) needs a positive size, got {width}x{height}"
            )
        return width, height, False

    def _convert_image(self, node):
        surface = self.surface
        caption = self._caption(node, "caption.figure_signifier")
        caption_font = self.theme.resolve("caption.font_family")
        caption_size = self.theme.resolve_float("caption.font_size")
        caption_height = surface.line_height(caption_size) if caption else 0.0

        width, height, readable = self._image_size(node)
        max_height = surface.bounds_height - caption_height
        scale = min(1.0, surface.bounds_width / width, max_height / height)
        width, height = width * scale, height * scale

        surface.ensure_room(height + caption_height)
        self._stamp(node)
        x = (surface.bounds_width - width) / 2
        if readable:
            surface.draw_image(node.target, x, width, height)
        else:
            placeholder = f"[{node.target or 'image'}]"
            surface.write_text(placeholder, x, self.font, self.font_size, self.font_color)
        surface.move_down(height)
        if caption:
            self._write_wrapped(caption, caption_font, caption_size, self.font_color)
        surface.move_down(self.block_margin)
        log.debug("Figure %s placed on page %d", node.id, node.page_start)

    def _convert_table(self, node):
        surface = self.surface
        caption = self._caption(node, "caption.table_signifier")
        line_height = surface.line_height(self.font_size)
        surface.ensure_room(line_height * (2 if caption else 1))
        self._stamp(node)
        if caption:
            self._write_wrapped(
                caption,
                self.theme.resolve("caption.font_family"),
                self.theme.resolve_float("caption.font_size"),
                self.font_color,
            )
        columns = max((len(row) for row in node.rows), default=0)
        if columns:
            column_width = surface.bounds_width / columns
            for row in node.rows:
                surface.ensure_room(line_height)
                for i, cell in enumerate(row):
                    text = self._fit(cell, column_width - 4)
                    x = i * column_width
                    surface.write_text(text, x, self.font, self.font_size, self.font_color)
                surface.move_down(line_height)
        surface.move_down(self.block_margin)

    def _fit(self, text, width):
        """Truncates text so it fits in `width`."""
        while text and self.surface.width_of(text, self.font, self.font_size) > width:
            text = text[:-1]
        return text

    def _convert_example(self, node):
        surface = self.surface
        caption = self._caption(node, "caption.example_signifier")
        font = self.theme.resolve("code.font_family")
        size = self.theme.resolve_float("code.font_size")
        surface.ensure_room(surface.line_height(size) * (2 if caption else 1))
        self._stamp(node)
        if caption:
            self._write_wrapped(
                caption,
                self.theme.resolve("caption.font_family"),
                self.theme.resolve_float("caption.font_size"),
                self.font_color,
            )
        for raw_line in node.text.splitlines() or [""]:
            self._write_wrapped(raw_line, font, size, self.font_color)
        surface.move_down(self.block_margin)

    def _convert_list_macro(self, node):
        self.registry.check_directive(node.kind)
