# --- lofpdf_lib/sections.py ---
"""
lofpdf_lib/sections.py: Reservable list sections (table of contents, list of
figures, tables and examples).

A section is inked twice by the same routine. During allocation it is inked
onto a scratch copy of the surface to measure how much room it needs, and
that room is claimed in the real page sequence. Once the body has been laid
out and every page number is known, it is inked again at the reserved spot.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from reportlab.pdfbase import pdfmetrics

from .collector import (
    SKIP_UNTITLED,
    collect_entries,
    is_example,
    is_figure,
    is_heading,
    is_table,
)
from .constants import DOT_LEADER_TEXT_DEFAULT, PLACEHOLDER_MARKER
from .errors import ExtentDriftError, MissingReservationError
from .extent import Cursor, Extent, PageRange

log_reserve = logging.getLogger("lofpdf.reserve")
log_render = logging.getLogger("lofpdf.render")


class SectionKind(str, Enum):
    TOC = "toc"
    FIGURES = "lof"
    TABLES = "lot"
    EXAMPLES = "loe"


@dataclass(frozen=True)
class KindSpec:
    """What a kind of list collects and how it is labelled."""

    predicate: Callable
    signifier_key: str = None


KIND_SPECS = {
    SectionKind.TOC: KindSpec(is_heading),
    SectionKind.FIGURES: KindSpec(is_figure, "caption.figure_signifier"),
    SectionKind.TABLES: KindSpec(is_table, "caption.table_signifier"),
    SectionKind.EXAMPLES: KindSpec(is_example, "caption.example_signifier"),
}


@dataclass(frozen=True)
class DotLeader:
    """Resolved once per section so both passes fill leaders identically."""

    text: str
    levels: frozenset
    font: str
    font_size: float
    color: str
    width: float
    spacer_width: float


@dataclass
class Reservation:
    """The room claimed for a section during allocation."""

    kind: SectionKind
    extent: Extent
    break_after: bool


def dry_run(surface, routine, start: Cursor = None) -> Extent:
    """Runs `routine` on a scratch copy of `surface` and returns the span it used."""
    scratch = surface.scratch_copy()
    if start is not None:
        if scratch.page_number != start.page_number:
            scratch.go_to_page(start.page_number)
        scratch.move_cursor_to(start.vertical_offset)
    start = scratch.cursor
    routine(scratch)
    return Extent(start, scratch.cursor)


class ReservableSection:
    """A list section that reserves its pages before the body is laid out."""

    def __init__(self, kind, document, theme):
        self.kind = SectionKind(kind)
        self.spec = KIND_SPECS[self.kind]
        self.document = document
        self.theme = theme
        self.reservation: Reservation = None

        p = self.kind.value
        self.levels = theme.resolve_int(f"{p}.levels", "toc.levels")
        self.indent = theme.resolve_float(f"{p}.indent", "toc.indent")
        self.margin_top = theme.resolve_float(f"{p}.margin_top", "toc.margin_top")
        self.break_after = theme.resolve_bool(f"{p}.break_after", "toc.break_after")
        self.heading_level = max(
            theme.resolve_int(f"{p}.heading_level", "toc.heading_level"),
            theme.resolve_int("heading.min_level"),
        )
        self.page_number_digits = theme.resolve_int(
            f"{p}.page_number_width", "toc.page_number_width"
        )
        self.show_number = theme.resolve_bool(f"{p}.show_number", "toc.show_number")
        if theme.resolve("layout.missing_title_policy") == SKIP_UNTITLED:
            self.missing_title = SKIP_UNTITLED
        else:
            self.missing_title = theme.resolve(f"{p}.missing_title", "toc.missing_title")
        self.drift_policy = theme.resolve("layout.drift_policy")
        self.font = theme.resolve("base.font_family")
        self.font_size = theme.resolve_float("base.font_size")
        self.font_color = theme.resolve("base.font_color")
        self.title = document.attr(f"{p}-title", theme.resolve(f"{p}.title", default=""))
        self.dot_leader = self._resolve_dot_leader()

    def __repr__(self):
        return f"<ReservableSection {self.kind.value}>"

    def _resolve_dot_leader(self) -> DotLeader:
        p, theme = self.kind.value, self.theme
        text = theme.resolve(
            f"{p}.dot_leader_content",
            "toc.dot_leader_content",
            default=DOT_LEADER_TEXT_DEFAULT,
            keep_empty=True,
        )
        levels_value = theme.resolve(f"{p}.dot_leader_levels", "toc.dot_leader_levels")
        if levels_value == "none":
            levels = frozenset()
        elif levels_value == "all":
            levels = frozenset(range(max(self.levels, 0) + 1))
        else:
            levels = frozenset(int(level) for level in levels_value.split())
        font = theme.resolve(
            f"{p}.dot_leader_font_family", "toc.dot_leader_font_family", "base.font_family"
        )
        font_size = theme.resolve_float(
            f"{p}.dot_leader_font_size", "toc.dot_leader_font_size", "base.font_size"
        )
        color = theme.resolve(
            f"{p}.dot_leader_font_color", "toc.dot_leader_font_color", "base.font_color"
        )
        return DotLeader(
            text=text,
            levels=levels,
            font=font,
            font_size=font_size,
            color=color,
            width=pdfmetrics.stringWidth(text, font, font_size) if text else 0.0,
            spacer_width=pdfmetrics.stringWidth(" ", self.font, self.font_size * 0.25),
        )

    # --- Entry collection ---
    def collect(self, resolver=None):
        return collect_entries(
            self.document,
            self.spec.predicate,
            kind=self.kind.value,
            missing_title=self.missing_title,
            resolver=resolver,
            max_level=self.levels if self.levels >= 0 else None,
        )

    # --- Shared ink routine ---
    def ink(self, surface, entries, start: Cursor):
        """Inks the section from `start` and returns (pages used, end cursor).

        The real surface is returned to its last page afterwards; a scratch
        surface is left where the section ended.
        """
        if surface.page_number != start.page_number:
            surface.go_to_page(start.page_number)
        surface.move_cursor_to(start.vertical_offset)
        if self.title:
            self._ink_title(surface)
        if self.levels >= 0:
            surface.move_down(self.margin_top)
            self._ink_entries(surface, entries)
        end = surface.cursor
        page_range = PageRange(start.page_number, end.page_number)
        if not surface.scratch:
            surface.go_to_page(surface.page_count)
        return page_range, end

    def _ink_title(self, surface):
        theme, level = self.theme, self.heading_level
        font = theme.resolve("heading.font_family")
        size = theme.resolve_float(f"heading.h{level}_font_size", "base.font_size")
        color = theme.resolve("heading.font_color", "base.font_color")
        align = theme.resolve(
            f"{self.kind.value}.title_text_align", "heading.text_align", "base.text_align"
        )
        for line in surface.wrap(self.title, surface.bounds_width, font, size):
            surface.write_line(line, font, size, color, align=align)
        surface.move_down(theme.resolve_float("heading.margin_bottom"))

    def _entry_label(self, entry) -> str:
        if self.show_number and self.spec.signifier_key:
            signifier = self.theme.resolve(self.spec.signifier_key)
            return f"{signifier} {entry.number}. {entry.title}"
        return entry.title

    def _ink_entries(self, surface, entries):
        font, size, color = self.font, self.font_size, self.font_color
        leader = self.dot_leader
        line_height = surface.line_height(size)
        # A fixed column keeps wrapping identical whether or not pages are resolved.
        number_width = surface.width_of("0" * self.page_number_digits, font, size)
        number_left = surface.bounds_width - number_width - leader.spacer_width

        for entry in entries:
            indent = entry.nesting_level * self.indent
            title_width = number_left - indent - leader.spacer_width
            lines = surface.wrap(self._entry_label(entry), title_width, font, size)
            for line in lines[:-1]:
                surface.ensure_room(line_height)
                surface.write_text(line, indent, font, size, color, line_height)
                surface.move_down(line_height)

            last_line = lines[-1]
            surface.ensure_room(line_height)
            surface.write_text(last_line, indent, font, size, color, line_height)
            page_text = str(entry.resolved_page) if entry.resolved else PLACEHOLDER_MARKER
            page_x = surface.bounds_width - surface.width_of(page_text, font, size)
            if leader.width > 0 and entry.nesting_level in leader.levels:
                leader_left = indent + surface.width_of(last_line, font, size) + leader.spacer_width
                # Numbers wider than the column shorten the leader, never the footprint.
                leader_right = min(number_left, page_x - leader.spacer_width)
                count = int((leader_right - leader_left) // leader.width)
                if count > 0:
                    surface.write_text(
                        leader.text * count,
                        leader_right - count * leader.width,
                        leader.font,
                        leader.font_size,
                        leader.color,
                        line_height,
                    )
            surface.write_text(page_text, page_x, font, size, color, line_height)
            surface.move_down(line_height)

    # --- Reservation protocol ---
    def measure(self, surface, start: Cursor = None, entries=None) -> Extent:
        """Dry-runs the ink routine from `start` and returns the span it would use."""
        start = start or surface.cursor
        entries = entries if entries is not None else self.collect()
        return dry_run(surface, lambda scratch: self.ink(scratch, entries, start), start)

    def reserve(self, surface, break_after=None) -> Reservation:
        """Measures the section and claims that room at the surface's cursor.

        Raises EmptyCollectionError, without touching the surface, when there
        is nothing to list.
        """
        if break_after is None:
            break_after = self.break_after
        start = surface.cursor
        entries = self.collect()

        def routine(scratch):
            self.ink(scratch, entries, start)
            if not break_after:
                scratch.move_down(self.theme.resolve_float("block.margin_bottom"))

        # The scratch cursor is left on the routine's final page, so the
        # measured extent already spans every page the section touches.
        extent = dry_run(surface, routine)

        if break_after:
            for _ in extent.each_page():
                surface.advance_page()
        else:
            for _, first in extent.each_page():
                if not first:
                    surface.advance_page()
            surface.move_cursor_to(extent.end.vertical_offset)

        self.reservation = Reservation(self.kind, extent, break_after)
        log_reserve.info(
            "Reserved pages %s for '%s' (%d entries, break after: %s)",
            extent.page_range,
            self.kind.value,
            len(entries),
            break_after,
        )
        return self.reservation

    def render(self, surface, resolver=None) -> PageRange:
        """Inks the section into its reserved pages with resolved page numbers."""
        if self.reservation is None:
            raise MissingReservationError(self.kind.value)
        extent = self.reservation.extent
        entries = self.collect(resolver)
        unresolved = sum(1 for e in entries if not e.resolved)
        if unresolved:
            log_render.warning(
                "%d '%s' entries have no page; rendering '%s'",
                unresolved,
                self.kind.value,
                PLACEHOLDER_MARKER,
            )
        page_range, end = self.ink(surface, entries, extent.start)
        if not extent.contains(end) or not page_range.within(extent.page_range):
            self._handle_drift(end)
        log_render.info("Rendered '%s' on pages %s", self.kind.value, page_range)
        return page_range

    def _handle_drift(self, end: Cursor):
        error = ExtentDriftError(self.kind.value, self.reservation.extent.end, end)
        if self.drift_policy == "warn":
            log_render.warning("%s", error)
            # Record the room the section actually took.
            self.reservation.extent.widen_to(end)
            return
        raise error


def section_for(kind, document, theme) -> ReservableSection:
    """Builds the reservable section for a list kind ("toc", "lof", "lot", "loe")."""
    try:
        kind = SectionKind(kind)
    except ValueError:
        raise ValueError(f"Unknown list section kind: {kind!r}")
    return ReservableSection(kind, document, theme)
