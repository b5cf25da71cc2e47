# --- lofpdf_lib/registry.py ---
"""
lofpdf_lib/registry.py: Runs reservable sections in a fixed order.

Every section reserves during the allocation phase, each starting where the
previous one left the surface. Later, every section renders in that same
order. Sections with nothing to list are omitted and consume no pages.
"""
import logging

from .errors import EmptyCollectionError, MissingReservationError
from .sections import SectionKind

log = logging.getLogger("lofpdf.registry")


class SectionRegistry:
    """An ordered list of reservable sections and their lifecycle state."""

    def __init__(self):
        self._sections = []
        self.omitted: set[SectionKind] = set()
        self.page_ranges = {}

    def __iter__(self):
        return iter(self._sections)

    def __len__(self):
        return len(self._sections)

    def __contains__(self, kind):
        return any(s.kind == SectionKind(kind) for s in self._sections)

    def register(self, section):
        if section.kind in self:
            raise ValueError(f"Section '{section.kind.value}' is already registered")
        self._sections.append(section)
        log.debug("Registered section '%s' at position %d", section.kind.value, len(self))
        return section

    def get(self, kind):
        kind = SectionKind(kind)
        for section in self._sections:
            if section.kind == kind:
                return section
        return None

    @property
    def reservations(self):
        return [s.reservation for s in self._sections if s.reservation is not None]

    def reserve_all(self, surface):
        """Allocation phase: reserve every section, in registration order."""
        for section in self._sections:
            try:
                section.reserve(surface)
            except EmptyCollectionError as e:
                log.warning("Omitting section '%s': %s", section.kind.value, e)
                self.omitted.add(section.kind)
        return self.reservations

    def render_all(self, surface, resolver=None):
        """Render phase: ink every reserved section, in registration order.

        The surface cursor is restored afterwards.
        """
        resume = surface.cursor
        for section in self._sections:
            if section.kind in self.omitted:
                continue
            self.page_ranges[section.kind] = section.render(surface, resolver)
        if resume.page_number:
            surface.go_to_page(resume.page_number)
            surface.move_cursor_to(resume.vertical_offset)
        return dict(self.page_ranges)

    def check_directive(self, kind):
        """Called when the body converter meets a list directive node."""
        section = self.get(kind)
        if section is not None and section.kind in self.omitted:
            return
        if section is None or section.reservation is None:
            raise MissingReservationError(SectionKind(kind).value)
