# --- lofpdf_lib/extent.py ---
"""
lofpdf_lib/extent.py: Cursor positions and the page spans consumed by rendering.
"""
from dataclasses import dataclass, field

from .constants import EPSILON


@dataclass(frozen=True, order=True)
class Cursor:
    """The write head of a surface: page number, then offset from the content top."""

    page_number: int
    vertical_offset: float = 0.0

    def is_after(self, other: "Cursor") -> bool:
        """True if this cursor lies beyond `other`, ignoring float noise."""
        if self.page_number != other.page_number:
            return self.page_number > other.page_number
        return self.vertical_offset > other.vertical_offset + EPSILON


@dataclass(frozen=True)
class PageRange:
    """An inclusive range of physical page numbers."""

    start: int
    end: int

    def __iter__(self):
        return iter(range(self.start, self.end + 1))

    def __contains__(self, page_number):
        return self.start <= page_number <= self.end

    def __len__(self):
        return self.end - self.start + 1

    def within(self, other: "PageRange") -> bool:
        return other.start <= self.start and self.end <= other.end

    def __str__(self):
        return f"{self.start}..{self.end}"


@dataclass
class Extent:
    """The span of pages and vertical space consumed by one rendering pass."""

    start: Cursor
    end: Cursor = field(default=None)

    def __post_init__(self):
        if self.end is None:
            self.end = self.start
        if self.start.is_after(self.end):
            raise ValueError(f"Extent end {self.end} precedes its start {self.start}")

    @property
    def page_range(self) -> PageRange:
        return PageRange(self.start.page_number, self.end.page_number)

    @property
    def page_count(self) -> int:
        return len(self.page_range)

    def each_page(self):
        """Yields (page_number, is_first) for every page in the extent."""
        for page_number in self.page_range:
            yield page_number, page_number == self.start.page_number

    def widen_to(self, cursor: Cursor):
        """Moves the end of the extent forward; extents never shrink."""
        if self.end.is_after(cursor):
            raise ValueError(f"Cannot narrow extent ending at {self.end} to {cursor}")
        self.end = cursor

    def contains(self, cursor: Cursor) -> bool:
        return not self.start.is_after(cursor) and not cursor.is_after(self.end)
