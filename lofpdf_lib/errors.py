# --- lofpdf_lib/errors.py ---
"""
lofpdf_lib/errors.py: Exception types raised by the reservation protocol.
"""


class LofPdfError(Exception):
    """Base class for all errors raised while building list sections."""


class EmptyCollectionError(LofPdfError):
    """No node matched the collection predicate, so the section is skipped."""

    def __init__(self, kind):
        super().__init__(f"No entries found for section '{kind}'")
        self.kind = kind


class MissingReservationError(LofPdfError):
    """A committed render was requested for a section that never reserved space."""

    def __init__(self, kind):
        super().__init__(
            f"Section '{kind}' has no reservation; allocation must run before rendering"
        )
        self.kind = kind


class ExtentDriftError(LofPdfError):
    """The committed pass consumed more space than was reserved for it."""

    def __init__(self, kind, reserved, actual):
        super().__init__(
            f"Section '{kind}' overflowed its reservation: reserved up to "
            f"page {reserved.page_number} @ {reserved.vertical_offset:.2f}, "
            f"rendered up to page {actual.page_number} @ {actual.vertical_offset:.2f}"
        )
        self.kind = kind
        self.reserved = reserved
        self.actual = actual
