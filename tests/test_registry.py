from unittest.mock import MagicMock

import pytest

from lofpdf_lib.errors import EmptyCollectionError, MissingReservationError
from lofpdf_lib.extent import PageRange
from lofpdf_lib.models import Document, Paragraph, Section
from lofpdf_lib.registry import SectionRegistry
from lofpdf_lib.sections import ReservableSection, SectionKind, section_for
from lofpdf_lib.surface import PageSurface
from lofpdf_lib.theme import Theme
from lofpdf_lib.xref import PageIndex

from conftest import make_figure_document


def _registry(document, theme, kinds):
    registry = SectionRegistry()
    for kind in kinds:
        registry.register(section_for(kind, document, theme))
    return registry


def _fresh_surface(theme):
    surface = PageSurface(theme)
    surface.start_new_page()
    return surface


def test_second_section_reserves_where_the_first_ended():
    theme = Theme({"toc": {"break_after": "false"}, "lof": {"break_after": "true"}})
    document = make_figure_document(["Figure A", "Figure B"])
    surface = _fresh_surface(theme)
    registry = _registry(document, theme, ["toc", "lof"])

    registry.reserve_all(surface)

    toc, lof = registry.get("toc"), registry.get("lof")
    assert lof.reservation.extent.start == toc.reservation.extent.end
    assert surface.page_number == 2

    for node in document.find_by(traverse_documents=True):
        node.page_start = 2
    resume = surface.cursor
    page_ranges = registry.render_all(surface, PageIndex(front_matter_pages=1))

    assert list(page_ranges) == [SectionKind.TOC, SectionKind.FIGURES]
    assert page_ranges[SectionKind.TOC] == PageRange(1, 1)
    assert page_ranges[SectionKind.FIGURES] == PageRange(1, 1)
    texts = surface.text_on_page(1)
    assert texts[0] == "Table of Contents"
    assert texts.index("List of Figures") > texts.index("Chapter")
    assert surface.cursor == resume


def test_empty_section_is_omitted_without_shifting_pagination(theme):
    document = Document()
    chapter = document.append(Section(title="Chapter", level=1))
    chapter.append(Paragraph(text="No figures at all."))

    with_lof = _fresh_surface(theme)
    registry = _registry(document, theme, ["toc", "lof"])
    registry.reserve_all(with_lof)

    without_lof = _fresh_surface(theme)
    _registry(document, theme, ["toc"]).reserve_all(without_lof)

    assert registry.omitted == {SectionKind.FIGURES}
    assert with_lof.cursor == without_lof.cursor
    assert with_lof.page_count == without_lof.page_count
    assert len(registry.reservations) == 1

    page_ranges = registry.render_all(with_lof, PageIndex())
    assert list(page_ranges) == [SectionKind.TOC]


def test_check_directive(theme):
    document = Document()
    document.append(Paragraph(text="Nothing to list."))
    registry = _registry(document, theme, ["lof"])

    with pytest.raises(MissingReservationError):
        registry.check_directive("lof")

    registry.reserve_all(_fresh_surface(theme))
    registry.check_directive("lof")

    with pytest.raises(MissingReservationError):
        registry.check_directive("lot")


def test_duplicate_kind_is_rejected(theme):
    document = make_figure_document(["Figure A"])
    registry = _registry(document, theme, ["lof"])
    with pytest.raises(ValueError):
        registry.register(section_for("lof", document, theme))
    assert "lof" in registry and "toc" not in registry


def test_phases_run_in_registration_order(mocker, surface):
    calls = []

    def fake_section(kind):
        section = MagicMock(spec=ReservableSection)
        section.kind = kind
        section.reservation = None

        def reserve(s):
            calls.append(("reserve", kind))
            section.reservation = mocker.sentinel.reservation

        section.reserve.side_effect = reserve
        section.render.side_effect = lambda s, r: calls.append(("render", kind))
        return section

    registry = SectionRegistry()
    for kind in (SectionKind.TOC, SectionKind.FIGURES, SectionKind.TABLES):
        registry.register(fake_section(kind))

    registry.reserve_all(surface)
    registry.render_all(surface)

    kinds = [SectionKind.TOC, SectionKind.FIGURES, SectionKind.TABLES]
    assert calls == [("reserve", k) for k in kinds] + [("render", k) for k in kinds]


def test_reserve_errors_other_than_empty_propagate(mocker, surface):
    section = MagicMock(spec=ReservableSection)
    section.kind = SectionKind.FIGURES
    section.reservation = None
    section.reserve.side_effect = RuntimeError("layout exploded")
    registry = SectionRegistry()
    registry.register(section)

    with pytest.raises(RuntimeError):
        registry.reserve_all(surface)

    section.reserve.side_effect = EmptyCollectionError("lof")
    registry.reserve_all(surface)
    assert registry.omitted == {SectionKind.FIGURES}
