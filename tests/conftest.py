import pytest

from lofpdf_lib.models import Document, Image, Paragraph, Section
from lofpdf_lib.surface import PageSurface
from lofpdf_lib.theme import Theme


@pytest.fixture
def theme():
    return Theme()


@pytest.fixture
def surface(theme):
    s = PageSurface(theme)
    s.start_new_page()
    return s


def make_figure_document(titles, attributes=None):
    """A document with one section holding a figure per title (None = untitled)."""
    document = Document(attributes=attributes or {})
    chapter = document.append(Section(title="Chapter", level=1))
    for title in titles:
        chapter.append(Paragraph(text="Some text before the figure."))
        chapter.append(Image(target="missing.png", title=title))
    return document


@pytest.fixture
def figure_document():
    return make_figure_document(["Figure A", "Figure B"], {"lof-title": ""})
