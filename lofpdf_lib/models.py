# --- lofpdf_lib/models.py ---
"""
lofpdf_lib/models.py: The document tree consumed by the converter and collectors,
plus the value types produced by entry collection.
"""
import itertools
from dataclasses import dataclass, field
from typing import Any, Optional

_node_ids = itertools.count(1)


# --- DOCUMENT MODEL CLASSES (LOGICAL HIERARCHY) ---
class Node:
    """Base class for every block in a document tree."""

    context = "node"

    def __init__(self, title=None, node_id=None, attributes=None, children=None):
        self.title = title
        self.id = node_id or f"_{self.context}_{next(_node_ids)}"
        self.attributes = dict(attributes or {})
        self.children = list(children or [])
        self.parent = None
        self.page_start: Optional[int] = None
        for child in self.children:
            child.parent = self

    def append(self, child):
        child.parent = self
        self.children.append(child)
        return child

    def find_by(self, predicate=None, traverse_documents=False):
        """Returns all descendants (self included) matching `predicate`, in document order.

        Nested documents are only entered when `traverse_documents` is True.
        """
        found = []
        if predicate is None or predicate(self):
            found.append(self)
        for child in self.children:
            if isinstance(child, Document) and not traverse_documents:
                continue
            found.extend(child.find_by(predicate, traverse_documents))
        return found

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id!r} title={self.title!r}>"


class Document(Node):
    """A document, or a sub-document included into a parent document."""

    context = "document"

    def attr(self, name, default=None):
        return self.attributes.get(name, default)


class Section(Node):
    """A titled section; level 1 is a chapter-level heading."""

    context = "section"

    def __init__(self, title=None, level=1, **kwargs):
        super().__init__(title=title, **kwargs)
        self.level = level


class Paragraph(Node):
    context = "paragraph"

    def __init__(self, text="", **kwargs):
        super().__init__(**kwargs)
        self.text = text


class Image(Node):
    """A figure. Its title is the caption shown under the image."""

    context = "image"

    def __init__(self, target=None, **kwargs):
        super().__init__(**kwargs)
        self.target = target


class Table(Node):
    context = "table"

    def __init__(self, rows=None, **kwargs):
        super().__init__(**kwargs)
        self.rows: list[list[str]] = [list(map(str, row)) for row in rows or []]


class Example(Node):
    context = "example"

    def __init__(self, text="", **kwargs):
        super().__init__(**kwargs)
        self.text = text


class ListMacro(Node):
    """The empty placeholder produced by a list directive such as `lof::[]`."""

    context = "list_macro"

    def __init__(self, kind, **kwargs):
        super().__init__(**kwargs)
        self.kind = kind


# --- COLLECTED VALUES ---
@dataclass
class Entry:
    """One listed item: a title and the page its target node landed on."""

    title: str
    resolved_page: Optional[int] = None
    nesting_level: int = 0
    number: int = 0
    target: Any = field(default=None, repr=False, compare=False)

    @property
    def resolved(self):
        return self.resolved_page is not None
