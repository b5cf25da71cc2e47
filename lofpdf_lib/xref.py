# --- lofpdf_lib/xref.py ---
"""
lofpdf_lib/xref.py: Resolves the page a node was inked on to the number shown
in listings.
"""


class PageIndex:
    """Maps nodes to displayed page numbers.

    Nodes are stamped with their physical `page_start` by the body converter.
    With a front-matter offset, the first body page is displayed as page 1.
    """

    def __init__(self, front_matter_pages: int = 0):
        self.front_matter_pages = front_matter_pages

    def resolve(self, node):
        """Returns the displayed page number, or None if the node has not been inked."""
        page = getattr(node, "page_start", None)
        if page is None:
            return None
        displayed = page - self.front_matter_pages
        return displayed if displayed >= 1 else page

    def label(self, physical_page: int):
        """The footer label for a physical page, or None for front matter."""
        if physical_page <= self.front_matter_pages:
            return None
        return str(physical_page - self.front_matter_pages)
