# --- lofpdf_lib/collector.py ---
"""
lofpdf_lib/collector.py: Finds the nodes a list section points at and turns
them into ordered entries.
"""
import logging

from .constants import DEFAULT_MISSING_TITLE
from .errors import EmptyCollectionError
from .models import Entry

log = logging.getLogger("lofpdf.collect")

SKIP_UNTITLED = "skip"


def is_figure(node) -> bool:
    return node.context == "image"


def is_table(node) -> bool:
    return node.context == "table"


def is_example(node) -> bool:
    return node.context == "example"


def is_heading(node) -> bool:
    return node.context == "section"


def collect_entries(
    document,
    predicate,
    kind="list",
    missing_title=DEFAULT_MISSING_TITLE,
    resolver=None,
    max_level=None,
) -> list[Entry]:
    """Walks the document, included sub-documents too, and returns one Entry per match.

    Untitled matches get `missing_title` written back onto the node, unless it is
    "skip", in which case they are left out. Raises EmptyCollectionError when
    nothing matches.
    """
    nodes = document.find_by(predicate, traverse_documents=True)
    if not nodes:
        raise EmptyCollectionError(kind)

    entries = []
    for number, node in enumerate(nodes, start=1):
        if not node.title:
            if missing_title == SKIP_UNTITLED:
                log.debug("Skipping untitled %s node %s", node.context, node.id)
                continue
            log.debug("Assigning default title to %s node %s", node.context, node.id)
            node.title = missing_title
        level = max(getattr(node, "level", 1) - 1, 0)
        if max_level is not None and level > max_level:
            continue
        entries.append(
            Entry(
                title=node.title,
                resolved_page=resolver.resolve(node) if resolver else None,
                nesting_level=level,
                number=number,
                target=node,
            )
        )

    if not entries:
        raise EmptyCollectionError(kind)
    log.debug("Collected %d entries for '%s'", len(entries), kind)
    return entries
