# --- lofpdf_lib/loader.py ---
"""
lofpdf_lib/loader.py: Builds a Document tree from its JSON description.

{
  "attributes": {"title": "Manual", "toc": true, "lof-title": "Figures"},
  "blocks": [
    {"type": "lof"},
    {"type": "section", "title": "Intro", "level": 1, "blocks": [
      {"type": "paragraph", "text": "..."},
      {"type": "image", "target": "img/a.png", "title": "Overview"}
    ]},
    {"type": "include", "path": "appendix.json"}
  ]
}
"""
import json
import logging
import os
from typing import Dict, List

from .models import Document, Example, Image, ListMacro, Node, Paragraph, Section, Table
from .sections import SectionKind

log = logging.getLogger("lofpdf.layout")

_LIST_DIRECTIVES = {kind.value for kind in SectionKind}


def _common(block: Dict) -> Dict:
    return {
        "title": block.get("title"),
        "node_id": block.get("id"),
        "attributes": block.get("attributes"),
    }


def _deserialize_blocks(blocks: List[Dict], base_dir: str, seen: set) -> List[Node]:
    nodes = []
    for block in blocks:
        block_type = block.get("type")
        if block_type == "section":
            node = Section(level=int(block.get("level", 1)), **_common(block))
            for child in _deserialize_blocks(block.get("blocks", []), base_dir, seen):
                node.append(child)
        elif block_type == "paragraph":
            node = Paragraph(text=block.get("text", ""), **_common(block))
        elif block_type == "image":
            target = block.get("target")
            if target and not os.path.isabs(target):
                target = os.path.join(base_dir, target)
            node = Image(target=target, **_common(block))
        elif block_type == "table":
            node = Table(rows=block.get("rows", []), **_common(block))
        elif block_type == "example":
            node = Example(text=block.get("text", ""), **_common(block))
        elif block_type == "include":
            node = _load_include(block, base_dir, seen)
        elif block_type in _LIST_DIRECTIVES:
            node = ListMacro(block_type, node_id=block.get("id"))
        else:
            raise ValueError(f"Unknown block type: {block_type!r}")
        nodes.append(node)
    return nodes


def _load_include(block: Dict, base_dir: str, seen: set) -> Document:
    """An included sub-document, given inline or as a path to another JSON file."""
    if "document" in block:
        return deserialize_document(block["document"], base_dir, seen)
    path = block.get("path")
    if not path:
        raise ValueError("An include block needs a 'document' or a 'path'")
    if not os.path.isabs(path):
        path = os.path.join(base_dir, path)
    return load_document(path, seen)


def deserialize_document(data: Dict, base_dir: str = ".", seen: set = None) -> Document:
    """Builds a Document from an already-parsed JSON object."""
    document = Document(node_id=data.get("id"), attributes=data.get("attributes"))
    for child in _deserialize_blocks(data.get("blocks", []), base_dir, seen or set()):
        document.append(child)
    return document


def load_document(path: str, seen: set = None) -> Document:
    """Reads a JSON document file; relative paths inside it resolve against its folder."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Document file not found: {path}")
    real_path = os.path.realpath(path)
    seen = set(seen or ())
    if real_path in seen:
        raise ValueError(f"Circular include of {path}")
    seen.add(real_path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    log.debug("Loaded document %s", path)
    return deserialize_document(data, os.path.dirname(real_path), seen)
