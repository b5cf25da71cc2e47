import json
import os

import pytest

from lofpdf_lib.collector import collect_entries, is_figure
from lofpdf_lib.loader import deserialize_document, load_document
from lofpdf_lib.models import Document, ListMacro, Section


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_document_with_included_files(tmp_path):
    _write(
        tmp_path / "appendix.json",
        {"blocks": [{"type": "image", "target": "img/b.png", "title": "Appendix figure"}]},
    )
    main = _write(
        tmp_path / "main.json",
        {
            "attributes": {"title": "Manual", "lof-title": "Figures"},
            "blocks": [
                {"type": "lof"},
                {
                    "type": "section",
                    "title": "Intro",
                    "level": 1,
                    "blocks": [
                        {"type": "paragraph", "text": "Hello"},
                        {"type": "image", "target": "img/a.png", "title": "Main figure"},
                    ],
                },
                {"type": "include", "path": "appendix.json"},
                {"type": "include", "document": {"blocks": [{"type": "table", "rows": [[1, 2]]}]}},
            ],
        },
    )

    document = load_document(main)

    assert document.attr("lof-title") == "Figures"
    assert isinstance(document.children[0], ListMacro)
    assert document.children[0].kind == "lof"
    assert isinstance(document.children[1], Section)
    assert isinstance(document.children[2], Document)
    assert document.children[2].parent is document
    assert document.children[3].children[0].rows == [["1", "2"]]

    entries = collect_entries(document, is_figure)
    assert [e.title for e in entries] == ["Main figure", "Appendix figure"]
    assert entries[0].target.target == os.path.join(str(tmp_path), "img/a.png")


def test_unknown_block_type_is_rejected():
    with pytest.raises(ValueError):
        deserialize_document({"blocks": [{"type": "sidebar"}]})


def test_include_needs_a_source():
    with pytest.raises(ValueError):
        deserialize_document({"blocks": [{"type": "include"}]})


def test_circular_include_is_rejected(tmp_path):
    _write(tmp_path / "a.json", {"blocks": [{"type": "include", "path": "b.json"}]})
    _write(tmp_path / "b.json", {"blocks": [{"type": "include", "path": "a.json"}]})
    with pytest.raises(ValueError):
        load_document(str(tmp_path / "a.json"))


def test_missing_document_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(str(tmp_path / "nope.json"))
