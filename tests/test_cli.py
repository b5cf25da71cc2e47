import json
import os

import pytest

import lofpdf
from lofpdf import Application
from lofpdf_lib.theme import Theme


@pytest.fixture
def document_path(tmp_path):
    path = tmp_path / "guide.json"
    data = {
        "attributes": {"title": "Guide"},
        "blocks": [
            {"type": "lof"},
            {
                "type": "section",
                "title": "Setup",
                "level": 1,
                "blocks": [
                    {"type": "paragraph", "text": "Install the tool."},
                    {"type": "image", "target": "missing.png", "title": "Install screen"},
                ],
            },
        ],
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    return mocker.patch("lofpdf.setup_logging")


def test_parse_arguments_defaults():
    args = Application.parse_arguments(["doc.json"])
    assert args.document == "doc.json"
    assert args.output_file == Application.DEFAULT_FILENAME_SENTINEL
    assert args.toc is False
    assert args.drift_policy is None
    assert args.debug_topics is None


def test_parse_arguments_rejects_unknown_drift_policy():
    with pytest.raises(SystemExit):
        Application.parse_arguments(["doc.json", "--drift-policy", "ignore"])


def test_default_output_name_follows_document():
    app = Application(Application.parse_arguments(["docs/guide.json"]))
    assert app._resolve_output_filename() == "guide.pdf"
    app = Application(Application.parse_arguments(["docs/guide.json", "-o", "x.pdf"]))
    assert app._resolve_output_filename() == "x.pdf"


def test_dry_run_reserves_without_writing(tmp_path, document_path, quiet_logging):
    output = str(tmp_path / "unused.pdf")
    args = Application.parse_arguments([document_path, "-D", "-o", output, "-d", "reserve"])

    assert Application(args).run() == 0

    assert not os.path.exists(output)
    assert quiet_logging.call_args.kwargs["debug_topics"] == "reserve"


def test_full_run_writes_and_verifies(tmp_path, document_path):
    output = str(tmp_path / "guide.pdf")
    args = Application.parse_arguments([document_path, "--toc", "-o", output, "--verify"])

    assert Application(args).run() == 0
    assert os.path.getsize(output) > 0


def test_write_theme_records_overrides(tmp_path, document_path):
    theme_path = str(tmp_path / "effective.ini")
    args = Application.parse_arguments(
        [document_path, "-D", "--drift-policy", "warn", "--write-theme", theme_path]
    )

    assert Application(args).run() == 0
    assert Theme.load(theme_path).resolve("layout.drift_policy") == "warn"


def test_main_exits_with_error_for_missing_document(mocker, tmp_path):
    mocker.patch("sys.argv", ["lofpdf.py", str(tmp_path / "absent.json")])
    with pytest.raises(SystemExit) as excinfo:
        lofpdf.main()
    assert excinfo.value.code == 1
