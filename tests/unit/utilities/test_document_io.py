import json

import pytest

from sbom_cli.exceptions import FileSystemError, ValidationError
from sbom_cli.utilities.document_io import load_document, load_documents, save_document


def test_load_document(tmp_path, app_document):
    path = tmp_path / "app.spdx.json"
    path.write_text(json.dumps(app_document.to_dict()))

    document = load_document(str(path))

    assert document.name == "app 1.0.0"
    assert len(document.packages) == 5


def test_load_documents_keeps_order(tmp_path, app_document, worker_document):
    paths = []
    for document in (worker_document, app_document):
        path = tmp_path / f"{document.name.split()[0]}.json"
        path.write_text(json.dumps(document.to_dict()))
        paths.append(str(path))

    assert [d.name for d in load_documents(paths)] == ["worker 2.0.0", "app 1.0.0"]


def test_load_missing_document(tmp_path):
    with pytest.raises(FileSystemError, match="SPDX file does not exist"):
        load_document(str(tmp_path / "missing.json"))


@pytest.mark.parametrize("content, message", [
    ("{not json", "not valid JSON"),
    ("[1, 2, 3]", "does not contain a JSON object"),
])
def test_load_invalid_document(tmp_path, content, message):
    path = tmp_path / "broken.json"
    path.write_text(content)

    with pytest.raises(ValidationError, match=message):
        load_document(str(path))


def test_save_document_creates_directories(tmp_path, app_document):
    path = tmp_path / "out" / "nested" / "app.spdx.json"

    save_document(app_document, str(path))

    saved = json.loads(path.read_text())
    assert saved == app_document.to_dict()
    assert path.read_text().startswith("{\n  ")


def test_save_document_to_unwritable_path(tmp_path, app_document):
    blocker = tmp_path / "file"
    blocker.write_text("")

    with pytest.raises(FileSystemError, match="Unable to write SPDX file"):
        save_document(app_document, str(blocker / "app.spdx.json"))
