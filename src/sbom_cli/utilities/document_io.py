# sbom_cli/utilities/document_io.py

"""
Reading and writing SPDX JSON documents.
"""

import os
import json
import logging
from typing import List

from ..exceptions import FileSystemError, ValidationError
from ..spdx.models import Document

logger = logging.getLogger("sbom-cli")


def load_document(file_path: str) -> Document:
    """
    Loads an SPDX JSON document from disk.

    Raises:
        FileSystemError: If the file doesn't exist or can't be read
        ValidationError: If the file is not a JSON object
    """
    if not os.path.isfile(file_path):
        raise FileSystemError(f"SPDX file does not exist: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"SPDX file is not valid JSON: {file_path}: {e.msg}", details={"line": e.lineno}) from e
    except OSError as e:
        raise FileSystemError(f"Unable to read SPDX file '{file_path}': {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"SPDX file does not contain a JSON object: {file_path}")

    document = Document.from_dict(data)
    logger.debug(
        f"Loaded '{document.name}' from {file_path}: {len(document.packages)} packages, "
        f"{len(document.files)} files, {len(document.relationships)} relationships"
    )
    return document


def load_documents(file_paths: List[str]) -> List[Document]:
    return [load_document(path) for path in file_paths]


def save_document(document: Document, file_path: str) -> None:
    """
    Writes a document as indented SPDX JSON, creating parent directories.

    Raises:
        FileSystemError: If the file can't be written
    """
    try:
        directory = os.path.dirname(os.path.abspath(file_path))
        os.makedirs(directory, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(document.to_dict(), f, indent=2)
    except OSError as e:
        raise FileSystemError(f"Unable to write SPDX file '{file_path}': {e}") from e
    logger.debug(f"Saved '{document.name}' to {file_path}")
