"""
Merge several SPDX documents into a single document.

Tools that generate SPDX usually give the described package a conventional id
(``SPDXRef-RootPackage``) and derive file ids from file paths, so ids collide as
soon as two documents are concatenated. Colliding ids are rewritten inside
each source document before anything is combined.
"""

import copy
import hashlib
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional
from urllib.parse import urlparse

from ..exceptions import ValidationError
from ..utils import distinct_by
from .constants import (
    DEFAULT_DATA_LICENSE,
    SPDX_DOCUMENT_ID,
    SPDX_FILE_ID_PREFIX,
    SPDX_REF_PREFIX,
    SPDX_ROOT_PACKAGE_ID,
    DocumentVersion,
)
from .models import CreationInfo, Document, File, Package
from .package_info import get_creator_organization

logger = logging.getLogger(__name__)

MERGE_TOOL_NAME = "sbom-cli"

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]+")


def _alphanumeric(value: Optional[str]) -> str:
    return _NON_ALPHANUMERIC.sub("", value or "")


def _rename_element_references(document: Document, old_id: str, new_id: str) -> None:
    document.document_describes = [new_id if i == old_id else i for i in document.document_describes]
    for relationship in document.relationships:
        if relationship.spdx_element_id == old_id:
            relationship.spdx_element_id = new_id
        if relationship.related_spdx_element == old_id:
            relationship.related_spdx_element = new_id


def rename_package_id(document: Document, package_id: str, package_id_builder: Callable[[Package], str]) -> Document:
    """
    Rename a package and every reference to it within the same document.

    Relationship direction and type are left untouched; only the endpoint ids change.
    """
    package = document.get_package(package_id)
    if package is None:
        return document

    new_id = package_id_builder(package)
    logger.debug(f"Renaming package '{package_id}' to '{new_id}' in '{document.name}'")
    package.spdx_id = new_id
    _rename_element_references(document, package_id, new_id)
    return document


def rename_file_id(document: Document, file_id: str, file_id_builder: Callable[[File], str]) -> Document:
    """Rename a file and rewrite ``hasFiles`` lists and relationships that point at it."""
    file = next((f for f in document.files if f.spdx_id == file_id), None)
    if file is None:
        return document

    new_id = file_id_builder(file)
    if new_id == file_id:
        return document

    file.spdx_id = new_id
    for package in document.packages:
        if package.has_files and file_id in package.has_files:
            package.has_files = [new_id if i == file_id else i for i in package.has_files]
    _rename_element_references(document, file_id, new_id)
    return document


def _root_package_id(package: Package) -> str:
    return f"{SPDX_REF_PREFIX}-Package-{_alphanumeric(package.name)}-{uuid.uuid4()}"


def _rename_files(document: Document) -> None:
    namespace_hash = hashlib.md5(document.document_namespace.encode("utf-8")).hexdigest()[:10]
    for file in list(document.files):
        owner = next((p for p in document.packages if p.has_files and file.spdx_id in p.has_files), None)
        new_prefix = f"{SPDX_FILE_ID_PREFIX}{_alphanumeric(owner.name if owner else None) or namespace_hash}"

        def build_file_id(f: File, new_prefix: str = new_prefix) -> str:
            if f.spdx_id.startswith(new_prefix):
                return f.spdx_id
            return f.spdx_id.replace(SPDX_FILE_ID_PREFIX, new_prefix, 1)

        rename_file_id(document, file.spdx_id, build_file_id)


def _distinct_packages(packages: List[Package]) -> List[Package]:
    distinct = distinct_by(packages, key=lambda p: p.spdx_id)
    if len(distinct) < len(packages):
        logger.debug(f"Dropped {len(packages) - len(distinct)} duplicate package(s) from merged document")
    return distinct


def merge_spdx_documents(
    package_name: Optional[str],
    package_version: Optional[str],
    source_documents: List[Document],
) -> Document:
    """
    Merge multiple SPDX documents into a single SPDX document.

    The first document acts as the template for the data license, the creator
    organization and the namespace host. Source documents are not modified.

    Args:
        package_name: Name of the merged package
        package_version: Version of the merged package
        source_documents: The documents to merge, at least one

    Returns:
        Document: The merged document

    Raises:
        ValidationError: If no source documents are given
    """
    if not source_documents:
        raise ValidationError("At least one SPDX document is required for merging")

    documents = [copy.deepcopy(doc) for doc in source_documents]
    root_document = documents[0]
    root_namespace = urlparse(root_document.document_namespace or "")
    root_organization = get_creator_organization(root_document.creation_info)

    logger.info(f"Merging {len(documents)} SPDX documents into '{package_name} {package_version}'")

    for document in documents:
        rename_package_id(document, SPDX_ROOT_PACKAGE_ID, _root_package_id)

    for document in documents:
        _rename_files(document)

    package_guid = uuid.uuid4()
    namespace = f"{root_namespace.scheme or 'https'}://{root_namespace.netloc}/{package_name}/{package_version}/{package_guid}"

    creators = []
    if root_organization:
        creators.append(f"Organization: {root_organization}")
    creators.append(f"Tool: {MERGE_TOOL_NAME}")

    merged = Document(
        spdx_id=SPDX_DOCUMENT_ID,
        spdx_version=DocumentVersion.SPDX_2_3.value,
        name=f"{package_name or ''} {package_version or ''}".strip(),
        data_license=root_document.data_license or DEFAULT_DATA_LICENSE,
        document_namespace=namespace,
        creation_info=CreationInfo(
            created=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            creators=creators,
        ),
        files=[f for d in documents for f in d.files],
        packages=_distinct_packages([p for d in documents for p in d.packages]),
        external_document_refs=[r for d in documents for r in d.external_document_refs],
        relationships=[r for d in documents for r in d.relationships],
        document_describes=[i for d in documents for i in d.document_describes],
    )

    logger.debug(
        f"Merged document contains {len(merged.packages)} packages, {len(merged.files)} files "
        f"and {len(merged.relationships)} relationships"
    )
    return merged


__all__ = [
    "MERGE_TOOL_NAME",
    "merge_spdx_documents",
    "rename_package_id",
    "rename_file_id",
]
