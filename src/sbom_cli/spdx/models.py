"""
Typed representation of an SPDX 2.2/2.3 JSON document.

Each model maps to one JSON object of the SPDX schema. ``from_dict`` is lenient
(absent optional fields become ``None`` or empty lists) and keeps any key it
does not model in ``extra`` so that ``to_dict`` writes it back unchanged.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .constants import SPDX_DOCUMENT_ID, RelationshipType

logger = logging.getLogger(__name__)


def _extra_fields(data: Dict[str, Any], known: Iterable[str]) -> Dict[str, Any]:
    known = set(known)
    return {key: value for key, value in data.items() if key not in known}


def _put(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


@dataclass
class Checksum:
    algorithm: str
    checksum_value: str
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = ("algorithm", "checksumValue")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Checksum":
        return cls(
            algorithm=data.get("algorithm", ""),
            checksum_value=data.get("checksumValue", ""),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"algorithm": self.algorithm, "checksumValue": self.checksum_value, **self.extra}


@dataclass
class ExternalRef:
    reference_category: str
    reference_type: str
    reference_locator: str
    comment: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = ("referenceCategory", "referenceType", "referenceLocator", "comment")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExternalRef":
        return cls(
            reference_category=data.get("referenceCategory", ""),
            reference_type=data.get("referenceType", ""),
            reference_locator=data.get("referenceLocator", ""),
            comment=data.get("comment"),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "referenceCategory": self.reference_category,
            "referenceType": self.reference_type,
            "referenceLocator": self.reference_locator,
        }
        _put(result, "comment", self.comment)
        result.update(self.extra)
        return result


@dataclass
class Package:
    spdx_id: str
    name: str
    version_info: Optional[str] = None
    download_location: Optional[str] = None
    files_analyzed: Optional[bool] = None
    license_concluded: Optional[str] = None
    license_declared: Optional[str] = None
    copyright_text: Optional[str] = None
    supplier: Optional[str] = None
    external_refs: List[ExternalRef] = field(default_factory=list)
    package_verification_code: Optional[Dict[str, Any]] = None
    license_info_from_files: Optional[List[str]] = None
    has_files: Optional[List[str]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = (
        "SPDXID", "name", "versionInfo", "downloadLocation", "filesAnalyzed",
        "licenseConcluded", "licenseDeclared", "copyrightText", "supplier",
        "externalRefs", "packageVerificationCode", "licenseInfoFromFiles", "hasFiles",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Package":
        return cls(
            spdx_id=data.get("SPDXID", ""),
            name=data.get("name", ""),
            version_info=data.get("versionInfo"),
            download_location=data.get("downloadLocation"),
            files_analyzed=data.get("filesAnalyzed"),
            license_concluded=data.get("licenseConcluded"),
            license_declared=data.get("licenseDeclared"),
            copyright_text=data.get("copyrightText"),
            supplier=data.get("supplier"),
            external_refs=[ExternalRef.from_dict(ref) for ref in data.get("externalRefs") or []],
            package_verification_code=data.get("packageVerificationCode"),
            license_info_from_files=data.get("licenseInfoFromFiles"),
            has_files=data.get("hasFiles"),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "SPDXID": self.spdx_id}
        _put(result, "downloadLocation", self.download_location)
        _put(result, "filesAnalyzed", self.files_analyzed)
        _put(result, "licenseConcluded", self.license_concluded)
        _put(result, "licenseInfoFromFiles", self.license_info_from_files)
        _put(result, "licenseDeclared", self.license_declared)
        _put(result, "copyrightText", self.copyright_text)
        _put(result, "versionInfo", self.version_info)
        _put(result, "supplier", self.supplier)
        _put(result, "packageVerificationCode", self.package_verification_code)
        _put(result, "hasFiles", self.has_files)
        if self.external_refs:
            result["externalRefs"] = [ref.to_dict() for ref in self.external_refs]
        result.update(self.extra)
        return result


@dataclass
class File:
    spdx_id: str
    file_name: str
    checksums: List[Checksum] = field(default_factory=list)
    license_concluded: Optional[str] = None
    license_info_in_files: Optional[List[str]] = None
    copyright_text: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = ("SPDXID", "fileName", "checksums", "licenseConcluded", "licenseInfoInFiles", "copyrightText")

    @property
    def normalized_file_name(self) -> str:
        """The file path with redundant separators and ``./`` segments removed."""
        if not self.file_name:
            return ""
        return os.path.normpath(self.file_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "File":
        return cls(
            spdx_id=data.get("SPDXID", ""),
            file_name=data.get("fileName", ""),
            checksums=[Checksum.from_dict(c) for c in data.get("checksums") or []],
            license_concluded=data.get("licenseConcluded"),
            license_info_in_files=data.get("licenseInfoInFiles"),
            copyright_text=data.get("copyrightText"),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"fileName": self.file_name, "SPDXID": self.spdx_id}
        result["checksums"] = [c.to_dict() for c in self.checksums]
        _put(result, "licenseConcluded", self.license_concluded)
        _put(result, "licenseInfoInFiles", self.license_info_in_files)
        _put(result, "copyrightText", self.copyright_text)
        result.update(self.extra)
        return result


@dataclass
class Relationship:
    spdx_element_id: str
    relationship_type: str
    related_spdx_element: str
    comment: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = ("spdxElementId", "relationshipType", "relatedSpdxElement", "comment")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        return cls(
            spdx_element_id=data.get("spdxElementId", ""),
            relationship_type=data.get("relationshipType", ""),
            related_spdx_element=data.get("relatedSpdxElement", ""),
            comment=data.get("comment"),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "relationshipType": self.relationship_type,
            "relatedSpdxElement": self.related_spdx_element,
            "spdxElementId": self.spdx_element_id,
        }
        _put(result, "comment", self.comment)
        result.update(self.extra)
        return result


@dataclass
class CreationInfo:
    created: Optional[str] = None
    creators: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = ("created", "creators")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CreationInfo":
        data = data or {}
        return cls(
            created=data.get("created"),
            creators=list(data.get("creators") or []),
            extra=_extra_fields(data, cls.FIELDS),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        _put(result, "created", self.created)
        result["creators"] = list(self.creators)
        result.update(self.extra)
        return result


@dataclass
class Document:
    spdx_id: str = SPDX_DOCUMENT_ID
    name: str = ""
    document_namespace: str = ""
    spdx_version: str = ""
    data_license: Optional[str] = None
    creation_info: CreationInfo = field(default_factory=CreationInfo)
    document_describes: List[str] = field(default_factory=list)
    packages: List[Package] = field(default_factory=list)
    files: List[File] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)
    external_document_refs: List[Dict[str, Any]] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    FIELDS = (
        "SPDXID", "name", "documentNamespace", "spdxVersion", "dataLicense", "creationInfo",
        "documentDescribes", "packages", "files", "relationships", "externalDocumentRefs",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        document = cls(
            spdx_id=data.get("SPDXID", SPDX_DOCUMENT_ID),
            name=data.get("name", ""),
            document_namespace=data.get("documentNamespace", ""),
            spdx_version=data.get("spdxVersion", ""),
            data_license=data.get("dataLicense"),
            creation_info=CreationInfo.from_dict(data.get("creationInfo")),
            packages=[Package.from_dict(p) for p in data.get("packages") or []],
            files=[File.from_dict(f) for f in data.get("files") or []],
            relationships=[Relationship.from_dict(r) for r in data.get("relationships") or []],
            external_document_refs=list(data.get("externalDocumentRefs") or []),
            extra=_extra_fields(data, cls.FIELDS),
        )
        if "documentDescribes" in data:
            document.document_describes = list(data.get("documentDescribes") or [])
        else:
            # SPDX 2.3 allows expressing the described packages as relationships only
            document.document_describes = [
                r.related_spdx_element
                for r in document.relationships
                if r.spdx_element_id == document.spdx_id
                and RelationshipType.DESCRIBES.matches(r.relationship_type)
            ]
            logger.debug(f"Derived documentDescribes from relationships: {document.document_describes}")
        return document

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "files": [f.to_dict() for f in self.files],
            "packages": [p.to_dict() for p in self.packages],
            "externalDocumentRefs": list(self.external_document_refs),
            "relationships": [r.to_dict() for r in self.relationships],
            "spdxVersion": self.spdx_version,
        }
        _put(result, "dataLicense", self.data_license)
        result.update({
            "SPDXID": self.spdx_id,
            "name": self.name,
            "documentNamespace": self.document_namespace,
            "creationInfo": self.creation_info.to_dict(),
            "documentDescribes": list(self.document_describes),
        })
        result.update(self.extra)
        return result

    def get_package(self, package_id: str) -> Optional[Package]:
        for package in self.packages:
            if package.spdx_id == package_id:
                return package
        return None

    def packages_by_id(self) -> Dict[str, Package]:
        """Index packages by SPDXID; the first package wins on duplicate ids."""
        index: Dict[str, Package] = {}
        for package in self.packages:
            index.setdefault(package.spdx_id, package)
        return index
