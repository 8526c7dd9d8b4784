import pytest

from sbom_cli.spdx.constants import (
    ChecksumAlgorithm,
    ExternalRefCategory,
    RelationshipType,
    is_spdx_unset,
    spdx_constants_are_equal,
    spdx_normalised,
)
from sbom_cli.spdx.models import Document, ExternalRef, File, Package


# --- Constants ---

@pytest.mark.parametrize("a, b", [
    ("DEPENDS_ON", "depends-on"),
    ("PACKAGE-MANAGER", "PACKAGE_MANAGER"),
    ("noassertion", "NOASSERTION"),
    (" SHA3-256 ", "sha3_256"),
])
def test_spdx_constants_compare_structurally(a, b):
    assert spdx_constants_are_equal(a, b)


def test_spdx_normalised_handles_enum_members():
    assert spdx_normalised(ExternalRefCategory.PACKAGE_MANAGER) == "PACKAGE_MANAGER"
    assert spdx_normalised(None) == ""


def test_constant_parse_and_matches():
    assert RelationshipType.parse("depends-on") is RelationshipType.DEPENDS_ON
    assert RelationshipType.parse("not-a-relationship") is None
    assert RelationshipType.parse("") is None
    assert ExternalRefCategory.PACKAGE_MANAGER.matches("package_manager")
    assert ChecksumAlgorithm.SHA256.matches("sha256")


@pytest.mark.parametrize("value, expected", [
    (None, True),
    ("", True),
    ("NONE", True),
    ("NoAssertion", True),
    ("MIT", False),
])
def test_is_spdx_unset(value, expected):
    assert is_spdx_unset(value) is expected


# --- Models ---

def test_document_from_dict_reads_fixture(app_document):
    assert app_document.name == "app 1.0.0"
    assert app_document.spdx_version == "SPDX-2.2"
    assert app_document.document_describes == ["SPDXRef-RootPackage"]
    assert len(app_document.packages) == 5
    assert len(app_document.files) == 1
    assert app_document.creation_info.creators[0] == "Organization: Contoso"

    express = app_document.get_package("SPDXRef-Package-EXPRESS")
    assert express.version_info == "4.17.1"
    assert express.external_refs[0].reference_locator == "pkg:npm/express@4.17.1"


def test_document_round_trip_keeps_unknown_fields():
    data = {
        "SPDXID": "SPDXRef-DOCUMENT",
        "spdxVersion": "SPDX-2.3",
        "name": "doc",
        "documentNamespace": "https://example.com/doc",
        "comment": "document level comment",
        "creationInfo": {"created": "2024-01-01T00:00:00Z", "creators": ["Tool: x"], "licenseListVersion": "3.21"},
        "documentDescribes": ["SPDXRef-A"],
        "packages": [{
            "SPDXID": "SPDXRef-A",
            "name": "a",
            "originator": "Person: Jane",
            "externalRefs": [{
                "referenceCategory": "OTHER",
                "referenceType": "website",
                "referenceLocator": "https://a.example.com",
                "custom": True,
            }],
        }],
        "files": [],
        "relationships": [],
    }

    result = Document.from_dict(data).to_dict()

    assert result["comment"] == "document level comment"
    assert result["creationInfo"]["licenseListVersion"] == "3.21"
    assert result["packages"][0]["originator"] == "Person: Jane"
    assert result["packages"][0]["externalRefs"][0]["custom"] is True
    assert result["documentDescribes"] == ["SPDXRef-A"]


def test_document_describes_derived_from_relationships():
    document = Document.from_dict({
        "SPDXID": "SPDXRef-DOCUMENT",
        "packages": [{"SPDXID": "SPDXRef-A", "name": "a"}, {"SPDXID": "SPDXRef-B", "name": "b"}],
        "relationships": [
            {"spdxElementId": "SPDXRef-DOCUMENT", "relationshipType": "DESCRIBES", "relatedSpdxElement": "SPDXRef-A"},
            {"spdxElementId": "SPDXRef-A", "relationshipType": "DEPENDS_ON", "relatedSpdxElement": "SPDXRef-B"},
        ],
    })

    assert document.document_describes == ["SPDXRef-A"]


def test_document_tolerates_missing_optional_fields():
    document = Document.from_dict({"SPDXID": "SPDXRef-DOCUMENT", "name": "empty"})

    assert document.packages == []
    assert document.files == []
    assert document.relationships == []
    assert document.document_describes == []
    assert document.creation_info.creators == []


def test_packages_by_id_keeps_first_duplicate():
    first = Package(spdx_id="SPDXRef-A", name="first")
    second = Package(spdx_id="SPDXRef-A", name="second")
    document = Document(packages=[first, second])

    assert document.packages_by_id()["SPDXRef-A"] is first
    assert document.get_package("SPDXRef-A") is first
    assert document.get_package("SPDXRef-Missing") is None


def test_package_to_dict_omits_unset_fields():
    package = Package(spdx_id="SPDXRef-A", name="a")

    assert package.to_dict() == {"name": "a", "SPDXID": "SPDXRef-A"}


def test_external_ref_comment_is_optional():
    ref = ExternalRef.from_dict({
        "referenceCategory": "PACKAGE-MANAGER",
        "referenceType": "purl",
        "referenceLocator": "pkg:npm/a@1.0.0",
    })

    assert ref.comment is None
    assert "comment" not in ref.to_dict()


def test_file_normalized_name():
    assert File(spdx_id="SPDXRef-File-a", file_name="./src//lib/../index.js").normalized_file_name == "src/index.js"
    assert File(spdx_id="SPDXRef-File-b", file_name="").normalized_file_name == ""
