import pytest

from sbom_cli.spdx.constants import ChecksumAlgorithm
from sbom_cli.spdx.models import Checksum, CreationInfo, Package
from sbom_cli.spdx.package_info import (
    ActorType,
    get_checksum,
    get_creator_organization,
    get_creator_tool,
    get_package_license_expression,
    get_package_license_references,
    get_package_supplier_organization,
    parse_actor,
)


@pytest.mark.parametrize("value, actor_type, name, email", [
    ("Organization: Contoso", ActorType.ORGANIZATION, "Contoso", None),
    ("Person: Jane Doe (jane@example.com)", ActorType.PERSON, "Jane Doe", "jane@example.com"),
    ("Tool: Microsoft.SBOMTool-2.2.0", ActorType.TOOL, "Microsoft.SBOMTool-2.2.0", None),
    ("organization:Lower Case Inc", ActorType.ORGANIZATION, "Lower Case Inc", None),
])
def test_parse_actor(value, actor_type, name, email):
    actor = parse_actor(value)
    assert actor.actor_type == actor_type
    assert actor.name == name
    assert actor.email == email


@pytest.mark.parametrize("value", [None, "", "NOASSERTION", "Robot: R2D2", "just a name"])
def test_parse_actor_returns_none_for_unrecognised_values(value):
    assert parse_actor(value) is None


def test_creator_organization_and_tool(app_document):
    assert get_creator_organization(app_document.creation_info) == "Contoso"
    assert get_creator_tool(app_document.creation_info) == "Microsoft.SBOMTool-2.2.0"


def test_creator_lookups_without_creators():
    assert get_creator_organization(CreationInfo()) is None
    assert get_creator_tool(None) is None


def test_license_expression_prefers_concluded():
    package = Package(spdx_id="SPDXRef-A", name="a", license_concluded="MIT", license_declared="Apache-2.0")
    assert get_package_license_expression(package) == "MIT"


def test_license_expression_falls_back_to_declared(app_document):
    body_parser = app_document.get_package("SPDXRef-Package-BODYPARSER")
    assert get_package_license_expression(body_parser) == "MIT"


def test_license_expression_unset():
    package = Package(spdx_id="SPDXRef-A", name="a", license_concluded="NOASSERTION", license_declared="NONE")
    assert get_package_license_expression(package) is None
    assert get_package_license_references(package) == []


def test_license_references_split_expression():
    package = Package(spdx_id="SPDXRef-A", name="a", license_concluded="MIT OR  Apache-2.0")
    assert get_package_license_references(package) == ["MIT", "OR", "Apache-2.0"]


def test_supplier_organization(app_document):
    assert get_package_supplier_organization(app_document.get_package("SPDXRef-Package-EXPRESS")) == "TJ Holowaychuk"
    # Non-organization suppliers are shown verbatim
    assert get_package_supplier_organization(app_document.get_package("SPDXRef-Package-QS")) == "Person: Jordan Harband"
    assert get_package_supplier_organization(app_document.get_package("SPDXRef-Package-BODYPARSER")) is None


def test_get_checksum_matches_algorithm_structurally():
    checksums = [Checksum("SHA1", "aaa"), Checksum("sha256", "bbb")]
    assert get_checksum(checksums, ChecksumAlgorithm.SHA256) == "bbb"
    assert get_checksum(checksums, ChecksumAlgorithm.SHA1) == "aaa"
    assert get_checksum(checksums, ChecksumAlgorithm.MD5) is None
