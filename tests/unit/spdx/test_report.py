import pytest

from sbom_cli.advisories.models import AdvisoryPackage, SecurityVulnerability
from sbom_cli.spdx.external_refs import build_security_advisory_ref, encode_security_vulnerability_ref
from sbom_cli.spdx.models import ExternalRef
from sbom_cli.spdx.report import (
    build_document_summary,
    build_file_rows,
    build_license_rows,
    build_package_rows,
    build_relationship_rows,
    build_security_advisory_rows,
    build_supplier_rows,
)


@pytest.fixture
def enriched_worker(worker_document, lodash_graphql_response):
    node = lodash_graphql_response["data"]["securityVulnerabilities"]["nodes"][0]
    package = AdvisoryPackage(id="pkg:npm/lodash@4.17.20", name="lodash", version="4.17.20")
    vulnerability = SecurityVulnerability.from_graphql_node("NPM", package, node)
    lodash = worker_document.get_package("SPDXRef-Package-LODASH")
    lodash.external_refs.append(build_security_advisory_ref(vulnerability))
    lodash.external_refs.append(encode_security_vulnerability_ref(vulnerability))
    return worker_document


def test_document_summary(app_document):
    summary = build_document_summary(app_document)

    assert summary["name"] == "app 1.0.0"
    assert summary["organization"] == "Contoso"
    assert summary["tool"] == "Microsoft.SBOMTool-2.2.0"
    assert summary["spdx_version"] == "SPDX-2.2"
    assert summary["package_count"] == 4
    assert summary["file_count"] == 1
    assert summary["relationship_count"] == 8


def test_file_rows(app_document):
    [row] = build_file_rows(app_document)

    assert row["name"] == "src/index.js"
    assert row["checksum_sha256"].startswith("0e7c9f6b")


def test_package_rows(app_document):
    rows = {row["name"]: row for row in build_package_rows(app_document)}

    assert "app" not in rows
    assert rows["qs"]["level"] == "Transitive"
    assert rows["qs"]["introduced_through"] == "express > body-parser"
    assert rows["express"]["level"] == "Top"
    assert rows["express"]["introduced_through"] == ""
    assert rows["express"]["package_manager"] == "Npm"
    assert rows["body-parser"]["license"] == "MIT"
    assert rows["express"]["supplier"] == "TJ Holowaychuk"
    assert rows["qs"]["total_vulnerabilities"] == 0


def test_package_rows_count_vulnerabilities(enriched_worker):
    rows = {row["name"]: row for row in build_package_rows(enriched_worker)}

    assert rows["lodash"]["total_vulnerabilities"] == 1
    assert rows["lodash"]["high_vulnerabilities"] == 1
    assert rows["lodash"]["critical_vulnerabilities"] == 0
    assert rows["lodash"]["security_advisories"] == "GHSA-35jh-r3h4-6jhm"


def test_security_advisory_rows(enriched_worker):
    [row] = build_security_advisory_rows(enriched_worker)

    assert row["ghsa_id"] == "GHSA-35jh-r3h4-6jhm"
    assert row["cve_id"] == "CVE-2021-23337"
    assert row["package"] == "lodash 4.17.20"
    assert row["severity"] == "High"
    assert row["cvss_score"] == 7.2
    assert row["cwe_ids"] == "CWE-77, CWE-94"
    assert row["epss_percentage"] == "1.234"
    assert row["epss_percentile"] == "85.21"
    assert row["first_patched_version"] == "4.17.21"


def test_unreadable_vulnerability_refs_are_skipped(worker_document, caplog):
    lodash = worker_document.get_package("SPDXRef-Package-LODASH")
    lodash.external_refs.append(ExternalRef("SECURITY", "url", "data:text/json;base64,!!!!"))

    assert build_security_advisory_rows(worker_document) == []
    assert "Skipping unreadable security advisories" in caplog.text


def test_license_rows(app_document):
    rows = {row["id"]: row for row in build_license_rows(app_document)}

    assert rows["MIT"]["packages"] == 2
    assert rows["MIT"]["risk_severity"] == "Low"
    assert rows["WTFPL"]["risk_severity"] == "Low"
    assert rows["BSD-3-Clause"]["name"] == "BSD 3-Clause \"New\" or \"Revised\" License"


def test_license_rows_for_unknown_and_copyleft_licenses(app_document):
    app_document.get_package("SPDXRef-Package-QS").license_concluded = "LicenseRef-Custom"
    app_document.get_package("SPDXRef-Package-LEFTPAD").license_concluded = "GPL-3.0-only"

    rows = {row["id"]: row for row in build_license_rows(app_document)}

    assert rows["LicenseRef-Custom"]["risk_severity"] == "Unknown"
    assert rows["LicenseRef-Custom"]["risk_reasons"] == ""
    assert rows["GPL-3.0"]["risk_severity"] == "High"
    assert "Source code must be made available" in rows["GPL-3.0"]["risk_reasons"]


def test_supplier_rows(app_document):
    rows = {row["name"]: row["packages"] for row in build_supplier_rows(app_document)}

    assert rows == {
        "TJ Holowaychuk": 1,
        "Person: Jordan Harband": 1,
        "Cameron Westland": 1,
    }


def test_relationship_rows(app_document):
    rows = build_relationship_rows(app_document)

    assert rows[0] == {
        "source_id": "SPDXRef-DOCUMENT",
        "type": "DESCRIBES",
        "target_id": "SPDXRef-RootPackage",
    }
    assert len(rows) == 8
