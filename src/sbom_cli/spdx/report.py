"""
Tabular views of an SPDX document.

Every ``build_*`` function returns plain dict rows with stable keys, one
function per table: document summary, files, packages, security advisories,
licenses, suppliers and relationships. Root packages are left out of the
package based tables.
"""

import logging
from typing import Any, Dict, List

from ..advisories.models import AdvisoryIdentifierType, AdvisorySeverity, SecurityVulnerability, count_by_severity
from ..exceptions import ValidationError
from ..licenses import LicenseRiskSeverity, get_license, get_license_risk_assessment
from ..utils import distinct_by
from .constants import ChecksumAlgorithm
from .dependency_graph import get_package_depends_on_chain, get_package_level
from .external_refs import get_external_ref_package_manager_name, get_package_security_vulnerabilities
from .models import Document, Package
from .package_info import (
    get_checksum,
    get_creator_organization,
    get_creator_tool,
    get_package_license_expression,
    get_package_supplier_organization,
)

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def _non_root_packages(document: Document) -> List[Package]:
    root_package_ids = set(document.document_describes)
    return [p for p in document.packages if p.spdx_id not in root_package_ids]


def _package_vulnerabilities(package: Package) -> List[SecurityVulnerability]:
    try:
        return get_package_security_vulnerabilities(package)
    except ValidationError as e:
        logger.warning(f"Skipping unreadable security advisories of package '{package.name}': {e.message}")
        return []


def build_document_summary(document: Document) -> Row:
    return {
        "id": document.spdx_id,
        "name": document.name,
        "describes": ", ".join(document.document_describes),
        "created": document.creation_info.created or "",
        "organization": get_creator_organization(document.creation_info) or "",
        "tool": get_creator_tool(document.creation_info) or "",
        "spdx_version": document.spdx_version,
        "data_license": document.data_license or "",
        "namespace": document.document_namespace or "",
        "package_count": len(_non_root_packages(document)),
        "file_count": len(document.files),
        "relationship_count": len(document.relationships),
    }


def build_file_rows(document: Document) -> List[Row]:
    return [
        {
            "id": file.spdx_id,
            "name": file.normalized_file_name,
            "checksum_sha256": get_checksum(file.checksums, ChecksumAlgorithm.SHA256) or "",
        }
        for file in document.files
    ]


def build_package_rows(document: Document) -> List[Row]:
    """One row per non-root package with its origin, license and vulnerability counts."""
    rows = []
    for package in _non_root_packages(document):
        vulnerabilities = _package_vulnerabilities(package)
        counts = count_by_severity(vulnerabilities)
        rows.append({
            "id": package.spdx_id,
            "name": package.name,
            "version": package.version_info or "",
            "package_manager": get_external_ref_package_manager_name(package.external_refs) or "",
            "level": get_package_level(document, package.spdx_id).value,
            "introduced_through": " > ".join(p.name for p in get_package_depends_on_chain(document, package.spdx_id)),
            "license": get_package_license_expression(package) or "",
            "supplier": get_package_supplier_organization(package) or "",
            "total_vulnerabilities": len(vulnerabilities),
            "critical_vulnerabilities": counts[AdvisorySeverity.CRITICAL],
            "high_vulnerabilities": counts[AdvisorySeverity.HIGH],
            "moderate_vulnerabilities": counts[AdvisorySeverity.MODERATE],
            "low_vulnerabilities": counts[AdvisorySeverity.LOW],
            "security_advisories": ", ".join(
                v.advisory.ghsa_id for v in vulnerabilities if v.advisory.ghsa_id
            ),
        })
    return rows


def build_security_advisory_rows(document: Document) -> List[Row]:
    rows = []
    for package in _non_root_packages(document):
        for vulnerability in _package_vulnerabilities(package):
            advisory = vulnerability.advisory
            rows.append({
                "ghsa_id": advisory.get_identifier(AdvisoryIdentifierType.GHSA) or "",
                "cve_id": advisory.get_identifier(AdvisoryIdentifierType.CVE) or "",
                "summary": advisory.summary,
                "package": f"{vulnerability.package.name} {vulnerability.package.version or ''}".strip(),
                "vulnerable_version_range": vulnerability.vulnerable_version_range or "",
                "first_patched_version": vulnerability.first_patched_version or "",
                "severity": advisory.severity.value.capitalize() if advisory.severity else "",
                "cvss_score": advisory.cvss.score,
                "cvss_vector": advisory.cvss.vector_string or "",
                "cwe_ids": ", ".join(c.cwe_id for c in advisory.cwes),
                "epss_percentage": f"{advisory.epss.percentage * 100:.3f}" if advisory.epss else "",
                "epss_percentile": f"{advisory.epss.percentile * 100:.2f}" if advisory.epss else "",
                "published_at": advisory.published_at or "",
                "permalink": advisory.permalink,
            })
    return rows


def build_license_rows(document: Document) -> List[Row]:
    """One row per distinct package license, with its risk assessment."""
    packages = _non_root_packages(document)
    package_licenses = [(p, get_package_license_expression(p)) for p in packages]

    license_ids = distinct_by((lic for _, lic in package_licenses if lic), key=lambda lic: lic)

    rows = []
    for license_id in license_ids:
        details = get_license(license_id)
        risk = get_license_risk_assessment(license_id)
        rows.append({
            "id": details.id if details else license_id,
            "name": details.name if details else license_id,
            "packages": sum(1 for _, lic in package_licenses if lic == license_id),
            "risk_severity": risk.severity.value,
            "risk_reasons": "; ".join(risk.reasons) if risk.severity != LicenseRiskSeverity.UNKNOWN else "",
            "url": details.url if details else "",
        })
    return rows


def build_supplier_rows(document: Document) -> List[Row]:
    suppliers: Dict[str, int] = {}
    for package in _non_root_packages(document):
        supplier = get_package_supplier_organization(package)
        if supplier:
            suppliers[supplier] = suppliers.get(supplier, 0) + 1
    return [{"name": name, "packages": count} for name, count in suppliers.items()]


def build_relationship_rows(document: Document) -> List[Row]:
    return [
        {
            "source_id": r.spdx_element_id,
            "type": r.relationship_type,
            "target_id": r.related_spdx_element,
        }
        for r in document.relationships
    ]


__all__ = [
    "build_document_summary",
    "build_file_rows",
    "build_package_rows",
    "build_security_advisory_rows",
    "build_license_rows",
    "build_supplier_rows",
    "build_relationship_rows",
]
