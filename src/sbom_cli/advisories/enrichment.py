"""
Enrich SPDX packages with GitHub security advisories.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from packaging.version import InvalidVersion, Version

from ..spdx.constants import DocumentVersion
from ..spdx.external_refs import (
    build_security_advisory_ref,
    encode_security_vulnerability_ref,
    get_package_manager_ref,
    get_package_url,
)
from ..spdx.models import Document, Package
from .ecosystems import get_ghsa_ecosystem_from_package_url
from .graph_client import GitHubGraphClient
from .models import AdvisoryPackage, SecurityVulnerability

logger = logging.getLogger("sbom-cli")


@dataclass
class EnrichmentSummary:
    """
    Outcome of an enrichment run.

    ``failed_batches`` greater than zero means some packages could not be
    checked and the advisory data is incomplete.
    """
    packages_checked: int = 0
    advisories_added: int = 0
    packages_affected: int = 0
    failed_batches: int = 0

    @property
    def is_complete(self) -> bool:
        return self.failed_batches == 0


def group_packages_by_ecosystem(document: Document) -> Dict[str, List[AdvisoryPackage]]:
    """Packages with a purl reference, grouped by GHSA ecosystem; others are skipped."""
    ecosystems: Dict[str, List[AdvisoryPackage]] = {}
    for package in document.packages:
        purl = get_package_url(package)
        ecosystem = get_ghsa_ecosystem_from_package_url(purl)
        if not ecosystem:
            continue
        ecosystems.setdefault(ecosystem, []).append(
            AdvisoryPackage(id=purl, name=package.name, version=package.version_info)
        )
    return ecosystems


def _find_package_for_vulnerability(document: Document, vulnerability: SecurityVulnerability) -> Optional[Package]:
    for package in document.packages:
        ref = get_package_manager_ref(package.external_refs)
        if ref is not None and ref.reference_locator == vulnerability.package.id:
            return package
    return None


def _predates_spdx_2_3(spdx_version: Optional[str]) -> bool:
    text = (spdx_version or "").upper().replace("SPDX-", "").strip()
    try:
        return Version(text) < Version("2.3")
    except InvalidVersion:
        return True


def add_security_advisory_external_refs(
    document: Document,
    access_token: str,
    client: Optional[GitHubGraphClient] = None,
) -> EnrichmentSummary:
    """
    Check every package of a document for GHSA security advisories.

    Each affecting advisory adds two external references to its package: a
    ``SECURITY/advisory`` link to the advisory page and a ``SECURITY/url``
    reference holding the full advisory record. The document is modified in
    place and is upgraded to SPDX-2.3 when advisories were added.

    Args:
        document: The SPDX document to enrich
        access_token: GitHub access token
        client: Optional pre-configured client, one is created from the token otherwise

    Returns:
        EnrichmentSummary: Counts of what was checked and added
    """
    client = client or GitHubGraphClient(access_token)
    summary = EnrichmentSummary()
    failed_batches_before = client.failed_batches

    vulnerabilities: List[SecurityVulnerability] = []
    for ecosystem, packages in group_packages_by_ecosystem(document).items():
        summary.packages_checked += len(packages)
        found = client.get_security_vulnerabilities(ecosystem, packages)
        if found:
            affected_names = {v.package.name for v in found}
            logger.info(f"Found {len(found)} advisories; affecting {len(affected_names)} packages")
        vulnerabilities.extend(found)

    summary.failed_batches = client.failed_batches - failed_batches_before
    if summary.failed_batches:
        logger.warning(
            f"{summary.failed_batches} advisory batch(es) failed, security advisory data may be incomplete"
        )

    if not vulnerabilities:
        logger.info("No security advisories found")
        return summary

    affected_package_ids = set()
    for vulnerability in vulnerabilities:
        package = _find_package_for_vulnerability(document, vulnerability)
        if package is None:
            logger.debug(f"No package found for advisory {vulnerability.advisory.primary_id} on '{vulnerability.package.id}'")
            continue
        package.external_refs.append(build_security_advisory_ref(vulnerability))
        package.external_refs.append(encode_security_vulnerability_ref(vulnerability))
        affected_package_ids.add(package.spdx_id)
        summary.advisories_added += 1

    summary.packages_affected = len(affected_package_ids)

    # security advisory/url references need SPDX 2.3
    if summary.advisories_added and _predates_spdx_2_3(document.spdx_version):
        logger.info(f"Upgrading SPDX version from {document.spdx_version} to {DocumentVersion.SPDX_2_3.value}")
        document.spdx_version = DocumentVersion.SPDX_2_3.value

    logger.info(
        f"Added {summary.advisories_added} security advisories to {summary.packages_affected} packages"
    )
    return summary


__all__ = [
    "EnrichmentSummary",
    "group_packages_by_ecosystem",
    "add_security_advisory_external_refs",
]
