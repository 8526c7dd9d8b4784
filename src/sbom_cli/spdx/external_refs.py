"""
Access to the payloads carried by SPDX external references.

External references share one shape but carry different payloads depending on
their category/type pair:

* ``PACKAGE-MANAGER`` / ``purl`` (and older types): a package coordinate.
* ``SECURITY`` / ``advisory``: an advisory permalink with a human readable
  comment ``[<SEVERITY>] <summary>; Affects <name> v<version>``.
* ``SECURITY`` / ``url``: a full vulnerability record encoded as
  ``data:text/json;base64,<base64 JSON>``.

Documents produced before the ``url`` encoding existed only carry the advisory
form, with GHSA ids in the locator and CVE ids in the comment. Those are still
decoded by :func:`parse_legacy_security_vulnerability`.
"""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from packageurl import PackageURL

from ..advisories.models import (
    Advisory,
    AdvisoryIdentifier,
    AdvisoryIdentifierType,
    AdvisoryPackage,
    AdvisorySeverity,
    SecurityVulnerability,
)
from ..exceptions import ValidationError
from ..utils import to_pascal_case
from .constants import ExternalRefCategory, ExternalRefPackageManagerType, ExternalRefSecurityType
from .models import ExternalRef, Package

logger = logging.getLogger(__name__)

DATA_URL_JSON_PREFIX = "data:text/json;base64,"

_DATA_URL_JSON_PATTERN = re.compile(r"^data:text/json;base64,", re.IGNORECASE)
_ADVISORY_COMMENT_PATTERN = re.compile(
    r"^\[(?P<severity>\w+)\](?P<summary>[^;]*)(;\s*Affects\s+(?P<name>.+?)\s+v(?P<version>\S+)\s*$)?"
)
_GHSA_ID_PATTERN = re.compile(r"GHSA-[0-9a-z-]+", re.IGNORECASE)
_CVE_ID_PATTERN = re.compile(r"CVE-[0-9-]+", re.IGNORECASE)


@dataclass(frozen=True)
class AdvisoryComment:
    """Parsed form of a ``SECURITY/advisory`` comment."""
    severity: Optional[AdvisorySeverity]
    severity_text: str
    summary: str
    package_name: Optional[str] = None
    package_version: Optional[str] = None


def is_security_advisory_ref(ref: ExternalRef) -> bool:
    return (
        ExternalRefCategory.SECURITY.matches(ref.reference_category)
        and ExternalRefSecurityType.ADVISORY.matches(ref.reference_type)
    )


def is_security_vulnerability_ref(ref: ExternalRef) -> bool:
    return (
        ExternalRefCategory.SECURITY.matches(ref.reference_category)
        and ExternalRefSecurityType.URL.matches(ref.reference_type)
        and bool(_DATA_URL_JSON_PATTERN.match(ref.reference_locator or ""))
    )


def encode_data_url_json(payload: Any) -> str:
    encoded = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    return f"{DATA_URL_JSON_PREFIX}{encoded}"


def decode_data_url_json(locator: str) -> Any:
    """
    Decode a ``data:text/json;base64,`` locator.

    Raises:
        ValidationError: If the locator is not a base64 encoded JSON data URL
    """
    if not _DATA_URL_JSON_PATTERN.match(locator or ""):
        raise ValidationError(f"Locator is not a base64 JSON data URL: '{(locator or '')[:40]}'")
    payload = locator.split(",", 1)[1]
    try:
        return json.loads(base64.b64decode(payload, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"External reference payload is not base64 encoded JSON: {e}") from e


def encode_security_vulnerability_ref(vulnerability: SecurityVulnerability) -> ExternalRef:
    """The machine readable ``SECURITY/url`` reference holding the full vulnerability record."""
    return ExternalRef(
        reference_category=ExternalRefCategory.SECURITY.value,
        reference_type=ExternalRefSecurityType.URL.value,
        reference_locator=encode_data_url_json(vulnerability.to_dict()),
        comment=(
            f"GHSA security vulnerability details for {vulnerability.advisory.primary_id} "
            f"encoded as Base64 JSON text"
        ),
    )


def decode_security_vulnerability_ref(ref: ExternalRef) -> SecurityVulnerability:
    """
    Decode a ``SECURITY/url`` reference created by :func:`encode_security_vulnerability_ref`.

    Raises:
        ValidationError: If the reference does not carry a JSON vulnerability record
    """
    payload = decode_data_url_json(ref.reference_locator)
    if not isinstance(payload, dict):
        raise ValidationError("External reference payload is not a JSON object")
    return SecurityVulnerability.from_dict(payload)


def format_advisory_comment(vulnerability: SecurityVulnerability) -> str:
    severity = vulnerability.advisory.severity.value if vulnerability.advisory.severity else ""
    return (
        f"[{severity}] {vulnerability.advisory.summary}; "
        f"Affects {vulnerability.package.name} v{vulnerability.package.version}"
    )


def build_security_advisory_ref(vulnerability: SecurityVulnerability) -> ExternalRef:
    """The human readable ``SECURITY/advisory`` reference pointing at the advisory web page."""
    return ExternalRef(
        reference_category=ExternalRefCategory.SECURITY.value,
        reference_type=ExternalRefSecurityType.ADVISORY.value,
        reference_locator=vulnerability.advisory.permalink,
        comment=format_advisory_comment(vulnerability),
    )


def parse_advisory_comment(comment: Optional[str]) -> Optional[AdvisoryComment]:
    """Parse ``[<SEVERITY>] <summary>[; Affects <name> v<version>]``; None if it does not match."""
    if not comment:
        return None
    match = _ADVISORY_COMMENT_PATTERN.match(comment.strip())
    if not match:
        return None
    return AdvisoryComment(
        severity=AdvisorySeverity.parse(match.group("severity")),
        severity_text=match.group("severity"),
        summary=match.group("summary").strip(),
        package_name=match.group("name"),
        package_version=match.group("version"),
    )


def parse_legacy_security_vulnerability(ref: ExternalRef, package: Package) -> Optional[SecurityVulnerability]:
    """
    Decode an advisory reference written in the legacy text-only encoding.

    Only the GHSA id, CVE id, severity, summary and permalink can be recovered.
    """
    if not is_security_advisory_ref(ref):
        return None
    parsed = parse_advisory_comment(ref.comment)
    ghsa_match = _GHSA_ID_PATTERN.search(ref.reference_locator or "")
    cve_match = _CVE_ID_PATTERN.search(ref.comment or "")
    return SecurityVulnerability(
        ecosystem=get_external_ref_package_manager_name(package.external_refs) or "",
        package=AdvisoryPackage(id=package.spdx_id, name=package.name or "", version=package.version_info or None),
        advisory=Advisory(
            identifiers=(
                AdvisoryIdentifier(type=AdvisoryIdentifierType.GHSA.value, value=ghsa_match.group(0) if ghsa_match else ""),
                AdvisoryIdentifier(type=AdvisoryIdentifierType.CVE.value, value=cve_match.group(0) if cve_match else ""),
            ),
            severity=parsed.severity if parsed else None,
            summary=parsed.summary if parsed else "",
            permalink=ref.reference_locator or "",
        ),
    )


def get_package_security_vulnerabilities(package: Package) -> List[SecurityVulnerability]:
    """
    All vulnerabilities recorded against a package.

    Full records from ``SECURITY/url`` references are preferred; the legacy
    advisory encoding is only read when a package has no such records.
    """
    refs = package.external_refs or []
    vulnerabilities = [decode_security_vulnerability_ref(ref) for ref in refs if is_security_vulnerability_ref(ref)]
    if vulnerabilities:
        return vulnerabilities

    legacy = [parse_legacy_security_vulnerability(ref, package) for ref in refs if is_security_advisory_ref(ref)]
    if legacy:
        logger.debug(f"Parsed {len(legacy)} legacy security advisories for package '{package.name}'")
    return [v for v in legacy if v is not None]


def get_package_manager_ref(external_refs: List[ExternalRef]) -> Optional[ExternalRef]:
    for ref in external_refs or []:
        if ExternalRefCategory.PACKAGE_MANAGER.matches(ref.reference_category):
            return ref
    return None


def get_package_url(package: Package) -> Optional[str]:
    """The locator of the package's ``PACKAGE-MANAGER/purl`` reference."""
    for ref in package.external_refs or []:
        if (
            ExternalRefCategory.PACKAGE_MANAGER.matches(ref.reference_category)
            and ExternalRefPackageManagerType.PACKAGE_URL.matches(ref.reference_type)
        ):
            return ref.reference_locator
    return None


def _split_npm_locator(locator: str) -> Tuple[str, str]:
    """Split ``name@version``, keeping the leading ``@`` of scoped packages."""
    separator = locator.rfind("@")
    if separator <= 0:
        return locator, ""
    return locator[:separator], locator[separator + 1:]


def _parse_purl(locator: str) -> Optional[PackageURL]:
    try:
        return PackageURL.from_string(locator)
    except ValueError:
        logger.debug(f"Invalid package URL '{locator}'")
        return None


def get_external_ref_package_manager_name(external_refs: List[ExternalRef]) -> Optional[str]:
    ref = get_package_manager_ref(external_refs)
    if ref is None:
        return None
    ref_type = ExternalRefPackageManagerType.parse(ref.reference_type)
    if ref_type == ExternalRefPackageManagerType.MAVEN_CENTRAL:
        return "Maven Central"
    if ref_type == ExternalRefPackageManagerType.NPM:
        return "NPM"
    if ref_type == ExternalRefPackageManagerType.NUGET:
        return "NuGet"
    if ref_type == ExternalRefPackageManagerType.BOWER:
        return "Bower"
    if ref_type == ExternalRefPackageManagerType.PACKAGE_URL:
        purl = _parse_purl(ref.reference_locator)
        return to_pascal_case(purl.type) if purl else None
    return None


def get_external_ref_package_manager_url(external_refs: List[ExternalRef]) -> Optional[str]:
    """Link to the package's page on its registry, where the registry is known."""
    ref = get_package_manager_ref(external_refs)
    if ref is None:
        return None
    locator = ref.reference_locator or ""
    ref_type = ExternalRefPackageManagerType.parse(ref.reference_type)

    if ref_type == ExternalRefPackageManagerType.MAVEN_CENTRAL:
        return f"https://search.maven.org/artifact/{locator.replace(':', '/')}/pom"
    if ref_type == ExternalRefPackageManagerType.NPM:
        name, version = _split_npm_locator(locator)
        return f"https://www.npmjs.com/package/{name}/v/{version}" if version else f"https://www.npmjs.com/package/{name}"
    if ref_type == ExternalRefPackageManagerType.NUGET:
        return f"https://www.nuget.org/packages/{locator}"
    if ref_type == ExternalRefPackageManagerType.BOWER:
        name, _, version = locator.partition("#")
        return f"https://yarnpkg.com/package?name={name}&version={version}"
    if ref_type == ExternalRefPackageManagerType.PACKAGE_URL:
        purl = _parse_purl(locator)
        if purl is None:
            return None
        if purl.type == "npm":
            namespace = f"{purl.namespace}/" if purl.namespace else ""
            return f"https://www.npmjs.com/package/{namespace}{purl.name}/v/{purl.version}"
        if purl.type == "nuget":
            return f"https://www.nuget.org/packages/{purl.name}/{purl.version}"
        if purl.type == "pypi":
            return f"https://pypi.org/project/{purl.name}/{purl.version}/"
        if purl.type == "cargo":
            return f"https://crates.io/crates/{purl.name}/{purl.version}"
        if purl.type == "gem":
            return f"https://rubygems.org/gems/{purl.name}/versions/{purl.version}"
        if purl.type == "golang":
            namespace = f"{purl.namespace}/" if purl.namespace else ""
            return f"https://pkg.go.dev/{namespace}{purl.name}@{purl.version}"
    return None


__all__ = [
    "DATA_URL_JSON_PREFIX",
    "AdvisoryComment",
    "is_security_advisory_ref",
    "is_security_vulnerability_ref",
    "encode_data_url_json",
    "decode_data_url_json",
    "encode_security_vulnerability_ref",
    "decode_security_vulnerability_ref",
    "format_advisory_comment",
    "build_security_advisory_ref",
    "parse_advisory_comment",
    "parse_legacy_security_vulnerability",
    "get_package_security_vulnerabilities",
    "get_package_manager_ref",
    "get_package_url",
    "get_external_ref_package_manager_name",
    "get_external_ref_package_manager_url",
]
