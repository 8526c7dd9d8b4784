"""
Security advisory value objects.

The JSON produced by :meth:`SecurityVulnerability.to_dict` is the wire format
embedded in SPDX external references. It follows the shape of the GitHub
GraphQL ``SecurityVulnerability`` node so that documents written by other
tooling stay readable. ``from_dict`` also accepts the flattened shape some
consumers write (plain string references, a ``cwes`` list, a string
``firstPatchedVersion``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class AdvisorySeverity(Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def weight(self) -> int:
        return _SEVERITY_WEIGHTS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AdvisorySeverity"]:
        if not value:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


_SEVERITY_WEIGHTS = {
    AdvisorySeverity.LOW: 1,
    AdvisorySeverity.MODERATE: 2,
    AdvisorySeverity.HIGH: 3,
    AdvisorySeverity.CRITICAL: 4,
}


class AdvisoryIdentifierType(Enum):
    GHSA = "GHSA"
    CVE = "CVE"


@dataclass(frozen=True)
class AdvisoryIdentifier:
    type: str
    value: str


@dataclass(frozen=True)
class Cvss:
    score: float = 0.0
    vector_string: Optional[str] = None


@dataclass(frozen=True)
class Epss:
    percentage: float = 0.0
    percentile: float = 0.0


@dataclass(frozen=True)
class Cwe:
    cwe_id: str
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class Advisory:
    identifiers: Tuple[AdvisoryIdentifier, ...] = ()
    severity: Optional[AdvisorySeverity] = None
    summary: str = ""
    description: str = ""
    references: Tuple[str, ...] = ()
    cvss: Cvss = field(default_factory=Cvss)
    cwes: Tuple[Cwe, ...] = ()
    epss: Optional[Epss] = None
    published_at: Optional[str] = None
    updated_at: Optional[str] = None
    withdrawn_at: Optional[str] = None
    permalink: str = ""

    def get_identifier(self, identifier_type: AdvisoryIdentifierType) -> Optional[str]:
        for identifier in self.identifiers:
            if identifier.type.upper() == identifier_type.value and identifier.value:
                return identifier.value
        return None

    @property
    def ghsa_id(self) -> Optional[str]:
        return self.get_identifier(AdvisoryIdentifierType.GHSA)

    @property
    def cve_id(self) -> Optional[str]:
        return self.get_identifier(AdvisoryIdentifierType.CVE)

    @property
    def primary_id(self) -> Optional[str]:
        """The GHSA id, or the first identifier when there is none."""
        if self.ghsa_id:
            return self.ghsa_id
        return self.identifiers[0].value if self.identifiers else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Advisory":
        data = data or {}

        references = []
        for reference in data.get("references") or []:
            url = reference.get("url") if isinstance(reference, dict) else reference
            if url:
                references.append(str(url))

        cwes_data = data.get("cwes") or []
        if isinstance(cwes_data, dict):
            cwes_data = cwes_data.get("nodes") or []
        cwes = tuple(
            Cwe(
                cwe_id=c.get("cweId") or c.get("id") or "",
                name=c.get("name") or "",
                description=c.get("description") or "",
            )
            for c in cwes_data
        )

        cvss_data = data.get("cvss") or {}
        epss_data = data.get("epss")

        return cls(
            identifiers=tuple(
                AdvisoryIdentifier(type=str(i.get("type", "")), value=str(i.get("value", "")))
                for i in data.get("identifiers") or []
            ),
            severity=AdvisorySeverity.parse(data.get("severity")),
            summary=data.get("summary") or "",
            description=data.get("description") or "",
            references=tuple(references),
            cvss=Cvss(score=float(cvss_data.get("score") or 0.0), vector_string=cvss_data.get("vectorString")),
            cwes=cwes,
            epss=Epss(
                percentage=float(epss_data.get("percentage") or 0.0),
                percentile=float(epss_data.get("percentile") or 0.0),
            ) if epss_data else None,
            published_at=data.get("publishedAt") or None,
            updated_at=data.get("updatedAt") or None,
            withdrawn_at=data.get("withdrawnAt") or None,
            permalink=data.get("permalink") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifiers": [{"type": i.type, "value": i.value} for i in self.identifiers],
            "severity": self.severity.value if self.severity else None,
            "summary": self.summary,
            "description": self.description,
            "references": [{"url": url} for url in self.references],
            "cvss": {"score": self.cvss.score, "vectorString": self.cvss.vector_string},
            "cwes": {
                "nodes": [{"cweId": c.cwe_id, "name": c.name, "description": c.description} for c in self.cwes]
            },
            "epss": {"percentage": self.epss.percentage, "percentile": self.epss.percentile} if self.epss else None,
            "publishedAt": self.published_at,
            "updatedAt": self.updated_at,
            "withdrawnAt": self.withdrawn_at,
            "permalink": self.permalink,
        }


@dataclass(frozen=True)
class AdvisoryPackage:
    """A package as queried against the advisory database; ``id`` is its package URL."""
    id: str
    name: str
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdvisoryPackage":
        data = data or {}
        return cls(id=data.get("id") or "", name=data.get("name") or "", version=data.get("version") or None)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "version": self.version}


@dataclass(frozen=True)
class SecurityVulnerability:
    ecosystem: str
    package: AdvisoryPackage
    advisory: Advisory
    vulnerable_version_range: Optional[str] = None
    first_patched_version: Optional[str] = None

    @property
    def is_withdrawn(self) -> bool:
        return bool(self.advisory.withdrawn_at)

    @classmethod
    def from_graphql_node(cls, ecosystem: str, package: AdvisoryPackage, node: Dict[str, Any]) -> "SecurityVulnerability":
        """Build a vulnerability from a ``securityVulnerabilities`` GraphQL node."""
        return cls.from_dict({"ecosystem": ecosystem, "package": package.to_dict(), **(node or {})})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecurityVulnerability":
        first_patched = data.get("firstPatchedVersion")
        if isinstance(first_patched, dict):
            first_patched = first_patched.get("identifier")
        return cls(
            ecosystem=data.get("ecosystem") or "",
            package=AdvisoryPackage.from_dict(data.get("package")),
            advisory=Advisory.from_dict(data.get("advisory")),
            vulnerable_version_range=data.get("vulnerableVersionRange") or None,
            first_patched_version=first_patched or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ecosystem": self.ecosystem,
            "package": self.package.to_dict(),
            "advisory": self.advisory.to_dict(),
            "vulnerableVersionRange": self.vulnerable_version_range,
            "firstPatchedVersion": (
                {"identifier": self.first_patched_version} if self.first_patched_version else None
            ),
        }


def count_by_severity(vulnerabilities: List[SecurityVulnerability]) -> Dict[AdvisorySeverity, int]:
    counts = {severity: 0 for severity in AdvisorySeverity}
    for vulnerability in vulnerabilities:
        if vulnerability.advisory.severity:
            counts[vulnerability.advisory.severity] += 1
    return counts
