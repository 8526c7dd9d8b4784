# sbom_cli/licenses.py

"""
License lookup and risk assessment.

Licenses are read from the static table in ``data/licenses.json``, which lists
the permissions, conditions and limitations of each license in the
choosealicense.com vocabulary. Risk is derived from that vocabulary only:

* no ``commercial-use`` permission  -> Medium
* ``disclose-source`` or ``network-use-disclose`` condition -> High
"""

import functools
import json
import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

LICENSES_DATA_FILE = os.path.join(os.path.dirname(__file__), "data", "licenses.json")

COMMERCIAL_USE = "commercial-use"
SOURCE_DISCLOSURE_CONDITIONS = ("disclose-source", "network-use-disclose")

LICENSE_NOT_FOUND_REASON = "License not found"
NO_COMMERCIAL_USE_REASON = "The licensed material and derivatives cannot be used for commercial purposes"

_EXPRESSION_OPERATORS = {"AND", "OR", "WITH"}
_EXPRESSION_TOKEN = re.compile(r"[^\s()]+")
_VERSION_QUALIFIER = re.compile(r"(-only|-or-later|\+)$", re.IGNORECASE)


class LicenseRiskSeverity(Enum):
    UNKNOWN = "Unknown"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class LicenseRule:
    key: str
    label: str
    description: str


@dataclass(frozen=True)
class License:
    id: str
    name: str
    url: str
    nickname: Optional[str] = None
    permissions: Tuple[LicenseRule, ...] = ()
    conditions: Tuple[LicenseRule, ...] = ()
    limitations: Tuple[LicenseRule, ...] = ()

    def has_permission(self, key: str) -> bool:
        return any(rule.key == key for rule in self.permissions)

    def get_condition(self, *keys: str) -> Optional[LicenseRule]:
        """The first condition matching any of ``keys``, in license order."""
        return next((rule for rule in self.conditions if rule.key in keys), None)


@dataclass
class LicenseRisk:
    severity: LicenseRiskSeverity
    reasons: List[str] = field(default_factory=list)


def normalise_license_id(license_id: Optional[str]) -> str:
    return (license_id or "").strip().casefold()


def _resolve_rules(keys: List[str], rules: Dict[str, Dict[str, str]], kind: str, license_id: str) -> Tuple[LicenseRule, ...]:
    resolved = []
    for key in keys or []:
        rule = rules.get(key)
        if rule is None:
            logger.warning(f"Unknown {kind} '{key}' for license '{license_id}' in license table")
            continue
        resolved.append(LicenseRule(key=key, label=rule.get("label", key), description=rule.get("description", "")))
    return tuple(resolved)


@functools.lru_cache(maxsize=None)
def load_license_table(path: str = LICENSES_DATA_FILE) -> Dict[str, License]:
    """Load the license table, keyed by normalised SPDX id."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    rules = data.get("rules", {})
    table: Dict[str, License] = {}
    for entry in data.get("licenses", []):
        license_id = entry["spdxId"]
        table[normalise_license_id(license_id)] = License(
            id=license_id,
            name=entry.get("name") or license_id,
            url=entry.get("url") or "",
            nickname=entry.get("nickname"),
            permissions=_resolve_rules(entry.get("permissions"), rules.get("permissions", {}), "permission", license_id),
            conditions=_resolve_rules(entry.get("conditions"), rules.get("conditions", {}), "condition", license_id),
            limitations=_resolve_rules(entry.get("limitations"), rules.get("limitations", {}), "limitation", license_id),
        )
    logger.debug(f"Loaded {len(table)} licenses from {path}")
    return table


def get_license(license_id: Optional[str]) -> Optional[License]:
    """
    Look up a license by SPDX id.

    Ids are matched case-insensitively. ``GPL-3.0-only``, ``GPL-3.0-or-later``
    and ``GPL-3.0+`` fall back to ``GPL-3.0`` when there is no exact entry.
    """
    key = normalise_license_id(license_id)
    if not key:
        return None
    table = load_license_table()
    found = table.get(key)
    if found is None:
        found = table.get(_VERSION_QUALIFIER.sub("", key))
    return found


def get_license_risk_assessment(license_id: Optional[str]) -> LicenseRisk:
    """
    Assess the risk of using material under a license.

    Args:
        license_id: SPDX license id

    Returns:
        LicenseRisk: Unknown for licenses missing from the table, otherwise
        Low, Medium or High with the reasons that raised it
    """
    license = get_license(license_id)
    if license is None:
        return LicenseRisk(severity=LicenseRiskSeverity.UNKNOWN, reasons=[LICENSE_NOT_FOUND_REASON])

    risk = LicenseRisk(severity=LicenseRiskSeverity.LOW)

    if not license.has_permission(COMMERCIAL_USE):
        risk.severity = LicenseRiskSeverity.MEDIUM
        risk.reasons.append(NO_COMMERCIAL_USE_REASON)

    disclosure = license.get_condition(*SOURCE_DISCLOSURE_CONDITIONS)
    if disclosure is not None:
        risk.severity = LicenseRiskSeverity.HIGH
        risk.reasons.append(disclosure.description)

    return risk


def get_license_ids_from_expression(expression: Optional[str]) -> List[str]:
    """License ids named in an SPDX expression, without operators or exception ids."""
    ids: List[str] = []
    tokens = _EXPRESSION_TOKEN.findall(expression or "")
    skip_next = False
    for token in tokens:
        if skip_next:
            skip_next = False
            continue
        upper = token.upper()
        if upper == "WITH":
            skip_next = True
            continue
        if upper in _EXPRESSION_OPERATORS or upper in ("NONE", "NOASSERTION"):
            continue
        if token not in ids:
            ids.append(token)
    return ids


def get_licenses_from_expression(expression: Optional[str]) -> List[License]:
    """Known licenses named in an SPDX license expression, in order of appearance."""
    licenses: List[License] = []
    for license_id in get_license_ids_from_expression(expression):
        license = get_license(license_id)
        if license is not None and license not in licenses:
            licenses.append(license)
    return licenses


__all__ = [
    "License",
    "LicenseRule",
    "LicenseRisk",
    "LicenseRiskSeverity",
    "load_license_table",
    "get_license",
    "get_license_risk_assessment",
    "get_license_ids_from_expression",
    "get_licenses_from_expression",
]
