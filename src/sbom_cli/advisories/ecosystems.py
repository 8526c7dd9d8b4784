"""
Mapping from package URL types to GitHub advisory database ecosystems.
"""

import logging
from typing import Optional

from packageurl import PackageURL

logger = logging.getLogger(__name__)

# purl types whose name differs from the GHSA ``SecurityAdvisoryEcosystem`` value
PURL_TYPE_TO_GHSA_ECOSYSTEM = {
    "GOLANG": "GO",
    "PYPI": "PIP",
    "GEM": "RUBYGEMS",
    "CARGO": "RUST",
}

GHSA_ECOSYSTEMS = frozenset({
    "ACTIONS",
    "COMPOSER",
    "ERLANG",
    "GO",
    "MAVEN",
    "NPM",
    "NUGET",
    "PIP",
    "PUB",
    "RUBYGEMS",
    "RUST",
    "SWIFT",
})


def get_purl_type(purl: Optional[str]) -> Optional[str]:
    """
    The type token of a package URL (``pkg:npm/left-pad@1.0.0`` -> ``npm``).

    Locators that are not valid package URLs fall back to the text before the
    first ``/``, minus any scheme.
    """
    if not purl:
        return None
    try:
        return PackageURL.from_string(purl).type
    except ValueError:
        logger.debug(f"'{purl}' is not a valid package URL, guessing its type")
    package_type = purl.split("/")[0]
    if ":" in package_type:
        package_type = package_type.split(":")[1]
    return package_type or None


def get_ghsa_ecosystem_from_package_url(purl: Optional[str]) -> Optional[str]:
    """The GHSA ecosystem for a package URL, or None when GHSA does not cover it."""
    package_type = (get_purl_type(purl) or "").upper()
    ecosystem = PURL_TYPE_TO_GHSA_ECOSYSTEM.get(package_type, package_type)
    return ecosystem if ecosystem in GHSA_ECOSYSTEMS else None
