"""
SPDX string constants and helpers for comparing them.

SPDX tools disagree on the spelling of constants (``DEPENDS_ON`` vs
``depends-on``, ``PACKAGE-MANAGER`` vs ``PACKAGE_MANAGER``), so constants are
always compared through :func:`spdx_normalised`.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

NONE = "NONE"
NOASSERTION = "NOASSERTION"

SPDX_REF_PREFIX = "SPDXRef"
SPDX_DOCUMENT_ID = f"{SPDX_REF_PREFIX}-DOCUMENT"
SPDX_ROOT_PACKAGE_ID = f"{SPDX_REF_PREFIX}-RootPackage"
SPDX_FILE_ID_PREFIX = f"{SPDX_REF_PREFIX}-File-"

DEFAULT_DATA_LICENSE = "CC0-1.0"

E = TypeVar("E", bound="SpdxConstant")


def spdx_normalised(constant: Optional[str]) -> str:
    """Upper-case a constant and fold hyphens into underscores."""
    if constant is None:
        return ""
    if isinstance(constant, Enum):
        constant = constant.value
    return str(constant).replace("-", "_").upper().strip()


def spdx_constants_are_equal(a: Optional[str], b: Optional[str]) -> bool:
    return spdx_normalised(a) == spdx_normalised(b)


def is_spdx_unset(value: Optional[str]) -> bool:
    """True for empty values and the NONE/NOASSERTION sentinels."""
    return not value or spdx_normalised(value) in (NONE, NOASSERTION)


class SpdxConstant(str, Enum):
    """String enum whose members match SPDX constants structurally."""

    @classmethod
    def parse(cls: Type[E], value: Optional[str]) -> Optional[E]:
        normalised = spdx_normalised(value)
        if not normalised:
            return None
        for member in cls:
            if spdx_normalised(member.value) == normalised:
                return member
        return None

    def matches(self, value: Optional[str]) -> bool:
        return spdx_constants_are_equal(self.value, value)


class DocumentVersion(SpdxConstant):
    SPDX_2_2 = "SPDX-2.2"
    SPDX_2_3 = "SPDX-2.3"


class RelationshipType(SpdxConstant):
    DESCRIBES = "DESCRIBES"
    DESCRIBED_BY = "DESCRIBED_BY"
    CONTAINS = "CONTAINS"
    CONTAINED_BY = "CONTAINED_BY"
    DEPENDS_ON = "DEPENDS_ON"
    DEPENDENCY_OF = "DEPENDENCY_OF"
    PREREQUISITE_FOR = "PREREQUISITE_FOR"
    HAS_PREREQUISITE = "HAS_PREREQUISITE"
    OTHER = "OTHER"


class ExternalRefCategory(SpdxConstant):
    SECURITY = "SECURITY"
    PACKAGE_MANAGER = "PACKAGE-MANAGER"
    PERSISTENT_ID = "PERSISTENT-ID"
    OTHER = "OTHER"


class ExternalRefSecurityType(SpdxConstant):
    CPE22_TYPE = "cpe22Type"
    CPE23_TYPE = "cpe23Type"
    ADVISORY = "advisory"
    FIX = "fix"
    URL = "url"
    SWID = "swid"


class ExternalRefPackageManagerType(SpdxConstant):
    MAVEN_CENTRAL = "maven-central"
    NPM = "npm"
    NUGET = "nuget"
    BOWER = "bower"
    PACKAGE_URL = "purl"


class ExternalRefPersistentIdType(SpdxConstant):
    SWH = "swh"
    GITOID = "gitoid"


class ChecksumAlgorithm(SpdxConstant):
    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    SHA3_256 = "SHA3-256"
    SHA3_384 = "SHA3-384"
    SHA3_512 = "SHA3-512"
    BLAKE2B_256 = "BLAKE2b-256"
    BLAKE2B_384 = "BLAKE2b-384"
    BLAKE2B_512 = "BLAKE2b-512"
    BLAKE3 = "BLAKE3"
    MD2 = "MD2"
    MD4 = "MD4"
    MD5 = "MD5"
    MD6 = "MD6"
    ADLER32 = "ADLER32"
