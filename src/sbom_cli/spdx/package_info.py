"""
Typed parsers for metadata that SPDX encodes inside plain strings.

Actor grammar (supplier, originator, creators)::

    actor := ("Organization" | "Person" | "Tool") ":" name [ "(" email ")" ]

A value of ``NOASSERTION`` means no actor is asserted.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .constants import NOASSERTION, ChecksumAlgorithm, is_spdx_unset, spdx_constants_are_equal
from .models import Checksum, CreationInfo, Package

_ACTOR_PATTERN = re.compile(
    r"^\s*(?P<type>Organization|Person|Tool)\s*:\s*(?P<name>[^(]*?)\s*(\((?P<email>[^)]*)\))?\s*$",
    re.IGNORECASE,
)


class ActorType(Enum):
    ORGANIZATION = "Organization"
    PERSON = "Person"
    TOOL = "Tool"


@dataclass(frozen=True)
class Actor:
    actor_type: ActorType
    name: str
    email: Optional[str] = None


def parse_actor(value: Optional[str]) -> Optional[Actor]:
    """Parse an SPDX actor string; returns None for unset or unrecognised values."""
    if is_spdx_unset(value):
        return None
    match = _ACTOR_PATTERN.match(value)
    if not match:
        return None
    actor_type = next(t for t in ActorType if t.value.lower() == match.group("type").lower())
    email = (match.group("email") or "").strip() or None
    return Actor(actor_type=actor_type, name=match.group("name").strip(), email=email)


def _first_creator_of_type(creation_info: Optional[CreationInfo], actor_type: ActorType) -> Optional[str]:
    if not creation_info:
        return None
    for creator in creation_info.creators:
        actor = parse_actor(creator)
        if actor and actor.actor_type == actor_type and actor.name:
            return actor.name
    return None


def get_creator_organization(creation_info: Optional[CreationInfo]) -> Optional[str]:
    return _first_creator_of_type(creation_info, ActorType.ORGANIZATION)


def get_creator_tool(creation_info: Optional[CreationInfo]) -> Optional[str]:
    return _first_creator_of_type(creation_info, ActorType.TOOL)


def get_package_license_expression(package: Package) -> Optional[str]:
    """The concluded license, falling back to the declared license."""
    for expression in (package.license_concluded, package.license_declared):
        if not is_spdx_unset(expression):
            return expression
    return None


def get_package_license_references(package: Package) -> List[str]:
    expression = get_package_license_expression(package) or ""
    return [word for word in expression.split() if word]


def get_package_supplier_organization(package: Package) -> Optional[str]:
    """
    The supplier name for display.

    Organization suppliers are unwrapped to their name; any other non-empty
    supplier string is returned as-is.
    """
    if not package.supplier or spdx_constants_are_equal(package.supplier, NOASSERTION):
        return None
    actor = parse_actor(package.supplier)
    if actor and actor.actor_type == ActorType.ORGANIZATION and actor.name:
        return actor.name
    return package.supplier


def get_checksum(checksums: List[Checksum], algorithm: ChecksumAlgorithm) -> Optional[str]:
    for checksum in checksums:
        if algorithm.matches(checksum.algorithm):
            return checksum.checksum_value
    return None


__all__ = [
    "Actor",
    "ActorType",
    "parse_actor",
    "get_creator_organization",
    "get_creator_tool",
    "get_package_license_expression",
    "get_package_license_references",
    "get_package_supplier_organization",
    "get_checksum",
]
