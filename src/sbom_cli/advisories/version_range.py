"""
Matching of installed versions against GitHub advisory version ranges.

A ``vulnerableVersionRange`` is a comma separated list of terms that must all
hold, for example ``">= 1.0.0, < 2.0.0"`` or ``"= 4.17.20"``::

    range := term ("," term)*
    term  := [operator] version
    operator := ">=" | "<=" | ">" | "<" | "=" | "=="
"""

import logging
import operator
import re
from typing import Callable, Dict, Optional

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

_TERM_PATTERN = re.compile(r"^\s*(?P<operator>>=|<=|==|=|>|<)?\s*(?P<version>\S+)\s*$")

_OPERATORS: Dict[str, Callable[[Version, Version], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "=": operator.eq,
    "==": operator.eq,
}


def parse_version(value: Optional[str]) -> Optional[Version]:
    """Parse a version string, tolerating a leading ``v``; None when unparsable."""
    if not value:
        return None
    text = value.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return Version(text)
    except InvalidVersion:
        return None


def version_satisfies_term(version: Version, term: str) -> bool:
    match = _TERM_PATTERN.match(term)
    if not match:
        logger.debug(f"Unrecognised version range term '{term}'")
        return False
    bound = parse_version(match.group("version"))
    if bound is None:
        logger.debug(f"Unparsable version in range term '{term}'")
        return False
    compare = _OPERATORS[match.group("operator") or "="]
    return compare(version, bound)


def version_satisfies_range(version: Optional[str], version_range: Optional[str]) -> bool:
    """
    Check whether ``version`` lies inside ``version_range``.

    Every term of the range must be satisfied. A missing version, a missing
    range, or a version that cannot be parsed never satisfies the range.
    """
    if not version or not version_range:
        return False
    parsed = parse_version(version)
    if parsed is None:
        logger.debug(f"Unable to parse installed version '{version}'")
        return False
    terms = [t.strip() for t in version_range.split(",") if t.strip()]
    if not terms:
        return False
    return all(version_satisfies_term(parsed, term) for term in terms)
