# sbom_cli/utils.py

"""
Small helpers shared across the SBOM CLI.
"""

import re
from typing import Callable, Hashable, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")

_WORD_SEPARATORS = re.compile(r"[\s_\-.]+")


def distinct_by(items: Iterable[T], key: Callable[[T], Hashable]) -> List[T]:
    """Keep the first item for each key, preserving order."""
    seen = set()
    result = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        result.append(item)
    return result


def to_pascal_case(value: Optional[str]) -> str:
    """``maven-central`` -> ``MavenCentral``; ``npm`` -> ``Npm``."""
    if not value:
        return ""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_SEPARATORS.split(value) if word)


def truncate(value: Optional[str], length: int) -> str:
    if not value:
        return ""
    if len(value) <= length:
        return value
    return value[:max(length - 3, 0)] + "..."


def format_duration(duration_seconds: Optional[Union[int, float]]) -> str:
    """Formats a duration in seconds into a 'X minutes, Y seconds' string."""
    if duration_seconds is None: return "N/A"
    try:
        duration_seconds = round(float(duration_seconds))
    except (ValueError, TypeError):
        return "Invalid Duration"

    minutes, seconds = divmod(int(duration_seconds), 60)
    if minutes > 0 and seconds > 0: return f"{minutes} minutes, {seconds} seconds"
    elif minutes > 0: return f"{minutes} minutes"
    elif seconds == 1: return "1 second"
    else: return f"{seconds} seconds"
