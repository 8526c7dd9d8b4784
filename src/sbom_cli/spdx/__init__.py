"""
SPDX 2.2/2.3 document handling.

- models / constants / package_info: the typed document and its string metadata
- external_refs: package manager and security advisory external references
- dependency_graph: DEPENDS_ON ancestor paths and package levels
- merge: combining documents with colliding ids
- report: plain row view models for summaries and tables
"""

__all__ = [
    "constants",
    "models",
    "package_info",
    "external_refs",
    "dependency_graph",
    "merge",
    "report",
]
