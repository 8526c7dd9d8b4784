"""
Dependency graph resolution over SPDX ``DEPENDS_ON`` relationships.

Paths are resolved "upwards": starting from a package, every relationship that
names it as ``relatedSpdxElement`` leads to a parent through ``spdxElementId``.
SPDX does not prevent cycles or malformed graphs, so every walk is bounded by
:data:`MAX_DEPENDENCY_DEPTH` and stops quietly at ids that do not resolve.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from .constants import RelationshipType
from .models import Document, Package, Relationship

logger = logging.getLogger(__name__)

MAX_DEPENDENCY_DEPTH = 30


class PackageLevel(Enum):
    ROOT = "Root"
    TOP = "Top"
    TRANSITIVE = "Transitive"


@dataclass
class DependencyPath:
    """Packages ordered from the top-level ancestor down to the queried package."""
    packages: List[Package]

    @property
    def top_level_package(self) -> Package:
        return self.packages[0]

    def names(self) -> List[str]:
        return [p.name for p in self.packages]


def get_depends_on_relationships(document: Document) -> List[Relationship]:
    return [r for r in document.relationships if RelationshipType.DEPENDS_ON.matches(r.relationship_type)]


def _index_parents(relationships: List[Relationship]) -> Dict[str, List[str]]:
    """
    Map each package id to the ids of the packages that depend on it.

    Relationships repeating the same edge are collapsed; parents keep the order
    in which they first appear.
    """
    parents: Dict[str, List[str]] = {}
    seen: Set[Tuple[str, str]] = set()
    for relationship in relationships:
        edge = (relationship.spdx_element_id, relationship.related_spdx_element)
        if edge in seen:
            continue
        seen.add(edge)
        parents.setdefault(relationship.related_spdx_element, []).append(relationship.spdx_element_id)
    return parents


def _walk_ancestor_paths(
    parents: Dict[str, List[str]],
    candidates: Dict[str, Package],
    start_id: str,
    path_so_far: List[Package],
    expanded: Set[Tuple[str, int]],
) -> List[List[Package]]:
    """
    Depth-first walk from ``start_id`` up to the top-level ancestors.

    A package reached again at the same depth leads to the same ancestors at the
    same path lengths, and the first visit is always reported first, so it is
    expanded only once. ``expanded`` is shared between walks of one query, which
    keeps the work bounded by packages times depth even on densely cyclic graphs.
    """
    stack: List[Tuple[str, List[Package], int]] = [(start_id, path_so_far, 1)]
    results: List[List[Package]] = []

    while stack:
        current_id, path, depth = stack.pop()
        current_package = candidates.get(current_id)

        if current_package is None:
            results.append(path)
            continue

        if depth > MAX_DEPENDENCY_DEPTH:
            logger.warning(
                f"Maximum depth of {MAX_DEPENDENCY_DEPTH} reached while resolving package ancestor paths "
                f"for '{' -> '.join(p.name for p in path)}'"
            )
            results.append(path)
            continue

        if (current_id, depth) in expanded:
            continue
        expanded.add((current_id, depth))

        new_path = [current_package] + path
        ancestor_ids = parents.get(current_id, [])
        if ancestor_ids:
            for ancestor_id in ancestor_ids:
                stack.append((ancestor_id, new_path, depth + 1))
        else:
            results.append(new_path)

    return results


def get_package_ancestor_paths(document: Document, package_id: str) -> List[DependencyPath]:
    """
    Resolve every ancestor dependency path of a package.

    Only one path is returned per distinct top-level ancestor: the longest one,
    or the first one found when several share the longest length.

    Args:
        document: The SPDX document
        package_id: SPDXID of the package to resolve

    Returns:
        List[DependencyPath]: One path per top-level ancestor; empty if the package
        is unknown, is the only root, or has no ancestors.
    """
    root_package_ids = set(document.document_describes)
    has_multiple_root_packages = len(document.document_describes) > 1

    # A single root package describes the whole document and is never a useful ancestor
    candidates = {
        pkg_id: pkg for pkg_id, pkg in document.packages_by_id().items()
        if has_multiple_root_packages or pkg_id not in root_package_ids
    }

    current_package = candidates.get(package_id)
    if current_package is None:
        return []

    parents = _index_parents(get_depends_on_relationships(document))

    ancestor_paths: List[List[Package]] = []
    expanded: Set[Tuple[str, int]] = set()
    for parent_id in parents.get(package_id, []):
        ancestor_paths.extend(_walk_ancestor_paths(parents, candidates, parent_id, [current_package], expanded))

    longest_paths: Dict[str, List[Package]] = {}
    for path in ancestor_paths:
        top_level_id = path[0].spdx_id
        existing = longest_paths.get(top_level_id)
        if existing is None or len(existing) < len(path):
            longest_paths[top_level_id] = path

    return [DependencyPath(packages=path) for path in longest_paths.values()]


def get_package_depends_on_chain(document: Document, package_id: str) -> List[Package]:
    """
    Follow the first parent of each package up to the root-adjacent ancestor.

    Returns:
        List[Package]: Ancestors ordered from the root-adjacent package down to
        the direct parent; the queried package itself is not included.
    """
    packages = document.packages_by_id()
    if package_id not in packages:
        return []

    root_package_ids = set(document.document_describes)
    parents = _index_parents(get_depends_on_relationships(document))

    chain: List[Package] = []
    visited = {package_id}
    current_id = package_id
    while True:
        parent_ids = parents.get(current_id)
        if not parent_ids:
            break
        parent_id = parent_ids[0]
        parent = packages.get(parent_id)
        if parent is None or parent_id in root_package_ids or parent_id in visited:
            break
        if len(chain) >= MAX_DEPENDENCY_DEPTH:
            logger.warning(
                f"Maximum depth of {MAX_DEPENDENCY_DEPTH} reached while resolving depends-on chain "
                f"for '{packages[package_id].name}'"
            )
            break
        chain.insert(0, parent)
        visited.add(parent_id)
        current_id = parent_id

    return chain


def is_package_root_level(document: Document, package_id: str) -> bool:
    return package_id in document.document_describes


def is_package_top_level(document: Document, package_id: str) -> bool:
    root_package_ids = set(document.document_describes)
    return any(
        r.spdx_element_id in root_package_ids and r.related_spdx_element == package_id
        for r in get_depends_on_relationships(document)
    )


def get_package_level(document: Document, package_id: str) -> PackageLevel:
    if is_package_root_level(document, package_id):
        return PackageLevel.ROOT
    if is_package_top_level(document, package_id):
        return PackageLevel.TOP
    return PackageLevel.TRANSITIVE


def get_document_display_name(document: Document) -> Optional[str]:
    """Name of the described package, summarised when several are described."""
    describes = set(document.document_describes)
    names = [p.name for p in document.packages if p.spdx_id in describes]
    if len(names) > 1:
        return f"{names[0]} + {len(names) - 1} package(s)"
    if len(names) == 1:
        return names[0] or ""
    return None


__all__ = [
    "MAX_DEPENDENCY_DEPTH",
    "PackageLevel",
    "DependencyPath",
    "get_depends_on_relationships",
    "get_package_ancestor_paths",
    "get_package_depends_on_chain",
    "is_package_root_level",
    "is_package_top_level",
    "get_package_level",
    "get_document_display_name",
]
