"""
GitHub security advisory lookup for SPDX packages.

All stages share the SecurityVulnerability model:
- ecosystems: purl type to GHSA ecosystem mapping
- version_range: vulnerable version range matching
- graph_client: batched GHSA GraphQL queries
- enrichment: writing advisories back into a document
"""

__all__ = [
    "models",
    "ecosystems",
    "version_range",
    "graph_client",
    "enrichment",
]
