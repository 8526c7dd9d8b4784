# sbom_cli/__init__.py
"""
SPDX SBOM toolkit: dependency paths, document merging, license risk and
GitHub security advisory enrichment.
"""

__version__ = "1.0.0"

__all__ = ['__version__']
