# sbom_cli/utilities/result_display.py

"""
Console display and JSON export of inspection results.
"""

import os
import json
import logging
import argparse
from typing import Any, Dict, List

from ..spdx.dependency_graph import DependencyPath
from ..utils import truncate

logger = logging.getLogger("sbom-cli")


def display_document_summary(summary: Dict[str, Any]):
    print("\n=== Document ===")
    print(f"  - Name: {summary.get('name')}")
    print(f"  - SPDX Version: {summary.get('spdx_version')}")
    print(f"  - Created: {summary.get('created') or 'N/A'}")
    print(f"  - Creator: {summary.get('organization') or 'N/A'} ({summary.get('tool') or 'unknown tool'})")
    print(f"  - Namespace: {summary.get('namespace') or 'N/A'}")
    print(f"  - Packages: {summary.get('package_count')}, Files: {summary.get('file_count')}, "
          f"Relationships: {summary.get('relationship_count')}")


def display_package_paths(package_id: str, paths: List[DependencyPath]):
    print(f"\n=== Dependency Paths for '{package_id}' ===")
    if not paths:
        print("No dependency paths found; the package is unknown or has no ancestors.")
        return
    for path in paths:
        print(f"  - {' > '.join(path.names())}")


def display_results(collected_results: Dict[str, Any], params: argparse.Namespace) -> bool:
    """
    Displays inspection results based on the collected data and user preferences.
    """
    displayed_something = False

    if getattr(params, 'show_packages', False):
        print("\n=== Packages ===")
        displayed_something = True
        packages = collected_results.get('packages') or []
        if packages:
            for row in packages:
                vulns = row.get('total_vulnerabilities', 0)
                vuln_text = f", {vulns} vulnerabilities" if vulns else ""
                introduced = f" via {row['introduced_through']}" if row.get('introduced_through') else ""
                print(f"  - {row['name']} : {row['version'] or 'N/A'} [{row['level']}] "
                      f"({row['license'] or 'no license'}{vuln_text}){introduced}")
            print("-" * 25)
        else:
            print("No packages to report.")

    if getattr(params, 'show_vulnerabilities', False):
        print("\n=== Security Advisories ===")
        displayed_something = True
        advisories = collected_results.get('vulnerabilities') or []
        if advisories:
            for row in advisories:
                advisory_id = row['ghsa_id'] or row['cve_id'] or 'N/A'
                fixed = f", fixed in {row['first_patched_version']}" if row.get('first_patched_version') else ""
                print(f"  - [{row['severity'] or 'Unknown'}] {advisory_id} {row['package']}: "
                      f"{truncate(row['summary'], 80)}{fixed}")
            print("-" * 25)
        else:
            print("No security advisories recorded.")

    if getattr(params, 'show_licenses', False):
        print("\n=== Licenses ===")
        displayed_something = True
        licenses = collected_results.get('licenses') or []
        if licenses:
            for row in licenses:
                reasons = f" - {row['risk_reasons']}" if row.get('risk_reasons') else ""
                print(f"  - {row['id']} ({row['packages']} packages): {row['risk_severity']} risk{reasons}")
            print("-" * 25)
        else:
            print("No licenses to report.")

    return displayed_something


def save_results_to_file(filepath: str, results: Dict):
    """Helper to save collected results dictionary to a JSON file."""
    output_dir = os.path.dirname(filepath) or "."
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, ensure_ascii=False)
        print(f"Saved results to: {filepath}")
    except (IOError, OSError) as e:
        logger.warning(f"Failed to save results to {filepath}: {e}")
        print(f"\nWarning: Failed to save results to {filepath}: {e}")
