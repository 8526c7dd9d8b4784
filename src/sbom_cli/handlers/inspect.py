# sbom_cli/handlers/inspect.py

import logging
import argparse

from ..spdx.dependency_graph import get_package_ancestor_paths
from ..spdx.report import (
    build_document_summary,
    build_license_rows,
    build_package_rows,
    build_security_advisory_rows,
)
from ..utilities.document_io import load_document
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.result_display import (
    display_document_summary,
    display_package_paths,
    display_results,
    save_results_to_file,
)

logger = logging.getLogger("sbom-cli")


@handler_error_wrapper
def handle_inspect(params: argparse.Namespace) -> bool:
    """
    Handler for the 'inspect' command. Summarises a document and shows the requested tables.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    document = load_document(params.input)
    results = {"document": build_document_summary(document)}
    display_document_summary(results["document"])

    if params.package_id:
        paths = get_package_ancestor_paths(document, params.package_id)
        results["dependency_paths"] = [path.names() for path in paths]
        display_package_paths(params.package_id, paths)

    if params.show_packages:
        results["packages"] = build_package_rows(document)
    if params.show_vulnerabilities:
        results["vulnerabilities"] = build_security_advisory_rows(document)
    if params.show_licenses:
        results["licenses"] = build_license_rows(document)

    display_results(results, params)

    if params.path_result:
        save_results_to_file(params.path_result, results)

    return True
