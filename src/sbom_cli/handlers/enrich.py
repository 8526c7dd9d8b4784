# sbom_cli/handlers/enrich.py

import logging
import argparse

from ..advisories.enrichment import add_security_advisory_external_refs
from ..advisories.graph_client import GitHubGraphClient
from ..utilities.document_io import load_document, save_document
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.sbom_validator import SBOMValidator

logger = logging.getLogger("sbom-cli")


@handler_error_wrapper
def handle_enrich(params: argparse.Namespace) -> bool:
    """
    Handler for the 'enrich' command. Adds GitHub security advisories to the packages of a document.

    Incomplete advisory data (failed query batches) is reported as a warning;
    the enriched document is still written.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    document = load_document(params.input)
    client = GitHubGraphClient(
        params.github_token,
        timeout=params.api_timeout,
        batch_size=params.batch_size,
    )

    print(f"\nChecking {len(document.packages)} packages for security advisories...")
    summary = add_security_advisory_external_refs(document, params.github_token, client=client)

    print(f"Checked {summary.packages_checked} packages; added {summary.advisories_added} advisories "
          f"affecting {summary.packages_affected} packages")
    if not summary.is_complete:
        print(f"\nWarning: {summary.failed_batches} advisory batch(es) failed. Advisory data may be incomplete.")

    save_document(document, params.output)
    print(f"Saved enriched document to: {params.output}")

    if params.validate:
        print("\nValidating enriched document...")
        version, _ = SBOMValidator.validate_spdx_file(params.output)
        print(f"Enriched document is valid SPDX {version}")

    return True
