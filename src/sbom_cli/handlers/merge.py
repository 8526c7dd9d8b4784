# sbom_cli/handlers/merge.py

import logging
import argparse

from ..spdx.merge import merge_spdx_documents
from ..utilities.document_io import load_documents, save_document
from ..utilities.error_handling import handler_error_wrapper
from ..utilities.sbom_validator import SBOMValidator

logger = logging.getLogger("sbom-cli")


@handler_error_wrapper
def handle_merge(params: argparse.Namespace) -> bool:
    """
    Handler for the 'merge' command. Merges SPDX documents into a single document.

    Args:
        params: Command line parameters

    Returns:
        bool: True if the operation was successful
    """
    print(f"\n--- Running {params.command.upper()} Command ---")

    print(f"\nLoading {len(params.input)} SPDX documents...")
    documents = load_documents(params.input)

    merged = merge_spdx_documents(params.package_name, params.package_version, documents)
    save_document(merged, params.output)
    print(f"Merged {len(documents)} documents into '{merged.name}': {len(merged.packages)} packages, "
          f"{len(merged.files)} files, {len(merged.relationships)} relationships")
    print(f"Saved merged document to: {params.output}")

    if params.validate:
        print("\nValidating merged document...")
        version, _ = SBOMValidator.validate_spdx_file(params.output)
        print(f"Merged document is valid SPDX {version}")

    return True
