"""
Utilities package for the SBOM CLI.

This package contains document file IO, SPDX validation and error handling.
"""

from .error_handling import format_and_print_error, handler_error_wrapper
from .document_io import load_document, load_documents, save_document
from .sbom_validator import SBOMValidator

__all__ = [
    # Error handling
    'format_and_print_error',
    'handler_error_wrapper',
    # Document IO
    'load_document',
    'load_documents',
    'save_document',
    # Validation
    'SBOMValidator',
]
