# sbom_cli/utilities/sbom_validator.py

import os
import logging
from typing import Any, Dict, Tuple

from spdx_tools.spdx.model import Document, Version
from spdx_tools.spdx.parser.error import SPDXParsingError
from spdx_tools.spdx.parser.parse_anything import parse_file
from spdx_tools.spdx.validation.document_validator import validate_full_spdx_document

from ..exceptions import ValidationError, FileSystemError

logger = logging.getLogger("sbom-cli")

class SBOMValidator:
    """
    Validates SPDX documents with spdx-tools.
    """

    SUPPORTED_VERSIONS = ("2.2", "2.3")
    MAX_REPORTED_ERRORS = 5

    @staticmethod
    def validate_spdx_file(file_path: str) -> Tuple[str, Dict[str, Any]]:
        """
        Validates an SPDX file.

        Args:
            file_path: Path to the SPDX file to validate

        Returns:
            Tuple[str, Dict[str, Any]]: (version, metadata)
            - version: version string (e.g., "2.3")
            - metadata: document name, namespace and element counts

        Raises:
            FileSystemError: If the file doesn't exist
            ValidationError: If the file is not a valid SPDX document or has an unsupported version
        """
        if not os.path.isfile(file_path):
            raise FileSystemError(f"SPDX file does not exist: {file_path}")

        logger.debug(f"Validating SPDX file: {file_path}")
        try:
            document = parse_file(file_path)
        except SPDXParsingError as e:
            messages = e.get_messages()
            raise ValidationError(
                f"Failed to parse SPDX file: {'; '.join(messages[:SBOMValidator.MAX_REPORTED_ERRORS])}",
                details={"file": file_path, "errors": messages},
            ) from e

        if not isinstance(document, Document):
            raise ValidationError("File does not contain a valid SPDX document")

        validation_messages = validate_full_spdx_document(document)
        if validation_messages:
            error_messages = [msg.validation_message for msg in validation_messages]
            raise ValidationError(
                f"SPDX document validation failed: {'; '.join(error_messages[:SBOMValidator.MAX_REPORTED_ERRORS])}",
                details={"file": file_path, "errors": error_messages},
            )

        spdx_version = document.creation_info.spdx_version
        if isinstance(spdx_version, Version):
            version_str = spdx_version.value.replace("SPDX-", "")
        else:
            version_str = str(spdx_version).replace("SPDX-", "")

        if version_str not in SBOMValidator.SUPPORTED_VERSIONS:
            raise ValidationError(
                f"SPDX version {version_str} is not supported. "
                f"Supported versions: {', '.join(SBOMValidator.SUPPORTED_VERSIONS)}"
            )

        logger.debug(f"Successfully validated SPDX file, version {version_str}")

        metadata = {
            "spdx_version": version_str,
            "name": document.creation_info.name,
            "document_namespace": document.creation_info.document_namespace,
            "packages_count": len(document.packages) if document.packages else 0,
            "files_count": len(document.files) if document.files else 0,
        }
        return version_str, metadata
