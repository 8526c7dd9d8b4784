# tests/unit/utilities/test_sbom_validator.py

import os

import pytest
from unittest.mock import patch, MagicMock

from spdx_tools.spdx.model import Document
from spdx_tools.spdx.parser.error import SPDXParsingError

from sbom_cli.utilities.sbom_validator import SBOMValidator
from sbom_cli.exceptions import ValidationError, FileSystemError


@pytest.fixture
def spdx_sbom_path():
    return os.path.join(os.path.dirname(__file__), '..', '..', 'fixtures', 'app.spdx.json')


def _mock_document(spdx_version="SPDX-2.3", packages=2, files=1):
    document = MagicMock(spec=Document)
    document.creation_info = MagicMock()
    document.creation_info.spdx_version = spdx_version
    document.creation_info.name = "app 1.0.0"
    document.creation_info.document_namespace = "https://sbom.example.com/app/1.0.0/x"
    document.packages = [MagicMock() for _ in range(packages)]
    document.files = [MagicMock() for _ in range(files)]
    return document


class TestSBOMValidator:
    """Test cases for SPDX validation through spdx-tools."""

    @patch('sbom_cli.utilities.sbom_validator.validate_full_spdx_document', return_value=[])
    @patch('sbom_cli.utilities.sbom_validator.parse_file')
    def test_validate_spdx_file_success(self, mock_parse, mock_validate, spdx_sbom_path):
        document = _mock_document()
        mock_parse.return_value = document

        version, metadata = SBOMValidator.validate_spdx_file(spdx_sbom_path)

        assert version == "2.3"
        assert metadata == {
            "spdx_version": "2.3",
            "name": "app 1.0.0",
            "document_namespace": "https://sbom.example.com/app/1.0.0/x",
            "packages_count": 2,
            "files_count": 1,
        }
        mock_parse.assert_called_once_with(spdx_sbom_path)
        mock_validate.assert_called_once_with(document)

    def test_validate_missing_file(self, tmp_path):
        with pytest.raises(FileSystemError, match="SPDX file does not exist"):
            SBOMValidator.validate_spdx_file(str(tmp_path / "missing.spdx.json"))

    @patch('sbom_cli.utilities.sbom_validator.parse_file')
    def test_validate_parse_error(self, mock_parse, spdx_sbom_path):
        mock_parse.side_effect = SPDXParsingError(["Error while parsing Package: name is missing"])

        with pytest.raises(ValidationError, match="Failed to parse SPDX file: Error while parsing Package"):
            SBOMValidator.validate_spdx_file(spdx_sbom_path)

    @patch('sbom_cli.utilities.sbom_validator.parse_file', return_value={"not": "a document"})
    def test_validate_not_a_document(self, mock_parse, spdx_sbom_path):
        with pytest.raises(ValidationError, match="does not contain a valid SPDX document"):
            SBOMValidator.validate_spdx_file(spdx_sbom_path)

    @patch('sbom_cli.utilities.sbom_validator.validate_full_spdx_document')
    @patch('sbom_cli.utilities.sbom_validator.parse_file')
    def test_validate_reports_validation_messages(self, mock_parse, mock_validate, spdx_sbom_path):
        mock_parse.return_value = _mock_document()
        mock_validate.return_value = [
            MagicMock(validation_message="spdx_id must only contain letters, numbers, \".\" and \"-\""),
        ]

        with pytest.raises(ValidationError, match="SPDX document validation failed") as exc_info:
            SBOMValidator.validate_spdx_file(spdx_sbom_path)

        assert len(exc_info.value.details["errors"]) == 1

    @patch('sbom_cli.utilities.sbom_validator.validate_full_spdx_document', return_value=[])
    @patch('sbom_cli.utilities.sbom_validator.parse_file')
    def test_validate_unsupported_version(self, mock_parse, mock_validate, spdx_sbom_path):
        mock_parse.return_value = _mock_document(spdx_version="SPDX-2.1")

        with pytest.raises(ValidationError, match="SPDX version 2.1 is not supported"):
            SBOMValidator.validate_spdx_file(spdx_sbom_path)
