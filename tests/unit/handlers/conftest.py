# tests/unit/handlers/conftest.py

import os
import argparse

import pytest

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'fixtures')


# Fixture for mock params object (parsed arguments)
@pytest.fixture
def mock_params(mocker, tmp_path):
    """Provides a mocked argparse.Namespace for handler tests."""
    params = mocker.MagicMock(spec=argparse.Namespace)
    params.log = "INFO"
    params.command = 'test-command'

    # Merge parameters
    params.input = os.path.join(FIXTURES_DIR, 'app.spdx.json')
    params.package_name = "my-product"
    params.package_version = "1.2.0"
    params.output = str(tmp_path / "out.spdx.json")
    params.validate = False

    # Enrich parameters
    params.github_token = "test-token"
    params.api_timeout = 30
    params.batch_size = 100

    # Inspect parameters
    params.package_id = None
    params.show_packages = False
    params.show_vulnerabilities = False
    params.show_licenses = False
    params.path_result = None

    return params


@pytest.fixture
def spdx_fixture_path():
    def _path(name):
        return os.path.join(FIXTURES_DIR, name)
    return _path
