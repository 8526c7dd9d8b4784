import json
import os

import pytest
import requests
from unittest.mock import MagicMock

from sbom_cli.spdx.models import Document

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def fixture_path(name: str) -> str:
    return os.path.join(FIXTURES_DIR, name)


def load_fixture_json(name: str):
    with open(fixture_path(name), "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def app_document():
    """Single-root npm application: app -> express -> body-parser -> qs, app -> left-pad."""
    return Document.from_dict(load_fixture_json("app.spdx.json"))


@pytest.fixture
def worker_document():
    """Single-root npm worker sharing left-pad and the file id of src/index.js with app."""
    return Document.from_dict(load_fixture_json("worker.spdx.json"))


@pytest.fixture
def lodash_graphql_response():
    return load_fixture_json("ghsa_lodash_response.json")


@pytest.fixture
def make_response():
    """Build a mock requests.Response returning the given JSON body."""
    def _make_response(body=None, status_code=200):
        response = MagicMock(spec=requests.Response)
        response.status_code = status_code
        response.text = json.dumps(body)
        response.json.return_value = body
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error", response=response
            )
        return response
    return _make_response


@pytest.fixture
def mock_session():
    """
    Create a mock requests.Session that can be used in place of the real session.
    """
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session
