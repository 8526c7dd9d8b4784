import os

import pytest
from unittest.mock import MagicMock, patch

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'fixtures')
APP_SPDX = os.path.join(FIXTURES_DIR, 'app.spdx.json')
WORKER_SPDX = os.path.join(FIXTURES_DIR, 'worker.spdx.json')


@pytest.fixture
def mock_path_exists():
    """Mock os.path.exists to return True by default."""
    with patch('os.path.exists', return_value=True) as mock:
        yield mock


@pytest.fixture
def arg_parser():
    """Create a fresh argument parser for each test."""
    def _create_parser_with_args(args_list):
        """Parse arguments without affecting sys.argv."""
        from sbom_cli.cli import parse_cmdline_args
        with patch('sys.argv', args_list):
            return parse_cmdline_args()
    return _create_parser_with_args


@pytest.fixture
def mock_main_dependencies(tmp_path, monkeypatch):
    """Replace every command handler dispatched by main() and keep the log file in a temp dir."""
    monkeypatch.chdir(tmp_path)
    mocks = {
        'handle_merge': MagicMock(return_value=True),
        'handle_enrich': MagicMock(return_value=True),
        'handle_inspect': MagicMock(return_value=True),
    }
    with patch.dict("sbom_cli.main.COMMAND_HANDLERS", {
        "merge": mocks['handle_merge'],
        "enrich": mocks['handle_enrich'],
        "inspect": mocks['handle_inspect'],
    }):
        yield mocks


class ArgBuilder:
    """Builder pattern for constructing test arguments."""

    def __init__(self):
        self.args = ['sbom-cli']

    def log(self, level):
        self.args.extend(['--log', level])
        return self

    def merge(self, inputs=(APP_SPDX, WORKER_SPDX), name='my-product', version='1.2.0', output='merged.spdx.json'):
        self.args.extend(['merge', '--input', *inputs])
        if name:
            self.args.extend(['--package-name', name])
        if version:
            self.args.extend(['--package-version', version])
        if output:
            self.args.extend(['--output', output])
        return self

    def enrich(self, input_path=WORKER_SPDX, token='test-token'):
        self.args.extend(['enrich', '--input', input_path])
        if token:
            self.args.extend(['--github-token', token])
        return self

    def inspect(self, input_path=APP_SPDX):
        self.args.extend(['inspect', '--input', input_path])
        return self

    def option(self, *values):
        self.args.extend(values)
        return self

    def build(self):
        return self.args


@pytest.fixture
def app_spdx_path():
    return APP_SPDX


@pytest.fixture
def args():
    """Returns a fresh argument builder."""
    return ArgBuilder
