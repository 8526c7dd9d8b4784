"""Test command line parsing for each subcommand."""

import pytest

from sbom_cli.advisories.graph_client import DEFAULT_BATCH_SIZE, DEFAULT_TIMEOUT


class TestMergeArguments:
    """Test the 'merge' subcommand."""

    def test_merge_arguments(self, args, arg_parser):
        params = arg_parser(args().merge().build())

        assert params.command == 'merge'
        assert len(params.input) == 2
        assert params.package_name == 'my-product'
        assert params.package_version == '1.2.0'
        assert params.output == 'merged.spdx.json'
        assert params.validate is False
        assert params.log == 'INFO'

    def test_merge_with_validate_and_log_level(self, args, arg_parser):
        params = arg_parser(args().log('DEBUG').merge().option('--validate').build())

        assert params.validate is True
        assert params.log == 'DEBUG'

    @pytest.mark.parametrize("missing", ["name", "version", "output"])
    def test_merge_required_arguments(self, args, arg_parser, missing):
        cmd_args = args().merge(**{missing: None}).build()

        with pytest.raises(SystemExit):
            arg_parser(cmd_args)


class TestEnrichArguments:
    """Test the 'enrich' subcommand."""

    def test_enrich_defaults(self, args, arg_parser):
        params = arg_parser(args().enrich().build())

        assert params.command == 'enrich'
        assert params.github_token == 'test-token'
        assert params.api_timeout == DEFAULT_TIMEOUT
        assert params.batch_size == DEFAULT_BATCH_SIZE
        # Enriching in place is the default
        assert params.output == params.input

    def test_enrich_options(self, args, arg_parser):
        cmd_args = (args()
                    .enrich()
                    .option('--api-timeout', '10', '--batch-size', '5', '--output', 'out.spdx.json')
                    .build())

        params = arg_parser(cmd_args)

        assert params.api_timeout == 10
        assert params.batch_size == 5
        assert params.output == 'out.spdx.json'

    def test_enrich_token_from_environment(self, args, arg_parser, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')

        params = arg_parser(args().enrich(token=None).build())

        assert params.github_token == 'env-token'

    def test_enrich_token_option_overrides_environment(self, args, arg_parser, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')

        params = arg_parser(args().enrich(token='cli-token').build())

        assert params.github_token == 'cli-token'


class TestInspectArguments:
    """Test the 'inspect' subcommand."""

    def test_inspect_defaults(self, args, arg_parser):
        params = arg_parser(args().inspect().build())

        assert params.command == 'inspect'
        assert params.package_id is None
        assert params.show_packages is False
        assert params.show_vulnerabilities is False
        assert params.show_licenses is False
        assert params.path_result is None

    def test_inspect_result_options(self, args, arg_parser):
        cmd_args = (args()
                    .inspect()
                    .option('--package-id', 'SPDXRef-Package-QS', '--show-packages', '--show-vulnerabilities',
                            '--show-licenses', '--path-result', 'report.json')
                    .build())

        params = arg_parser(cmd_args)

        assert params.package_id == 'SPDXRef-Package-QS'
        assert params.show_packages and params.show_vulnerabilities and params.show_licenses
        assert params.path_result == 'report.json'


def test_command_is_required(arg_parser):
    with pytest.raises(SystemExit):
        arg_parser(['sbom-cli'])


def test_unknown_log_level(args, arg_parser):
    with pytest.raises(SystemExit):
        arg_parser(args().log('TRACE').inspect().build())
