# sbom_cli/cli.py

import argparse
import os
import logging
from argparse import RawTextHelpFormatter

from .advisories.graph_client import DEFAULT_BATCH_SIZE, DEFAULT_TIMEOUT
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

# --- Helper functions for common arguments ---
def add_common_output_options(subparser, output_required: bool):
    output_args = subparser.add_argument_group("Output Options")
    output_args.add_argument(
        "--output",
        help="Path of the SPDX JSON file to write." + ("" if output_required else " Defaults to overwriting the input file."),
        required=output_required,
        metavar="FILE",
    )
    output_args.add_argument("--validate", help="Validate the written document with spdx-tools.", action="store_true", default=False)

def add_common_result_options(subparser):
    results_display_args = subparser.add_argument_group("Result Display & Save Options")
    results_display_args.add_argument("--show-packages", help="Shows all packages with their level, origin and vulnerability counts.", action="store_true", default=False)
    results_display_args.add_argument("--show-vulnerabilities", help="Shows the security advisories recorded against packages.", action="store_true", default=False)
    results_display_args.add_argument("--show-licenses", help="Shows the licenses in use and their risk.", action="store_true", default=False)
    results_display_args.add_argument("--path-result", help="Saves the requested results to this file (JSON format).", metavar="PATH")

# --- Main Parsing Function ---
def parse_cmdline_args():
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments

    Raises:
        ValidationError: If required arguments are missing or invalid
    """
    parser = argparse.ArgumentParser(
        description="SBOM CLI - merge, enrich and inspect SPDX software bills of materials.",
        formatter_class=RawTextHelpFormatter,
        epilog="""
Environment Variables for Credentials:
  GITHUB_TOKEN     : GitHub token used to query security advisories

Example Usage:
  # Merge the SBOMs of several build outputs into one
  sbom-cli merge --input app.spdx.json worker.spdx.json \\
    --package-name my-product --package-version 1.2.0 --output my-product.spdx.json

  # Add GitHub security advisories to every package of an SBOM
  sbom-cli enrich --input my-product.spdx.json --github-token <TOKEN>

  # Show packages, advisories and licenses, saving them as JSON
  sbom-cli inspect --input my-product.spdx.json --show-packages --show-vulnerabilities --show-licenses --path-result report.json

  # Show how a package was introduced
  sbom-cli inspect --input my-product.spdx.json --package-id SPDXRef-Package-ABC123
"""
    )

    # --- Global Arguments (apply to all subcommands) ---
    global_args = parser.add_argument_group("Global Arguments")
    global_args.add_argument(
        "--log",
        help="Logging level (Default: INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )

    # --- Subparsers ---
    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=True, metavar='COMMAND')

    # --- 'merge' Subcommand ---
    merge_parser = subparsers.add_parser(
        'merge',
        help='Merge several SPDX documents into one.',
        description='Merge several SPDX JSON documents into a single document describing all of their root packages.',
        formatter_class=RawTextHelpFormatter
    )
    merge_parser.add_argument("--input", help="SPDX JSON files to merge.", nargs="+", required=True, metavar="FILE")
    merge_parser.add_argument("--package-name", help="Name of the merged package.", required=True, metavar="NAME")
    merge_parser.add_argument("--package-version", help="Version of the merged package.", required=True, metavar="VERSION")
    add_common_output_options(merge_parser, output_required=True)

    # --- 'enrich' Subcommand ---
    enrich_parser = subparsers.add_parser(
        'enrich',
        help='Add GitHub security advisories to SPDX packages.',
        description='Query the GitHub Advisory Database for every package with a package URL and record '
                    'affecting advisories as SECURITY external references.',
        formatter_class=RawTextHelpFormatter
    )
    enrich_parser.add_argument("--input", help="SPDX JSON file to enrich.", required=True, metavar="FILE")
    enrich_parser.add_argument(
        "--github-token",
        help="GitHub token. Overrides GITHUB_TOKEN env var.",
        default=os.getenv("GITHUB_TOKEN"),
        metavar="TOKEN"
    )
    enrich_parser.add_argument("--api-timeout", help=f"Timeout for each GitHub API request in seconds (Default: {DEFAULT_TIMEOUT})", type=int, default=DEFAULT_TIMEOUT)
    enrich_parser.add_argument("--batch-size", help=f"Number of packages queried concurrently (Default: {DEFAULT_BATCH_SIZE})", type=int, default=DEFAULT_BATCH_SIZE)
    add_common_output_options(enrich_parser, output_required=False)

    # --- 'inspect' Subcommand ---
    inspect_parser = subparsers.add_parser(
        'inspect',
        help='Summarise an SPDX document.',
        description='Summarise an SPDX document: packages, dependency paths, security advisories and license risk.',
        formatter_class=RawTextHelpFormatter
    )
    inspect_parser.add_argument("--input", help="SPDX JSON file to inspect.", required=True, metavar="FILE")
    inspect_parser.add_argument("--package-id", help="Show the dependency paths that introduce this package.", metavar="SPDXID")
    add_common_result_options(inspect_parser)

    args = parser.parse_args()

    # Validate command-specific parameters
    input_paths = args.input if isinstance(args.input, list) else [args.input]
    for path in input_paths:
        if not os.path.exists(path):
            raise ValidationError(f"Input file does not exist: {path}")

    if args.command == 'enrich':
        if not args.github_token:
            raise ValidationError("A GitHub token is required for enrich; use --github-token or set GITHUB_TOKEN")
        if args.api_timeout <= 0:
            raise ValidationError("API timeout must be a positive number of seconds")
        if args.batch_size <= 0:
            raise ValidationError("Batch size must be a positive number")
        if not args.output:
            args.output = args.input

    return args
