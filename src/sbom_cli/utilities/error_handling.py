"""
Error handling utilities for the SBOM CLI.

This module contains functions for standardized error handling and formatting
across all CLI handlers.
"""

import logging
import argparse
import functools
from typing import Callable

from ..exceptions import (
    SbomCLIError,
    ApiError,
    NetworkError,
    ConfigurationError,
    AuthenticationError,
    FileSystemError,
    ValidationError,
)

logger = logging.getLogger("sbom-cli")

def format_and_print_error(error: Exception, handler_name: str, params: argparse.Namespace):
    """
    Formats and prints a standardized error message for CLI users.

    Args:
        error: The exception that occurred
        handler_name: Name of the handler where the error occurred
        params: Command line parameters
    """
    command = getattr(params, 'command', 'unknown')

    error_message = getattr(error, 'message', str(error))
    error_code = getattr(error, 'code', None)
    error_details = getattr(error, 'details', {})

    if isinstance(error, AuthenticationError):
        print(f"\n❌ Authentication failed")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • Your GitHub token is correct and not expired")
        print(f"   • The token was passed with --github-token or the GITHUB_TOKEN environment variable")

    elif isinstance(error, NetworkError):
        print(f"\n❌ Network connectivity issue")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • The GitHub API is reachable from this machine")
        print(f"   • The timeout is long enough (current: {getattr(params, 'api_timeout', 'default')}s)")

    elif isinstance(error, ApiError):
        print(f"\n❌ GitHub API error")
        print(f"   {error_message}")
        if error_code:
            print(f"   Error code: {error_code}")

    elif isinstance(error, FileSystemError):
        print(f"\n❌ File system error")
        print(f"   {error_message}")
        print(f"\n💡 Please check:")
        print(f"   • File permissions are correct")
        print(f"   • All specified paths exist")

    elif isinstance(error, ValidationError):
        print(f"\n❌ Invalid input or configuration")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments and input files")

    elif isinstance(error, ConfigurationError):
        print(f"\n❌ Configuration error")
        print(f"   {error_message}")
        print(f"\n💡 Please check your command-line arguments and configuration")

    else:
        print(f"\n❌ Error executing '{command}' command: {error_message}")

    if error_code and not isinstance(error, ApiError):
        print(f"\nError code: {error_code}")

    if getattr(params, 'log', 'INFO').upper() == 'DEBUG' and error_details:
        print("\nDetailed error information:")
        for key, value in error_details.items():
            print(f"  • {key}: {value}")

    print(f"\nFor more details, run with --log DEBUG for verbose output")

def handler_error_wrapper(handler_func: Callable) -> Callable:
    """
    A decorator that wraps handler functions with standardized error handling.

    Expected errors are printed and re-raised unchanged; anything else is
    logged and re-raised as an SbomCLIError so main() can set the exit code.

    Example:
        @handler_error_wrapper
        def handle_merge(params):
            ...
    """
    @functools.wraps(handler_func)
    def wrapper(params):
        try:
            command_name = params.command if hasattr(params, 'command') else 'unknown'
            logger.debug(f"Starting {handler_func.__name__} for command '{command_name}'")
            return handler_func(params)

        except SbomCLIError as e:
            logger.debug(f"Expected error in {handler_func.__name__}: {type(e).__name__}: {e.message}")
            format_and_print_error(e, handler_func.__name__, params)
            raise

        except Exception as e:
            logger.error(f"Unexpected error in {handler_func.__name__}: {e}", exc_info=True)
            cli_error = SbomCLIError(
                f"Failed to execute {params.command if hasattr(params, 'command') else 'command'}: {str(e)}",
                details={"error": str(e), "handler": handler_func.__name__}
            )
            format_and_print_error(cli_error, handler_func.__name__, params)
            raise cli_error from e

    return wrapper
