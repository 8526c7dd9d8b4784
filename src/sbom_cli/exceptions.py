# sbom_cli/exceptions.py

"""
Exception hierarchy for the SBOM CLI.

Every error raised on purpose by the package derives from SbomCLIError and
carries a human readable message plus optional machine readable code/details.
"""

from typing import Any, Dict, Optional


class SbomCLIError(Exception):
    """Base class for all SBOM CLI errors."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(SbomCLIError):
    """Invalid input supplied by the caller (bad arguments, malformed payloads)."""


class ConfigurationError(SbomCLIError):
    """Missing or inconsistent configuration (tokens, options)."""


class FileSystemError(SbomCLIError):
    """A document could not be read from or written to disk."""


class ApiError(SbomCLIError):
    """The advisory API answered, but with an error."""


class NetworkError(SbomCLIError):
    """The advisory API could not be reached."""


class AuthenticationError(SbomCLIError):
    """The advisory API rejected the supplied credentials."""
