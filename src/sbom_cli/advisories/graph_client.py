"""
GitHub Security Advisory (GHSA) GraphQL client.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from ..exceptions import ApiError, AuthenticationError, NetworkError, ValidationError
from .models import AdvisoryPackage, SecurityVulnerability
from .version_range import version_satisfies_range

logger = logging.getLogger("sbom-cli")

GHSA_GRAPHQL_API_URL = "https://api.github.com/graphql"
DEFAULT_BATCH_SIZE = 100
DEFAULT_TIMEOUT = 30

GHSA_SECURITY_VULNERABILITIES_QUERY = """
query($ecosystem: SecurityAdvisoryEcosystem, $package: String) {
  securityVulnerabilities(first: 100, ecosystem: $ecosystem, package: $package) {
    nodes {
      advisory {
        identifiers {
          type
          value
        }
        severity
        summary
        description
        references {
          url
        }
        cvss {
          score
          vectorString
        }
        cwes(first: 100) {
          nodes {
            cweId
            name
            description
          }
        }
        epss {
          percentage
          percentile
        }
        publishedAt
        updatedAt
        withdrawnAt
        permalink
      }
      vulnerableVersionRange
      firstPatchedVersion {
        identifier
      }
    }
  }
}
"""

T = TypeVar("T")
R = TypeVar("R")


def filter_affected_vulnerabilities(vulnerabilities: List[SecurityVulnerability]) -> List[SecurityVulnerability]:
    """Drop withdrawn advisories and those whose range excludes the installed version."""
    return [
        v for v in vulnerabilities
        if not v.is_withdrawn
        and version_satisfies_range(v.package.version, v.vulnerable_version_range)
    ]


class GitHubGraphClient:
    """
    Queries the GHSA database through the GitHub GraphQL API.

    The API takes a single package per ``securityVulnerabilities`` query, so
    packages are queried individually and concurrently, ``batch_size`` at a
    time. A batch in which any query fails is dropped as a whole and counted
    in ``failed_batches``.
    """

    def __init__(
        self,
        access_token: str,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
        batch_size: int = DEFAULT_BATCH_SIZE,
        api_url: str = GHSA_GRAPHQL_API_URL,
    ):
        if not access_token:
            raise ValidationError("A GitHub access token is required to query security advisories")
        if batch_size < 1:
            raise ValidationError(f"Batch size must be at least 1, got {batch_size}")

        self.api_url = api_url
        self.timeout = timeout
        self.batch_size = batch_size
        self.failed_batches = 0
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def _send_query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sends a GraphQL query and returns its ``data`` object.

        Raises:
            AuthenticationError: If the token is rejected
            ApiError: For non-2xx responses, invalid JSON or GraphQL errors
            NetworkError: For connection issues and timeouts
        """
        logger.debug("GraphQL variables: %s", variables)
        try:
            response = self.session.post(
                self.api_url,
                data=json.dumps({"query": query, "variables": variables}),
                timeout=self.timeout,
            )
            logger.debug("Response Status Code: %s", response.status_code)

            if response.status_code == 401:
                raise AuthenticationError("GitHub rejected the access token (401 Unauthorized)")

            response.raise_for_status()

            try:
                parsed_json = response.json()
            except ValueError as e:
                raise ApiError(
                    f"Invalid JSON received from GitHub GraphQL API: {e}",
                    details={"response_text": response.text[:500]},
                ) from e

            if not isinstance(parsed_json, dict):
                raise ApiError(
                    "Unexpected response from GitHub GraphQL API, expected a JSON object",
                    details={"response_text": response.text[:500]},
                )

            errors = parsed_json.get("errors")
            if errors:
                messages = "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
                raise ApiError(f"GitHub GraphQL query failed: {messages}", details={"errors": errors, **variables})

            data = parsed_json.get("data") or {}
            if not isinstance(data, dict):
                raise ApiError("Unexpected 'data' in GitHub GraphQL response", details={"data": str(data)[:500]})
            return data

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ApiError(
                f"GitHub GraphQL request failed with status {status}",
                code=str(status) if status else None,
                details={"error": str(e), **variables},
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError("Failed to connect to the GitHub GraphQL API", details={"error": str(e)}) from e
        except requests.exceptions.Timeout as e:
            raise NetworkError("Request to the GitHub GraphQL API timed out", details={"error": str(e)}) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error while calling the GitHub GraphQL API: {e}") from e

    def get_package_security_vulnerabilities(self, ecosystem: str, package: AdvisoryPackage) -> List[SecurityVulnerability]:
        """All advisories GHSA holds for one package, unfiltered."""
        data = self._send_query(
            GHSA_SECURITY_VULNERABILITIES_QUERY,
            {"ecosystem": ecosystem, "package": package.name},
        )
        nodes = (data.get("securityVulnerabilities") or {}).get("nodes") or []
        return [SecurityVulnerability.from_graphql_node(ecosystem, package, node) for node in nodes]

    def _run_batches(self, items: List[T], action: Callable[[T], List[R]]) -> List[R]:
        results: List[R] = []
        for start in range(0, len(items), self.batch_size):
            batch = items[start:start + self.batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = [executor.submit(action, item) for item in batch]
                try:
                    batch_results = [future.result() for future in futures]
                except Exception as e:
                    self.failed_batches += 1
                    logger.warning(
                        f"Graph batch [{start}-{start + self.batch_size}] failed, data may be incomplete: {e}"
                    )
                    continue
            for item_results in batch_results:
                results.extend(item_results)
        return results

    def get_security_vulnerabilities(self, ecosystem: str, packages: List[AdvisoryPackage]) -> List[SecurityVulnerability]:
        """
        Security vulnerabilities affecting the given packages.

        Args:
            ecosystem: GHSA ecosystem name, e.g. ``NPM``
            packages: Packages to check; ``version`` is the installed version

        Returns:
            List[SecurityVulnerability]: Vulnerabilities that are not withdrawn and
            whose version range covers the installed version, in package order
        """
        logger.info(f"Checking security vulnerabilities for {len(packages)} {ecosystem.lower()} packages")
        vulnerabilities = self._run_batches(
            packages,
            lambda package: self.get_package_security_vulnerabilities(ecosystem, package),
        )
        affected = filter_affected_vulnerabilities(vulnerabilities)
        logger.debug(f"{len(affected)} of {len(vulnerabilities)} {ecosystem} advisories affect installed versions")
        return affected


__all__ = [
    "GHSA_GRAPHQL_API_URL",
    "GHSA_SECURITY_VULNERABILITIES_QUERY",
    "GitHubGraphClient",
    "filter_affected_vulnerabilities",
]
