"""GitHub REST client for yarn releases, pull requests and CI artifacts.

Provides a lightweight client over the handful of endpoints needed to turn
a version token into a download URL. Authentication rotates across a pool
of tokens supplied by a ``CredentialProvider``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from constants import Constants
from common.credentials import CredentialProvider, FixedCredentials
from common.http_client import HttpError, fetch_json
from common.logging_utils import redact
from versioning.models import ReleaseFound, ReleaseLookup, ReleaseNotFound

logger = logging.getLogger(__name__)


class GitHubClient:
    """Lightweight REST client for GitHub API operations."""

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize GitHub client.

        Args:
            credentials: Token rotation strategy (defaults to unauthenticated)
            base_url: Base URL for the API (defaults to Constants.GITHUB_API_BASE)
        """
        self.credentials = credentials or FixedCredentials()
        self.base_url = (base_url or Constants.GITHUB_API_BASE).rstrip("/")

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers, with a freshly rotated token when available."""
        headers = {
            "User-Agent": Constants.USER_AGENT,
            "Accept": "application/vnd.github+json",
        }
        token = self.credentials.next()
        if token:
            logger.debug("Using GitHub token %s", redact(token))
            headers["Authorization"] = f"token {token}"
        return headers

    def get_json(self, url: str) -> Any:
        """GET an absolute API URL with authentication headers."""
        return fetch_json(url, headers=self._get_headers())

    def get_latest_release(self, repo: str) -> Dict[str, Any]:
        """Fetch the latest stable release of a repository."""
        return self.get_json(f"{self.base_url}/repos/{repo}/releases/latest")

    def get_release_by_tag(self, repo: str, tag: str) -> ReleaseLookup:
        """Fetch the release for a tag.

        Returns:
            ReleaseFound with the payload, or ReleaseNotFound on HTTP 404
        """
        url = f"{self.base_url}/repos/{repo}/releases/tags/{tag}"
        try:
            return ReleaseFound(self.get_json(url))
        except HttpError as exc:
            if exc.status_code == 404:
                logger.debug("No release tagged %s in %s", tag, repo)
                return ReleaseNotFound(tag)
            raise

    def get_pull_request(self, repo: str, number: str) -> Dict[str, Any]:
        """Fetch a pull request."""
        return self.get_json(f"{self.base_url}/repos/{repo}/pulls/{number}")

    def get_workflow_runs(
        self,
        repo: str,
        workflow: str,
        page: int,
        per_page: int = Constants.RUNS_PER_PAGE,
    ) -> Dict[str, Any]:
        """Fetch one page of a workflow's run history (newest first).

        Returns:
            Dict with ``total_count`` and ``workflow_runs``
        """
        url = (
            f"{self.base_url}/repos/{repo}/actions/workflows/{workflow}/runs"
            f"?per_page={per_page}&page={page}"
        )
        return self.get_json(url)

    def get_run_artifacts(self, artifacts_url: str) -> List[Dict[str, Any]]:
        """Fetch the artifacts uploaded by a workflow run."""
        data = self.get_json(artifacts_url)
        return list(data.get("artifacts") or [])
