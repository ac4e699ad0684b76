"""Resolve a yarn version token into a concrete download URL."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional

import requests

from constants import Constants
from common.errors import PinyarnError
from common.http_client import HttpError
from registry.berry_git import BerryRefsClient
from registry.github import GitHubClient
from .models import ReleaseNotFound, ResolvedDistribution, VersionCategory, VersionRequest
from .parser import classify_token, detect_installed_version

logger = logging.getLogger(__name__)

_CLASSIC_ASSET_RE = re.compile(Constants.CLASSIC_ASSET_PATTERN)


class VersionNotFoundError(PinyarnError):
    """Raised when no release, tag or CI artifact matches the token."""

    def __init__(self, token: str, auto_detected: bool = False):
        self.token = token
        self.auto_detected = auto_detected
        message = f"Yarn version {token} not found"
        if auto_detected:
            message += " (detected from the installed yarn; pass a version explicitly)"
        super().__init__(message)


def berry_url(version: str) -> str:
    """Raw-content URL of the modern yarn bundle for a CLI tag."""
    return Constants.BERRY_URL_TEMPLATE.format(version=version)


def find_classic_asset(release: Dict[str, Any]) -> Optional[str]:
    """Return the download URL of the single-file classic bundle, if any."""
    for asset in release.get("assets") or []:
        url = asset.get("browser_download_url") or ""
        if _CLASSIC_ASSET_RE.search(url):
            return url
    return None


def select_cli_tag(tags: Dict[str, str], version: Optional[str] = None) -> Optional[str]:
    """Pick a CLI tag from a ref mapping.

    Names are scanned in descending lexicographic order. Without a version
    the first name under the CLI tag namespace wins; with one, only the exact
    tag matches.
    """
    wanted = None if version is None else f"{Constants.CLI_TAG_PREFIX}{version}"
    for name in sorted(tags, reverse=True):
        if wanted is None:
            if name.startswith(Constants.CLI_TAG_PREFIX):
                return name
        elif name == wanted:
            return name
    return None


def run_matches(run: Dict[str, Any], target: str) -> bool:
    """True if the run's commit, branch or tree id starts with the target."""
    head_commit = run.get("head_commit") or {}
    candidates = (run.get("head_sha"), run.get("head_branch"), head_commit.get("tree_id"))
    return any(isinstance(value, str) and value.startswith(target) for value in candidates)


class DistributionResolver:
    """Turns version tokens into ResolvedDistribution values.

    Args:
        github: REST client for releases, pull requests and workflow runs.
        refs: Client listing refs of the modern yarn repository.
        version_probe: Callable returning the installed yarn version token.
    """

    def __init__(
        self,
        github: GitHubClient,
        refs: Optional[BerryRefsClient] = None,
        version_probe: Optional[Callable[[], str]] = None,
    ):
        self.github = github
        self.refs = refs or BerryRefsClient()
        self.version_probe = version_probe or detect_installed_version

    def resolve(self, token: Optional[str] = None) -> ResolvedDistribution:
        """Resolve a token, auto-detecting it from the installed yarn when absent.

        Raises:
            VersionNotFoundError: When nothing matches the token.
        """
        if token is None or not token.strip():
            request = classify_token(self.version_probe(), auto_detected=True)
            logger.info("Using installed yarn version %s", request.token)
        else:
            request = classify_token(token)
        logger.debug("Version token %s classified as %s", request.token, request.category.value)

        result = self._dispatch(request)
        if result is None:
            raise VersionNotFoundError(request.token, request.auto_detected)
        return result

    def _dispatch(self, request: VersionRequest) -> Optional[ResolvedDistribution]:
        category = request.category
        if category == VersionCategory.LATEST_CLASSIC:
            release = self.github.get_latest_release(Constants.CLASSIC_REPO)
            return self._from_classic_release(release)
        if category == VersionCategory.EXACT_CLASSIC:
            lookup = self.github.get_release_by_tag(Constants.CLASSIC_REPO, f"v{request.token}")
            if isinstance(lookup, ReleaseNotFound):
                return None
            return self._from_classic_release(lookup.release)
        if category == VersionCategory.LATEST_OR_NAMED_MODERN:
            return self._from_berry_tag(None)
        if category == VersionCategory.EXACT_MODERN_TAG:
            return self._from_berry_tag(request.token)
        return self._from_workflow_artifact(request.token)

    def _from_classic_release(self, release: Dict[str, Any]) -> Optional[ResolvedDistribution]:
        tag = release.get("tag_name") or ""
        version = tag[1:] if tag.startswith("v") else tag
        url = find_classic_asset(release)
        if url is None:
            logger.warning("Release %s has no single-file yarn bundle", tag)
            return None
        return ResolvedDistribution(
            version=version,
            plugins_version=None,
            description=version,
            binary_url=url,
        )

    def _from_berry_tag(self, version: Optional[str]) -> Optional[ResolvedDistribution]:
        tags = self.refs.fetch_tags()
        found = select_cli_tag(tags, version)
        if found is None:
            return None
        commit = tags[found]
        label = found[found.rfind("/") + 1:]
        short = commit[:7]
        return ResolvedDistribution(
            version=label,
            plugins_version=short,
            description=f"{label} {short}",
            binary_url=berry_url(label),
        )

    def _search_target(self, token: str) -> str:
        """Map a pull request number to its head commit, else keep the token."""
        if not token.isdigit():
            return token
        try:
            pr = self.github.get_pull_request(Constants.BERRY_REPO, token)
            sha = pr["head"]["sha"]
        except (HttpError, requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logger.debug("%s is not a pull request (%s); searching for it literally", token, exc)
            return token
        logger.info("Pull request #%s head is %s", token, sha)
        return sha

    def _find_bundle(self, run: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        artifacts: List[Dict[str, Any]] = self.github.get_run_artifacts(run["artifacts_url"])
        for artifact in artifacts:
            if artifact.get("name") == Constants.BERRY_ARTIFACT_NAME:
                return artifact
        return None

    def _from_workflow_artifact(self, token: str) -> Optional[ResolvedDistribution]:
        target = self._search_target(token)
        page = 1
        while True:
            data = self.github.get_workflow_runs(
                Constants.BERRY_REPO, Constants.BERRY_WORKFLOW, page
            )
            runs = data.get("workflow_runs") or []
            pages = math.ceil((data.get("total_count") or 0) / Constants.RUNS_PER_PAGE)
            logger.info("Searching through GH action workflow runs page %d/%d...", page, pages)
            for run in runs:
                if not run_matches(run, target):
                    continue
                artifact = self._find_bundle(run)
                if artifact is None:
                    logger.debug("Run %s matches %s but has no bundle artifact", run.get("id"), target)
                    continue
                short = run["head_sha"][:7]
                message = (run.get("head_commit") or {}).get("message", "")
                return ResolvedDistribution(
                    version=short,
                    plugins_version=short,
                    description=f"{short} in {run.get('head_branch')} '{message}'",
                    binary_url=artifact["archive_download_url"],
                )
            if len(runs) < Constants.RUNS_PER_PAGE:
                return None
            page += 1
