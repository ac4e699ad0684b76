"""Data models for version requests and resolved distributions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class VersionCategory(Enum):
    """Kind of version request derived from the token shape."""
    LATEST_CLASSIC = "latest-classic"
    EXACT_CLASSIC = "exact-classic"
    LATEST_OR_NAMED_MODERN = "latest-or-named-modern"
    EXACT_MODERN_TAG = "exact-modern-tag"
    PR_OR_COMMIT_OR_BRANCH = "pr-or-commit-or-branch"


@dataclass(frozen=True)
class VersionRequest:
    """Classified version token."""
    token: str
    category: VersionCategory
    auto_detected: bool = False


@dataclass(frozen=True)
class ResolvedDistribution:
    """Outcome of resolution, consumed by the pin writer."""
    version: str
    plugins_version: Optional[str]
    description: str
    binary_url: str


@dataclass(frozen=True)
class RemoteTag:
    """A ref name and the commit it points at."""
    name: str
    commit: str


@dataclass(frozen=True)
class ReleaseFound:
    """A GitHub release payload."""
    release: Dict[str, Any]


@dataclass(frozen=True)
class ReleaseNotFound:
    """No release exists for the requested tag."""
    tag: str


ReleaseLookup = Union[ReleaseFound, ReleaseNotFound]
