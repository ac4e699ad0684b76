"""Plugin references in .yarnrc.yml and their pinned download URLs."""

from __future__ import annotations

import hashlib
import re
from typing import Optional

from constants import Constants

_PLUGIN_NAME_RE = re.compile(
    r"\.yarn/plugins/@yarnpkg/plugin-(.*?)(?:-[0-9a-f]{8})?\.cjs$"
)
_PLUGIN_PATH_RE = re.compile(
    r"(\.yarn/plugins/@yarnpkg/plugin-)(.*?)(?:-[0-9a-f]{8})?(\.cjs)"
)


def plugin_name(line: str) -> Optional[str]:
    """Extract the plugin short name from a config line, if it references one.

    A previously pinned ``-xxxxxxxx`` suffix is not part of the name.
    """
    if Constants.PLUGIN_PATH_MARKER not in line:
        return None
    match = _PLUGIN_NAME_RE.search(line.rstrip("\r"))
    if not match or not match.group(1):
        return None
    return match.group(1)


def plugin_url(name: str, version: str) -> str:
    """Raw-content URL of a plugin bundle at a commit or tag."""
    return Constants.PLUGIN_URL_TEMPLATE.format(name=name, version=version)


def url_hash(url: str) -> str:
    """First eight hex digits of the SHA-256 of a URL."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:Constants.PLUGIN_HASH_LENGTH]


def rewrite_plugin_line(line: str, name: str, url: str) -> str:
    """Point a plugin line at ``plugin-<name>-<hash>.cjs``, replacing any old hash."""
    return _PLUGIN_PATH_RE.sub(
        lambda m: f"{m.group(1)}{name}-{url_hash(url)}{m.group(3)}",
        line,
        count=1,
    )
