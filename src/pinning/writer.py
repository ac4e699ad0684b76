"""Diff-aware writer for the three pin files.

Reads the current state of the project, proposes new contents from a
resolved distribution and rewrites only the files whose contents change.
Files are written independently; a rerun converges on the same result.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from constants import Constants
from common.http_client import probe_exists
from versioning.models import ResolvedDistribution
from .plugins import plugin_name, plugin_url, rewrite_plugin_line
from .templates import TemplateBundle

logger = logging.getLogger(__name__)

_YARN_PATH_RE = re.compile(r"^([ \t]*yarnPath:[ \t]*)[^\r\n]*(\r?\n)?", re.MULTILINE)


@dataclass
class PinFile:
    """Current and proposed contents of one pin file."""
    path: str
    current: Optional[str]
    proposed: str
    is_json: bool = False

    @property
    def changed(self) -> bool:
        if self.current is None:
            return True
        if self.is_json:
            try:
                return json.loads(self.current) != json.loads(self.proposed)
            except ValueError:
                return True
        return self.current != self.proposed


@dataclass
class PinState:
    """Pin files as found on disk before this run."""
    yarnrc: Optional[str]
    script: Optional[str]
    metadata_text: Optional[str]
    metadata: Optional[Dict[str, Any]]


def _read(path: str) -> Optional[str]:
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8", newline="") as fh:
        return fh.read()


class PinWriter:
    """Plans and writes pin files inside a project directory.

    Args:
        templates: Bundled default script and metadata.
        root: Project directory (defaults to the working directory).
        probe: Existence check for plugin URLs.
    """

    def __init__(
        self,
        templates: TemplateBundle,
        root: str = ".",
        probe: Optional[Callable[[str], bool]] = None,
    ):
        self.templates = templates
        self.root = root
        self.probe = probe or probe_exists

    def _path(self, name: str) -> str:
        return os.path.join(self.root, name)

    def load(self) -> PinState:
        """Read the current pin files; unparsable metadata counts as absent."""
        metadata_text = _read(self._path(Constants.PINYARN_JSON_FILE))
        metadata = None
        if metadata_text is not None:
            try:
                parsed = json.loads(metadata_text)
            except ValueError:
                logger.warning("Ignoring unparsable %s", Constants.PINYARN_JSON_FILE)
            else:
                if isinstance(parsed, dict):
                    metadata = parsed
        return PinState(
            yarnrc=_read(self._path(Constants.YARNRC_FILE)),
            script=_read(self._path(Constants.PINYARN_SCRIPT_FILE)),
            metadata_text=metadata_text,
            metadata=metadata,
        )

    def _pin_plugins(
        self,
        yarnrc: str,
        plugins_version: Optional[str],
        plugin_urls: Dict[str, str],
    ) -> str:
        """Probe every plugin referenced in the config, rewriting found ones."""
        lines = yarnrc.split("\n")
        for index, line in enumerate(lines):
            name = plugin_name(line)
            if name is None:
                continue
            if plugins_version is None:
                logger.debug("No plugins version; leaving plugin %s unpinned", name)
                continue
            url = plugin_url(name, plugins_version)
            if not self.probe(url):
                logger.warning("Plugin %s not found at %s", name, url)
                continue
            plugin_urls[name] = url
            lines[index] = rewrite_plugin_line(line, name, url)
            logger.info("%s at %s", name, url)
        return "\n".join(lines)

    def plan(self, state: PinState, dist: ResolvedDistribution) -> List[PinFile]:
        """Compute proposed contents for all three pin files."""
        if state.metadata is not None:
            metadata = copy.deepcopy(state.metadata)
        else:
            metadata = self.templates.default_metadata()
        metadata["yarnUrl"] = dist.binary_url
        plugin_urls = metadata.get("pluginUrls") or {}
        if not isinstance(plugin_urls, dict):
            logger.warning("Dropping malformed pluginUrls from %s", Constants.PINYARN_JSON_FILE)
            plugin_urls = {}
        plugin_urls = dict(plugin_urls)

        yarnrc = state.yarnrc if state.yarnrc is not None else Constants.DEFAULT_YARNRC
        new_yarnrc = self._pin_plugins(yarnrc, dist.plugins_version, plugin_urls)

        if plugin_urls:
            metadata["pluginUrls"] = plugin_urls
        else:
            metadata.pop("pluginUrls", None)

        if state.script is None:
            new_yarnrc = self._point_yarn_path(new_yarnrc)

        return [
            # an absent config counts as the placeholder it defaults to
            PinFile(self._path(Constants.YARNRC_FILE), yarnrc, new_yarnrc),
            PinFile(self._path(Constants.PINYARN_SCRIPT_FILE), state.script, self.templates.script),
            PinFile(
                self._path(Constants.PINYARN_JSON_FILE),
                state.metadata_text if state.metadata is not None else None,
                json.dumps(metadata, indent=2, ensure_ascii=False),
                is_json=True,
            ),
        ]

    @staticmethod
    def _point_yarn_path(yarnrc: str) -> str:
        def _replace(match):
            # keep the line terminator so CRLF files stay CRLF
            return match.group(1) + Constants.PINYARN_SCRIPT_FILE + (match.group(2) or "\n")

        new_yarnrc, count = _YARN_PATH_RE.subn(_replace, yarnrc, count=1)
        if count:
            return new_yarnrc
        if yarnrc and not yarnrc.endswith("\n"):
            yarnrc += "\n"
        return f"{yarnrc}yarnPath: {Constants.PINYARN_SCRIPT_FILE}\n"

    def write(self, files: List[PinFile]) -> List[str]:
        """Write changed files and return their paths."""
        written = []
        for pin in files:
            if not pin.changed:
                logger.debug("%s is up to date", pin.path)
                continue
            with open(pin.path, "w", encoding="utf-8", newline="") as fh:
                fh.write(pin.proposed)
            logger.info("Updated %s", pin.path)
            written.append(pin.path)
        return written

    def pin(self, dist: ResolvedDistribution, state: Optional[PinState] = None) -> List[str]:
        """Load (unless given), plan and write in one step."""
        if state is None:
            state = self.load()
        return self.write(self.plan(state, dist))
