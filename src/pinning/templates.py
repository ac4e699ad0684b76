"""Bundled default contents for the pin files."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Dict

from constants import Constants


@dataclass(frozen=True)
class TemplateBundle:
    """Default script and metadata shipped with pinyarn.

    Loaded once by the CLI and handed to the writer; tests build their own.
    """
    script: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls) -> "TemplateBundle":
        """Read the templates packaged under ``pinning/bundled``."""
        root = resources.files(__package__).joinpath("bundled")
        script = root.joinpath(Constants.PINYARN_SCRIPT_FILE.lstrip(".")).read_text(encoding="utf-8")
        metadata = json.loads(
            root.joinpath(Constants.PINYARN_JSON_FILE.lstrip(".")).read_text(encoding="utf-8")
        )
        return cls(script=script, metadata=metadata)

    def default_metadata(self) -> Dict[str, Any]:
        """Fresh copy of the default metadata without its plugin URLs."""
        metadata = copy.deepcopy(self.metadata)
        metadata.pop("pluginUrls", None)
        return metadata
