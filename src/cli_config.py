"""User configuration for pinyarn (tokens, API base, request timeout).

Loads an optional YAML or JSON file and applies CLI overrides with the
highest precedence. A broken config file is reported and ignored rather
than aborting the run.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def default_config_path(environ: Optional[dict] = None) -> str:
    """Return the config path from PINYARN_CONFIG or the XDG config dir."""
    env = os.environ if environ is None else environ
    explicit = env.get(Constants.ENV_CONFIG)
    if explicit:
        return explicit
    base = env.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(base, Constants.CONFIG_DIR_NAME, Constants.CONFIG_FILE_NAME)


def load_user_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from a YAML/JSON file.

    Args:
        config_path: Explicit path; the default location is used when None.

    Returns:
        Configuration dict (empty when the file is missing or invalid).
    """
    path = config_path or default_config_path()
    if not os.path.isfile(path):
        if config_path:
            logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.warning("Failed to load config %s: %s", path, exc)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", path)
        return {}
    logger.debug("Loaded config from %s", path)
    return data


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


def config_tokens(cfg: Dict[str, Any]) -> List[Any]:
    """Return the ``github.tokens`` list from a config dict."""
    tokens = _section(cfg, "github").get("tokens")
    if isinstance(tokens, str):
        return [tokens]
    return list(tokens) if isinstance(tokens, list) else []


def apply_overrides(cfg: Dict[str, Any], args: Any = None) -> None:
    """Apply config file values, then CLI flags, onto Constants."""
    api_base = _section(cfg, "github").get("api_base")
    if isinstance(api_base, str) and api_base.strip():
        Constants.GITHUB_API_BASE = api_base.strip().rstrip("/")

    timeout = _section(cfg, "http").get("timeout")
    cli_timeout = getattr(args, "TIMEOUT", None)
    if cli_timeout is not None:
        timeout = cli_timeout
    if timeout is not None:
        try:
            value = float(timeout)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid request timeout %r", timeout)
        else:
            if value > 0:
                Constants.REQUEST_TIMEOUT = value
            else:
                logger.warning("Ignoring non-positive request timeout %r", timeout)
