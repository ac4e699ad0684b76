"""GitHub credential pool and rotation strategies."""
from __future__ import annotations

import logging
import os
import random
from typing import Any, Iterable, List, Optional, Sequence

from constants import Constants

logger = logging.getLogger(__name__)


class CredentialProvider:
    """Supplies the credential to attach to the next authenticated request."""

    def next(self) -> Optional[str]:
        raise NotImplementedError


class RandomCredentials(CredentialProvider):
    """Picks a credential uniformly at random from a pool for every request.

    Spreading requests over several tokens keeps each one under the GitHub
    API rate limit. An empty pool yields None (unauthenticated requests).
    """

    def __init__(self, pool: Sequence[str], rng: Optional[random.Random] = None):
        self._pool = list(pool)
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._pool)

    def next(self) -> Optional[str]:
        if not self._pool:
            return None
        return self._rng.choice(self._pool)


class FixedCredentials(CredentialProvider):
    """Always returns the same credential (or None)."""

    def __init__(self, credential: Optional[str] = None):
        self._credential = credential

    def next(self) -> Optional[str]:
        return self._credential


def _join_token(entry: Any) -> Optional[str]:
    """Normalize a ghTokens entry: a string or a list of string fragments."""
    if isinstance(entry, str):
        return entry.strip() or None
    if isinstance(entry, (list, tuple)) and all(isinstance(part, str) for part in entry):
        return "".join(entry).strip() or None
    return None


def collect_tokens(
    config_tokens: Iterable[Any] = (),
    metadata: Optional[dict] = None,
    environ: Optional[dict] = None,
) -> List[str]:
    """Assemble the credential pool, de-duplicated in priority order.

    Order: user config tokens, PINYARN_GITHUB_TOKENS (comma separated),
    GITHUB_TOKEN, then the ``ghTokens`` list of the pin metadata.
    """
    env = os.environ if environ is None else environ
    candidates: List[Any] = list(config_tokens or [])
    candidates.extend(env.get(Constants.ENV_GITHUB_TOKENS, "").split(","))
    candidates.append(env.get(Constants.ENV_GITHUB_TOKEN, ""))
    if isinstance(metadata, dict) and isinstance(metadata.get("ghTokens"), list):
        candidates.extend(metadata["ghTokens"])

    pool: List[str] = []
    for entry in candidates:
        token = _join_token(entry)
        if token and token not in pool:
            pool.append(token)
    logger.debug("GitHub credential pool holds %d token(s)", len(pool))
    return pool
