"""Version token classification and installed-version detection."""

import logging
import subprocess

from constants import Constants
from common.errors import PinyarnError
from .models import VersionCategory, VersionRequest

logger = logging.getLogger(__name__)


class VersionDetectionError(PinyarnError):
    """Raised when the installed yarn version cannot be determined."""


def classify_token(token: str, auto_detected: bool = False) -> VersionRequest:
    """Classify a version token by its shape.

    Aliases win over prefixes, so ``"1"`` is the latest classic release
    while ``"1.22.4"`` is an exact classic version.
    """
    token = token.strip()
    if token in Constants.CLASSIC_ALIASES:
        category = VersionCategory.LATEST_CLASSIC
    elif token.startswith(Constants.CLASSIC_PREFIXES):
        category = VersionCategory.EXACT_CLASSIC
    elif token in Constants.BERRY_ALIASES:
        category = VersionCategory.LATEST_OR_NAMED_MODERN
    elif token.startswith(Constants.BERRY_PREFIXES):
        category = VersionCategory.EXACT_MODERN_TAG
    else:
        category = VersionCategory.PR_OR_COMMIT_OR_BRANCH
    return VersionRequest(token=token, category=category, auto_detected=auto_detected)


def normalize_reported_version(reported: str) -> str:
    """Reduce ``yarn --version`` output to a resolvable token.

    Development builds report something like ``2.0.0-rc.29.git.20200220.2cbc1e8``;
    only the trailing commit segment is kept for those.
    """
    reported = reported.strip()
    if Constants.DEV_BUILD_MARKER in reported:
        return reported[reported.rfind(".") + 1:]
    return reported


def detect_installed_version(executable: str = "yarn") -> str:
    """Ask the installed yarn binary for its version.

    Raises:
        VersionDetectionError: If yarn is missing, fails, or prints nothing.
    """
    try:
        proc = subprocess.run(
            [executable, "--version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise VersionDetectionError(f"Unable to run '{executable} --version': {exc}") from exc

    output = (proc.stdout or "").strip()
    if proc.returncode != 0 or not output:
        raise VersionDetectionError(
            f"'{executable} --version' failed with exit code {proc.returncode}"
        )
    token = normalize_reported_version(output)
    logger.debug("Detected installed yarn version %s (token %s)", output, token)
    return token
