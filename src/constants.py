"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VERSION = "1.0.0"
    USER_AGENT = f"pinyarn/{VERSION}"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Project files, relative to the working directory
    PACKAGE_JSON_FILE = "package.json"
    YARNRC_FILE = ".yarnrc.yml"
    PINYARN_SCRIPT_FILE = ".pinyarn.js"
    PINYARN_JSON_FILE = ".pinyarn.json"
    DEFAULT_YARNRC = "yarnPath: path\n"

    # Remote endpoints
    GITHUB_API_BASE = "https://api.github.com"
    CLASSIC_REPO = "yarnpkg/yarn"
    BERRY_REPO = "yarnpkg/berry"
    BERRY_GIT_URL = "https://github.com/yarnpkg/berry.git"
    BERRY_WORKFLOW = "artifacts-workflow.yml"
    BERRY_ARTIFACT_NAME = "bundle"
    BERRY_URL_TEMPLATE = (
        "https://raw.githubusercontent.com/yarnpkg/berry/%40yarnpkg/cli/{version}"
        "/packages/yarnpkg-cli/bin/yarn.js"
    )
    PLUGIN_URL_TEMPLATE = (
        "https://raw.githubusercontent.com/yarnpkg/berry/{version}"
        "/packages/plugin-{name}/bin/%40yarnpkg/plugin-{name}.js"
    )
    RUNS_PER_PAGE = 100

    # Version token shapes
    CLASSIC_ALIASES = ("1", "classic")
    CLASSIC_PREFIXES = ("0.", "1.")
    BERRY_ALIASES = ("2", "berry")
    BERRY_PREFIXES = ("2.",)
    CLI_TAG_PREFIX = "refs/tags/@yarnpkg/cli/"
    CLASSIC_ASSET_PATTERN = r"yarn-[0-9.\-]+\.js$"
    DEV_BUILD_MARKER = "git."

    # Plugin lines in .yarnrc.yml
    PLUGIN_PATH_MARKER = ".yarn/plugins/@yarnpkg/plugin-"
    PLUGIN_HASH_LENGTH = 8

    # Configuration sources
    ENV_LOG_LEVEL = "PINYARN_LOG_LEVEL"
    ENV_CONFIG = "PINYARN_CONFIG"
    ENV_GITHUB_TOKENS = "PINYARN_GITHUB_TOKENS"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    CONFIG_DIR_NAME = "pinyarn"
    CONFIG_FILE_NAME = "config.yml"
