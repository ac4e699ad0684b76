"""pinyarn - pin a yarn binary and its plugins for reproducible builds.

Resolves a yarn version token (classic release, modern tag, pull request,
commit or branch) to a download URL and records it, together with the
matching plugin URLs, in .yarnrc.yml, .pinyarn.js and .pinyarn.json.
"""
import logging
import os
import sys

import requests

from args import parse_args
from cli_config import apply_overrides, config_tokens, load_user_config
from common.credentials import RandomCredentials, collect_tokens
from common.errors import PinyarnError
from common.logging_utils import configure_logging
from constants import Constants, ExitCodes
from pinning import PinWriter, TemplateBundle
from registry.berry_git import BerryRefsClient
from registry.github import GitHubClient
from versioning.resolver import DistributionResolver, VersionNotFoundError

logger = logging.getLogger(__name__)


def run(args, root="."):
    """Resolve the requested version and update the pin files.

    Args:
        args: Parsed CLI arguments.
        root: Project directory.

    Returns:
        list: Paths of the files that were written.
    """
    cfg = load_user_config(getattr(args, "CONFIG", None))
    apply_overrides(cfg, args)

    writer = PinWriter(TemplateBundle.load(), root=root)
    state = writer.load()

    credentials = RandomCredentials(collect_tokens(config_tokens(cfg), state.metadata))
    resolver = DistributionResolver(GitHubClient(credentials), BerryRefsClient())
    dist = resolver.resolve(args.version)
    logger.info("Yarn binary %s at %s", dist.description, dist.binary_url)

    return writer.pin(dist, state)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    level = "WARNING" if args.QUIET else args.LOG_LEVEL
    configure_logging(level, args.LOG_FILE)

    if not os.path.isfile(Constants.PACKAGE_JSON_FILE):
        logger.error(
            "'pinyarn' must be run from a directory with '%s'",
            Constants.PACKAGE_JSON_FILE,
        )
        sys.exit(ExitCodes.FAILURE.value)

    try:
        written = run(args)
    except VersionNotFoundError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FAILURE.value)
    except (PinyarnError, requests.RequestException, OSError) as exc:
        logger.error("%s", exc)
        logger.debug("Run aborted", exc_info=True)
        sys.exit(ExitCodes.FAILURE.value)
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected error")
        sys.exit(ExitCodes.FAILURE.value)

    if not written:
        logger.info("Pin files are up to date")
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
