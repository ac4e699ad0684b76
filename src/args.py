"""Argument parsing functionality for pinyarn."""

import argparse
from constants import Constants

_EPILOG = f"""\
If no version is given pinyarn pins the version reported by the installed yarn.

Supported yarn version formats:
    - exact version: 0.14.1 or 2.1.1 or ...
    - latest stable: 1 or classic - latest stable Yarn classic version;
      2 or berry - latest stable Yarn 2+ version
    - Yarn 2 pull request number: 1030 or 1031 or ..., the head commit at the PR will be pinned
    - Yarn 2 commit sha or branch name: 95af161 or master or ...

pinyarn must be run from a directory containing '{Constants.PACKAGE_JSON_FILE}'.
"""


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="pinyarn",
        description=(
            f"Pin a yarn binary and its plugins into '{Constants.YARNRC_FILE}', "
            f"'{Constants.PINYARN_SCRIPT_FILE}' and '{Constants.PINYARN_JSON_FILE}'"
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("version",
                        help="Yarn version, alias, pull request, commit or branch",
                        nargs="?",
                        default=None)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="HTTP request timeout in seconds",
                        action="store",
                        type=float)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only report warnings and errors.",
                        action="store_true")

    return parser.parse_args(argv)
