"""Tag discovery over the git smart-HTTP reference advertisement.

``GET <repo>.git/info/refs?service=git-upload-pack`` answers with pkt-line
framed records: four hex digits giving the record length (including the
prefix itself) followed by the payload. A length of ``0000`` is a flush
packet and carries no data.
"""
from __future__ import annotations

import logging
import string
from typing import Dict, Iterator, List, Optional

from constants import Constants
from common.errors import PinyarnError
from common.http_client import fetch_text
from versioning.models import RemoteTag

logger = logging.getLogger(__name__)

_TAGS_PREFIX = "refs/tags/"
_PEELED_SUFFIX = "^{}"


class PktLineError(PinyarnError):
    """Raised when a reference advertisement is not valid pkt-line data."""


def iter_pkt_lines(data: bytes) -> Iterator[bytes]:
    """Yield the payload of every data packet, skipping flush packets."""
    pos = 0
    total = len(data)
    while pos < total:
        if data[pos:pos + 1] in (b"\n", b"\r"):
            pos += 1
            continue
        header = data[pos:pos + 4].decode("ascii", errors="replace")
        if len(header) != 4 or any(c not in string.hexdigits for c in header):
            raise PktLineError(f"Invalid pkt-line length {header!r} at offset {pos}")
        length = int(header, 16)
        if length < 4:
            # flush (0000) and protocol v2 delimiter packets carry no data
            pos += 4
            continue
        if pos + length > total:
            raise PktLineError(f"Truncated pkt-line of length {length} at offset {pos}")
        yield data[pos + 4:pos + length]
        pos += length


def parse_ref_advertisement(text: str) -> List[RemoteTag]:
    """Parse an advertisement into (ref name, commit) pairs.

    Tags are only kept in their peeled form (``^{}``, pointing at the commit
    rather than the tag object) and the suffix is stripped. Other refs are
    kept as advertised. Non-ref records such as ``# service=...`` are ignored.
    """
    refs: List[RemoteTag] = []
    for payload in iter_pkt_lines(text.encode("utf-8")):
        line = payload.decode("utf-8", errors="replace").rstrip("\n")
        # The first ref carries the capability list after a NUL byte
        line = line.split("\0", 1)[0]
        commit, sep, ref = line.partition(" ")
        if not sep or line.startswith("#"):
            continue
        if ref.startswith(_TAGS_PREFIX) and not ref.endswith(_PEELED_SUFFIX):
            continue
        refs.append(RemoteTag(name=ref.replace(_PEELED_SUFFIX, ""), commit=commit))
    return refs


class BerryRefsClient:
    """Lists refs of the modern yarn repository."""

    def __init__(self, git_url: Optional[str] = None):
        self.git_url = git_url or Constants.BERRY_GIT_URL

    def fetch_tags(self) -> Dict[str, str]:
        """Return a mapping of ref name to commit hash."""
        url = f"{self.git_url}/info/refs?service=git-upload-pack"
        text = fetch_text(url, headers={"User-Agent": Constants.USER_AGENT})
        tags = {ref.name: ref.commit for ref in parse_ref_advertisement(text)}
        logger.debug("Discovered %d refs at %s", len(tags), self.git_url)
        return tags
