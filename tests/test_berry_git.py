"""Tests for pkt-line parsing and tag discovery."""

from unittest.mock import patch

import pytest

from constants import Constants
from registry.berry_git import BerryRefsClient, PktLineError, iter_pkt_lines, parse_ref_advertisement
from versioning.models import RemoteTag

from conftest import pkt

SHA_HEAD = "a" * 40
SHA_TAG_OBJ = "b" * 40
SHA_TAG_COMMIT = "c" * 40
SHA_LIGHT = "d" * 40


def _advertisement():
    return (
        pkt("# service=git-upload-pack\n")
        + "0000"
        + pkt(f"{SHA_HEAD} HEAD\0multi_ack thin-pack side-band symref=HEAD:refs/heads/master\n")
        + pkt(f"{SHA_HEAD} refs/heads/master\n")
        + pkt(f"{SHA_TAG_OBJ} refs/tags/@yarnpkg/cli/3.1.0\n")
        + pkt(f"{SHA_TAG_COMMIT} refs/tags/@yarnpkg/cli/3.1.0^{{}}\n")
        + pkt(f"{SHA_LIGHT} refs/tags/lightweight\n")
        + "0000"
    )


class TestIterPktLines:

    def test_flush_packets_are_never_data(self):
        data = b"0000" + pkt("0000 refs/heads/x\n").encode() + b"0000"

        assert list(iter_pkt_lines(data)) == [b"0000 refs/heads/x\n"]

    def test_only_flush_packets(self):
        assert list(iter_pkt_lines(b"000000000000")) == []

    def test_invalid_length(self):
        with pytest.raises(PktLineError):
            list(iter_pkt_lines(b"zz12payload"))

    def test_truncated_packet(self):
        with pytest.raises(PktLineError):
            list(iter_pkt_lines(b"00ffshort"))


class TestParseRefAdvertisement:

    def test_keeps_peeled_tags_and_other_refs(self):
        refs = parse_ref_advertisement(_advertisement())

        assert RemoteTag("refs/tags/@yarnpkg/cli/3.1.0", SHA_TAG_COMMIT) in refs
        assert RemoteTag("refs/heads/master", SHA_HEAD) in refs
        assert RemoteTag("HEAD", SHA_HEAD) in refs
        names = [ref.name for ref in refs]
        assert "refs/tags/lightweight" not in names
        assert not any(name.startswith("#") or name.startswith("service") for name in names)

    def test_tag_maps_to_peeled_commit(self):
        tags = {ref.name: ref.commit for ref in parse_ref_advertisement(_advertisement())}

        assert tags["refs/tags/@yarnpkg/cli/3.1.0"] == SHA_TAG_COMMIT


class TestBerryRefsClient:

    @patch("registry.berry_git.fetch_text")
    def test_fetch_tags_uses_upload_pack_endpoint(self, mock_fetch):
        mock_fetch.return_value = _advertisement()

        tags = BerryRefsClient().fetch_tags()

        url = mock_fetch.call_args[0][0]
        assert url == f"{Constants.BERRY_GIT_URL}/info/refs?service=git-upload-pack"
        assert mock_fetch.call_args[1]["headers"] == {"User-Agent": Constants.USER_AGENT}
        assert tags["refs/tags/@yarnpkg/cli/3.1.0"] == SHA_TAG_COMMIT
