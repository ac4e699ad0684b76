"""Tests for credential rotation and token pool assembly."""

import random

from common.credentials import FixedCredentials, RandomCredentials, collect_tokens


class TestRandomCredentials:

    def test_picks_from_pool(self):
        provider = RandomCredentials(["a", "b", "c"], rng=random.Random(7))

        picks = {provider.next() for _ in range(50)}

        assert picks <= {"a", "b", "c"}
        assert len(picks) > 1

    def test_empty_pool_is_unauthenticated(self):
        provider = RandomCredentials([])

        assert provider.next() is None
        assert len(provider) == 0

    def test_fixed_credentials(self):
        assert FixedCredentials("t0k3n").next() == "t0k3n"
        assert FixedCredentials().next() is None


class TestCollectTokens:

    def test_joins_fragments_and_deduplicates(self):
        metadata = {"ghTokens": [["ghp_", "abc"], "ghp_abc", "ghp_def", 42]}

        pool = collect_tokens([], metadata, environ={})

        assert pool == ["ghp_abc", "ghp_def"]

    def test_priority_order(self):
        environ = {"PINYARN_GITHUB_TOKENS": "env1, env2", "GITHUB_TOKEN": "gh"}

        pool = collect_tokens(["cfg"], {"ghTokens": ["meta"]}, environ=environ)

        assert pool == ["cfg", "env1", "env2", "gh", "meta"]

    def test_missing_sources(self):
        assert collect_tokens([], None, environ={}) == []
        assert collect_tokens([], {"ghTokens": "not-a-list"}, environ={}) == []
