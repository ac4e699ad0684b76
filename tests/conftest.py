"""Shared fixtures for pinyarn tests."""

import json

import pytest

from constants import Constants
from pinning.templates import TemplateBundle


def pkt(payload: str) -> str:
    """Frame a payload as a git pkt-line."""
    return f"{len(payload.encode('utf-8')) + 4:04x}{payload}"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep Constants overrides and user config lookups local to each test."""
    monkeypatch.setattr(Constants, "REQUEST_TIMEOUT", Constants.REQUEST_TIMEOUT)
    monkeypatch.setattr(Constants, "GITHUB_API_BASE", Constants.GITHUB_API_BASE)
    monkeypatch.setenv(Constants.ENV_CONFIG, str(tmp_path / "no-such-config.yml"))
    monkeypatch.delenv(Constants.ENV_GITHUB_TOKENS, raising=False)
    monkeypatch.delenv(Constants.ENV_GITHUB_TOKEN, raising=False)


@pytest.fixture
def templates():
    return TemplateBundle(
        script="// pinned yarn shim\n",
        metadata={
            "yarnUrl": "https://example.invalid/yarn.js",
            "pluginUrls": {"version": "https://example.invalid/plugin-version.js"},
            "ghTokens": [["ghp_", "fragment"]],
        },
    )


@pytest.fixture
def project(tmp_path, monkeypatch):
    """An empty yarn project used as the working directory."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text(json.dumps({"name": "demo", "private": True}))
    monkeypatch.chdir(root)
    return root
