"""Tests for version token classification and auto-detection."""

from unittest.mock import MagicMock, patch

import pytest

from versioning.models import VersionCategory
from versioning.parser import (
    VersionDetectionError,
    classify_token,
    detect_installed_version,
    normalize_reported_version,
)


@pytest.mark.parametrize(
    "token,category",
    [
        ("1", VersionCategory.LATEST_CLASSIC),
        ("classic", VersionCategory.LATEST_CLASSIC),
        ("1.22.4", VersionCategory.EXACT_CLASSIC),
        ("0.14.1", VersionCategory.EXACT_CLASSIC),
        ("2", VersionCategory.LATEST_OR_NAMED_MODERN),
        ("berry", VersionCategory.LATEST_OR_NAMED_MODERN),
        ("2.4.1", VersionCategory.EXACT_MODERN_TAG),
        ("1030", VersionCategory.PR_OR_COMMIT_OR_BRANCH),
        ("95af161", VersionCategory.PR_OR_COMMIT_OR_BRANCH),
        ("master", VersionCategory.PR_OR_COMMIT_OR_BRANCH),
        ("3.1.0", VersionCategory.PR_OR_COMMIT_OR_BRANCH),
    ],
)
def test_classify_token(token, category):
    request = classify_token(token)

    assert request.category == category
    assert request.token == token
    assert request.auto_detected is False


def test_classify_strips_whitespace():
    assert classify_token(" 2 \n").token == "2"


class TestNormalizeReportedVersion:

    def test_release_version_kept(self):
        assert normalize_reported_version("1.22.19\n") == "1.22.19"

    def test_git_build_keeps_trailing_segment(self):
        assert normalize_reported_version("2.0.0-rc.29.git.20200220.2cbc1e8") == "2cbc1e8"


class TestDetectInstalledVersion:

    @patch("versioning.parser.subprocess.run")
    def test_reads_yarn_version(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="3.1.0\n")

        assert detect_installed_version() == "3.1.0"
        assert mock_run.call_args[0][0] == ["yarn", "--version"]

    @patch("versioning.parser.subprocess.run")
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("yarn")

        with pytest.raises(VersionDetectionError):
            detect_installed_version()

    @patch("versioning.parser.subprocess.run")
    def test_failed_command(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="")

        with pytest.raises(VersionDetectionError):
            detect_installed_version()
