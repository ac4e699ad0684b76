"""Tests for the shared HTTP helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from constants import Constants
from common.http_client import HttpError, fetch_json, fetch_text, probe_exists


def _response(status_code=200, text="", reason="OK"):
    res = MagicMock()
    res.status_code = status_code
    res.text = text
    res.reason = reason
    return res


class TestFetchText:
    """GET helpers accept only HTTP 200."""

    @patch("common.http_client.requests.request")
    def test_returns_body_on_200(self, mock_request):
        mock_request.return_value = _response(text="hello")

        assert fetch_text("https://example.com/a", {"User-Agent": "x"}) == "hello"
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://example.com/a")
        assert kwargs["headers"] == {"User-Agent": "x"}
        assert kwargs["timeout"] == Constants.REQUEST_TIMEOUT

    @patch("common.http_client.requests.request")
    def test_non_200_raises_with_status_and_url(self, mock_request):
        mock_request.return_value = _response(404, reason="Not Found")

        with pytest.raises(HttpError) as exc:
            fetch_text("https://example.com/missing")

        assert exc.value.status_code == 404
        assert exc.value.url == "https://example.com/missing"
        assert str(exc.value) == "404 Not Found at https://example.com/missing"

    @patch("common.http_client.requests.request")
    def test_redirect_status_is_an_error(self, mock_request):
        mock_request.return_value = _response(204, reason="No Content")

        with pytest.raises(HttpError):
            fetch_text("https://example.com/empty")

    @patch("common.http_client.requests.request")
    def test_network_errors_propagate(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("boom")

        with pytest.raises(requests.ConnectionError):
            fetch_text("https://example.com/")


class TestFetchJson:
    """JSON helper parses after a successful GET."""

    @patch("common.http_client.requests.request")
    def test_parses_json(self, mock_request):
        mock_request.return_value = _response(text='{"tag_name": "v1.22.4"}')

        assert fetch_json("https://example.com/release") == {"tag_name": "v1.22.4"}

    @patch("common.http_client.requests.request")
    def test_invalid_json_raises_value_error(self, mock_request):
        mock_request.return_value = _response(text="<html>")

        with pytest.raises(ValueError):
            fetch_json("https://example.com/release")


class TestProbeExists:
    """HEAD probe reports existence instead of raising."""

    @patch("common.http_client.requests.request")
    def test_true_only_for_200(self, mock_request):
        mock_request.return_value = _response(200)
        assert probe_exists("https://example.com/plugin.js") is True

        mock_request.return_value = _response(302, reason="Found")
        assert probe_exists("https://example.com/plugin.js") is False

        mock_request.return_value = _response(404, reason="Not Found")
        assert probe_exists("https://example.com/plugin.js") is False

    @patch("common.http_client.requests.request")
    def test_uses_head_without_redirects(self, mock_request):
        mock_request.return_value = _response(200)

        probe_exists("https://example.com/plugin.js")

        args, kwargs = mock_request.call_args
        assert args[0] == "HEAD"
        assert kwargs["allow_redirects"] is False

    @patch("common.http_client.requests.request")
    def test_network_failure_raises(self, mock_request):
        mock_request.side_effect = requests.Timeout("slow")

        with pytest.raises(requests.Timeout):
            probe_exists("https://example.com/plugin.js")
