"""Shared HTTP helpers used by the GitHub and git clients and the pin writer.

Every remote call is attempted exactly once. GET helpers treat anything but
HTTP 200 as an error; the HEAD probe reports existence as a boolean.
Network-level failures from ``requests`` propagate to the caller.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from constants import Constants
from common.errors import PinyarnError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class HttpError(PinyarnError):
    """Raised when a GET request returns anything other than HTTP 200."""

    def __init__(self, status_code: int, reason: str, url: str):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        super().__init__(f"{status_code} {reason} at {safe_url(url)}")


def _request(method: str, url: str, headers: Optional[Dict[str, str]], **kwargs: Any) -> requests.Response:
    """Issue one request and emit DEBUG traces around it."""
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action=method,
                    target=safe_target,
                ),
            )
        res = requests.request(
            method,
            url,
            headers=headers,
            timeout=Constants.REQUEST_TIMEOUT,
            **kwargs,
        )
    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action=method,
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
            ),
        )
    return res


def fetch_text(url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """GET a URL and return its body as text.

    Args:
        url: Target URL.
        headers: Optional request headers.

    Returns:
        str: Response body.

    Raises:
        HttpError: When the response status is not 200.
        requests.RequestException: On network failures.
    """
    res = _request("GET", url, headers)
    if res.status_code != 200:
        raise HttpError(res.status_code, res.reason or "", url)
    return res.text


def fetch_json(url: str, headers: Optional[Dict[str, str]] = None) -> Any:
    """GET a URL and parse the body as JSON.

    Raises:
        HttpError: When the response status is not 200.
        ValueError: When the body is not valid JSON.
    """
    text = fetch_text(url, headers)
    parsed = json.loads(text)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed JSON response",
            extra=extra_context(
                event="parse",
                component="http_client",
                action="fetch_json",
                outcome="success",
                target=safe_url(url),
            ),
        )
    return parsed


def probe_exists(url: str, headers: Optional[Dict[str, str]] = None) -> bool:
    """HEAD a URL and report whether it answered exactly 200.

    Redirects are not followed. Non-200 statuses return False; network
    failures raise.
    """
    res = _request("HEAD", url, headers, allow_redirects=False)
    return res.status_code == 200
