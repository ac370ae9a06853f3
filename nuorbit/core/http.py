"""JSON-over-HTTP helper for the remote session API.

Every remote operation is a POST with a JSON body and a JSON response.
Non-2xx responses and transport failures surface as ``ApiRequestError``;
nothing is retried here.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiRequestError(RuntimeError):
    """Raised when a remote call fails (non-2xx status or transport error)."""

    def __init__(self, message: str, *, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ResponseParseError(ApiRequestError):
    """Raised when a response body cannot be understood."""


def normalize_base_url(url: str | None) -> str:
    """Strip trailing slashes; ``None`` and ``""`` become ``""``."""
    if not url:
        return ""
    return url.rstrip("/")


def resolve_url(base_url: str, path: str) -> str:
    """Join a normalized base with a route path, forcing the path absolute."""
    final_path = path if path.startswith("/") else f"/{path}"
    if not base_url:
        return final_path
    return f"{base_url}{final_path}"


def decode_body(response: httpx.Response, url: str) -> Any:
    """Decode a JSON response body. An empty body decodes to ``{}``."""
    text = response.text
    if not text:
        return {}
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ResponseParseError(
            f"Unable to parse response from {url}",
            url=url,
            status_code=response.status_code,
        ) from exc


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    body: Mapping[str, Any] | None,
    *,
    headers: Mapping[str, str],
) -> Any:
    """POST *body* as JSON and return the decoded response.

    Raises
    ------
    ApiRequestError
        On a transport failure, or a non-2xx status. The message is the
        response's ``error`` field when it is a string, else a generic
        message naming the endpoint and status.
    ResponseParseError
        When a non-empty body is not JSON, whatever the status.
    """
    request_headers = {"Content-Type": "application/json", **headers}
    payload = json.dumps(dict(body or {}))

    logger.debug("POST %s", url)
    try:
        response = await client.post(url, content=payload, headers=request_headers)
    except httpx.HTTPError as exc:
        raise ApiRequestError(f"Request to {url} failed: {exc}", url=url) from exc

    parsed = decode_body(response, url)

    if not response.is_success:
        error = parsed.get("error") if isinstance(parsed, dict) else None
        message = (
            error
            if isinstance(error, str)
            else f"Request to {url} failed ({response.status_code})"
        )
        logger.debug("POST %s -> %d: %s", url, response.status_code, message)
        raise ApiRequestError(message, url=url, status_code=response.status_code)

    logger.debug("POST %s -> %d", url, response.status_code)
    return parsed
