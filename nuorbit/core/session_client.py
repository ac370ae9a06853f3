"""Remote session client — the five NuOrbit session operations.

Each operation is keyed by the current session token and answers with a
fresh ``{session, sessionToken}`` pair; the token may rotate on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from nuorbit.config import ConfigurationError
from nuorbit.core.http import (
    ResponseParseError,
    normalize_base_url,
    post_json,
    resolve_url,
)
from nuorbit.models.flow import SessionRequest
from nuorbit.models.routes import SdkRoutes
from nuorbit.models.session import SessionResponse

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-NUORBIT-API-KEY"
DEFAULT_TIMEOUT_SECONDS = 30.0


class SessionClient:
    """Async client for the remote session API.

    Parameters
    ----------
    api_key:
        API credential issued by the NuOrbit service. Required.
    base_url:
        Prefix for every request path (e.g. ``https://galacticpools.io``).
    transport:
        Custom httpx transport (e.g. ``httpx.MockTransport`` in tests).
    http_client:
        A pre-built ``httpx.AsyncClient``. When given, the caller owns it
        and ``transport``/``timeout_seconds`` are ignored.
    default_headers:
        Extra headers sent with every request.
    routes:
        Per-operation path overrides layered over the default routes.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        default_headers: Mapping[str, str] | None = None,
        routes: Mapping[str, str] | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        key = (api_key or "").strip()
        if not key:
            raise ConfigurationError(
                "SessionClient requires an api_key. Pass it explicitly or set NUORBIT_API_KEY."
            )
        self._api_key = key
        self._base_url = normalize_base_url(base_url)
        self._routes = SdkRoutes().merged(routes)

        self._headers: dict[str, str] = dict(default_headers or {})
        self._headers[API_KEY_HEADER] = key

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            transport=transport,
            timeout=timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def routes(self) -> SdkRoutes:
        return self._routes

    @property
    def headers(self) -> dict[str, str]:
        """Copy of the headers sent with every request."""
        return dict(self._headers)

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def create_session(self, request: SessionRequest) -> SessionResponse:
        """Create a session. ``providerCallId`` is always sent (``null`` if absent)."""
        body = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        body["providerCallId"] = request.provider_call_id
        return await self._post(self._routes.session, body)

    async def confirm_transfer(self, session_token: str, tx_hash: str | None = None) -> SessionResponse:
        body: dict[str, Any] = {"sessionToken": session_token}
        if tx_hash is not None:
            body["txHash"] = tx_hash
        return await self._post(self._routes.transfer, body)

    async def execute_session(self, session_token: str) -> SessionResponse:
        return await self._post(self._routes.execute, {"sessionToken": session_token})

    async def fetch_proof(self, session_token: str) -> SessionResponse:
        return await self._post(self._routes.proof, {"sessionToken": session_token})

    async def fetch_direct_proof(self, session_token: str, tx_hash: str | None = None) -> SessionResponse:
        body: dict[str, Any] = {"sessionToken": session_token}
        if tx_hash is not None:
            body["txHash"] = tx_hash
        return await self._post(self._routes.direct_proof, body)

    async def complete_session(self, session_token: str) -> SessionResponse:
        return await self._post(self._routes.complete, {"sessionToken": session_token})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> SessionClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"SessionClient(base_url={self._base_url!r})"

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _post(self, path: str, body: dict[str, Any]) -> SessionResponse:
        url = resolve_url(self._base_url, path)
        parsed = await post_json(self._client, url, body, headers=self._headers)
        try:
            return SessionResponse.model_validate(parsed)
        except ValidationError as exc:
            raise ResponseParseError(
                f"Unexpected response shape from {url}: {exc.error_count()} validation error(s)",
                url=url,
            ) from exc
