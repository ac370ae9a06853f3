"""Shared test fixtures for NuOrbit."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from nuorbit.checkout.window import MemoryWindowHost
from nuorbit.models.flow import SessionRequest
from nuorbit.models.routes import SdkRoutes

BASE_URL = "https://api.nuorbit.test"
ROUTES = SdkRoutes()


def session_payload(
    status: str = "awaiting-transfer",
    flow_mode: str = "cross-chain",
    **overrides: Any,
) -> dict[str, Any]:
    """A camelCase session snapshot as the remote service returns it."""
    payload: dict[str, Any] = {
        "sessionId": "sess-001",
        "sessionHash": "0xsessionhash",
        "flowMode": flow_mode,
        "stableSymbol": "USDC",
        "network": "base-sepolia",
        "chainLabel": "Base Sepolia",
        "sourceChainId": 84532,
        "priceUsd": 1.5,
        "payTo": "0xpayto",
        "description": "Test order",
        "assetSymbol": "USDC",
        "assetDecimals": 6,
        "assetAddress": "0xusdc",
        "amountAtomic": "1500000",
        "amountFormatted": "1.50",
        "goatAccount": "0xgoat",
        "sourceAddress": "0xsource",
        "targetAddress": "0xtarget",
        "targetChainId": 48816,
        "targetNetwork": "goat-testnet",
        "status": status,
        "createdAt": 1700000000,
        "updatedAt": 1700000000,
    }
    payload.update(overrides)
    return payload


class FakeSessionApi:
    """Scripted remote session API behind an ``httpx.MockTransport``.

    Queue responses per route path; every request is recorded as
    ``(path, json_body, headers)``.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any], httpx.Headers]] = []
        self._responses: dict[str, list[httpx.Response]] = {}

    def queue(
        self,
        path: str,
        session: dict[str, Any] | None = None,
        *,
        token: str = "tok",
        status_code: int = 200,
        body: Any = None,
        text: str | None = None,
    ) -> None:
        if text is not None:
            response = httpx.Response(status_code, text=text)
        elif body is not None:
            response = httpx.Response(status_code, json=body)
        else:
            response = httpx.Response(
                status_code, json={"session": session, "sessionToken": token}
            )
        self._responses.setdefault(path, []).append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else {}
        self.calls.append((path, body, request.headers))
        queued = self._responses.get(path)
        if not queued:
            return httpx.Response(404, json={"error": f"no scripted response for {path}"})
        return queued.pop(0)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [path for path, _, _ in self.calls]

    def tokens(self) -> list[str | None]:
        return [body.get("sessionToken") for _, body, _ in self.calls]


@pytest.fixture
def fake_api() -> FakeSessionApi:
    return FakeSessionApi()


@pytest.fixture
def cross_chain_api(fake_api: FakeSessionApi) -> FakeSessionApi:
    """A fake API scripted for one successful cross-chain run with rotating tokens."""
    fake_api.queue(ROUTES.session, session_payload("awaiting-transfer"), token="tok-1")
    fake_api.queue(ROUTES.transfer, session_payload("transfer-confirmed", sourceTxHash="0xtransfer"), token="tok-2")
    fake_api.queue(
        ROUTES.execute,
        session_payload(
            "executed",
            contractCall={"to": "0xregistry", "data": "0x", "description": "record", "txHash": "0xexec"},
        ),
        token="tok-3",
    )
    fake_api.queue(
        ROUTES.proof,
        session_payload(
            "proof-ready",
            contractCall={"to": "0xregistry", "data": "0x", "description": "record", "txHash": "0xexec"},
        ),
        token="tok-4",
    )
    fake_api.queue(
        ROUTES.complete,
        session_payload(
            "completed",
            contractCall={"to": "0xregistry", "data": "0x", "description": "record", "txHash": "0xexec"},
            completion={"submissionId": "sub-1", "submittedAt": 1700000100, "acknowledgedBy": "nuorbit"},
        ),
        token="tok-5",
    )
    return fake_api


@pytest.fixture
def direct_proof_api(fake_api: FakeSessionApi) -> FakeSessionApi:
    """A fake API scripted for one successful direct-proof run."""
    fake_api.queue(ROUTES.session, session_payload("awaiting-transfer", "direct-proof"), token="tok-1")
    fake_api.queue(ROUTES.transfer, session_payload("transfer-confirmed", "direct-proof"), token="tok-2")
    fake_api.queue(ROUTES.direct_proof, session_payload("proof-ready", "direct-proof"), token="tok-3")
    fake_api.queue(ROUTES.complete, session_payload("completed", "direct-proof"), token="tok-4")
    return fake_api


@pytest.fixture
def make_session_request() -> Callable[..., SessionRequest]:
    """Factory fixture: build a SessionRequest with sensible defaults."""

    def _factory(**overrides: Any) -> SessionRequest:
        defaults: dict[str, Any] = {
            "network": "base-sepolia",
            "chain_label": "Base Sepolia",
            "chain_id": 84532,
            "price_usd": 1.5,
            "pay_to": "0xpayto",
            "description": "Test order",
            "asset_symbol": "USDC",
            "asset_decimals": 6,
            "asset_address": "0xusdc",
            "participant_address": "0xpayer",
        }
        defaults.update(overrides)
        return SessionRequest(**defaults)

    return _factory


@pytest.fixture
def window_host() -> MemoryWindowHost:
    return MemoryWindowHost(href="https://shop.example/cart")


class SleepRecorder:
    """Drop-in for ``asyncio.sleep`` that records durations and returns at once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_session_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture: camelCase session snapshots."""
    return session_payload
