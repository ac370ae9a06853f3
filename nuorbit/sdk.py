"""NuorbitSdk — one object wiring the session client, orchestrator and chain directory.

Configuration is layered at construction time: explicit arguments, then
the defaults. ``NuorbitSdk.from_settings()`` builds an instance from
``SdkSettings`` (NUORBIT_* environment variables).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from nuorbit.config import SdkSettings
from nuorbit.core.chains import list_supported_chains
from nuorbit.core.events import EventSink
from nuorbit.core.orchestrator import (
    DEFAULT_PROOF_DELAY_MS,
    DEFAULT_STEP_DELAY_MS,
    FlowOrchestrator,
    SleepFunction,
    TransferFunction,
)
from nuorbit.core.session_client import DEFAULT_TIMEOUT_SECONDS, SessionClient
from nuorbit.models.chains import ChainConfig, StableSymbol, SupportedChain
from nuorbit.models.flow import FlowResult, SessionRequest
from nuorbit.models.session import FlowMode, SessionResponse


class NuorbitSdk:
    """Client-side entry point for NuOrbit payment sessions.

    Parameters
    ----------
    api_key:
        API credential. Required (``ConfigurationError`` otherwise).
    base_url:
        Prefix for every API request. Trailing slashes are stripped.
    transport:
        Custom httpx transport.
    default_headers:
        Extra headers for every request.
    routes:
        Per-operation path overrides.
    chains:
        Chain directory used by ``get_supported_chains``.
    direct_receivers:
        ``"{chainId}:{stable}"`` -> receiver address for direct payments.
    default_provider_call_id:
        Provider-call template for cross-chain runs.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        default_headers: Mapping[str, str] | None = None,
        routes: Mapping[str, str] | None = None,
        chains: Iterable[ChainConfig] = (),
        direct_receivers: Mapping[str, str] | None = None,
        default_provider_call_id: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        step_delay_ms: int = DEFAULT_STEP_DELAY_MS,
        proof_delay_ms: int = DEFAULT_PROOF_DELAY_MS,
        sleep: SleepFunction | None = None,
    ) -> None:
        self.client = SessionClient(
            api_key,
            base_url=base_url,
            transport=transport,
            default_headers=default_headers,
            routes=routes,
            timeout_seconds=timeout_seconds,
        )
        self.orchestrator = FlowOrchestrator(
            self.client,
            default_provider_call_id=default_provider_call_id,
            step_delay_ms=step_delay_ms,
            proof_delay_ms=proof_delay_ms,
            sleep=sleep,
        )
        self._chains: tuple[ChainConfig, ...] = tuple(chains)
        self._direct_receivers: dict[str, str] = dict(direct_receivers or {})

    @classmethod
    def from_settings(cls, settings: SdkSettings | None = None, **overrides: Any) -> NuorbitSdk:
        """Build an SDK from ``SdkSettings``; keyword *overrides* win."""
        settings = settings or SdkSettings()
        kwargs: dict[str, Any] = {
            "api_key": settings.api_key,
            "base_url": settings.base_url,
            "default_provider_call_id": settings.default_provider_call_id,
            "timeout_seconds": settings.request_timeout_seconds,
            "step_delay_ms": settings.step_delay_ms,
            "proof_delay_ms": settings.proof_delay_ms,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # ------------------------------------------------------------------
    # Chain directory
    # ------------------------------------------------------------------

    def get_supported_chains(
        self,
        stable: StableSymbol | str,
        flow: FlowMode | str = FlowMode.CROSS_CHAIN,
    ) -> list[SupportedChain]:
        return list_supported_chains(
            stable,
            flow,
            chains=self._chains,
            direct_receivers=self._direct_receivers,
        )

    # ------------------------------------------------------------------
    # Remote operations (delegated)
    # ------------------------------------------------------------------

    async def create_session(self, request: SessionRequest) -> SessionResponse:
        return await self.client.create_session(request)

    async def confirm_transfer(self, session_token: str, tx_hash: str | None = None) -> SessionResponse:
        return await self.client.confirm_transfer(session_token, tx_hash)

    async def execute_session(self, session_token: str) -> SessionResponse:
        return await self.client.execute_session(session_token)

    async def fetch_proof(self, session_token: str) -> SessionResponse:
        return await self.client.fetch_proof(session_token)

    async def fetch_direct_proof(self, session_token: str, tx_hash: str | None = None) -> SessionResponse:
        return await self.client.fetch_direct_proof(session_token, tx_hash)

    async def complete_session(self, session_token: str) -> SessionResponse:
        return await self.client.complete_session(session_token)

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    async def run_flow(
        self,
        request: SessionRequest,
        *,
        transfer: TransferFunction | None = None,
        transfer_tx_hash: str | None = None,
        on_event: EventSink | None = None,
        provider_call_id: str | None = None,
        step_delay_ms: int | None = None,
        proof_delay_ms: int | None = None,
    ) -> FlowResult:
        """See ``FlowOrchestrator.run_flow``."""
        return await self.orchestrator.run_flow(
            request,
            transfer=transfer,
            transfer_tx_hash=transfer_tx_hash,
            on_event=on_event,
            provider_call_id=provider_call_id,
            step_delay_ms=step_delay_ms,
            proof_delay_ms=proof_delay_ms,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> NuorbitSdk:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
