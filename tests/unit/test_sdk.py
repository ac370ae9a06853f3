"""Tests for the NuorbitSdk facade."""

from __future__ import annotations

import pytest

from nuorbit.config import ConfigurationError, SdkSettings
from nuorbit.core.events import EventRecorder
from nuorbit.models.chains import ChainConfig
from nuorbit.models.routes import SdkRoutes
from nuorbit.sdk import NuorbitSdk

BASE_URL = "https://api.nuorbit.test"
ROUTES = SdkRoutes()

CHAIN = ChainConfig.model_validate(
    {
        "id": "base-sepolia",
        "label": "Base Sepolia",
        "chainId": 84532,
        "stablecoins": {"USDC": {"symbol": "USDC", "address": "0xusdc", "decimals": 6}},
    }
)


class TestConstruction:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            NuorbitSdk(None)

    def test_from_settings(self):
        settings = SdkSettings(
            _env_file=None,
            api_key="pk_settings",
            base_url="https://settings.example/",
            default_provider_call_id="pc-settings",
        )
        sdk = NuorbitSdk.from_settings(settings)
        assert sdk.client.base_url == "https://settings.example"
        assert sdk.orchestrator.default_provider_call_id == "pc-settings"

    def test_from_settings_overrides_win(self):
        settings = SdkSettings(_env_file=None, api_key="pk_settings")
        sdk = NuorbitSdk.from_settings(settings, api_key="pk_override", base_url=BASE_URL)
        assert sdk.client.headers["X-NUORBIT-API-KEY"] == "pk_override"
        assert sdk.client.base_url == BASE_URL

    def test_from_settings_without_key(self, monkeypatch):
        monkeypatch.delenv("NUORBIT_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            NuorbitSdk.from_settings(SdkSettings(_env_file=None))


class TestChains:
    def test_supported_chains_use_configured_directory(self):
        sdk = NuorbitSdk("pk", chains=[CHAIN], direct_receivers={"84532:USDC": "0xreceiver"})
        supported = sdk.get_supported_chains("USDC", "direct-proof")
        assert [chain.direct_receiver for chain in supported] == ["0xreceiver"]

    def test_no_directory(self):
        assert NuorbitSdk("pk").get_supported_chains("USDC") == []


class TestOperations:
    @pytest.mark.asyncio
    async def test_delegates_remote_calls(self, fake_api, make_session_payload):
        fake_api.queue(ROUTES.execute, make_session_payload("executed"), token="tok-next")
        async with NuorbitSdk("pk", base_url=BASE_URL, transport=fake_api.transport) as sdk:
            response = await sdk.execute_session("tok-prev")
        assert response.session_token == "tok-next"
        assert fake_api.calls[0][1] == {"sessionToken": "tok-prev"}

    @pytest.mark.asyncio
    async def test_run_flow(self, cross_chain_api, make_session_request, sleep_recorder):
        recorder = EventRecorder()
        async with NuorbitSdk(
            "pk",
            base_url=BASE_URL,
            transport=cross_chain_api.transport,
            default_provider_call_id="pc-1",
            sleep=sleep_recorder,
        ) as sdk:
            result = await sdk.run_flow(make_session_request(), transfer_tx_hash="0xtransfer", on_event=recorder)
        assert result.registry_tx == "0xexec"
        assert len(recorder) == 10
