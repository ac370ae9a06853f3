"""Tests for the checkout popup launcher — settle-once race between message and closure."""

from __future__ import annotations

import asyncio

import pytest

from nuorbit.checkout.launcher import (
    CANCELLED_MESSAGE,
    CheckoutEnvironmentError,
    PopupBlockedError,
    launch_checkout,
)
from nuorbit.checkout.messages import CHECKOUT_MESSAGE_TYPE
from nuorbit.config import ConfigurationError, config
from nuorbit.models.checkout import CheckoutOptions

SHOP_ORIGIN = "https://shop.example"


def _success(**fields):
    return {"type": CHECKOUT_MESSAGE_TYPE, "status": "success", "transferTx": "0xtransfer", **fields}


async def _settled(handle, timeout: float = 1.0):
    return await asyncio.wait_for(asyncio.shield(handle.result), timeout)


class TestOpen:
    @pytest.mark.asyncio
    async def test_opens_named_popup_with_features(self, window_host):
        launch_checkout(window_host, CheckoutOptions(price_usd=1.5))
        popup = window_host.opened[0]
        assert popup.url == "https://shop.example/demo/checkout?price=1.5"
        assert popup.name == "nuorbit-checkout"
        assert popup.features == "popup=yes,resizable=yes,width=420,height=720,noopener=yes"
        assert popup.focus_count == 1
        assert window_host.listener_count == 1

    @pytest.mark.asyncio
    async def test_default_options(self, window_host):
        handle = launch_checkout(window_host)
        assert handle.popup is window_host.opened[0]

    @pytest.mark.asyncio
    async def test_blocked_popup(self, window_host):
        window_host.block_popups = True
        calls = []
        with pytest.raises(PopupBlockedError):
            launch_checkout(window_host, CheckoutOptions(on_popup_blocked=lambda: calls.append(1)))
        assert calls == [1]
        assert window_host.listener_count == 0

    @pytest.mark.asyncio
    async def test_invalid_price_fails_before_open(self, window_host):
        with pytest.raises(ConfigurationError):
            launch_checkout(window_host, CheckoutOptions(price_usd=float("inf")))
        assert window_host.opened == []

    @pytest.mark.asyncio
    async def test_invalid_base_url_fails_before_open(self, window_host):
        with pytest.raises(ConfigurationError):
            launch_checkout(window_host, CheckoutOptions(base_url="ftp://files.example"))
        assert window_host.opened == []

    def test_requires_running_loop(self, window_host):
        with pytest.raises(CheckoutEnvironmentError):
            launch_checkout(window_host)
        assert window_host.opened == []


class TestSettle:
    @pytest.mark.asyncio
    async def test_success_message(self, window_host):
        handle = launch_checkout(window_host)
        window_host.post_message(_success(), origin=SHOP_ORIGIN)

        result = await _settled(handle)
        assert result.status == "success"
        assert result.transfer_tx == "0xtransfer"
        assert window_host.listener_count == 0

    @pytest.mark.asyncio
    async def test_handle_is_awaitable(self, window_host):
        handle = launch_checkout(window_host)
        window_host.post_message(_success())
        result = await handle
        assert result.status == "success"

    @pytest.mark.asyncio
    async def test_pending_settles(self, window_host):
        handle = launch_checkout(window_host)
        window_host.post_message({"type": CHECKOUT_MESSAGE_TYPE, "status": "pending"})
        assert (await _settled(handle)).status == "pending"

    @pytest.mark.asyncio
    async def test_closed_popup_is_cancelled(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        window_host.opened[0].close()

        result = await _settled(handle)
        assert result.status == "cancelled"
        assert result.message == CANCELLED_MESSAGE
        assert window_host.listener_count == 0

    @pytest.mark.asyncio
    async def test_handle_close_cancels(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        handle.close()
        assert (await _settled(handle)).status == "cancelled"

    @pytest.mark.asyncio
    async def test_first_outcome_wins(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        window_host.post_message(_success())
        window_host.post_message({"type": CHECKOUT_MESSAGE_TYPE, "status": "error", "message": "late"})
        window_host.opened[0].close()
        await asyncio.sleep(0.03)

        result = await _settled(handle)
        assert result.status == "success"

    @pytest.mark.asyncio
    async def test_close_after_success_keeps_success(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        window_host.post_message(_success())
        handle.close()
        await asyncio.sleep(0.03)
        assert handle.result.result().status == "success"

    @pytest.mark.asyncio
    async def test_poll_interval_defaults_to_config(self, window_host, monkeypatch):
        monkeypatch.setattr(config, "close_poll_interval_ms", 5)
        handle = launch_checkout(window_host)
        window_host.opened[0].close()
        assert (await asyncio.wait_for(asyncio.shield(handle.result), 0.3)).status == "cancelled"

    @pytest.mark.asyncio
    async def test_open_popup_does_not_settle(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        await asyncio.sleep(0.03)
        assert not handle.result.done()
        handle.close()
        await _settled(handle)

    @pytest.mark.asyncio
    async def test_cancelling_result_detaches_listener(self, window_host):
        handle = launch_checkout(window_host)
        handle.result.cancel()
        await asyncio.sleep(0)
        assert window_host.listener_count == 0


class TestMessageFiltering:
    @pytest.mark.asyncio
    async def test_foreign_origin_ignored(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        window_host.post_message(_success(), origin="https://evil.example")
        assert not handle.result.done()

        window_host.post_message(_success(transferTx="0xreal"), origin=SHOP_ORIGIN)
        assert (await _settled(handle)).transfer_tx == "0xreal"

    @pytest.mark.asyncio
    async def test_origin_follows_checkout_base(self, window_host):
        handle = launch_checkout(window_host, CheckoutOptions(base_url="https://pay.example"))
        window_host.post_message(_success(), origin=SHOP_ORIGIN)
        assert not handle.result.done()

        window_host.post_message(_success(), origin="https://pay.example")
        assert (await _settled(handle)).status == "success"

    @pytest.mark.asyncio
    async def test_explicit_target_origin(self, window_host):
        handle = launch_checkout(window_host, CheckoutOptions(target_origin="https://relay.example"))
        window_host.post_message(_success(), origin=SHOP_ORIGIN)
        assert not handle.result.done()

        window_host.post_message(_success(), origin="https://relay.example")
        assert (await _settled(handle)).status == "success"

    @pytest.mark.asyncio
    async def test_wildcard_origin(self, window_host):
        handle = launch_checkout(window_host, CheckoutOptions(target_origin="*"))
        window_host.post_message(_success(), origin="https://anything.example")
        assert (await _settled(handle)).status == "success"

    @pytest.mark.asyncio
    async def test_non_checkout_message_ignored(self, window_host):
        handle = launch_checkout(window_host, poll_interval_ms=5)
        window_host.post_message({"type": "analytics", "status": "success"})
        window_host.post_message("x402-payment")
        assert not handle.result.done()
        handle.close()
        assert (await _settled(handle)).status == "cancelled"
