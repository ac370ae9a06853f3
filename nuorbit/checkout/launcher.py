"""Checkout popup launcher — opens the checkout and awaits its outcome.

Two sources race to settle the outcome:

1. an accepted outcome message from the popup;
2. a periodic check that finds the popup closed (-> cancelled).

The first to fire wins. Settling deactivates both sources immediately
(listener removed, timer cancelled) and any later attempt is a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from nuorbit.checkout.messages import parse_checkout_message
from nuorbit.checkout.url import origin_of, resolve_checkout_target
from nuorbit.checkout.window import BrowsingContext, MessageEvent, WindowHost
from nuorbit.config import config
from nuorbit.models.checkout import CheckoutCancelled, CheckoutOptions, CheckoutResult

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "NuOrbit checkout popup closed before completion."


class PopupBlockedError(RuntimeError):
    """Raised when the checkout popup could not be opened."""


class CheckoutEnvironmentError(RuntimeError):
    """Raised when launching outside a running event loop."""


class _OutcomeCell:
    """Single-assignment outcome guarded by a settled flag."""

    def __init__(self, future: asyncio.Future[CheckoutResult]) -> None:
        self._future = future
        self._settled = False
        self._deactivate: list[Callable[[], None]] = []

    @property
    def future(self) -> asyncio.Future[CheckoutResult]:
        return self._future

    @property
    def settled(self) -> bool:
        return self._settled

    def on_settle(self, callback: Callable[[], None]) -> None:
        self._deactivate.append(callback)

    def settle(self, result: CheckoutResult) -> bool:
        """Settle once. Returns ``False`` if already settled."""
        if self._settled:
            return False
        self._settled = True
        for deactivate in self._deactivate:
            deactivate()
        self._deactivate.clear()
        if not self._future.done():
            self._future.set_result(result)
        return True


class CheckoutHandle:
    """Handle to an open checkout popup.

    ``result`` is an ``asyncio.Future`` that resolves exactly once with a
    ``CheckoutResult``; it is never rejected.
    """

    def __init__(self, popup: BrowsingContext, result: asyncio.Future[CheckoutResult]) -> None:
        self._popup = popup
        self._result = result

    @property
    def popup(self) -> BrowsingContext:
        return self._popup

    @property
    def result(self) -> asyncio.Future[CheckoutResult]:
        return self._result

    def close(self) -> None:
        """Close the popup. The next closure check settles ``cancelled``."""
        try:
            self._popup.close()
        except Exception:  # noqa: BLE001
            logger.debug("Ignoring popup close error", exc_info=True)

    def focus(self) -> None:
        """Bring the popup to the front."""
        try:
            self._popup.focus()
        except Exception:  # noqa: BLE001
            logger.debug("Ignoring popup focus error", exc_info=True)

    def __await__(self):
        return self._result.__await__()


def launch_checkout(
    host: WindowHost,
    options: CheckoutOptions | None = None,
    *,
    poll_interval_ms: int | None = None,
) -> CheckoutHandle:
    """Open the checkout popup and start listening for its outcome.

    Must be called from a running event loop. Messages are accepted only
    from ``options.target_origin``, else from the resolved base's origin.
    *poll_interval_ms* defaults to ``config.close_poll_interval_ms``.

    Raises
    ------
    ConfigurationError
        Invalid ``base_url`` or a non-finite price. Raised before any popup
        is opened.
    PopupBlockedError
        The host refused to open the popup. ``on_popup_blocked`` is called
        first, when supplied.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError as exc:
        raise CheckoutEnvironmentError(
            "NuOrbit checkout launcher requires a running asyncio event loop."
        ) from exc

    options = options or CheckoutOptions()
    base, checkout_url = resolve_checkout_target(options, origin=host.origin, href=host.href)

    popup = host.open(checkout_url, options.window_name, options.window_features)
    if popup is None:
        if options.on_popup_blocked is not None:
            options.on_popup_blocked()
        raise PopupBlockedError("NuOrbit checkout popup was blocked by the browser.")

    try:
        popup.focus()
    except Exception:  # noqa: BLE001
        logger.debug("Ignoring popup focus error", exc_info=True)

    expected_origin = options.target_origin or origin_of(base)
    if poll_interval_ms is None:
        poll_interval_ms = config.close_poll_interval_ms
    interval = max(poll_interval_ms, 1) / 1000
    cell = _OutcomeCell(loop.create_future())
    timer: asyncio.TimerHandle | None = None

    def on_message(event: MessageEvent) -> None:
        if cell.settled:
            return
        if expected_origin != "*" and event.origin != expected_origin:
            logger.debug("Ignoring message from unexpected origin %s", event.origin)
            return
        result = parse_checkout_message(event.data)
        if result is None:
            logger.debug("Ignoring non-checkout message from %s", event.origin)
            return
        if cell.settle(result):
            logger.info("Checkout settled via message: %s", result.status)

    def check_closed() -> None:
        nonlocal timer
        timer = None
        if cell.settled:
            return
        if popup.closed:
            if cell.settle(CheckoutCancelled(message=CANCELLED_MESSAGE)):
                logger.info("Checkout settled: popup closed before completion")
            return
        timer = loop.call_later(interval, check_closed)

    def deactivate() -> None:
        host.remove_message_listener(on_message)
        if timer is not None:
            timer.cancel()

    cell.on_settle(deactivate)
    cell.future.add_done_callback(lambda fut: deactivate() if fut.cancelled() else None)
    host.add_message_listener(on_message)
    timer = loop.call_later(interval, check_closed)

    logger.info("Checkout popup opened at %s", checkout_url)
    return CheckoutHandle(popup, cell.future)
