"""Checkout popup handshake.

``launch_checkout`` opens the checkout page in a secondary browsing context
and resolves a ``CheckoutHandle.result`` future exactly once with one of
the four outcome cases.
"""

from nuorbit.checkout.launcher import (
    CheckoutEnvironmentError,
    CheckoutHandle,
    PopupBlockedError,
    launch_checkout,
)
from nuorbit.checkout.messages import CHECKOUT_MESSAGE_TYPE, parse_checkout_message
from nuorbit.checkout.url import build_checkout_url
from nuorbit.checkout.window import (
    BrowsingContext,
    MemoryWindow,
    MemoryWindowHost,
    MessageEvent,
    WindowHost,
)

__all__ = [
    "launch_checkout",
    "CheckoutHandle",
    "PopupBlockedError",
    "CheckoutEnvironmentError",
    "parse_checkout_message",
    "CHECKOUT_MESSAGE_TYPE",
    "build_checkout_url",
    "BrowsingContext",
    "WindowHost",
    "MessageEvent",
    "MemoryWindow",
    "MemoryWindowHost",
]
