"""Browsing-context abstractions for the checkout launcher.

The launcher never talks to a concrete browser. It depends on two small
protocols: a ``WindowHost`` (the parent context, which can open secondary
contexts and deliver inbound messages) and a ``BrowsingContext`` (the
opened popup). ``MemoryWindowHost`` implements both in-process; embedding
applications relay real browser messages into it via ``post_message``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageEvent:
    """An inbound cross-context message."""

    origin: str
    data: Any
    source: Any = None


MessageListener = Callable[[MessageEvent], None]


@runtime_checkable
class BrowsingContext(Protocol):
    """A secondary browsing context (popup window)."""

    @property
    def closed(self) -> bool:
        """Whether the context has been closed (by its user or programmatically)."""
        ...

    def close(self) -> None:
        ...

    def focus(self) -> None:
        ...


@runtime_checkable
class WindowHost(Protocol):
    """The parent context that opens popups and receives their messages."""

    @property
    def origin(self) -> str:
        """Origin of the parent context, e.g. ``https://shop.example``."""
        ...

    @property
    def href(self) -> str:
        """Full location of the parent context; relative URLs resolve against it."""
        ...

    def open(self, url: str, name: str, features: str) -> BrowsingContext | None:
        """Open a secondary context. ``None`` means the open was blocked."""
        ...

    def add_message_listener(self, listener: MessageListener) -> None:
        ...

    def remove_message_listener(self, listener: MessageListener) -> None:
        ...


# ---------------------------------------------------------------------------
# In-process implementation
# ---------------------------------------------------------------------------


@dataclass
class MemoryWindow:
    """A popup opened by ``MemoryWindowHost``."""

    url: str
    name: str
    features: str
    closed: bool = False
    focus_count: int = 0

    def close(self) -> None:
        self.closed = True

    def focus(self) -> None:
        if self.closed:
            return
        self.focus_count += 1

    @property
    def origin(self) -> str:
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.netloc}"


@dataclass
class MemoryWindowHost:
    """In-process window host.

    Parameters
    ----------
    href:
        Location of the parent context.
    block_popups:
        When ``True``, ``open`` returns ``None`` as a popup blocker would.
    """

    href: str = "http://localhost"
    block_popups: bool = False
    opened: list[MemoryWindow] = field(default_factory=list)
    _listeners: list[MessageListener] = field(default_factory=list, repr=False)

    @property
    def origin(self) -> str:
        parts = urlsplit(self.href)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def open(self, url: str, name: str, features: str) -> MemoryWindow | None:
        if self.block_popups:
            logger.debug("MemoryWindowHost: blocked popup %s", url)
            return None
        window = MemoryWindow(url=url, name=name, features=features)
        self.opened.append(window)
        return window

    def add_message_listener(self, listener: MessageListener) -> None:
        self._listeners.append(listener)

    def remove_message_listener(self, listener: MessageListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def post_message(self, data: Any, origin: str | None = None, source: Any = None) -> None:
        """Deliver a message to every listener, as ``window.postMessage`` would.

        *origin* defaults to this host's own origin.
        """
        event = MessageEvent(origin=origin if origin is not None else self.origin, data=data, source=source)
        for listener in list(self._listeners):
            listener(event)
