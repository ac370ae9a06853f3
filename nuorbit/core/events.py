"""Flow event sinks.

An event sink is any callable accepting a ``FlowEvent``. The orchestrator
calls exactly one sink per run; use ``EventDispatcher`` to fan a run's
events out to several sinks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from nuorbit.models.flow import FlowEvent, FlowEventType

logger = logging.getLogger(__name__)

EventSink = Callable[[FlowEvent], None]


class EventDispatchError(RuntimeError):
    """Raised when every registered sink fails for one event."""


class EventRecorder:
    """Append-only in-memory event log.

    Usage
    -----
    >>> recorder = EventRecorder()
    >>> await orchestrator.run_flow(request, transfer_tx_hash="0x1", on_event=recorder)
    >>> recorder.types
    """

    def __init__(self) -> None:
        self._events: list[FlowEvent] = []

    def __call__(self, event: FlowEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[FlowEvent]:
        return iter(list(self._events))

    @property
    def events(self) -> list[FlowEvent]:
        return list(self._events)

    @property
    def types(self) -> list[FlowEventType]:
        return [event.type for event in self._events]

    def last(self) -> FlowEvent | None:
        return self._events[-1] if self._events else None


class LoggingEventSink:
    """Writes each event to a logger; flow errors at ERROR level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def __call__(self, event: FlowEvent) -> None:
        session_id = event.session.session_id if event.session else "-"
        if event.type == FlowEventType.FLOW_ERROR:
            self._log.error("flow event %s session=%s error=%s", event.type.value, session_id, event.error)
            return
        status = event.session.status.value if event.session else "-"
        self._log.info("flow event %s session=%s status=%s", event.type.value, session_id, status)


class EventDispatcher:
    """Routes each event to ALL registered sinks.

    A failure in one sink is logged and does not block the others. If
    every sink fails, ``EventDispatchError`` is raised.
    """

    def __init__(self, *sinks: EventSink) -> None:
        self._sinks: list[EventSink] = []
        for sink in sinks:
            self.register_sink(sink)

    def register_sink(self, sink: EventSink) -> None:
        """Register a sink. Duplicate registration is ignored."""
        if sink not in self._sinks:
            self._sinks.append(sink)

    def unregister_sink(self, sink: EventSink) -> None:
        try:
            self._sinks.remove(sink)
        except ValueError:
            pass

    @property
    def registered_sinks(self) -> list[EventSink]:
        return list(self._sinks)

    def __call__(self, event: FlowEvent) -> None:
        if not self._sinks:
            return

        failures: list[tuple[EventSink, Exception]] = []
        for sink in self._sinks:
            try:
                sink(event)
            except Exception as exc:  # noqa: BLE001
                logger.error("Event sink %r failed for %s: %s", sink, event.type.value, exc)
                failures.append((sink, exc))

        if failures and len(failures) == len(self._sinks):
            raise EventDispatchError(
                f"All {len(failures)} sinks failed for {event.type.value}: "
                + "; ".join(f"{sink!r}: {exc}" for sink, exc in failures)
            )
