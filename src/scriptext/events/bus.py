"""Build lifecycle notifications for observers of ScriptExtPlugin."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any

import structlog

Handler = Callable[["ScriptExtEvent", dict[str, Any]], None]


class ScriptExtEvent(StrEnum):
    """
    What the plugin reports, one event per phase outcome.

    Each tag-alteration call ends in ``TAGS_ALTERED`` or ``TAGS_FAILED``.
    Emission publishes ``ASSETS_PRUNED`` only when something was removed, and
    ``EMISSION_FAILED`` when an inlined asset could not be removed. Payload
    shapes are the TypedDicts in :mod:`scriptext.events.payloads`.
    """

    TAGS_ALTERED = "tags.altered"
    TAGS_FAILED = "tags.failed"
    ASSETS_PRUNED = "assets.pruned"
    EMISSION_FAILED = "emission.failed"

    @property
    def is_failure(self) -> bool:
        return self in (ScriptExtEvent.TAGS_FAILED, ScriptExtEvent.EMISSION_FAILED)


class EventBus:
    """
    Delivers plugin events to observers such as build dashboards or test spies.

    Delivery happens inside the host's hook call, before the plugin returns
    control, so observers see events in phase order. An observer that raises
    is logged and skipped; the build never fails because of it.

    Example::

        bus = EventBus()
        bus.subscribe(
            ScriptExtEvent.TAGS_FAILED,
            lambda event, payload: alerts.append(payload["error"]),
        )
        plugin = ScriptExtPlugin({"inline": "runtime"}, event_bus=bus)
    """

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        # None keys the handlers that receive every event
        self._handlers: dict[ScriptExtEvent | None, list[Handler]] = {}
        self._logger = logger or structlog.get_logger("scriptext.events")

    def subscribe(self, event: ScriptExtEvent, handler: Handler) -> None:
        """Call ``handler(event, payload)`` whenever ``event`` is published."""
        self._handlers.setdefault(event, []).append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Call ``handler(event, payload)`` for every published event."""
        self._handlers.setdefault(None, []).append(handler)

    def unsubscribe(self, event: ScriptExtEvent | None, handler: Handler) -> None:
        """Drop ``handler`` from ``event``, or from the catch-all list when ``event`` is None."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: ScriptExtEvent, payload: dict[str, Any]) -> None:
        """Run the handlers of ``event`` in subscription order, then the catch-all handlers."""
        targets = [*self._handlers.get(event, ()), *self._handlers.get(None, ())]
        for handler in targets:
            try:
                handler(event, payload)
            except Exception as exc:
                self._logger.error(
                    "event_handler_error",
                    event=str(event),
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(exc),
                )
