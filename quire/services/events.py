#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Lifecycle event bus.

Reserved lifecycle events (render completed, SSR render completed) are
dispatched here by the render orchestrator.  Any other event name belongs
to the input surface: the bus only records those listeners so they can be
handed over when an input is attached.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional, Union

from quire.schemas import Listener, ListenerOptions
from quire.services.registry import RESERVED_EVENTS, is_reserved_event


# -----------------------------------------------------------------------------

class QuireEvent:
    """Event handed to lifecycle listeners; ``detail["quire"]`` is the instance."""

    __slots__ = ("type", "detail")

    def __init__(self, type: str, detail: dict[str, Any]) -> None:
        self.type = type
        self.detail = detail

    def __repr__(self) -> str:
        return f"QuireEvent(type={self.type!r})"


# -----------------------------------------------------------------------------

def _is_once(options: Union[ListenerOptions, bool, None]) -> bool:
    return isinstance(options, ListenerOptions) and options.once


class EventBus:

    def __init__(self, listeners: tuple[Listener, ...] = ()) -> None:
        self._system: dict[str, list[Listener]] = {name: [] for name in RESERVED_EVENTS}
        self._surface: list[Listener] = []
        for listener in listeners:
            self.add(listener)

    @property
    def surface_listeners(self) -> tuple[Listener, ...]:
        return tuple(self._surface)

    def system_listeners(self, event: str) -> tuple[Listener, ...]:
        return tuple(self._system.get(event, ()))

    def add(self, listener: Listener) -> None:
        if is_reserved_event(listener.event):
            bucket = self._system[listener.event]
            # Same handler twice on one event is a no-op, as with DOM listeners.
            if any(existing.handler is listener.handler for existing in bucket):
                return
            bucket.append(listener)
        else:
            self._surface.append(listener)

    def on(
        self,
        event: str,
        handler: Callable[[Any], Any],
        options: Union[ListenerOptions, bool, dict, None] = None,
    ) -> Listener:
        listener = Listener(event=event, handler=handler, options=options)
        self.add(listener)
        return listener

    def off(self, event: str, handler: Callable[[Any], Any]) -> None:
        bucket = self._system.get(event)
        if bucket is not None:
            bucket[:] = [l for l in bucket if l.handler is not handler]
        else:
            self._surface = [l for l in self._surface if not (l.event == event and l.handler is handler)]

    def dispatch(self, event: str, detail: Optional[dict[str, Any]] = None) -> QuireEvent:
        if not is_reserved_event(event):
            raise ValueError(f"{event!r} is not a lifecycle event; surface events are dispatched by the input surface")
        evt = QuireEvent(event, dict(detail or {}))
        bucket = self._system[event]
        for listener in list(bucket):
            if _is_once(listener.options):
                bucket.remove(listener)
            listener.handler(evt)
        return evt


# -----------------------------------------------------------------------------
