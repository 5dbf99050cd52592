#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the lifecycle event bus."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from quire import Listener, ListenerOptions, Quire
from quire.services.events import EventBus
from quire.services.registry import RENDER_EVENT, RENDER_SSR_EVENT


# -----------------------------------------------------------------------------

def test_dispatch_calls_handlers_in_order():
    order = []
    bus = EventBus()
    bus.on(RENDER_EVENT, lambda evt: order.append("a"))
    bus.on(RENDER_EVENT, lambda evt: order.append("b"))
    evt = bus.dispatch(RENDER_EVENT, {"quire": None})
    assert order == ["a", "b"]
    assert evt.type == RENDER_EVENT


def test_once_listener_fires_once(counter):
    bus = EventBus()
    bus.on(RENDER_SSR_EVENT, counter, ListenerOptions(once=True))
    bus.dispatch(RENDER_SSR_EVENT)
    bus.dispatch(RENDER_SSR_EVENT)
    assert counter.count == 1


def test_same_handler_registered_once(counter):
    bus = EventBus()
    bus.on(RENDER_EVENT, counter)
    bus.on(RENDER_EVENT, counter)
    bus.dispatch(RENDER_EVENT)
    assert counter.count == 1


def test_off_removes_handler(counter):
    bus = EventBus()
    bus.on(RENDER_EVENT, counter)
    bus.off(RENDER_EVENT, counter)
    bus.dispatch(RENDER_EVENT)
    assert counter.count == 0


def test_surface_events_are_not_dispatched_here(counter):
    bus = EventBus()
    bus.on("keydown", counter)
    assert [l.event for l in bus.surface_listeners] == ["keydown"]
    assert bus.system_listeners("keydown") == ()
    with pytest.raises(ValueError):
        bus.dispatch("keydown")
    bus.off("keydown", counter)
    assert bus.surface_listeners == ()


def test_handler_errors_propagate():
    def broken(evt):
        raise RuntimeError("listener failed")

    bus = EventBus([Listener(event=RENDER_SSR_EVENT, handler=broken)])
    with pytest.raises(RuntimeError):
        bus.dispatch(RENDER_SSR_EVENT)


def test_quire_on_off(counter):
    q = Quire()
    q.on(RENDER_SSR_EVENT, counter, ListenerOptions(once=True))
    q.render_ssr("a")
    q.render_ssr("b")
    assert counter.count == 1

    q.on(RENDER_SSR_EVENT, counter)
    q.off(RENDER_SSR_EVENT, counter)
    q.render_ssr("c")
    assert counter.count == 1


# -----------------------------------------------------------------------------
