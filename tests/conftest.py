#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for Quire tests.
Every test starts with an empty highlight registry and fresh settings.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from quire.core.config import get_settings
from quire.services.highlight import registry


# -----------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_state():
    registry.reset()
    get_settings.cache_clear()
    yield
    registry.reset()
    get_settings.cache_clear()


# -----------------------------------------------------------------------------
# Fake input surface
# -----------------------------------------------------------------------------

class FakeSurface:
    """Records every call the core and the built-in actions make."""

    def __init__(self) -> None:
        self.listeners: list[tuple] = []
        self.calls: list[tuple] = []

    def add_event_listener(self, event, handler, options=None) -> None:
        self.listeners.append((event, handler, options))

    def toggle_selection_surrounding(self, delimiter: str) -> None:
        self.calls.append(("surround", delimiter))

    def toggle_line_prefix(self, prefix: str, whitespace: str = "attach") -> None:
        self.calls.append(("prefix", prefix, whitespace))

    def insert_link(self) -> None:
        self.calls.append(("link",))

    def undo(self) -> None:
        self.calls.append(("undo",))

    def redo(self) -> None:
        self.calls.append(("redo",))


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


class Counter:
    """Callable that counts its invocations and keeps the arguments."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def counter() -> Counter:
    return Counter()


# -----------------------------------------------------------------------------
