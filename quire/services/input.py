#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Bindings to the editor surfaces.

The text-input widget and the rendered-output view live outside this
package.  ``InputSurface`` is everything the core and the built-in actions
expect from an input; ``InputBinding`` hands it the merged shortcuts,
prefixes and surface listeners and carries the re-render callback.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional, Protocol, runtime_checkable

from quire.schemas import HistoryOptions, KeyboardShortcut, Listener, Prefix

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@runtime_checkable
class InputSurface(Protocol):

    def add_event_listener(self, event: str, handler: Callable[[Any], Any], options: Any = None) -> None: ...

    def toggle_selection_surrounding(self, delimiter: str) -> None: ...

    def toggle_line_prefix(self, prefix: str, whitespace: str = "attach") -> None: ...

    def insert_link(self) -> None: ...

    def undo(self) -> None: ...

    def redo(self) -> None: ...


# -----------------------------------------------------------------------------

class InputBinding:

    def __init__(
        self,
        surface: InputSurface,
        container: Any,
        *,
        shortcuts: Iterable[KeyboardShortcut],
        prefixes: Iterable[Prefix],
        listeners: Iterable[Listener],
        callback: Callable[[], Any],
        history_options: Optional[HistoryOptions] = None,
    ) -> None:
        self.surface = surface
        self.container = container
        self.shortcuts = tuple(shortcuts)
        self.prefixes = tuple(prefixes)
        self.listeners = tuple(listeners)
        self.history_options = history_options or HistoryOptions()
        self._callback = callback

        for listener in self.listeners:
            surface.add_event_listener(listener.event, listener.handler, listener.options)

    def update(self) -> None:
        """Ask the editor to re-render its content."""
        self._callback()

    def handle_shortcut(self, keys: Iterable[str]) -> Optional[KeyboardShortcut]:
        """Run the first shortcut bound to exactly *keys*."""
        pressed = frozenset(k.lower() for k in keys)
        for shortcut in self.shortcuts:
            if shortcut.combination == pressed:
                log.debug("Shortcut %r", shortcut.id)
                shortcut.action(self)
                return shortcut
        return None

    def continue_prefix(self, line: str) -> Optional[str]:
        """Prefix for the line after *line*, or ``None`` when nothing matches."""
        for prefix in self.prefixes:
            matched = prefix.match(line)
            if matched:
                return prefix.maker(matched, line)
        return None


# -----------------------------------------------------------------------------

class RendererBinding:

    def __init__(self, container: Any) -> None:
        self.container = container


# -----------------------------------------------------------------------------
