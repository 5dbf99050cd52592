#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Contribution registry: merge extension contributions with the built-ins.

Extension items come first, in the order the caller listed the extensions;
built-in defaults follow, minus the ones disabled by id (or all of a
category when its disable flag is ``True``).  Listeners are split into
system listeners (reserved lifecycle events) and surface listeners (handed
to the input surface) by event name alone.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from quire.schemas import (
    Extension, ExtensionComponent, HighlightRule, Icon, KeyboardShortcut,
    Listener, Prefix,
)
from quire.services.defaults import DEFAULT_ICONS, DEFAULT_PREFIXES, DEFAULT_SHORTCUTS


# Lifecycle events emitted by the render orchestrator.
RENDER_EVENT     = "quire-render"
RENDER_SSR_EVENT = "quire-render-ssr"
RESERVED_EVENTS  = (RENDER_EVENT, RENDER_SSR_EVENT)

T = TypeVar("T", KeyboardShortcut, Icon, Prefix)


# -----------------------------------------------------------------------------

class Contributions(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    shortcuts: tuple[KeyboardShortcut, ...] = ()
    icons: tuple[Icon, ...] = ()
    prefixes: tuple[Prefix, ...] = ()
    highlight_rules: tuple[HighlightRule, ...] = ()
    components: tuple[ExtensionComponent, ...] = ()
    system_listeners: tuple[Listener, ...] = ()
    surface_listeners: tuple[Listener, ...] = ()


# -----------------------------------------------------------------------------

def is_reserved_event(event: str) -> bool:
    return event in RESERVED_EVENTS


def partition_listeners(listeners: Iterable[Listener]) -> tuple[list[Listener], list[Listener]]:
    """Return ``(system, surface)`` listeners, each in original order."""
    system: list[Listener] = []
    surface: list[Listener] = []
    for listener in listeners:
        (system if is_reserved_event(listener.event) else surface).append(listener)
    return system, surface


def filter_defaults(defaults: Sequence[T], disabled: Union[Literal[True], Sequence[str], None]) -> list[T]:
    """Drop disabled built-ins; ``True`` drops the whole category."""
    if disabled is True:
        return []
    excluded = set(disabled or ())
    return [item for item in defaults if item.id not in excluded]


# -----------------------------------------------------------------------------

def merge_contributions(
    extensions: Sequence[Extension],
    *,
    disable_shortcuts: Union[Literal[True], Sequence[str], None] = None,
    disable_icons: Union[Literal[True], Sequence[str], None] = None,
    disable_prefixes: Union[Literal[True], Sequence[str], None] = None,
) -> Contributions:
    shortcuts:       list[KeyboardShortcut]   = []
    icons:           list[Icon]               = []
    prefixes:        list[Prefix]             = []
    highlight_rules: list[HighlightRule]      = []
    components:      list[ExtensionComponent] = []
    listeners:       list[Listener]           = []

    for ext in extensions:
        shortcuts.extend(ext.shortcuts)
        icons.extend(ext.icons)
        prefixes.extend(ext.prefixes)
        highlight_rules.extend(ext.highlight_rules)
        components.extend(ext.components)
        listeners.extend(ext.listeners)

    shortcuts.extend(filter_defaults(DEFAULT_SHORTCUTS, disable_shortcuts))
    icons.extend(filter_defaults(DEFAULT_ICONS, disable_icons))
    prefixes.extend(filter_defaults(DEFAULT_PREFIXES, disable_prefixes))

    system, surface = partition_listeners(listeners)

    return Contributions(
        shortcuts=tuple(shortcuts),
        icons=tuple(icons),
        prefixes=tuple(prefixes),
        highlight_rules=tuple(highlight_rules),
        components=tuple(components),
        system_listeners=tuple(system),
        surface_listeners=tuple(surface),
    )


# -----------------------------------------------------------------------------
