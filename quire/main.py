#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Quire: composes extensions into one configured markdown renderer.

Construction merges every extension contribution with the built-in
defaults, builds the asynchronous and synchronous markup parsers, runs each
extension's ``on_load`` hook once, then starts loading the composite
highlight language in the background.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, NamedTuple, Optional, Union

from quire.schemas import ExtensionComponent, ListenerOptions, QuireOptions
from quire.services.events import EventBus
from quire.services.highlight import (
    HIGHLIGHT_FUNCTIONS, HighlightFunctions, load_composite_language,
)
from quire.services.input import InputBinding, InputSurface, RendererBinding
from quire.services.markup import build_parsers
from quire.services.registry import RENDER_EVENT, RENDER_SSR_EVENT, merge_contributions

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class OnLoadData(NamedTuple):
    quire: "Quire"
    highlight: HighlightFunctions


# -----------------------------------------------------------------------------

class Quire:

    def __init__(self, options: Optional[QuireOptions] = None, **kwargs: Any) -> None:
        if options is None:
            options = QuireOptions(**kwargs)
        elif kwargs:
            raise TypeError("Pass either a QuireOptions instance or keyword options, not both")
        self.options = options

        # ── contributions ─────────────────────────────────────────────────

        merged = merge_contributions(
            options.extensions,
            disable_shortcuts=options.disable_shortcuts,
            disable_icons=options.disable_icons,
            disable_prefixes=options.disable_prefixes,
        )
        self.keyboard_shortcuts = merged.shortcuts
        self.icons              = merged.icons
        self.prefixes           = merged.prefixes
        self.highlight_rules    = merged.highlight_rules
        self.components         = merged.components
        self.dispatcher         = EventBus(merged.system_listeners + merged.surface_listeners)

        # ── markup parsers ────────────────────────────────────────────────

        self.markup_async, self.markup_sync = build_parsers(
            [rule for ext in options.extensions for rule in ext.markup_rules],
            mangle=options.mangle,
            heading_id=options.gfm_heading_id,
        )

        self._input: Optional[InputBinding] = None
        self._renderer: Optional[RendererBinding] = None
        self._highlight_task: Optional[asyncio.Task] = None

        # ── one-shot extension hooks ──────────────────────────────────────

        for ext in options.extensions:
            if ext.on_load is not None:
                ext.on_load(OnLoadData(quire=self, highlight=HIGHLIGHT_FUNCTIONS))

        # ── background highlight load ─────────────────────────────────────

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop; highlight load starts with the first render")
        else:
            self._schedule_highlight_load()

    # ── collaborators ─────────────────────────────────────────────────────

    @property
    def input(self) -> Optional[InputBinding]:
        return self._input

    @property
    def renderer(self) -> Optional[RendererBinding]:
        return self._renderer

    @property
    def textarea_listeners(self):
        return self.dispatcher.surface_listeners

    def set_input(self, surface: InputSurface, container: Any, callback: Callable[[], Any]) -> InputBinding:
        self._input = InputBinding(
            surface,
            container,
            shortcuts=self.keyboard_shortcuts,
            prefixes=self.prefixes,
            listeners=self.dispatcher.surface_listeners,
            callback=callback,
            history_options=self.options.history_options,
        )
        return self._input

    def set_renderer(self, container: Any) -> RendererBinding:
        self._renderer = RendererBinding(container)
        return self._renderer

    def components_for(self, parent: str) -> tuple[ExtensionComponent, ...]:
        return tuple(c for c in self.components if parent in c.parent)

    # ── events ────────────────────────────────────────────────────────────

    def on(
        self,
        event: str,
        handler: Callable[[Any], Any],
        options: Union[ListenerOptions, bool, dict, None] = None,
    ) -> None:
        self.dispatcher.on(event, handler, options)

    def off(self, event: str, handler: Callable[[Any], Any]) -> None:
        self.dispatcher.off(event, handler)

    # ── highlighting ──────────────────────────────────────────────────────

    def _schedule_highlight_load(self) -> asyncio.Task:
        if self._highlight_task is None:
            self._highlight_task = asyncio.get_running_loop().create_task(self._load_highlighting())
            self._highlight_task.add_done_callback(self._highlight_load_done)
        return self._highlight_task

    async def _load_highlighting(self) -> None:
        await load_composite_language(self.highlight_rules)
        if self._input is not None:
            self._input.update()
        else:
            log.debug("Highlight language loaded before an input was attached; update dropped")

    @staticmethod
    def _highlight_load_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.warning("Loading the composite highlight language failed: %s", exc)

    @property
    def highlight_loaded(self) -> bool:
        task = self._highlight_task
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    async def highlighting_ready(self) -> None:
        """Wait for this instance's highlight language load to finish."""
        await self._schedule_highlight_load()

    # ── rendering ─────────────────────────────────────────────────────────

    def _sanitize(self, html: str) -> str:
        sanitizer = self.options.sanitizer
        return sanitizer(html) if sanitizer is not None else html

    async def render(self, markdown: str) -> str:
        """Render markdown to sanitized HTML, highlighting code blocks."""
        self._schedule_highlight_load()
        dirty = await self.markup_async.parse_async(markdown)
        if not dirty:
            return ""
        html = self._sanitize(dirty)
        self.dispatcher.dispatch(RENDER_EVENT, {"quire": self})
        return html

    def render_ssr(self, markdown: str) -> str:
        """Render markdown to sanitized HTML without suspending (no highlighting)."""
        dirty = self.markup_sync.parse(markdown)
        if not isinstance(dirty, str):
            return ""
        html = self._sanitize(dirty)
        self.dispatcher.dispatch(RENDER_SSR_EVENT, {"quire": self})
        return html


# -----------------------------------------------------------------------------
