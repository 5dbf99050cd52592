#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Markup pipeline
===============
Markdown → HTML via mistune, with extension rules folded on top.

Two parsers are built from the same ordered rule list:

  - asynchronous : runs every rule; walkers may await (code highlighting)
  - synchronous  : asynchronous rules are folded as pass-through rules, so
                   ``parse`` never has anything to await

Both parsers apply the same synchronous rules in the same order, so their
structural output only differs where an asynchronous rule ran.

A parse runs in four steps:

  1. preprocessors on the markdown source
  2. mistune block parsing (before-parse / before-render hooks included)
  3. token walkers over every block token
  4. rendering, then postprocessors on the HTML
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Iterator
from typing import Any, Literal, NamedTuple, Union

import mistune
from mistune.plugins.formatting import strikethrough
from mistune.plugins.table import table
from mistune.plugins.task_lists import task_lists
from mistune.plugins.url import url

from quire.schemas import HeadingIdOptions, MarkupRule
from quire.services.transforms import heading_id_rule, mangle_rule

log = logging.getLogger(__name__)


BASE_PLUGINS = (table, strikethrough, url, task_lists)


# -----------------------------------------------------------------------------

def iter_tokens(tokens: list[dict]) -> Iterator[dict]:
    """Every block token, depth first, containers before their children."""
    for tok in tokens:
        yield tok
        children = tok.get("children")
        if children:
            yield from iter_tokens(children)


def _reject_awaitable(value: Any, rule_name: str) -> None:
    if inspect.iscoroutine(value):
        value.close()
    raise TypeError(
        f"Markup rule {rule_name!r} returned an awaitable on a synchronous "
        f"parser; declare it with is_async=True"
    )


# -----------------------------------------------------------------------------

class ParseResult(NamedTuple):
    html: str
    headings: list[dict]


# -----------------------------------------------------------------------------

class MarkupParser:
    """One configured mistune instance plus the rules folded onto it.

    ``headings`` holds the headings of the most recently finished parse, so
    concurrent ``parse_async`` calls overwrite each other there; use
    ``parse_result`` / ``parse_result_async`` to get them per parse.
    """

    def __init__(self, *, asynchronous: bool) -> None:
        self.asynchronous = asynchronous
        self._md = mistune.Markdown(
            renderer=mistune.HTMLRenderer(escape=False),
            plugins=list(BASE_PLUGINS),
        )
        self._rules: list[MarkupRule] = []
        self.headings: list[dict] = []

    @property
    def rules(self) -> tuple[MarkupRule, ...]:
        return tuple(self._rules)

    def use(self, rule: MarkupRule) -> MarkupParser:
        if rule.is_async and not self.asynchronous:
            log.debug("Markup rule %r is asynchronous; folded as pass-through", rule.name)
            rule = rule.passthrough()
        for plugin in rule.plugins:
            self._md.use(plugin)
        for name, func in rule.renderers.items():
            self._md.renderer.register(name, func)
        self._rules.append(rule)
        return self

    # ── parse steps ───────────────────────────────────────────────────────

    def _tokenize(self, text: str):
        md = self._md
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if not text.endswith("\n"):
            text += "\n"
        state = md.block.state_cls()
        state.process(text)
        for hook in md.before_parse_hooks:
            hook(md, state)
        md.block.parse(state)
        for hook in md.before_render_hooks:
            hook(md, state)
        return state

    def _render(self, state) -> str:
        md = self._md
        result = md.render_state(state)
        for hook in md.after_render_hooks:
            result = hook(md, result, state)
        return result

    def _finish(self, html: str, state) -> ParseResult:
        headings = list(state.env.get("headings", []))
        self.headings = headings
        return ParseResult(html, headings)

    # ── entry points ──────────────────────────────────────────────────────

    def parse_result(self, text: str) -> ParseResult:
        """Render *text* without ever suspending; HTML plus its headings."""
        for rule in self._rules:
            if rule.preprocess is not None:
                text = rule.preprocess(text)
                if inspect.isawaitable(text):
                    _reject_awaitable(text, rule.name)

        state = self._tokenize(text)
        walkers = [r for r in self._rules if r.walk_tokens is not None]
        for tok in list(iter_tokens(state.tokens)):
            for rule in walkers:
                result = rule.walk_tokens(tok)
                if inspect.isawaitable(result):
                    _reject_awaitable(result, rule.name)

        html = self._render(state)
        for rule in self._rules:
            if rule.postprocess is not None:
                html = rule.postprocess(html)
                if inspect.isawaitable(html):
                    _reject_awaitable(html, rule.name)
        return self._finish(html, state)

    async def parse_result_async(self, text: str) -> ParseResult:
        """Render *text*, awaiting whatever the rules hand back."""
        for rule in self._rules:
            if rule.preprocess is not None:
                text = rule.preprocess(text)
                if inspect.isawaitable(text):
                    text = await text

        state = self._tokenize(text)
        walkers = [r for r in self._rules if r.walk_tokens is not None]
        pending = []
        for tok in list(iter_tokens(state.tokens)):
            for rule in walkers:
                result = rule.walk_tokens(tok)
                if inspect.isawaitable(result):
                    pending.append(result)
        if pending:
            await asyncio.gather(*pending)

        html = self._render(state)
        for rule in self._rules:
            if rule.postprocess is not None:
                html = rule.postprocess(html)
                if inspect.isawaitable(html):
                    html = await html
        return self._finish(html, state)

    def parse(self, text: str) -> str:
        return self.parse_result(text).html

    async def parse_async(self, text: str) -> str:
        return (await self.parse_result_async(text)).html


# -----------------------------------------------------------------------------

def builtin_rules(
    *,
    mangle: bool = True,
    heading_id: Union[HeadingIdOptions, Literal[False]] = HeadingIdOptions(prefix=""),
) -> list[MarkupRule]:
    rules = []
    if mangle:
        rules.append(mangle_rule())
    if heading_id is not False:
        rules.append(heading_id_rule(heading_id.prefix))
    return rules


def build_parsers(
    rules: Iterable[MarkupRule],
    *,
    mangle: bool = True,
    heading_id: Union[HeadingIdOptions, Literal[False]] = HeadingIdOptions(prefix=""),
) -> tuple[MarkupParser, MarkupParser]:
    """Fold *rules*, then the built-ins, onto an async and a sync parser."""
    async_parser = MarkupParser(asynchronous=True)
    sync_parser  = MarkupParser(asynchronous=False)
    for rule in [*rules, *builtin_rules(mangle=mangle, heading_id=heading_id)]:
        async_parser.use(rule)
        sync_parser.use(rule)
    return async_parser, sync_parser


# -----------------------------------------------------------------------------
