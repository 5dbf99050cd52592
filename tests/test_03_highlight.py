#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Tests for syntax highlighting and the custom language registry.

Pygments is always available, so the full highlighted output path (span
elements with class names) is checked directly.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re

import pytest
from pygments.util import ClassNotFound

import quire.services.highlight as highlight_module
from quire import COMPOSITE_LANGUAGE, HighlightRule, highlight, highlight_autodetect, load_custom_language
from quire.services.highlight import (
    BUILTIN_LEXER_CACHE_SIZE, builtin_lexer, detect_language,
    load_composite_language, registry,
)
from quire.services.markdown_rules import DEFAULT_RULES


# ── Built-in languages ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_known_language_produces_spans():
    html = await highlight("def foo(): pass", "python", hide_line_numbers=True)
    assert '<span class="k">def</span>' in html


@pytest.mark.asyncio
async def test_unknown_language_gives_none():
    assert await highlight("hello", "zzznotalang") is None
    # Cached as missing; still None the second time.
    assert await highlight("hello", "zzznotalang") is None


def test_lexer_lookups_are_bounded(monkeypatch):
    def no_such_lexer(name, **options):
        raise ClassNotFound(name)

    monkeypatch.setattr(highlight_module, "get_lexer_by_name", no_such_lexer)
    for i in range(BUILTIN_LEXER_CACHE_SIZE + 20):
        assert builtin_lexer(f"nolang{i}") is None
    assert builtin_lexer.cache_info().currsize == BUILTIN_LEXER_CACHE_SIZE
    registry.reset()
    assert builtin_lexer.cache_info().currsize == 0


@pytest.mark.asyncio
async def test_plain_escapes_without_spans():
    html = await highlight("a < b", "plain", hide_line_numbers=True)
    assert html == "a &lt; b\n"


@pytest.mark.asyncio
async def test_line_numbers():
    html = await highlight("x = 1\ny = 2", "python")
    assert '<span class="linenos">1</span>' in html
    assert '<span class="linenos">2</span>' in html
    assert "linenos" not in await highlight("x = 1\ny = 2", "python", hide_line_numbers=True)


# ── Autodetection ─────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_autodetect_json():
    html = await highlight_autodetect('{"name": "quire", "ok": true}', hide_line_numbers=True)
    assert '<span class="nt">' in html


@pytest.mark.asyncio
async def test_autodetect_falls_back_to_plain():
    html = await highlight_autodetect("just words", hide_line_numbers=True)
    assert html == "just words\n"


@pytest.mark.asyncio
async def test_autodetect_single_key_json():
    html = await highlight_autodetect('{"name": "quire"}', hide_line_numbers=True)
    assert '<span class="nt">&quot;name&quot;</span>' in html


def test_detect_small_json_objects():
    assert detect_language('{"a": 1, "b": 2}') == "json"
    assert detect_language('[{"id": 7}]') == "json"
    assert detect_language('x = {"a": 1}') != "json"


def test_detect_language():
    assert detect_language("SELECT * FROM pages") == "sql"
    assert detect_language("#!/bin/bash\necho hi") == "bash"
    assert detect_language("hello there") == "plain"


# ── Custom languages ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_custom_language():
    load_custom_language("toy", [
        HighlightRule(match=r"\bfoo\b", type="kwd"),
        HighlightRule(match=re.compile(r"BAR", re.IGNORECASE), type="str"),
    ])
    html = await highlight("foo bar", "toy", hide_line_numbers=True)
    assert '<span class="k">foo</span>' in html
    assert '<span class="s">bar</span>' in html


@pytest.mark.asyncio
async def test_custom_language_can_be_replaced():
    load_custom_language("toy", [HighlightRule(match=r"foo", type="kwd")])
    load_custom_language("toy", [HighlightRule(match=r"foo", type="num")])
    html = await highlight("foo", "toy", hide_line_numbers=True)
    assert '<span class="m">foo</span>' in html


@pytest.mark.asyncio
async def test_broken_custom_language_fails_soft():
    load_custom_language("broken", [HighlightRule(match=r"(unclosed", type="kwd")])
    assert await highlight("text", "broken") is None


# ── Composite language ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_composite_language_is_seeded_with_defaults():
    extra = HighlightRule(match=r"@@\w+@@", type="kwd")
    merged = await load_composite_language([extra])
    assert merged[0] is extra
    assert merged[1:] == DEFAULT_RULES
    assert registry.rules(COMPOSITE_LANGUAGE) == merged


@pytest.mark.asyncio
async def test_composite_language_prepends_on_each_load():
    first = HighlightRule(match=r"one", type="kwd")
    second = HighlightRule(match=r"two", type="kwd")
    await load_composite_language([first])
    merged = await load_composite_language([second])
    assert merged[:2] == (second, first)
    assert len(merged) == len(DEFAULT_RULES) + 2


@pytest.mark.asyncio
async def test_composite_highlights_markdown():
    await load_composite_language([])
    html = await highlight("# Title\n\n**bold**", COMPOSITE_LANGUAGE, hide_line_numbers=True)
    assert "<span" in html
    assert "Title" in html


# -----------------------------------------------------------------------------
