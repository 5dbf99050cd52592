#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for Quire.render / Quire.render_ssr."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import re

import pytest

from quire import Extension, ExtensionComponent, Quire, RENDER_EVENT, RENDER_SSR_EVENT


def _strip_scripts(html: str) -> str:
    return re.sub(r"<script\b.*?</script>\s*", "", html, flags=re.S)


# ── Rendering ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_render_heading():
    q = Quire()
    assert await q.render("# Title") == '<h1 id="title">Title</h1>\n'
    await q.highlighting_ready()


def test_render_ssr_without_event_loop():
    q = Quire()
    assert q.render_ssr("# Title") == '<h1 id="title">Title</h1>\n'
    assert q.highlight_loaded is False


@pytest.mark.asyncio
async def test_render_empty_input_gives_empty_string(counter):
    q = Quire()
    q.on(RENDER_EVENT, counter)
    assert await q.render("") == ""
    assert counter.count == 0
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_render_ssr_creates_no_tasks():
    q = Quire()
    await q.highlighting_ready()
    before = asyncio.all_tasks()
    q.render_ssr("# Title\n\n```python\nx = 1\n```")
    assert asyncio.all_tasks() == before


# ── Sanitizer ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_sanitizer_applies_to_both_modes():
    q = Quire(sanitizer=_strip_scripts)
    source = "hello\n\n<script>alert(1)</script>\n"
    html = await q.render(source)
    assert "<script>" not in html
    assert "<p>hello</p>" in html
    assert q.render_ssr(source) == html
    await q.highlighting_ready()


def test_sanitizer_errors_propagate():
    def broken(html):
        raise RuntimeError("sanitizer exploded")

    q = Quire(sanitizer=broken)
    with pytest.raises(RuntimeError):
        q.render_ssr("text")


def test_no_sanitizer_keeps_raw_html():
    html = Quire().render_ssr("<script>alert(1)</script>\n")
    assert "<script>alert(1)</script>" in html


# ── Lifecycle events ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_render_dispatches_render_event():
    seen = []
    q = Quire()
    q.on(RENDER_EVENT, seen.append)
    await q.render("text")
    assert len(seen) == 1
    assert seen[0].type == RENDER_EVENT
    assert seen[0].detail["quire"] is q
    await q.highlighting_ready()


def test_render_ssr_dispatches_ssr_event():
    seen = []
    q = Quire()
    q.on(RENDER_SSR_EVENT, seen.append)
    q.on(RENDER_EVENT, lambda evt: pytest.fail("async event on SSR render"))
    q.render_ssr("text")
    assert [evt.type for evt in seen] == [RENDER_SSR_EVENT]


def test_sanitizer_runs_before_event():
    order = []
    q = Quire(sanitizer=lambda html: order.append("sanitize") or html)
    q.on(RENDER_SSR_EVENT, lambda evt: order.append("event"))
    q.render_ssr("text")
    assert order == ["sanitize", "event"]


# ── Collaborators ─────────────────────────────────────────────────────────────

def test_set_renderer_and_components():
    ext = Extension(components=(
        ExtensionComponent(component="Toolbar", parent=("input", "editor")),
        ExtensionComponent(component="Preview", parent="renderer"),
    ))
    q = Quire(extensions=[ext])
    binding = q.set_renderer("container")
    assert q.renderer is binding
    assert binding.container == "container"
    assert [c.component for c in q.components_for("input")] == ["Toolbar"]
    assert [c.component for c in q.components_for("renderer")] == ["Preview"]
    assert q.components_for("preview") == ()


# -----------------------------------------------------------------------------
