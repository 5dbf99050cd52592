#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the first-party code and math extensions."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from quire import Quire, highlight
from quire.plugins import code, math
from quire.plugins.math import LATEX_LANGUAGE, MATH_SPAN_RULES
from quire.services.highlight import registry


FENCED_PY = "```python\nx = 1\n```\n"


# ── Code highlighting ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_fenced_code_is_highlighted():
    q = Quire(extensions=[code()])
    html = await q.render(FENCED_PY)
    assert html.startswith('<pre class="highlight"><code class="language-python">')
    assert "<span" in html
    assert "linenos" not in html
    await q.highlighting_ready()


def test_ssr_leaves_code_unhighlighted():
    q = Quire(extensions=[code()])
    html = q.render_ssr(FENCED_PY)
    assert html == '<pre><code class="language-python">x = 1\n</code></pre>\n'


@pytest.mark.asyncio
async def test_unknown_language_autodetects():
    q = Quire(extensions=[code()])
    html = await q.render('```zzznotalang\n{"key": true, "other": null}\n```\n')
    assert 'class="language-zzznotalang"' in html
    assert '<span class="nt">' in html
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_no_autodetect_falls_back_to_plain():
    q = Quire(extensions=[code(auto_detect=False)])
    html = await q.render("```\na < b\n```\n")
    assert html == '<pre class="highlight"><code>a &lt; b\n</code></pre>\n'
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_default_language_and_line_numbers():
    q = Quire(extensions=[code(default_language="python", line_numbering=True)])
    html = await q.render("```\ndef f():\n    pass\n```\n")
    assert '<span class="k">def</span>' in html
    assert '<span class="linenos">2</span>' in html
    # The class only reflects an explicit info string.
    assert "<code>" in html
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_lang_prefix_and_nested_blocks():
    q = Quire(extensions=[code(lang_prefix="lang-")])
    html = await q.render("- item\n\n  ```python\n  x = 1\n  ```\n")
    assert 'class="lang-python"' in html
    assert '<pre class="highlight">' in html
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_pre_class_follows_settings(monkeypatch):
    monkeypatch.setenv("QUIRE_HIGHLIGHT_CSS_CLASS", "codehilite")
    q = Quire(extensions=[code()])
    html = await q.render("```python\nx = 1\n```\n")
    assert html.startswith('<pre class="codehilite"><code class="language-python">')
    await q.highlighting_ready()


@pytest.mark.asyncio
async def test_inline_code_untouched():
    q = Quire(extensions=[code()])
    assert await q.render("Use `print()`.") == "<p>Use <code>print()</code>.</p>\n"
    await q.highlighting_ready()


# ── Math ──────────────────────────────────────────────────────────────────────

def test_block_math():
    html = Quire(extensions=[math()]).render_ssr("$$\nx^2\n$$\n")
    assert '<div class="math">' in html
    assert "x^2" in html


def test_inline_math():
    html = Quire(extensions=[math()]).render_ssr("Euler: $e^{i\\pi}+1=0$")
    assert '<span class="math">' in html


def test_math_contributes_highlight_rules():
    q = Quire(extensions=[math(), code()])
    assert q.highlight_rules == MATH_SPAN_RULES


@pytest.mark.asyncio
async def test_latex_language_registered_on_load():
    q = Quire(extensions=[math()])
    assert registry.has(LATEX_LANGUAGE)
    html = await highlight(r"\frac{1}{2} + \alpha", LATEX_LANGUAGE, hide_line_numbers=True)
    assert '<span class="s">\\frac</span>' in html
    assert '<span class="o">\\alpha</span>' in html
    await q.highlighting_ready()


# -----------------------------------------------------------------------------
