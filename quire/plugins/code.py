#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Code highlighting extension.

Highlights fenced and indented code blocks during ``Quire.render``.  The rule
is asynchronous, so ``render_ssr`` leaves code blocks as plain
``<pre><code>`` markup.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
from typing import Optional

from quire.core.config import get_settings
from quire.schemas import Extension, MarkupRule
from quire.services.highlight import highlight, highlight_autodetect


HIGHLIGHTED_CODE = "highlighted_code"


# -----------------------------------------------------------------------------

def code(
    default_language: Optional[str] = None,
    auto_detect: bool = True,
    line_numbering: bool = False,
    lang_prefix: str = "language-",
) -> Extension:
    """
    Parameters
    ----------
    default_language : language used when a block has no info string
    auto_detect      : guess the language when none is given or it is
                       unsupported; otherwise fall back to plain text
    line_numbering   : prefix every line with its number
    lang_prefix      : class prefix of the ``<code>`` element
    """
    hide_line_numbers = not line_numbering
    pre_class = _html.escape(get_settings().highlight_css_class)

    async def _highlight_block(token: dict) -> None:
        info = ((token.get("attrs") or {}).get("info") or "").strip()
        lang = info.split(None, 1)[0] if info else ""
        source = token["raw"]

        language = lang or default_language or ""
        highlighted: Optional[str] = None
        if language:
            highlighted = await highlight(source, language, hide_line_numbers)
        if highlighted is None:
            if auto_detect:
                highlighted = await highlight_autodetect(source, hide_line_numbers)
            else:
                highlighted = await highlight(source, "plain", hide_line_numbers)

        token["type"]  = HIGHLIGHTED_CODE
        token["raw"]   = highlighted
        token["attrs"] = {"lang": lang}

    def walk_tokens(token: dict):
        if token["type"] == "block_code":
            return _highlight_block(token)
        return None

    def render_highlighted(renderer, text: str, lang: str = "") -> str:
        cls = f' class="{lang_prefix}{_html.escape(lang)}"' if lang else ""
        return f'<pre class="{pre_class}"><code{cls}>{text}</code></pre>\n'

    return Extension(
        markup_rules=(
            MarkupRule(
                name="code-highlight",
                is_async=True,
                walk_tokens=walk_tokens,
                renderers={HIGHLIGHTED_CODE: render_highlighted},
            ),
        ),
    )


# -----------------------------------------------------------------------------
