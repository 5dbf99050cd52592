#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Built-in markup rules applied after every extension rule.

  - mangle      : autolinked e-mail addresses become character references
  - heading ids : GitHub-style ``id`` slugs on every heading
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from html import unescape

from mistune.core import BlockState
from mistune.util import striptags

from quire.schemas import MarkupRule


# -----------------------------------------------------------------------------
# E-mail obfuscation
# -----------------------------------------------------------------------------

_MAILTO_RE = re.compile(r'<a href="mailto:([^"]+)">([^<]*)</a>')


def _entities(text: str) -> str:
    # Alternate decimal / hex so the output is stable across render modes.
    return "".join(
        f"&#x{ord(c):x};" if i % 2 else f"&#{ord(c)};"
        for i, c in enumerate(text)
    )


def mangle_emails(html: str) -> str:
    def _replace(m: re.Match) -> str:
        address = m.group(1)
        label   = m.group(2)
        if label == address:
            label = _entities(label)
        return f'<a href="{_entities("mailto:")}{_entities(address)}">{label}</a>'
    return _MAILTO_RE.sub(_replace, html)


def mangle_rule() -> MarkupRule:
    return MarkupRule(name="mangle", postprocess=mangle_emails)


# -----------------------------------------------------------------------------
# Heading ids
# -----------------------------------------------------------------------------

_STRIP_TAGS_RE = re.compile(r"<[!/a-zA-Z][^>]*>")
_SLUG_DROP_RE  = re.compile(r"[^\w\- ]")


def slugify(text: str) -> str:
    """GitHub-style slug: lower-case, punctuation dropped, spaces to dashes."""
    text = _STRIP_TAGS_RE.sub("", text).strip().lower()
    return _SLUG_DROP_RE.sub("", text).replace(" ", "-")


class Slugger:
    """Hands out unique slugs for one document."""

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        original = slugify(text)
        result = original
        while result in self._occurrences:
            self._occurrences[original] += 1
            result = f"{original}-{self._occurrences[original]}"
        self._occurrences[result] = 0
        return result


def _iter_headings(tokens: list[dict]):
    for tok in tokens:
        if tok["type"] == "heading":
            yield tok
        elif "children" in tok:
            yield from _iter_headings(tok["children"])


def _heading_text(md, tok: dict, env) -> str:
    """Plain text of a heading: inline-rendered, tags dropped, entities decoded."""
    tokens = md.inline(tok.get("text", "").strip(), env)
    html = md.renderer(tokens, BlockState())
    return unescape(striptags(html)).strip()


def heading_id_rule(prefix: str = "") -> MarkupRule:
    def plugin(md) -> None:
        def add_heading_ids(md, state) -> None:
            slugger = Slugger()
            headings = []
            for tok in _iter_headings(state.tokens):
                text = _heading_text(md, tok, state.env)
                anchor = prefix + slugger.slug(text)
                attrs = tok.setdefault("attrs", {})
                attrs["id"] = anchor
                headings.append({"level": attrs.get("level"), "text": text, "id": anchor})
            state.env["headings"] = headings

        md.before_render_hooks.append(add_heading_ids)

    return MarkupRule(name="gfm-heading-id", plugins=(plugin,))


# -----------------------------------------------------------------------------
