#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Syntax highlighting
===================
Highlights code with Pygments and keeps the process-wide registry of custom
highlight languages.

Custom languages are lists of ``HighlightRule`` fragments turned into a
Pygments ``RegexLexer``.  Built-in Pygments lexers are resolved lazily, off
the event loop, and cached.

Highlighting fails soft: an unknown language or a highlighter error gives
``None`` and callers fall back to autodetection or plain text.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import importlib
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from functools import lru_cache
from typing import NamedTuple, Optional

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer, RegexLexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.token import Text, Token, Whitespace, string_to_tokentype
from pygments.util import ClassNotFound

from quire.schemas import HighlightRule

log = logging.getLogger(__name__)


# Language id reserved for the composite markdown language of every instance.
COMPOSITE_LANGUAGE = "quire-md"

PLAIN_LANGUAGES = frozenset({"plain", "text", "plaintext", "txt"})

_DEFAULT_RULES_MODULE = "quire.services.markdown_rules"


# -----------------------------------------------------------------------------
# Fragment type → Pygments token
# -----------------------------------------------------------------------------

TOKEN_TYPES = {
    "kwd":     Token.Keyword,
    "type":    Token.Keyword.Type,
    "bool":    Token.Keyword.Constant,
    "class":   Token.Name.Class,
    "func":    Token.Name.Function,
    "var":     Token.Name.Variable,
    "oper":    Token.Operator,
    "str":     Token.String,
    "esc":     Token.String.Escape,
    "num":     Token.Number,
    "cmnt":    Token.Comment,
    "section": Token.Generic.Heading,
    "insert":  Token.Generic.Inserted,
    "deleted": Token.Generic.Deleted,
    "err":     Token.Error,
}


def token_type(name: str):
    """Map a short fragment type (``kwd``) or dotted token name (``Name.Tag``)."""
    return TOKEN_TYPES.get(name) or string_to_tokentype(name)


def _rule_pattern(rule: HighlightRule) -> str:
    if isinstance(rule.match, re.Pattern):
        inline = ""
        if rule.match.flags & re.IGNORECASE:
            inline += "i"
        if rule.match.flags & re.DOTALL:
            inline += "s"
        return f"(?{inline}){rule.pattern}" if inline else rule.pattern
    return rule.match


def build_lexer(language_id: str, rules: Iterable[HighlightRule]) -> Lexer:
    """Build a lexer for *rules*; raises ``ValueError`` on a bad pattern."""
    root = [(_rule_pattern(rule), token_type(rule.type)) for rule in rules]
    root += [
        (r"\s+", Whitespace),
        (r"\w+", Text),
        (r".", Text),
    ]
    cls = type(
        f"CustomLexer_{re.sub(r'[^0-9A-Za-z]', '_', language_id)}",
        (RegexLexer,),
        {
            "name": language_id,
            "aliases": [language_id],
            "flags": re.MULTILINE,
            "tokens": {"root": root},
        },
    )
    return cls(stripnl=False)


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

# Lookups by document info string, hits and misses alike.
BUILTIN_LEXER_CACHE_SIZE = 256


@lru_cache(maxsize=BUILTIN_LEXER_CACHE_SIZE)
def builtin_lexer(name: str) -> Optional[Lexer]:
    """Pygments lexer for *name*, or ``None`` when Pygments has none."""
    try:
        return get_lexer_by_name(name, stripall=True)
    except ClassNotFound:
        log.debug("No highlight language named %r", name)
        return None


class HighlightRegistry:
    """Process-wide language id → ordered fragment list, plus lexer caches."""

    def __init__(self) -> None:
        self._rules: dict[str, tuple[HighlightRule, ...]] = {}
        self._custom_lexers: dict[str, Lexer] = {}

    def has(self, language_id: str) -> bool:
        return language_id in self._rules

    def rules(self, language_id: str) -> tuple[HighlightRule, ...]:
        return self._rules.get(language_id, ())

    def register(self, language_id: str, rules: Iterable[HighlightRule]) -> None:
        self._rules[language_id] = tuple(rules)
        self._custom_lexers.pop(language_id, None)

    def merge(
        self,
        language_id: str,
        rules: Iterable[HighlightRule],
        *,
        base: Iterable[HighlightRule] = (),
    ) -> tuple[HighlightRule, ...]:
        """Prepend *rules* to the fragments under *language_id* in one step.

        *base* seeds the language the first time it is merged.
        """
        current = self._rules.get(language_id)
        if current is None:
            current = tuple(base)
        merged = tuple(rules) + current
        self.register(language_id, merged)
        return merged

    def lexer(self, language_id: str) -> Lexer:
        lexer = self._custom_lexers.get(language_id)
        if lexer is None:
            lexer = build_lexer(language_id, self._rules[language_id])
            self._custom_lexers[language_id] = lexer
        return lexer

    async def load(self, language: str) -> Optional[Lexer]:
        """Resolve *language* to a lexer, or ``None`` when unsupported."""
        if language in self._rules:
            return self.lexer(language)

        name = language.strip().lower()
        if not name:
            return None
        if name in PLAIN_LANGUAGES:
            return TextLexer()
        return await asyncio.to_thread(builtin_lexer, name)

    def reset(self) -> None:
        """Forget every custom language and cached lexer."""
        self._rules.clear()
        self._custom_lexers.clear()
        builtin_lexer.cache_clear()


registry = HighlightRegistry()


# -----------------------------------------------------------------------------
# Formatting
# -----------------------------------------------------------------------------

_formatter = HtmlFormatter(nowrap=True)


def _format(code: str, lexer: Lexer, hide_line_numbers: bool) -> str:
    html = pygments_highlight(code, lexer, _formatter)
    if hide_line_numbers:
        return html
    lines = html.rstrip("\n").split("\n")
    return "\n".join(
        f'<span class="linenos">{n}</span>{line}' for n, line in enumerate(lines, 1)
    ) + "\n"


# -----------------------------------------------------------------------------
# Language detection
# -----------------------------------------------------------------------------

# (language, ((feature, weight), ...)); a language needs a score above
# _DETECT_THRESHOLD, ties go to the earlier entry.
_DETECTORS: tuple[tuple[str, tuple[tuple[re.Pattern, int], ...]], ...] = (
    ("bash",   ((re.compile(r"#!(/usr)?/bin/bash"), 500),
                (re.compile(r"\b(if|elif|then|fi|echo)\b|\$"), 10))),
    ("html",   ((re.compile(r"</?[a-z-]+[^\n>]*>"), 10),
                (re.compile(r"^\s+<!DOCTYPE\s+html", re.M), 500))),
    ("http",   ((re.compile(r"^(GET|HEAD|POST|PUT|DELETE|PATCH|HTTP)\b", re.M), 500),)),
    ("js",     ((re.compile(r"\b(console|await|async|function|export|import|this|class|for|let|const|map|join|require)\b"), 10),)),
    ("ts",     ((re.compile(r"\b(console|await|async|function|export|import|this|class|for|let|const|map|join|require|implements|interface|namespace)\b"), 10),)),
    ("py",     ((re.compile(r"\b(def|print|class|and|or|lambda)\b"), 10),)),
    ("sql",    ((re.compile(r"\b(SELECT|INSERT|FROM)\b"), 50),)),
    ("perl",   ((re.compile(r"#!(/usr)?/bin/perl"), 500),
                (re.compile(r"\b(use|print)\b|\$"), 10))),
    ("lua",    ((re.compile(r"#!(/usr)?/bin/lua"), 500),)),
    ("make",   ((re.compile(r"\b(ifneq|endif|if|elif|then|fi|echo|\.PHONY)\b|^[a-z]+ ?:$|\$", re.M), 10),)),
    ("css",    ((re.compile(r"^(@import|@page|@media|(\.|#)[a-z]+)", re.M), 20),)),
    ("diff",   ((re.compile(r"^[+><-]", re.M), 10),
                (re.compile(r"^@@ ?[-+,0-9 ]+ ?@@", re.M), 25))),
    ("md",     ((re.compile(r"^(>|\t\*|\t\d+\.)", re.M), 10),
                (re.compile(r"\[.*\]\(.*\)"), 10))),
    ("docker", ((re.compile(r"^(FROM|ENTRYPOINT|RUN)", re.M), 500),)),
    ("xml",    ((re.compile(r"</?[a-z-]+[^\n>]*>"), 10),
                (re.compile(r"^<\?xml", re.M), 500))),
    ("c",      ((re.compile(r"#include\b|\bprintf\s+\("), 100),)),
    ("rust",   ((re.compile(r"^\s+(use|fn|mut|match)\b", re.M), 100),)),
    ("go",     ((re.compile(r"\b(func|fmt|package)\b"), 100),)),
    ("java",   ((re.compile(r"^import\s+java", re.M), 500),)),
    ("json",   ((re.compile(r"\b(true|false|null)\b|\{\}|\"[^\"]+\":"), 10),
                (re.compile(r"^\s*[{\[][\s{\[]*\"[^\"\n]+\"\s*:", re.M), 25))),
    ("yaml",   ((re.compile(r"^(\s+)?[a-z][a-z0-9]*:", re.M | re.I), 10),)),
)

_DETECT_THRESHOLD = 20


def detect_language(code: str) -> str:
    """Best-guess language id for *code*; ``"plain"`` when nothing scores."""
    best, best_score = "plain", _DETECT_THRESHOLD
    for language, features in _DETECTORS:
        score = sum(len(feature.findall(code)) * weight for feature, weight in features)
        if score > best_score:
            best, best_score = language, score
    return best


# -----------------------------------------------------------------------------
# Public entry points
# -----------------------------------------------------------------------------

async def highlight(code: str, language: str, hide_line_numbers: bool = False) -> Optional[str]:
    """Highlight *code* as *language*.  ``None`` if that is not possible."""
    try:
        lexer = await registry.load(language)
        if lexer is None:
            return None
        return _format(code, lexer, hide_line_numbers)
    except Exception as exc:
        log.debug("Highlighting %r failed: %s", language, exc)
        return None


async def highlight_autodetect(code: str, hide_line_numbers: bool = False) -> str:
    """Highlight *code* in whatever language it looks like; never ``None``."""
    language = detect_language(code)
    highlighted = await highlight(code, language, hide_line_numbers)
    if highlighted is None:
        highlighted = await highlight(code, "plain", hide_line_numbers)
    return highlighted


def load_custom_language(language_id: str, rules: Iterable[HighlightRule]) -> None:
    """Register (or replace) a highlight language built from *rules*."""
    registry.register(language_id, rules)
    log.debug("Loaded highlight language %r (%d rules)", language_id, len(registry.rules(language_id)))


async def load_default_rules() -> tuple[HighlightRule, ...]:
    """Import the default composite grammar without blocking the loop."""
    module = await asyncio.to_thread(importlib.import_module, _DEFAULT_RULES_MODULE)
    return module.DEFAULT_RULES


async def load_composite_language(rules: Iterable[HighlightRule]) -> tuple[HighlightRule, ...]:
    """Prepend *rules* to the composite language, seeding it with the defaults.

    Instances loading concurrently each prepend their own fragments; the
    order between instances follows task scheduling and is unspecified.
    """
    defaults = await load_default_rules()
    merged = registry.merge(COMPOSITE_LANGUAGE, rules, base=defaults)
    load_custom_language(COMPOSITE_LANGUAGE, merged)
    return merged


# -----------------------------------------------------------------------------

class HighlightFunctions(NamedTuple):
    highlight: Callable[[str, str, bool], Awaitable[Optional[str]]]
    highlight_autodetect: Callable[[str, bool], Awaitable[str]]
    load_custom_language: Callable[[str, Iterable[HighlightRule]], None]


HIGHLIGHT_FUNCTIONS = HighlightFunctions(
    highlight=highlight,
    highlight_autodetect=highlight_autodetect,
    load_custom_language=load_custom_language,
)


# -----------------------------------------------------------------------------
