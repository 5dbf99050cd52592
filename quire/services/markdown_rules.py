"""Default fragments of the composite markdown highlight language.

Imported lazily by ``load_default_rules``; instance fragments are prepended
in front of these.
"""
from __future__ import annotations

from quire.schemas import HighlightRule


DEFAULT_RULES: tuple[HighlightRule, ...] = (
    HighlightRule(match=r"^(`{3,}|~{3,})[^\n]*\n[\s\S]*?^\1[ \t]*$", type="str"),
    HighlightRule(match=r"^#{1,6}[ \t].*$",                          type="section"),
    HighlightRule(match=r"^[ \t]*>.*$",                              type="cmnt"),
    HighlightRule(match=r"^[ \t]*([-*+]|\d+[.)])(?=[ \t])",          type="oper"),
    HighlightRule(match=r"^[ \t]*(\*{3,}|-{3,}|_{3,})[ \t]*$",       type="oper"),
    HighlightRule(match=r"`[^`\n]+`",                                type="str"),
    HighlightRule(match=r"!?\[[^\]\n]*\]\([^)\n]*\)",                type="func"),
    HighlightRule(match=r"\*\*[^*\n]+\*\*|__[^_\n]+__",              type="kwd"),
    HighlightRule(match=r"\*[^*\n]+\*|_[^_\n]+_",                    type="var"),
    HighlightRule(match=r"~~[^~\n]+~~",                              type="deleted"),
    HighlightRule(match=r"<[a-zA-Z/!][^>\n]*>",                      type="class"),
)
