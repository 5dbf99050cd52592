#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Math extension.

``$inline$`` and ``$$block$$`` math via mistune's math plugin (output is left
for a client-side typesetter), ``$…$`` spans marked in the composite
highlight language, and a ``latex`` highlight language registered on load.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from mistune.plugins.math import math as mistune_math

from quire.schemas import Extension, HighlightRule, MarkupRule


LATEX_LANGUAGE = "latex"

LATEX_RULES: tuple[HighlightRule, ...] = (
    HighlightRule(
        match=r"\\(frac|tfrac|dfrac|sqrt|over|above|cfrac|binom|dbinom|brace|choose|tbinom|brack)(?![a-zA-Z0-9])",
        type="str",
    ),
    HighlightRule(
        match=(
            r"\\(amalg|circledast|ldotp|rtimes|And|circledcirc|lor|setminus|ast|circleddash|lessdot|"
            r"smallsetminus|barwedge|Cup|lhd|sqcap|bigcirc|cup|ltimes|sqcup|bmod|curlyvee|mod|times|"
            r"boxdot|curlywedge|mp|unlhd|boxminus|div|odot|unrhd|boxplus|divideontimes|ominus|uplus|"
            r"boxtimes|dotplus|oplus|vee|bullet|doublebarwedge|otimes|veebar|Cap|doublecap|oslash|wedge|"
            r"cap|doublecup|pm|plusmn|wr|centerdot|land|rhd|circ|leftthreetimes|rightthreetimes|cdot|"
            r"gtrdot|pmod|cdotp|intercal|pod)(?![a-zA-Z0-9])"
        ),
        type="class",
    ),
    HighlightRule(
        match=(
            r"\\(mathscr|mathrm|mathbf|mathit|mathnormal|textbf|textit|textrm|bf|it|rm|bold|textup|"
            r"textnormal|boldsymbol|Bbb|text|bm|mathbb|mathsf|textmd|frak|textsf|mathtt|mathfrak|sf|"
            r"texttt|mathcal|tt|cal)(?![a-zA-Z0-9])"
        ),
        type="insert",
    ),
    HighlightRule(
        match=(
            r"\\(sum|prod|bigotimes|bigvee|int|coprod|bigoplus|bigwedge|iint|intop|bigodot|bigcap|iiint|"
            r"smallint|biguplus|bigcup|oint|oiint|oiiint|bigsqcup)(?![a-zA-Z0-9])"
        ),
        type="func",
    ),
    HighlightRule(match=r"\\[a-zA-Z0-9]+",       type="oper"),
    HighlightRule(match=r"(\(|\)|\{|\}|\[|\])",  type="esc"),
    HighlightRule(match=r"[a-zA-Z]+",            type="var"),
    HighlightRule(match=r"[0-9]+",               type="num"),
)

MATH_SPAN_RULES: tuple[HighlightRule, ...] = (
    HighlightRule(match=r"\$\$[\s\S]+?\$\$", type="func"),
    HighlightRule(match=r"\$[^$\n]+?\$",     type="func"),
)


# -----------------------------------------------------------------------------

def _register_latex(data) -> None:
    data.highlight.load_custom_language(LATEX_LANGUAGE, LATEX_RULES)


def math() -> Extension:
    return Extension(
        markup_rules=(MarkupRule(name="math", plugins=(mistune_math,)),),
        highlight_rules=MATH_SPAN_RULES,
        on_load=_register_latex,
    )


# -----------------------------------------------------------------------------
