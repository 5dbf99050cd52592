#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Write the Pygments stylesheet matching the highlighted HTML Quire emits.

    python scripts/gen_pygments_css.py [OUTPUT]

Style and CSS class come from ``QUIRE_PYGMENTS_STYLE`` and
``QUIRE_HIGHLIGHT_CSS_CLASS``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys
from pathlib import Path

from pygments.formatters import HtmlFormatter

from quire.core.config import get_settings


# -----------------------------------------------------------------------------

def main(argv: list[str]) -> int:
    settings = get_settings()
    output = Path(argv[1]) if len(argv) > 1 else Path("quire-highlight.css")

    css = HtmlFormatter(style=settings.pygments_style).get_style_defs(f".{settings.highlight_css_class}")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(css, encoding="utf-8")
    print(f"Written {output} ({settings.pygments_style})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))


# -----------------------------------------------------------------------------
