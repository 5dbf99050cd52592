"""Single source of version truth, read from pyproject.toml at import time."""
from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

try:
    __version__: str = version("quire-md")
except PackageNotFoundError:
    # Not installed (running from a source checkout): parse pyproject.toml.
    _pyproject = Path(__file__).parent.parent / "pyproject.toml"
    _match = re.search(r'^version\s*=\s*"([^"]+)"', _pyproject.read_text(), re.MULTILINE) if _pyproject.exists() else None
    __version__ = _match.group(1) if _match else "0.0.0"
