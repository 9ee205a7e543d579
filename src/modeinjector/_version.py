"""Version lookup for the mode injector."""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "mode-injector"
FALLBACK_VERSION = "0.0.0"

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"
_VERSION_RE = re.compile(r'^version\s*=\s*["\']([^"\']+)["\']', re.MULTILINE)


def get_version(pyproject: Path | None = None) -> str:
    """
    Version of the running checkout or installed distribution.

    A source checkout reports the version in its pyproject.toml; an
    installed copy reports its distribution metadata.
    """
    pyproject = pyproject or _PYPROJECT
    if pyproject.exists():
        match = _VERSION_RE.search(pyproject.read_text(encoding="utf-8"))
        if match:
            return match.group(1)
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return FALLBACK_VERSION
