"""
Pure-Python color normalization.

Parses the textual color encodings found in token documents into the
canonical RGBA quadruple the variable store expects. Three grammars are
recognised, tried in this order:

- ``#RRGGBB`` / ``#RRGGBBAA`` hex (case-insensitive)
- ``rgb(r, g, b)`` / ``rgba(r, g, b, a)`` with 0-255 integer channels
- ``oklch(L C H)`` perceptual lightness/chroma/hue

No external color libraries required.
"""

from __future__ import annotations

import logging
import math
import re

from .errors import ColorParseError
from .ir import RGBA

logger = logging.getLogger(__name__)

OPAQUE_BLACK = RGBA(r=0.0, g=0.0, b=0.0, a=1.0)

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})?$", re.IGNORECASE)
_RGB_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*(\d*\.?\d+)\s*)?\)$",
    re.IGNORECASE,
)
_OKLCH_RE = re.compile(
    r"^oklch\(\s*(-?\d*\.?\d+)\s+(-?\d*\.?\d+)\s+(-?\d*\.?\d+)\s*\)$",
    re.IGNORECASE,
)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def hex_to_rgba(value: str, *, strict: bool = False) -> RGBA:
    """Convert a hex string (leading '#' optional) to RGBA.

    Malformed input falls back to opaque black unless ``strict`` is set.

    Args:
        value: Hex string with 6 (RGB) or 8 (RGBA) digits.
        strict: Raise ColorParseError instead of falling back.

    Returns:
        Canonical RGBA color.
    """
    match = _HEX_RE.match(value.strip())
    if not match:
        if strict:
            raise ColorParseError(f"Malformed hex color '{value}': expected 6 or 8 hex digits")
        logger.warning("Malformed hex color %r, using opaque black", value)
        return OPAQUE_BLACK
    red, green, blue, alpha = match.groups()
    return RGBA(
        r=int(red, 16) / 255,
        g=int(green, 16) / 255,
        b=int(blue, 16) / 255,
        a=int(alpha, 16) / 255 if alpha else 1.0,
    )


def rgb_to_rgba(red: int, green: int, blue: int, alpha: float = 1.0) -> RGBA | None:
    """Scale 0-255 channels to the unit interval. Out-of-range input is not a color."""
    if not all(0 <= channel <= 255 for channel in (red, green, blue)):
        return None
    if not 0.0 <= alpha <= 1.0:
        return None
    return RGBA(r=red / 255, g=green / 255, b=blue / 255, a=alpha)


def oklch_to_rgba(L: float, C: float, H: float) -> RGBA:
    """Convert OKLCH to RGBA.

    Goes OKLCH -> OKLab -> LMS (cubed) -> linear sRGB, then clamps each
    channel. The result stays in linear light: no sRGB transfer curve is
    applied.

    Args:
        L: Lightness (0-1).
        C: Chroma (0-0.4).
        H: Hue in degrees (0-360).

    Returns:
        RGBA with alpha fixed at 1.0.
    """
    hue = H * math.pi / 180
    a = C * math.cos(hue)
    b = C * math.sin(hue)

    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    l = l_**3  # noqa: E741
    m = m_**3
    s = s_**3

    red = 4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s
    green = -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s
    blue = -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s

    return RGBA(r=_clamp(red), g=_clamp(green), b=_clamp(blue), a=1.0)


def parse_color(value: str, *, strict_hex: bool = False) -> RGBA | None:
    """Parse any supported color grammar.

    Args:
        value: Raw token string.
        strict_hex: Propagate ColorParseError for malformed '#' values.

    Returns:
        RGBA, or None when the string is not written in a color grammar.
    """
    text = value.strip()

    if text.startswith("#"):
        return hex_to_rgba(text, strict=strict_hex)

    match = _RGB_RE.match(text)
    if match:
        red, green, blue, alpha = match.groups()
        return rgb_to_rgba(
            int(red), int(green), int(blue), float(alpha) if alpha is not None else 1.0
        )

    match = _OKLCH_RE.match(text)
    if match:
        L, C, H = (float(group) for group in match.groups())
        if not all(math.isfinite(component) for component in (L, C, H)):
            return None
        try:
            return oklch_to_rgba(L, C, H)
        except (OverflowError, ValueError):
            logger.warning("OKLCH value %r is out of range", value)
            return None

    return None
