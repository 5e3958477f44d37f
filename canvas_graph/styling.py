"""
Colour normalisation for the default renderer.

Node and link colours are supplied by callers in whatever notation their
host uses: matplotlib names, hex strings, RGB(A) tuples, or CSS-style
``rgb(...)`` / ``rgba(...)`` strings. Everything is normalised to an RGBA
tuple with all channels in [0, 1] before it reaches a drawing surface.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Tuple

from matplotlib import colors as mcolors

RGBA = Tuple[float, float, float, float]

_CSS_RGB = re.compile(
    r"^\s*rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)\s*$",
    re.IGNORECASE,
)


def _clip01(v: float) -> float:
    return float(min(1.0, max(0.0, v)))


def to_rgba(c: Any, default: Optional[Any] = None) -> RGBA:
    """
    Normalise a colour specification to RGBA.

    Falls back to ``default`` (itself normalised) when ``c`` is empty, and
    raises ValueError for strings matplotlib cannot parse either.
    """
    if c is None or (isinstance(c, str) and not c.strip()):
        if default is None:
            return 0.0, 0.0, 0.0, 1.0
        return to_rgba(default)

    if isinstance(c, (tuple, list)):
        if len(c) >= 4:
            return _clip01(c[0]), _clip01(c[1]), _clip01(c[2]), _clip01(c[3])
        if len(c) == 3:
            return _clip01(c[0]), _clip01(c[1]), _clip01(c[2]), 1.0

    if isinstance(c, str):
        m = _CSS_RGB.match(c)
        if m:
            r, g, b = (float(m.group(i)) / 255.0 for i in (1, 2, 3))
            a = float(m.group(4)) if m.group(4) is not None else 1.0
            return _clip01(r), _clip01(g), _clip01(b), _clip01(a)

    r, g, b, a = mcolors.to_rgba(c)
    return float(r), float(g), float(b), float(a)
