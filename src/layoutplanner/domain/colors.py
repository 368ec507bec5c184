"""Color value normalization.

Pure functions mapping the color notations found in design markup to a
canonical lowercase ``#rrggbb`` form. Supported grammars:

- ``#rgb`` and ``#rgba`` (short hex, alpha dropped)
- ``#rrggbb`` and ``#rrggbbaa`` (long hex, alpha dropped)
- ``rgb(r, g, b)`` and ``rgba(r, g, b, a)`` with integer channels 0-255
- the named colors ``black`` and ``white``

Anything else (``none``, ``url(#gradient)``, other named colors) has no
canonical form.
"""

from __future__ import annotations

import re

_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_RGB_PATTERN = re.compile(
    r"^rgba?\(\s*([0-9.]+)\s*,\s*([0-9.]+)\s*,\s*([0-9.]+)\s*(?:,\s*([0-9.]+%?)\s*)?\)$"
)

_NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
}


def _clean(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def _parse_rgb(text: str) -> tuple[int, int, int, float] | None:
    match = _RGB_PATTERN.match(text)
    if match is None:
        return None
    try:
        channels = [int(float(match.group(i))) for i in (1, 2, 3)]
    except ValueError:
        return None
    if any(c < 0 or c > 255 for c in channels):
        return None
    alpha_raw = match.group(4)
    alpha = 1.0
    if alpha_raw is not None:
        try:
            if alpha_raw.endswith("%"):
                alpha = float(alpha_raw[:-1]) / 100
            else:
                alpha = float(alpha_raw)
        except ValueError:
            return None
    return channels[0], channels[1], channels[2], alpha


def to_canonical_hex(value: object) -> str | None:
    """Map a color value to ``#rrggbb``.

    Args:
        value: Color string in one of the supported notations.

    Returns:
        Canonical lowercase hex color, or None when the value is not a
        supported color.

    Examples:
        >>> to_canonical_hex("#ABC")
        '#aabbcc'
        >>> to_canonical_hex("rgba(0, 129, 129, 0.5)")
        '#008181'
        >>> to_canonical_hex("url(#g1)") is None
        True
    """
    text = _clean(value)
    if not text:
        return None

    if text in _NAMED_COLORS:
        return _NAMED_COLORS[text]

    compact = re.sub(r"\s+", "", text)
    hex_match = _HEX_PATTERN.match(compact)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits[:3])
        return f"#{digits[:6]}"

    rgb = _parse_rgb(text)
    if rgb is not None:
        r, g, b, _ = rgb
        return f"#{r:02x}{g:02x}{b:02x}"

    return None


def colors_match(first: object, second: object) -> bool:
    """Compare two color values after normalization.

    Values without a canonical form are compared as trimmed lowercase
    strings, so ``"red"`` matches ``"RED"``. Empty values never match.
    """
    left = _clean(first)
    right = _clean(second)
    if not left or not right:
        return False
    return (to_canonical_hex(left) or left) == (to_canonical_hex(right) or right)


def is_paint_server(value: object) -> bool:
    """True for ``url(...)`` paint references (patterns, gradients)."""
    return _clean(value).startswith("url(")


def is_black_stroke(value: object) -> bool:
    """True if a stroke value is recognizably pure, visible black.

    Fully transparent black (``rgba(0,0,0,0)``, ``#0000``, ``#00000000``)
    is not treated as black.
    """
    text = _clean(value)
    if not text:
        return False

    rgb = _parse_rgb(text)
    if rgb is not None:
        r, g, b, alpha = rgb
        return (r, g, b) == (0, 0, 0) and alpha != 0

    compact = re.sub(r"\s+", "", text)
    if compact in ("#0000", "#00000000"):
        return False
    return to_canonical_hex(compact) == "#000000"
