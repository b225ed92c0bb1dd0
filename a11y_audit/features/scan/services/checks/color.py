"""
WCAG 2.x colour maths used by the contrast check.
"""
import re
from typing import Optional, Tuple

RGBA = Tuple[float, float, float, float]

NORMAL_TEXT_RATIO = 4.5
LARGE_TEXT_RATIO = 3.0
LARGE_TEXT_PX = 18.0
LARGE_BOLD_TEXT_PX = 14.0
BOLD_WEIGHT = 700

_RGB_PATTERN = re.compile(
    r"rgba?\(\s*([\d.]+)[\s,]+([\d.]+)[\s,]+([\d.]+)(?:\s*[,/]\s*([\d.]+)(%?))?\s*\)",
    re.IGNORECASE,
)
_HEX_PATTERN = re.compile(r"#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_NAMED_COLORS = {
    "transparent": (0.0, 0.0, 0.0, 0.0),
    "white": (255.0, 255.0, 255.0, 1.0),
    "black": (0.0, 0.0, 0.0, 1.0),
}


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """Parse a computed CSS colour (``rgb()``, ``rgba()``, hex or a few names)."""
    if not value:
        return None
    value = value.strip().lower()

    if value in _NAMED_COLORS:
        return _NAMED_COLORS[value]

    match = _RGB_PATTERN.match(value)
    if match:
        r, g, b, alpha, percent = match.groups()
        a = 1.0
        if alpha is not None:
            a = float(alpha) / 100 if percent else float(alpha)
        return float(r), float(g), float(b), a

    match = _HEX_PATTERN.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return (
            float(int(digits[0:2], 16)),
            float(int(digits[2:4], 16)),
            float(int(digits[4:6], 16)),
            1.0,
        )

    return None


def is_transparent(color: Optional[RGBA]) -> bool:
    return color is None or color[3] == 0


def is_opaque(color: Optional[RGBA]) -> bool:
    return color is not None and color[3] >= 1


def composite(top: RGBA, bottom: RGBA) -> RGBA:
    """Source-over blend of ``top`` onto ``bottom``."""
    top_alpha = min(max(top[3], 0.0), 1.0)
    bottom_alpha = min(max(bottom[3], 0.0), 1.0)
    alpha = top_alpha + bottom_alpha * (1 - top_alpha)
    if alpha == 0:
        return 0.0, 0.0, 0.0, 0.0

    def channel(i: int) -> float:
        return (top[i] * top_alpha + bottom[i] * bottom_alpha * (1 - top_alpha)) / alpha

    return channel(0), channel(1), channel(2), alpha


def _linearize(channel: float) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color) -> float:
    r, g, b = color[0], color[1], color[2]
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(foreground, background) -> float:
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def parse_font_size(value: Optional[str], default: float = 16.0) -> float:
    if not value:
        return default
    match = re.match(r"\s*([\d.]+)\s*px", value)
    if not match:
        return default
    return float(match.group(1))


def parse_font_weight(value: Optional[str]) -> int:
    if not value:
        return 400
    value = value.strip().lower()
    if value in ("bold", "bolder"):
        return BOLD_WEIGHT
    if value in ("normal", "lighter"):
        return 400
    try:
        return int(float(value))
    except ValueError:
        return 400


def required_ratio(font_size_px: float, font_weight: int) -> float:
    """4.5:1 for normal text, 3:1 for text ≥ 18px or ≥ 14px bold."""
    if font_size_px >= LARGE_TEXT_PX:
        return LARGE_TEXT_RATIO
    if font_weight >= BOLD_WEIGHT and font_size_px >= LARGE_BOLD_TEXT_PX:
        return LARGE_TEXT_RATIO
    return NORMAL_TEXT_RATIO


def to_hex(color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(int(round(c)) for c in color[:3]))
