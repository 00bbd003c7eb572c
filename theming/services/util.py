"""Color and markup helpers shared by the theming store and routes."""
from __future__ import annotations

import html
import re

COLOR_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)

_NON_HEX = re.compile(r"[^0-9A-Fa-f]")
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG = re.compile(r"<[^>]*>?")

# Colors brighter than this get dark text on top of them
INVERT_LUMINANCE_THRESHOLD = 0.5


def is_valid_color(value: str) -> bool:
    """True for ``#RGB`` / ``#RRGGBB`` hex colors, any case."""
    return COLOR_PATTERN.fullmatch(value) is not None


def calculate_luminance(color: str) -> float:
    """Perceived brightness of a hex color in [0, 1]. Unparseable colors count as black."""
    hex_value = _NON_HEX.sub("", color)
    if len(hex_value) == 3:
        hex_value = "".join(c * 2 for c in hex_value)
    if len(hex_value) != 6:
        return 0.0
    r = int(hex_value[0:2], 16)
    g = int(hex_value[2:4], 16)
    b = int(hex_value[4:6], 16)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def invert_text_color(color: str) -> bool:
    """Whether text on ``color`` should be black instead of white."""
    return calculate_luminance(color) > INVERT_LUMINANCE_THRESHOLD


def strip_tags(value: str) -> str:
    return _TAG.sub("", _COMMENT.sub("", value))


def sanitize_html(value: str) -> str:
    # Single quotes become &#039;
    return html.escape(value, quote=True).replace("&#x27;", "&#039;")
