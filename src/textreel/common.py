"""textreel.common — shared utilities for the reel compositor.

Contains: color normalization and parsing, path variable resolution,
font loading, and word wrapping for scene text.
"""

import re
from pathlib import Path

from PIL import ImageDraw, ImageFont


# ── Font paths ─────────────────────────────────────────────────────
# Inter preferred for clean title cards, DejaVu Sans as fallback.

FONT_PATHS = [
    Path.home() / ".local/share/fonts/Inter.ttc",
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
]

_HEX_DIGITS = "0123456789abcdefABCDEF"


# ── Color utilities ────────────────────────────────────────────────

def is_hex_color(value: str) -> bool:
    """True for '#RRGGBB', 'RRGGBB', '#RGB' or 'RGB'."""
    digits = value[1:] if value.startswith("#") else value
    return len(digits) in (3, 6) and all(c in _HEX_DIGITS for c in digits)


def normalize_color(value: str) -> str:
    """Normalize a hex color string to lowercase '#rrggbb'.

    Short '#rgb' forms are expanded. Anything else raises ValueError.
    """
    if not isinstance(value, str) or not is_hex_color(value):
        raise ValueError(f"Invalid color: {value!r}. Expected '#RRGGBB'.")
    digits = value.lstrip("#").lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' (or the short forms) to (R, G, B)."""
    hex_str = normalize_color(hex_str).lstrip("#")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def rgb_to_hex(value) -> str:
    """Convert an [r, g, b] sequence of 0-255 channels to '#rrggbb'."""
    if len(value) != 3 or not all(
        isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255
        for c in value
    ):
        raise ValueError(
            f"Invalid color: {list(value)!r}. Expected [r, g, b] in 0-255."
        )
    return "#" + "".join(f"{c:02x}" for c in value)


def resolve_color(value, palette: dict[str, str]) -> str:
    """Resolve a color reference — palette key name, inline hex, or [r, g, b].

    Palette keys are tried first. Returns the normalized '#rrggbb' string.
    """
    if isinstance(value, (list, tuple)):
        return rgb_to_hex(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid color: {value!r}. Expected '#RRGGBB'.")
    if value in palette:
        return palette[value]
    if is_hex_color(value):
        return normalize_color(value)
    raise ValueError(
        f"Unknown color: '{value}'. Not in palette and not a hex value."
    )


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return str(paths[key])
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Font loading ───────────────────────────────────────────────────

def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load Inter (or fallback) at the given size.

    Falls back to Pillow's default font, which is scalable on
    Pillow >= 10.1 and a fixed bitmap font before that.
    """
    for font_path in FONT_PATHS:
        if font_path.exists():
            try:
                return ImageFont.truetype(str(font_path), size=size, index=0)
            except (OSError, IndexError):
                continue
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        return ImageFont.load_default()


# ── Text layout ────────────────────────────────────────────────────

def wrap_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont,
    max_width: int,
) -> list[str]:
    """Greedy word wrap so each line fits within max_width pixels.

    Explicit newlines are kept. A single word wider than max_width
    gets a line of its own rather than being split.
    """
    lines = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            bbox = draw.textbbox((0, 0), candidate, font=font)
            if bbox[2] - bbox[0] <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines
