"""Frame rasterization — turn a scene's visual state into pixels.

Each output frame is a full-resolution RGB numpy array:

  ┌─────────────────────────────────────┐
  │          background_color           │
  │                                     │
  │        ┌───────────────────┐        │
  │        │  centered, wrapped│        │  ← text patch, max 80% width,
  │        │  scene text       │        │    scaled, faded, shifted
  │        └───────────────────┘        │
  │                                     │
  └─────────────────────────────────────┘

The text patch is rendered once per (text, size, color, width) and cached.
Per frame only the cheap steps run: resize by scale, multiply alpha by
opacity, alpha-blend at the shifted center.
"""

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw

from .common import load_font, parse_hex_color, wrap_text
from .motion import scene_state
from .timeline import locate


TEXT_MAX_WIDTH_FRAC = 0.8
LINE_SPACING_FRAC = 0.2     # extra space between wrapped lines, × font size

DEFAULT_RESOLUTION = (1280, 720)


# ── Text patch ───────────────────────────────────────────────────


@lru_cache(maxsize=64)
def render_text_patch(
    text: str,
    font_size: int,
    color: str,
    max_width: int,
) -> np.ndarray:
    """Render scene text as an RGBA patch with a transparent background.

    Lines are word-wrapped to max_width and centered on each other.

    Returns:
        Read-only numpy array of shape (h, w, 4), dtype uint8. Empty
        (0, 0, 4) when the text has no visible characters.
    """
    if not text.strip():
        empty = np.zeros((0, 0, 4), dtype=np.uint8)
        empty.flags.writeable = False
        return empty

    font = load_font(font_size)
    draw_tmp = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    lines = wrap_text(draw_tmp, text, font, max_width)
    block = "\n".join(lines)
    spacing = max(1, round(font_size * LINE_SPACING_FRAC))

    bbox = draw_tmp.multiline_textbbox(
        (0, 0), block, font=font, spacing=spacing, align="center",
    )
    patch_w = max(1, bbox[2] - bbox[0])
    patch_h = max(1, bbox[3] - bbox[1])

    img = Image.new("RGBA", (patch_w, patch_h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    # Offset by the bbox origin so glyph bearings don't clip.
    draw.multiline_text(
        (-bbox[0], -bbox[1]), block,
        fill=(*parse_hex_color(color), 255),
        font=font, spacing=spacing, align="center",
    )
    # Shared through the cache; callers must copy before modifying.
    patch = np.array(img)
    patch.flags.writeable = False
    return patch


def _scale_patch(patch: np.ndarray, scale: float) -> np.ndarray:
    """Resize an RGBA patch by scale. Sub-pixel results become empty."""
    if scale == 1.0 or patch.size == 0:
        return patch
    h, w = patch.shape[:2]
    new_w = round(w * scale)
    new_h = round(h * scale)
    if new_w < 1 or new_h < 1:
        return np.zeros((0, 0, 4), dtype=np.uint8)
    img = Image.fromarray(patch).resize(
        (new_w, new_h), resample=Image.BICUBIC,
    )
    return np.array(img)


def _blend_patch(frame: np.ndarray, patch: np.ndarray, x: int, y: int, opacity: float) -> None:
    """Alpha-blend an RGBA patch onto frame in place, cropping at edges."""
    frame_h, frame_w = frame.shape[:2]
    patch_h, patch_w = patch.shape[:2]

    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(frame_w, x + patch_w), min(frame_h, y + patch_h)
    if x0 >= x1 or y0 >= y1:
        return

    crop = patch[y0 - y:y1 - y, x0 - x:x1 - x]
    alpha = crop[:, :, 3:4].astype(np.float32) / 255.0 * opacity
    rgb = crop[:, :, :3].astype(np.float32)
    dest = frame[y0:y1, x0:x1].astype(np.float32)
    blended = dest * (1 - alpha) + rgb * alpha
    frame[y0:y1, x0:x1] = np.round(blended).astype(np.uint8)


# ── Frame rendering ──────────────────────────────────────────────


def blank_frame(resolution: tuple[int, int], color: str) -> np.ndarray:
    """Solid frame of the given color, shape (h, w, 3)."""
    w, h = resolution
    return np.full((h, w, 3), parse_hex_color(color), dtype=np.uint8)


def render_scene_frame(
    scene: dict,
    state: dict,
    resolution: tuple[int, int] = DEFAULT_RESOLUTION,
) -> np.ndarray:
    """Rasterize one scene with a computed visual state.

    The text is centered on the frame, then transformed the way CSS
    `scale(s) translateY(ty)` would: scaled about its center and moved
    down by s * ty pixels.

    Args:
        scene: Scene dict (text, font_size, color, background_color).
        state: Visual state from motion.scene_state.
        resolution: Output (width, height).

    Returns:
        numpy array of shape (h, w, 3), dtype uint8.
    """
    w, h = resolution
    frame = blank_frame(resolution, scene["background_color"])

    opacity = state["opacity"]
    if opacity <= 0:
        return frame

    patch = render_text_patch(
        scene["text"],
        max(1, round(scene["font_size"])),
        scene["color"],
        int(w * TEXT_MAX_WIDTH_FRAC),
    )
    patch = _scale_patch(patch, state["scale"])
    if patch.size == 0:
        return frame

    patch_h, patch_w = patch.shape[:2]
    x = (w - patch_w) // 2
    y = (h - patch_h) // 2 + round(state["scale"] * state["translate_y"])
    _blend_patch(frame, patch, x, y, opacity)
    return frame


def compose_frame(project: dict, frame: int) -> np.ndarray:
    """Render global frame `frame` of a project.

    Frames with no active scene (after the end, or an empty project)
    are filled with the project's video background color.
    """
    video = project["video"]
    resolution = video["resolution"]

    located = locate(project["scenes"], frame)
    if located is None:
        return blank_frame(resolution, video["background"])

    scene, offset = located
    state = scene_state(scene, offset, video["fps"])
    return render_scene_frame(scene, state, resolution)
