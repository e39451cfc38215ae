"""Project manifest loader — the editing boundary for scene lists.

Parses YAML manifests, resolves ${var} placeholders in scene text,
resolves palette color names, applies per-scene defaults, and validates
every scene before it can reach the compositor.

Manifest schema:
  video:
    resolution: [1280, 720]   # default
    fps: 30                   # default
    background: "#000000"     # fill for frames after the last scene
  colors:                     # optional palette: name -> hex
    ink: "#1a1a1a"
  paths:                      # optional ${var} values for scene text
    brand: "textreel"
  defaults:                   # optional per-scene defaults
    duration: 90
    transition: slide
  scenes:
    - id: intro               # optional, generated when missing
      text: "Hello ${brand}"
      duration: 60
      font_size: 64
      color: ink
      background_color: "#ffffff"
      transition: zoom
"""

import uuid
from pathlib import Path

import yaml

from .common import normalize_color, resolve_color, resolve_path_vars, rgb_to_hex
from .motion import VALID_TRANSITIONS


# ── Defaults ──────────────────────────────────────────────────────

SCENE_DEFAULTS = {
    "text": "",
    "duration": 60,
    "font_size": 64,
    "color": "#000000",
    "background_color": "#ffffff",
    "transition": "fade",
}

SCENE_FIELDS = {"id", *SCENE_DEFAULTS}

DEFAULT_VIDEO = {
    "resolution": (1280, 720),
    "fps": 30,
    "background": "#000000",
}


def new_scene_id() -> str:
    """Fresh scene identifier, independent of wall-clock time."""
    return uuid.uuid4().hex


# ── Scene validation ──────────────────────────────────────────────


def validate_scene(scene: dict, index: int) -> None:
    """Validate a normalized scene dict.

    Raises:
        ValueError: Missing field, unknown field, or invalid value.
    """
    prefix = f"Scene {index}"

    unknown = set(scene) - SCENE_FIELDS
    if unknown:
        raise ValueError(f"{prefix}: unknown field(s) {sorted(unknown)}")
    for field in sorted(SCENE_FIELDS):
        if field not in scene:
            raise ValueError(f"{prefix}: missing required field '{field}'")

    sid = scene["id"]
    if not isinstance(sid, str) or not sid.strip():
        raise ValueError(f"{prefix}: 'id' must be a non-empty string")

    if not isinstance(scene["text"], str):
        raise ValueError(f"{prefix}: 'text' must be a string")

    duration = scene["duration"]
    # bool is an int subclass; True is not a duration.
    if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
        raise ValueError(
            f"{prefix}: duration must be an integer >= 1 frame, got {duration!r}"
        )

    font_size = scene["font_size"]
    if isinstance(font_size, bool) or not isinstance(font_size, (int, float)) or font_size <= 0:
        raise ValueError(f"{prefix}: font_size must be > 0, got {font_size!r}")

    for field in ("color", "background_color"):
        try:
            normalize_color(scene[field])
        except ValueError as e:
            raise ValueError(f"{prefix}: {field}: {e}") from e

    transition = scene["transition"]
    if transition not in VALID_TRANSITIONS:
        raise ValueError(
            f"{prefix}: invalid transition '{transition}'. "
            f"Valid: {sorted(VALID_TRANSITIONS)}"
        )


def normalize_scene(
    raw: dict,
    index: int,
    palette: dict[str, str] | None = None,
    defaults: dict | None = None,
    paths: dict[str, str] | None = None,
) -> dict:
    """Build a validated scene dict from raw manifest/editor fields.

    Processing:
      1. Start from SCENE_DEFAULTS, overlay `defaults`, then `raw`.
      2. Generate an id if none is given.
      3. Resolve ${var} placeholders in text.
      4. Resolve palette names / normalize hex for both colors.
      5. Validate.

    Returns:
        A new dict; `raw` is not modified.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Scene {index}: expected a mapping, got {type(raw).__name__}")

    palette = palette or {}
    scene = {**SCENE_DEFAULTS, **(defaults or {}), **raw}

    if scene.get("id") is None:
        scene["id"] = new_scene_id()
    elif isinstance(scene["id"], (int, float)) and not isinstance(scene["id"], bool):
        scene["id"] = str(scene["id"])

    if paths and isinstance(scene["text"], str):
        scene["text"] = resolve_path_vars(scene["text"], paths)

    for field in ("color", "background_color"):
        try:
            scene[field] = resolve_color(scene[field], palette)
        except ValueError as e:
            raise ValueError(f"Scene {index}: {field}: {e}") from e

    validate_scene(scene, index)
    return scene


def check_unique_ids(scenes: list[dict]) -> None:
    """Raise ValueError if two scenes share an id."""
    seen = {}
    for i, scene in enumerate(scenes):
        sid = scene["id"]
        if sid in seen:
            raise ValueError(
                f"Scene {i}: duplicate id '{sid}' (also used by scene {seen[sid]})"
            )
        seen[sid] = i


# ── Manifest loading ──────────────────────────────────────────────


def _parse_video(raw_video: dict | None) -> dict:
    video = {**DEFAULT_VIDEO, **(raw_video or {})}

    resolution = video["resolution"]
    if (
        not isinstance(resolution, (list, tuple))
        or len(resolution) != 2
        or not all(isinstance(v, int) and v > 0 for v in resolution)
    ):
        raise ValueError(
            f"video.resolution must be [width, height] positive integers, got {resolution!r}"
        )
    video["resolution"] = tuple(resolution)

    fps = video["fps"]
    if isinstance(fps, bool) or not isinstance(fps, (int, float)) or fps <= 0:
        raise ValueError(f"video.fps must be > 0, got {fps!r}")

    try:
        video["background"] = normalize_color(video["background"])
    except ValueError as e:
        raise ValueError(f"video.background: {e}") from e
    return video


def _parse_palette(raw_colors: dict | None) -> dict[str, str]:
    colors = {}
    for key, value in (raw_colors or {}).items():
        try:
            if isinstance(value, (list, tuple)):
                colors[key] = rgb_to_hex(value)
            else:
                colors[key] = normalize_color(value)
        except ValueError as e:
            raise ValueError(f"colors.{key}: {e}") from e
    return colors


def load_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a project manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Apply video defaults, validate resolution/fps/background.
      3. Parse the color palette to normalized hex strings.
      4. Normalize every scene (defaults, ids, ${var}, colors).
      5. Check scene ids are unique.

    Args:
        manifest_path: Path to the YAML manifest file.

    Returns:
        Project dict with video, colors, and scenes.

    Raises:
        ValueError: Invalid or missing fields, or unparsable YAML.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Manifest: invalid YAML in {manifest_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Manifest: top level must be a mapping")

    video = _parse_video(raw.get("video"))
    colors = _parse_palette(raw.get("colors"))
    paths = raw.get("paths", {}) or {}

    defaults = raw.get("defaults", {}) or {}
    unknown = set(defaults) - set(SCENE_DEFAULTS)
    if unknown:
        raise ValueError(f"Manifest defaults: unknown field(s) {sorted(unknown)}")

    raw_scenes = raw.get("scenes", []) or []
    if not isinstance(raw_scenes, list):
        raise ValueError("Manifest: 'scenes' must be a list")

    scenes = [
        normalize_scene(s, i, palette=colors, defaults=defaults, paths=paths)
        for i, s in enumerate(raw_scenes)
    ]
    check_unique_ids(scenes)

    return {"video": video, "colors": colors, "scenes": scenes}


def make_project(
    scenes: list[dict],
    resolution: tuple[int, int] = DEFAULT_VIDEO["resolution"],
    fps: int = DEFAULT_VIDEO["fps"],
    background: str = DEFAULT_VIDEO["background"],
) -> dict:
    """Wrap an already-validated scene list in a project dict."""
    return {
        "video": {
            "resolution": tuple(resolution),
            "fps": fps,
            "background": normalize_color(background),
        },
        "colors": {},
        "scenes": list(scenes),
    }
