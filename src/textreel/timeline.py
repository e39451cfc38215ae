"""Timeline scheduling — map global frame numbers to scenes.

Scenes play back to back in list order. Scene i owns the half-open
frame range [start_i, start_i + duration_i), so the boundary frame
start_i + duration_i always belongs to the NEXT scene and a cut is
never rendered twice.

Start offsets are a prefix sum computed fresh from the scene list on
every call. Nothing is cached between calls, so a reordered or edited
list can never be paired with stale offsets.

Durations are expected to be >= 1 (enforced by the manifest loader and
the edit session). A non-positive duration is clamped to 0 here, which
means the scene owns no frames rather than corrupting the partition.
"""

import numpy as np


def _durations(scenes: list[dict]) -> np.ndarray:
    return np.array(
        [max(0, int(scene["duration"])) for scene in scenes], dtype=np.int64,
    )


def scene_starts(scenes: list[dict]) -> np.ndarray:
    """Start frame of every scene.

    Returns an int64 array of length len(scenes) + 1. The final entry is
    the total timeline length, so scene i spans starts[i]:starts[i + 1].
    """
    starts = np.zeros(len(scenes) + 1, dtype=np.int64)
    if scenes:
        np.cumsum(_durations(scenes), out=starts[1:])
    return starts


def total_frames(scenes: list[dict]) -> int:
    """Total timeline length in frames (sum of all durations).

    The host requests frames 0 .. total - 1 to cover the whole timeline.
    """
    return int(scene_starts(scenes)[-1])


def locate(scenes: list[dict], frame: int) -> tuple[dict, int] | None:
    """Find the active scene for a global frame.

    Args:
        scenes: Ordered scene list (may be empty).
        frame: Global frame index.

    Returns:
        (scene, local_offset) where local_offset = frame - scene start,
        or None when no scene is active (empty list, negative frame, or
        frame at/after the end of the timeline).
    """
    starts = scene_starts(scenes)
    frame = int(frame)
    if frame < 0 or frame >= starts[-1]:
        return None

    # side="right" skips zero-length scenes sharing the same start and
    # gives the half-open [start, end) ownership at boundaries.
    index = int(np.searchsorted(starts, frame, side="right")) - 1
    return scenes[index], frame - int(starts[index])


def scene_ranges(scenes: list[dict]) -> list[tuple[dict, int, int]]:
    """List (scene, start, end) for every scene, end exclusive."""
    starts = scene_starts(scenes)
    return [
        (scene, int(starts[i]), int(starts[i + 1]))
        for i, scene in enumerate(scenes)
    ]
