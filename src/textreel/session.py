"""Headless editing session — single writer of the scene list.

Every mutation builds a brand-new tuple of scenes and swaps it in. A
snapshot handed to the compositor (via `scenes` or `project()`) is never
modified afterwards, so a frame is always computed from one complete,
consistent list even while edits continue.

Scenes are handed out as read-only mappings, so neither the session nor
a caller can modify one in place: updates replace the scene with a new
mapping carrying the same id. `project()` copies them back into plain
dicts for rendering and export.
"""

from collections.abc import Mapping
from types import MappingProxyType

from .manifest import (
    DEFAULT_VIDEO,
    check_unique_ids,
    make_project,
    normalize_scene,
)
from .timeline import total_frames


class EditSession:
    """Owns an ordered scene list plus the currently selected scene."""

    def __init__(
        self,
        scenes: list[dict] | None = None,
        resolution: tuple[int, int] = DEFAULT_VIDEO["resolution"],
        fps: int = DEFAULT_VIDEO["fps"],
        background: str = DEFAULT_VIDEO["background"],
    ):
        normalized = tuple(
            MappingProxyType(normalize_scene(s, i))
            for i, s in enumerate(scenes or [])
        )
        check_unique_ids(list(normalized))
        self._scenes = normalized
        self._selected_id = None
        self.resolution = tuple(resolution)
        self.fps = fps
        self.background = background

    # ── Read access ──────────────────────────────────────────────

    @property
    def scenes(self) -> tuple[Mapping, ...]:
        return self._scenes

    @property
    def selected(self) -> Mapping | None:
        if self._selected_id is None:
            return None
        return self._scenes[self.index_of(self._selected_id)]

    @property
    def total_frames(self) -> int:
        return total_frames(list(self._scenes))

    def index_of(self, scene_id: str) -> int:
        for i, scene in enumerate(self._scenes):
            if scene["id"] == scene_id:
                return i
        raise KeyError(f"No scene with id '{scene_id}'")

    def project(self) -> dict:
        """Project dict over the current snapshot, ready for compose_frame."""
        return make_project(
            [dict(s) for s in self._scenes],
            self.resolution, self.fps, self.background,
        )

    # ── Mutations ────────────────────────────────────────────────

    def add_scene(self, **fields) -> Mapping:
        """Append a scene built from editor defaults and select it."""
        if "id" in fields:
            raise ValueError("Scene ids are generated; do not pass 'id'")
        scene = MappingProxyType(normalize_scene(fields, len(self._scenes)))
        self._scenes = (*self._scenes, scene)
        self._selected_id = scene["id"]
        return scene

    def update_scene(self, scene_id: str, **changes) -> Mapping:
        """Replace a scene with an edited copy and select it.

        The id is immutable. Raises KeyError for an unknown id and
        ValueError for invalid field values (the list is left untouched).
        """
        index = self.index_of(scene_id)
        if "id" in changes and changes["id"] != scene_id:
            raise ValueError(f"Scene {index}: 'id' cannot be changed")

        updated = MappingProxyType(
            normalize_scene({**self._scenes[index], **changes}, index)
        )
        scenes = list(self._scenes)
        scenes[index] = updated
        self._scenes = tuple(scenes)
        self._selected_id = scene_id
        return updated

    def delete_scene(self, scene_id: str) -> None:
        """Remove a scene. Clears the selection if it was selected."""
        index = self.index_of(scene_id)
        self._scenes = self._scenes[:index] + self._scenes[index + 1:]
        if self._selected_id == scene_id:
            self._selected_id = None

    def move_scene(self, from_index: int, to_index: int) -> None:
        """Move the scene at from_index so it ends up at to_index."""
        n = len(self._scenes)
        for name, idx in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= idx < n:
                raise IndexError(f"{name} {idx} out of range (0-{n - 1})")
        scenes = list(self._scenes)
        scene = scenes.pop(from_index)
        scenes.insert(to_index, scene)
        self._scenes = tuple(scenes)

    def select(self, scene_id: str | None) -> None:
        if scene_id is not None:
            self.index_of(scene_id)
        self._selected_id = scene_id
