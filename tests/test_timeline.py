"""Tests for timeline scheduling — frame -> (scene, local offset)."""

import pytest

from textreel.timeline import locate, scene_ranges, scene_starts, total_frames


def _scene(**overrides):
    """Return a minimal valid scene."""
    s = {
        "id": "scene",
        "text": "Hello",
        "duration": 60,
        "font_size": 40,
        "color": "#ffffff",
        "background_color": "#000000",
        "transition": "fade",
    }
    s.update(overrides)
    return s


def _scenes(*durations):
    return [_scene(id=f"s{i}", duration=d) for i, d in enumerate(durations)]


class TestTotalFrames:
    def test_sum_of_durations(self):
        assert total_frames(_scenes(60, 90, 15)) == 165

    def test_empty_list(self):
        assert total_frames([]) == 0

    def test_single_frame_scene(self):
        assert total_frames(_scenes(1)) == 1


class TestSceneStarts:
    def test_prefix_sum_with_total(self):
        starts = scene_starts(_scenes(60, 90, 15))
        assert list(starts) == [0, 60, 150, 165]

    def test_empty(self):
        assert list(scene_starts([])) == [0]

    def test_non_positive_duration_owns_no_frames(self):
        starts = scene_starts(_scenes(10, 0, -5, 10))
        assert list(starts) == [0, 10, 10, 10, 20]


class TestLocate:
    """Two scenes: a (60 frames, fade) then b (90 frames, slide)."""

    @pytest.fixture
    def scenes(self):
        return [
            _scene(id="a", duration=60, transition="fade"),
            _scene(id="b", duration=90, transition="slide"),
        ]

    @pytest.mark.parametrize("frame, scene_id, offset", [
        (0, "a", 0),
        (59, "a", 59),
        (60, "b", 0),
        (149, "b", 89),
    ])
    def test_scenario(self, scenes, frame, scene_id, offset):
        scene, local = locate(scenes, frame)
        assert scene["id"] == scene_id
        assert local == offset

    def test_end_of_timeline_is_empty(self, scenes):
        assert total_frames(scenes) == 150
        assert locate(scenes, 150) is None

    def test_far_past_end(self, scenes):
        assert locate(scenes, 10_000) is None

    def test_negative_frame(self, scenes):
        assert locate(scenes, -1) is None

    def test_empty_list(self):
        assert locate([], 0) is None

    def test_returns_the_scene_object(self, scenes):
        scene, _ = locate(scenes, 75)
        assert scene is scenes[1]

    def test_every_frame_owned_exactly_once(self):
        scenes = _scenes(3, 1, 4, 1, 5)
        total = total_frames(scenes)
        for start_scene, start, end in scene_ranges(scenes):
            for frame in range(start, end):
                scene, offset = locate(scenes, frame)
                assert scene is start_scene
                assert offset == frame - start
        assert locate(scenes, total) is None

    def test_skips_zero_length_scene(self):
        scenes = _scenes(5, 0, 5)
        scene, offset = locate(scenes, 5)
        assert scene["id"] == "s2"
        assert offset == 0

    def test_reorder_recomputes_offsets(self):
        scenes = _scenes(10, 20)
        reordered = [scenes[1], scenes[0]]
        scene, offset = locate(reordered, 15)
        assert scene["id"] == "s1"
        assert offset == 15
        scene, offset = locate(reordered, 20)
        assert scene["id"] == "s0"
        assert offset == 0


class TestSceneRanges:
    def test_adjacent_without_gaps(self):
        ranges = scene_ranges(_scenes(60, 90, 30))
        assert [(s, e) for _, s, e in ranges] == [(0, 60), (60, 150), (150, 180)]
        for (_, _, prev_end), (_, next_start, _) in zip(ranges, ranges[1:]):
            assert prev_end == next_start

    def test_empty(self):
        assert scene_ranges([]) == []
