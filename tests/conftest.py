"""Shared test fixtures for textreel tests."""

import pytest
import yaml


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest dict to a YAML file under tmp_path, return its path."""
    def _write(content, name="reel.yaml"):
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.dump(content, f)
        return str(path)
    return _write


@pytest.fixture
def small_manifest(write_manifest):
    """A 3-scene, 24-frame manifest at a tiny resolution for fast renders."""
    return write_manifest({
        "video": {"resolution": [64, 36], "fps": 12, "background": "#000000"},
        "defaults": {"font_size": 12, "color": "#ffffff", "background_color": "#202020"},
        "scenes": [
            {"id": "a", "text": "A", "duration": 8, "transition": "fade"},
            {"id": "b", "text": "B", "duration": 8, "transition": "slide"},
            {"id": "c", "text": "C", "duration": 8, "transition": "zoom"},
        ],
    })
