"""Tests for the subcommand dispatcher and subcommand CLIs."""

import pytest


class TestMainDispatcher:
    def test_no_subcommand_shows_help(self):
        from textreel.main import main

        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code != 0

    @pytest.mark.parametrize("command", ["export", "frame", "timeline"])
    def test_subcommand_exists(self, command):
        """Subcommand is recognized (fails on its own missing --manifest)."""
        from textreel.main import main

        with pytest.raises(SystemExit) as exc_info:
            main([command])
        assert exc_info.value.code == 2

    def test_invalid_subcommand_errors(self):
        from textreel.main import main

        with pytest.raises(SystemExit) as exc_info:
            main(["nonexistent"])
        assert exc_info.value.code != 0


class TestTimelineCommand:
    def test_lists_ranges(self, small_manifest, capsys):
        from textreel.main import main

        main(["timeline", "--manifest", small_manifest])
        out = capsys.readouterr().out
        assert "3 scenes, 24 frames" in out
        assert "[     8,     16)" in out

    def test_probe_frame(self, small_manifest, capsys):
        from textreel.main import main

        main(["timeline", "--manifest", small_manifest, "--frame", "8"])
        out = capsys.readouterr().out
        assert "scene 'b' offset 0" in out
        assert "translate_y=50.0" in out

    def test_probe_past_end(self, small_manifest, capsys):
        from textreel.main import main

        main(["timeline", "--manifest", small_manifest, "--frame", "24"])
        assert "no active scene" in capsys.readouterr().out


class TestFrameCommand:
    def test_writes_png(self, small_manifest, tmp_path):
        from PIL import Image
        from textreel.main import main

        out = tmp_path / "f.png"
        main(["frame", "--manifest", small_manifest, "--frame", "4", "--output", str(out)])
        assert Image.open(out).size == (64, 36)

    def test_negative_frame_rejected(self, small_manifest, tmp_path):
        from textreel.main import main

        with pytest.raises(SystemExit):
            main(["frame", "--manifest", small_manifest, "--frame", "-1",
                  "--output", str(tmp_path / "f.png")])


class TestExportCommand:
    def test_validate(self, small_manifest, capsys):
        from textreel.main import main

        main(["export", "--manifest", small_manifest, "--validate"])
        out = capsys.readouterr().out
        assert "Manifest valid: 3 scenes, 24 frames" in out

    def test_dry_run(self, small_manifest, capsys):
        from textreel.main import main

        main(["export", "--manifest", small_manifest, "--dry-run"])
        out = capsys.readouterr().out
        assert "Rendering: 100% complete" in out
        assert "exported successfully" not in out

    def test_frames_dir(self, small_manifest, tmp_path, capsys):
        from textreel.main import main

        frames = tmp_path / "frames"
        main(["export", "--manifest", small_manifest, "--frames-dir", str(frames)])
        assert len(list(frames.iterdir())) == 24
        assert "Video exported successfully" in capsys.readouterr().out

    def test_failure_reported_once(self, write_manifest, capsys):
        from textreel.main import main

        path = write_manifest({"scenes": []})
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--manifest", path, "--dry-run"])
        assert exc_info.value.code == 1
        assert "Export failed: No scenes to export" in capsys.readouterr().err

    def test_unparsable_manifest_reported_once(self, tmp_path, capsys):
        from textreel.main import main

        path = tmp_path / "bad.yaml"
        path.write_text("scenes: [\n  - id: a\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--manifest", str(path), "--dry-run"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert err.startswith("Export failed: Manifest: invalid YAML")
        assert "Traceback" not in err

    def test_list_color_reported_once(self, write_manifest, capsys):
        from textreel.main import main

        path = write_manifest({"scenes": [{"id": "a", "color": {"r": 255}}]})
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--manifest", path, "--dry-run"])
        assert exc_info.value.code == 1
        assert "Export failed: Scene 0: color" in capsys.readouterr().err

    def test_validate_reports_bad_manifest(self, tmp_path, capsys):
        from textreel.main import main

        path = tmp_path / "bad.yaml"
        path.write_text("scenes: [\n  - id: a\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--manifest", str(path), "--validate"])
        assert exc_info.value.code == 1
        assert "Manifest invalid" in capsys.readouterr().err

    def test_workers_requires_frames_dir(self, small_manifest, tmp_path):
        from textreel.main import main

        with pytest.raises(SystemExit) as exc_info:
            main(["export", "--manifest", small_manifest,
                  "--output", str(tmp_path / "a.mp4"), "--workers", "4"])
        assert exc_info.value.code == 2
        assert not (tmp_path / "a.mp4").exists()

    def test_output_and_frames_dir_exclusive(self, small_manifest, tmp_path):
        from textreel.main import main

        with pytest.raises(SystemExit):
            main(["export", "--manifest", small_manifest,
                  "--output", str(tmp_path / "a.mp4"),
                  "--frames-dir", str(tmp_path / "frames")])
