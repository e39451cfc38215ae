"""Tests for textreel.common utilities."""

import pytest
from PIL import Image, ImageDraw

from textreel.common import (
    is_hex_color,
    load_font,
    normalize_color,
    parse_hex_color,
    resolve_color,
    resolve_path_vars,
    wrap_text,
)


class TestNormalizeColor:
    def test_lowercases(self):
        assert normalize_color("#E04C77") == "#e04c77"

    def test_adds_hash(self):
        assert normalize_color("1A1A1A") == "#1a1a1a"

    def test_expands_short_form(self):
        assert normalize_color("#fa0") == "#ffaa00"

    @pytest.mark.parametrize("bad", ["red", "#12345", "#gggggg", "", 123, None])
    def test_rejects_invalid(self, bad):
        with pytest.raises(ValueError, match="Invalid color"):
            normalize_color(bad)

    def test_is_hex_color(self):
        assert is_hex_color("#abcdef")
        assert not is_hex_color("#abcde")


class TestParseHexColor:
    def test_with_hash(self):
        assert parse_hex_color("#e04c77") == (224, 76, 119)

    def test_without_hash(self):
        assert parse_hex_color("1A1A1A") == (26, 26, 26)

    def test_short_form(self):
        assert parse_hex_color("#fff") == (255, 255, 255)


class TestResolveColor:
    def test_palette_key(self):
        assert resolve_color("ink", {"ink": "#1a1a1a"}) == "#1a1a1a"

    def test_inline_hex_is_normalized(self):
        assert resolve_color("#50DC78", {}) == "#50dc78"

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError, match="Unknown color"):
            resolve_color("nonexistent", {})

    def test_rgb_list(self):
        assert resolve_color([80, 220, 120], {}) == "#50dc78"

    @pytest.mark.parametrize("bad", [[1, 2], [0, 0, 256], [0.5, 0, 0], 7, None])
    def test_non_string_raises(self, bad):
        with pytest.raises(ValueError, match="Invalid color"):
            resolve_color(bad, {"ink": "#1a1a1a"})


class TestResolvePathVars:
    def test_single_var(self):
        assert resolve_path_vars("Hello ${name}", {"name": "reel"}) == "Hello reel"

    def test_non_string_value(self):
        assert resolve_path_vars("v${n}", {"n": 2}) == "v2"

    def test_no_vars(self):
        assert resolve_path_vars("plain text", {}) == "plain text"

    def test_unknown_var_raises(self):
        with pytest.raises(ValueError, match="Unknown path variable"):
            resolve_path_vars("${missing}", {})


class TestLoadFont:
    def test_returns_font_object(self):
        assert load_font(size=24) is not None


class TestWrapText:
    @pytest.fixture
    def draw(self):
        return ImageDraw.Draw(Image.new("RGB", (1, 1)))

    def test_short_text_single_line(self, draw):
        assert wrap_text(draw, "hello world", load_font(20), 10_000) == ["hello world"]

    def test_wraps_long_text(self, draw):
        lines = wrap_text(draw, "one two three four five six", load_font(20), 80)
        assert len(lines) > 1
        assert " ".join(lines) == "one two three four five six"

    def test_keeps_explicit_newlines(self, draw):
        assert wrap_text(draw, "a\n\nb", load_font(20), 10_000) == ["a", "", "b"]

    def test_long_word_gets_own_line(self, draw):
        lines = wrap_text(draw, "x supercalifragilistic y", load_font(20), 30)
        assert "supercalifragilistic" in lines
