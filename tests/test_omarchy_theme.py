import platformdirs
import pytest

from barforge.omarchy_theme import (
    Color,
    hex_to_color,
    is_omarchy_available,
    load_omarchy_palette,
    parse_alacritty_toml,
)

FULL_TOML = """
[colors.primary]
background = "#1e1e2e"
foreground = "#cdd6f4"

[colors.normal]
black = "#45475a"
red = "#f38ba8"
green = "#a6e3a1"
yellow = "#f9e2af"
blue = "#89b4fa"
magenta = "#f5c2e7"
cyan = "#94e2d5"
white = "#bac2de"

[colors.bright]
black = "#585b70"
red = "#f38ba8"
green = "#a6e3a1"
yellow = "#f9e2af"
blue = "#89b4fa"
magenta = "#f5c2e7"
cyan = "#94e2d5"
white = "#a6adc8"
"""


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setattr(platformdirs, "user_config_path", lambda: tmp_path)
    return tmp_path


def _write_theme(config_home, content):
    theme_dir = config_home / "omarchy" / "current" / "theme"
    theme_dir.mkdir(parents=True)
    (theme_dir / "alacritty.toml").write_text(content)


def test_hex_with_hash_prefix():
    color = hex_to_color("#1e1e2e")
    assert color.r == 30.0 / 255.0
    assert color.g == 30.0 / 255.0
    assert color.b == 46.0 / 255.0


def test_hex_without_hash_prefix():
    color = hex_to_color("89b4fa")
    assert color.r == 137.0 / 255.0
    assert color.g == 180.0 / 255.0
    assert color.b == 250.0 / 255.0


def test_hex_invalid_length():
    assert hex_to_color("#fff") is None
    assert hex_to_color("1234") is None


def test_hex_invalid_characters():
    assert hex_to_color("#gggggg") is None


def test_from_rgb8_is_opaque():
    assert Color.from_rgb8(255, 0, 0) == Color(1.0, 0.0, 0.0, 1.0)


def test_parses_valid_toml():
    colors = parse_alacritty_toml(FULL_TOML)
    for key in ("background", "foreground", "black", "blue", "bright_black", "bright_white"):
        assert key in colors
    assert len(colors) == 18


def test_parses_primary_colors():
    content = """
[colors.primary]
background = "#1e1e2e"
foreground = "#cdd6f4"
"""
    colors = parse_alacritty_toml(content)
    bg = colors["background"]
    assert bg.r == 30.0 / 255.0
    assert bg.g == 30.0 / 255.0
    assert bg.b == 46.0 / 255.0


def test_handles_empty_content():
    assert parse_alacritty_toml("") == {}


def test_handles_invalid_toml():
    assert parse_alacritty_toml("not valid toml { }}") == {}


def test_handles_missing_colors_section():
    assert parse_alacritty_toml("[font]\nsize = 12.0\n") == {}


def test_skips_invalid_values():
    content = '[colors.normal]\nred = "#zzzzzz"\ngreen = 5\nblue = "#0000ff"\n'
    assert parse_alacritty_toml(content) == {"blue": Color.from_rgb8(0, 0, 255)}


def test_omarchy_unavailable_without_theme(config_home):
    assert is_omarchy_available() is False
    assert load_omarchy_palette() is None


def test_loads_palette(config_home):
    _write_theme(config_home, FULL_TOML)
    assert is_omarchy_available() is True
    palette = load_omarchy_palette()
    assert palette.background == Color.from_rgb8(0x1E, 0x1E, 0x2E)
    assert palette.bright_white == Color.from_rgb8(0xA6, 0xAD, 0xC8)
    assert palette.white == Color.from_rgb8(0xBA, 0xC2, 0xDE)


def test_missing_colors_use_fallback(config_home):
    _write_theme(config_home, '[colors.primary]\nbackground = "#000000"\n')
    palette = load_omarchy_palette()
    assert palette.background == Color.from_rgb8(0, 0, 0)
    assert palette.red == Color.from_rgb8(128, 128, 128)


def test_palette_none_when_no_colors(config_home):
    _write_theme(config_home, "[font]\nsize = 12.0\n")
    assert load_omarchy_palette() is None