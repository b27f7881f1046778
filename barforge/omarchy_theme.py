"""Reading the colour palette of the current omarchy theme."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass
from pathlib import Path

import platformdirs

_BYTE_RE = re.compile(r"\+?[0-9A-Fa-f]{1,2}")


@dataclass(frozen=True)
class Color:
    """An RGBA colour with components in the range 0.0 to 1.0."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_rgb8(cls, r: int, g: int, b: int) -> Color:
        return cls(r / 255.0, g / 255.0, b / 255.0)


@dataclass(frozen=True)
class OmarchyPalette:
    background: Color
    foreground: Color
    black: Color
    red: Color
    green: Color
    yellow: Color
    blue: Color
    magenta: Color
    cyan: Color
    white: Color
    bright_black: Color
    bright_red: Color
    bright_green: Color
    bright_yellow: Color
    bright_blue: Color
    bright_magenta: Color
    bright_cyan: Color
    bright_white: Color


_PALETTE_KEYS = (
    "background",
    "foreground",
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)

FALLBACK_COLOR = Color.from_rgb8(128, 128, 128)


def _omarchy_theme_dir() -> Path:
    return platformdirs.user_config_path() / "omarchy" / "current" / "theme"


def _alacritty_toml_path() -> Path:
    return _omarchy_theme_dir() / "alacritty.toml"


def is_omarchy_available() -> bool:
    """True if the current omarchy theme provides an alacritty.toml."""
    return _alacritty_toml_path().exists()


def _parse_byte(pair: str) -> int | None:
    if not _BYTE_RE.fullmatch(pair):
        return None
    return int(pair, 16)


def hex_to_color(hex_str: str) -> Color | None:
    """Parse '#rrggbb' or 'rrggbb'; None if malformed."""
    digits = hex_str.lstrip("#")
    if len(digits) != 6:
        return None
    channels = [_parse_byte(digits[i : i + 2]) for i in (0, 2, 4)]
    if any(channel is None for channel in channels):
        return None
    r, g, b = channels
    return Color.from_rgb8(r, g, b)


def _collect(table: object, prefix: str, colors: dict[str, Color]) -> None:
    if not isinstance(table, dict):
        return
    for name, value in table.items():
        if isinstance(value, str):
            color = hex_to_color(value)
            if color is not None:
                colors[f"{prefix}{name}"] = color


def parse_alacritty_toml(content: str) -> dict[str, Color]:
    """Colours from the primary, normal and bright tables of an alacritty config."""
    colors: dict[str, Color] = {}
    try:
        document = tomllib.loads(content)
    except tomllib.TOMLDecodeError:
        return colors

    section = document.get("colors")
    if not isinstance(section, dict):
        return colors

    _collect(section.get("primary"), "", colors)
    _collect(section.get("normal"), "", colors)
    _collect(section.get("bright"), "bright_", colors)
    return colors


def load_omarchy_palette() -> OmarchyPalette | None:
    """The current omarchy palette, or None if it is missing or holds no colours."""
    try:
        content = _alacritty_toml_path().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    colors = parse_alacritty_toml(content)
    if not colors:
        return None
    return OmarchyPalette(**{key: colors.get(key, FALLBACK_COLOR) for key in _PALETTE_KEYS})