# app/ticket/colors.py
import re

DEFAULT_COLOR = "white"

PALETTE = {
    "white": "#ffffff",
    "yellow": "#fff9c4",
    "pink": "#fce4ec",
    "blue": "#e3f2fd",
    "green": "#e8f5e9",
    "purple": "#f3e5f5",
    "orange": "#fff3e0",
}

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_custom_color(color: str) -> bool:
    return color.startswith("#")


def normalize_color(color: str) -> str:
    """Return the canonical form of a ticket color or raise ValueError.

    Palette tokens are kept as is; custom colors must be ``#rrggbb`` and are
    lower-cased.
    """
    if not isinstance(color, str):
        raise ValueError("Color must be a string")
    if color in PALETTE:
        return color
    if HEX_COLOR.match(color):
        return color.lower()
    raise ValueError(f"Invalid color {color!r}: use a palette name or #rrggbb")


def color_value(color: str) -> str:
    if is_custom_color(color):
        return color.lower()
    return PALETTE.get(color, PALETTE[DEFAULT_COLOR])
