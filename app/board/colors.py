# app/board/colors.py
from typing import Iterable, Iterator

from app.board.errors import BoardValidationError
from app.ticket.colors import is_custom_color, normalize_color


class CustomPalette:
    """User-defined ``#rrggbb`` colors offered next to the fixed palette."""

    def __init__(self, colors: Iterable[str] = ()):
        self._colors: list[str] = []
        for color in colors:
            self.add(color)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._colors))

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, color: str) -> bool:
        return color.lower() in self._colors

    def add(self, color: str) -> str:
        try:
            color = normalize_color(color)
        except ValueError as exc:
            raise BoardValidationError(str(exc)) from exc
        if not is_custom_color(color):
            raise BoardValidationError(f"{color!r} is a palette color, not a custom one")
        if color not in self._colors:
            self._colors.append(color)
        return color

    def remove(self, color: str) -> bool:
        color = color.lower()
        if color not in self._colors:
            return False
        self._colors.remove(color)
        return True

    def clear(self) -> None:
        self._colors = []

    def replace(self, colors: Iterable[str]) -> None:
        self.clear()
        for color in colors:
            self.add(color)
