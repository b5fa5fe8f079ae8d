"""Monochrome CHIP-8 framebuffer."""

from __future__ import annotations

from typing import Final, Iterator, Sequence

DISPLAY_WIDTH: Final[int] = 64
DISPLAY_HEIGHT: Final[int] = 32


class Framebuffer:
    """Row-major grid of on/off cells, stride ``width``.

    Only the CPU mutates the grid (``clear`` and ``toggle``); everything else
    should go through the read accessors or a :meth:`view`.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self._width = width
        self._height = height
        self._cells = [False] * (width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"pixel ({x}, {y}) outside {self._width}x{self._height} framebuffer")
        return y * self._width + x

    def get(self, x: int, y: int) -> bool:
        return self._cells[self._offset(x, y)]

    def toggle(self, x: int, y: int) -> bool:
        """XOR the cell at ``(x, y)`` and return True if it was switched off."""

        offset = self._offset(x, y)
        was_on = self._cells[offset]
        self._cells[offset] = not was_on
        return was_on

    def clear(self) -> None:
        self._cells = [False] * (self._width * self._height)

    def row(self, y: int) -> tuple[bool, ...]:
        start = self._offset(0, y)
        return tuple(self._cells[start : start + self._width])

    def rows(self) -> Iterator[tuple[bool, ...]]:
        for y in range(self._height):
            yield self.row(y)

    def snapshot(self) -> Sequence[bool]:
        return tuple(self._cells)

    def lit_count(self) -> int:
        return sum(self._cells)

    def to_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if cell else off for cell in row) for row in self.rows())

    def view(self) -> "FramebufferView":
        return FramebufferView(self)


class FramebufferView:
    """Read-only window onto a :class:`Framebuffer` for renderers and hosts."""

    __slots__ = ("_framebuffer",)

    def __init__(self, framebuffer: Framebuffer) -> None:
        self._framebuffer = framebuffer

    @property
    def width(self) -> int:
        return self._framebuffer.width

    @property
    def height(self) -> int:
        return self._framebuffer.height

    def get(self, x: int, y: int) -> bool:
        return self._framebuffer.get(x, y)

    def row(self, y: int) -> tuple[bool, ...]:
        return self._framebuffer.row(y)

    def rows(self) -> Iterator[tuple[bool, ...]]:
        return self._framebuffer.rows()

    def snapshot(self) -> Sequence[bool]:
        return self._framebuffer.snapshot()

    def lit_count(self) -> int:
        return self._framebuffer.lit_count()

    def to_text(self, on: str = "#", off: str = ".") -> str:
        return self._framebuffer.to_text(on, off)
