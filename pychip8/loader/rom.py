"""Raw CHIP-8 ROM image loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MAX_PROGRAM_SIZE


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be used as a CHIP-8 program."""


@dataclass
class RomImage:
    """Program bytes plus the name they were loaded under."""

    data: bytes
    name: str = ""

    def __len__(self) -> int:
        return len(self.data)

    def word_count(self) -> int:
        return (len(self.data) + 1) // 2


def load_rom(stream: BinaryIO, name: str = "") -> RomImage:
    """Read a raw ROM image from ``stream``.

    The size check against the program area is left to the memory bank; only
    images that are empty or clearly not a CHIP-8 program are rejected here.
    """

    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError(f"ROM image {name or '<stream>'} is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        data += stream.read()
    return RomImage(bytes(data), name)


def load_rom_from_path(path: Path) -> RomImage:
    """Load a ROM image from the filesystem."""

    try:
        with path.open("rb") as handle:
            return load_rom(handle, path.name)
    except IsADirectoryError as exc:
        raise RomFormatError(f"ROM path {path} is a directory") from exc
