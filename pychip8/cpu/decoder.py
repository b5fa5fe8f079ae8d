"""Instruction word decoding."""

from __future__ import annotations

from typing import NamedTuple


class DecodedInstruction(NamedTuple):
    """Operand fields of a 16-bit CHIP-8 instruction word."""

    word: int
    first: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def pattern(self) -> str:
        return f"{self.word:04X}"


def decode(word: int) -> DecodedInstruction:
    word &= 0xFFFF
    return DecodedInstruction(
        word=word,
        first=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )
