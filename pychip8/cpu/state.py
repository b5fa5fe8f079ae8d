"""Register file and call stack of the CHIP-8 CPU."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pychip8.bus import PROGRAM_START

from .errors import StackUnderflow

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF


@dataclass
class RegisterFile:
    """V0-VF, the index register, the program counter and both timers."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    index: int = 0x000
    pc: int = PROGRAM_START
    delay_timer: int = 0
    sound_timer: int = 0

    def read(self, register: int) -> int:
        return self.v[register]

    def write(self, register: int, value: int) -> None:
        self.v[register] = value & 0xFF

    def set_flag(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def flag(self) -> int:
        return self.v[FLAG_REGISTER]

    def clone(self) -> "RegisterFile":
        return RegisterFile(
            bytearray(self.v),
            self.index,
            self.pc,
            self.delay_timer,
            self.sound_timer,
        )


class CallStack:
    """Unbounded LIFO of subroutine return addresses."""

    def __init__(self) -> None:
        self._frames: List[int] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, address: int) -> None:
        self._frames.append(address & 0xFFFF)

    def pop(self) -> int:
        if not self._frames:
            raise StackUnderflow("return with an empty call stack")
        return self._frames.pop()

    def peek(self) -> int | None:
        return self._frames[-1] if self._frames else None

    def snapshot(self) -> tuple[int, ...]:
        return tuple(self._frames)
