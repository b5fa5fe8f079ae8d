"""Error types raised by the CHIP-8 CPU."""

from __future__ import annotations


class CPUError(Exception):
    """Base error for CPU-related failures."""


class UnimplementedOpcode(CPUError):
    """Raised when a decoded instruction has no handler."""

    def __init__(self, word: int, pc: int) -> None:
        super().__init__(f"no handler for opcode {word:04X} at {pc:#05x}")
        self.word = word
        self.pc = pc


class StackUnderflow(CPUError):
    """Raised when returning from a subroutine with an empty call stack."""
