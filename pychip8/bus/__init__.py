"""Memory bus for the CHIP-8 emulator."""

from .memory import (
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    ConstructionOversize,
    MemoryAccessError,
    MemoryBank,
    MemoryOutOfBounds,
)

__all__ = [
    "MemoryBank",
    "MemoryAccessError",
    "MemoryOutOfBounds",
    "ConstructionOversize",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
]
