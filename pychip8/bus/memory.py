"""Flat 4KB memory bank for the CHIP-8 address space.

Every CHIP-8 address is a plain offset into a single ``bytearray``. Accesses
outside ``0x000-0xFFF`` are faults rather than wrapped reads so that a
misbehaving ROM stops at the instruction that went astray.
"""

from __future__ import annotations

from typing import Final

MEMORY_SIZE: Final[int] = 0x1000
PROGRAM_START: Final[int] = 0x200
MAX_PROGRAM_SIZE: Final[int] = MEMORY_SIZE - PROGRAM_START


class MemoryAccessError(Exception):
    """Base error for memory bank faults."""


class MemoryOutOfBounds(MemoryAccessError):
    """Raised when an access falls outside the 4KB address space."""

    def __init__(self, address: int, size: int = MEMORY_SIZE) -> None:
        super().__init__(f"address {address:#05x} outside memory 0x000-{size - 1:#05x}")
        self.address = address


class ConstructionOversize(MemoryAccessError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, size: int, capacity: int = MAX_PROGRAM_SIZE) -> None:
        super().__init__(f"program image of {size} bytes exceeds {capacity} bytes available")
        self.size = size
        self.capacity = capacity


class MemoryBank:
    """Byte-addressable RAM holding the loaded program image."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= PROGRAM_START:
            raise ValueError(f"memory size must exceed {PROGRAM_START:#05x}")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    @classmethod
    def with_program(cls, image: bytes, size: int = MEMORY_SIZE) -> "MemoryBank":
        bank = cls(size)
        bank.load_program(image)
        return bank

    def load_program(self, image: bytes, start: int = PROGRAM_START) -> None:
        capacity = len(self._data) - start
        if len(image) > capacity:
            raise ConstructionOversize(len(image), capacity)
        self._data[start : start + len(image)] = image

    def _check(self, address: int) -> int:
        if not 0 <= address < len(self._data):
            raise MemoryOutOfBounds(address, len(self._data))
        return address

    def load8(self, address: int) -> int:
        return self._data[self._check(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._check(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word from ``address`` and ``address + 1``."""

        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def read_block(self, address: int, length: int) -> bytes:
        if length < 0:
            raise ValueError("length must be non-negative")
        if length:
            self._check(address)
            self._check(address + length - 1)
        return bytes(self._data[address : address + length])

    def snapshot(self) -> bytes:
        return bytes(self._data)
