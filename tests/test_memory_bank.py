"""Unit tests for the CHIP-8 memory bank."""

import pytest

from pychip8.bus import (
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    ConstructionOversize,
    MemoryAccessError,
    MemoryBank,
    MemoryOutOfBounds,
)


def test_program_is_copied_at_0x200() -> None:
    bank = MemoryBank.with_program(b"\x12\x34\x56")

    assert len(bank) == MEMORY_SIZE
    assert bank.load8(PROGRAM_START) == 0x12
    assert bank.load8(PROGRAM_START + 2) == 0x56
    assert bank.read_block(0x000, PROGRAM_START) == bytes(PROGRAM_START)


def test_load16_is_big_endian() -> None:
    bank = MemoryBank.with_program(b"\xA2\xF0")

    assert bank.load16(PROGRAM_START) == 0xA2F0


def test_store8_masks_to_byte() -> None:
    bank = MemoryBank()
    bank.store8(0x300, 0x1FF)

    assert bank.load8(0x300) == 0xFF


def test_full_size_program_fits() -> None:
    image = bytes([0xAB]) * MAX_PROGRAM_SIZE
    bank = MemoryBank.with_program(image)

    assert bank.load8(MEMORY_SIZE - 1) == 0xAB


def test_oversize_program_rejected() -> None:
    with pytest.raises(ConstructionOversize) as excinfo:
        MemoryBank.with_program(bytes(MAX_PROGRAM_SIZE + 1))

    assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
    assert isinstance(excinfo.value, MemoryAccessError)


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, 0x1FFF])
def test_out_of_range_access_faults(address: int) -> None:
    bank = MemoryBank()

    with pytest.raises(MemoryOutOfBounds) as excinfo:
        bank.load8(address)
    assert excinfo.value.address == address

    with pytest.raises(MemoryOutOfBounds):
        bank.store8(address, 0)


def test_word_read_across_the_end_faults() -> None:
    bank = MemoryBank()

    with pytest.raises(MemoryOutOfBounds):
        bank.load16(MEMORY_SIZE - 1)


def test_read_block_checks_both_ends() -> None:
    bank = MemoryBank()

    assert bank.read_block(MEMORY_SIZE - 4, 4) == bytes(4)
    assert bank.read_block(0x123, 0) == b""
    with pytest.raises(MemoryOutOfBounds):
        bank.read_block(MEMORY_SIZE - 4, 5)
