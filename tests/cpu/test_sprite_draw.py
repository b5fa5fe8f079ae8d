"""DXYN sprite drawing: XOR, collision flag and clipping."""

from __future__ import annotations

import pytest

from pychip8.bus import MemoryBank, MemoryOutOfBounds
from pychip8.cpu import Chip8CPU

SPRITE_ADDRESS = 0x300


def make_draw_cpu(x: int, y: int, sprite: bytes, *, repeat: int = 1) -> Chip8CPU:
    """CPU whose program sets V0/V1 to ``x``/``y``, points I at ``sprite`` and draws it."""

    words = [0x6000 | x, 0x6100 | y, 0xA000 | SPRITE_ADDRESS]
    words += [0xD010 | len(sprite)] * repeat
    program = b"".join(word.to_bytes(2, "big") for word in words)
    memory = MemoryBank.with_program(program)
    for offset, value in enumerate(sprite):
        memory.store8(SPRITE_ADDRESS + offset, value)
    return Chip8CPU(memory)


def run_all(cpu: Chip8CPU, count: int) -> None:
    for _ in range(count):
        cpu.step()


def lit_pixels(cpu: Chip8CPU) -> set[tuple[int, int]]:
    framebuffer = cpu.framebuffer
    return {
        (x, y)
        for y in range(framebuffer.height)
        for x in range(framebuffer.width)
        if framebuffer.get(x, y)
    }


def test_first_draw_sets_pixels_without_collision() -> None:
    cpu = make_draw_cpu(0, 0, b"\xFF")
    run_all(cpu, 4)

    assert cpu.framebuffer.row(0)[:8] == (True,) * 8
    assert cpu.framebuffer.lit_count() == 8
    assert cpu.registers[0xF] == 0


def test_second_draw_erases_and_reports_collision() -> None:
    cpu = make_draw_cpu(0, 0, b"\xFF", repeat=2)
    run_all(cpu, 5)

    assert cpu.framebuffer.row(0)[:8] == (False,) * 8
    assert cpu.framebuffer.lit_count() == 0
    assert cpu.registers[0xF] == 1


def test_bits_are_read_msb_first() -> None:
    cpu = make_draw_cpu(10, 5, b"\x81\x40")
    run_all(cpu, 4)

    assert lit_pixels(cpu) == {(10, 5), (17, 5), (11, 6)}


def test_flag_cleared_when_no_collision_follows_one() -> None:
    cpu = make_draw_cpu(0, 0, b"\x80")
    cpu.state.set_flag(1)
    run_all(cpu, 4)

    assert cpu.registers[0xF] == 0


def test_partial_overlap_keeps_collision_set() -> None:
    # 0xF0 then 0x3C: overlap on two cells turns them off; later bits turn on.
    cpu = make_draw_cpu(0, 0, b"\xF0")
    run_all(cpu, 4)
    cpu.memory.store8(SPRITE_ADDRESS, 0x3C)
    cpu.state.pc = 0x206
    cpu.step()

    assert lit_pixels(cpu) == {(0, 0), (1, 0), (4, 0), (5, 0)}
    assert cpu.registers[0xF] == 1


def test_horizontal_clip_does_not_wrap() -> None:
    cpu = make_draw_cpu(60, 0, b"\xFF")
    run_all(cpu, 4)

    assert lit_pixels(cpu) == {(60, 0), (61, 0), (62, 0), (63, 0)}
    assert not any(cpu.framebuffer.row(1))


def test_vertical_overflow_stops_the_draw() -> None:
    cpu = make_draw_cpu(0, 30, b"\x80\x80\x80\x80")
    run_all(cpu, 4)

    assert lit_pixels(cpu) == {(0, 30), (0, 31)}


def test_start_coordinates_wrap() -> None:
    cpu = make_draw_cpu(64 + 3, 32 + 2, b"\x80")
    run_all(cpu, 4)

    assert lit_pixels(cpu) == {(3, 2)}


def test_zero_rows_draws_nothing() -> None:
    cpu = make_draw_cpu(0, 0, b"")
    cpu.state.set_flag(1)
    run_all(cpu, 4)

    assert cpu.framebuffer.lit_count() == 0
    assert cpu.registers[0xF] == 0


def test_sprite_read_past_memory_faults() -> None:
    # I = 0xFFE, three rows: the third row is at 0x1000.
    program = b"".join(word.to_bytes(2, "big") for word in (0xAFFE, 0xD013))
    cpu = Chip8CPU(MemoryBank.with_program(program))
    cpu.step()

    with pytest.raises(MemoryOutOfBounds):
        cpu.step()


def test_flag_register_coordinates_read_before_clear() -> None:
    # VF holds the x coordinate; it must be read before VF is reset to 0.
    program = b"".join(word.to_bytes(2, "big") for word in (0x6F05, 0x6100, 0xA300, 0xDF11))
    memory = MemoryBank.with_program(program)
    memory.store8(0x300, 0x80)
    cpu = Chip8CPU(memory)
    run_all(cpu, 4)

    assert lit_pixels(cpu) == {(5, 0)}
    assert cpu.registers[0xF] == 0


def test_sprite_read_fault_leaves_flag_and_grid_untouched() -> None:
    # Draws one row at (0, 0), then a three-row sprite from I = 0xFFE.
    program = b"".join(word.to_bytes(2, "big") for word in (0xA300, 0xD001, 0xAFFE, 0xD003))
    memory = MemoryBank.with_program(program)
    memory.store8(0x300, 0xFF)
    memory.store8(0xFFE, 0xFF)
    cpu = Chip8CPU(memory)
    run_all(cpu, 3)
    cpu.state.set_flag(1)

    with pytest.raises(MemoryOutOfBounds):
        cpu.step()

    assert cpu.registers[0xF] == 1
    assert lit_pixels(cpu) == {(x, 0) for x in range(8)}


def test_rows_below_bottom_edge_are_not_read() -> None:
    # y = 31 with I = 0xFFF: only the first row is visible and readable.
    program = b"".join(word.to_bytes(2, "big") for word in (0x611F, 0xAFFF, 0xD013))
    memory = MemoryBank.with_program(program)
    memory.store8(0xFFF, 0x80)
    cpu = Chip8CPU(memory)
    run_all(cpu, 3)

    assert lit_pixels(cpu) == {(0, 31)}


def test_display_is_a_read_only_view() -> None:
    cpu = make_draw_cpu(2, 1, b"\x80")
    run_all(cpu, 4)

    display = cpu.display

    assert display.get(2, 1)
    assert display.lit_count() == 1
    assert not hasattr(display, "toggle")
