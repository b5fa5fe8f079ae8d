"""Extension table for opcode groups the core does not implement."""

from __future__ import annotations

import pytest

from pychip8.bus import MemoryBank
from pychip8.cpu import Chip8CPU, Instruction, UnimplementedOpcode


def make_cpu(*words: int) -> Chip8CPU:
    program = b"".join(word.to_bytes(2, "big") for word in words)
    return Chip8CPU(MemoryBank.with_program(program))


def set_delay_timer(cpu: Chip8CPU, op) -> None:
    cpu.state.delay_timer = cpu.state.read(op.x)


def test_extension_handler_is_dispatched() -> None:
    cpu = make_cpu(0x6A30, 0xFA15)
    cpu.register_extension(Instruction(0xF, 0x15, "FX15", "LD", "set_delay_timer"), set_delay_timer)

    cpu.step()
    instruction = cpu.step()

    assert instruction.pattern == "FX15"
    assert cpu.delay_timer == 0x30
    assert cpu.pc == 0x204


def test_extension_does_not_leak_into_other_instances() -> None:
    first = make_cpu(0xF015)
    second = make_cpu(0xF015)
    first.register_extension(Instruction(0xF, 0x15, "FX15", "LD", "set_delay_timer"), set_delay_timer)

    first.step()
    with pytest.raises(UnimplementedOpcode):
        second.step()


def test_extension_cannot_shadow_core_opcode() -> None:
    cpu = make_cpu()

    with pytest.raises(ValueError):
        cpu.register_extension(Instruction(0x8, 0x4, "8XY4", "ADD", "add"), lambda cpu, op: None)


def test_extension_registered_once() -> None:
    cpu = make_cpu()
    instruction = Instruction(0xE, 0x9E, "EX9E", "SKP", "skip_if_pressed")
    cpu.register_extension(instruction, lambda cpu, op: None)

    with pytest.raises(ValueError):
        cpu.register_extension(instruction, lambda cpu, op: None)


def test_peek_sees_extensions() -> None:
    cpu = make_cpu(0xE1A1)
    cpu.register_extension(Instruction(0xE, 0xA1, "EXA1", "SKNP", "skip_if_released"), lambda cpu, op: None)

    assert cpu.peek_instruction().mnemonic == "SKNP"
