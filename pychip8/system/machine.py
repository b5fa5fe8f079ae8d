"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from pychip8.bus import MemoryBank
from pychip8.cpu import Chip8CPU, Instruction
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer


@dataclass
class MachineConfig:
    """Runtime configuration for one CHIP-8 machine."""

    raw_shift_left_flag: bool = False
    random_byte: Optional[Callable[[], int]] = None
    seed: Optional[int] = None
    width: int = DISPLAY_WIDTH
    height: int = DISPLAY_HEIGHT


@dataclass
class Machine:
    """Aggregates the components of one emulator session."""

    rom: bytes
    config: MachineConfig
    memory: MemoryBank
    framebuffer: Framebuffer
    cpu: Chip8CPU

    @property
    def executed(self) -> int:
        return self.cpu.step_count

    def step(self) -> Instruction:
        return self.cpu.step()

    def run(self, steps: int) -> int:
        """Execute exactly ``steps`` instructions and return ``steps``.

        A fault raised by the core propagates; the instructions that ran
        before it remain counted in :attr:`executed`.
        """

        if steps < 0:
            raise ValueError("steps must be non-negative")
        for _ in range(steps):
            self.cpu.step()
        return steps

    def tick_timers(self) -> None:
        self.cpu.tick_timers()

    def reset(self) -> None:
        """Rebuild every component from the original ROM image."""

        fresh = create_machine(self.rom, self.config)
        self.memory = fresh.memory
        self.framebuffer = fresh.framebuffer
        self.cpu = fresh.cpu


def _random_source(config: MachineConfig) -> Callable[[], int]:
    if config.random_byte is not None:
        return config.random_byte
    rng = random.Random(config.seed)
    return lambda: rng.getrandbits(8)


def create_machine(rom: bytes, config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with ``rom`` loaded at 0x200."""

    config = config or MachineConfig()
    rom = bytes(rom)
    memory = MemoryBank.with_program(rom)
    framebuffer = Framebuffer(config.width, config.height)
    cpu = Chip8CPU(
        memory,
        framebuffer=framebuffer,
        random_byte=_random_source(config),
        raw_shift_left_flag=config.raw_shift_left_flag,
    )
    if debug_enabled("cpu"):
        debug_log("cpu", "machine created rom=%d bytes display=%dx%d", len(rom), config.width, config.height)

    return Machine(
        rom=rom,
        config=config,
        memory=memory,
        framebuffer=framebuffer,
        cpu=cpu,
    )
