"""Pygame front-end that hosts a CHIP-8 machine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.bus import MemoryAccessError
from pychip8.cpu import CPUError
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import MONOCHROME, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    instructions_per_second: int = 700
    timer_hz: int = 60
    debug_panel: bool = True
    start_paused: bool = False
    palette: Sequence[RGBColor] = MONOCHROME
    raw_shift_left_flag: bool = False
    seed: Optional[int] = None


class Chip8App:
    """Thin wrapper around the Pygame event loop.

    The app owns the cadence: it runs ``instructions_per_second`` CPU steps
    spread over the frames of each second and ticks the timers at
    ``timer_hz``. Faults raised by the core freeze the session instead of
    closing the window.
    """

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.instructions_per_second < 0:
            raise ValueError("instructions_per_second must be non-negative")
        self._config = config
        self._running = False
        self._paused = config.start_paused
        self._debug_panel = config.debug_panel
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._panel_font = None
        self._step_budget = 0.0
        self._timer_budget = 0.0
        self._fault: str | None = None
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def fault(self) -> str | None:
        return self._fault

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")
        self._machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame
        self._init_audio(pygame)

        display = self._machine.cpu.display
        display_width = display.width * self._config.scale
        display_height = display.height * self._config.scale
        screen = pygame.display.set_mode((display_width + _PANEL_WIDTH, display_height))

        clock = pygame.time.Clock()
        self._running = True
        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_key(pygame, event.key)

            self.advance_frame(_FRAME_RATE)
            if self._beeper is not None:
                self._beeper.set_active(self._sound_active())

            screen.fill((0x20, 0x20, 0x20))
            frame = self._renderer.render(self._machine.cpu.display, scale=self._config.scale)
            screen.blit(frame.to_surface(), (0, 0))
            if self._debug_panel:
                screen.blit(self._draw_panel(pygame, display_height), (display_width, 0))
            pygame.display.flip()
            clock.tick(_FRAME_RATE)

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    # ------------------------------------------------------------------
    # Session control

    def advance_frame(self, frame_rate: int = 60) -> int:
        """Run one frame's share of steps and timer ticks; return steps executed."""

        if self._machine is None or frame_rate <= 0:
            return 0
        if self._paused or self._fault is not None:
            return 0

        self._step_budget += self._config.instructions_per_second / frame_rate
        steps = int(self._step_budget)
        self._step_budget -= steps
        executed = 0
        for _ in range(steps):
            if not self._execute_one():
                break
            executed += 1

        self._timer_budget += self._config.timer_hz / frame_rate
        ticks = int(self._timer_budget)
        self._timer_budget -= ticks
        for _ in range(ticks):
            self._machine.tick_timers()
        return executed

    def step_once(self) -> bool:
        """Execute exactly one instruction while paused."""

        if self._machine is None or self._fault is not None:
            return False
        return self._execute_one()

    def toggle_pause(self) -> None:
        self._paused = not self._paused
        if debug_enabled("input"):
            debug_log("input", "paused=%s", self._paused)

    def toggle_debug_panel(self) -> None:
        self._debug_panel = not self._debug_panel

    def reset(self) -> None:
        if self._machine is None:
            return
        self._machine.reset()
        self._fault = None
        self._step_budget = 0.0
        self._timer_budget = 0.0
        if self._trace_recorder is not None:
            self._trace_recorder.clear()

    def panel_lines(self) -> list[str]:
        """Text rows shown in the register debug panel."""

        if self._machine is None:
            return []
        cpu = self._machine.cpu
        lines = [
            f"PC  {cpu.pc:03X}",
            f"I   {cpu.index:03X}",
            f"SP  {cpu.stack_depth:02d}",
            f"DT  {cpu.delay_timer:02X}",
            f"ST  {cpu.sound_timer:02X}",
            " ",
        ]
        registers = cpu.registers
        for row in range(0, len(registers), 2):
            lines.append(
                f"V{row:X} {registers[row]:02X}  V{row + 1:X} {registers[row + 1]:02X}"
            )
        lines.append(" ")
        lines.append("PAUSED" if self._paused else "RUNNING")
        if self._fault is not None:
            lines.append("FAULT")
        return lines

    def _create_machine(self, rom_path: Path) -> Machine:
        try:
            image = load_rom_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(str(exc)) from exc

        config = MachineConfig(
            raw_shift_left_flag=self._config.raw_shift_left_flag,
            seed=self._config.seed,
        )
        try:
            return create_machine(image.data, config)
        except MemoryAccessError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc

    def _execute_one(self) -> bool:
        machine = self._machine
        assert machine is not None
        cpu = machine.cpu
        pc_before = cpu.pc
        try:
            instruction = machine.step()
        except (CPUError, MemoryAccessError) as exc:
            self._fault = str(exc)
            if self._trace_recorder is not None:
                debug_log("trace", "session halted: %s", exc)
                self._trace_recorder.record_step(cpu, None, pc=pc_before, note="fault")
                self._trace_recorder.dump("trace", limit=32)
            return False

        if self._trace_recorder is not None:
            word = machine.memory.load16(pc_before)
            self._trace_recorder.record_step(cpu, word, pc=pc_before, mnemonic=instruction.mnemonic)
        return True

    def _sound_active(self) -> bool:
        if self._machine is None or self._paused or self._fault is not None:
            return False
        return self._machine.cpu.sound_active

    # ------------------------------------------------------------------
    # Pygame plumbing

    def _init_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - hardware dependent
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _handle_key(self, pygame, key: int) -> None:
        if debug_enabled("input"):
            debug_log("input", "key=%s", pygame.key.name(key))
        if key == pygame.K_ESCAPE:
            self._running = False
        elif key == pygame.K_SPACE:
            self.toggle_pause()
        elif key == pygame.K_n and self._paused:
            self.step_once()
        elif key == pygame.K_F1:
            self.toggle_debug_panel()
        elif key == pygame.K_r:
            self.reset()

    def _draw_panel(self, pygame, height: int):
        surface = pygame.Surface((_PANEL_WIDTH, height))
        surface.fill((0x30, 0x30, 0x30))

        if self._panel_font is None:
            pygame.font.init()
            font_name = pygame.font.match_font("menlo,dejavusansmono,couriernew,consolas,monospace")
            if not font_name:
                font_name = pygame.font.get_default_font()
            self._panel_font = pygame.font.Font(font_name, _PANEL_FONT_SIZE)

        color = (0xFF, 0x55, 0x55) if self._fault is not None else (0xFF, 0xFF, 0xFF)
        y = 4
        for text in self.panel_lines():
            rendered = self._panel_font.render(text, False, color)
            surface.blit(rendered, (6, y))
            y += _PANEL_FONT_SIZE + 2
            if y > height:
                break
        return surface


_FRAME_RATE = 60
_PANEL_WIDTH = 160
_PANEL_FONT_SIZE = 14
