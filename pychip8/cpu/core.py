"""CHIP-8 interpreter core: fetch, decode, dispatch and instruction handlers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Mapping, Optional, Tuple

from pychip8.bus import MemoryBank
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, FramebufferView

from .decoder import DecodedInstruction, decode
from .errors import CPUError, UnimplementedOpcode
from .opcodes import OPCODE_TABLE, DispatchKey, Instruction, dispatch_key
from .state import FLAG_REGISTER, CallStack, RegisterFile

ExtensionHandler = Callable[["Chip8CPU", DecodedInstruction], None]

SPRITE_WIDTH = 8


@dataclass
class Chip8CPU:
    """One self-contained CHIP-8 interpreter instance.

    The CPU owns its register file, call stack and framebuffer; the memory
    bank is handed in already holding the program image. Nothing here is
    shared between instances.
    """

    memory: MemoryBank
    framebuffer: Framebuffer = field(default_factory=Framebuffer)
    random_byte: Optional[Callable[[], int]] = None
    raw_shift_left_flag: bool = False
    instruction_table: Mapping[DispatchKey, Instruction] = field(default_factory=lambda: OPCODE_TABLE)

    state: RegisterFile = field(default_factory=RegisterFile)
    stack: CallStack = field(default_factory=CallStack)
    step_count: int = 0
    _extensions: Dict[DispatchKey, Tuple[Instruction, ExtensionHandler]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.random_byte is None:
            rng = random.Random()
            self.random_byte = lambda: rng.getrandbits(8)

    # ------------------------------------------------------------------
    # Read accessors

    @property
    def pc(self) -> int:
        return self.state.pc

    @property
    def index(self) -> int:
        return self.state.index

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(self.state.v)

    @property
    def stack_depth(self) -> int:
        return len(self.stack)

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer > 0

    @property
    def display(self) -> FramebufferView:
        return self.framebuffer.view()

    # ------------------------------------------------------------------
    # Execution

    def step(self) -> Instruction:
        """Execute a single instruction and return its metadata."""

        pc_before = self.state.pc
        word = self._fetch()
        decoded = decode(word)
        instruction, handler = self._resolve(decoded, pc_before)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x word=%04x %s", pc_before, word, instruction.mnemonic)
        handler(decoded)
        self.step_count += 1
        return instruction

    def peek_instruction(self) -> Instruction | None:
        """Return the metadata of the instruction at PC without executing it."""

        decoded = decode(self.memory.load16(self.state.pc))
        key = dispatch_key(decoded)
        instruction = self.instruction_table.get(key)
        if instruction is not None:
            return instruction
        extension = self._extensions.get(key)
        return extension[0] if extension is not None else None

    def register_extension(self, instruction: Instruction, handler: ExtensionHandler) -> None:
        """Route ``instruction.key`` to ``handler(cpu, decoded)``.

        Only keys without a core handler can be claimed, and each only once.
        """

        key = instruction.key
        if key in self.instruction_table:
            raise ValueError(f"opcode {instruction.pattern} is handled by the core instruction set")
        if key in self._extensions:
            existing = self._extensions[key][0]
            raise ValueError(f"opcode {instruction.pattern} already registered as {existing.mnemonic}")
        self._extensions[key] = (instruction, handler)

    def _fetch(self) -> int:
        word = self.memory.load16(self.state.pc)
        self.state.pc += 2
        return word

    def _resolve(
        self, decoded: DecodedInstruction, pc: int
    ) -> Tuple[Instruction, Callable[[DecodedInstruction], None]]:
        key = dispatch_key(decoded)
        instruction = self.instruction_table.get(key)
        if instruction is not None:
            handler = getattr(self, instruction.handler, None)
            if handler is None:
                raise CPUError(f"handler '{instruction.handler}' not implemented")
            return instruction, handler

        extension = self._extensions.get(key)
        if extension is not None:
            instruction, ext_handler = extension
            return instruction, partial(ext_handler, self)

        raise UnimplementedOpcode(decoded.word, pc)

    # ------------------------------------------------------------------
    # Timers

    def decrement_delay_timer(self) -> None:
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

    def decrement_sound_timer(self) -> None:
        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    def tick_timers(self) -> None:
        """Advance both timers by one 60 Hz tick."""

        self.decrement_delay_timer()
        self.decrement_sound_timer()
        if debug_enabled("timer"):
            debug_log("timer", "dt=%d st=%d", self.state.delay_timer, self.state.sound_timer)

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_cls(self, _: DecodedInstruction) -> None:
        self.framebuffer.clear()

    def op_ret(self, _: DecodedInstruction) -> None:
        self.state.pc = self.stack.pop()
        if debug_enabled("stack"):
            debug_log("stack", "ret -> %03x depth=%d", self.state.pc, len(self.stack))

    def op_jp(self, op: DecodedInstruction) -> None:
        self.state.pc = op.nnn

    def op_call(self, op: DecodedInstruction) -> None:
        self.stack.push(self.state.pc)
        self.state.pc = op.nnn
        if debug_enabled("stack"):
            debug_log("stack", "call %03x depth=%d", op.nnn, len(self.stack))

    def op_se_immediate(self, op: DecodedInstruction) -> None:
        if self.state.read(op.x) == op.nn:
            self._skip()

    def op_sne_immediate(self, op: DecodedInstruction) -> None:
        if self.state.read(op.x) != op.nn:
            self._skip()

    def op_se_register(self, op: DecodedInstruction) -> None:
        if self.state.read(op.x) == self.state.read(op.y):
            self._skip()

    def op_sne_register(self, op: DecodedInstruction) -> None:
        if self.state.read(op.x) != self.state.read(op.y):
            self._skip()

    def op_ld_immediate(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, op.nn)

    def op_add_immediate(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.state.read(op.x) + op.nn)

    def op_ld_register(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.state.read(op.y))

    def op_or(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.state.read(op.x) | self.state.read(op.y))

    def op_and(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.state.read(op.x) & self.state.read(op.y))

    def op_xor(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.state.read(op.x) ^ self.state.read(op.y))

    def op_add_register(self, op: DecodedInstruction) -> None:
        total = self.state.read(op.x) + self.state.read(op.y)
        self.state.set_flag(1 if total > 0xFF else 0)
        self.state.write(op.x, total)

    def op_sub(self, op: DecodedInstruction) -> None:
        vx = self.state.read(op.x)
        vy = self.state.read(op.y)
        self.state.set_flag(1 if vx > vy else 0)
        self.state.write(op.x, vx - vy)

    def op_subn(self, op: DecodedInstruction) -> None:
        vx = self.state.read(op.x)
        vy = self.state.read(op.y)
        self.state.set_flag(1 if vy > vx else 0)
        self.state.write(op.x, vy - vx)

    def op_shr(self, op: DecodedInstruction) -> None:
        vx = self.state.read(op.x)
        self.state.set_flag(vx & 0x01)
        self.state.write(op.x, vx >> 1)

    def op_shl(self, op: DecodedInstruction) -> None:
        vx = self.state.read(op.x)
        if self.raw_shift_left_flag:
            self.state.set_flag(vx & 0x80)
        else:
            self.state.set_flag((vx >> 7) & 0x01)
        self.state.write(op.x, vx << 1)

    def op_ld_index(self, op: DecodedInstruction) -> None:
        self.state.index = op.nnn

    def op_jp_offset(self, op: DecodedInstruction) -> None:
        # An out-of-range target faults on the next fetch.
        self.state.pc = op.nnn + self.state.read(0)

    def op_rnd(self, op: DecodedInstruction) -> None:
        self.state.write(op.x, self.random_byte() & op.nn)

    def op_drw(self, op: DecodedInstruction) -> None:
        framebuffer = self.framebuffer
        origin_x = self.state.read(op.x) % framebuffer.width
        origin_y = self.state.read(op.y) % framebuffer.height
        # Rows past the bottom edge end the whole draw. A sprite read fault
        # leaves VF and the grid untouched.
        visible = min(op.n, framebuffer.height - origin_y)
        sprite_rows = self.memory.read_block(self.state.index, visible)
        self.state.set_flag(0)

        collided = False
        for row, sprite in enumerate(sprite_rows):
            y = origin_y + row
            for column in range(SPRITE_WIDTH):
                x = origin_x + column
                if x >= framebuffer.width:
                    break
                if sprite & (0x80 >> column) and framebuffer.toggle(x, y):
                    collided = True

        if collided:
            self.state.set_flag(1)
        if debug_enabled("draw"):
            debug_log(
                "draw",
                "at=(%d,%d) rows=%d I=%03x collision=%d",
                origin_x,
                origin_y,
                op.n,
                self.state.index,
                self.state.read(FLAG_REGISTER),
            )

    # ------------------------------------------------------------------
    # Helpers

    def _skip(self) -> None:
        self.state.pc += 2
