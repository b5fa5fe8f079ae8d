"""Opcode metadata and the dispatch table for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Final, Iterable, Mapping, Optional, Tuple

from .decoder import DecodedInstruction

DispatchKey = Tuple[int, Optional[int]]

# Groups that need a second field to pick the operation.
SELECTOR_FIELDS: Final[Mapping[int, str]] = MappingProxyType({
    0x0: "nn",
    0x8: "n",
    0xE: "nn",
    0xF: "nn",
})


def dispatch_key(decoded: DecodedInstruction) -> DispatchKey:
    """Return ``(first, selector)`` for ``decoded``; selector is None for single-op groups."""

    selector_field = SELECTOR_FIELDS.get(decoded.first)
    if selector_field is None:
        return (decoded.first, None)
    return (decoded.first, getattr(decoded, selector_field))


@dataclass(frozen=True)
class Instruction:
    """Metadata describing a single CHIP-8 operation."""

    group: int
    selector: Optional[int]
    pattern: str
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.group <= 0xF:
            raise ValueError(f"group out of range: {self.group}")
        expects_selector = self.group in SELECTOR_FIELDS
        if expects_selector and self.selector is None:
            raise ValueError(f"group {self.group:X} needs a selector")
        if not expects_selector and self.selector is not None:
            raise ValueError(f"group {self.group:X} takes no selector")

    @property
    def key(self) -> DispatchKey:
        return (self.group, self.selector)


class OpcodeTable:
    """Mutable builder for the ``(first, selector)`` dispatch table."""

    def __init__(self) -> None:
        self._table: Dict[DispatchKey, Instruction] = {}

    def register(self, instruction: Instruction) -> None:
        key = instruction.key
        existing = self._table.get(key)
        if existing is not None:
            raise ValueError(f"opcode {instruction.pattern} already registered as {existing.mnemonic}")
        self._table[key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[DispatchKey, Instruction]:
        return MappingProxyType(dict(self._table))


def build_instruction_table(instructions: Iterable[Instruction]) -> Mapping[DispatchKey, Instruction]:
    """Build a read-only dispatch table from ``instructions``."""

    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


DEFAULT_INSTRUCTIONS: Tuple[Instruction, ...] = (
    Instruction(0x0, 0xE0, "00E0", "CLS", "op_cls"),
    Instruction(0x0, 0xEE, "00EE", "RET", "op_ret"),
    Instruction(0x1, None, "1NNN", "JP", "op_jp"),
    Instruction(0x2, None, "2NNN", "CALL", "op_call"),
    Instruction(0x3, None, "3XNN", "SE", "op_se_immediate"),
    Instruction(0x4, None, "4XNN", "SNE", "op_sne_immediate"),
    Instruction(0x5, None, "5XY0", "SE", "op_se_register"),
    Instruction(0x6, None, "6XNN", "LD", "op_ld_immediate"),
    Instruction(0x7, None, "7XNN", "ADD", "op_add_immediate"),
    # ALU
    Instruction(0x8, 0x0, "8XY0", "LD", "op_ld_register"),
    Instruction(0x8, 0x1, "8XY1", "OR", "op_or"),
    Instruction(0x8, 0x2, "8XY2", "AND", "op_and"),
    Instruction(0x8, 0x3, "8XY3", "XOR", "op_xor"),
    Instruction(0x8, 0x4, "8XY4", "ADD", "op_add_register"),
    Instruction(0x8, 0x5, "8XY5", "SUB", "op_sub"),
    Instruction(0x8, 0x6, "8XY6", "SHR", "op_shr"),
    Instruction(0x8, 0x7, "8XY7", "SUBN", "op_subn"),
    Instruction(0x8, 0xE, "8XYE", "SHL", "op_shl"),
    Instruction(0x9, None, "9XY0", "SNE", "op_sne_register"),
    Instruction(0xA, None, "ANNN", "LD", "op_ld_index"),
    Instruction(0xB, None, "BNNN", "JP", "op_jp_offset"),
    Instruction(0xC, None, "CXNN", "RND", "op_rnd"),
    Instruction(0xD, None, "DXYN", "DRW", "op_drw"),
)


OPCODE_TABLE: Mapping[DispatchKey, Instruction] = build_instruction_table(DEFAULT_INSTRUCTIONS)


__all__ = [
    "DispatchKey",
    "Instruction",
    "OpcodeTable",
    "OPCODE_TABLE",
    "DEFAULT_INSTRUCTIONS",
    "SELECTOR_FIELDS",
    "build_instruction_table",
    "dispatch_key",
]
