"""CPU package for the CHIP-8 emulator."""

from .core import Chip8CPU, ExtensionHandler
from .decoder import DecodedInstruction, decode
from .errors import CPUError, StackUnderflow, UnimplementedOpcode
from .opcodes import Instruction
from .state import FLAG_REGISTER, CallStack, RegisterFile
from . import opcodes

__all__ = [
    "Chip8CPU",
    "ExtensionHandler",
    "CallStack",
    "RegisterFile",
    "FLAG_REGISTER",
    "DecodedInstruction",
    "Instruction",
    "decode",
    "CPUError",
    "StackUnderflow",
    "UnimplementedOpcode",
    "opcodes",
]
