"""CHIP-8 emulator package."""

from chipjax.state import EmulatorState, create_state
from chipjax.emulator import execute, fetch, tick, run_ticks, load_rom, load_rom_bytes
from chipjax.decode import DecodedInstruction, decode
from chipjax.disassemble import disassemble, disassemble_rom
from chipjax.errors import (
    Chip8Error, RomLoadError, EmulatorFault, StackOverflowError,
    StackUnderflowError, MemoryAccessError, check_fault,
)
from chipjax.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "tick",
    "run_ticks",
    "load_rom",
    "load_rom_bytes",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "disassemble_rom",
    "Chip8Error",
    "RomLoadError",
    "EmulatorFault",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "check_fault",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
