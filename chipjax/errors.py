"""Exceptions raised by the emulator and ROM loader."""

from chipjax.constants import (
    FAULT_NONE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW, FAULT_MEMORY_BOUNDS,
)


class Chip8Error(Exception):
    """Base class for all emulator errors."""


class RomLoadError(Chip8Error):
    """The ROM could not be read or does not fit in program memory."""


class EmulatorFault(Chip8Error):
    """The machine halted on a fatal condition while executing a ROM."""

    def __init__(self, message: str, pc: int):
        super().__init__(message)
        self.pc = pc


class StackOverflowError(EmulatorFault):
    pass


class StackUnderflowError(EmulatorFault):
    pass


class MemoryAccessError(EmulatorFault):
    pass


_FAULTS = {
    FAULT_STACK_OVERFLOW: (StackOverflowError, "Stack overflow on CALL"),
    FAULT_STACK_UNDERFLOW: (StackUnderflowError, "Stack underflow on RET"),
    FAULT_MEMORY_BOUNDS: (MemoryAccessError, "Memory access out of bounds"),
}


def check_fault(state) -> None:
    """Raise the exception matching ``state.fault``, if the machine has halted."""
    code = int(state.fault)
    if code == FAULT_NONE:
        return
    error_cls, description = _FAULTS[code]
    pc = int(state.pc)
    raise error_cls(f"{description} at 0x{pc:03X} (I=0x{int(state.I):03X})", pc)
