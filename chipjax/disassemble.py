"""Human-readable mnemonics for CHIP-8 instruction words."""

from typing import Iterator, Tuple

from chipjax.decode import decode
from chipjax.constants import PROGRAM_START

_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR",
    0x4: "ADD", 0x5: "SUB", 0x7: "SUBN",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Return the mnemonic for a 16-bit instruction word.

    Words the interpreter does not execute come back as ``DW 0xNNNN``,
    including machine-code calls ``0NNN``.
    """
    inst = decode(int(instruction) & 0xFFFF)
    x, y = inst.x, inst.y

    if inst.opcode == 0x0:
        if inst.raw == 0x00E0:
            return "CLS"
        if inst.raw == 0x00EE:
            return "RET"
    if inst.opcode == 0x1:
        return f"JP 0x{inst.nnn:03X}"
    if inst.opcode == 0x2:
        return f"CALL 0x{inst.nnn:03X}"
    if inst.opcode == 0x3:
        return f"SE V{x:X}, 0x{inst.kk:02X}"
    if inst.opcode == 0x4:
        return f"SNE V{x:X}, 0x{inst.kk:02X}"
    if inst.opcode == 0x5:
        return f"SE V{x:X}, V{y:X}"
    if inst.opcode == 0x6:
        return f"LD V{x:X}, 0x{inst.kk:02X}"
    if inst.opcode == 0x7:
        return f"ADD V{x:X}, 0x{inst.kk:02X}"
    if inst.opcode == 0x8:
        if inst.n in _ALU_MNEMONICS:
            return f"{_ALU_MNEMONICS[inst.n]} V{x:X}, V{y:X}"
        if inst.n == 0x6:
            return f"SHR V{x:X}"
        if inst.n == 0xE:
            return f"SHL V{x:X}"
    if inst.opcode == 0x9:
        return f"SNE V{x:X}, V{y:X}"
    if inst.opcode == 0xA:
        return f"LD I, 0x{inst.nnn:03X}"
    if inst.opcode == 0xB:
        return f"JP V0, 0x{inst.nnn:03X}"
    if inst.opcode == 0xC:
        return f"RND V{x:X}, 0x{inst.kk:02X}"
    if inst.opcode == 0xD:
        return f"DRW V{x:X}, V{y:X}, {inst.n}"
    if inst.opcode == 0xE:
        if inst.kk == 0x9E:
            return f"SKP V{x:X}"
        if inst.kk == 0xA1:
            return f"SKNP V{x:X}"
    if inst.opcode == 0xF and inst.kk in _MISC_FORMATS:
        return _MISC_FORMATS[inst.kk].format(x=x)
    return f"DW 0x{inst.raw:04X}"


def disassemble_rom(rom_data: bytes, start: int = PROGRAM_START) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, word, mnemonic)`` for each 2-byte word of a ROM.

    A trailing odd byte is reported as a word padded with zero.
    """
    for offset in range(0, len(rom_data), 2):
        high = rom_data[offset]
        low = rom_data[offset + 1] if offset + 1 < len(rom_data) else 0
        word = (high << 8) | low
        yield start + offset, word, disassemble(word)
