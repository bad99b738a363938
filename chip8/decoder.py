"""Instruction decoder and disassembler for CHIP-8 machine code."""

from dataclasses import dataclass
from typing import Optional
from .errors import IllegalOpcode


# Valid opcode patterns, named after their encoding
VALID_OPCODES = {
    "0000",
    "00E0",
    "00EE",
    "1NNN",
    "2NNN",
    "3XNN",
    "4XNN",
    "5XY0",
    "6XNN",
    "7XNN",
    "8XY0",
    "8XY1",
    "8XY2",
    "8XY3",
    "8XY4",
    "8XY5",
    "8XY6",
    "8XY7",
    "8XYE",
    "9XY0",
    "ANNN",
    "BNNN",
    "CXNN",
    "DXYN",
    "EX9E",
    "EXA1",
    "FX07",
    "FX0A",
    "FX15",
    "FX18",
    "FX1E",
    "FX29",
    "FX33",
    "FX55",
    "FX65",
}

# Families fully selected by the top nibble
_SINGLE_PATTERN_FAMILIES = {
    0x1: "1NNN",
    0x2: "2NNN",
    0x3: "3XNN",
    0x4: "4XNN",
    0x5: "5XY0",  # low nibble is not checked
    0x6: "6XNN",
    0x7: "7XNN",
    0x9: "9XY0",  # low nibble is not checked
    0xA: "ANNN",
    0xB: "BNNN",
    0xC: "CXNN",
    0xD: "DXYN",
}

_SYSTEM_OPCODES = {0x00: "0000", 0xE0: "00E0", 0xEE: "00EE"}
_ALU_OPCODES = {n: f"8XY{n:X}" for n in (0x0, 0x1, 0x2, 0x3, 0x4, 0x5, 0x6, 0x7, 0xE)}
_KEY_OPCODES = {0x9E: "EX9E", 0xA1: "EXA1"}
_MISC_OPCODES = {
    nn: f"FX{nn:02X}"
    for nn in (0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65)
}

# Disassembly templates
MNEMONIC_FORMATS = {
    "0000": "NOP",
    "00E0": "CLS",
    "00EE": "RET",
    "1NNN": "JP {nnn}",
    "2NNN": "CALL {nnn}",
    "3XNN": "SE V{x}, {nn}",
    "4XNN": "SNE V{x}, {nn}",
    "5XY0": "SE V{x}, V{y}",
    "6XNN": "LD V{x}, {nn}",
    "7XNN": "ADD V{x}, {nn}",
    "8XY0": "LD V{x}, V{y}",
    "8XY1": "OR V{x}, V{y}",
    "8XY2": "AND V{x}, V{y}",
    "8XY3": "XOR V{x}, V{y}",
    "8XY4": "ADD V{x}, V{y}",
    "8XY5": "SUB V{x}, V{y}",
    "8XY6": "SHR V{x}",
    "8XY7": "SUBN V{x}, V{y}",
    "8XYE": "SHL V{x}",
    "9XY0": "SNE V{x}, V{y}",
    "ANNN": "LD I, {nnn}",
    "BNNN": "JP V0, {nnn}",
    "CXNN": "RND V{x}, {nn}",
    "DXYN": "DRW V{x}, V{y}, {n}",
    "EX9E": "SKP V{x}",
    "EXA1": "SKNP V{x}",
    "FX07": "LD V{x}, DT",
    "FX0A": "LD V{x}, K",
    "FX15": "LD DT, V{x}",
    "FX18": "LD ST, V{x}",
    "FX1E": "ADD I, V{x}",
    "FX29": "LD F, V{x}",
    "FX33": "LD B, V{x}",
    "FX55": "LD [I], V{x}",
    "FX65": "LD V{x}, [I]",
}


@dataclass(frozen=True)
class Instruction:
    """Decoded instruction word with extracted fields."""
    addr: int
    raw: int
    opcode: str  # Pattern name from VALID_OPCODES
    family: int  # First nibble
    x: int  # Second nibble (Vx register)
    y: int  # Third nibble (Vy register)
    n: int  # Fourth nibble
    nn: int  # Low byte
    nnn: int  # Low 12 bits

    @property
    def text(self) -> str:
        """Assembly-style mnemonic text."""
        return MNEMONIC_FORMATS[self.opcode].format(
            x=f"{self.x:X}",
            y=f"{self.y:X}",
            n=self.n,
            nn=f"0x{self.nn:02X}",
            nnn=f"0x{self.nnn:03X}",
        )


def classify(word: int) -> Optional[str]:
    """Return the opcode pattern for an instruction word, or None if illegal."""
    family = (word & 0xF000) >> 12
    n = word & 0x000F
    nn = word & 0x00FF

    if family in _SINGLE_PATTERN_FAMILIES:
        return _SINGLE_PATTERN_FAMILIES[family]
    if family == 0x0:
        return _SYSTEM_OPCODES.get(nn)
    if family == 0x8:
        return _ALU_OPCODES.get(n)
    if family == 0xE:
        return _KEY_OPCODES.get(nn)
    return _MISC_OPCODES.get(nn)


def decode(word: int, addr: int = 0) -> Instruction:
    """Decode a 16-bit instruction word fetched from addr.

    Raises:
        IllegalOpcode: if the word matches no defined encoding
    """
    word &= 0xFFFF
    opcode = classify(word)
    if opcode is None:
        raise IllegalOpcode(
            f"Illegal opcode 0x{word:04X} at 0x{addr:03X}",
            addr=addr,
            opcode=word,
        )
    return Instruction(
        addr=addr,
        raw=word,
        opcode=opcode,
        family=(word & 0xF000) >> 12,
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


def disassemble(word: int) -> str:
    """Render a word as mnemonic text; illegal words render as a DW directive."""
    word &= 0xFFFF
    if classify(word) is None:
        return f"DW 0x{word:04X}"
    return decode(word).text


def disassemble_program(data: bytes, start_address: int = 0x200) -> list[tuple[int, str]]:
    """Disassemble a program image word by word.

    A trailing odd byte is rendered as a DB directive.
    """
    listing = []
    for offset in range(0, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        listing.append((start_address + offset, disassemble(word)))
    if len(data) % 2:
        listing.append((start_address + len(data) - 1, f"DB 0x{data[-1]:02X}"))
    return listing
