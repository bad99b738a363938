"""Tests for the Decoder module."""

import pytest
from chip8.decoder import (
    classify,
    decode,
    disassemble,
    disassemble_program,
    MNEMONIC_FORMATS,
    VALID_OPCODES,
)
from chip8.errors import IllegalOpcode


class TestDecode:
    """Instruction decoding tests."""

    def test_field_extraction(self):
        """All fields are split out of the word."""
        instr = decode(0xD12F, addr=0x208)
        assert instr.addr == 0x208
        assert instr.raw == 0xD12F
        assert instr.opcode == "DXYN"
        assert instr.family == 0xD
        assert instr.x == 0x1
        assert instr.y == 0x2
        assert instr.n == 0xF
        assert instr.nn == 0x2F
        assert instr.nnn == 0x12F

    @pytest.mark.parametrize(
        "word,opcode",
        [
            (0x0000, "0000"),
            (0x00E0, "00E0"),
            (0x00EE, "00EE"),
            (0x0100, "0000"),
            (0x1ABC, "1NNN"),
            (0x5001, "5XY0"),
            (0x9AB7, "9XY0"),
            (0x812E, "8XYE"),
            (0xE19E, "EX9E"),
            (0xF50A, "FX0A"),
            (0xF265, "FX65"),
        ],
    )
    def test_classify_legal(self, word, opcode):
        """Legal words map to their pattern."""
        assert classify(word) == opcode

    @pytest.mark.parametrize(
        "word",
        [0x0123, 0x00E1, 0x00FF, 0x8008, 0x800F, 0xE000, 0xE19F, 0xF000, 0xF0FF, 0xF056],
    )
    def test_classify_illegal(self, word):
        """Words outside the instruction set are rejected."""
        assert classify(word) is None

    def test_decode_illegal_raises(self):
        """Decoding an illegal word raises with context."""
        with pytest.raises(IllegalOpcode) as exc:
            decode(0x0123, addr=0x20A)
        assert exc.value.opcode == 0x0123
        assert exc.value.addr == 0x20A

    def test_every_valid_opcode_has_format(self):
        """Disassembly knows every pattern."""
        assert set(MNEMONIC_FORMATS) == VALID_OPCODES


class TestDisassemble:
    """Disassembler tests."""

    @pytest.mark.parametrize(
        "word,text",
        [
            (0x00E0, "CLS"),
            (0x00EE, "RET"),
            (0x12A0, "JP 0x2A0"),
            (0x2300, "CALL 0x300"),
            (0x610F, "LD V1, 0x0F"),
            (0x8AB4, "ADD VA, VB"),
            (0x8C06, "SHR VC"),
            (0xA050, "LD I, 0x050"),
            (0xB210, "JP V0, 0x210"),
            (0xD015, "DRW V0, V1, 5"),
            (0xE3A1, "SKNP V3"),
            (0xF70A, "LD V7, K"),
            (0xF233, "LD B, V2"),
            (0xFE55, "LD [I], VE"),
        ],
    )
    def test_mnemonics(self, word, text):
        """Words render as conventional mnemonics."""
        assert disassemble(word) == text

    def test_illegal_renders_as_data(self):
        """Illegal words never raise during disassembly."""
        assert disassemble(0x0123) == "DW 0x0123"

    def test_program_listing(self):
        """Program listing pairs addresses with text, odd byte last."""
        listing = disassemble_program(bytes([0x60, 0x05, 0x00, 0xE0, 0x12]))
        assert listing == [
            (0x200, "LD V0, 0x05"),
            (0x202, "CLS"),
            (0x204, "DB 0x12"),
        ]
