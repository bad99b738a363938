"""Ensure every opcode has a dedicated behavioral test."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import pytest

from chip8 import Machine
from chip8.decoder import VALID_OPCODES
from chip8.instructions import INSTRUCTION_EXECUTORS
from chip8.rng import FixedRandomSource


def expect_reg(x: int, value: int) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.registers[x] == value

    return _check


def expect_pc(value: int) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.pc == value

    return _check


def expect_index(value: int) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.index == value

    return _check


def expect_mem(addr: int, data: bytes) -> Callable:
    def _check(machine: Machine):
        assert machine.memory.read_block(addr, len(data)) == data

    return _check


def expect_pixels(count: int) -> Callable:
    def _check(machine: Machine):
        assert sum(machine.framebuffer()) == count

    return _check


def expect_sp(value: int) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.sp == value

    return _check


def expect_stack(addrs: list[int]) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.stack[:machine.cpu.sp] == addrs

    return _check


def expect_delay(value: int) -> Callable:
    def _check(machine: Machine):
        assert machine.cpu.delay_timer == value

    return _check


def expect_tone(value: bool) -> Callable:
    def _check(machine: Machine):
        assert machine.tone() is value

    return _check


def expect_all(*checks: Callable) -> Callable:
    def _check(machine: Machine):
        for check in checks:
            check(machine)

    return _check


@dataclass
class InstructionCase:
    opcode: str
    words: list[int]
    checker: Callable
    keys_down: list[int] = field(default_factory=list)


INSTRUCTION_CASES = [
    InstructionCase("0000", [0x0000], expect_pc(0x202)),
    InstructionCase("00E0", [0xD005, 0x00E0], expect_pixels(0)),
    InstructionCase("00EE", [0x2204, 0x0000, 0x00EE], expect_all(expect_pc(0x204), expect_sp(0))),
    InstructionCase("1NNN", [0x1208], expect_pc(0x208)),
    InstructionCase("2NNN", [0x2208], expect_all(expect_pc(0x208), expect_stack([0x202]))),
    InstructionCase("3XNN", [0x3000], expect_pc(0x204)),
    InstructionCase("4XNN", [0x4001], expect_pc(0x204)),
    InstructionCase("5XY0", [0x6101, 0x6001, 0x5010], expect_pc(0x208)),
    InstructionCase("6XNN", [0x6A7F], expect_reg(0xA, 0x7F)),
    InstructionCase("7XNN", [0x6005, 0x7003], expect_reg(0, 8)),
    InstructionCase("8XY0", [0x6109, 0x8010], expect_reg(0, 9)),
    InstructionCase("8XY1", [0x600C, 0x6103, 0x8011], expect_reg(0, 0x0F)),
    InstructionCase("8XY2", [0x600C, 0x6106, 0x8012], expect_reg(0, 0x04)),
    InstructionCase("8XY3", [0x600C, 0x6106, 0x8013], expect_reg(0, 0x0A)),
    InstructionCase("8XY4", [0x60FF, 0x6102, 0x8014], expect_all(expect_reg(0, 1), expect_reg(0xF, 1))),
    InstructionCase("8XY5", [0x6001, 0x6102, 0x8015], expect_all(expect_reg(0, 0xFF), expect_reg(0xF, 0))),
    InstructionCase("8XY6", [0x6005, 0x8006], expect_all(expect_reg(0, 2), expect_reg(0xF, 1))),
    InstructionCase("8XY7", [0x6001, 0x6103, 0x8017], expect_all(expect_reg(0, 2), expect_reg(0xF, 1))),
    InstructionCase("8XYE", [0x6040, 0x800E], expect_all(expect_reg(0, 0x80), expect_reg(0xF, 0))),
    InstructionCase("9XY0", [0x6101, 0x9010], expect_pc(0x206)),
    InstructionCase("ANNN", [0xA123], expect_index(0x123)),
    InstructionCase("BNNN", [0x6004, 0xB300], expect_pc(0x304)),
    InstructionCase("CXNN", [0xC0F0], expect_reg(0, 0x37 % 0xF0)),
    InstructionCase("DXYN", [0xA000, 0xD005], expect_all(expect_pixels(14), expect_reg(0xF, 0))),
    InstructionCase("EX9E", [0x6004, 0xE09E], expect_pc(0x206), keys_down=[4]),
    InstructionCase("EXA1", [0x6004, 0xE0A1], expect_pc(0x206), keys_down=[5]),
    InstructionCase("FX07", [0x6009, 0xF015, 0xF207], expect_reg(2, 8)),
    InstructionCase("FX0A", [0x6006, 0xF00A], expect_pc(0x204), keys_down=[6]),
    InstructionCase("FX15", [0x6009, 0xF015], expect_delay(9)),
    InstructionCase("FX18", [0x6009, 0xF018], expect_tone(True)),
    InstructionCase("FX1E", [0xA100, 0x6020, 0xF01E], expect_index(0x120)),
    InstructionCase("FX29", [0x600F, 0xF029], expect_index(75)),
    InstructionCase("FX33", [0x607B, 0xA300, 0xF033], expect_mem(0x300, bytes([1, 2, 3]))),
    InstructionCase("FX55", [0x6011, 0x6122, 0xA300, 0xF155], expect_mem(0x300, bytes([0x11, 0x22]))),
    InstructionCase("FX65", [0xA200, 0xF165], expect_all(expect_reg(0, 0xA2), expect_reg(1, 0x00))),
]


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.opcode)
def test_all_instructions_have_behavioral_tests(case: InstructionCase):
    machine = Machine(random_source=FixedRandomSource([0x37]))
    machine.load_program(0x200, b"".join(w.to_bytes(2, "big") for w in case.words))
    for key in case.keys_down:
        machine.set_key(key, True)
    for _ in case.words:
        machine.tick()
    case.checker(machine)


def test_instruction_case_coverage_matches_valid_opcodes():
    covered = {case.opcode for case in INSTRUCTION_CASES}
    assert covered == VALID_OPCODES


def test_every_valid_opcode_has_an_executor():
    assert set(INSTRUCTION_EXECUTORS) == VALID_OPCODES
