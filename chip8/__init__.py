"""CHIP-8 Interpreter Core Package."""

from .machine import Machine
from .runner import run_program, RunOptions, RunResult
from .errors import (
    CHIP8Error,
    OutOfMemory,
    StackOverflow,
    StackUnderflow,
    IllegalOpcode,
    IllegalAddress,
    Halt,
)

__all__ = [
    "Machine",
    "run_program",
    "RunOptions",
    "RunResult",
    "CHIP8Error",
    "OutOfMemory",
    "StackOverflow",
    "StackUnderflow",
    "IllegalOpcode",
    "IllegalAddress",
    "Halt",
]
