"""Custom exceptions for the CHIP-8 interpreter."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    tick: int
    addr: Optional[int]
    opcode: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "tick": self.tick,
            "addr": self.addr,
            "opcode": self.opcode,
        }


class CHIP8Error(Exception):
    """Base exception for all interpreter errors."""

    def __init__(
        self,
        message: str,
        addr: Optional[int] = None,
        opcode: Optional[int] = None,
        tick: int = 0,
    ):
        super().__init__(message)
        self.message = message
        self.addr = addr
        self.opcode = opcode
        self.tick = tick

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            tick=self.tick,
            addr=self.addr,
            opcode=self.opcode,
        )


class OutOfMemory(CHIP8Error):
    """Read or write beyond the 4096-byte address space."""
    pass


class StackOverflow(CHIP8Error):
    """Subroutine call with all 16 stack slots in use."""
    pass


class StackUnderflow(CHIP8Error):
    """Return executed on an empty stack."""
    pass


class IllegalOpcode(CHIP8Error):
    """Instruction word matches no defined encoding."""
    pass


class IllegalAddress(CHIP8Error):
    """Computed target outside the 12-bit address space."""
    pass


class Halt(CHIP8Error):
    """Clean stop requested by the driving loop. Never raised by the machine."""

    def __init__(self, message: str = "Halted", exit_code: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.exit_code = exit_code
