"""CPU state model for the CHIP-8 interpreter."""

from .errors import StackOverflow, StackUnderflow

ENTRY_ADDRESS = 0x200
REGISTER_COUNT = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF

_BYTE_MASK = 0xFF
_WORD_MASK = 0xFFFF


class CPU:
    """Register file, index, program counter, call stack and timers."""

    def __init__(self, start_address: int = ENTRY_ADDRESS):
        self.registers: list[int] = [0] * REGISTER_COUNT
        self.index: int = 0
        self.pc: int = start_address
        self.stack: list[int] = [0] * STACK_SIZE
        self.sp: int = 0
        self.delay_timer: int = 0
        self.sound_timer: int = 0

    def set_register(self, x: int, value: int) -> None:
        """Set Vx, wrapping to 8 bits."""
        self.registers[x] = value & _BYTE_MASK

    def set_flag(self, value: bool) -> None:
        """Overwrite VF with 1 or 0."""
        self.registers[FLAG_REGISTER] = 1 if value else 0

    def set_index(self, value: int) -> None:
        """Set I, wrapping to 16 bits."""
        self.index = value & _WORD_MASK

    def push(self, addr: int) -> None:
        """Push a return address."""
        if self.sp >= STACK_SIZE:
            raise StackOverflow(f"Call stack overflow at depth {self.sp}")
        self.stack[self.sp] = addr & _WORD_MASK
        self.sp += 1

    def pop(self) -> int:
        """Pop a return address."""
        if self.sp == 0:
            raise StackUnderflow("Return with empty call stack")
        self.sp -= 1
        return self.stack[self.sp]

    def tick_timers(self) -> None:
        """Decrement both timers towards zero."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        return {
            "pc": self.pc,
            "index": self.index,
            "sp": self.sp,
            "registers": list(self.registers),
            "stack": self.stack[:self.sp],
            "delay_timer": self.delay_timer,
            "sound_timer": self.sound_timer,
        }

    def reset(self, start_address: int = ENTRY_ADDRESS) -> None:
        """Reset CPU to initial state."""
        self.registers = [0] * REGISTER_COUNT
        self.index = 0
        self.pc = start_address
        self.stack = [0] * STACK_SIZE
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
