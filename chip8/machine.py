"""The CHIP-8 virtual machine: state ownership and the fetch-decode-execute cycle."""

import logging
from typing import Optional
from .cpu import CPU, ENTRY_ADDRESS
from .decoder import decode
from .display import Framebuffer
from .errors import CHIP8Error
from .instructions import Devices, execute_instruction
from .keypad import Keypad
from .memory import Memory
from .rng import RandomSource, SeededRandomSource

logger = logging.getLogger(__name__)


class Machine:
    """A complete CHIP-8 machine driven one tick at a time.

    Each tick decrements the delay and sound timers and executes exactly one
    instruction. Failures raise a CHIP8Error subclass and leave the machine as
    it was before the instruction, apart from the timer step already taken.
    """

    def __init__(self, seed: int = 0, random_source: Optional[RandomSource] = None):
        self.cpu = CPU(start_address=ENTRY_ADDRESS)
        self.memory = Memory()
        self.display = Framebuffer()
        self.keypad = Keypad()
        self.random_source = random_source if random_source is not None else SeededRandomSource()
        self.random_source.seed(seed)
        self._devices = Devices(self.display, self.keypad, self.random_source)
        self.last_opcode: Optional[int] = None

    def load_program(self, offset: int, data: bytes) -> None:
        """Copy a program image into memory at offset.

        Raises:
            OutOfMemory: if offset + len(data) exceeds 4096
        """
        self.memory.load(offset, bytes(data))
        logger.debug("Loaded %d bytes at 0x%03X", len(data), offset)

    def reset(self, seed: int = 0) -> None:
        """Return to the post-construction state. The program is not reloaded."""
        self.cpu.reset(start_address=ENTRY_ADDRESS)
        self.memory.reset()
        self.display.clear()
        self.keypad.reset()
        self.last_opcode = None
        self.random_source.seed(seed)
        logger.debug("Machine reset with seed %d", seed)

    def set_key(self, index: int, pressed: bool) -> None:
        """Set a keypad key; indices outside 0..15 are ignored."""
        self.keypad.set_key(index, pressed)

    def tick(self) -> None:
        """Advance the timers and execute one instruction.

        The fetched word is kept in last_opcode, so callers see what ran even
        when the instruction rewrote its own bytes.
        """
        cpu = self.cpu
        cpu.tick_timers()

        addr = cpu.pc
        word = self.memory.read_word(addr)
        self.last_opcode = word
        cpu.pc = addr + 2

        try:
            instr = decode(word, addr=addr)
            new_pc = execute_instruction(instr, cpu, self.memory, self._devices)
        except CHIP8Error as e:
            cpu.pc = addr
            # Attach context
            if e.addr is None:
                e.addr = addr
            if e.opcode is None:
                e.opcode = word
            raise

        if new_pc is not None:
            if instr.opcode in ("2NNN", "00EE"):
                logger.debug("%s at 0x%03X -> 0x%03X (depth %d)", instr.text, addr, new_pc, cpu.sp)
            cpu.pc = new_pc

    def framebuffer(self) -> tuple[bool, ...]:
        """Read-only view of the 64x32 screen, row-major."""
        return self.display.pixels()

    def tone(self) -> bool:
        """True while the sound timer is running."""
        return self.cpu.sound_timer > 0

    def get_state(self) -> dict:
        """Get current machine state as dictionary."""
        state = self.cpu.get_state()
        state["key"] = self.keypad.pressed_key()
        state["tone"] = self.tone()
        return state

    def __str__(self) -> str:
        cpu = self.cpu
        key = self.keypad.pressed_key()
        lines = [
            f"PC: {cpu.pc:04X} SP: {cpu.sp:02X} I: {cpu.index:04X} "
            f"KEY: {'None' if key is None else key}",
            f"DT: {cpu.delay_timer:02X} ST: {cpu.sound_timer:02X} "
            f"Stack: [{', '.join(f'{a:03X}' for a in cpu.stack[:cpu.sp])}]",
        ]
        for row in range(0, 16, 4):
            lines.append(" ".join(
                f"V{r:X}: {cpu.registers[r]:02X}" for r in range(row, row + 4)
            ))
        return "\n".join(lines)
