"""Headless program runner with tracing for the CHIP-8 interpreter."""

import logging
from dataclasses import dataclass, field
from typing import Optional
from .cpu import ENTRY_ADDRESS
from .decoder import disassemble
from .errors import CHIP8Error, ErrorInfo, Halt
from .machine import Machine

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Options for program execution."""
    seed: int = 0
    start_address: int = ENTRY_ADDRESS
    max_ticks: int = 10000
    keys_down: list[int] = field(default_factory=list)
    halt_on_self_jump: bool = True
    trace: bool = False
    trace_include_registers: bool = False


@dataclass
class TraceRow:
    """Single row of execution trace."""
    tick: int
    addr: int
    opcode: int
    pc: int
    index: int
    registers: Optional[list[int]] = None
    instr_text: str = ""

    def to_dict(self, include_registers: bool) -> dict:
        result = {
            "tick": self.tick,
            "addr": self.addr,
            "opcode": self.opcode,
            "pc": self.pc,
            "index": self.index,
        }
        if include_registers:
            result["registers"] = self.registers
        result["instr_text"] = self.instr_text
        return result


@dataclass
class RunResult:
    """Result of program execution."""
    status: str  # "ok" | "halted" | "error"
    ticks_executed: int
    final_state: dict
    display: list[str]
    tone: bool
    trace: list[dict]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "ticks_executed": self.ticks_executed,
            "final_state": self.final_state,
            "display": self.display,
            "tone": self.tone,
            "trace": self.trace,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_program(
    rom: bytes,
    options: Optional[RunOptions] = None,
    machine: Optional[Machine] = None,
) -> RunResult:
    """Run a CHIP-8 program image until the tick budget is spent or it stops.

    Args:
        rom: Raw program bytes
        options: Execution options
        machine: Machine to run on; a fresh one seeded from options by default

    Returns:
        RunResult with execution status, final state, screen and trace
    """
    if options is None:
        options = RunOptions()
    if machine is None:
        machine = Machine(seed=options.seed)

    trace_rows: list[dict] = []
    error_info: Optional[ErrorInfo] = None
    halted = False
    ticks_executed = 0

    for key in options.keys_down:
        machine.set_key(key, True)

    logger.info("Running %d byte program at 0x%03X", len(rom), options.start_address)

    try:
        machine.load_program(options.start_address, rom)
    except CHIP8Error as e:
        logger.warning("Program load failed: %s", e.message)
        return RunResult(
            status="error",
            ticks_executed=0,
            final_state=machine.get_state(),
            display=machine.display.rows(),
            tone=machine.tone(),
            trace=[],
            error=e.to_error_info(),
        )

    machine.cpu.pc = options.start_address

    try:
        while ticks_executed < options.max_ticks:
            addr = machine.cpu.pc
            machine.tick()
            ticks_executed += 1

            opcode = machine.last_opcode
            if options.trace:
                row = TraceRow(
                    tick=ticks_executed,
                    addr=addr,
                    opcode=opcode,
                    pc=machine.cpu.pc,
                    index=machine.cpu.index,
                    registers=list(machine.cpu.registers) if options.trace_include_registers else None,
                    instr_text=disassemble(opcode),
                )
                trace_rows.append(row.to_dict(include_registers=options.trace_include_registers))

            # 1NNN to itself is the usual way a program ends
            if options.halt_on_self_jump and machine.cpu.pc == addr and opcode & 0xF000 == 0x1000:
                raise Halt(f"Self-jump at 0x{addr:03X}", addr=addr, opcode=opcode)

    except Halt as e:
        halted = True
        logger.info("Program halted after %d ticks: %s", ticks_executed, e.message)
    except CHIP8Error as e:
        # Attach context to error
        e.tick = ticks_executed + 1
        error_info = e.to_error_info()
        logger.warning("Program failed at tick %d: %s", e.tick, e.message)

    if error_info is not None:
        status = "error"
    elif halted:
        status = "halted"
    else:
        status = "ok"

    return RunResult(
        status=status,
        ticks_executed=ticks_executed,
        final_state=machine.get_state(),
        display=machine.display.rows(),
        tone=machine.tone(),
        trace=trace_rows,
        error=error_info,
    )
