"""Instruction execution for the CHIP-8 interpreter."""

from typing import Callable, Optional
from .cpu import CPU
from .decoder import Instruction
from .display import Framebuffer
from .errors import IllegalAddress
from .font import glyph_address
from .keypad import Keypad
from .memory import Memory
from .rng import RandomSource

MAX_ADDRESS = 0xFFF


class Devices:
    """Framebuffer, keypad and random source for I/O instructions."""

    def __init__(self, framebuffer: Framebuffer, keypad: Keypad, random_source: RandomSource):
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.random_source = random_source


def _jump_target(addr: int, instr: Instruction) -> int:
    """Validate a jump or call target."""
    if addr > MAX_ADDRESS:
        raise IllegalAddress(
            f"Jump target 0x{addr:04X} outside address space",
            addr=addr,
            opcode=instr.raw,
        )
    return addr


def _skip(cpu: CPU, condition: bool) -> Optional[int]:
    """Return the PC past the next instruction if condition holds."""
    if condition:
        return cpu.pc + 2
    return None


# Instruction executor type
InstructionExecutor = Callable[[Instruction, CPU, Memory, Devices], Optional[int]]


def execute_nop(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """0000: do nothing"""
    return None


def execute_cls(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00E0: clear the screen"""
    dev.framebuffer.clear()
    return None


def execute_ret(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """00EE: PC := pop()"""
    return cpu.pop()


def execute_jp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """1NNN: PC := NNN"""
    return _jump_target(instr.nnn, instr)


def execute_call(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """2NNN: push(PC), PC := NNN"""
    target = _jump_target(instr.nnn, instr)
    cpu.push(cpu.pc)
    return target


def execute_se_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """3XNN: skip if Vx == NN"""
    return _skip(cpu, cpu.registers[instr.x] == instr.nn)


def execute_sne_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """4XNN: skip if Vx != NN"""
    return _skip(cpu, cpu.registers[instr.x] != instr.nn)


def execute_se_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """5XY0: skip if Vx == Vy"""
    return _skip(cpu, cpu.registers[instr.x] == cpu.registers[instr.y])


def execute_ld_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """6XNN: Vx := NN"""
    cpu.set_register(instr.x, instr.nn)
    return None


def execute_add_byte(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """7XNN: Vx := Vx + NN, VF untouched"""
    cpu.set_register(instr.x, cpu.registers[instr.x] + instr.nn)
    return None


def execute_ld_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY0: Vx := Vy"""
    cpu.set_register(instr.x, cpu.registers[instr.y])
    return None


def execute_or(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY1: Vx := Vx OR Vy"""
    cpu.set_register(instr.x, cpu.registers[instr.x] | cpu.registers[instr.y])
    return None


def execute_and(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY2: Vx := Vx AND Vy"""
    cpu.set_register(instr.x, cpu.registers[instr.x] & cpu.registers[instr.y])
    return None


def execute_xor(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY3: Vx := Vx XOR Vy"""
    cpu.set_register(instr.x, cpu.registers[instr.x] ^ cpu.registers[instr.y])
    return None


def execute_add_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY4: Vx := Vx + Vy, VF := carry"""
    total = cpu.registers[instr.x] + cpu.registers[instr.y]
    cpu.set_register(instr.x, total)
    cpu.set_flag(total > 0xFF)
    return None


def execute_sub(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY5: Vx := Vx - Vy, VF := NOT borrow"""
    vx, vy = cpu.registers[instr.x], cpu.registers[instr.y]
    cpu.set_register(instr.x, vx - vy)
    cpu.set_flag(vx >= vy)
    return None


def execute_shr(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY6: VF := Vx bit 0, Vx := Vx >> 1"""
    vx = cpu.registers[instr.x]
    cpu.set_flag(vx & 0x01)
    cpu.set_register(instr.x, vx >> 1)
    return None


def execute_subn(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XY7: Vx := Vy - Vx, VF := NOT borrow"""
    vx, vy = cpu.registers[instr.x], cpu.registers[instr.y]
    cpu.set_register(instr.x, vy - vx)
    cpu.set_flag(vy >= vx)
    return None


def execute_shl(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """8XYE: VF := Vx bit 7, Vx := Vx << 1"""
    vx = cpu.registers[instr.x]
    cpu.set_flag(vx & 0x80)
    cpu.set_register(instr.x, vx << 1)
    return None


def execute_sne_reg(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """9XY0: skip if Vx != Vy"""
    return _skip(cpu, cpu.registers[instr.x] != cpu.registers[instr.y])


def execute_ld_i(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """ANNN: I := NNN"""
    cpu.set_index(instr.nnn)
    return None


def execute_jp_v0(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """BNNN: PC := V0 + NNN"""
    return _jump_target(cpu.registers[0] + instr.nnn, instr)


def execute_rnd(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """CXNN: Vx := random byte mod NN (0 when NN is 0)"""
    value = dev.random_source.next_byte()
    cpu.set_register(instr.x, value % instr.nn if instr.nn else 0)
    return None


def execute_drw(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """DXYN: XOR N-row sprite at I onto (Vx, Vy), VF := collision"""
    sprite = mem.read_block(cpu.index, instr.n)
    collision = dev.framebuffer.draw_sprite(
        cpu.registers[instr.x],
        cpu.registers[instr.y],
        sprite,
    )
    cpu.set_flag(collision)
    return None


def execute_skp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EX9E: skip if the pressed key equals Vx"""
    key = dev.keypad.pressed_key()
    return _skip(cpu, key is not None and key == cpu.registers[instr.x])


def execute_sknp(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """EXA1: skip if a key is pressed and it differs from Vx"""
    key = dev.keypad.pressed_key()
    return _skip(cpu, key is not None and key != cpu.registers[instr.x])


def execute_ld_vx_dt(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX07: Vx := DT"""
    cpu.set_register(instr.x, cpu.delay_timer)
    return None


def execute_ld_key(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX0A: stay on this instruction until the pressed key equals Vx"""
    if dev.keypad.pressed_key() != cpu.registers[instr.x]:
        return instr.addr
    return None


def execute_ld_dt(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX15: DT := Vx"""
    cpu.delay_timer = cpu.registers[instr.x]
    return None


def execute_ld_st(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX18: ST := Vx"""
    cpu.sound_timer = cpu.registers[instr.x]
    return None


def execute_add_i(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX1E: I := I + Vx"""
    cpu.set_index(cpu.index + cpu.registers[instr.x])
    return None


def execute_ld_font(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX29: I := address of glyph for digit Vx"""
    cpu.set_index(glyph_address(cpu.registers[instr.x]))
    return None


def execute_ld_bcd(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX33: MEM[I..I+3] := decimal digits of Vx"""
    vx = cpu.registers[instr.x]
    mem.write_block(cpu.index, bytes([vx // 100, vx // 10 % 10, vx % 10]))
    return None


def execute_store_regs(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX55: MEM[I..I+X] := V0..Vx"""
    mem.write_block(cpu.index, bytes(cpu.registers[:instr.x + 1]))
    return None


def execute_load_regs(instr: Instruction, cpu: CPU, mem: Memory, dev: Devices) -> Optional[int]:
    """FX65: V0..Vx := MEM[I..I+X]"""
    for reg, value in enumerate(mem.read_block(cpu.index, instr.x + 1)):
        cpu.set_register(reg, value)
    return None


# Instruction dispatch table
INSTRUCTION_EXECUTORS: dict[str, InstructionExecutor] = {
    "0000": execute_nop,
    "00E0": execute_cls,
    "00EE": execute_ret,
    "1NNN": execute_jp,
    "2NNN": execute_call,
    "3XNN": execute_se_byte,
    "4XNN": execute_sne_byte,
    "5XY0": execute_se_reg,
    "6XNN": execute_ld_byte,
    "7XNN": execute_add_byte,
    "8XY0": execute_ld_reg,
    "8XY1": execute_or,
    "8XY2": execute_and,
    "8XY3": execute_xor,
    "8XY4": execute_add_reg,
    "8XY5": execute_sub,
    "8XY6": execute_shr,
    "8XY7": execute_subn,
    "8XYE": execute_shl,
    "9XY0": execute_sne_reg,
    "ANNN": execute_ld_i,
    "BNNN": execute_jp_v0,
    "CXNN": execute_rnd,
    "DXYN": execute_drw,
    "EX9E": execute_skp,
    "EXA1": execute_sknp,
    "FX07": execute_ld_vx_dt,
    "FX0A": execute_ld_key,
    "FX15": execute_ld_dt,
    "FX18": execute_ld_st,
    "FX1E": execute_add_i,
    "FX29": execute_ld_font,
    "FX33": execute_ld_bcd,
    "FX55": execute_store_regs,
    "FX65": execute_load_regs,
}


def execute_instruction(
    instr: Instruction,
    cpu: CPU,
    mem: Memory,
    dev: Devices,
) -> Optional[int]:
    """Execute a single decoded instruction.

    CPU.pc already points past the instruction when this is called. The
    instruction comes from decode, which only produces patterns that have an
    executor.

    Returns:
        New PC value if the instruction jumps or skips, None otherwise
    """
    return INSTRUCTION_EXECUTORS[instr.opcode](instr, cpu, mem, dev)
