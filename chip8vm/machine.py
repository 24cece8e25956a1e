"""Machine state: memory, registers, stack and framebuffer.

Pure data plus bounds-checked accessors. Nothing in here decodes or
executes instructions; see :mod:`chip8vm.executor` for that.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import MemoryFault, RomTooLarge, StackOverflow, StackUnderflow
from .font import FONT_ADDRESS, FONTSET

# ==============================
# Constants
# ==============================
MEM_SIZE = 4096
START_ADDRESS = 0x200
SCREEN_W, SCREEN_H = 64, 32
STACK_SIZE = 16

# Register file: V0..VF followed by the two timers.
NUM_REGISTERS = 18
VF = 0xF
DT = 0x10
ST = 0x11


@dataclass(frozen=True)
class MachineSnapshot:
    """Read-only copy of the machine handed to hosts for rendering."""
    memory: bytes
    registers: bytes
    display: bytes
    stack: Tuple[int, ...]
    I: int
    pc: int
    sp: int

    @property
    def delay_timer(self) -> int:
        return self.registers[DT]

    @property
    def sound_timer(self) -> int:
        return self.registers[ST]


@dataclass
class Machine:
    memory: bytearray = field(default_factory=lambda: bytearray(MEM_SIZE))
    registers: bytearray = field(
        default_factory=lambda: bytearray(NUM_REGISTERS))
    I: int = 0
    pc: int = START_ADDRESS
    sp: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    display: bytearray = field(
        default_factory=lambda: bytearray(SCREEN_W * SCREEN_H))

    def __post_init__(self):
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET

    def reset(self):
        self.memory = bytearray(MEM_SIZE)
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET
        self.registers = bytearray(NUM_REGISTERS)
        self.I = 0
        self.pc = START_ADDRESS
        self.sp = 0
        self.stack = [0] * STACK_SIZE
        self.display = bytearray(SCREEN_W * SCREEN_H)

    def load_rom(self, data: bytes) -> int:
        """Copy ``data`` to 0x200 and return the number of bytes written.

        Raises :class:`RomTooLarge` without touching memory when the ROM
        does not fit.
        """
        capacity = MEM_SIZE - START_ADDRESS
        if len(data) > capacity:
            raise RomTooLarge(len(data), capacity)
        end = START_ADDRESS + len(data)
        self.memory[START_ADDRESS:end] = data
        self.pc = START_ADDRESS
        return len(data)

    # =============== Memory ===============
    def check_range(self, address: int, length: int = 1):
        if address < 0 or address + length > MEM_SIZE:
            raise MemoryFault(
                f"Memory access {address:#05x}+{length} outside 0..{MEM_SIZE - 1:#05x}")

    def read_byte(self, address: int) -> int:
        self.check_range(address)
        return self.memory[address]

    def read_bytes(self, address: int, length: int) -> bytes:
        self.check_range(address, length)
        return bytes(self.memory[address:address + length])

    def write_bytes(self, address: int, data: bytes):
        self.check_range(address, len(data))
        self.memory[address:address + len(data)] = data

    # =============== Registers ===============
    def get_register(self, index: int) -> int:
        if not 0 <= index < NUM_REGISTERS:
            raise IndexError(f"No register {index:#x}")
        return self.registers[index]

    def set_register(self, index: int, value: int):
        if not 0 <= index < NUM_REGISTERS:
            raise IndexError(f"No register {index:#x}")
        self.registers[index] = value & 0xFF

    @property
    def delay_timer(self) -> int:
        return self.registers[DT]

    @delay_timer.setter
    def delay_timer(self, value: int):
        self.registers[DT] = value & 0xFF

    @property
    def sound_timer(self) -> int:
        return self.registers[ST]

    @sound_timer.setter
    def sound_timer(self, value: int):
        self.registers[ST] = value & 0xFF

    def decrement_timers(self):
        """One 60 Hz tick. Driven by the host, never by ``step``."""
        if self.registers[DT] > 0:
            self.registers[DT] -= 1
        if self.registers[ST] > 0:
            self.registers[ST] -= 1

    # =============== Stack ===============
    # sp == 0 is the empty sentinel; slot 0 is never written.
    def push(self, address: int):
        if self.sp >= STACK_SIZE - 1:
            raise StackOverflow(f"Stack overflow ({STACK_SIZE - 1} nested calls)")
        self.sp += 1
        self.stack[self.sp] = address

    def pop(self) -> int:
        if self.sp == 0:
            raise StackUnderflow("Stack underflow on RET")
        address = self.stack[self.sp]
        self.sp -= 1
        return address

    # =============== Display ===============
    def pixel(self, col: int, row: int) -> int:
        return self.display[row * SCREEN_W + col]

    # =============== Snapshots ===============
    def memory_snapshot(self) -> bytes:
        return bytes(self.memory)

    def registers_snapshot(self) -> bytes:
        return bytes(self.registers)

    def display_snapshot(self) -> bytes:
        return bytes(self.display)

    def stack_snapshot(self) -> Tuple[int, ...]:
        return tuple(self.stack)

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            memory=self.memory_snapshot(),
            registers=self.registers_snapshot(),
            display=self.display_snapshot(),
            stack=self.stack_snapshot(),
            I=self.I,
            pc=self.pc,
            sp=self.sp,
        )
