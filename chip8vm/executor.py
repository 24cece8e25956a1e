"""Fetch/decode/execute.

:class:`Executor` owns no state of its own beyond the key-wait sub-state
and a latched fault; everything else lives in the
:class:`~chip8vm.machine.Machine` it drives.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Optional

from .decoder import Instruction, decode
from .display import clear_display, draw_sprite
from .errors import MachineFault
from .font import glyph_address
from .keypad import NUM_KEYS, Keypad
from .machine import VF, Machine

UNKNOWN_OPCODE = "unknown-opcode"


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    address: int
    opcode: int
    message: str


def default_random_byte() -> int:
    return random.randint(0, 255)


class Executor:
    """Runs one instruction per :meth:`step` call.

    ``keypad`` is anything with ``is_pressed(key) -> bool``.
    ``random_byte`` returns a uniform 0-255 value for ``RND``.
    ``on_diagnostic`` receives a :class:`Diagnostic` for every
    non-fatal oddity (currently only unknown opcodes); without it the
    executor is silent.
    ``legacy_store`` makes Fx55/Fx65 leave I pointing past the last
    register copied, as the COSMAC VIP interpreter did.
    """

    def __init__(self, machine: Machine, keypad=None,
                 random_byte: Callable[[], int] = default_random_byte,
                 on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
                 legacy_store: bool = False):
        self.machine = machine
        self.keypad = keypad if keypad is not None else Keypad()
        self.random_byte = random_byte
        self.on_diagnostic = on_diagnostic
        self.legacy_store = legacy_store
        # register index awaiting a key press (Fx0A), or None
        self.waiting_for_key: Optional[int] = None
        self.fault: Optional[MachineFault] = None

        self._families = {
            0x0: self._family_0,
            0x1: self._jp,
            0x2: self._call,
            0x3: self._se_byte,
            0x4: self._sne_byte,
            0x5: self._se_reg,
            0x6: self._ld_byte,
            0x7: self._add_byte,
            0x8: self._family_8,
            0x9: self._sne_reg,
            0xA: self._ld_i,
            0xB: self._jp_v0,
            0xC: self._rnd,
            0xD: self._drw,
            0xE: self._family_e,
            0xF: self._family_f,
        }
        self._alu = {
            0x0: self._ld_reg,
            0x1: self._or,
            0x2: self._and,
            0x3: self._xor,
            0x4: self._add_reg,
            0x5: self._sub,
            0x6: self._shr,
            0x7: self._subn,
            0xE: self._shl,
        }
        self._misc = {
            0x07: self._ld_from_dt,
            0x0A: self._ld_key,
            0x15: self._ld_dt,
            0x18: self._ld_st,
            0x1E: self._add_i,
            0x29: self._ld_font,
            0x33: self._ld_bcd,
            0x55: self._store_regs,
            0x65: self._load_regs,
        }

    @property
    def awaiting_key(self) -> bool:
        return self.waiting_for_key is not None

    @property
    def halted(self) -> bool:
        return self.fault is not None

    def reset(self):
        """Forget the key wait and any latched fault. Machine is untouched."""
        self.waiting_for_key = None
        self.fault = None

    # =============== Core fetch/decode/execute cycle ===============
    def fetch_opcode(self) -> int:
        hi, lo = self.machine.read_bytes(self.machine.pc, 2)
        return (hi << 8) | lo

    def step(self):
        """Advance the machine by one instruction.

        While a key wait is pending the call only polls the keypad. A
        :class:`MachineFault` leaves PC on the faulting instruction,
        latches the fault and is re-raised by every later call.
        """
        if self.fault is not None:
            raise self.fault.with_traceback(None)
        if self.waiting_for_key is not None:
            self._poll_key()
            return

        address = self.machine.pc
        try:
            opcode = self.fetch_opcode()
            self.machine.pc = address + 2
            self.execute(decode(opcode))
        except MachineFault as exc:
            self.machine.pc = address
            if exc.address is None:
                exc.address = address
            self.fault = exc
            raise

    def execute(self, ins: Instruction):
        """Apply an already-fetched instruction; PC must point past it."""
        self._families[ins.family](ins)

    def _poll_key(self):
        for key in range(NUM_KEYS):
            if self.keypad.is_pressed(key):
                self.machine.registers[self.waiting_for_key] = key
                self.waiting_for_key = None
                return

    def _unknown(self, ins: Instruction):
        if self.on_diagnostic is None:
            return
        address = (self.machine.pc - 2) & 0xFFFF
        self.on_diagnostic(Diagnostic(
            kind=UNKNOWN_OPCODE,
            address=address,
            opcode=ins.opcode,
            message=f"Unknown opcode: {ins.opcode:04X} at PC {address:03X}",
        ))

    def _skip_if(self, condition: bool):
        if condition:
            self.machine.pc += 2

    # =============== Families ===============
    def _family_0(self, ins: Instruction):
        if ins.opcode == 0x00E0:  # CLS
            clear_display(self.machine)
        elif ins.opcode == 0x00EE:  # RET
            self.machine.pc = self.machine.pop()
        else:  # 0NNN (RCA 1802 call) is not emulated
            self._unknown(ins)

    def _jp(self, ins: Instruction):  # JP addr
        self.machine.pc = ins.nnn

    def _call(self, ins: Instruction):  # CALL addr
        self.machine.push(self.machine.pc)
        self.machine.pc = ins.nnn

    def _se_byte(self, ins: Instruction):  # SE Vx, byte
        self._skip_if(self.machine.registers[ins.x] == ins.kk)

    def _sne_byte(self, ins: Instruction):  # SNE Vx, byte
        self._skip_if(self.machine.registers[ins.x] != ins.kk)

    def _se_reg(self, ins: Instruction):  # SE Vx, Vy
        if ins.n != 0:
            return self._unknown(ins)
        V = self.machine.registers
        self._skip_if(V[ins.x] == V[ins.y])

    def _ld_byte(self, ins: Instruction):  # LD Vx, byte
        self.machine.registers[ins.x] = ins.kk

    def _add_byte(self, ins: Instruction):  # ADD Vx, byte
        V = self.machine.registers
        V[ins.x] = (V[ins.x] + ins.kk) & 0xFF

    def _family_8(self, ins: Instruction):
        self._alu.get(ins.n, self._unknown)(ins)

    def _sne_reg(self, ins: Instruction):  # SNE Vx, Vy
        if ins.n != 0:
            return self._unknown(ins)
        V = self.machine.registers
        self._skip_if(V[ins.x] != V[ins.y])

    def _ld_i(self, ins: Instruction):  # LD I, addr
        self.machine.I = ins.nnn

    def _jp_v0(self, ins: Instruction):  # JP V0, addr
        self.machine.pc = (self.machine.registers[0] + ins.nnn) & 0xFFF

    def _rnd(self, ins: Instruction):  # RND Vx, byte
        self.machine.registers[ins.x] = self.random_byte() & ins.kk & 0xFF

    def _drw(self, ins: Instruction):  # DRW Vx, Vy, nibble
        V = self.machine.registers
        draw_sprite(self.machine, V[ins.x], V[ins.y], ins.n)

    def _family_e(self, ins: Instruction):
        key = self.machine.registers[ins.x] & 0xF
        if ins.kk == 0x9E:  # SKP Vx
            self._skip_if(self.keypad.is_pressed(key))
        elif ins.kk == 0xA1:  # SKNP Vx
            self._skip_if(not self.keypad.is_pressed(key))
        else:
            self._unknown(ins)

    def _family_f(self, ins: Instruction):
        self._misc.get(ins.kk, self._unknown)(ins)

    # =============== 8xyN: register ALU ===============
    # Flag writes to VF come after the result write, so VF as Vx ends up
    # holding the flag.
    def _ld_reg(self, ins: Instruction):  # LD Vx, Vy
        V = self.machine.registers
        V[ins.x] = V[ins.y]

    def _or(self, ins: Instruction):  # OR Vx, Vy
        V = self.machine.registers
        V[ins.x] |= V[ins.y]

    def _and(self, ins: Instruction):  # AND Vx, Vy
        V = self.machine.registers
        V[ins.x] &= V[ins.y]

    def _xor(self, ins: Instruction):  # XOR Vx, Vy
        V = self.machine.registers
        V[ins.x] ^= V[ins.y]

    def _add_reg(self, ins: Instruction):  # ADD Vx, Vy
        V = self.machine.registers
        total = V[ins.x] + V[ins.y]
        V[ins.x] = total & 0xFF
        V[VF] = 1 if total > 0xFF else 0

    def _sub(self, ins: Instruction):  # SUB Vx, Vy (Vx = Vx - Vy)
        V = self.machine.registers
        flag = 1 if V[ins.x] >= V[ins.y] else 0
        V[ins.x] = (V[ins.x] - V[ins.y]) & 0xFF
        V[VF] = flag

    def _shr(self, ins: Instruction):  # SHR Vx
        V = self.machine.registers
        flag = V[ins.x] & 0x1
        V[ins.x] = V[ins.x] >> 1
        V[VF] = flag

    def _subn(self, ins: Instruction):  # SUBN Vx, Vy (Vx = Vy - Vx)
        V = self.machine.registers
        flag = 1 if V[ins.y] > V[ins.x] else 0
        V[ins.x] = (V[ins.y] - V[ins.x]) & 0xFF
        V[VF] = flag

    def _shl(self, ins: Instruction):  # SHL Vx
        V = self.machine.registers
        flag = (V[ins.x] >> 7) & 0x1
        V[ins.x] = (V[ins.x] << 1) & 0xFF
        V[VF] = flag

    # =============== FxNN: timers, I and memory ===============
    def _ld_from_dt(self, ins: Instruction):  # LD Vx, DT
        self.machine.registers[ins.x] = self.machine.delay_timer

    def _ld_key(self, ins: Instruction):  # LD Vx, K
        self.waiting_for_key = ins.x

    def _ld_dt(self, ins: Instruction):  # LD DT, Vx
        self.machine.delay_timer = self.machine.registers[ins.x]

    def _ld_st(self, ins: Instruction):  # LD ST, Vx
        self.machine.sound_timer = self.machine.registers[ins.x]

    def _add_i(self, ins: Instruction):  # ADD I, Vx
        self.machine.I = (self.machine.I + self.machine.registers[ins.x]) & 0xFFFF

    def _ld_font(self, ins: Instruction):  # LD F, Vx
        self.machine.I = glyph_address(self.machine.registers[ins.x])

    def _ld_bcd(self, ins: Instruction):  # LD B, Vx
        val = self.machine.registers[ins.x]
        self.machine.write_bytes(
            self.machine.I, bytes([val // 100, (val // 10) % 10, val % 10]))

    def _store_regs(self, ins: Instruction):  # LD [I], Vx
        m = self.machine
        m.write_bytes(m.I, bytes(m.registers[:ins.x + 1]))
        if self.legacy_store:
            m.I = (m.I + ins.x + 1) & 0xFFFF

    def _load_regs(self, ins: Instruction):  # LD Vx, [I]
        m = self.machine
        m.registers[:ins.x + 1] = m.read_bytes(m.I, ins.x + 1)
        if self.legacy_store:
            m.I = (m.I + ins.x + 1) & 0xFFFF
