"""Plain-text views of a :class:`~chip8vm.machine.MachineSnapshot`."""
from __future__ import annotations

from typing import List

from .disasm import mnemonic
from .machine import DT, SCREEN_H, SCREEN_W, ST, MachineSnapshot

MEM_PER_ROW = 32


def format_registers(snap: MachineSnapshot) -> str:
    lines: List[str] = []
    for row in range(4):
        cells = [f"V{idx:X}: {snap.registers[idx]:02X}"
                 for idx in range(row * 4, row * 4 + 4)]
        lines.append("  ".join(cells))
    lines.append(f"DT: {snap.registers[DT]:02X}  ST: {snap.registers[ST]:02X}"
                 f"  I: {snap.I:04X}  PC: {snap.pc:03X}  SP: {snap.sp:X}")
    if snap.sp:
        frames = " ".join(f"{addr:03X}" for addr in snap.stack[1:snap.sp + 1])
        lines.append(f"Stack: {frames}")
    return "\n".join(lines)


def hexdump(memory: bytes, start: int = 0, end: int = None) -> str:
    """Hex dump, 32 bytes per row, each row prefixed with its address."""
    if end is None:
        end = len(memory)
    start -= start % MEM_PER_ROW
    rows = []
    for row_start in range(start, end, MEM_PER_ROW):
        chunk = memory[row_start:min(row_start + MEM_PER_ROW, end)]
        rows.append(f"{row_start:03X}: " + " ".join(f"{b:02X}" for b in chunk))
    return "\n".join(rows)


def render_display(display: bytes, on: str = "#", off: str = ".") -> str:
    return "\n".join(
        "".join(on if display[row * SCREEN_W + col] else off
                for col in range(SCREEN_W))
        for row in range(SCREEN_H))


def disassemble(memory: bytes, start: int, count: int) -> str:
    lines = []
    for address in range(start, min(start + 2 * count, len(memory) - 1), 2):
        opcode = (memory[address] << 8) | memory[address + 1]
        lines.append(f"{address:03X}: {opcode:04X}  {mnemonic(opcode)}")
    return "\n".join(lines)
