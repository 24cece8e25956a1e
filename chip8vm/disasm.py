"""Cowgod-style mnemonics for decoded instructions."""
from __future__ import annotations

from .decoder import Instruction, decode

_ALU = {
    0x0: "LD V{x:X}, V{y:X}",
    0x1: "OR V{x:X}, V{y:X}",
    0x2: "AND V{x:X}, V{y:X}",
    0x3: "XOR V{x:X}, V{y:X}",
    0x4: "ADD V{x:X}, V{y:X}",
    0x5: "SUB V{x:X}, V{y:X}",
    0x6: "SHR V{x:X}",
    0x7: "SUBN V{x:X}, V{y:X}",
    0xE: "SHL V{x:X}",
}

_MISC = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def mnemonic(ins) -> str:
    """Assembly text for an :class:`Instruction` or a raw opcode.

    Anything the interpreter does not execute comes back as ``DW #xxxx``.
    """
    if not isinstance(ins, Instruction):
        ins = decode(ins)
    x, y, n, nnn, kk = ins.x, ins.y, ins.n, ins.nnn, ins.kk
    f = ins.family
    if ins.opcode == 0x00E0:
        return "CLS"
    if ins.opcode == 0x00EE:
        return "RET"
    if f == 0x1:
        return f"JP {nnn:03X}"
    if f == 0x2:
        return f"CALL {nnn:03X}"
    if f == 0x3:
        return f"SE V{x:X}, {kk:02X}"
    if f == 0x4:
        return f"SNE V{x:X}, {kk:02X}"
    if f == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    if f == 0x6:
        return f"LD V{x:X}, {kk:02X}"
    if f == 0x7:
        return f"ADD V{x:X}, {kk:02X}"
    if f == 0x8 and n in _ALU:
        return _ALU[n].format(x=x, y=y)
    if f == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    if f == 0xA:
        return f"LD I, {nnn:03X}"
    if f == 0xB:
        return f"JP V0, {nnn:03X}"
    if f == 0xC:
        return f"RND V{x:X}, {kk:02X}"
    if f == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n:X}"
    if f == 0xE and kk == 0x9E:
        return f"SKP V{x:X}"
    if f == 0xE and kk == 0xA1:
        return f"SKNP V{x:X}"
    if f == 0xF and kk in _MISC:
        return _MISC[kk].format(x=x)
    return f"DW #{ins.opcode:04X}"
