"""Opcode field extraction.

Every 16-bit value decodes to an :class:`Instruction`; whether any
executor rule matches is decided later.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instruction:
    opcode: int
    family: int  # top nibble
    n: int       # bottom nibble
    nnn: int     # 12-bit address
    kk: int      # lower byte
    x: int       # bits 8-11
    y: int       # bits 4-7


def decode(opcode: int) -> Instruction:
    opcode &= 0xFFFF
    return Instruction(
        opcode=opcode,
        family=(opcode & 0xF000) >> 12,
        n=opcode & 0x000F,
        nnn=opcode & 0x0FFF,
        kk=opcode & 0x00FF,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
    )
