"""Framebuffer operations: clear and XOR sprite drawing."""
from __future__ import annotations

from .machine import SCREEN_H, SCREEN_W, VF, Machine


def clear_display(machine: Machine):
    machine.display[:] = bytes(SCREEN_W * SCREEN_H)


def draw_sprite(machine: Machine, x_pos: int, y_pos: int, height: int) -> bool:
    """XOR an 8-wide, ``height``-row sprite from memory[I] onto the screen.

    The start coordinates wrap once, and so does every pixel that runs
    off the right or bottom edge. VF is cleared first and set to 1 when
    any lit pixel is turned off. Returns the collision flag.

    Raises :class:`~chip8vm.errors.MemoryFault` before touching the
    display if the sprite data runs past the end of memory.
    """
    sprite = machine.read_bytes(machine.I, height)
    machine.registers[VF] = 0
    x_pos %= SCREEN_W
    y_pos %= SCREEN_H
    collision = False
    for row, byte in enumerate(sprite):
        py = (y_pos + row) % SCREEN_H
        for col in range(8):
            bit = (byte >> (7 - col)) & 1
            if bit:
                px = (x_pos + col) % SCREEN_W
                idx = py * SCREEN_W + px
                if machine.display[idx] == 1:
                    collision = True
                machine.display[idx] ^= 1
    if collision:
        machine.registers[VF] = 1
    return collision
