"""Exceptions raised by the interpreter core."""
from __future__ import annotations

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by chip8vm."""


class MachineFault(Chip8Error):
    """Fatal interpreter fault. The machine must not keep running."""

    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.address = address

    def __str__(self):
        if self.address is None:
            return self.message
        return f"{self.message} (at PC {self.address:03X})"


class MemoryFault(MachineFault):
    pass


class StackOverflow(MachineFault):
    pass


class StackUnderflow(MachineFault):
    pass


class RomTooLarge(Chip8Error, ValueError):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, capacity: int):
        super().__init__(
            f"ROM is too large for memory ({size} bytes, {capacity} available)")
        self.size = size
        self.capacity = capacity
