"""CHIP-8 virtual machine.

The interpreter core (machine state, decoder, executor, sprite engine)
depends only on the standard library; :mod:`chip8vm.frontend` adds a
pygame window on top.
"""
from .decoder import Instruction, decode
from .errors import (Chip8Error, MachineFault, MemoryFault, RomTooLarge,
                     StackOverflow, StackUnderflow)
from .executor import Diagnostic, Executor
from .keypad import Keypad
from .machine import Machine, MachineSnapshot

__all__ = [
    "Chip8Error", "Diagnostic", "Executor", "Instruction", "Keypad",
    "Machine", "MachineFault", "MachineSnapshot", "MemoryFault",
    "RomTooLarge", "StackOverflow", "StackUnderflow", "decode",
]
