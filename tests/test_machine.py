"""Machine state: construction, ROM loading, stack, timers, snapshots."""

import pytest

from chip8vm.errors import MemoryFault, RomTooLarge, StackOverflow, StackUnderflow
from chip8vm.font import FONTSET
from chip8vm.machine import (DT, MEM_SIZE, NUM_REGISTERS, SCREEN_H, SCREEN_W,
                             ST, STACK_SIZE, START_ADDRESS, Machine)


class TestInitialization:

    def test_pc_starts_at_program_area(self):
        assert Machine().pc == 0x200

    def test_font_in_low_memory(self):
        m = Machine()
        assert m.memory[:len(FONTSET)] == FONTSET
        assert len(FONTSET) == 80

    def test_everything_else_zeroed(self):
        m = Machine()
        assert len(m.memory) == MEM_SIZE
        assert not any(m.memory[len(FONTSET):])
        assert m.registers == bytearray(NUM_REGISTERS)
        assert m.display == bytearray(SCREEN_W * SCREEN_H)
        assert m.stack == [0] * STACK_SIZE
        assert (m.I, m.sp) == (0, 0)

    def test_reset_restores_initial_state(self):
        m = Machine()
        m.load_rom(b"\x12\x34")
        m.registers[3] = 9
        m.display[10] = 1
        m.pc = 0x300
        m.reset()
        assert m.pc == START_ADDRESS
        assert m.memory[START_ADDRESS] == 0
        assert m.registers[3] == 0
        assert m.display[10] == 0
        assert m.memory[:len(FONTSET)] == FONTSET


class TestLoadRom:

    def test_returns_bytes_written(self):
        m = Machine()
        assert m.load_rom(bytes([1] * 8)) == 8
        assert m.memory[0x200:0x208] == bytes([1] * 8)
        assert m.memory[0x208] == 0

    def test_font_survives_load(self):
        m = Machine()
        m.load_rom(bytes(range(256)))
        assert m.memory[:len(FONTSET)] == FONTSET

    def test_rom_filling_memory_exactly(self):
        m = Machine()
        size = MEM_SIZE - START_ADDRESS
        assert m.load_rom(b"\xAA" * size) == size
        assert m.memory[-1] == 0xAA

    def test_too_large_rom_rejected_without_writing(self):
        m = Machine()
        with pytest.raises(RomTooLarge):
            m.load_rom(b"\xAA" * (MEM_SIZE - START_ADDRESS + 1))
        assert not any(m.memory[START_ADDRESS:])

    def test_too_large_is_a_value_error(self):
        with pytest.raises(ValueError):
            Machine().load_rom(bytes(MEM_SIZE))


class TestMemoryAccess:

    def test_read_write_round(self):
        m = Machine()
        m.write_bytes(0x300, b"\x01\x02")
        assert m.read_bytes(0x300, 2) == b"\x01\x02"
        assert m.read_byte(0x301) == 2

    def test_last_byte_is_addressable(self):
        m = Machine()
        m.write_bytes(MEM_SIZE - 1, b"\x7F")
        assert m.read_byte(MEM_SIZE - 1) == 0x7F

    @pytest.mark.parametrize("address, length", [
        (MEM_SIZE, 1), (MEM_SIZE - 1, 2), (-1, 1)])
    def test_out_of_range_faults(self, address, length):
        with pytest.raises(MemoryFault):
            Machine().read_bytes(address, length)

    def test_failed_write_leaves_memory_alone(self):
        m = Machine()
        with pytest.raises(MemoryFault):
            m.write_bytes(MEM_SIZE - 2, b"\x01\x02\x03")
        assert m.memory[MEM_SIZE - 2:] == b"\x00\x00"


class TestRegisters:

    def test_set_register_wraps_to_byte(self):
        m = Machine()
        m.set_register(0x5, 0x1FF)
        assert m.get_register(0x5) == 0xFF

    def test_timers_share_register_space(self):
        m = Machine()
        m.set_register(DT, 7)
        m.sound_timer = 3
        assert m.delay_timer == 7
        assert m.registers[ST] == 3

    def test_register_index_checked(self):
        with pytest.raises(IndexError):
            Machine().get_register(NUM_REGISTERS)

    def test_decrement_timers_stops_at_zero(self):
        m = Machine()
        m.delay_timer = 2
        m.sound_timer = 1
        m.decrement_timers()
        assert (m.delay_timer, m.sound_timer) == (1, 0)
        m.decrement_timers()
        m.decrement_timers()
        assert (m.delay_timer, m.sound_timer) == (0, 0)


class TestStack:

    def test_push_increments_then_writes(self):
        m = Machine()
        m.push(0x202)
        assert m.sp == 1
        assert m.stack[1] == 0x202

    def test_pop_reads_then_decrements(self):
        m = Machine()
        m.push(0x202)
        m.push(0x304)
        assert m.pop() == 0x304
        assert m.sp == 1

    def test_underflow(self):
        with pytest.raises(StackUnderflow):
            Machine().pop()

    def test_overflow_leaves_pointer_in_range(self):
        m = Machine()
        for i in range(STACK_SIZE - 1):
            m.push(0x200 + 2 * i)
        with pytest.raises(StackOverflow):
            m.push(0x400)
        assert m.sp == STACK_SIZE - 1


class TestSnapshots:

    def test_snapshot_is_a_copy(self):
        m = Machine()
        m.registers[0] = 1
        snap = m.snapshot()
        m.registers[0] = 2
        m.display[0] = 1
        assert snap.registers[0] == 1
        assert snap.display[0] == 0

    def test_snapshot_buffers_are_immutable(self):
        snap = Machine().snapshot()
        assert isinstance(snap.memory, bytes)
        assert isinstance(snap.display, bytes)
        assert isinstance(snap.stack, tuple)
        with pytest.raises(TypeError):
            snap.display[0] = 1

    def test_snapshot_fields(self):
        m = Machine()
        m.I = 0x123
        m.push(0x202)
        m.delay_timer = 9
        snap = m.snapshot()
        assert (snap.I, snap.pc, snap.sp) == (0x123, 0x200, 1)
        assert snap.stack[1] == 0x202
        assert snap.delay_timer == 9
        assert len(snap.display) == SCREEN_W * SCREEN_H
