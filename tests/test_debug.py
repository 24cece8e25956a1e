"""Text views and mnemonics."""

import pytest

from chip8vm.debug import disassemble, format_registers, hexdump, render_display
from chip8vm.disasm import mnemonic
from chip8vm.machine import SCREEN_H, SCREEN_W, Machine
from chip8vm.roms import MAZE


class TestMnemonic:

    @pytest.mark.parametrize("opcode, text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x1ABC, "JP ABC"),
        (0x2300, "CALL 300"),
        (0x3A42, "SE VA, 42"),
        (0x5120, "SE V1, V2"),
        (0x8124, "ADD V1, V2"),
        (0x812E, "SHL V1"),
        (0xB200, "JP V0, 200"),
        (0xD015, "DRW V0, V1, 5"),
        (0xE29E, "SKP V2"),
        (0xF30A, "LD V3, K"),
        (0xF265, "LD V2, [I]"),
        (0x5121, "DW #5121"),
        (0x0123, "DW #0123"),
    ])
    def test_mnemonic(self, opcode, text):
        assert mnemonic(opcode) == text


class TestViews:

    def test_register_listing(self):
        m = Machine()
        m.registers[0xA] = 0x42
        m.I = 0x300
        m.push(0x202)
        text = format_registers(m.snapshot())
        assert "VA: 42" in text
        assert "I: 0300" in text
        assert "PC: 200" in text
        assert "Stack: 202" in text

    def test_hexdump_rows(self):
        lines = hexdump(bytes(range(64))).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("000: 00 01 02")
        assert lines[1].startswith("020: 20 21")

    def test_hexdump_aligns_start(self):
        m = Machine()
        m.load_rom(MAZE)
        first = hexdump(m.memory_snapshot(), 0x205, 0x220).splitlines()[0]
        assert first.startswith("200: 60 00 61 00")

    def test_render_display(self):
        m = Machine()
        m.display[0] = 1
        rows = render_display(m.display_snapshot()).splitlines()
        assert len(rows) == SCREEN_H
        assert all(len(r) == SCREEN_W for r in rows)
        assert rows[0].startswith("#.")

    def test_disassemble_maze(self):
        m = Machine()
        m.load_rom(MAZE)
        lines = disassemble(m.memory_snapshot(), 0x200, 3).splitlines()
        assert lines == [
            "200: 6000  LD V0, 00",
            "202: 6100  LD V1, 00",
            "204: A222  LD I, 222",
        ]
