"""Command-line entry point.

Run:
  python -m chip8vm path/to/rom [--scale 15] [--clock 700] [--tone 440]
  python -m chip8vm --headless --steps 2000      # bundled maze demo, no window
  python -m chip8vm game.ch8 --headless --dump-memory
"""
from __future__ import annotations

import argparse
import logging
import sys
import time

from .config import EmulatorConfig
from .debug import disassemble, format_registers, hexdump, render_display
from .errors import Chip8Error, MachineFault
from .executor import Diagnostic, Executor
from .keypad import Keypad
from .machine import Machine
from .roms import MAZE

log = logging.getLogger(__name__)

DISASM_LINES = 8


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8vm", description="CHIP-8 virtual machine")
    parser.add_argument("rom", nargs="?", default=None,
                        help="Path to CHIP-8 ROM (default: built-in maze demo)")
    parser.add_argument("--scale", type=int, default=15,
                        help="Pixel scale factor (default 15)")
    parser.add_argument("--clock", type=int, default=700,
                        help="CPU clock in Hz (default 700)")
    parser.add_argument("--legacy-store", action="store_true",
                        help="Use original FX55/FX65 quirk (I increments)")
    parser.add_argument("--tone", type=int, default=440,
                        help="Beep tone frequency in Hz")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window and print the final state")
    parser.add_argument("--steps", type=int, default=1000,
                        help="Instructions to run in headless mode (default 1000)")
    parser.add_argument("--dump-memory", action="store_true",
                        help="Headless: also print a memory hex dump and the code at PC")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Diagnostic verbosity (default WARNING)")
    return parser


def config_from_args(args: argparse.Namespace) -> EmulatorConfig:
    return EmulatorConfig(
        rom_path=args.rom,
        scale=args.scale,
        clock_hz=args.clock,
        tone_hz=args.tone,
        legacy_store=args.legacy_store,
        headless=args.headless,
        steps=args.steps,
        dump_memory=args.dump_memory,
        log_level=args.log_level,
    )


def read_rom(config: EmulatorConfig) -> bytes:
    if config.rom_path is None:
        return MAZE
    with open(config.rom_path, 'rb') as f:
        return f.read()


def log_diagnostic(diag: Diagnostic):
    log.warning(diag.message)


def run_headless(config: EmulatorConfig, machine: Machine,
                 executor: Executor, out=None) -> int:
    out = out if out is not None else sys.stdout
    status = 0
    try:
        for executed in range(1, config.steps + 1):
            executor.step()
            if executed % config.cycles_per_frame == 0:
                machine.decrement_timers()
            if executor.awaiting_key:
                log.info("Stopped after %d steps waiting for V%X <- key",
                         executed, executor.waiting_for_key)
                break
    except MachineFault as exc:
        log.error("Interpreter fault: %s", exc)
        status = 1

    snap = machine.snapshot()
    print(render_display(snap.display), file=out)
    print(format_registers(snap), file=out)
    if config.dump_memory:
        print(hexdump(snap.memory), file=out)
        print(disassemble(snap.memory, snap.pc, DISASM_LINES), file=out)
    return status


def run_windowed(config: EmulatorConfig, machine: Machine,
                 executor: Executor, keypad: Keypad) -> int:
    from . import frontend
    frontend.pygame.init()
    ui = frontend.Frontend(keypad, scale=config.scale, tone_hz=config.tone_hz)

    last_timer_tick = time.perf_counter()
    timer_period = 1.0 / config.timer_hz
    status = 0

    # Main emulation loop
    try:
        while ui.handle_events():
            if not executor.halted:
                try:
                    for _ in range(config.cycles_per_frame):
                        executor.step()
                except MachineFault as exc:
                    log.error("Interpreter fault: %s", exc)
                    status = 1

            now = time.perf_counter()
            if now - last_timer_tick >= timer_period:
                machine.decrement_timers()
                last_timer_tick = now

            ui.play_sound_if_needed(machine.sound_timer)
            ui.render(machine.snapshot())
            ui.tick(config.timer_hz)
    finally:
        ui.close()
    return status


def main(argv=None) -> int:
    config = config_from_args(build_parser().parse_args(argv))
    logging.basicConfig(level=config.log_level,
                        format="[%(levelname)s] %(message)s", stream=sys.stderr)

    try:
        rom = read_rom(config)
    except OSError as exc:
        print(f"Cannot read ROM: {exc}", file=sys.stderr)
        return 2

    machine = Machine()
    keypad = Keypad()
    executor = Executor(machine, keypad=keypad,
                        on_diagnostic=log_diagnostic,
                        legacy_store=config.legacy_store)
    try:
        size = machine.load_rom(rom)
    except Chip8Error as exc:
        print(exc, file=sys.stderr)
        return 2
    log.info("ROM loaded (%d bytes)", size)

    if config.headless:
        return run_headless(config, machine, executor)
    return run_windowed(config, machine, executor, keypad)
