from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class EmulatorConfig:
    """Host settings for a run of the emulator."""
    rom_path: Optional[str] = None  # None runs the bundled maze demo
    scale: int = 15                 # pixel scale factor
    clock_hz: int = 700             # instructions per second
    timer_hz: int = 60              # delay/sound timer rate
    tone_hz: int = 440              # beep frequency
    # if True, FX55/FX65 increment I (original quirk)
    legacy_store: bool = False
    headless: bool = False
    steps: int = 1000               # headless instruction budget
    dump_memory: bool = False       # headless: print hexdump and disassembly
    log_level: str = "WARNING"

    @property
    def cycles_per_frame(self) -> int:
        return max(1, self.clock_hz // self.timer_hz)
