"""pygame host: window, keyboard and beeper.

Keyboard mapping (common layout):

  CHIP-8  =>  Keyboard
  1 2 3 C =>  1 2 3 4
  4 5 6 D =>  Q W E R
  7 8 9 E =>  A S D F
  A 0 B F =>  Z X C V
"""
from __future__ import annotations

import logging
import sys

import numpy as np

try:
    import pygame
except Exception:
    print("This emulator requires pygame. Install with: pip install pygame", file=sys.stderr)
    raise

from .keypad import Keypad
from .machine import SCREEN_H, SCREEN_W, MachineSnapshot

log = logging.getLogger(__name__)

ON_COLOR = 255
OFF_COLOR = 0

# Keyboard mapping: CHIP-8 key index -> pygame key
KEYMAP = {
    0x0: pygame.K_x,
    0x1: pygame.K_1,
    0x2: pygame.K_2,
    0x3: pygame.K_3,
    0x4: pygame.K_q,
    0x5: pygame.K_w,
    0x6: pygame.K_e,
    0x7: pygame.K_a,
    0x8: pygame.K_s,
    0x9: pygame.K_d,
    0xA: pygame.K_z,
    0xB: pygame.K_c,
    0xC: pygame.K_4,
    0xD: pygame.K_r,
    0xE: pygame.K_f,
    0xF: pygame.K_v,
}
PYGAME_TO_CHIP8 = {pgk: k_idx for k_idx, pgk in KEYMAP.items()}


def display_to_rgb(display: bytes) -> np.ndarray:
    """Row-major 0/1 framebuffer -> (width, height, 3) array for surfarray."""
    pixels = np.frombuffer(display, dtype=np.uint8).reshape(SCREEN_H, SCREEN_W)
    gray = np.where(pixels.T > 0, ON_COLOR, OFF_COLOR).astype(np.uint8)
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def square_wave(tone_hz: int, sample_rate: int = 44100,
                duration: float = 0.1) -> np.ndarray:
    t = np.arange(int(sample_rate * duration))
    wave = ((t * tone_hz * 2 / sample_rate) % 2 >= 1).astype('float32') * 2 - 1
    return (wave * 32767).astype('int16')


class Frontend:
    def __init__(self, keypad: Keypad, scale: int = 10, tone_hz: int = 440):
        self.keypad = keypad
        self.scale = max(1, int(scale))
        self.surface = pygame.display.set_mode(
            (SCREEN_W * self.scale, SCREEN_H * self.scale))
        pygame.display.set_caption("chip8vm")
        self.clock = pygame.time.Clock()
        self.sound = None

        # Audio setup (simple square tone)
        self.tone_hz = tone_hz
        self._init_audio()

    def _init_audio(self):
        try:
            pygame.mixer.pre_init(44100, -16, 1, 256)
            pygame.mixer.init()
        except pygame.error as exc:
            log.warning("Audio disabled: %s", exc)
            return
        self.sound = pygame.mixer.Sound(square_wave(self.tone_hz))
        self.sound.set_volume(0.2)

    def handle_events(self) -> bool:
        """Pump the event queue into the keypad. False once the user quits."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.key == pygame.K_ESCAPE:
                    return False
                k_idx = PYGAME_TO_CHIP8.get(event.key)
                if k_idx is None:
                    continue
                if event.type == pygame.KEYDOWN:
                    self.keypad.press(k_idx)
                else:
                    self.keypad.release(k_idx)
        return True

    def render(self, snap: MachineSnapshot):
        frame = pygame.surfarray.make_surface(display_to_rgb(snap.display))
        pygame.transform.scale(frame, self.surface.get_size(), self.surface)
        pygame.display.flip()

    def tick(self, fps: int):
        self.clock.tick(fps)

    def play_sound_if_needed(self, sound_timer: int):
        if self.sound is not None and sound_timer > 0:
            # Fire-and-forget short blip
            self.sound.play()

    def close(self):
        pygame.quit()
