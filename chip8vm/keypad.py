"""16-key hexadecimal keypad state.

Hosts flip keys with :meth:`Keypad.press` / :meth:`Keypad.release`; the
executor only ever asks :meth:`Keypad.is_pressed`. Any object with that
method can stand in for this class.
"""
from __future__ import annotations

from typing import List

NUM_KEYS = 16


class Keypad:
    def __init__(self):
        self.keys: List[bool] = [False] * NUM_KEYS

    def press(self, key: int):
        self.keys[key & 0xF] = True

    def release(self, key: int):
        self.keys[key & 0xF] = False

    def is_pressed(self, key: int) -> bool:
        if 0 <= key <= 0xF:
            return self.keys[key]
        return False
