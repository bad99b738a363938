"""Hexadecimal keypad state."""

from typing import Optional

KEY_COUNT = 16


class Keypad:
    """Sixteen keys, 0x0-0xF, each pressed or released."""

    def __init__(self):
        self._keys: list[bool] = [False] * KEY_COUNT

    def set_key(self, index: int, pressed: bool) -> None:
        """Set one key state; indices outside 0..15 are ignored."""
        if 0 <= index < KEY_COUNT:
            self._keys[index] = bool(pressed)

    def pressed_key(self) -> Optional[int]:
        """Lowest-indexed pressed key, or None if no key is down.

        Programs only ever see this one key even when several are held.
        """
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def reset(self) -> None:
        self._keys = [False] * KEY_COUNT
