import logging

from chip8.constants import KEY_COUNT
from chip8.errors import KeypadError

logger = logging.getLogger(__name__)


class Keypad:
    """
    state of the 16 hexadecimal keys (0x0-0xF), True while a key is held down

    the input collaborator writes it one transition at a time (keypad[key] = pressed),
    the CPU only reads it
    """
    def __init__(self):
        self.pressed_keys = [False] * KEY_COUNT

    def __repr__(self):
        held = [f"{k:X}" for k, pressed in enumerate(self.pressed_keys) if pressed]
        return f"Keypad(pressed={held})"

    @staticmethod
    def _check(key):
        if not 0 <= key < KEY_COUNT:
            raise KeypadError(key)

    def __getitem__(self, key):
        self._check(key)
        return self.pressed_keys[key]

    def __setitem__(self, key, pressed):
        self._check(key)
        if self.pressed_keys[key] != bool(pressed):
            logger.debug("key 0x%X %s", key, "pressed" if pressed else "released")
        self.pressed_keys[key] = bool(pressed)

    def first(self):
        """get the lowest key being held down, None if there's none"""
        for key, pressed in enumerate(self.pressed_keys):
            if pressed:
                return key
        return None
