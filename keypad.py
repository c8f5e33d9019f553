"""
CHIP-8 Keypad
Key state tracking and the blocking key wait used by FX0A
"""

import time

from utils import debug_print

KEY_COUNT = 16

# Physical keyboard layout (4x4 grid) -> CHIP-8 key nibble
#   1 2 3 4        1 2 3 C
#   Q W E R   ->   4 5 6 D
#   A S D F        7 8 9 E
#   Z X C V        A 0 B F
KEYPAD_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


class Keypad:
    """Base input source

    poll() refreshes pressed_keys once per cycle and returns False when the
    user asked to quit. Subclasses supply the actual input device.
    """

    wait_interval = 0.0  # Seconds to sleep between polls while blocked

    def __init__(self):
        self.pressed_keys = [False] * KEY_COUNT

    def poll(self):
        raise NotImplementedError

    def can_wait(self):
        """Whether another poll could still produce a key press"""
        return True

    def set_pressed(self, keys):
        """Replace the pressed key set"""
        self.pressed_keys = [False] * KEY_COUNT
        for key in keys:
            self.pressed_keys[key & 0xF] = True

    def is_key_down(self, key):
        # Register values above 0xF name no key
        if not 0 <= key < KEY_COUNT:
            return False
        return self.pressed_keys[key]

    def wait_for_key(self):
        """Block until a key goes from up to down

        Returns the key nibble, or None when termination was requested
        while waiting.
        """
        while True:
            previous = list(self.pressed_keys)

            if not self.poll():
                return None

            for key in range(KEY_COUNT):
                if self.pressed_keys[key] and not previous[key]:
                    debug_print(f"Keypad: key 0x{key:X} pressed")
                    return key

            if not self.can_wait():
                return None

            if self.wait_interval:
                time.sleep(self.wait_interval)


class ScriptedKeypad(Keypad):
    """Replays a fixed sequence of pressed-key sets, one per poll

    When the script runs out, poll() reports termination unless
    idle_when_exhausted is set, in which case no key is ever down again.
    """

    def __init__(self, frames=(), idle_when_exhausted=False):
        super().__init__()
        self.frames = iter(frames)
        self.idle_when_exhausted = idle_when_exhausted
        self.exhausted = False
        self.polls = 0

    def poll(self):
        self.polls += 1
        try:
            frame = next(self.frames)
        except StopIteration:
            self.exhausted = True
            self.set_pressed(())
            return self.idle_when_exhausted

        self.set_pressed(frame)
        return True

    def can_wait(self):
        return not self.exhausted
