"""
CHIP-8 register file and countdown timers
"""

FLAG_REGISTER = 0xF
REGISTER_COUNT = 16


class RegisterFile:
    def __init__(self):
        self.V = bytearray(REGISTER_COUNT)  # V0..VF, 8-bit each
        self.I = 0  # Index register, 16-bit storage for a 12-bit address

    def __getitem__(self, index):
        return self.V[index]

    def __setitem__(self, index, value):
        self.V[index] = value & 0xFF

    def set_flag(self, value):
        """Overwrite VF; the previous flag value is discarded"""
        self.V[FLAG_REGISTER] = value & 0xFF

    @property
    def flag(self):
        return self.V[FLAG_REGISTER]

    def reset(self):
        self.V[:] = bytes(REGISTER_COUNT)
        self.I = 0

    def snapshot(self):
        """Copy of V0..VF"""
        return bytes(self.V)


class Timers:
    """Delay and sound timers, both saturating at zero"""

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def tick(self):
        """Decrement both timers once"""
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    @property
    def sound_active(self):
        return self.sound > 0

    def reset(self):
        self.delay = 0
        self.sound = 0
