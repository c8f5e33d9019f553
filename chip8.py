"""
Main CHIP-8 Machine Class
Coordinates the CPU with its display and keypad and loads program images
"""

import os

from cpu import CPU
from display import FrameBuffer
from errors import ProgramLoadError
from memory import MAX_PROGRAM_SIZE
from utils import debug_print


def read_program_image(rom_path: str):
    """Read a raw program image from disk

    Raises ProgramLoadError if the file is missing, unreadable or larger
    than the program area.
    """
    if not os.path.isfile(rom_path):
        raise ProgramLoadError(f"Program file not found: {rom_path}")

    try:
        with open(rom_path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ProgramLoadError(f"Could not read {rom_path}: {e}") from e

    if len(data) > MAX_PROGRAM_SIZE:
        raise ProgramLoadError(
            f"Program {rom_path} is {len(data)} bytes, the limit is {MAX_PROGRAM_SIZE}"
        )
    return data


class Chip8:
    def __init__(self, keypad, display=None, rng=None):
        self.display = display if display is not None else FrameBuffer()
        self.keypad = keypad
        self.cpu = CPU(self.display, self.keypad, rng=rng)
        self.memory = self.cpu.memory

        self.program_size = 0
        self.reset()

    def reset(self):
        """Reset CPU state and clear the screen; the program must be reloaded"""
        self.cpu.reset()
        self.program_size = 0
        debug_print("Chip8: reset complete, PC=0x200")

    def load_program(self, data):
        """Reset and load a program image at 0x200"""
        self.reset()
        self.memory.load_program(data)
        self.program_size = len(data)

    def load_rom(self, rom_path: str):
        """Read a program image from disk and load it"""
        data = read_program_image(rom_path)
        self.load_program(data)
        debug_print(f"Chip8: program '{rom_path}' loaded ({len(data)} bytes)")

    def step(self):
        """Execute one cycle; False once the keypad asks to quit"""
        return self.cpu.step()

    def run_for_cycles(self, cycles):
        """Run up to the given number of cycles

        Returns False if execution stopped early on a quit request.
        """
        for _ in range(cycles):
            if not self.cpu.step():
                return False
        return True

    @property
    def sound_active(self):
        return self.cpu.timers.sound_active

    def get_screen(self):
        """Get the current screen buffer"""
        return self.display.snapshot()

    def get_cpu_state(self):
        """Get CPU state for debugging"""
        return self.cpu.get_state()
