#!/usr/bin/env python3
"""
Headless CHIP-8 run without SDL: executes a program for a fixed number of
cycles and prints the final screen as text.
"""

import argparse
import sys
import time

from chip8 import Chip8
from errors import Chip8Error
from keypad import ScriptedKeypad
from utils import set_debug


def run_headless(rom_path, cycles, out=None, scale=10):
    """Run a program with no input device; returns (exit code, machine)"""
    # One idle frame per cycle; FX0A gives up once the script is spent
    keypad = ScriptedKeypad([()] * cycles)
    machine = Chip8(keypad)

    try:
        machine.load_rom(rom_path)
    except Chip8Error as e:
        print(f"Failed to load program: {e}")
        return 1, machine

    start = time.time()
    try:
        machine.run_for_cycles(cycles)
    except Chip8Error as e:
        print(f"An error occured : {e}")
        print(machine.display.render_text())
        return 1, machine
    elapsed = time.time() - start

    sys.stdout.write(
        f"Headless run complete: cycles={machine.cpu.cycles}, elapsed={elapsed:.3f}s, "
        f"PC=0x{machine.cpu.PC:03X}\n"
    )
    print(machine.display.render_text())

    if out:
        saved = machine.display.save_screenshot(out, scale=scale)
        print(f"Screenshot saved as: {saved}")

    return 0, machine


def main(argv=None):
    parser = argparse.ArgumentParser(description="Headless CHIP-8 run without SDL.")
    parser.add_argument("rom", help="Path to program image")
    parser.add_argument("--cycles", type=int, default=1000, help="Number of cycles to run")
    parser.add_argument("--out", default=None, help="Path to write a PNG of the final screen (optional)")
    parser.add_argument("--scale", type=int, default=10, help="Pixel scale for --out")
    parser.add_argument("--debug", action="store_true", help="Trace every instruction")
    args = parser.parse_args(argv)

    set_debug(args.debug)
    code, _ = run_headless(args.rom, args.cycles, out=args.out, scale=args.scale)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
