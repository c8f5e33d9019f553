#!/usr/bin/env python3
"""
Disassemble a CHIP-8 program image
"""

import argparse
import sys

from chip8 import read_program_image
from errors import ProgramLoadError
from memory import PROGRAM_START
from opcodes import disassemble_word


def disassemble(data, origin=PROGRAM_START, count=None):
    """Return one listing line per 16-bit word

    A trailing odd byte is shown as a single data byte.
    """
    output = []
    limit = len(data) if count is None else min(len(data), count * 2)
    for offset in range(0, limit - 1, 2):
        addr = origin + offset
        word = (data[offset] << 8) | data[offset + 1]
        output.append(f"0x{addr:03X}: {word:04X}  {disassemble_word(word)}")

    if limit % 2:
        addr = origin + limit - 1
        output.append(f"0x{addr:03X}: {data[limit - 1]:02X}    .byte 0x{data[limit - 1]:02X}")

    return output


def main(argv=None):
    parser = argparse.ArgumentParser(description="Disassemble a CHIP-8 program image")
    parser.add_argument("rom", help="Path to program image")
    parser.add_argument(
        "--origin", type=lambda s: int(s, 0), default=PROGRAM_START, help="Load address (default 0x200)"
    )
    parser.add_argument("--count", type=int, default=None, help="Number of words to list")
    args = parser.parse_args(argv)

    try:
        data = read_program_image(args.rom)
    except ProgramLoadError as e:
        print(e)
        return 1

    for line in disassemble(data, args.origin, args.count):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
