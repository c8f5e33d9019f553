"""
CHIP-8 Memory Management
Handles the 4K address space and the subroutine call stack
"""

from errors import MemoryAccessError, ProgramLoadError, StackOverflowError, StackUnderflowError
from fontset import FONTSET, FONTSET_LOCATION
from utils import debug_print

MEMORY_SIZE = 0x1000  # 4KB
MAX_ADDRESS = MEMORY_SIZE - 1
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 0xE00 bytes

STACK_CAPACITY = 16


class Memory:
    def __init__(self):
        self.ram = bytearray(MEMORY_SIZE)

    def _check_range(self, addr, length=1):
        """Raise if any byte of [addr, addr + length) is outside memory"""
        if addr < 0 or addr + length > MEMORY_SIZE:
            raise MemoryAccessError(addr, length)

    def read(self, addr):
        """Read one byte"""
        self._check_range(addr)
        return self.ram[addr]

    def write(self, addr, value):
        """Write one byte"""
        self._check_range(addr)
        self.ram[addr] = value & 0xFF

    def read_word(self, addr):
        """Read a big-endian 16-bit word (instruction fetch)"""
        self._check_range(addr, 2)
        return (self.ram[addr] << 8) | self.ram[addr + 1]

    def read_block(self, addr, length):
        """Read length bytes starting at addr"""
        self._check_range(addr, length)
        return bytes(self.ram[addr:addr + length])

    def write_block(self, addr, data):
        """Write a sequence of bytes starting at addr

        The whole range is validated before the first byte is stored.
        """
        self._check_range(addr, len(data))
        self.ram[addr:addr + len(data)] = bytes(b & 0xFF for b in data)

    def clear(self):
        """Zero the whole address space"""
        self.ram[:] = bytes(MEMORY_SIZE)

    def install_fontset(self):
        """Copy the built-in hex glyphs into low memory"""
        self.write_block(FONTSET_LOCATION, FONTSET)

    def load_program(self, data, offset=PROGRAM_START):
        """Load a raw program image

        Images that would run past the end of memory are rejected rather
        than truncated.
        """
        if offset + len(data) > MEMORY_SIZE:
            raise ProgramLoadError(
                f"Program is {len(data)} bytes, at most {MEMORY_SIZE - offset} fit at 0x{offset:03X}"
            )
        self.write_block(offset, data)
        debug_print(f"Memory: loaded {len(data)} bytes at 0x{offset:03X}")

    def dump(self, addr, length=16):
        """Format a hex dump line for debugging"""
        data = self.read_block(addr, length)
        return f"0x{addr:03X}: " + " ".join(f"{b:02X}" for b in data)


class CallStack:
    """Fixed-depth return address stack"""

    def __init__(self, capacity=STACK_CAPACITY):
        self.capacity = capacity
        self.slots = [0] * capacity
        self.sp = 0  # Number of occupied slots

    def push(self, addr):
        if self.sp >= self.capacity:
            raise StackOverflowError(
                f"Call stack overflow : depth {self.capacity} exceeded pushing 0x{addr:03X}"
            )
        self.slots[self.sp] = addr
        self.sp += 1

    def pop(self):
        if self.sp == 0:
            raise StackUnderflowError("Call stack underflow : return with empty stack")
        self.sp -= 1
        return self.slots[self.sp]

    def peek(self):
        """Return the most recently pushed address without popping it"""
        if self.sp == 0:
            raise StackUnderflowError("Call stack is empty")
        return self.slots[self.sp - 1]

    @property
    def depth(self):
        return self.sp

    def reset(self):
        self.slots = [0] * self.capacity
        self.sp = 0

    def __len__(self):
        return self.sp
